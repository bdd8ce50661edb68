"""Tuition payment status derivation.

Every view that shows a payment status or balance (dashboard, payment
status list, student detail) goes through these functions so that the
thresholds and labels exist in exactly one place.
"""
from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Any, Dict, Hashable, Iterable, List, Mapping, Optional, Sequence, Tuple

ZERO = Decimal("0")
CENTS = Decimal("0.01")
ONE_PLACE = Decimal("0.1")


class PaymentStatus(str, Enum):
    PAID = "paid"
    PARTIAL_PAYMENT = "partial"
    UNPAID = "unpaid"

    @property
    def label(self) -> str:
        return _LABELS[self]

    @classmethod
    def parse(cls, value: str) -> "PaymentStatus":
        """Resolve a status from its value or its label, ignoring case.

        Raises ``ValueError`` for anything else.
        """
        needle = (value or "").strip().lower()
        for status in cls:
            if needle in (status.value, status.label.lower()):
                return status
        raise ValueError(f"Unknown payment status: {value!r}")


_LABELS = {
    PaymentStatus.PAID: "Paid",
    PaymentStatus.PARTIAL_PAYMENT: "Partial Payment",
    PaymentStatus.UNPAID: "Unpaid",
}


@dataclass(frozen=True)
class PaymentSummary:
    total_tuition: Decimal
    total_paid: Decimal
    balance: Decimal
    status: PaymentStatus

    @property
    def is_pending(self) -> bool:
        return self.balance > ZERO

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_tuition": as_money(self.total_tuition),
            "total_paid": as_money(self.total_paid),
            "balance": as_money(self.balance),
            "status": self.status.value,
            "status_label": self.status.label,
        }


def to_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() first so floats keep their printed value, not their binary one
    return Decimal(str(value))


def as_money(value: Any) -> str:
    return str(to_decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP))


def classify(total_tuition: Decimal, total_paid: Decimal) -> PaymentStatus:
    # Paid is checked first so a zero tuition with nothing paid counts as Paid
    if total_paid >= total_tuition:
        return PaymentStatus.PAID
    if total_paid > ZERO:
        return PaymentStatus.PARTIAL_PAYMENT
    return PaymentStatus.UNPAID


def compute_payment_summary(total_tuition: Any, payments: Iterable[Any]) -> PaymentSummary:
    """Derive total paid, balance and status for one student.

    ``payments`` are the raw amounts recorded for the student, in any order.
    Amounts are not required to be positive: refunds recorded as negative
    amounts reduce the total. The balance is never clamped, so an
    overpayment yields a negative balance.
    """
    tuition = to_decimal(total_tuition)
    total_paid = sum((to_decimal(amount) for amount in payments), ZERO)
    return PaymentSummary(
        total_tuition=tuition,
        total_paid=total_paid,
        balance=tuition - total_paid,
        status=classify(tuition, total_paid),
    )


def group_payments_by_student(payments: Iterable[Any]) -> Dict[Hashable, List[Decimal]]:
    """Group payment rows by ``student_id``.

    Rows only need ``student_id`` and ``amount`` attributes, so ORM
    instances and plain records both work. Identifiers are compared with
    ``==``; no normalisation is applied.
    """
    grouped: Dict[Hashable, List[Decimal]] = defaultdict(list)
    for payment in payments:
        grouped[payment.student_id].append(to_decimal(payment.amount))
    return dict(grouped)


def summarize_students(
    students: Iterable[Any],
    payments_by_student: Mapping[Hashable, Sequence[Any]],
) -> List[Tuple[Any, PaymentSummary]]:
    return [
        (student, compute_payment_summary(student.total_tuition, payments_by_student.get(student.id, ())))
        for student in students
    ]


def count_pending(students: Iterable[Any], payments_by_student: Mapping[Hashable, Sequence[Any]]) -> int:
    """Number of students that still owe money (balance above zero)."""
    return sum(1 for _, summary in summarize_students(students, payments_by_student) if summary.is_pending)


def average_grade(grades: Sequence[Any]) -> Optional[Decimal]:
    """Mean of ``grades`` to one decimal place, rounding half away from zero.

    Returns ``None`` for an empty sequence; zero is a real grade.
    """
    if not grades:
        return None
    total = sum((to_decimal(g) for g in grades), ZERO)
    return (total / len(grades)).quantize(ONE_PLACE, rounding=ROUND_HALF_UP)
