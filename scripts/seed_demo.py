import argparse
import random
import string
from datetime import date, timedelta
from decimal import Decimal
import os
import sys

# Ensure project root is importable when running from scripts/
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from app import create_app
from extensions import db
from utils import records
from utils.access import AccessContext


FIRST_NAMES = [
    "James", "Mary", "John", "Patricia", "Robert", "Jennifer", "Michael", "Linda",
    "William", "Elizabeth", "David", "Barbara", "Richard", "Susan", "Joseph", "Jessica",
    "Thomas", "Sarah", "Charles", "Karen", "Christopher", "Nancy", "Daniel", "Lisa",
]

LAST_NAMES = [
    "Smith", "Johnson", "Williams", "Brown", "Jones", "Garcia", "Miller", "Davis",
    "Rodriguez", "Martinez", "Hernandez", "Lopez", "Gonzalez", "Wilson", "Anderson",
    "Thomas", "Taylor", "Moore", "Jackson", "Martin", "Lee", "Perez", "Thompson",
]

GRADE_LEVELS = [f"Grade {i}" for i in range(1, 13)]

TUITIONS = [Decimal("0"), Decimal("300"), Decimal("500"), Decimal("1200"), Decimal("2500")]


def random_id_number(taken: set) -> str:
    while True:
        value = "".join(random.choice(string.digits) for _ in range(8))
        if value not in taken:
            taken.add(value)
            return value


def random_phone() -> str:
    return "+1" + "".join(random.choice(string.digits) for _ in range(10))


def random_birth_date() -> date:
    return date.today() - timedelta(days=random.randint(6 * 365, 18 * 365))


def random_payments(tuition: Decimal) -> list:
    """Zero, partial, exact or over-payment, roughly evenly."""
    if tuition == 0:
        return []
    pick = random.choice(("none", "partial", "exact", "over"))
    if pick == "none":
        return []
    if pick == "partial":
        return [(tuition * Decimal(random.choice(("0.25", "0.5", "0.75")))).quantize(Decimal("0.01"))]
    if pick == "exact":
        half = (tuition / 2).quantize(Decimal("0.01"))
        return [half, tuition - half]
    return [tuition, Decimal("50.00")]


def seed(ctx: AccessContext, count: int, grades_per_student: int) -> None:
    records.seed_default_subjects()
    subjects = records.list_subjects(ctx)
    taken = {s.id_number for s in records.list_students(ctx)}
    for _ in range(count):
        first, last = random.choice(FIRST_NAMES), random.choice(LAST_NAMES)
        tuition = random.choice(TUITIONS)
        student = records.register_student(ctx, {
            "first_name": first,
            "last_name": last,
            "id_number": random_id_number(taken),
            "date_of_birth": random_birth_date(),
            "grade_level": random.choice(GRADE_LEVELS),
            "total_tuition": tuition,
            "parent_name": f"{random.choice(FIRST_NAMES)} {last}",
            "parent_id_number": random_id_number(taken),
            "parent_phone": random_phone(),
            "parent_address": None,
        })
        for offset, amount in enumerate(random_payments(tuition)):
            records.record_payment(ctx, {
                "student_id": student.id,
                "amount": amount,
                "payment_date": date.today() - timedelta(days=30 * offset),
                "notes": None,
            })
        for subject in random.sample(subjects, k=min(grades_per_student, len(subjects))):
            records.record_grade(ctx, {
                "student_id": student.id,
                "subject_id": subject.id,
                "grade": Decimal(random.randint(50, 100)),
                "observations": None,
            })


def main() -> int:
    parser = argparse.ArgumentParser(description="Seed demo students, payments and grades")
    parser.add_argument("--email", required=True, help="Existing operator email to record the data as")
    parser.add_argument("--count", type=int, default=20)
    parser.add_argument("--grades", type=int, default=3, help="Grades per student")
    args = parser.parse_args()

    app = create_app()
    with app.app_context():
        db.create_all()
        operator = records.find_operator(args.email)
        if operator is None:
            print(f"No operator with email {args.email}; create one with `flask create-operator`")
            return 1
        ctx = AccessContext(operator_id=operator.id, role=operator.role, email=operator.email)
        seed(ctx, args.count, args.grades)
        print(f"Seeded {args.count} students")
    return 0


if __name__ == "__main__":
    sys.exit(main())
