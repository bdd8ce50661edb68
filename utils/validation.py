"""Payload validation for the JSON/form endpoints.

Each ``*_form`` function takes the raw request payload (a dict) and returns
cleaned values, raising :class:`ValidationError` on the first problem found.
"""
from __future__ import annotations

from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Mapping, Optional

from utils.security import MIN_PASSWORD_LENGTH


# NUMERIC(10,2) column bounds
MONEY_MAX = Decimal("99999999.99")
# INTEGER primary key bound
ID_MAX = 2**31 - 1


class ValidationError(ValueError):
    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field


def _raw(data: Mapping[str, Any], field: str) -> str:
    value = data.get(field)
    if value is None:
        return ""
    return str(value).strip()


def require_text(data: Mapping[str, Any], field: str, min_length: int = 1, message: Optional[str] = None) -> str:
    value = _raw(data, field)
    if len(value) < min_length:
        raise ValidationError(message or f"{field} is required", field)
    return value


def optional_text(data: Mapping[str, Any], field: str) -> Optional[str]:
    return _raw(data, field) or None


def parse_decimal(
    data: Mapping[str, Any],
    field: str,
    minimum: Optional[Decimal] = None,
    maximum: Optional[Decimal] = None,
    message: Optional[str] = None,
    default: Optional[Decimal] = None,
) -> Decimal:
    raw = _raw(data, field)
    if not raw:
        if default is not None:
            return default
        raise ValidationError(f"{field} is required", field)
    try:
        value = Decimal(raw)
    except InvalidOperation:
        raise ValidationError(f"{field} must be a number", field)
    if not value.is_finite():
        raise ValidationError(f"{field} must be a number", field)
    if minimum is not None and value < minimum:
        raise ValidationError(message or f"{field} must be at least {minimum}", field)
    if maximum is not None and value > maximum:
        raise ValidationError(f"{field} must be at most {maximum}", field)
    return value


def parse_date(data: Mapping[str, Any], field: str, default: Optional[date] = None, message: Optional[str] = None) -> date:
    raw = _raw(data, field)
    if not raw:
        if default is not None:
            return default
        raise ValidationError(message or f"{field} is required", field)
    # Full timestamps are accepted, only the date part is kept
    if len(raw) > 10 and raw[10] in "T ":
        raw = raw[:10]
    try:
        if len(raw) == 10:
            return date.fromisoformat(raw)
    except ValueError:
        pass
    raise ValidationError(f"{field} must be a date (YYYY-MM-DD)", field)


def parse_id(data: Mapping[str, Any], field: str, message: Optional[str] = None) -> int:
    raw = _raw(data, field)
    try:
        value = int(raw)
    except ValueError:
        raise ValidationError(message or f"{field} is required", field)
    if value <= 0 or value > ID_MAX:
        raise ValidationError(message or f"{field} is required", field)
    return value


# --------------------------
# Forms
# --------------------------

def student_form(data: Mapping[str, Any]) -> Dict[str, Any]:
    return {
        "first_name": require_text(data, "first_name", 2, "First name must be at least 2 characters"),
        "last_name": require_text(data, "last_name", 2, "Last name must be at least 2 characters"),
        "id_number": require_text(data, "id_number", 5, "ID number must be at least 5 characters"),
        "date_of_birth": parse_date(data, "date_of_birth", message="Date of birth is required"),
        "grade_level": require_text(data, "grade_level", 1, "Grade level is required"),
        "total_tuition": parse_decimal(
            data, "total_tuition", minimum=Decimal("0"), maximum=MONEY_MAX,
            message="Tuition must be positive", default=Decimal("0"),
        ),
        "parent_name": require_text(data, "parent_name", 2, "Parent name must be at least 2 characters"),
        "parent_id_number": require_text(data, "parent_id_number", 5, "Parent ID must be at least 5 characters"),
        "parent_phone": require_text(data, "parent_phone", 10, "Phone must be at least 10 characters"),
        "parent_address": optional_text(data, "parent_address"),
    }


def student_update_form(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Partial update: only the student fields present in ``data`` are checked."""
    validators = {
        "first_name": lambda: require_text(data, "first_name", 2, "First name must be at least 2 characters"),
        "last_name": lambda: require_text(data, "last_name", 2, "Last name must be at least 2 characters"),
        "id_number": lambda: require_text(data, "id_number", 5, "ID number must be at least 5 characters"),
        "date_of_birth": lambda: parse_date(data, "date_of_birth", message="Date of birth is required"),
        "grade_level": lambda: require_text(data, "grade_level", 1, "Grade level is required"),
        "total_tuition": lambda: parse_decimal(
            data, "total_tuition", minimum=Decimal("0"), maximum=MONEY_MAX, message="Tuition must be positive"
        ),
    }
    changes = {field: check() for field, check in validators.items() if field in data}
    if not changes:
        raise ValidationError("Nothing to update")
    return changes


def payment_form(data: Mapping[str, Any]) -> Dict[str, Any]:
    # No sign check: refunds are recorded as negative amounts
    return {
        "student_id": parse_id(data, "student_id", "Select a student"),
        "amount": parse_decimal(data, "amount", minimum=-MONEY_MAX, maximum=MONEY_MAX),
        "payment_date": parse_date(data, "payment_date", default=date.today()),
        "notes": optional_text(data, "notes"),
    }


def grade_form(data: Mapping[str, Any]) -> Dict[str, Any]:
    return {
        "student_id": parse_id(data, "student_id", "Select a student"),
        "subject_id": parse_id(data, "subject_id", "Select a subject"),
        # NUMERIC(5,2) column bounds
        "grade": parse_decimal(data, "grade", minimum=Decimal("-999.99"), maximum=Decimal("999.99")),
        "observations": optional_text(data, "observations"),
    }


def subject_form(data: Mapping[str, Any]) -> Dict[str, Any]:
    return {
        "name": require_text(data, "name", 1, "Subject name is required"),
        "description": optional_text(data, "description"),
    }


def signup_form(data: Mapping[str, Any]) -> Dict[str, Any]:
    email = require_text(data, "email", 3, "Email is required").lower()
    if "@" not in email:
        raise ValidationError("Enter a valid email address", "email")
    password = str(data.get("password") or "")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters", "password")
    return {
        "email": email,
        "password": password,
        "full_name": optional_text(data, "full_name") or "Admin User",
    }
