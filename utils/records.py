"""Data access for academy records.

Every function takes the caller's :class:`~utils.access.AccessContext`
first and checks it before touching the database. Views never query the
models directly.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.orm import joinedload

from extensions import db
from models import Grade, Parent, Payment, Profile, Student, Subject
from utils.access import AccessContext
from utils.audit import log_event
from utils.payment_status import (
    PaymentStatus,
    PaymentSummary,
    ZERO,
    as_money,
    average_grade,
    compute_payment_summary,
    count_pending,
    group_payments_by_student,
    summarize_students,
    to_decimal,
)
from utils.security import hash_password

DEFAULT_SUBJECTS = (
    ("Mathematics", "Mathematics course"),
    ("Science", "Science course"),
    ("Language Arts", "Language and literature"),
    ("Social Studies", "History and geography"),
    ("Physical Education", "Physical education and sports"),
)


class RecordNotFound(LookupError):
    pass


def _get_or_404(model, record_id: int, label: str):
    record = db.session.get(model, record_id)
    if record is None:
        raise RecordNotFound(f"{label} not found")
    return record


# --------------------------
# Operators
# --------------------------

def create_operator(email: str, password: str, full_name: str = "Admin User", role: str = "admin") -> Profile:
    """Create an operator profile. Used by signup and the CLI, before any session exists."""
    profile = Profile(email=email.strip().lower(), full_name=full_name, role=role, password_hash=hash_password(password))
    db.session.add(profile)
    db.session.commit()
    return profile


def find_operator(email: str) -> Optional[Profile]:
    return Profile.query.filter_by(email=(email or "").strip().lower()).first()


# --------------------------
# Students
# --------------------------

def list_students(ctx: AccessContext, search: Optional[str] = None) -> List[Student]:
    ctx.ensure_operator()
    query = Student.query
    term = (search or "").strip().lower()
    if term:
        query = query.filter(
            db.or_(
                db.func.lower(Student.first_name).contains(term, autoescape=True),
                db.func.lower(Student.last_name).contains(term, autoescape=True),
                db.func.lower(Student.id_number).contains(term, autoescape=True),
                db.func.lower(Student.grade_level).contains(term, autoescape=True),
            )
        )
    return query.order_by(Student.created_at.desc(), Student.id.desc()).all()


def register_student(ctx: AccessContext, form: Dict[str, Any]) -> Student:
    """Insert a student and its parent contact in one transaction."""
    ctx.ensure_operator()
    student = Student(
        first_name=form["first_name"],
        last_name=form["last_name"],
        id_number=form["id_number"],
        date_of_birth=form["date_of_birth"],
        grade_level=form["grade_level"],
        total_tuition=form["total_tuition"],
        created_by=ctx.operator_id,
    )
    student.parent = Parent(
        full_name=form["parent_name"],
        id_number=form["parent_id_number"],
        cell_phone=form["parent_phone"],
        address=form.get("parent_address"),
    )
    db.session.add(student)
    db.session.commit()
    log_event(ctx, "student.register", f"student:{student.id}", student.id_number)
    return student


def get_student(ctx: AccessContext, student_id: int) -> Student:
    ctx.ensure_operator()
    return _get_or_404(Student, student_id, "Student")


def update_student(ctx: AccessContext, student_id: int, changes: Dict[str, Any]) -> Student:
    student = get_student(ctx, student_id)
    for field, value in changes.items():
        setattr(student, field, value)
    db.session.commit()
    log_event(ctx, "student.update", f"student:{student.id}", ",".join(sorted(changes)))
    return student


def delete_student(ctx: AccessContext, student_id: int) -> None:
    student = get_student(ctx, student_id)
    db.session.delete(student)
    db.session.commit()
    log_event(ctx, "student.delete", f"student:{student_id}")


def student_detail(ctx: AccessContext, student_id: int) -> Dict[str, Any]:
    student = get_student(ctx, student_id)
    payments = (
        Payment.query.filter_by(student_id=student.id)
        .order_by(Payment.payment_date.desc(), Payment.id.desc())
        .all()
    )
    grades = (
        Grade.query.options(joinedload(Grade.subject))
        .filter_by(student_id=student.id)
        .order_by(Grade.created_at.desc(), Grade.id.desc())
        .all()
    )
    summary = compute_payment_summary(student.total_tuition, [p.amount for p in payments])
    return {
        "student": student.to_dict(),
        "parent": student.parent.to_dict() if student.parent else None,
        "payment_summary": summary.to_dict(),
        "payments": [p.to_dict() for p in payments],
        "grades": [g.to_dict() for g in grades],
    }


# --------------------------
# Payments
# --------------------------

def list_payments(ctx: AccessContext) -> List[Payment]:
    ctx.ensure_operator()
    return (
        Payment.query.options(joinedload(Payment.student))
        .order_by(Payment.payment_date.desc(), Payment.id.desc())
        .all()
    )


def record_payment(ctx: AccessContext, form: Dict[str, Any]) -> Payment:
    student = get_student(ctx, form["student_id"])
    payment = Payment(
        student_id=student.id,
        amount=form["amount"],
        payment_date=form["payment_date"],
        notes=form.get("notes"),
        created_by=ctx.operator_id,
    )
    db.session.add(payment)
    db.session.commit()
    log_event(ctx, "payment.record", f"student:{student.id}", as_money(payment.amount))
    return payment


def delete_payment(ctx: AccessContext, payment_id: int) -> None:
    ctx.ensure_operator()
    payment = _get_or_404(Payment, payment_id, "Payment")
    db.session.delete(payment)
    db.session.commit()
    log_event(ctx, "payment.delete", f"payment:{payment_id}")


def payment_statuses(ctx: AccessContext, status: Optional[PaymentStatus] = None) -> List[Tuple[Student, PaymentSummary]]:
    """Every student with its derived payment summary, optionally filtered by status."""
    ctx.ensure_operator()
    students = Student.query.order_by(Student.last_name, Student.first_name, Student.id).all()
    payments_by_student = group_payments_by_student(db.session.query(Payment.student_id, Payment.amount).all())
    rows = summarize_students(students, payments_by_student)
    if status is not None:
        rows = [(student, summary) for student, summary in rows if summary.status is status]
    return rows


# --------------------------
# Subjects & grades
# --------------------------

def list_subjects(ctx: AccessContext) -> List[Subject]:
    ctx.ensure_operator()
    return Subject.query.order_by(Subject.name).all()


def create_subject(ctx: AccessContext, form: Dict[str, Any]) -> Subject:
    ctx.ensure_operator()
    subject = Subject(name=form["name"], description=form.get("description"))
    db.session.add(subject)
    db.session.commit()
    log_event(ctx, "subject.create", f"subject:{subject.id}", subject.name)
    return subject


def seed_default_subjects() -> int:
    """Insert the default subjects that are missing. Returns how many were added."""
    existing = {name for (name,) in db.session.query(Subject.name).all()}
    added = 0
    for name, description in DEFAULT_SUBJECTS:
        if name not in existing:
            db.session.add(Subject(name=name, description=description))
            added += 1
    db.session.commit()
    return added


def list_grades(ctx: AccessContext) -> List[Grade]:
    ctx.ensure_operator()
    return (
        Grade.query.options(joinedload(Grade.student), joinedload(Grade.subject))
        .order_by(Grade.created_at.desc(), Grade.id.desc())
        .all()
    )


def record_grade(ctx: AccessContext, form: Dict[str, Any]) -> Grade:
    student = get_student(ctx, form["student_id"])
    subject = _get_or_404(Subject, form["subject_id"], "Subject")
    grade = Grade(
        student_id=student.id,
        subject_id=subject.id,
        grade=form["grade"],
        observations=form.get("observations"),
        created_by=ctx.operator_id,
    )
    db.session.add(grade)
    db.session.commit()
    log_event(ctx, "grade.record", f"student:{student.id}", f"{subject.name}={grade.grade}")
    return grade


# --------------------------
# Dashboard
# --------------------------

def dashboard_stats(ctx: AccessContext) -> Dict[str, Any]:
    ctx.ensure_operator()
    students = db.session.query(Student.id, Student.total_tuition).all()
    payments = db.session.query(Payment.student_id, Payment.amount).all()
    grades = [g for (g,) in db.session.query(Grade.grade).all()]

    total_payments = sum((to_decimal(p.amount) for p in payments), ZERO)
    avg = average_grade(grades)
    return {
        "total_students": len(students),
        "total_payments": as_money(total_payments),
        "pending_payments": count_pending(students, group_payments_by_student(payments)),
        "average_grade": None if avg is None else str(avg),
    }
