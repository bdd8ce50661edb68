from datetime import date, datetime, timezone

from sqlalchemy.dialects import mysql

from extensions import db
from utils.payment_status import as_money


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Profile(db.Model):
    __tablename__ = 'profiles'

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), nullable=False, unique=True)
    full_name = db.Column(db.String(150), nullable=False, default='Admin User')
    role = db.Column(db.String(32), nullable=False, default='admin')
    password_hash = db.Column(db.String(255), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=_utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'email': self.email,
            'full_name': self.full_name,
            'role': self.role,
        }

    def __repr__(self):
        return f'<Profile {self.email} ({self.role})>'


class Student(db.Model):
    __tablename__ = 'students'

    id = db.Column(db.Integer, primary_key=True)
    first_name = db.Column(db.String(100), nullable=False)
    last_name = db.Column(db.String(100), nullable=False)
    id_number = db.Column(db.String(50), nullable=False, unique=True)
    date_of_birth = db.Column(db.Date, nullable=False)
    grade_level = db.Column(db.String(50), nullable=False)
    total_tuition = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    created_at = db.Column(db.DateTime, nullable=False, default=_utcnow)
    created_by = db.Column(db.Integer, db.ForeignKey('profiles.id'), nullable=False)

    parent = db.relationship('Parent', backref='student', uselist=False, cascade="all, delete-orphan")
    payments = db.relationship('Payment', backref='student', cascade="all, delete-orphan")
    grades = db.relationship('Grade', backref='student', cascade="all, delete-orphan")

    @property
    def full_name(self) -> str:
        return f'{self.first_name} {self.last_name}'

    def to_dict(self):
        return {
            'id': self.id,
            'first_name': self.first_name,
            'last_name': self.last_name,
            'id_number': self.id_number,
            'date_of_birth': self.date_of_birth.isoformat(),
            'grade_level': self.grade_level,
            'total_tuition': as_money(self.total_tuition),
            'created_at': self.created_at.isoformat(),
        }

    def __repr__(self):
        return f'<Student {self.full_name} ({self.id_number})>'


class Parent(db.Model):
    __tablename__ = 'parents'

    id = db.Column(db.Integer, primary_key=True)
    student_id = db.Column(db.Integer, db.ForeignKey('students.id', ondelete='CASCADE'), nullable=False)
    full_name = db.Column(db.String(150), nullable=False)
    id_number = db.Column(db.String(50), nullable=False)
    cell_phone = db.Column(db.String(32), nullable=False)
    address = db.Column(db.String(255))
    created_at = db.Column(db.DateTime, nullable=False, default=_utcnow)

    def to_dict(self):
        return {
            'full_name': self.full_name,
            'id_number': self.id_number,
            'cell_phone': self.cell_phone,
            'address': self.address,
        }

    def __repr__(self):
        return f'<Parent {self.full_name} StudentID={self.student_id}>'


class Payment(db.Model):
    __tablename__ = 'payments'

    id = db.Column(db.Integer, primary_key=True)
    student_id = db.Column(db.Integer, db.ForeignKey('students.id', ondelete='CASCADE'), nullable=False, index=True)
    # Negative amounts (refunds) are valid
    amount = db.Column(db.Numeric(10, 2), nullable=False)
    payment_date = db.Column(db.Date, nullable=False, default=date.today)
    notes = db.Column(db.Text)
    created_at = db.Column(db.DateTime, nullable=False, default=_utcnow)
    created_by = db.Column(db.Integer, db.ForeignKey('profiles.id'), nullable=False)

    def to_dict(self, with_student=False):
        data = {
            'id': self.id,
            'student_id': self.student_id,
            'amount': as_money(self.amount),
            'payment_date': self.payment_date.isoformat(),
            'notes': self.notes,
        }
        if with_student:
            data['student_name'] = self.student.full_name
        return data

    def __repr__(self):
        return f'<Payment StudentID={self.student_id} Paid={self.amount}>'


class Subject(db.Model):
    __tablename__ = 'subjects'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False, unique=True)
    description = db.Column(db.Text)
    created_at = db.Column(db.DateTime, nullable=False, default=_utcnow)

    grades = db.relationship('Grade', backref='subject', cascade="all, delete-orphan")

    def to_dict(self):
        return {'id': self.id, 'name': self.name, 'description': self.description}

    def __repr__(self):
        return f'<Subject {self.name}>'


class Grade(db.Model):
    __tablename__ = 'grades'
    __table_args__ = (
        db.UniqueConstraint('student_id', 'subject_id', 'created_at', name='uq_grades_student_subject_created'),
    )

    id = db.Column(db.Integer, primary_key=True)
    student_id = db.Column(db.Integer, db.ForeignKey('students.id', ondelete='CASCADE'), nullable=False, index=True)
    subject_id = db.Column(db.Integer, db.ForeignKey('subjects.id', ondelete='CASCADE'), nullable=False)
    grade = db.Column(db.Numeric(5, 2), nullable=False)
    observations = db.Column(db.Text)
    # Part of the unique key, so keep sub-second precision on MySQL too
    created_at = db.Column(db.DateTime().with_variant(mysql.DATETIME(fsp=6), 'mysql'), nullable=False, default=_utcnow)
    created_by = db.Column(db.Integer, db.ForeignKey('profiles.id'), nullable=False)

    def to_dict(self, with_student=False):
        data = {
            'id': self.id,
            'student_id': self.student_id,
            'subject_id': self.subject_id,
            'subject': self.subject.name,
            'grade': format(self.grade, '.2f'),
            'observations': self.observations,
            'created_at': self.created_at.isoformat(),
        }
        if with_student:
            data['student_name'] = self.student.full_name
        return data

    def __repr__(self):
        return f'<Grade StudentID={self.student_id} SubjectID={self.subject_id} Grade={self.grade}>'
