"""academy schema: profiles, students, parents, payments, subjects, grades

Revision ID: a1f3c9d20b64
Revises:
Create Date: 2025-10-28 22:15:05.000000

"""
from datetime import datetime, timezone

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import mysql

# revision identifiers, used by Alembic.
revision = "a1f3c9d20b64"
down_revision = None
branch_labels = None
depends_on = None

DEFAULT_SUBJECTS = (
    ("Mathematics", "Mathematics course"),
    ("Science", "Science course"),
    ("Language Arts", "Language and literature"),
    ("Social Studies", "History and geography"),
    ("Physical Education", "Physical education and sports"),
)


def upgrade():
    op.create_table(
        'profiles',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('full_name', sa.String(length=150), nullable=False),
        sa.Column('role', sa.String(length=32), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('email', name='uq_profiles_email'),
    )

    op.create_table(
        'students',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('id_number', sa.String(length=50), nullable=False),
        sa.Column('date_of_birth', sa.Date(), nullable=False),
        sa.Column('grade_level', sa.String(length=50), nullable=False),
        sa.Column('total_tuition', sa.Numeric(10, 2), nullable=False, server_default=sa.text('0')),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('created_by', sa.Integer(), sa.ForeignKey('profiles.id'), nullable=False),
        sa.UniqueConstraint('id_number', name='uq_students_id_number'),
    )

    op.create_table(
        'parents',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('student_id', sa.Integer(), sa.ForeignKey('students.id', ondelete='CASCADE'), nullable=False),
        sa.Column('full_name', sa.String(length=150), nullable=False),
        sa.Column('id_number', sa.String(length=50), nullable=False),
        sa.Column('cell_phone', sa.String(length=32), nullable=False),
        sa.Column('address', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )

    op.create_table(
        'payments',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('student_id', sa.Integer(), sa.ForeignKey('students.id', ondelete='CASCADE'), nullable=False),
        sa.Column('amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('payment_date', sa.Date(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('created_by', sa.Integer(), sa.ForeignKey('profiles.id'), nullable=False),
    )
    op.create_index('ix_payments_student_id', 'payments', ['student_id'])

    subjects = op.create_table(
        'subjects',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('name', name='uq_subjects_name'),
    )

    op.create_table(
        'grades',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('student_id', sa.Integer(), sa.ForeignKey('students.id', ondelete='CASCADE'), nullable=False),
        sa.Column('subject_id', sa.Integer(), sa.ForeignKey('subjects.id', ondelete='CASCADE'), nullable=False),
        sa.Column('grade', sa.Numeric(5, 2), nullable=False),
        sa.Column('observations', sa.Text(), nullable=True),
        # Microsecond precision keeps (student, subject, created_at) collisions unlikely
        sa.Column('created_at', sa.DateTime().with_variant(mysql.DATETIME(fsp=6), 'mysql'), nullable=False),
        sa.Column('created_by', sa.Integer(), sa.ForeignKey('profiles.id'), nullable=False),
        sa.UniqueConstraint('student_id', 'subject_id', 'created_at', name='uq_grades_student_subject_created'),
    )
    op.create_index('ix_grades_student_id', 'grades', ['student_id'])

    now = datetime.now(timezone.utc).replace(tzinfo=None)
    op.bulk_insert(
        subjects,
        [{'name': name, 'description': description, 'created_at': now} for name, description in DEFAULT_SUBJECTS],
    )


def downgrade():
    op.drop_index('ix_grades_student_id', table_name='grades')
    op.drop_table('grades')
    op.drop_table('subjects')
    op.drop_index('ix_payments_student_id', table_name='payments')
    op.drop_table('payments')
    op.drop_table('parents')
    op.drop_table('students')
    op.drop_table('profiles')
