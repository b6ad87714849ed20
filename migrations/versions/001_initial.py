"""Initial migration - create the students table

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19

Creates the students table with its two unique business keys
(student_id, email) and indexes for listing by name and grouping by grade.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'students',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('student_id', sa.String(20), nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('email', sa.Text(), nullable=False),
        sa.Column('phone', sa.Text(), nullable=False),
        sa.Column('date_of_birth', sa.Date(), nullable=False),

        # ── Address ───────────────────────────────────────────
        sa.Column('street', sa.Text(), nullable=False),
        sa.Column('city', sa.Text(), nullable=False),
        sa.Column('state', sa.Text(), nullable=False),
        sa.Column('zip_code', sa.String(10), nullable=False),

        # ── Marks and derived results ─────────────────────────
        sa.Column('english', sa.Integer(), nullable=False),
        sa.Column('maths', sa.Integer(), nullable=False),
        sa.Column('science', sa.Integer(), nullable=False),
        sa.Column('total_marks', sa.Integer(), nullable=False),
        sa.Column('percentage', sa.Float(), nullable=False),
        sa.Column('grade', sa.String(2), nullable=False),

        sa.Column('enrollment_date', sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.func.now()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.func.now()),

        sa.UniqueConstraint('student_id', name='uq_students_student_id'),
        sa.UniqueConstraint('email', name='uq_students_email'),
    )

    op.create_index('ix_students_name', 'students', ['name'])
    op.create_index('ix_students_grade', 'students', ['grade'])


def downgrade() -> None:
    op.drop_index('ix_students_grade', table_name='students')
    op.drop_index('ix_students_name', table_name='students')
    op.drop_table('students')
