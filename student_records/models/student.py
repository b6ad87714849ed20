"""
Student model - one student's profile, marks and derived results.

total_marks, percentage and grade are derived from the three marks.
They have no column defaults; services.grading.apply_derived_fields
writes them before every insert and update.
"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, Text, Integer, Float, Date, DateTime, String, Index
from student_records.database import Base


def _utcnow():
    return datetime.now(timezone.utc)


class Student(Base):
    """
    SQLAlchemy model for the students table.

    `id` is the record identity used in URLs. `student_id` and `email`
    are the two business keys and are unique.
    """
    __tablename__ = "students"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()),
                doc="Unique record identifier")
    student_id = Column(String(20), nullable=False, unique=True,
                        doc="Institution-issued student identifier (3-20 chars)")
    name = Column(Text, nullable=False)
    email = Column(Text, nullable=False, unique=True,
                   doc="Lower-cased email address")
    phone = Column(Text, nullable=False)
    date_of_birth = Column(Date, nullable=False)

    # Address
    street = Column(Text, nullable=False)
    city = Column(Text, nullable=False)
    state = Column(Text, nullable=False)
    zip_code = Column(String(10), nullable=False)

    # Marks (0-100 each)
    english = Column(Integer, nullable=False)
    maths = Column(Integer, nullable=False)
    science = Column(Integer, nullable=False)

    # Derived
    total_marks = Column(Integer, nullable=False,
                         doc="english + maths + science")
    percentage = Column(Float, nullable=False,
                        doc="total_marks / 300 * 100, rounded half-up to 2 dp")
    grade = Column(String(2), nullable=False,
                   doc="Letter grade: A+ | A | B+ | B | C | D | F")

    enrollment_date = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    __table_args__ = (
        Index("ix_students_name", "name"),
        Index("ix_students_grade", "grade"),
    )

    def __repr__(self):
        return f"<Student(id={self.id}, student_id='{self.student_id}', grade='{self.grade}')>"
