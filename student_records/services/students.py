"""
Student Record Service - get, create, update and delete student records.

Every write goes through the same steps:
1. Reject a studentId/email that another record already uses
2. Copy the validated payload onto the ORM object
3. Recompute derived fields with grading.apply_derived_fields
4. Commit; a unique-constraint race at commit is reported the same way
   as step 1
"""

import time
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from student_records.errors import DuplicateFieldError, StudentNotFoundError
from student_records.models.student import Student
from student_records.schemas import StudentPayload
from student_records.services.grading import apply_derived_fields
from student_records.logging_config import get_logger, log_with_context

logger = get_logger("db")

# Column name -> wire field name for the unique business keys
UNIQUE_FIELDS = (
    ("student_id", "studentId"),
    ("email", "email"),
)


def get_student(db: Session, record_id: str) -> Student:
    student = db.query(Student).filter(Student.id == record_id).first()
    if not student:
        raise StudentNotFoundError(record_id)
    return student


def _check_unique(db: Session, payload: StudentPayload, exclude_id: Optional[str] = None):
    for column_name, field in UNIQUE_FIELDS:
        value = getattr(payload, column_name)
        q = db.query(Student.id).filter(getattr(Student, column_name) == value)
        if exclude_id:
            q = q.filter(Student.id != exclude_id)
        if q.first():
            raise DuplicateFieldError(field, value)


def _duplicate_field_from(exc: IntegrityError) -> Optional[str]:
    """Work out which unique key an IntegrityError was raised for."""
    message = str(exc.orig).lower()
    for column_name, field in UNIQUE_FIELDS:
        if column_name in message:
            return field
    return None


def _assign_payload(student: Student, payload: StudentPayload):
    student.student_id = payload.student_id
    student.name = payload.name
    student.email = payload.email
    student.phone = payload.phone
    student.date_of_birth = payload.date_of_birth
    student.street = payload.address.street
    student.city = payload.address.city
    student.state = payload.address.state
    student.zip_code = payload.address.zip_code
    student.english = payload.marks.english
    student.maths = payload.marks.maths
    student.science = payload.marks.science


def _commit(db: Session, student: Student):
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        field = _duplicate_field_from(exc)
        if field is None:
            raise
        log_with_context(logger, "WARNING",
            "Unique constraint violated on {}".format(field),
            context={"student_id": student.student_id})
        raise DuplicateFieldError(field) from exc
    db.refresh(student)


def create_student(db: Session, payload: StudentPayload) -> Student:
    start_time = time.time()
    _check_unique(db, payload)

    student = Student()
    _assign_payload(student, payload)
    apply_derived_fields(student)

    db.add(student)
    _commit(db, student)

    log_with_context(logger, "INFO",
        "Student created: {} (grade {})".format(student.student_id, student.grade),
        context={"record_id": student.id, "student_id": student.student_id},
        extra_data={"duration_ms": round((time.time() - start_time) * 1000, 2)})
    return student


def update_student(db: Session, record_id: str, payload: StudentPayload) -> Student:
    """Replace every editable field of a record and recompute its grade."""
    start_time = time.time()
    student = get_student(db, record_id)
    _check_unique(db, payload, exclude_id=record_id)

    _assign_payload(student, payload)
    apply_derived_fields(student)
    _commit(db, student)

    log_with_context(logger, "INFO",
        "Student updated: {} (grade {})".format(student.student_id, student.grade),
        context={"record_id": student.id, "student_id": student.student_id},
        extra_data={"duration_ms": round((time.time() - start_time) * 1000, 2)})
    return student


def delete_student(db: Session, record_id: str):
    student = get_student(db, record_id)
    db.delete(student)
    db.commit()

    log_with_context(logger, "INFO",
        "Student deleted: {}".format(student.student_id),
        context={"record_id": record_id, "student_id": student.student_id})
