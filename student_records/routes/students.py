"""
Students API routes.

- GET    /api/students          list with search, sort and pagination
- GET    /api/students/stats    grade distribution and average marks
- GET    /api/students/{id}     one record
- POST   /api/students          create (derived fields computed server-side)
- PUT    /api/students/{id}     full update (derived fields recomputed)
- DELETE /api/students/{id}     delete
"""

from datetime import timezone
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from student_records.config import settings
from student_records.database import get_db
from student_records.models.student import Student
from student_records.schemas import (
    AddressOut, MarksOut, MessageResponse, StatsResponse, StudentListResponse,
    StudentOut, StudentPayload,
)
from student_records.services import students as student_service
from student_records.services.query import ListQuery, QueryDefaults, list_students
from student_records.services.statistics import compute_statistics

router = APIRouter(prefix="/api/students")


def _iso(value):
    """ISO 8601 with an explicit UTC offset; SQLite hands back naive values."""
    if not value:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


def serialize_student(student: Student) -> StudentOut:
    """Build the camelCase wire representation of a Student."""
    return StudentOut(
        id=str(student.id),
        student_id=student.student_id,
        name=student.name,
        email=student.email,
        phone=student.phone,
        date_of_birth=student.date_of_birth,
        address=AddressOut(
            street=student.street,
            city=student.city,
            state=student.state,
            zip_code=student.zip_code,
        ),
        marks=MarksOut(
            english=student.english,
            maths=student.maths,
            science=student.science,
        ),
        total_marks=student.total_marks,
        percentage=student.percentage,
        grade=student.grade,
        enrollment_date=_iso(student.enrollment_date),
        created_at=_iso(student.created_at),
        updated_at=_iso(student.updated_at),
    )


def get_query_defaults() -> QueryDefaults:
    return QueryDefaults.from_settings(settings)


@router.get("", response_model=StudentListResponse)
def get_students(
    search: Optional[str] = Query(None, description="Match name, studentId, email or city"),
    sort_by: Optional[str] = Query(None, alias="sortBy", description="Sort field, e.g. name or marks.maths"),
    sort_order: Optional[str] = Query(None, alias="sortOrder", description="asc or desc"),
    page: int = Query(1, ge=1, description="Page number"),
    limit: Optional[int] = Query(None, ge=1, le=settings.MAX_PAGE_SIZE, description="Results per page"),
    db: Session = Depends(get_db),
    defaults: QueryDefaults = Depends(get_query_defaults),
):
    """List students with search, sorting and pagination."""
    if sort_order is not None:
        sort_order = "desc" if sort_order == "desc" else "asc"

    result = list_students(
        db,
        ListQuery(search=search, sort_by=sort_by, sort_order=sort_order, page=page, limit=limit),
        defaults,
    )
    return StudentListResponse(
        students=[serialize_student(s) for s in result.records],
        total_pages=result.total_pages,
        current_page=result.current_page,
        total=result.total,
    )


@router.get("/stats", response_model=StatsResponse)
def get_student_stats(db: Session = Depends(get_db)):
    """Collection-wide statistics."""
    return compute_statistics(db)


@router.get("/{record_id}", response_model=StudentOut)
def get_student(record_id: str, db: Session = Depends(get_db)):
    return serialize_student(student_service.get_student(db, record_id))


@router.post("", response_model=StudentOut, status_code=201)
def create_student(payload: StudentPayload, db: Session = Depends(get_db)):
    return serialize_student(student_service.create_student(db, payload))


@router.put("/{record_id}", response_model=StudentOut)
def update_student(record_id: str, payload: StudentPayload, db: Session = Depends(get_db)):
    return serialize_student(student_service.update_student(db, record_id, payload))


@router.delete("/{record_id}", response_model=MessageResponse)
def delete_student(record_id: str, db: Session = Depends(get_db)):
    student_service.delete_student(db, record_id)
    return MessageResponse(message="Student deleted successfully")
