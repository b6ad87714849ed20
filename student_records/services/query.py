"""
Query Service - search, sort and paginate student records.

Given a ListQuery (search term, sort field, sort order, page, limit) and
explicit QueryDefaults, returns one page of matching students plus the
count of the whole filtered set:

- search: case-insensitive substring match on name, studentId, email or
  address.city (any field may match)
- sort: one field, ascending unless sort_order is "desc", ties broken by id
- paging: offset = (page - 1) * limit; total_pages = ceil(total / limit)

A search with no matches is an empty page, not an error.
"""

import math
import time
from dataclasses import dataclass, field
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from student_records.config import Settings
from student_records.models.student import Student
from student_records.logging_config import get_logger, log_with_context

logger = get_logger("query")

# Wire name -> column
SORT_COLUMNS = {
    "name": Student.name,
    "studentId": Student.student_id,
    "email": Student.email,
    "phone": Student.phone,
    "dateOfBirth": Student.date_of_birth,
    "address.city": Student.city,
    "address.state": Student.state,
    "marks.english": Student.english,
    "marks.maths": Student.maths,
    "marks.science": Student.science,
    "totalMarks": Student.total_marks,
    "percentage": Student.percentage,
    "grade": Student.grade,
    "enrollmentDate": Student.enrollment_date,
    "createdAt": Student.created_at,
    "updatedAt": Student.updated_at,
}

SEARCH_COLUMNS = (Student.name, Student.student_id, Student.email, Student.city)


@dataclass(frozen=True)
class QueryDefaults:
    sort_by: str = "name"
    sort_order: str = "asc"
    page_size: int = 10

    @classmethod
    def from_settings(cls, settings: Settings) -> "QueryDefaults":
        return cls(
            sort_by=settings.DEFAULT_SORT_FIELD,
            sort_order=settings.DEFAULT_SORT_ORDER,
            page_size=settings.DEFAULT_PAGE_SIZE,
        )


@dataclass(frozen=True)
class ListQuery:
    search: Optional[str] = None
    sort_by: Optional[str] = None
    sort_order: Optional[str] = None
    page: int = 1
    limit: Optional[int] = None


@dataclass
class StudentPage:
    records: List[Student] = field(default_factory=list)
    total: int = 0
    total_pages: int = 0
    current_page: int = 1


def _like_pattern(term: str) -> str:
    """Wrap a search term for a literal substring LIKE match."""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def resolve_sort_column(sort_by: Optional[str], defaults: QueryDefaults):
    """
    Map a wire sort field to its column, falling back to the default field
    for anything unknown.
    """
    if sort_by and sort_by in SORT_COLUMNS:
        return SORT_COLUMNS[sort_by]
    if sort_by:
        log_with_context(logger, "WARNING",
            "Unknown sort field '{}', using '{}'".format(sort_by, defaults.sort_by),
            extra_data={"sort_by": sort_by})
    return SORT_COLUMNS.get(defaults.sort_by, Student.name)


def list_students(db: Session, query: ListQuery, defaults: QueryDefaults) -> StudentPage:
    start_time = time.time()

    page = max(query.page or 1, 1)
    limit = query.limit or defaults.page_size
    sort_order = query.sort_order or defaults.sort_order

    q = db.query(Student)

    search = (query.search or "").strip()
    if search:
        pattern = _like_pattern(search)
        q = q.filter(or_(*[column.ilike(pattern, escape="\\") for column in SEARCH_COLUMNS]))

    total = q.count()

    sort_column = resolve_sort_column(query.sort_by or defaults.sort_by, defaults)
    if sort_order == "desc":
        q = q.order_by(sort_column.desc(), Student.id.desc())
    else:
        q = q.order_by(sort_column.asc(), Student.id.asc())

    records = q.offset((page - 1) * limit).limit(limit).all()
    total_pages = math.ceil(total / limit)

    duration_ms = (time.time() - start_time) * 1000
    log_with_context(logger, "INFO",
        "Listed {} students (page {}, total {})".format(len(records), page, total),
        extra_data={
            "search": search or None,
            "sort_by": query.sort_by or defaults.sort_by,
            "sort_order": sort_order,
            "limit": limit,
            "duration_ms": round(duration_ms, 2)
        })

    return StudentPage(
        records=records,
        total=total,
        total_pages=total_pages,
        current_page=page,
    )
