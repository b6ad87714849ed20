"""
Request and response schemas for the students API.

StudentPayload is the input validator: a submission that fails any rule
here is rejected with a per-field error list and never reaches the
grading service. Wire names are camelCase; Python attributes are
snake_case.
"""

import re
from datetime import date
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

LETTERS_AND_SPACES = re.compile(r"^[a-zA-Z\s]+$")
PHONE_PATTERN = re.compile(r"^\+?[1-9]\d{0,15}$")
ZIP_CODE_PATTERN = re.compile(r"^\d{5,10}$")

MIN_AGE = 5
MAX_AGE = 100


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


def _require_text(value: str, label: str) -> str:
    if not value:
        raise ValueError(f"{label} is required")
    return value


def _letters_and_spaces(value: str, label: str) -> str:
    _require_text(value, label)
    if not LETTERS_AND_SPACES.match(value):
        raise ValueError(f"{label} can only contain letters and spaces")
    return value


class AddressPayload(CamelModel):
    street: str
    city: str
    state: str
    zip_code: str

    @field_validator("street")
    @classmethod
    def _street(cls, v: str) -> str:
        return _require_text(v, "Street address")

    @field_validator("city")
    @classmethod
    def _city(cls, v: str) -> str:
        return _letters_and_spaces(v, "City")

    @field_validator("state")
    @classmethod
    def _state(cls, v: str) -> str:
        return _letters_and_spaces(v, "State")

    @field_validator("zip_code")
    @classmethod
    def _zip_code(cls, v: str) -> str:
        _require_text(v, "Zip code")
        if not ZIP_CODE_PATTERN.match(v):
            raise ValueError("Zip code must be between 5 and 10 digits")
        return v


class MarksPayload(CamelModel):
    english: int
    maths: int
    science: int

    @field_validator("english", "maths", "science", mode="before")
    @classmethod
    def _whole_number(cls, v: Any, info) -> Any:
        subject = info.field_name.capitalize()
        # bool is an int subclass; 90.0 would be coerced silently by lax mode
        if isinstance(v, bool) or (isinstance(v, float) and not v.is_integer()):
            raise ValueError(f"{subject} marks must be between 0 and 100")
        return v

    @field_validator("english", "maths", "science")
    @classmethod
    def _in_range(cls, v: int, info) -> int:
        if not 0 <= v <= 100:
            raise ValueError(f"{info.field_name.capitalize()} marks must be between 0 and 100")
        return v


class StudentPayload(CamelModel):
    """
    Body of POST /api/students and PUT /api/students/{id}.

    Derived fields (totalMarks, percentage, grade), ids and timestamps are
    not part of the schema, so any value a client sends for them is dropped.
    """
    student_id: str
    name: str
    email: EmailStr
    phone: str
    date_of_birth: date
    address: AddressPayload
    marks: MarksPayload

    @field_validator("student_id")
    @classmethod
    def _student_id(cls, v: str) -> str:
        _require_text(v, "Student ID")
        if not 3 <= len(v) <= 20:
            raise ValueError("Student ID must be between 3 and 20 characters")
        return v

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        _require_text(v, "Name")
        if not 2 <= len(v) <= 100:
            raise ValueError("Name must be between 2 and 100 characters")
        return _letters_and_spaces(v, "Name")

    @field_validator("email")
    @classmethod
    def _email(cls, v: str) -> str:
        return v.lower()

    @field_validator("phone")
    @classmethod
    def _phone(cls, v: str) -> str:
        _require_text(v, "Phone number")
        if not PHONE_PATTERN.match(v):
            raise ValueError("Please provide a valid phone number")
        return v

    @field_validator("date_of_birth")
    @classmethod
    def _age(cls, v: date) -> date:
        age = date.today().year - v.year
        if age < MIN_AGE or age > MAX_AGE:
            raise ValueError(f"Age must be between {MIN_AGE} and {MAX_AGE} years")
        return v


# ── Responses ────────────────────────────────────────────────

class AddressOut(CamelModel):
    street: str
    city: str
    state: str
    zip_code: str


class MarksOut(CamelModel):
    english: int
    maths: int
    science: int


class StudentOut(CamelModel):
    id: str
    student_id: str
    name: str
    email: str
    phone: str
    date_of_birth: date
    address: AddressOut
    marks: MarksOut
    total_marks: int
    percentage: float
    grade: str
    enrollment_date: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class StudentListResponse(CamelModel):
    students: List[StudentOut]
    total_pages: int
    current_page: int
    total: int


class GradeCount(BaseModel):
    grade: str
    count: int


class StatsResponse(CamelModel):
    total_students: int
    grade_distribution: List[GradeCount]
    average_marks: Dict[str, float] = Field(default_factory=dict)


class MessageResponse(BaseModel):
    message: str
