"""
Grading Service - derives total marks, percentage and letter grade.

Implements the grading formula:
1. total = english + maths + science            (0-300)
2. percentage = total / 300 * 100, rounded half-up to 2 decimal places
3. grade = first threshold the percentage reaches, from the top:
       >= 90 A+ | >= 80 A | >= 70 B+ | >= 60 B | >= 50 C | >= 40 D | else F

compute_derived_fields is pure. apply_derived_fields is the only place
the derived columns of a Student are written; the record service calls
it immediately before every insert and update.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP

from student_records.models.student import Student
from student_records.logging_config import get_logger, log_with_context

logger = get_logger("grading")

SUBJECTS = ("english", "maths", "science")
MAX_MARKS_PER_SUBJECT = 100
MAX_TOTAL_MARKS = MAX_MARKS_PER_SUBJECT * len(SUBJECTS)

# Evaluated in order, first match wins
GRADE_THRESHOLDS = (
    (90, "A+"),
    (80, "A"),
    (70, "B+"),
    (60, "B"),
    (50, "C"),
    (40, "D"),
)
FAILING_GRADE = "F"

_TWO_PLACES = Decimal("0.01")


@dataclass(frozen=True)
class DerivedFields:
    total_marks: int
    percentage: float
    grade: str


def calculate_percentage(total_marks: int) -> float:
    """Percentage of MAX_TOTAL_MARKS, rounded half-up to 2 decimal places."""
    exact = Decimal(total_marks) * 100 / Decimal(MAX_TOTAL_MARKS)
    return float(exact.quantize(_TWO_PLACES, rounding=ROUND_HALF_UP))


def grade_for_percentage(percentage: float) -> str:
    for threshold, grade in GRADE_THRESHOLDS:
        if percentage >= threshold:
            return grade
    return FAILING_GRADE


def compute_derived_fields(english: int, maths: int, science: int) -> DerivedFields:
    """
    Compute total marks, percentage and grade from the three subject marks.

    Marks are expected to be validated integers in [0, 100] already.
    """
    total = english + maths + science
    percentage = calculate_percentage(total)
    return DerivedFields(
        total_marks=total,
        percentage=percentage,
        grade=grade_for_percentage(percentage),
    )


def apply_derived_fields(student: Student) -> DerivedFields:
    """
    Recompute and overwrite total_marks, percentage and grade on a Student.

    Whatever the derived columns held before is discarded.
    """
    derived = compute_derived_fields(student.english, student.maths, student.science)
    student.total_marks = derived.total_marks
    student.percentage = derived.percentage
    student.grade = derived.grade

    log_with_context(logger, "DEBUG",
        "Derived fields computed: total={}, percentage={:.2f}, grade={}".format(
            derived.total_marks, derived.percentage, derived.grade),
        context={"student_id": student.student_id},
        extra_data={
            "english": student.english,
            "maths": student.maths,
            "science": student.science
        })
    return derived
