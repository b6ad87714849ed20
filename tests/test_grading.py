import pytest

from student_records.models.student import Student
from student_records.services.grading import (
    apply_derived_fields,
    calculate_percentage,
    compute_derived_fields,
    grade_for_percentage,
)


def _split(total):
    """Spread a total over three subjects, each capped at 100."""
    english = min(total, 100)
    maths = min(total - english, 100)
    return english, maths, total - english - maths


def _expected_percentage(total):
    # Half-up rounding to hundredths in integer arithmetic
    return ((total * 10000 + 150) // 300) / 100


@pytest.mark.parametrize("total, percentage, grade", [
    (300, 100.0, "A+"),
    (270, 90.0, "A+"),
    (269, 89.67, "A"),
    (240, 80.0, "A"),
    (239, 79.67, "B+"),
    (210, 70.0, "B+"),
    (209, 69.67, "B"),
    (180, 60.0, "B"),
    (179, 59.67, "C"),
    (150, 50.0, "C"),
    (149, 49.67, "D"),
    (120, 40.0, "D"),
    (119, 39.67, "F"),
    (1, 0.33, "F"),
    (2, 0.67, "F"),
    (0, 0.0, "F"),
])
def test_grade_boundaries(total, percentage, grade):
    derived = compute_derived_fields(*_split(total))
    assert derived.total_marks == total
    assert derived.percentage == percentage
    assert derived.grade == grade


def test_every_total_matches_formula_and_threshold_table():
    thresholds = [(90, "A+"), (80, "A"), (70, "B+"), (60, "B"), (50, "C"), (40, "D")]
    for total in range(0, 301):
        derived = compute_derived_fields(*_split(total))
        expected_pct = _expected_percentage(total)
        expected_grade = next((g for t, g in thresholds if expected_pct >= t), "F")

        assert derived.total_marks == total
        assert derived.percentage == expected_pct
        assert derived.grade == expected_grade


def test_total_is_order_independent():
    a = compute_derived_fields(100, 0, 37)
    b = compute_derived_fields(0, 37, 100)
    c = compute_derived_fields(37, 100, 0)
    assert a == b == c


def test_recomputing_is_idempotent():
    first = compute_derived_fields(91, 45, 78)
    second = compute_derived_fields(91, 45, 78)
    assert first == second


def test_example_record_marks():
    derived = compute_derived_fields(80, 70, 60)
    assert derived.total_marks == 210
    assert derived.percentage == 70.0
    assert derived.grade == "B+"


def test_percentage_rounds_half_up_to_two_places():
    assert calculate_percentage(100) == 33.33
    assert calculate_percentage(200) == 66.67
    assert calculate_percentage(299) == 99.67


@pytest.mark.parametrize("percentage, grade", [
    (100, "A+"), (90, "A+"), (89.99, "A"), (80, "A"), (79.99, "B+"),
    (70, "B+"), (60, "B"), (50, "C"), (40, "D"), (39.99, "F"), (0, "F"),
])
def test_grade_for_percentage(percentage, grade):
    assert grade_for_percentage(percentage) == grade


def test_apply_derived_fields_overwrites_existing_values():
    student = Student(student_id="STU001", english=95, maths=92, science=90,
                      total_marks=3, percentage=1.0, grade="F")

    derived = apply_derived_fields(student)

    assert student.total_marks == 277
    assert student.percentage == 92.33
    assert student.grade == "A+"
    assert derived.total_marks == student.total_marks
