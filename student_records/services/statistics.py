"""
Statistics Service - collection-wide counts and averages.

Always computed over every student, never the searched subset:
- totalStudents
- gradeDistribution: [{grade, count}] ordered by grade label
- averageMarks: avgEnglish, avgMaths, avgScience, avgTotal, avgPercentage

For an empty collection averageMarks is an empty dict; consumers
display missing averages as 0.
"""

from sqlalchemy import func
from sqlalchemy.orm import Session

from student_records.models.student import Student
from student_records.logging_config import get_logger, log_with_context

logger = get_logger("query")


def grade_distribution(db: Session) -> list:
    rows = (
        db.query(Student.grade, func.count(Student.id))
        .group_by(Student.grade)
        .order_by(Student.grade)
        .all()
    )
    return [{"grade": grade, "count": count} for grade, count in rows]


def average_marks(db: Session) -> dict:
    row = db.query(
        func.count(Student.id),
        func.avg(Student.english),
        func.avg(Student.maths),
        func.avg(Student.science),
        func.avg(Student.total_marks),
        func.avg(Student.percentage),
    ).one()

    count, avg_english, avg_maths, avg_science, avg_total, avg_percentage = row
    if not count:
        return {}

    return {
        "avgEnglish": float(avg_english),
        "avgMaths": float(avg_maths),
        "avgScience": float(avg_science),
        "avgTotal": float(avg_total),
        "avgPercentage": float(avg_percentage),
    }


def compute_statistics(db: Session) -> dict:
    total_students = db.query(func.count(Student.id)).scalar() or 0
    distribution = grade_distribution(db)
    averages = average_marks(db)

    log_with_context(logger, "INFO",
        "Statistics computed for {} students".format(total_students),
        extra_data={"grades": len(distribution)})

    return {
        "totalStudents": total_students,
        "gradeDistribution": distribution,
        "averageMarks": averages,
    }
