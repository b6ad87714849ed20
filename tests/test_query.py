import pytest

from student_records.services.query import ListQuery, QueryDefaults, list_students
from student_records.services.students import create_student
from conftest import make_payload

DEFAULTS = QueryDefaults()


@pytest.fixture()
def roster(db):
    """Five students with distinct names, cities and marks."""
    rows = [
        ("Alice Walker", "Boston", {"english": 95, "maths": 92, "science": 90}),
        ("Bob Stone", "Denver", {"english": 40, "maths": 45, "science": 50}),
        ("Carol King", "Austin", {"english": 70, "maths": 72, "science": 75}),
        ("Dan Brown", "Springfield", {"english": 20, "maths": 30, "science": 10}),
        ("Eve Adams", "Boston", {"english": 85, "maths": 80, "science": 82}),
    ]
    for i, (name, city, marks) in enumerate(rows):
        create_student(db, make_payload(i, name=name, address={"city": city}, marks=marks))
    return rows


def _names(page):
    return [s.name for s in page.records]


def test_default_sort_is_name_ascending(db, roster):
    page = list_students(db, ListQuery(), DEFAULTS)
    assert _names(page) == ["Alice Walker", "Bob Stone", "Carol King", "Dan Brown", "Eve Adams"]
    assert page.total == 5
    assert page.total_pages == 1
    assert page.current_page == 1


def test_sort_descending_by_percentage(db, roster):
    page = list_students(db, ListQuery(sort_by="percentage", sort_order="desc"), DEFAULTS)
    percentages = [s.percentage for s in page.records]
    assert percentages == sorted(percentages, reverse=True)
    assert page.records[0].name == "Alice Walker"


def test_sort_by_nested_mark_field(db, roster):
    page = list_students(db, ListQuery(sort_by="marks.science"), DEFAULTS)
    assert [s.science for s in page.records] == [10, 50, 75, 82, 90]


def test_unknown_sort_field_falls_back_to_default(db, roster):
    page = list_students(db, ListQuery(sort_by="favouriteColour"), DEFAULTS)
    assert _names(page)[0] == "Alice Walker"


def test_configured_defaults_are_used(db, roster):
    defaults = QueryDefaults(sort_by="totalMarks", sort_order="desc", page_size=2)
    page = list_students(db, ListQuery(), defaults)
    assert _names(page) == ["Alice Walker", "Eve Adams"]
    assert page.total_pages == 3


def test_search_is_case_insensitive_across_fields(db, roster):
    assert _names(list_students(db, ListQuery(search="boston"), DEFAULTS)) == ["Alice Walker", "Eve Adams"]
    assert _names(list_students(db, ListQuery(search="KING"), DEFAULTS)) == ["Carol King"]
    assert _names(list_students(db, ListQuery(search="stu003"), DEFAULTS)) == ["Dan Brown"]
    assert _names(list_students(db, ListQuery(search="student1@"), DEFAULTS)) == ["Bob Stone"]


def test_search_counts_reflect_filtered_set(db, roster):
    page = list_students(db, ListQuery(search="boston", limit=1), DEFAULTS)
    assert page.total == 2
    assert page.total_pages == 2
    assert len(page.records) == 1


def test_search_without_matches_is_empty_page(db, roster):
    page = list_students(db, ListQuery(search="nobody-here"), DEFAULTS)
    assert page.records == []
    assert page.total == 0
    assert page.total_pages == 0


def test_search_wildcards_are_literal(db, roster):
    assert list_students(db, ListQuery(search="%"), DEFAULTS).total == 0
    assert list_students(db, ListQuery(search="_"), DEFAULTS).total == 0


def test_blank_search_matches_everything(db, roster):
    assert list_students(db, ListQuery(search="   "), DEFAULTS).total == 5


def test_pagination_last_page_holds_remainder(db):
    for i in range(25):
        create_student(db, make_payload(i))

    first = list_students(db, ListQuery(page=1, limit=10), DEFAULTS)
    last = list_students(db, ListQuery(page=3, limit=10), DEFAULTS)

    assert first.total == 25
    assert first.total_pages == 3
    assert len(first.records) == 10
    assert len(last.records) == 5
    assert last.current_page == 3
    assert [s.name for s in last.records] == [f"Student {c}" for c in "UVWXY"]


def test_page_past_the_end_is_empty(db, roster):
    page = list_students(db, ListQuery(page=4, limit=2), DEFAULTS)
    assert page.records == []
    assert page.total == 5
    assert page.total_pages == 3


def test_empty_collection(db):
    page = list_students(db, ListQuery(), DEFAULTS)
    assert page.records == []
    assert page.total == 0
    assert page.total_pages == 0
