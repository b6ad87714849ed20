import os

# Keep the app from creating a database file in the working directory
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from student_records.database import Base, get_db
from student_records.main import app
from student_records.schemas import StudentPayload


def make_student_data(index: int = 0, **overrides) -> dict:
    """A valid camelCase submission; nested dicts in overrides are merged."""
    data = {
        "studentId": f"STU{index:03d}",
        "name": f"Student {chr(65 + index % 26)}",
        "email": f"student{index}@school.edu",
        "phone": "+14155550100",
        "dateOfBirth": "2008-05-14",
        "address": {
            "street": "12 Main Street",
            "city": "Springfield",
            "state": "Illinois",
            "zipCode": "62701",
        },
        "marks": {"english": 80, "maths": 70, "science": 60},
    }
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(data.get(key), dict):
            data[key] = {**data[key], **value}
        else:
            data[key] = value
    return data


def make_payload(index: int = 0, **overrides) -> StudentPayload:
    return StudentPayload.model_validate(make_student_data(index, **overrides))


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def db(engine):
    """A session on a fresh in-memory database."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(engine):
    """
    TestClient wired to the in-memory database through the get_db
    dependency.
    """
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        session = TestingSession()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as client_instance:
        yield client_instance
    app.dependency_overrides.clear()
