import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from studio.database import Base, get_db
from studio.main import app
from studio.models.library import Library
from studio.models.course import CourseSection

TEST_DB_URL = "sqlite:///./test_studio.db"

engine = create_engine(TEST_DB_URL, connect_args={"check_same_thread": False})
TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def library(db):
    row = Library(name="Onboarding", description="신규 입사자 교육 자료")
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


@pytest.fixture
def section(db):
    row = CourseSection(title="1주차", sort_order=0)
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


QUIZ_FIELDS = [
    {"id": "question", "type": "text", "label": "Question", "required": True},
    {
        "id": "choices",
        "type": "array",
        "label": "Choices",
        "fields": [
            {"id": "text", "type": "text", "label": "Choice"},
            {"id": "correct", "type": "checkbox", "label": "Correct"},
        ],
    },
]

QUIZ_COMPONENT = """<template>
  <div class="quiz">
    <h2>{{ data.question }}</h2>
  </div>
</template>
"""


@pytest.fixture
def quiz_template(client):
    resp = client.post(
        "/api/templates",
        json={
            "name": "Quiz",
            "input_schema": QUIZ_FIELDS,
            "component": QUIZ_COMPONENT,
            "sample_data": {"question": "2 + 2?", "choices": [{"text": "4", "correct": True}]},
        },
    )
    assert resp.status_code == 200, resp.text
    return resp.json()
