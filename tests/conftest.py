import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from dropoutguard import models  # noqa: F401
from dropoutguard.db import Base, get_db
from dropoutguard.main import app
from dropoutguard.schemas import StudentIn, StudentPerformanceRecord
from dropoutguard.settings import settings
from dropoutguard.store import Store


@pytest.fixture(autouse=True)
def no_real_ai(monkeypatch):
	monkeypatch.setattr(settings, "gemini_api_key", None)
	monkeypatch.setattr(settings, "openrouter_api_key", None)
	monkeypatch.setattr(settings, "gemini_provider", "ai_studio")


@pytest.fixture
def db():
	engine = create_engine(
		"sqlite://",
		connect_args={"check_same_thread": False},
		poolclass=StaticPool,
		future=True,
	)
	Base.metadata.create_all(bind=engine)
	session = sessionmaker(bind=engine, autocommit=False, autoflush=False, future=True)()
	try:
		yield session
	finally:
		session.close()
		engine.dispose()


@pytest.fixture
def store(db):
	return Store(db)


@pytest.fixture
def client(db):
	app.dependency_overrides[get_db] = lambda: db
	try:
		yield TestClient(app)
	finally:
		app.dependency_overrides.clear()


@pytest.fixture
def at_risk_record():
	return StudentPerformanceRecord(
		attendance_percentage=45,
		quiz_scores=[42, 38, 35, 40, 32, 28, 25, 30],
		assignments_submitted=3,
		total_assignments=10,
		engagement_score=25,
	)


@pytest.fixture
def strong_record():
	return StudentPerformanceRecord(
		attendance_percentage=95,
		quiz_scores=[92, 88, 95, 90, 87, 93, 91, 89],
		assignments_submitted=10,
		total_assignments=10,
		engagement_score=92,
	)


@pytest.fixture
def marcus(store):
	return store.create_student(StudentIn(
		student_id="STU001",
		name="Marcus Chen",
		course="Data Structures",
		attendance_percentage=45,
		quiz_scores=[42, 38, 35, 40, 32, 28, 25, 30],
		assignments_submitted=3,
		total_assignments=10,
		engagement_score=25,
	))
