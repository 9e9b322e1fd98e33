"""Shared fixtures: isolated in-memory database, fake generation client, API client."""
import os

# Keep the import-time create_all in main.py away from the working directory
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from dischargeflow.core.errors import UpstreamError
from dischargeflow.models.base import Base, build_engine
from dischargeflow.models import patient, clinical, summary  # noqa: F401 - register tables
from dischargeflow.services.record_store import RecordStore


class FakeGenerationClient:
    """Stands in for the external generation API and records every prompt."""

    def __init__(self, text: str = "DEATH SUMMARY\nGenerated draft", error: Exception = None):
        self.text = text
        self.error = error
        self.prompts = []

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.text

    @property
    def call_count(self) -> int:
        return len(self.prompts)


@pytest.fixture()
def session_factory():
    """Provide an isolated in-memory SQLite database for each test."""
    test_engine = build_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=test_engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)
    yield factory
    test_engine.dispose()


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture()
def store(db):
    return RecordStore(db)


@pytest.fixture()
def fake_client():
    return FakeGenerationClient()


@pytest.fixture()
def failing_client():
    return FakeGenerationClient(error=UpstreamError("Invalid response structure from generation API"))


@pytest.fixture()
def patient_payload():
    return {
        "name": "John Doe",
        "age": 60,
        "gender": "Male",
        "department": "General Medicine",
        "ward": "ICU",
        "doa": "2024-01-01",
        "primary_consultant": "Dr. X",
    }


@pytest.fixture()
def clinical_payload():
    return {
        "final_diagnosis": "Sepsis",
        "chief_complaints": "Fever",
        "hospital_course": "Stable then declined",
        "investigations": "CBC normal",
    }


@pytest.fixture()
def api(session_factory, fake_client):
    """FastAPI TestClient wired to the in-memory database and fake generator."""
    from fastapi.testclient import TestClient
    from dischargeflow.main import app
    from dischargeflow.models.base import get_db
    from dischargeflow.services.generation_client import get_generation_client

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_generation_client] = lambda: fake_client
    try:
        yield TestClient(app, raise_server_exceptions=False)
    finally:
        app.dependency_overrides.clear()
