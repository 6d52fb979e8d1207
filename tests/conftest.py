"""Shared fixtures: in-memory database, API client and a stubbed Gemini."""

import os

# Must be set before fertility_planner.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SEED_DEMO_PATIENT"] = "false"
os.environ["GOOGLE_CLOUD_PROJECT"] = ""
os.environ.pop("GOOGLE_APPLICATION_CREDENTIALS", None)

import pytest
from fastapi.testclient import TestClient

from fertility_planner.core.database import Base, SessionLocal, engine, init_db
from fertility_planner.core.gemini_client import gemini_client
from fertility_planner.main import app
from fertility_planner.memory.session_store import session_store

PATIENT_CODE = "SNTTEST01"

PATIENT_PROFILE = {
    "patientCode": PATIENT_CODE,
    "femaleProfile": {
        "age": "30-34",
        "cycle": "regular",
        "conditions": ["pcos"],
        "lifestyle": {"smoking": "never"},
    },
    "maleProfile": {"age": "30-39", "conditions": []},
    "coupleHistory": {"timeTrying": "1-2 years", "previousTreatments": "none"},
    "holistic": {"emotionalState": "hopeful", "financialComfort": "150000-300000"},
}


class FakeGemini:
    """Records prompts and answers with ``reply`` (raised if an exception)."""

    def __init__(self) -> None:
        self.reply = "{}"
        self.calls = []

    async def generate(self, prompt, attachment=None, **kwargs):
        self.calls.append({"prompt": prompt, "attachment": attachment})
        if isinstance(self.reply, Exception):
            raise self.reply
        return self.reply


@pytest.fixture(autouse=True)
def fresh_state(monkeypatch):
    Base.metadata.drop_all(bind=engine)
    init_db()
    session_store.clear_all()
    # Demo mode unless a test opts into fake_gemini
    monkeypatch.setattr(gemini_client, "_initialized", False)
    yield
    session_store.clear_all()


@pytest.fixture
def fake_gemini(monkeypatch) -> FakeGemini:
    fake = FakeGemini()
    monkeypatch.setattr(gemini_client, "_initialized", True)
    monkeypatch.setattr(gemini_client, "generate", fake.generate)
    return fake


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


@pytest.fixture
def patient_code(client) -> str:
    resp = client.post("/api/save-patient-record", json={"patientProfile": PATIENT_PROFILE})
    assert resp.status_code == 200
    return PATIENT_CODE


@pytest.fixture
def rows():
    """Return rows(Model, **filter_by) -> list of to_dict() snapshots."""

    def _rows(model, **filters):
        with SessionLocal() as db:
            return [r.to_dict() for r in db.query(model).filter_by(**filters).all()]

    return _rows
