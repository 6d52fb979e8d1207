"""API tests for patient records, pathways, interface mode and health.

Run with:  python -m pytest tests/test_api_patients.py -v
"""

import pytest

from conftest import PATIENT_CODE, PATIENT_PROFILE
from fertility_planner.core import patient_db
from fertility_planner.core.database import SessionLocal
from fertility_planner.models.records import Patient, TreatmentPathway


# ── Health ───────────────────────────────────────────────────────────────
def test_health(client):
    assert client.get("/api/health").json() == {"status": "ok"}


def test_ai_health_in_demo_mode(client):
    resp = client.get("/api/health/ai")
    assert resp.status_code == 503
    assert resp.json()["errorCode"] == "AI_UNAVAILABLE"


def test_ai_health_when_configured(client, fake_gemini):
    resp = client.get("/api/health/ai")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


# ── Save / fetch ─────────────────────────────────────────────────────────
def test_save_computes_pathways_when_omitted(client, rows):
    resp = client.post("/api/save-patient-record", json={"patientProfile": PATIENT_PROFILE})
    body = resp.json()
    assert resp.status_code == 200
    assert body["success"] is True
    assert body["patientCode"] == PATIENT_CODE
    assert body["pathwaysSaved"] == 3
    assert len(rows(TreatmentPathway)) == 3


def test_resave_replaces_pathways(client, rows):
    client.post("/api/save-patient-record", json={"patientProfile": PATIENT_PROFILE})
    client.post(
        "/api/save-patient-record",
        json={
            "patientProfile": PATIENT_PROFILE,
            "treatmentPathways": [{"name": "Custom", "suitability": 70, "priority": 2}],
        },
    )
    stored = rows(TreatmentPathway)
    assert [p["name"] for p in stored] == ["Custom"]
    assert len(rows(Patient)) == 1


def test_equal_priority_pathways_ordered_by_suitability(client):
    client.post(
        "/api/save-patient-record",
        json={
            "patientProfile": PATIENT_PROFILE,
            "treatmentPathways": [
                {"name": "Low", "suitability": 80, "priority": 1},
                {"name": "High", "suitability": 95, "priority": 1},
                {"name": "Tier2", "suitability": 70, "priority": 2},
            ],
        },
    )
    body = client.get(f"/api/patients/{PATIENT_CODE}").json()
    assert [p["name"] for p in body["pathways"]] == ["High", "Low", "Tier2"]

    chapters = client.post(
        "/api/generate-story-board", json={"patientCode": PATIENT_CODE}
    ).json()["storyBoard"]
    assert chapters[2]["title"] == "Your High Treatment Plan"


def test_get_patient_round_trips_profile(client, patient_code):
    resp = client.get(f"/api/patients/{patient_code}")
    body = resp.json()
    assert resp.status_code == 200
    assert body["patient"]["patientCode"] == patient_code
    assert body["profile"]["femaleProfile"]["conditions"] == ["pcos"]
    assert body["profile"]["coupleHistory"]["timeTrying"] == "1-2 years"
    assert [p["priority"] for p in body["pathways"]] == sorted(
        p["priority"] for p in body["pathways"]
    )


def test_get_unknown_patient_404(client):
    resp = client.get("/api/patients/SNTNOPE00")
    assert resp.status_code == 404
    assert resp.json() == {
        "success": False,
        "error": "Patient not found",
        "errorCode": "PATIENT_NOT_FOUND",
    }


@pytest.mark.parametrize("payload,code", [
    ({}, "MISSING_PATIENT_PROFILE"),
    ({"patientProfile": {"femaleProfile": {"age": "30-34"}}}, "MISSING_PATIENT_CODE"),
    ({"patientProfile": {"patientCode": ""}}, "MISSING_PATIENT_CODE"),
])
def test_save_requires_profile_and_code(client, payload, code):
    resp = client.post("/api/save-patient-record", json=payload)
    assert resp.status_code == 400
    assert resp.json()["errorCode"] == code


def test_malformed_body_is_400(client):
    resp = client.post("/api/save-patient-record", json={"patientProfile": "oops"})
    assert resp.status_code == 400
    body = resp.json()
    assert body["errorCode"] == "INVALID_REQUEST"
    assert body["details"]


# ── Pure calculation ─────────────────────────────────────────────────────
def test_calculate_pathways_is_camel_case(client, rows):
    resp = client.post(
        "/api/calculate-pathways",
        json={"patientProfile": {"coupleHistory": {"previousTreatments": "ivf"}}},
    )
    pathways = resp.json()["pathways"]
    assert len(pathways) == 4
    assert {"successRate", "costMin", "costMax", "suitability"} <= set(pathways[0])
    assert rows(Patient) == []


def test_calculate_pathways_requires_profile(client):
    resp = client.post("/api/calculate-pathways", json={})
    assert resp.json()["errorCode"] == "MISSING_PATIENT_PROFILE"


# ── Interface mode ───────────────────────────────────────────────────────
def test_toggle_interface_mode(client, patient_code, rows):
    resp = client.post(
        "/api/toggle-interface-mode",
        json={"patientCode": patient_code, "interfaceMode": "doctor"},
    )
    assert resp.json()["interfaceMode"] == "doctor"
    assert rows(Patient)[0]["interfaceMode"] == "doctor"


@pytest.mark.parametrize("payload,status,code", [
    ({"interfaceMode": "doctor"}, 400, "MISSING_PATIENT_CODE"),
    ({"patientCode": PATIENT_CODE}, 400, "MISSING_INTERFACE_MODE"),
    ({"patientCode": PATIENT_CODE, "interfaceMode": "admin"}, 400, "INVALID_INTERFACE_MODE"),
    ({"patientCode": "SNTNOPE00", "interfaceMode": "doctor"}, 404, "PATIENT_NOT_FOUND"),
])
def test_toggle_interface_mode_errors(client, patient_code, payload, status, code):
    resp = client.post("/api/toggle-interface-mode", json=payload)
    assert resp.status_code == status
    assert resp.json()["errorCode"] == code


# ── Store helpers ────────────────────────────────────────────────────────
def test_seed_demo_patient_is_idempotent(rows):
    with SessionLocal() as db:
        patient_db.seed_demo_patient(db)
        patient_db.seed_demo_patient(db)
    patients = rows(Patient)
    assert [p["patientCode"] for p in patients] == [patient_db.DEMO_PATIENT_CODE]
    assert len(rows(TreatmentPathway)) == 3


@pytest.mark.parametrize("value,expected", [
    ("2024-03-01", "2024-03-01T00:00:00"),
    ("2024-03-01T10:30:00Z", "2024-03-01T10:30:00"),
    ("2024-03-01T12:30:00+02:00", "2024-03-01T10:30:00"),
    ("", None),
    (None, None),
    ("next tuesday", None),
])
def test_parse_date(value, expected):
    parsed = patient_db.parse_date(value)
    assert (parsed.isoformat() if parsed else None) == expected


def test_generated_codes_are_prefixed():
    codes = {patient_db.generate_patient_code() for _ in range(20)}
    assert all(c.startswith("SNT") and len(c) == 9 for c in codes)
    assert len(codes) > 1
