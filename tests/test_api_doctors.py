"""API tests for POST /api/find-doctors.

Run with:  python -m pytest tests/test_api_doctors.py -v
"""

import pytest

from fertility_planner.models.records import DoctorRecommendation, Patient

MUMBAI = {"lat": 19.0596, "lng": 72.8295}


def _search(client, **overrides):
    payload = {
        "patientCode": "SNTTEST01",
        "zipCode": "400050",
        "preferredGender": "female",
        "experienceLevel": "senior",
        "specialization": "reproductive_endocrinology",
        "coordinates": MUMBAI,
    }
    payload.update(overrides)
    return client.post("/api/find-doctors", json=payload)


def test_find_doctors_ranks_and_persists(client, patient_code, rows):
    resp = _search(client)
    body = resp.json()
    assert resp.status_code == 200
    recommendations = body["recommendations"]
    assert recommendations[0]["doctorName"] == "Dr. Priya Sharma"
    assert len(recommendations) == 5
    assert body["searchCriteria"]["zipCode"] == "400050"
    assert body["searchCriteria"]["maxDistance"] == 50

    snapshots = rows(DoctorRecommendation)
    assert len(snapshots) == 5
    assert all(0 <= s["matchScore"] <= 100 for s in snapshots)

    patient = rows(Patient)[0]
    assert patient["zipCode"] == "400050"
    assert patient["preferredGender"] == "female"
    assert patient["locationData"]["coordinates"] == MUMBAI
    assert patient["locationData"]["searchRadius"] == 50


def test_repeat_searches_accumulate_snapshots(client, patient_code, rows):
    _search(client)
    _search(client, maxDistance=500)
    assert len(rows(DoctorRecommendation)) == 10
    assert rows(Patient)[0]["locationData"]["searchRadius"] == 500


def test_without_coordinates_uses_postal_estimate(client, patient_code):
    body = _search(client, coordinates=None).json()
    for doctor in body["recommendations"]:
        assert 1 <= doctor["distance"] <= 300


@pytest.mark.parametrize("overrides,status,code", [
    ({"patientCode": ""}, 400, "MISSING_PATIENT_CODE"),
    ({"patientCode": None, "zipCode": None}, 400, "MISSING_PATIENT_CODE"),
    ({"zipCode": ""}, 400, "MISSING_ZIP_CODE"),
    ({"patientCode": "SNTNOPE00"}, 404, "PATIENT_NOT_FOUND"),
])
def test_find_doctors_errors(client, patient_code, overrides, status, code):
    resp = _search(client, **overrides)
    assert resp.status_code == status
    assert resp.json()["errorCode"] == code
