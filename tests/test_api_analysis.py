"""API tests for the AI-backed endpoints, in demo mode and with a stub model.

Run with:  python -m pytest tests/test_api_analysis.py -v
"""

import json
from datetime import date

import pytest

from conftest import PATIENT_PROFILE
from fertility_planner.config import settings
from fertility_planner.models.records import ManualDataEntry, MedicalFile, TimelineEvent

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


# ── /generate-recommendations ────────────────────────────────────────────
def test_recommendations_fallback_in_demo_mode(client):
    resp = client.post(
        "/api/generate-recommendations",
        json={"patientProfile": PATIENT_PROFILE, "patientCode": "SNTTEST01"},
    )
    body = resp.json()
    assert resp.status_code == 200
    assert body["fallback"] is True
    assert len(body["recommendations"]) == 3


def test_recommendations_from_model(client, fake_gemini):
    fake_gemini.reply = json.dumps({
        "recommendations": [
            {"title": "Check AMH", "description": "Baseline reserve", "priority": "high"},
            {"description": "No title given"},
            "not an object",
        ]
    })
    body = client.post(
        "/api/generate-recommendations",
        json={"patientProfile": PATIENT_PROFILE, "patientCode": "SNTTEST01"},
    ).json()
    assert body["fallback"] is False
    recs = body["recommendations"]
    assert len(recs) == 2
    assert recs[0]["title"] == "Check AMH"
    assert recs[0]["source"] == "ai_analysis"
    assert recs[1]["title"] == "Recommendation 2"
    assert recs[1]["priority"] == "medium"
    assert recs[1]["category"] == "treatment_considerations"
    assert "30-34" in fake_gemini.calls[0]["prompt"]


@pytest.mark.parametrize("payload,code", [
    ({"patientCode": "SNTTEST01"}, "MISSING_PATIENT_PROFILE"),
    ({"patientProfile": PATIENT_PROFILE}, "MISSING_PATIENT_CODE"),
])
def test_recommendations_validation(client, payload, code):
    resp = client.post("/api/generate-recommendations", json=payload)
    assert resp.status_code == 400
    assert resp.json()["errorCode"] == code


# ── /analyze-medical-image ───────────────────────────────────────────────
def _upload_image(client, content_type="image/png", data=PNG, **form):
    fields = {"category": "ultrasound", "patientCode": "SNTTEST01"}
    fields.update(form)
    return client.post(
        "/api/analyze-medical-image",
        files={"file": ("scan.png", data, content_type)},
        data={k: v for k, v in fields.items() if v is not None},
    )


def test_image_fallback_records_failed_file(client, patient_code, rows):
    resp = _upload_image(client)
    body = resp.json()
    assert resp.status_code == 200
    assert body["fallback"] is True
    assert body["analysis"]["confidence"] == 0.0
    assert body["analysis"]["error_note"] == "AI analysis temporarily unavailable"
    assert "afc_total" in body["analysis"]

    files = rows(MedicalFile)
    assert len(files) == 1
    assert files[0]["analysisStatus"] == "failed"
    assert files[0]["fileSize"] == len(PNG)


def test_image_analysis_from_model(client, patient_code, fake_gemini, rows):
    fake_gemini.reply = '{"afc_total": 12, "quality_assessment": "good"}'
    body = _upload_image(client, category="unknown_kind").json()
    assert body["analysis"] == {"afc_total": 12, "quality_assessment": "good"}
    assert "fallback" not in body
    assert fake_gemini.calls[0]["attachment"] == (PNG, "image/png")
    assert rows(MedicalFile)[0]["analysisStatus"] == "completed"


def test_image_for_unknown_patient_is_not_recorded(client, rows):
    resp = _upload_image(client, patientCode="SNTNOPE00")
    assert resp.status_code == 200
    assert rows(MedicalFile) == []


def test_image_missing_file(client):
    resp = client.post(
        "/api/analyze-medical-image",
        data={"category": "ultrasound", "patientCode": "SNTTEST01"},
    )
    assert resp.status_code == 400
    assert resp.json()["errorCode"] == "MISSING_FILE"


@pytest.mark.parametrize("form,code", [
    ({"category": None}, "MISSING_CATEGORY"),
    ({"patientCode": None}, "MISSING_PATIENT_CODE"),
])
def test_image_missing_fields(client, form, code):
    resp = _upload_image(client, **form)
    assert resp.status_code == 400
    assert resp.json()["errorCode"] == code


def test_image_unsupported_type(client):
    resp = _upload_image(client, content_type="application/pdf")
    assert resp.status_code == 400
    assert resp.json()["errorCode"] == "UNSUPPORTED_IMAGE_TYPE"


def test_image_too_large(client, monkeypatch):
    monkeypatch.setattr(settings, "MAX_IMAGE_BYTES", 16)
    resp = _upload_image(client)
    assert resp.status_code == 400
    assert resp.json()["errorCode"] == "FILE_TOO_LARGE"


# ── /process-medical-file ────────────────────────────────────────────────
def _upload_document(client, patient_code="SNTTEST01"):
    return client.post(
        "/api/process-medical-file",
        files={"file": ("report.pdf", b"%PDF-1.4 test", "application/pdf")},
        data={"patientCode": patient_code},
    )


def test_document_fallback_creates_dated_event(client, patient_code, rows):
    body = _upload_document(client).json()
    assert body["fallback"] is True
    assert body["extractedData"]["date"] == date.today().isoformat()
    events = body["timelineEvents"]
    assert len(events) == 1
    assert events[0]["title"] == "Medical Report - report.pdf"

    stored = rows(TimelineEvent)
    assert [e["id"] for e in stored] == [events[0]["id"]]
    assert rows(MedicalFile)[0]["analysisStatus"] == "failed"


def test_document_extraction_from_model(client, patient_code, fake_gemini, rows):
    fake_gemini.reply = json.dumps({
        "date": "2024-03-01",
        "type": "Blood Test",
        "findings": "AMH 2.1 ng/mL",
        "category": "lab_results",
    })
    body = _upload_document(client).json()
    event = body["timelineEvents"][0]
    assert event["title"] == "Blood Test - report.pdf"
    assert event["category"] == "lab_results"
    assert event["details"] == "AMH 2.1 ng/mL"

    stored = rows(TimelineEvent)[0]
    assert stored["date"] == "2024-03-01T00:00:00"
    assert stored["sourceFile"] == "report.pdf"


def test_document_without_date_creates_no_event(client, patient_code, fake_gemini, rows):
    fake_gemini.reply = '{"findings": "illegible"}'
    body = _upload_document(client).json()
    assert body["timelineEvents"] == []
    assert rows(TimelineEvent) == []
    assert len(rows(MedicalFile)) == 1


def test_document_for_unknown_patient_still_answers(client, rows):
    body = _upload_document(client, patient_code="SNTNOPE00").json()
    assert body["success"] is True
    assert len(body["timelineEvents"]) == 1
    assert body["timelineEvents"][0]["id"]
    assert rows(TimelineEvent) == []
    assert rows(MedicalFile) == []


def test_document_requires_file_and_code(client):
    resp = client.post("/api/process-medical-file", data={"patientCode": "SNTTEST01"})
    assert resp.status_code == 400
    assert resp.json()["errorCode"] == "MISSING_FILE_OR_PATIENT_CODE"


# ── /manual-data-entry ───────────────────────────────────────────────────
def test_structured_entry_creates_timeline_event(client, patient_code, rows):
    body = client.post("/api/manual-data-entry", json={
        "patientCode": patient_code,
        "entryType": "lab_results",
        "structuredData": {"date": "2024-02-01", "findings": "FSH 6.2"},
    }).json()
    assert body["timelineCreated"] is True
    assert body["dataEntry"]["confidence"] == 1.0
    assert body["dataEntry"]["aiProcessed"] is False

    event = rows(TimelineEvent)[0]
    assert event["title"] == "lab results - Manual Entry"
    assert event["category"] == "lab_results"
    assert rows(ManualDataEntry)[0]["timelineEventId"] == event["id"]


def test_free_text_entry_falls_back(client, patient_code):
    text = "AMH " + "x" * 300
    body = client.post("/api/manual-data-entry", json={
        "patientCode": patient_code,
        "entryType": "ultrasound",
        "originalText": text,
    }).json()
    assert body["dataEntry"]["confidence"] == 0.1
    assert body["dataEntry"]["aiProcessed"] is True
    assert body["structuredData"]["findings"] == text[:200] + "..."
    assert body["timelineCreated"] is True


def test_free_text_entry_parsed_by_model(client, patient_code, fake_gemini):
    fake_gemini.reply = json.dumps({
        "extracted_data": {"date": "2024-01-10", "values": [{"name": "AMH"}]},
        "confidence": 0.9,
    })
    body = client.post("/api/manual-data-entry", json={
        "patientCode": patient_code,
        "entryType": "lab_results",
        "originalText": "AMH 2.1 on 10 Jan",
    }).json()
    assert body["dataEntry"]["confidence"] == 0.9
    assert body["timelineCreated"] is False


@pytest.mark.parametrize("payload,status,code", [
    ({"entryType": "lab_results", "originalText": "x"}, 400, "MISSING_PATIENT_CODE"),
    ({"patientCode": "SNTTEST01", "originalText": "x"}, 400, "MISSING_ENTRY_TYPE"),
    ({"patientCode": "SNTTEST01", "entryType": "lab_results"}, 400, "MISSING_DATA"),
    ({"patientCode": "SNTNOPE00", "entryType": "lab_results", "originalText": "x"},
     404, "PATIENT_NOT_FOUND"),
])
def test_manual_entry_errors(client, patient_code, payload, status, code):
    resp = client.post("/api/manual-data-entry", json=payload)
    assert resp.status_code == status
    assert resp.json()["errorCode"] == code


def test_list_manual_entries(client, patient_code):
    for findings in ("one", "two"):
        client.post("/api/manual-data-entry", json={
            "patientCode": patient_code,
            "entryType": "lab_results",
            "structuredData": {"findings": findings},
        })
    body = client.get("/api/manual-data-entry", params={"patientCode": patient_code}).json()
    assert body["total"] == 2
    assert {e["structuredData"]["findings"] for e in body["dataEntries"]} == {"one", "two"}
