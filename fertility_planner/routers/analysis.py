"""
Analysis Router

AI-backed endpoints.  Each one answers successfully even when Gemini is
unavailable, substituting fixed fallback content:
  POST /generate-recommendations - Clinical recommendations for a profile
  POST /analyze-medical-image    - Vision analysis of an uploaded image
  POST /process-medical-file     - Timeline extraction from a medical document
  POST /manual-data-entry        - Store typed-in results (AI-parsed if free text)
  GET  /manual-data-entry        - Recent manual entries for a patient
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from sqlalchemy.orm import Session

from fertility_planner.config import settings
from fertility_planner.core import patient_db
from fertility_planner.core.ai_proxy import complete_json
from fertility_planner.core.database import get_db
from fertility_planner.core.errors import BadRequestError, require
from fertility_planner.models.records import ManualDataEntry
from fertility_planner.models.schemas import ManualDataEntryRequest, RecommendationsRequest
from fertility_planner.prompts.documents import (
    DOCUMENT_EXTRACTION_PROMPT,
    build_manual_entry_prompt,
    document_fallback,
    manual_entry_fallback,
)
from fertility_planner.prompts.medical_image import (
    SUPPORTED_IMAGE_TYPES,
    image_fallback_for,
    image_prompt_for,
)
from fertility_planner.prompts.recommendations import (
    SAMPLE_RECOMMENDATIONS,
    build_recommendations_prompt,
)

logger = logging.getLogger(__name__)

router = APIRouter()

MANUAL_ENTRY_LIMIT = 50
DEFAULT_DOCUMENT_MIME = "application/pdf"


def _short_id() -> str:
    return uuid.uuid4().hex[:9]


# ── POST /generate-recommendations ─────────────────────────────────────────

def _format_recommendation(rec: dict, index: int) -> dict:
    return {
        "id": _short_id(),
        "category": rec.get("category") or "treatment_considerations",
        "title": rec.get("title") or f"Recommendation {index + 1}",
        "description": rec.get("description") or "",
        "priority": rec.get("priority") or "medium",
        "reasoning": rec.get("reasoning"),
        "source": "ai_analysis",
        "isActionable": True,
    }


@router.post("/generate-recommendations")
async def generate_recommendations(body: RecommendationsRequest) -> dict:
    profile = require(
        body.patient_profile, "Patient profile is required", "MISSING_PATIENT_PROFILE"
    )
    require(body.patient_code, "Patient code is required", "MISSING_PATIENT_CODE")

    result = await complete_json(
        build_recommendations_prompt(profile),
        fallback={"recommendations": SAMPLE_RECOMMENDATIONS},
    )
    if result.fallback_used:
        return {
            "success": True,
            "recommendations": result.payload["recommendations"],
            "fallback": True,
            "message": "Sample recommendations provided (AI service unavailable)",
        }

    raw = result.payload.get("recommendations") if isinstance(result.payload, dict) else None
    recommendations = [
        _format_recommendation(rec, i)
        for i, rec in enumerate(raw or [])
        if isinstance(rec, dict)
    ]
    return {
        "success": True,
        "recommendations": recommendations,
        "fallback": False,
        "message": "Clinical recommendations generated successfully",
    }


# ── POST /analyze-medical-image ────────────────────────────────────────────

@router.post("/analyze-medical-image")
async def analyze_medical_image(
    file: Optional[UploadFile] = File(None),
    category: Optional[str] = Form(None),
    patient_code: Optional[str] = Form(None, alias="patientCode"),
    db: Session = Depends(get_db),
) -> dict:
    """Run a category-specific vision prompt over an uploaded image.

    Validation happens in order: file, category, patient code, image type,
    size.  The upload is recorded against the patient when the code exists.
    """
    if file is None or not file.filename:
        raise BadRequestError("No file provided", "MISSING_FILE")
    require(category, "Category is required", "MISSING_CATEGORY")
    require(patient_code, "Patient code is required", "MISSING_PATIENT_CODE")

    mime_type = file.content_type or ""
    if mime_type not in SUPPORTED_IMAGE_TYPES:
        raise BadRequestError(
            f"Unsupported image type: {mime_type or 'unknown'}",
            "UNSUPPORTED_IMAGE_TYPE",
        )

    data = await file.read()
    if len(data) > settings.MAX_IMAGE_BYTES:
        raise BadRequestError(
            f"File too large: {len(data) / 1024 / 1024:.2f}MB. Maximum allowed: "
            f"{settings.MAX_IMAGE_BYTES // (1024 * 1024)}MB",
            "FILE_TOO_LARGE",
        )

    result = await complete_json(
        image_prompt_for(category),
        fallback=image_fallback_for(category),
        attachment=(data, mime_type),
        max_output_tokens=1500,
    )

    patient_db.record_medical_file(
        db,
        patient_code,
        file_name=file.filename,
        file_type=mime_type,
        file_size=len(data),
        category=category,
        extracted_data=result.payload,
        analysis_status="failed" if result.fallback_used else "completed",
        error_message=result.error,
        processing_time=result.elapsed_ms,
    )

    response: dict[str, Any] = {
        "success": True,
        "analysis": result.payload,
        "category": category,
        "fileName": file.filename,
        "processingTime": result.elapsed_ms,
        "message": "Medical image analyzed successfully",
    }
    if result.fallback_used:
        response.update(
            fallback=True,
            errorDetails=result.error,
            message="Image uploaded successfully. AI analysis will be available shortly.",
        )
    return response


# ── POST /process-medical-file ─────────────────────────────────────────────

@router.post("/process-medical-file")
async def process_medical_file(
    file: Optional[UploadFile] = File(None),
    patient_code: Optional[str] = Form(None, alias="patientCode"),
    db: Session = Depends(get_db),
) -> dict:
    if file is None or not file.filename or not patient_code:
        raise BadRequestError(
            "File and patient code are required", "MISSING_FILE_OR_PATIENT_CODE"
        )

    data = await file.read()
    mime_type = file.content_type or DEFAULT_DOCUMENT_MIME
    result = await complete_json(
        DOCUMENT_EXTRACTION_PROMPT,
        fallback=document_fallback(),
        attachment=(data, mime_type),
    )
    extracted = result.payload if isinstance(result.payload, dict) else document_fallback()

    if result.fallback_used:
        event = {
            "date": extracted["date"],
            "title": f"Medical Report - {file.filename}",
            "category": "consultation",
            "details": "Medical document uploaded for review",
            "sourceFile": file.filename,
        }
    elif extracted.get("date") and extracted.get("type"):
        event = {
            "date": extracted["date"],
            "title": extracted.get("title") or f"{extracted['type']} - {file.filename}",
            "category": extracted.get("category") or "consultation",
            "details": extracted.get("details") or extracted.get("findings"),
            "sourceFile": file.filename,
            "extractedData": extracted,
        }
    else:
        event = None

    patient = patient_db.get_patient(db, patient_code)
    timeline_events = []
    if event is not None:
        if patient is not None:
            row = patient_db.add_timeline_event(
                db,
                patient,
                title=event["title"],
                category=event["category"],
                details=event["details"],
                when=patient_db.parse_date(event["date"]),
                source_file=file.filename,
                extracted_data=extracted,
            )
            if row is not None:
                event["id"] = row.id
        event.setdefault("id", _short_id())
        timeline_events.append(event)

    if patient is not None:
        patient_db.record_medical_file(
            db,
            patient_code,
            file_name=file.filename,
            file_type=mime_type,
            file_size=len(data),
            category=extracted.get("category"),
            extracted_data=extracted,
            analysis_status="failed" if result.fallback_used else "completed",
            error_message=result.error,
            processing_time=result.elapsed_ms,
        )
        db.commit()

    return {
        "success": True,
        "extractedData": extracted,
        "timelineEvents": timeline_events,
        "fallback": result.fallback_used,
        "message": (
            "File uploaded successfully (using sample processing)"
            if result.fallback_used
            else "Medical file processed successfully"
        ),
    }


# ── POST /manual-data-entry ────────────────────────────────────────────────

@router.post("/manual-data-entry")
async def create_manual_entry(
    body: ManualDataEntryRequest,
    db: Session = Depends(get_db),
) -> dict:
    code = require(body.patient_code, "Patient code is required", "MISSING_PATIENT_CODE")
    entry_type = require(body.entry_type, "Entry type is required", "MISSING_ENTRY_TYPE")
    if not body.original_text and not body.structured_data:
        raise BadRequestError(
            "Either original text or structured data is required", "MISSING_DATA"
        )
    patient = patient_db.require_patient(db, code)

    structured = body.structured_data
    ai_extracted = None
    confidence = 1.0
    if body.original_text and not structured:
        fallback = manual_entry_fallback(body.original_text, entry_type)
        result = await complete_json(
            build_manual_entry_prompt(body.original_text, entry_type),
            fallback=fallback,
        )
        ai_extracted = result.payload if isinstance(result.payload, dict) else fallback
        structured = ai_extracted.get("extracted_data")
        if not isinstance(structured, dict):
            structured = {}
        confidence = ai_extracted.get("confidence") or 0.5

    entry = ManualDataEntry(
        patient_id=patient.id,
        entry_type=entry_type,
        source_type=body.source_type or "manual_entry",
        original_text=body.original_text,
        structured_data=structured,
        ai_processed=bool(body.original_text),
        ai_extracted=ai_extracted,
        confidence=confidence,
        test_date=patient_db.parse_date(body.test_date),
        facility_name=body.facility_name,
        doctor_name=body.doctor_name,
    )
    db.add(entry)
    db.flush()

    event = None
    if structured.get("date") and structured.get("findings"):
        event = patient_db.add_timeline_event(
            db,
            patient,
            title=f"{entry_type.replace('_', ' ')} - Manual Entry",
            category="lab_results" if entry_type == "lab_results" else "consultation",
            details=structured["findings"],
            when=patient_db.parse_date(structured["date"]),
            source_file="Manual Data Entry",
            extracted_data=structured,
        )
        if event is not None:
            entry.timeline_event_id = event.id
    db.commit()

    return {
        "success": True,
        "dataEntry": {
            "id": entry.id,
            "entryType": entry.entry_type,
            "confidence": entry.confidence,
            "aiProcessed": entry.ai_processed,
        },
        "structuredData": structured,
        "timelineCreated": event is not None,
        "message": "Data entry created successfully",
    }


# ── GET /manual-data-entry ─────────────────────────────────────────────────

@router.get("/manual-data-entry")
def list_manual_entries(
    patient_code: Optional[str] = Query(None, alias="patientCode"),
    db: Session = Depends(get_db),
) -> dict:
    code = require(patient_code, "Patient code is required", "MISSING_PATIENT_CODE")
    patient = patient_db.require_patient(db, code)
    entries = (
        db.query(ManualDataEntry)
        .filter(ManualDataEntry.patient_id == patient.id)
        .order_by(ManualDataEntry.entry_date.desc())
        .limit(MANUAL_ENTRY_LIMIT)
        .all()
    )
    return {
        "success": True,
        "dataEntries": [e.to_dict() for e in entries],
        "total": len(entries),
    }
