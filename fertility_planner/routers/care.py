"""
Care Router

Remote care, provider review and treatment-choice tracking:
  POST /remote-care-session       - Request a remote care session
  GET  /remote-care-session       - A patient's sessions, newest first
  PUT  /remote-care-session       - Provider-side session update
  GET  /provider-dashboard        - Work queue and statistics for a provider
  POST /provider-dashboard        - Submit a provider review
  POST /patient-choice-tracking   - Record (or revise) the chosen treatment
  GET  /patient-choice-tracking   - Choice history and the current choice

Every create also writes a best-effort timeline event for the patient.
"""

import logging
from datetime import timedelta
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import case, func, select
from sqlalchemy.orm import Session

from fertility_planner.core import patient_db
from fertility_planner.core.database import get_db
from fertility_planner.core.errors import MissingFieldError, NotFoundError, require
from fertility_planner.models.records import (
    MedicalFile,
    Patient,
    PatientChoice,
    ProviderReview,
    RemoteCareSession,
    utcnow,
)
from fertility_planner.models.schemas import (
    PatientChoiceRequest,
    ProviderReviewCreate,
    RemoteCareSessionCreate,
    RemoteCareSessionUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter()

DEFAULT_PROVIDER_ID = "default_provider"
OPEN_URGENT_STATUSES = ("pending", "requires_attention")
RECENT_REVIEW_LIMIT = 20
URGENT_PATIENT_LIMIT = 10
RECENT_FILE_LIMIT = 15
RECENT_FILE_DAYS = 7

# Dashboard ordering: most pressing first
_PRIORITY_RANK = case(
    {"urgent": 0, "high": 1, "normal": 2, "low": 3},
    value=RemoteCareSession.priority,
    else_=4,
)


def _patient_summary(patient: Patient) -> dict:
    return {
        "patientCode": patient.patient_code,
        "femaleAge": patient.female_age,
        "currentPhase": patient.current_phase,
    }


# ── /remote-care-session ───────────────────────────────────────────────────

@router.post("/remote-care-session")
def create_remote_session(
    body: RemoteCareSessionCreate,
    db: Session = Depends(get_db),
) -> dict:
    code = require(body.patient_code, "Patient code is required", "MISSING_PATIENT_CODE")
    session_type = require(
        body.session_type, "Session type is required", "MISSING_SESSION_TYPE"
    )
    title = require(body.title, "Session title is required", "MISSING_TITLE")
    patient = patient_db.require_patient(db, code)

    scheduled = patient_db.parse_date(body.scheduled_date)
    care_session = RemoteCareSession(
        patient_id=patient.id,
        session_type=session_type,
        title=title,
        description=body.description,
        category=body.category or "monitoring",
        can_be_remote=body.can_be_remote is not False,
        requires_in_person=body.requires_in_person is True,
        uploaded_files=body.uploaded_files,
        scheduled_date=scheduled,
        priority=body.priority or "normal",
        status="pending",
    )
    db.add(care_session)
    db.flush()

    patient_db.add_timeline_event(
        db,
        patient,
        title=f"Remote Care: {title}",
        category=body.category or "consultation",
        details=body.description or f"{session_type} session scheduled",
        when=scheduled,
        source_file="Remote Care Session",
        extracted_data={
            "session_type": session_type,
            "can_be_remote": body.can_be_remote,
            "requires_in_person": body.requires_in_person,
            "priority": body.priority,
        },
    )
    db.commit()

    return {
        "success": True,
        "remoteCareSession": {
            "id": care_session.id,
            "sessionType": care_session.session_type,
            "title": care_session.title,
            "status": care_session.status,
            "scheduledDate": scheduled.isoformat() if scheduled else None,
            "canBeRemote": care_session.can_be_remote,
        },
        "message": "Remote care session created successfully",
    }


@router.get("/remote-care-session")
def list_remote_sessions(
    patient_code: Optional[str] = Query(None, alias="patientCode"),
    status: Optional[str] = None,
    db: Session = Depends(get_db),
) -> dict:
    code = require(patient_code, "Patient code is required", "MISSING_PATIENT_CODE")
    patient = patient_db.require_patient(db, code)

    query = db.query(RemoteCareSession).filter(RemoteCareSession.patient_id == patient.id)
    if status:
        query = query.filter(RemoteCareSession.status == status)
    sessions = query.order_by(RemoteCareSession.created_at.desc()).all()
    return {
        "success": True,
        "remoteCareSessions": [s.to_dict() for s in sessions],
        "total": len(sessions),
    }


@router.put("/remote-care-session")
def update_remote_session(
    body: RemoteCareSessionUpdate,
    db: Session = Depends(get_db),
) -> dict:
    session_id = require(body.session_id, "Session ID is required", "MISSING_SESSION_ID")
    care_session = db.get(RemoteCareSession, session_id)
    if care_session is None:
        raise NotFoundError("Remote care session not found", "SESSION_NOT_FOUND")

    now = utcnow()
    if body.status:
        care_session.status = body.status
        if body.status == "completed":
            care_session.completed_date = now
    if body.reviewed_by:
        care_session.reviewed_by = body.reviewed_by
        care_session.reviewed_at = now
    if body.provider_notes:
        care_session.provider_notes = body.provider_notes
    if body.recommendations:
        care_session.recommendations = body.recommendations
    if body.follow_up_required is not None:
        care_session.follow_up_required = body.follow_up_required
    if body.follow_up_type:
        care_session.follow_up_type = body.follow_up_type
    if body.follow_up_date:
        care_session.follow_up_date = patient_db.parse_date(body.follow_up_date)
    if body.priority:
        care_session.priority = body.priority
    db.commit()

    return {
        "success": True,
        "remoteCareSession": care_session.to_dict(),
        "message": "Remote care session updated successfully",
    }


# ── /provider-dashboard ────────────────────────────────────────────────────

@router.get("/provider-dashboard")
def provider_dashboard(
    provider_id: Optional[str] = Query(None, alias="providerId"),
    urgency: Optional[str] = None,
    status: Optional[str] = None,
    db: Session = Depends(get_db),
) -> dict:
    """Sessions needing attention, recent reviews and headline counts."""
    provider_id = provider_id or DEFAULT_PROVIDER_ID
    now = utcnow()

    sessions_query = db.query(RemoteCareSession)
    if urgency:
        sessions_query = sessions_query.filter(RemoteCareSession.priority == urgency)
    if status:
        sessions_query = sessions_query.filter(RemoteCareSession.status == status)
    sessions = sessions_query.order_by(
        _PRIORITY_RANK, RemoteCareSession.created_at.desc()
    ).all()

    reviews = (
        db.query(ProviderReview)
        .filter(ProviderReview.provider_id == provider_id)
        .order_by(ProviderReview.created_at.desc())
        .limit(RECENT_REVIEW_LIMIT)
        .all()
    )

    urgent_open = (
        RemoteCareSession.priority == "urgent",
        RemoteCareSession.status.in_(OPEN_URGENT_STATUSES),
    )
    urgent_ids = select(RemoteCareSession.patient_id).where(*urgent_open)
    urgent_patients = (
        db.query(Patient)
        .filter(Patient.id.in_(urgent_ids))
        .limit(URGENT_PATIENT_LIMIT)
        .all()
    )

    files = (
        db.query(MedicalFile)
        .filter(
            MedicalFile.analysis_status.in_(("failed", "completed")),
            MedicalFile.uploaded_at >= now - timedelta(days=RECENT_FILE_DAYS),
        )
        .order_by(MedicalFile.uploaded_at.desc())
        .limit(RECENT_FILE_LIMIT)
        .all()
    )

    def _count(model, *criteria) -> int:
        return db.query(func.count(model.id)).filter(*criteria).scalar()

    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    statistics = {
        "pendingSessions": _count(RemoteCareSession, RemoteCareSession.status == "pending"),
        "urgentSessions": _count(
            RemoteCareSession,
            RemoteCareSession.priority == "urgent",
            RemoteCareSession.status != "completed",
        ),
        "completedToday": _count(
            RemoteCareSession,
            RemoteCareSession.status == "completed",
            RemoteCareSession.completed_date >= midnight,
        ),
        "totalPatients": _count(Patient),
        "reviewsPending": _count(ProviderReview, ProviderReview.status == "draft"),
    }

    return {
        "success": True,
        "dashboard": {
            "pendingRemoteSessions": [
                {**s.to_dict(), "patient": _patient_summary(s.patient)} for s in sessions
            ],
            "recentReviews": [
                {**r.to_dict(), "patient": _patient_summary(r.patient)} for r in reviews
            ],
            "urgentPatients": [
                {
                    **_patient_summary(p),
                    "urgentSessions": [
                        s.to_dict()
                        for s in p.remote_care_sessions
                        if s.priority == "urgent" and s.status in OPEN_URGENT_STATUSES
                    ],
                }
                for p in urgent_patients
            ],
            "filesNeedingReview": [
                {**f.to_dict(), "patient": _patient_summary(f.patient)} for f in files
            ],
            "statistics": statistics,
        },
    }


@router.post("/provider-dashboard")
def create_provider_review(
    body: ProviderReviewCreate,
    db: Session = Depends(get_db),
) -> dict:
    code = require(body.patient_code, "Patient code is required", "MISSING_PATIENT_CODE")
    if not body.provider_id or not body.provider_name:
        raise MissingFieldError(
            "Provider ID and name are required", "MISSING_PROVIDER_INFO"
        )
    patient = patient_db.require_patient(db, code)

    review = ProviderReview(
        patient_id=patient.id,
        provider_id=body.provider_id,
        provider_name=body.provider_name,
        provider_role=body.provider_role or "doctor",
        review_type=body.review_type or "file_review",
        title=body.title or "Provider Review",
        findings=body.findings,
        recommendations=body.recommendations,
        reviewed_file_ids=body.reviewed_file_ids or [],
        urgency_level=body.urgency_level or "normal",
        action_required=body.action_required is True,
        action_items=body.action_items or [],
        treatment_changes=body.treatment_changes is True,
        new_recommendations=body.new_recommendations,
        status="submitted",
    )
    db.add(review)
    db.flush()

    patient_db.add_timeline_event(
        db,
        patient,
        title=f"Provider Review: {review.title}",
        category="consultation",
        details=body.findings or "Provider review completed",
        source_file="Provider Review",
        extracted_data={
            "provider": body.provider_name,
            "urgency": body.urgency_level,
            "action_required": body.action_required,
            "treatment_changes": body.treatment_changes,
        },
    )
    db.commit()

    return {
        "success": True,
        "providerReview": {
            "id": review.id,
            "title": review.title,
            "urgencyLevel": review.urgency_level,
            "actionRequired": review.action_required,
            "createdAt": review.created_at.isoformat(),
        },
        "message": "Provider review created successfully",
    }


# ── /patient-choice-tracking ───────────────────────────────────────────────

_CHOICE_FIELDS = (
    "choice_reason",
    "reasoning",
    "confidence",
    "cost_importance",
    "timeline_importance",
    "success_rate_importance",
    "invasiveness_importance",
    "alternatives_considered",
    "max_timeline_months",
    "additional_concerns",
    "partner_involvement",
)


@router.post("/patient-choice-tracking")
def record_patient_choice(
    body: PatientChoiceRequest,
    db: Session = Depends(get_db),
) -> dict:
    """Upsert the patient's open (pending or confirmed) choice as confirmed."""
    code = require(body.patient_code, "Patient code is required", "MISSING_PATIENT_CODE")
    selected = require(
        body.selected_option,
        "Selected treatment option is required",
        "MISSING_SELECTED_OPTION",
    )
    patient = patient_db.require_patient(db, code)

    choice = (
        db.query(PatientChoice)
        .filter(
            PatientChoice.patient_id == patient.id,
            PatientChoice.status.in_(("pending", "confirmed")),
        )
        .first()
    )
    if choice is None:
        choice = PatientChoice(patient_id=patient.id)
        db.add(choice)

    choice.treatment_pathway_id = body.treatment_pathway_id or ""
    choice.selected_option = selected
    for field in _CHOICE_FIELDS:
        setattr(choice, field, getattr(body, field))
    choice.preferred_start_date = patient_db.parse_date(body.preferred_start_date)
    choice.status = "confirmed"
    choice.last_modified = utcnow()
    db.flush()

    patient_db.add_timeline_event(
        db,
        patient,
        title=f"Treatment Choice: {selected}",
        category="consultation",
        details=(
            f"Patient selected {selected}. "
            f"Reasoning: {body.reasoning or 'Not specified'}"
        ),
        source_file="Patient Choice",
        extracted_data={
            "choice": selected,
            "reasons": body.choice_reason,
            "confidence": body.confidence,
            "preferences": {
                "cost": body.cost_importance,
                "timeline": body.timeline_importance,
                "success_rate": body.success_rate_importance,
                "invasiveness": body.invasiveness_importance,
            },
        },
    )
    db.commit()

    return {
        "success": True,
        "patientChoice": {
            "id": choice.id,
            "selectedOption": choice.selected_option,
            "confidence": choice.confidence,
            "status": choice.status,
            "decisionDate": choice.decision_date.isoformat(),
        },
        "message": "Patient choice recorded successfully",
    }


@router.get("/patient-choice-tracking")
def list_patient_choices(
    patient_code: Optional[str] = Query(None, alias="patientCode"),
    db: Session = Depends(get_db),
) -> dict:
    code = require(patient_code, "Patient code is required", "MISSING_PATIENT_CODE")
    patient = patient_db.require_patient(db, code)
    choices = (
        db.query(PatientChoice)
        .filter(PatientChoice.patient_id == patient.id)
        .order_by(PatientChoice.decision_date.desc())
        .all()
    )
    current = next((c for c in choices if c.status == "confirmed"), None)
    return {
        "success": True,
        "patientChoices": [c.to_dict() for c in choices],
        "currentChoice": current.to_dict() if current else None,
    }
