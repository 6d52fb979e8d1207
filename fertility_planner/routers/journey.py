"""
Journey Router

Treatment-journey content for a patient:
  POST  /journey-steps          - Regenerate step templates
  PATCH /journey-steps          - Update one step's status
  POST  /journey-milestone      - Record a milestone
  GET   /journey-milestone      - Milestones with overall progress
  PUT   /journey-milestone      - Partial milestone update
  POST  /personalized-timeline  - Generate (or refresh) an AI timeline
  GET   /personalized-timeline  - Stored timelines and the active one
  POST  /generate-story-board   - Regenerate the five story-board chapters
"""

import logging
from datetime import timedelta
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from fertility_planner.agents.timeline_workflow import run_timeline_generation
from fertility_planner.core import patient_db
from fertility_planner.core.database import get_db
from fertility_planner.core.errors import NotFoundError, require
from fertility_planner.core.journey_templates import (
    JOURNEY_COMPLETION_DAYS,
    journey_step_templates,
    story_board_chapters,
)
from fertility_planner.models.records import (
    JourneyMilestone,
    JourneyStep,
    PersonalizedTimeline,
    StoryBoardChapter,
    utcnow,
)
from fertility_planner.models.schemas import (
    JourneyStepsRequest,
    JourneyStepUpdate,
    MilestoneCreate,
    MilestoneUpdate,
    PersonalizedTimelineRequest,
    StoryBoardRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


# ── /journey-steps ─────────────────────────────────────────────────────────

@router.post("/journey-steps")
def generate_journey_steps(
    body: JourneyStepsRequest,
    db: Session = Depends(get_db),
) -> dict:
    """Replace the patient's journey steps with fresh templates."""
    code = require(body.patient_code, "Patient code is required", "MISSING_PATIENT_CODE")
    patient = patient_db.require_patient(db, code)
    treatment_type = body.treatment_type or "IVF"

    db.query(JourneyStep).filter(JourneyStep.patient_id == patient.id).delete(
        synchronize_session=False
    )
    steps = [
        JourneyStep(patient_id=patient.id, **template)
        for template in journey_step_templates(treatment_type)
    ]
    db.add_all(steps)

    patient.current_phase = patient.current_phase or 1
    patient.estimated_completion = utcnow() + timedelta(days=JOURNEY_COMPLETION_DAYS)
    db.commit()

    return {
        "success": True,
        "journeySteps": [s.to_dict() for s in steps],
        "totalSteps": len(steps),
        "currentStep": 1,
        "treatmentType": treatment_type,
        "message": f"Journey steps generated for {treatment_type} treatment",
    }


@router.patch("/journey-steps")
def update_journey_step(body: JourneyStepUpdate, db: Session = Depends(get_db)) -> dict:
    step_id = require(body.step_id, "Step ID is required", "MISSING_STEP_ID")
    status = require(body.status, "Status is required", "MISSING_STATUS")

    step = db.get(JourneyStep, step_id)
    if step is None:
        raise NotFoundError("Journey step not found", "STEP_NOT_FOUND")

    step.status = status
    if status == "completed":
        step.completed_date = patient_db.parse_date(body.completed_date) or utcnow()
    else:
        step.completed_date = None
    db.commit()

    return {"success": True, "step": step.to_dict(), "message": f"Step marked as {status}"}


# ── /journey-milestone ─────────────────────────────────────────────────────

@router.post("/journey-milestone")
def create_milestone(body: MilestoneCreate, db: Session = Depends(get_db)) -> dict:
    code = require(body.patient_code, "Patient code is required", "MISSING_PATIENT_CODE")
    milestone_type = require(
        body.milestone_type, "Milestone type is required", "MISSING_MILESTONE_TYPE"
    )
    title = require(body.title, "Milestone title is required", "MISSING_TITLE")
    patient = patient_db.require_patient(db, code)

    expected = patient_db.parse_date(body.expected_date)
    actual = patient_db.parse_date(body.actual_date)
    milestone = JourneyMilestone(
        patient_id=patient.id,
        milestone_type=milestone_type,
        title=title,
        description=body.description,
        category=body.category or "milestone",
        expected_date=expected,
        actual_date=actual,
        status=body.status or "upcoming",
        progress_percent=body.progress_percent or 0,
        patient_notes=body.patient_notes,
        satisfaction_score=body.satisfaction_score,
        experience_rating=body.experience_rating,
        clinical_notes=body.clinical_notes,
        outcomes=body.outcomes,
        complications=body.complications,
        next_milestone=body.next_milestone,
        preparation_needed=body.preparation_needed,
        advice_given=body.advice_given,
        was_remote=body.was_remote is True,
        remote_session_id=body.remote_session_id,
    )
    db.add(milestone)
    db.flush()

    patient_db.add_timeline_event(
        db,
        patient,
        title=f"Milestone: {title}",
        category=milestone.category,
        details=body.description or f"{milestone_type} milestone reached",
        when=actual or expected,
        source_file="Journey Milestone",
        extracted_data={
            "milestone_type": milestone_type,
            "status": body.status,
            "progress": body.progress_percent,
            "satisfaction": body.satisfaction_score,
            "was_remote": body.was_remote,
        },
    )
    db.commit()

    return {
        "success": True,
        "journeyMilestone": {
            "id": milestone.id,
            "milestoneType": milestone.milestone_type,
            "title": milestone.title,
            "status": milestone.status,
            "progressPercent": milestone.progress_percent,
            "createdAt": milestone.created_at.isoformat(),
        },
        "message": "Journey milestone created successfully",
    }


@router.get("/journey-milestone")
def list_milestones(
    patient_code: Optional[str] = Query(None, alias="patientCode"),
    status: Optional[str] = None,
    db: Session = Depends(get_db),
) -> dict:
    code = require(patient_code, "Patient code is required", "MISSING_PATIENT_CODE")
    patient = patient_db.require_patient(db, code)

    query = db.query(JourneyMilestone).filter(JourneyMilestone.patient_id == patient.id)
    if status:
        query = query.filter(JourneyMilestone.status == status)
    milestones = query.order_by(
        JourneyMilestone.expected_date.asc().nullslast(),
        JourneyMilestone.created_at.asc(),
    ).all()

    total = len(milestones)
    completed = sum(1 for m in milestones if m.status == "completed")
    return {
        "success": True,
        "journeyMilestones": [m.to_dict() for m in milestones],
        "progress": {
            "total": total,
            "completed": completed,
            "percentage": round(completed / total * 100) if total else 0,
        },
    }


@router.put("/journey-milestone")
def update_milestone(body: MilestoneUpdate, db: Session = Depends(get_db)) -> dict:
    milestone_id = require(
        body.milestone_id, "Milestone ID is required", "MISSING_MILESTONE_ID"
    )
    milestone = db.get(JourneyMilestone, milestone_id)
    if milestone is None:
        raise NotFoundError("Journey milestone not found", "MILESTONE_NOT_FOUND")

    # Empty values leave the stored field untouched; progress 0 is a real value
    if body.status:
        milestone.status = body.status
    if body.actual_date:
        milestone.actual_date = patient_db.parse_date(body.actual_date)
    if body.progress_percent is not None:
        milestone.progress_percent = body.progress_percent
    for field in (
        "patient_notes",
        "satisfaction_score",
        "experience_rating",
        "clinical_notes",
        "outcomes",
        "complications",
    ):
        value = getattr(body, field)
        if value:
            setattr(milestone, field, value)
    db.commit()

    return {
        "success": True,
        "journeyMilestone": milestone.to_dict(),
        "message": "Journey milestone updated successfully",
    }


# ── /personalized-timeline ─────────────────────────────────────────────────

@router.post("/personalized-timeline")
async def create_personalized_timeline(
    body: PersonalizedTimelineRequest,
    db: Session = Depends(get_db),
) -> dict:
    code = require(body.patient_code, "Patient code is required", "MISSING_PATIENT_CODE")
    pathway = require(
        body.treatment_pathway,
        "Treatment pathway is required",
        "MISSING_TREATMENT_PATHWAY",
    )
    result = await run_timeline_generation(
        db, code, pathway, start_date=patient_db.parse_date(body.start_date)
    )
    return {
        "success": True,
        "timeline": result["timeline"],
        "aiGenerated": result["ai_generated"],
        "message": "Personalized timeline generated successfully",
    }


@router.get("/personalized-timeline")
def list_personalized_timelines(
    patient_code: Optional[str] = Query(None, alias="patientCode"),
    db: Session = Depends(get_db),
) -> dict:
    code = require(patient_code, "Patient code is required", "MISSING_PATIENT_CODE")
    patient = patient_db.require_patient(db, code)
    timelines = (
        db.query(PersonalizedTimeline)
        .filter(PersonalizedTimeline.patient_id == patient.id)
        .order_by(PersonalizedTimeline.created_at.desc())
        .all()
    )
    active = next((t for t in timelines if t.is_active and t.status == "active"), None)
    return {
        "success": True,
        "timelines": [t.to_dict() for t in timelines],
        "activeTimeline": active.to_dict() if active else None,
    }


# ── /generate-story-board ──────────────────────────────────────────────────

@router.post("/generate-story-board")
def generate_story_board(body: StoryBoardRequest, db: Session = Depends(get_db)) -> dict:
    code = require(body.patient_code, "Patient code is required", "MISSING_PATIENT_CODE")
    patient = patient_db.require_patient(db, code)

    db.query(StoryBoardChapter).filter(StoryBoardChapter.patient_id == patient.id).delete(
        synchronize_session=False
    )
    primary = patient.pathways[0].name if patient.pathways else None
    chapters = [
        StoryBoardChapter(patient_id=patient.id, is_completed=False, **chapter)
        for chapter in story_board_chapters(
            patient.female_age, patient.time_trying, primary
        )
    ]
    db.add_all(chapters)
    db.commit()

    return {
        "success": True,
        "storyBoard": [c.to_dict() for c in chapters],
        "totalChapters": len(chapters),
        "message": "Story board generated successfully",
    }
