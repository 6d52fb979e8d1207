"""
Personalized Timeline Workflow

LangGraph workflow: fetch_patient -> generate_timeline -> save_timeline
Loads the patient and their latest confirmed treatment choice, asks Gemini
for a phased timeline (falling back to a fixed skeleton), and stores it as
the patient's active timeline for that pathway.
"""

import calendar
import logging
import re
from datetime import datetime
from typing import Any, Optional, TypedDict

from langgraph.graph import END, StateGraph
from sqlalchemy.orm import Session

from fertility_planner.core import patient_db
from fertility_planner.core.ai_proxy import complete_json
from fertility_planner.core.errors import NotFoundError
from fertility_planner.models.records import (
    PatientChoice,
    PersonalizedTimeline,
    utcnow,
)
from fertility_planner.prompts.timeline import build_timeline_prompt, timeline_fallback

logger = logging.getLogger(__name__)

DEFAULT_DURATION_MONTHS = 4
_DURATION = re.compile(r"(\d+)-?(\d+)?\s*months?")
_LEADING_INT = re.compile(r"^\s*(\d+)")


# ---------------------------------------------------------------------------
# State schema
# ---------------------------------------------------------------------------

class TimelineState(TypedDict):
    db: Session
    patient_code: str
    pathway: str
    start_date: datetime
    patient: Optional[Any]
    profile: Optional[dict]
    choice: Optional[dict]
    plan: Optional[dict]
    fallback_used: bool
    timeline: Optional[PersonalizedTimeline]
    error: Optional[str]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def duration_months(total_duration: Optional[str]) -> int:
    """Upper bound of a "3-4 months" style duration; default 4."""
    if not isinstance(total_duration, str):
        return DEFAULT_DURATION_MONTHS
    match = _DURATION.search(total_duration)
    if not match:
        return DEFAULT_DURATION_MONTHS
    return int(match.group(2) or match.group(1))


def add_months(start: datetime, months: int) -> datetime:
    """Calendar month arithmetic, clamping the day to the target month."""
    index = start.month - 1 + months
    year = start.year + index // 12
    month = index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return start.replace(year=year, month=month, day=day)


def _leading_int(value: Optional[str]) -> Optional[int]:
    match = _LEADING_INT.match(value or "")
    return int(match.group(1)) if match else None


def _is_dict_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(item, dict) for item in value)


def usable_plan(plan: Any) -> bool:
    """True when a model reply has the shape save_timeline relies on."""
    if not isinstance(plan, dict):
        return False
    duration = plan.get("total_duration")
    if duration is not None and not isinstance(duration, str):
        return False
    return all(
        plan.get(key) is None or _is_dict_list(plan[key])
        for key in ("phases", "milestones")
    )


# ---------------------------------------------------------------------------
# Node 1: fetch_patient
# ---------------------------------------------------------------------------

async def fetch_patient(state: TimelineState) -> dict:
    """Load the patient, a compact profile, and the latest confirmed choice."""
    db = state["db"]
    patient = patient_db.get_patient(db, state["patient_code"])
    if patient is None:
        return {"error": f"Patient {state['patient_code']} not found"}

    choice = (
        db.query(PatientChoice)
        .filter(
            PatientChoice.patient_id == patient.id,
            PatientChoice.status == "confirmed",
        )
        .order_by(PatientChoice.decision_date.desc())
        .first()
    )

    profile = {
        "age": patient.female_age,
        "medical_history": {
            "fertility_history": patient.fertility_history,
            "conditions": patient.female_conditions,
            "time_trying": patient.time_trying,
            "previous_treatments": patient.previous_treatments,
        },
        "lifestyle": patient.female_lifestyle,
        "emotional_state": patient.emotional_state,
        "financial_comfort": patient.financial_comfort,
    }
    logger.info(
        "fetch_patient: %s (confirmed choice: %s)",
        patient.patient_code,
        choice is not None,
    )
    return {
        "patient": patient,
        "profile": profile,
        "choice": choice.to_dict() if choice else None,
    }


# ---------------------------------------------------------------------------
# Node 2: generate_timeline
# ---------------------------------------------------------------------------

async def generate_timeline(state: TimelineState) -> dict:
    """Ask Gemini for the phased plan; the skeleton stands in on failure."""
    pathway = state["pathway"]
    result = await complete_json(
        build_timeline_prompt(pathway, state["profile"], state["choice"]),
        fallback=timeline_fallback(pathway),
    )
    if result.fallback_used or usable_plan(result.payload):
        plan, fallback_used = result.payload, result.fallback_used
    else:
        logger.warning("generate_timeline: unexpected plan shape, using skeleton")
        plan, fallback_used = timeline_fallback(pathway), True
    logger.info("generate_timeline: fallback=%s", fallback_used)
    return {"plan": plan, "fallback_used": fallback_used}


# ---------------------------------------------------------------------------
# Node 3: save_timeline
# ---------------------------------------------------------------------------

async def save_timeline(state: TimelineState) -> dict:
    """Update the active timeline for this pathway, or create one."""
    db = state["db"]
    patient = state["patient"]
    plan = state["plan"]
    pathway = state["pathway"]
    start = state["start_date"]
    phases = plan.get("phases") or []

    timeline = (
        db.query(PersonalizedTimeline)
        .filter(
            PersonalizedTimeline.patient_id == patient.id,
            PersonalizedTimeline.treatment_pathway == pathway,
            PersonalizedTimeline.is_active.is_(True),
        )
        .first()
    )
    if timeline is None:
        timeline = PersonalizedTimeline(patient_id=patient.id, treatment_pathway=pathway)
        db.add(timeline)

    first_phase = phases[0].get("phase_name") if phases else None
    timeline.current_phase = str(first_phase) if first_phase else "Preparation"
    timeline.total_duration = plan.get("total_duration")
    timeline.start_date = start
    timeline.estimated_end_date = add_months(
        start, duration_months(plan.get("total_duration"))
    )
    timeline.phases = phases
    timeline.milestones = plan.get("milestones") or []
    timeline.patient_age = _leading_int(patient.female_age)
    timeline.medical_history = state["profile"]["medical_history"]
    timeline.selected_options = state["choice"]
    timeline.phase_advice = plan.get("phase_advice")
    timeline.preparation_tips = plan.get("personalized_tips")
    timeline.ai_generated = not state["fallback_used"]
    timeline.status = "active"

    db.commit()
    db.refresh(timeline)
    return {"timeline": timeline}


# ---------------------------------------------------------------------------
# Node 4: handle_error
# ---------------------------------------------------------------------------

async def handle_error(state: TimelineState) -> dict:
    """Terminal node reached when a previous step sets an error."""
    logger.error("Timeline workflow error: %s", state.get("error"))
    return {"error": state.get("error", "Unknown error")}


def _has_error(state: TimelineState) -> str:
    """Route to handle_error if an error is present, otherwise continue."""
    if state.get("error"):
        return "handle_error"
    return "continue"


# ---------------------------------------------------------------------------
# Build and compile the graph
# ---------------------------------------------------------------------------

def build_timeline_graph():
    """Construct and compile the personalized-timeline StateGraph."""
    graph = StateGraph(TimelineState)

    graph.add_node("fetch_patient", fetch_patient)
    graph.add_node("generate_timeline", generate_timeline)
    graph.add_node("save_timeline", save_timeline)
    graph.add_node("handle_error", handle_error)

    graph.set_entry_point("fetch_patient")

    graph.add_conditional_edges(
        "fetch_patient",
        _has_error,
        {"handle_error": "handle_error", "continue": "generate_timeline"},
    )
    graph.add_edge("generate_timeline", "save_timeline")
    graph.add_edge("save_timeline", END)
    graph.add_edge("handle_error", END)

    return graph.compile()


# Compiled workflow singleton
workflow = build_timeline_graph()


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

async def run_timeline_generation(
    db: Session,
    patient_code: str,
    pathway: str,
    start_date: Optional[datetime] = None,
) -> dict:
    """Run the workflow and return the stored timeline.

    Args:
        db: Open session (committed by the workflow).
        patient_code: The patient's code.
        pathway: Treatment pathway name the timeline is for.
        start_date: First day of the plan (defaults to now).

    Returns:
        Dict with keys: timeline (camelCase dict), ai_generated.

    Raises:
        NotFoundError: The patient does not exist.
    """
    initial_state: TimelineState = {
        "db": db,
        "patient_code": patient_code,
        "pathway": pathway,
        "start_date": start_date or utcnow(),
        "patient": None,
        "profile": None,
        "choice": None,
        "plan": None,
        "fallback_used": False,
        "timeline": None,
        "error": None,
    }

    result = await workflow.ainvoke(initial_state)

    if result.get("error"):
        raise NotFoundError("Patient not found", "PATIENT_NOT_FOUND")

    return {
        "timeline": result["timeline"].to_dict(),
        "ai_generated": not result["fallback_used"],
    }
