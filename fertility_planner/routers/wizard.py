"""
Wizard Router

Server-held state for the five-phase intake wizard:
  POST   /wizard-sessions                             - Start a session
  GET    /wizard-sessions/{id}                        - Session and progress
  PUT    /wizard-sessions/{id}/profile                - Merge one profile section
  POST   /wizard-sessions/{id}/phases/{phase}/complete - Mark a phase done
  POST   /wizard-sessions/{id}/phases/{phase}         - Move to a phase
  POST   /wizard-sessions/{id}/reset                  - Start over
  DELETE /wizard-sessions/{id}                        - Drop the session
"""

from typing import Optional

from fastapi import APIRouter

from fertility_planner.core.errors import require
from fertility_planner.memory.session_store import session_store
from fertility_planner.models.schemas import WizardProfileUpdate, WizardSessionCreate

router = APIRouter()


@router.post("/wizard-sessions")
def create_session(body: Optional[WizardSessionCreate] = None) -> dict:
    session = session_store.create(body.patient_code if body else None)
    return {"success": True, "session": session.to_dict()}


@router.get("/wizard-sessions/{session_id}")
def get_session(session_id: str) -> dict:
    return {"success": True, "session": session_store.get(session_id).to_dict()}


@router.put("/wizard-sessions/{session_id}/profile")
def update_profile(session_id: str, body: WizardProfileUpdate) -> dict:
    section = require(body.section, "Profile section is required", "MISSING_SECTION")
    session = session_store.update_profile(session_id, section, body.data)
    return {"success": True, "session": session.to_dict()}


@router.post("/wizard-sessions/{session_id}/phases/{phase}/complete")
def complete_phase(session_id: str, phase: int) -> dict:
    session = session_store.complete_phase(session_id, phase)
    return {"success": True, "session": session.to_dict()}


@router.post("/wizard-sessions/{session_id}/phases/{phase}")
def go_to_phase(session_id: str, phase: int) -> dict:
    session = session_store.go_to_phase(session_id, phase)
    return {"success": True, "session": session.to_dict()}


@router.post("/wizard-sessions/{session_id}/reset")
def reset_session(session_id: str) -> dict:
    session = session_store.reset(session_id)
    return {"success": True, "session": session.to_dict()}


@router.delete("/wizard-sessions/{session_id}")
def delete_session(session_id: str) -> dict:
    session_store.get(session_id)
    session_store.clear_session(session_id)
    return {"success": True, "message": "Session cleared"}
