"""
Session Store

Server-side wizard context for the five-phase intake flow.
Each session tracks the current phase, which phases are done, and the
partially filled patient profile, and serializes to plain JSON.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Optional

from fertility_planner.core.errors import BadRequestError, NotFoundError
from fertility_planner.core.patient_db import generate_patient_code

logger = logging.getLogger(__name__)

TOTAL_PHASES = 5

PROFILE_SECTIONS = (
    "femaleProfile",
    "maleProfile",
    "coupleHistory",
    "holistic",
    "location",
)


def _empty_profile(patient_code: str) -> dict[str, Any]:
    return {
        "patientCode": patient_code,
        "femaleProfile": {"conditions": [], "lifestyle": {}},
        "maleProfile": {"conditions": []},
        "coupleHistory": {"fertilityChallenges": []},
        "holistic": {},
        "location": {},
    }


@dataclass
class WizardSession:
    """One patient's progress through the planning wizard."""

    session_id: str
    patient_code: str
    current_phase: int = 1
    completed_phases: list[int] = field(default_factory=list)
    profile: dict[str, Any] = field(default_factory=dict)
    journey_started: bool = False

    @property
    def progress(self) -> float:
        """Percentage of phases completed."""
        return len(self.completed_phases) / TOTAL_PHASES * 100

    def can_enter(self, phase: int) -> bool:
        """Phase 1 is always open; phase N needs phase N-1 completed."""
        if phase < 1 or phase > TOTAL_PHASES:
            return False
        return phase == 1 or (phase - 1) in self.completed_phases

    def to_dict(self) -> dict[str, Any]:
        return {
            "sessionId": self.session_id,
            "patientCode": self.patient_code,
            "currentPhase": self.current_phase,
            "completedPhases": sorted(self.completed_phases),
            "profile": self.profile,
            "journeyStarted": self.journey_started,
            "progress": self.progress,
        }


def _check_range(phase: int) -> None:
    if phase < 1 or phase > TOTAL_PHASES:
        raise BadRequestError(
            f"Phase must be between 1 and {TOTAL_PHASES}", "INVALID_PHASE"
        )


class WizardSessionStore:
    """In-memory store of wizard sessions keyed by session id."""

    def __init__(self) -> None:
        self._sessions: dict[str, WizardSession] = {}

    def create(self, patient_code: Optional[str] = None) -> WizardSession:
        """Start a session, generating a patient code when none is given."""
        code = patient_code or generate_patient_code()
        session = WizardSession(
            session_id=uuid.uuid4().hex,
            patient_code=code,
            profile=_empty_profile(code),
        )
        self._sessions[session.session_id] = session
        logger.info("Wizard session %s started for %s", session.session_id, code)
        return session

    def get(self, session_id: str) -> WizardSession:
        """Return a session or raise NotFoundError (SESSION_NOT_FOUND)."""
        session = self._sessions.get(session_id)
        if session is None:
            raise NotFoundError("Wizard session not found", "SESSION_NOT_FOUND")
        return session

    def update_profile(
        self, session_id: str, section: str, data: dict[str, Any]
    ) -> WizardSession:
        """Shallow-merge ``data`` into one profile section."""
        if section not in PROFILE_SECTIONS:
            raise BadRequestError(
                f"Unknown profile section: {section}",
                "INVALID_SECTION",
                details={"allowed": list(PROFILE_SECTIONS)},
            )
        session = self.get(session_id)
        session.profile.setdefault(section, {}).update(data)
        return session

    def complete_phase(self, session_id: str, phase: int) -> WizardSession:
        """Mark a phase completed; completing phase 5 starts the journey."""
        _check_range(phase)
        session = self.get(session_id)
        if phase not in session.completed_phases:
            session.completed_phases.append(phase)
        if phase == TOTAL_PHASES:
            session.journey_started = True
        return session

    def go_to_phase(self, session_id: str, phase: int) -> WizardSession:
        """Move to ``phase`` if its predecessor has been completed.

        Raises:
            BadRequestError: PHASE_LOCKED when the phase is not reachable yet.
        """
        _check_range(phase)
        session = self.get(session_id)
        if not session.can_enter(phase):
            raise BadRequestError(
                f"Phase {phase} is locked until phase {phase - 1} is completed",
                "PHASE_LOCKED",
            )
        session.current_phase = phase
        return session

    def reset(self, session_id: str) -> WizardSession:
        """Start over with a fresh profile, keeping id and patient code."""
        session = self.get(session_id)
        session.current_phase = 1
        session.completed_phases = []
        session.profile = _empty_profile(session.patient_code)
        session.journey_started = False
        return session

    def clear_session(self, session_id: str) -> None:
        """Drop a single session (unknown ids are ignored)."""
        self._sessions.pop(session_id, None)

    def clear_all(self) -> None:
        """Drop every session."""
        self._sessions.clear()


# Module-level singleton instance
session_store = WizardSessionStore()
