"""
Health Router

GET /health    - Liveness probe.
GET /health/ai - Whether the Gemini client is configured (503 when not).
"""

from fastapi import APIRouter

from fertility_planner.core.errors import UpstreamUnavailableError
from fertility_planner.core.gemini_client import gemini_client

router = APIRouter()


@router.get("/health")
def health() -> dict:
    return {"status": "ok"}


@router.get("/health/ai")
def ai_health() -> dict:
    """Report the configured model, or 503 AI_UNAVAILABLE in demo mode."""
    if not gemini_client.is_available:
        raise UpstreamUnavailableError(
            "AI service not configured - running in demo mode"
        )
    return {"status": "ok", "model": gemini_client.model_name}
