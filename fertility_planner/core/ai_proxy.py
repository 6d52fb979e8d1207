"""
AI Proxy

Turns a prompt into a JSON payload from Gemini, or into a fixed fallback
payload when the model is unavailable, errors, or returns something that
cannot be parsed.  Callers never see an exception from here.
"""

import copy
import json
import logging
import re
import time
from dataclasses import dataclass
from typing import Any, Optional

from fertility_planner.core.gemini_client import gemini_client

logger = logging.getLogger(__name__)

_FENCE_OPEN = re.compile(r"^```(?:json)?\s*")
_FENCE_CLOSE = re.compile(r"\s*```$")
_TRAILING_COMMA = re.compile(r",(\s*[}\]])")


@dataclass
class AIResult:
    """Outcome of one proxied completion."""

    payload: Any
    fallback_used: bool = False
    error: Optional[str] = None
    elapsed_ms: int = 0


def clean_ai_json(text: str) -> str:
    """Best-effort repair of model output into a JSON object string.

    Strips markdown fences, trailing commas before a closing bracket,
    line breaks, and anything outside the outermost braces.
    """
    content = text.strip()
    content = _FENCE_CLOSE.sub("", _FENCE_OPEN.sub("", content))
    content = _TRAILING_COMMA.sub(r"\1", content)
    content = content.replace("\n", "").replace("\r", "")

    if not content.startswith("{"):
        start = content.find("{")
        if start != -1:
            content = content[start:]
    if not content.endswith("}"):
        end = content.rfind("}")
        if end != -1:
            content = content[: end + 1]
    return content


def parse_ai_json(text: str) -> Any:
    """Parse model output as JSON after cleanup.

    Raises:
        ValueError: The cleaned text is still not valid JSON.
    """
    try:
        return json.loads(clean_ai_json(text))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Failed to parse AI response: {exc}") from exc


async def complete_json(
    prompt: str,
    fallback: Any,
    attachment: Optional[tuple[bytes, str]] = None,
    max_output_tokens: Optional[int] = None,
) -> AIResult:
    """Ask Gemini for a JSON reply; substitute ``fallback`` on any failure.

    Args:
        prompt: Full instruction text.
        fallback: Payload returned (deep-copied) when anything goes wrong.
        attachment: Optional (bytes, mime_type) for vision or document input.
        max_output_tokens: Optional per-call cap.

    Returns:
        AIResult with the parsed payload, or the fallback and the reason.
    """
    started = time.monotonic()

    def _elapsed() -> int:
        return int((time.monotonic() - started) * 1000)

    if not gemini_client.is_available:
        return AIResult(
            payload=copy.deepcopy(fallback),
            fallback_used=True,
            error="AI service not configured",
            elapsed_ms=_elapsed(),
        )

    try:
        text = await gemini_client.generate(
            prompt,
            attachment=attachment,
            max_output_tokens=max_output_tokens,
        )
        if not text or not text.strip():
            raise ValueError("Empty AI response")
        payload = parse_ai_json(text)
    except Exception as exc:
        logger.warning("AI completion failed, using fallback: %s", exc)
        return AIResult(
            payload=copy.deepcopy(fallback),
            fallback_used=True,
            error=str(exc),
            elapsed_ms=_elapsed(),
        )

    return AIResult(payload=payload, elapsed_ms=_elapsed())
