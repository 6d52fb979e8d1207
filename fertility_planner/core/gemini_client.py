"""
Gemini Client

Wrapper for Vertex AI Gemini API calls.
Handles initialization and falls back to demo mode when credentials are missing.
Provides a global singleton for use across the application.
"""

import json
import logging
import os
from typing import Optional

from fertility_planner.config import settings
from fertility_planner.core.errors import UpstreamUnavailableError

logger = logging.getLogger(__name__)


class GeminiClient:
    """Wrapper around the Vertex AI Gemini generative model.

    Initializes Vertex AI on construction.  If credentials are missing or
    the project is not configured, the client gracefully degrades and
    ``is_available`` returns False.
    """

    def __init__(self) -> None:
        self.model = None
        self._initialized = False
        self._initialize()

    def _resolve_project(self) -> str | None:
        """Return the GCP project ID from settings or the credentials file."""
        if settings.GOOGLE_CLOUD_PROJECT:
            return settings.GOOGLE_CLOUD_PROJECT
        creds_path = os.environ.get("GOOGLE_APPLICATION_CREDENTIALS", "")
        if creds_path and os.path.isfile(creds_path):
            with open(creds_path) as f:
                return json.load(f).get("project_id")
        return None

    def _initialize(self) -> None:
        """Attempt to initialise the Vertex AI SDK and load the model."""
        project = self._resolve_project()
        if not project:
            logger.warning("GCP project not found - Gemini running in demo mode")
            return

        try:
            import vertexai
            from vertexai.generative_models import GenerativeModel

            vertexai.init(project=project, location=settings.GOOGLE_CLOUD_LOCATION)
            self.model = GenerativeModel(settings.GEMINI_MODEL)
            self._initialized = True
            logger.info("Gemini client initialized (%s)", settings.GEMINI_MODEL)
        except Exception as exc:
            logger.warning("Gemini initialization failed: %s", exc)
            logger.warning(
                "Running in demo mode - AI features will return fallback data"
            )
            self._initialized = False

    @property
    def is_available(self) -> bool:
        """Return True if Gemini is ready to accept requests."""
        return self._initialized

    @property
    def model_name(self) -> str:
        return settings.GEMINI_MODEL

    async def generate(
        self,
        prompt: str,
        attachment: Optional[tuple[bytes, str]] = None,
        json_mode: bool = True,
        temperature: float = 0.3,
        max_output_tokens: Optional[int] = None,
    ) -> str:
        """Send one user turn to the model and return its text.

        Args:
            prompt: The instruction text.
            attachment: Optional (data, mime_type) sent inline after the
                prompt, e.g. an ultrasound image or a PDF report.
            json_mode: Ask the model for an application/json response.
            temperature: Sampling temperature.
            max_output_tokens: Per-call cap (defaults to AI_MAX_OUTPUT_TOKENS).

        Returns:
            The generated text.

        Raises:
            UpstreamUnavailableError: demo mode, or the call itself failed.
        """
        if not self._initialized:
            raise UpstreamUnavailableError("Gemini is not configured")

        from vertexai.generative_models import Content, Part

        parts = [Part.from_text(prompt)]
        if attachment is not None:
            data, mime_type = attachment
            parts.append(Part.from_data(data=data, mime_type=mime_type))

        generation_config = {
            "temperature": temperature,
            "max_output_tokens": max_output_tokens or settings.AI_MAX_OUTPUT_TOKENS,
        }
        if json_mode:
            generation_config["response_mime_type"] = "application/json"

        try:
            response = await self.model.generate_content_async(
                contents=[Content(role="user", parts=parts)],
                generation_config=generation_config,
            )
            return response.text
        except Exception as exc:
            raise UpstreamUnavailableError(
                "Gemini request failed", details=str(exc)
            ) from exc


# ---------------------------------------------------------------------------
# Global singleton
# ---------------------------------------------------------------------------
gemini_client = GeminiClient()
