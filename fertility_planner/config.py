"""
Application Configuration

Loads environment variables using pydantic-settings.
All settings can be overridden via a .env file or environment variables.
"""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENV_FILE = Path(__file__).resolve().parent.parent / ".env"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    DATABASE_URL: str = "sqlite:///./fertility_planner.db"

    GOOGLE_CLOUD_PROJECT: str = ""
    GOOGLE_CLOUD_LOCATION: str = "us-central1"
    GEMINI_MODEL: str = "gemini-2.0-flash"
    AI_MAX_OUTPUT_TOKENS: int = 2048

    MAX_IMAGE_BYTES: int = 20 * 1024 * 1024
    DEFAULT_SEARCH_RADIUS_KM: float = 50.0
    DOCTOR_RESULT_LIMIT: int = 10

    LOG_LEVEL: str = "INFO"
    SEED_DEMO_PATIENT: bool = True

    model_config = SettingsConfigDict(env_file=str(_ENV_FILE), extra="ignore")


settings = Settings()
