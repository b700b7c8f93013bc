"""
Configuration management for the Symptom Triage Engine.
Uses pydantic-settings for type-safe environment variable handling.
"""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Symptom Triage Engine"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Security
    TRIAGE_SERVICE_API_KEY: str = ""
    FRONTEND_ORIGIN: str = "https://mdsdr.com"

    # Advisory (language-model) service
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_BASE_URL: str = "https://api.openai.com/v1"
    OPENAI_MODEL: str = "gpt-4.1-2025-04-14"
    ADVISORY_TIMEOUT: float = 12.0
    ADVISORY_TEMPERATURE: float = 0.3
    ADVISORY_MAX_TOKENS: int = 1500
    ADVISORY_MAX_CONTEXT_CHARS: int = 3000

    # Symptom text bounds
    SYMPTOMS_MIN_LENGTH: int = 10
    SYMPTOMS_MAX_LENGTH: int = 2000

    # Pattern rule table override (defaults to the packaged table)
    PATTERN_RULES_PATH: Optional[str] = None

    # Rate limiting (applied at the HTTP layer only)
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_REQUESTS: int = 10
    RATE_LIMIT_WINDOW: int = 300  # seconds
    RATE_LIMIT_STORAGE_URI: str = "memory://"

    # Connection pooling
    HTTP_POOL_SIZE: int = 20
    HTTP_POOL_KEEPALIVE: int = 30

    class Config:
        env_file = ".env"
        case_sensitive = True

    @property
    def advisory_enabled(self) -> bool:
        """Whether an advisory service key is configured."""
        return bool(self.OPENAI_API_KEY)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
