"""
Review Dashboard Application Configuration
Loads settings from .env file using Pydantic v2 with BaseSettings
"""
import os
from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # ==================== Project Info ====================
    PROJECT_NAME: str = "Property Reviews Dashboard API"
    PROJECT_DESCRIPTION: str = "Guest review moderation, statistics and public property pages"
    VERSION: str = "1.0.0"

    # ==================== Environment ====================
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # ==================== CORS ====================
    ALLOWED_ORIGINS: List[str] = [
        "http://localhost:3000",
    ]

    # ==================== Record Store ====================
    # file | memory | auto
    STORAGE_BACKEND: str = "auto"
    # None means the bundled seed file
    DATA_FILE: Optional[str] = None

    # ==================== Rate Limiting ====================
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_WINDOW_SECONDS: int = 15 * 60
    RATE_LIMIT_MAX_REQUESTS: int = 100
    API_RATE_LIMIT_WINDOW_SECONDS: int = 60
    API_RATE_LIMIT_MAX_REQUESTS: int = 30
    RATE_LIMIT_SWEEP_PROBABILITY: float = 0.01

    # ==================== Request Limits ====================
    MAX_REQUEST_BYTES: int = 10 * 1024 * 1024

    # ==================== Configuration Loading ====================
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="allow",
        validate_default=True,
    )

    # ==================== Properties ====================
    @property
    def resolved_storage_backend(self) -> str:
        """Resolve 'auto' to a concrete backend name"""
        backend = self.STORAGE_BACKEND.lower()
        if backend != "auto":
            return backend
        if os.getenv("VERCEL") == "1" or self.ENVIRONMENT == "production":
            return "memory"
        return "file"


# ==================== Settings Singleton ====================
@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()


# ==================== Helper Functions ====================
def is_development() -> bool:
    """Check if running in development"""
    return settings.DEBUG or settings.ENVIRONMENT == "development"
