from __future__ import annotations

from typing import Any, Literal

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    """
    Central configuration.

    - Values loaded from the environment and `.env`
    - Comma-separated lists for multi-value settings like CORS_ORIGINS
    """

    # ----------------------------
    # Service
    # ----------------------------
    SERVICE_NAME: str = "golf-course-admin"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # ----------------------------
    # Mongo
    # ----------------------------
    mongo_uri: str = "mongodb://localhost:27017"
    mongo_db: str = "golf_course_admin"

    # ----------------------------
    # Redis
    # ----------------------------
    redis_url: str = "redis://localhost:6379/0"

    # ----------------------------
    # CORS
    # ----------------------------
    # store as raw string list from env; we will normalize in code
    CORS_ORIGINS: Any = Field(default_factory=list)

    # ----------------------------
    # JWT
    # ----------------------------
    JWT_SECRET: str | None = None
    # strict: refuse to start without JWT_SECRET
    # lenient: fall back to a fixed development secret and warn
    JWT_SECRET_POLICY: Literal["strict", "lenient"] = "strict"
    jwt_alg: str = "HS256"
    SYSTEM_TOKEN_TTL_HOURS: int = 24
    COURSE_TOKEN_TTL_DAYS: int = 7

    # ----------------------------
    # Passwords
    # ----------------------------
    BCRYPT_ROUNDS: int = 12

    # ----------------------------
    # Login throttling
    # ----------------------------
    LOGIN_RATE_LIMIT_ENABLED: bool = True
    LOGIN_RATE_LIMIT_ATTEMPTS: int = 5
    LOGIN_RATE_LIMIT_WINDOW_SECONDS: int = 900  # 15 minutes
    # only honour x-forwarded-for and friends behind a proxy that overwrites them
    TRUST_PROXY_HEADERS: bool = False

    # ----------------------------
    # First admin, created on startup when no system user exists
    # ----------------------------
    BOOTSTRAP_ADMIN_NAME: str | None = None
    BOOTSTRAP_ADMIN_PASSWORD: str | None = None
    BOOTSTRAP_ADMIN_EMAIL: str = ""

    # Pydantic settings config (v2 style)
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def cors_origins(self) -> list[str]:
        raw_origins = self.CORS_ORIGINS
        if isinstance(raw_origins, str):
            return [o.strip() for o in raw_origins.split(",") if o.strip()]
        if isinstance(raw_origins, (list, tuple, set)):
            return list(raw_origins)
        return []


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
