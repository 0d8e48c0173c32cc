from __future__ import annotations

import json
import logging
from typing import Annotated, List, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Settings for the HTTP service: metadata, CORS, startup tasks and paging defaults.

    Database connection settings live in member_search.db.config.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    APP_NAME: str = "Member Search API"
    APP_VERSION: str = "0.1.0"

    CORS_ORIGINS: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: ["*"],
        description="Allowed origins as a JSON array or a comma-separated list",
    )
    CORS_ALLOW_CREDENTIALS: bool = True

    RUN_MIGRATIONS_ON_STARTUP: bool = Field(
        default=True, description="Run 'alembic upgrade head' when the app starts"
    )
    AUTO_SEED: bool = Field(
        default=False, description="Insert the sample teams and members after migrating"
    )

    DEFAULT_PAGE_SIZE: int = Field(default=20, ge=1, description="limit used when none is given")
    MAX_PAGE_SIZE: int = Field(default=1000, ge=1, description="Larger limits are clamped to this")
    DEFAULT_COUNT_STRATEGY: Literal["always", "optimized"] = "optimized"

    LOG_LEVEL: str = "INFO"

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def _split_origins(cls, value):
        if value is None:
            return ["*"]
        if isinstance(value, str):
            value = value.strip()
            if value.startswith("["):
                value = json.loads(value)
            else:
                value = [part.strip() for part in value.split(",")]
        origins = [origin for origin in value if origin]
        return origins or ["*"]

    @property
    def log_level(self) -> int:
        """LOG_LEVEL as a logging constant; unknown names mean INFO."""
        level = logging.getLevelName(self.LOG_LEVEL.upper())
        return level if isinstance(level, int) else logging.INFO


# PUBLIC_INTERFACE
def get_app_settings() -> AppSettings:
    """Read application settings from the environment."""
    return AppSettings()
