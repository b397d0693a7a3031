"""Application settings for backend runtime and tests."""

from __future__ import annotations

import logging

from pydantic import Field
from pydantic import field_validator
from pydantic import model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Typed settings loaded from environment variables or explicit kwargs."""

    jellypick_app_env: str = "dev"
    jellypick_app_host: str = "127.0.0.1"
    jellypick_app_port: int = Field(default=8000, ge=1)
    jellypick_cors_allow_origins: str = "*"
    jellypick_log_level: str = "INFO"

    jellypick_invite_code_length: int = Field(default=6, ge=4, le=12)

    jellypick_jellyfin_url: str | None = None
    jellypick_catalog_limit: int = Field(default=100, ge=1)
    jellypick_catalog_timeout_seconds: float = Field(default=10.0, gt=0)

    jellypick_ws_heartbeat_interval_seconds: float = Field(default=30.0, gt=0)
    jellypick_ws_pong_timeout_seconds: float = Field(default=10.0, gt=0)

    @field_validator("jellypick_log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Accept only level names the logging module understands."""
        normalized = value.strip().upper()
        if not isinstance(logging.getLevelName(normalized), int):
            raise ValueError(f"unknown log level: {value}")
        return normalized

    @model_validator(mode="after")
    def validate_pong_timeout(self) -> "Settings":
        """Ensure a pong can arrive before the next heartbeat probe."""
        if self.jellypick_ws_pong_timeout_seconds >= self.jellypick_ws_heartbeat_interval_seconds:
            raise ValueError(
                "JELLYPICK_WS_PONG_TIMEOUT_SECONDS must be less than "
                "JELLYPICK_WS_HEARTBEAT_INTERVAL_SECONDS"
            )
        return self

    @property
    def cors_origins(self) -> list[str]:
        return [origin.strip() for origin in self.jellypick_cors_allow_origins.split(",") if origin.strip()]


def load_settings() -> Settings:
    """Load settings from process environment."""
    return Settings()
