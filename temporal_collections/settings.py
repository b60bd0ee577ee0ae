from __future__ import annotations

import logging
from typing import Any, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .policies import Policy

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}

_POLICY_ALIASES = {
    "poe": Policy.PERIOD_OF_EXISTENCE,
    "allow_gaps": Policy.PERIOD_OF_EXISTENCE,
    "no_gaps": Policy.PERPETUAL,
}


class Settings(BaseSettings):
    """Library configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TEMPORAL_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = Field(
        default="INFO",
        description="Level of the temporal.* loggers (DEBUG/INFO/WARNING/ERROR/CRITICAL)",
    )
    default_policy: Policy = Field(
        default=Policy.PERPETUAL,
        description="Policy of timelines created without an explicit one, e.g. by a denormalized timeline",
    )

    @field_validator("log_level")
    @classmethod
    def _normalise_log_level(cls, value: str) -> str:
        candidate = value.upper()
        if candidate not in _LOG_LEVELS:
            logging.getLogger("temporal.settings").warning(
                "Unknown log level '%s', falling back to INFO.", value
            )
            return "INFO"
        return candidate

    @field_validator("default_policy", mode="before")
    @classmethod
    def _resolve_policy(cls, value: Any) -> Any:
        if isinstance(value, str):
            candidate = value.strip().lower()
            return _POLICY_ALIASES.get(candidate, candidate)
        return value


settings = Settings()


def configure_logging(level: Optional[str] = None) -> None:
    """Send library logs to the root handler at ``level`` (default: configured level)."""

    name = (level or settings.log_level).upper()
    log_level = getattr(logging, name, logging.INFO)
    logging.basicConfig(level=log_level)
    logging.getLogger("temporal").setLevel(log_level)


__all__ = ["Settings", "configure_logging", "settings"]
