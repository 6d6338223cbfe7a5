"""Runtime settings, read from environment variables."""

from __future__ import annotations

import os

from pydantic import BaseModel, Field

from aura.domain.models import DEFAULT_NAMESPACE
from aura.services.loader import DEFAULT_TIMEOUT


class Settings(BaseModel):
    base_package: str = Field(default="aura", min_length=1)
    widgets_namespace: str = Field(default=DEFAULT_NAMESPACE, min_length=1)
    delimiter: str = "_"
    load_timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> Settings:
        """Build settings from ``AURA_*`` variables and ``LOG_LEVEL``.

        Unset variables fall back to the field defaults; invalid values raise
        ``pydantic.ValidationError``.
        """
        values = {
            "base_package": os.getenv("AURA_BASE_PACKAGE"),
            "widgets_namespace": os.getenv("AURA_WIDGETS_NAMESPACE"),
            "delimiter": os.getenv("AURA_DELIMITER"),
            "load_timeout": os.getenv("AURA_LOAD_TIMEOUT"),
            "log_level": os.getenv("LOG_LEVEL"),
        }
        return cls(**{k: v for k, v in values.items() if v is not None})
