"""Environment-driven settings for the portal API."""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel


class Settings(BaseModel):
    catalog_path: Path | None = None
    default_step_id: str | None = None
    event_log_dir: Path | None = None
    log_level: str = "INFO"


def _path_or_none(value: str | None) -> Path | None:
    if value is None or not value.strip():
        return None
    return Path(value.strip()).expanduser()


def load_settings() -> Settings:
    """Read CERTPORTAL_* variables from the environment.

    Call after ``load_dotenv`` so values from ``.env`` are visible.
    """
    default_step = os.getenv("CERTPORTAL_DEFAULT_STEP", "").strip()
    return Settings(
        catalog_path=_path_or_none(os.getenv("CERTPORTAL_CATALOG")),
        default_step_id=default_step or None,
        event_log_dir=_path_or_none(os.getenv("CERTPORTAL_EVENT_LOG_DIR")),
        log_level=os.getenv("CERTPORTAL_LOG_LEVEL", "INFO").upper(),
    )
