"""Path helpers for project directories."""

from __future__ import annotations

from pathlib import Path


ROOT_DIR = Path(__file__).resolve().parents[2]
API_DIR = ROOT_DIR / "apps" / "api"
ENV_FILE = API_DIR / ".env"
