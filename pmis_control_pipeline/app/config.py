"""
Environment-driven settings.

Values are read lazily with os.getenv so that a .env loaded by main.py (or a
test's monkeypatch) is always picked up. Nothing here fails at import time:
a missing API key only surfaces when an analysis call is made.
"""

import os
from pathlib import Path
from typing import Optional

DEFAULT_FAST_MODEL = "gemini-3-flash-preview"
DEFAULT_DEEP_MODEL = "gemini-3-pro-preview"
DEFAULT_THINKING_BUDGET = 1024
DEFAULT_PREFERENCES_PATH = Path.home() / ".pmis_dashboard.json"


def get_api_key() -> Optional[str]:
    return os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY")


def fast_model() -> str:
    return os.getenv("GEMINI_FAST_MODEL") or DEFAULT_FAST_MODEL


def deep_model() -> str:
    return os.getenv("GEMINI_DEEP_MODEL") or DEFAULT_DEEP_MODEL


def thinking_budget() -> int:
    raw = os.getenv("GEMINI_THINKING_BUDGET")
    if not raw:
        return DEFAULT_THINKING_BUDGET
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"GEMINI_THINKING_BUDGET must be an integer, got {raw!r}")


def preferences_path() -> Path:
    raw = os.getenv("PMIS_PREFERENCES_PATH")
    return Path(raw).expanduser() if raw else DEFAULT_PREFERENCES_PATH


def log_level() -> str:
    return os.getenv("LOG_LEVEL", "INFO").upper()
