"""Configuration and environment helpers for the project.

Provides small helpers to read typed environment variables and exposes
project-level configuration constants used across the codebase (e.g.
ITEMS_BASE_URL, ITEM_ID_FIELD, HTTP_VERIFY, default waits and eviction age).
"""

from __future__ import annotations

import os


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return float(raw.strip())
    except ValueError:
        return default


# Remote item collection
ITEMS_BASE_URL = os.environ.get("ITEMS_BASE_URL", "http://localhost:8000").strip()
ITEMS_PATH = os.environ.get("ITEMS_PATH", "/items").strip()
ITEMS_API_TOKEN = os.environ.get("ITEMS_API_TOKEN", "").strip()
ITEM_ID_FIELD = os.environ.get("ITEM_ID_FIELD", "id").strip()

# Network / HTTP
HTTP_VERIFY = _env_bool("HTTP_VERIFY", True)
HTTP_TIMEOUT = _env_float("HTTP_TIMEOUT", 20.0)

# Cache behaviour
DEFAULT_WAIT_MS = _env_int("DEFAULT_WAIT_MS", 0)
DEFAULT_EVICT_MAX_AGE_MS = _env_int("DEFAULT_EVICT_MAX_AGE_MS", 15 * 60 * 1000)

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").strip()
