from __future__ import annotations

import os

APP_VERSION = "1.0.0"
MIN_QUERY_LENGTH = 3
DEFAULT_USER_AGENT = "frate/1.0 (+https://example.com)"


def _float_env(name: str, default: float) -> float:
    value = os.environ.get(name)
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        return default


class Config:
    OMDB_API_KEY = os.environ.get("OMDB_API_KEY", "60348efc")
    OMDB_URL = os.environ.get("OMDB_URL", "https://www.omdbapi.com/")
    REQUEST_TIMEOUT = _float_env("FRATE_REQUEST_TIMEOUT", 10.0)
    USER_AGENT = os.environ.get("FRATE_USER_AGENT", DEFAULT_USER_AGENT)
    LOG_LEVEL = os.environ.get("FRATE_LOG_LEVEL", "INFO")
