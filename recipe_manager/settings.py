"""Application settings loaded from environment (and .env).

This module provides a small Settings holder backed by environment variables.
Keep this file simple and import `settings` from other modules.
"""
from __future__ import annotations

from dataclasses import dataclass
import os
import json
from pathlib import Path

# Load the JSON schema from file so it can be edited without touching code.
_schema_path = Path(__file__).parent / "schemas" / "recipe_response_schema.json"
if _schema_path.exists():
    with open(_schema_path, "r", encoding="utf8") as _fh:
        RECIPE_RESPONSE_SCHEMA = json.load(_fh)
else:
    RECIPE_RESPONSE_SCHEMA = {}


def _get(name: str, default: str | None = None) -> str | None:
    v = os.getenv(name)
    if v is None:
        return default
    return v


@dataclass
class Settings:
    # API keys
    ANTHROPIC_API_KEY: str | None = _get("ANTHROPIC_API_KEY")
    ANTHROPIC_BASE_URL: str = _get("ANTHROPIC_BASE_URL", "https://api.anthropic.com/v1/")

    # Network timeouts in seconds, applied to both connect and read
    FETCH_TIMEOUT: float = float(_get("FETCH_TIMEOUT", "15"))
    LLM_TIMEOUT: float = float(_get("LLM_TIMEOUT", "60"))

    # Logging configuration
    # LOG_LEVEL can be DEBUG, INFO, WARNING, ERROR, or CRITICAL
    LOG_LEVEL: str = _get("LOG_LEVEL", "INFO")
    # Optional path to write logs to a file; if unset, logs go to stderr
    LOG_FILE: str | None = _get("LOG_FILE", None)


settings = Settings()


def get_api_key() -> str | None:
    """Return the LLM API key, or None when it is not configured.

    Reads the environment at call time so a .env loaded after import is honoured.
    """
    key = os.getenv("ANTHROPIC_API_KEY") or settings.ANTHROPIC_API_KEY
    if not key or not key.strip():
        return None
    return key.strip()


def validate_required() -> None:
    """Validate required secrets and raise a helpful RuntimeError if missing.

    This function checks environment variables at runtime so callers can load a .env first.
    """
    missing = []
    if get_api_key() is None:
        missing.append("ANTHROPIC_API_KEY (Claude API key)")
    if missing:
        msg = (
            "Missing required environment variables: "
            + ", ".join(missing)
            + "\nPlease set them in your .env or environment and try again."
        )
        raise RuntimeError(msg)
