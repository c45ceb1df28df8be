# FILE: fixit/config.py
"""
Runtime settings for Fixit.

All values come from environment variables (loaded from .env by main.py
before this module is first used). Settings are cached after first load;
call reload_settings() after changing the environment in tests.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    database_url: str = "sqlite:///./data/fixit.db"
    log_level: str = "INFO"

    # Generation service (intent parsing + capability synthesis)
    openai_api_key: Optional[str] = None
    generation_model: str = "gpt-4o-mini"
    generation_timeout_s: float = 30.0

    # Target-platform calls
    invoke_timeout_s: float = 10.0
    connection_test_timeout_s: float = 10.0

    safety_policy_path: str = "config/safety_policy.json"

    audit_query_limit: int = 50
    audit_query_max: int = 500


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    return Settings(
        database_url=os.getenv("FIXIT_DATABASE_URL", Settings.database_url),
        log_level=os.getenv("FIXIT_LOG_LEVEL", Settings.log_level).upper(),
        openai_api_key=os.getenv("OPENAI_API_KEY") or None,
        generation_model=os.getenv("FIXIT_GENERATION_MODEL", Settings.generation_model),
        generation_timeout_s=_env_float("FIXIT_GENERATION_TIMEOUT_S", Settings.generation_timeout_s),
        invoke_timeout_s=_env_float("FIXIT_INVOKE_TIMEOUT_S", Settings.invoke_timeout_s),
        connection_test_timeout_s=_env_float(
            "FIXIT_CONNECTION_TEST_TIMEOUT_S", Settings.connection_test_timeout_s
        ),
        safety_policy_path=os.getenv("FIXIT_SAFETY_POLICY_PATH", Settings.safety_policy_path),
        audit_query_limit=_env_int("FIXIT_AUDIT_QUERY_LIMIT", Settings.audit_query_limit),
    )


def reload_settings() -> Settings:
    """Force reload settings (clears cache)."""
    load_settings.cache_clear()
    return load_settings()
