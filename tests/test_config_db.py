# FILE: tests/test_config_db.py
"""
Tests for fixit/config.py and fixit/db.py
Environment-driven settings and the Database open/close lifecycle.
"""

import sys
from pathlib import Path

_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

import pytest
from sqlalchemy import inspect

from fixit.config import Settings, load_settings, reload_settings
from fixit.db import Database


@pytest.fixture
def clean_settings():
    load_settings.cache_clear()
    yield
    load_settings.cache_clear()


class TestSettings:

    def test_defaults(self, monkeypatch, clean_settings):
        for name in ("FIXIT_DATABASE_URL", "FIXIT_INVOKE_TIMEOUT_S", "FIXIT_AUDIT_QUERY_LIMIT"):
            monkeypatch.delenv(name, raising=False)
        settings = load_settings()
        assert settings.database_url == "sqlite:///./data/fixit.db"
        assert settings.invoke_timeout_s == 10.0
        assert settings.audit_query_limit == 50

    def test_env_overrides(self, monkeypatch, clean_settings):
        monkeypatch.setenv("FIXIT_DATABASE_URL", "sqlite:///./tmp.db")
        monkeypatch.setenv("FIXIT_INVOKE_TIMEOUT_S", "2.5")
        monkeypatch.setenv("FIXIT_LOG_LEVEL", "debug")
        settings = reload_settings()
        assert settings.database_url == "sqlite:///./tmp.db"
        assert settings.invoke_timeout_s == 2.5
        assert settings.log_level == "DEBUG"

    def test_bad_number_uses_default(self, monkeypatch, clean_settings):
        monkeypatch.setenv("FIXIT_GENERATION_TIMEOUT_S", "soon")
        assert reload_settings().generation_timeout_s == Settings.generation_timeout_s


class TestDatabase:

    def test_open_creates_tables(self, tmp_path):
        database = Database(f"sqlite:///{tmp_path / 'nested' / 'fixit.db'}").open()
        try:
            tables = set(inspect(database.engine).get_table_names())
            assert {"capabilities", "execution_records", "store_connections"} <= tables
            assert (tmp_path / "nested" / "fixit.db").exists()
        finally:
            database.close()

    def test_closed_handle_refuses_sessions(self, tmp_path):
        database = Database(f"sqlite:///{tmp_path / 'fixit.db'}")
        assert database.is_open is False
        with pytest.raises(RuntimeError):
            database.new_session()
        database.open()
        database.close()
        assert database.is_open is False
        with pytest.raises(RuntimeError):
            _ = database.engine

    def test_open_twice_is_harmless(self, tmp_path):
        database = Database(f"sqlite:///{tmp_path / 'fixit.db'}")
        assert database.open() is database.open()
        database.close()
