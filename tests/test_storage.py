"""
BioForge State Storage - Tests
==============================
Schema migration, JSON file backend, Postgres backend (mocked) and settings.
"""

import json
import sys
from pathlib import Path
from unittest.mock import MagicMock, patch

import psycopg2
import pytest
from psycopg2.extras import Json

sys.path.insert(0, str(Path(__file__).parent.parent))

from bioforge.config import Settings
from bioforge.storage import (
    SCHEMA_VERSION,
    JsonFileBackend,
    PostgresBackend,
    StateSchemaError,
    StateStoreError,
    get_backend,
    load_state,
    migrate_blob,
)


def make_v0_blob():
    """Blob as written before schemaVersion existed."""
    return {
        "currentPlan": None,
        "savedPlans": [],
        "doseLogs": [
            {"date": "2026-03-01", "planBlockId": "b1", "refId": "kpv", "label": "KPV", "taken": True}
        ],
        "biomarkerLogs": [],
        "symptomEntries": [],
        "retestAlerts": [],
        "settings": {"supabaseSync": False, "pwaInstalled": True},
        "compendiumItems": [],
        "savedModules": [],
        "focusMode": "gut-repair",
        "focusModuleId": None,
        "ui": {"recentCommandSearches": ["kpv", "ss-31"]},
    }


def make_mock_conn(row=None):
    cur = MagicMock()
    cur.fetchone.return_value = row
    conn = MagicMock()
    conn.cursor.return_value.__enter__.return_value = cur
    return conn, cur


class TestMigration:

    def test_v0_hoists_recent_searches(self):
        blob = migrate_blob(make_v0_blob())
        assert blob["schemaVersion"] == SCHEMA_VERSION
        assert blob["recentCommandSearches"] == ["kpv", "ss-31"]
        assert "ui" not in blob

    def test_migration_does_not_mutate_input(self):
        original = make_v0_blob()
        migrate_blob(original)
        assert "ui" in original

    def test_load_v0_state(self):
        state = load_state(make_v0_blob())
        assert state.focus_mode == "gut-repair"
        assert state.settings.pwa_installed is True
        assert state.dose_logs[0].plan_block_id == "b1"
        assert state.recent_command_searches == ["kpv", "ss-31"]

    def test_empty_blob_gets_defaults(self):
        state = load_state({})
        assert state.current_plan is None
        assert state.focus_mode == "full"

    def test_future_version_rejected(self):
        with pytest.raises(StateSchemaError):
            migrate_blob({"schemaVersion": 99})

    def test_invalid_blob_rejected(self):
        with pytest.raises(StateSchemaError):
            load_state({"schemaVersion": 1, "savedPlans": "not a list"})


class TestJsonFileBackend:

    def test_missing_file_loads_none(self, tmp_path):
        assert JsonFileBackend(str(tmp_path / "none.json")).load() is None

    def test_save_then_load(self, tmp_path):
        backend = JsonFileBackend(str(tmp_path / "nested" / "state.json"))
        backend.save({"schemaVersion": 1, "recentCommandSearches": ["ü"]})
        assert backend.load() == {"schemaVersion": 1, "recentCommandSearches": ["ü"]}
        assert [p.name for p in (tmp_path / "nested").iterdir()] == ["state.json"]

    def test_corrupt_file_raises(self, tmp_path):
        path = tmp_path / "state.json"
        path.write_text("{broken")
        with pytest.raises(StateStoreError):
            JsonFileBackend(str(path)).load()


class TestPostgresBackend:

    def test_load_returns_blob(self):
        conn, cur = make_mock_conn(row={"blob": {"schemaVersion": 1}})
        with patch("bioforge.storage.backends.psycopg2.connect", return_value=conn):
            blob = PostgresBackend("postgres://x", "key-1").load()
        assert blob == {"schemaVersion": 1}
        select = cur.execute.call_args_list[-1]
        assert "SELECT blob FROM bioforge_state" in select.args[0]
        assert select.args[1] == ("key-1",)
        conn.close.assert_called_once()

    def test_load_missing_row(self):
        conn, _ = make_mock_conn(row=None)
        with patch("bioforge.storage.backends.psycopg2.connect", return_value=conn):
            assert PostgresBackend("postgres://x", "key-1").load() is None

    def test_save_upserts_json(self):
        conn, cur = make_mock_conn()
        blob = {"schemaVersion": 1, "doseLogs": []}
        with patch("bioforge.storage.backends.psycopg2.connect", return_value=conn):
            PostgresBackend("postgres://x", "key-1").save(blob)
        sql, params = cur.execute.call_args_list[-1].args
        assert "ON CONFLICT (key) DO UPDATE" in sql
        assert params[0] == "key-1"
        assert isinstance(params[1], Json)
        assert params[1].adapted == blob
        assert conn.commit.called

    def test_table_created_once(self):
        conn, cur = make_mock_conn(row=None)
        backend = PostgresBackend("postgres://x", "key-1")
        with patch("bioforge.storage.backends.psycopg2.connect", return_value=conn):
            backend.load()
            backend.load()
        creates = [c for c in cur.execute.call_args_list if "CREATE TABLE" in c.args[0]]
        assert len(creates) == 1

    def test_connection_error(self):
        with patch(
            "bioforge.storage.backends.psycopg2.connect",
            side_effect=psycopg2.OperationalError("down"),
        ):
            with pytest.raises(StateStoreError) as exc:
                PostgresBackend("postgres://x", "key-1").load()
        assert exc.value.backend == "postgres"

    def test_save_error_rolls_back(self):
        conn, cur = make_mock_conn()
        cur.execute.side_effect = [None, psycopg2.DatabaseError("boom")]
        with patch("bioforge.storage.backends.psycopg2.connect", return_value=conn):
            with pytest.raises(StateStoreError):
                PostgresBackend("postgres://x", "key-1").save({})
        conn.rollback.assert_called_once()


class TestSettings:

    def test_defaults(self, monkeypatch):
        for name in ("BIOFORGE_STATE_PATH", "DATABASE_URL", "BIOFORGE_STATE_KEY",
                     "BIOFORGE_CATALOG_PATH", "BIOFORGE_AUTOSAVE", "LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)
        settings = Settings.from_env()
        assert settings == Settings()
        assert settings.state_key == "bioforgeos-storage"

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("BIOFORGE_AUTOSAVE", "off")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        monkeypatch.setenv("DATABASE_URL", "postgres://db")
        settings = Settings.from_env()
        assert settings.autosave is False
        assert settings.log_level == "DEBUG"
        assert settings.database_url == "postgres://db"

    def test_backend_selection(self, tmp_path):
        assert isinstance(get_backend(Settings(state_path=str(tmp_path / "s.json"))), JsonFileBackend)
        backend = get_backend(Settings(database_url="postgres://db", state_key="k"))
        assert isinstance(backend, PostgresBackend)
        assert backend.key == "k"
