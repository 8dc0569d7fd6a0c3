"""
State Backends

Where the state blob lives: a JSON file (default) or a Postgres row when
DATABASE_URL is configured.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

import psycopg2
from psycopg2.extras import Json, RealDictCursor

from bioforge.config import Settings, get_settings

from .errors import StateStoreError

logger = logging.getLogger(__name__)


class StateBackend:
    """Load/save the whole state blob."""

    name = "base"

    def load(self) -> Optional[Dict[str, Any]]:
        """The stored blob, or None when nothing has been saved yet."""
        raise NotImplementedError

    def save(self, blob: Dict[str, Any]) -> None:
        raise NotImplementedError


class MemoryBackend(StateBackend):
    name = "memory"

    def __init__(self, blob: Optional[Dict[str, Any]] = None):
        self.blob = blob
        self.save_count = 0

    def load(self) -> Optional[Dict[str, Any]]:
        return None if self.blob is None else json.loads(json.dumps(self.blob))

    def save(self, blob: Dict[str, Any]) -> None:
        self.blob = json.loads(json.dumps(blob))
        self.save_count += 1


class JsonFileBackend(StateBackend):
    """Blob in a JSON file, replaced atomically on save."""

    name = "json_file"

    def __init__(self, path: str):
        self.path = Path(path)

    def load(self) -> Optional[Dict[str, Any]]:
        if not self.path.exists():
            return None
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                blob = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to read state file {self.path}: {e}")
            raise StateStoreError(f"Cannot read {self.path}: {e}", backend=self.name) from e
        logger.info(f"Loaded state from {self.path}")
        return blob

    def save(self, blob: Dict[str, Any]) -> None:
        directory = self.path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".bioforge-", suffix=".json")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(blob, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except OSError as e:
            logger.error(f"Failed to write state file {self.path}: {e}")
            raise StateStoreError(f"Cannot write {self.path}: {e}", backend=self.name) from e
        logger.debug(f"Saved state to {self.path}")


class PostgresBackend(StateBackend):
    """Blob as one JSONB row per key in bioforge_state."""

    name = "postgres"

    def __init__(self, database_url: str, key: str):
        self.database_url = database_url
        self.key = key
        self._table_ready = False

    def _get_conn(self):
        try:
            return psycopg2.connect(self.database_url, cursor_factory=RealDictCursor)
        except psycopg2.Error as e:
            logger.error(f"Database connection error: {e}")
            raise StateStoreError(f"Database connection failed: {e}", backend=self.name) from e

    def _ensure_table(self, conn) -> None:
        if self._table_ready:
            return
        with conn.cursor() as cur:
            cur.execute("""
                CREATE TABLE IF NOT EXISTS bioforge_state (
                    key VARCHAR(255) PRIMARY KEY,
                    blob JSONB NOT NULL,
                    updated_at TIMESTAMPTZ DEFAULT NOW()
                )
            """)
        conn.commit()
        self._table_ready = True

    def load(self) -> Optional[Dict[str, Any]]:
        conn = self._get_conn()
        try:
            self._ensure_table(conn)
            with conn.cursor() as cur:
                cur.execute("SELECT blob FROM bioforge_state WHERE key = %s", (self.key,))
                row = cur.fetchone()
        except psycopg2.Error as e:
            logger.error(f"Failed to load state {self.key}: {e}")
            raise StateStoreError(f"Load failed: {e}", backend=self.name) from e
        finally:
            conn.close()
        if row is None:
            return None
        logger.info(f"Loaded state {self.key} from Postgres")
        return row["blob"]

    def save(self, blob: Dict[str, Any]) -> None:
        conn = self._get_conn()
        try:
            self._ensure_table(conn)
            with conn.cursor() as cur:
                cur.execute("""
                    INSERT INTO bioforge_state (key, blob, updated_at)
                    VALUES (%s, %s, NOW())
                    ON CONFLICT (key) DO UPDATE
                    SET blob = EXCLUDED.blob, updated_at = NOW()
                """, (self.key, Json(blob)))
            conn.commit()
        except psycopg2.Error as e:
            conn.rollback()
            logger.error(f"Failed to save state {self.key}: {e}")
            raise StateStoreError(f"Save failed: {e}", backend=self.name) from e
        finally:
            conn.close()


def get_backend(settings: Optional[Settings] = None) -> StateBackend:
    """Postgres when DATABASE_URL is set, otherwise the JSON state file."""
    settings = settings or get_settings()
    if settings.database_url:
        return PostgresBackend(settings.database_url, settings.state_key)
    return JsonFileBackend(settings.state_path)
