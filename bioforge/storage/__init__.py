"""
BioForge State Storage

Serialization of the whole application state blob and the backends that
hold it.

Version: storage_v1
"""

from .errors import StateSchemaError, StateStoreError
from .snapshot import SCHEMA_VERSION, BackupBundle, PersistedState, SettingsState, load_state, migrate_blob
from .backends import JsonFileBackend, MemoryBackend, PostgresBackend, StateBackend, get_backend

__all__ = [
    "StateSchemaError",
    "StateStoreError",
    "SCHEMA_VERSION",
    "BackupBundle",
    "PersistedState",
    "SettingsState",
    "load_state",
    "migrate_blob",
    "JsonFileBackend",
    "MemoryBackend",
    "PostgresBackend",
    "StateBackend",
    "get_backend",
]

__version__ = "storage_v1"
