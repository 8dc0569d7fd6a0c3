"""
Persisted State Shape

The whole application state is stored as one blob:

    {schemaVersion, currentPlan, savedPlans, doseLogs, biomarkerLogs,
     symptomEntries, retestAlerts, settings, compendiumItems, savedModules,
     focusMode, focusModuleId, recentCommandSearches}

Blobs written before schemaVersion existed (version 0) kept the recent
searches under ui.recentCommandSearches; migrate_blob lifts them out.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from pydantic import Field

from bioforge.catalog.models import CompendiumItem, SavedModule
from bioforge.plans.models import FocusMode, UserPlan
from bioforge.shared.models import CamelModel
from bioforge.tracking.models import BiomarkerLog, DoseLogEntry, RetestAlert, SymptomEntry

from .errors import StateSchemaError

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1


class SettingsState(CamelModel):
    supabase_sync: bool = False
    pwa_installed: bool = False


class PersistedState(CamelModel):
    schema_version: int = SCHEMA_VERSION
    current_plan: Optional[UserPlan] = None
    saved_plans: List[UserPlan] = Field(default_factory=list)
    dose_logs: List[DoseLogEntry] = Field(default_factory=list)
    biomarker_logs: List[BiomarkerLog] = Field(default_factory=list)
    symptom_entries: List[SymptomEntry] = Field(default_factory=list)
    retest_alerts: List[RetestAlert] = Field(default_factory=list)
    settings: SettingsState = Field(default_factory=SettingsState)
    compendium_items: List[CompendiumItem] = Field(default_factory=list)
    saved_modules: List[SavedModule] = Field(default_factory=list)
    focus_mode: FocusMode = FocusMode.FULL
    focus_module_id: Optional[str] = None
    recent_command_searches: List[str] = Field(default_factory=list)


def _migrate_v0(blob: Dict[str, Any]) -> Dict[str, Any]:
    ui = blob.pop("ui", None) or {}
    if "recentCommandSearches" not in blob:
        blob["recentCommandSearches"] = list(ui.get("recentCommandSearches") or [])
    blob["schemaVersion"] = 1
    return blob


MIGRATIONS: Dict[int, Callable[[Dict[str, Any]], Dict[str, Any]]] = {
    0: _migrate_v0,
}


def migrate_blob(blob: Dict[str, Any]) -> Dict[str, Any]:
    """Upgrade a raw blob to SCHEMA_VERSION, one step at a time."""
    data = dict(blob)
    version = data.get("schemaVersion", 0)
    if not isinstance(version, int) or version > SCHEMA_VERSION:
        raise StateSchemaError(f"Unsupported state schema version: {version!r}")
    while version < SCHEMA_VERSION:
        logger.info(f"Migrating state blob from schema v{version}")
        data = MIGRATIONS[version](data)
        version = data["schemaVersion"]
    return data


def load_state(blob: Dict[str, Any]) -> PersistedState:
    """Migrate and validate a raw blob."""
    try:
        return PersistedState.model_validate(migrate_blob(blob))
    except StateSchemaError:
        raise
    except ValueError as e:
        raise StateSchemaError(f"Invalid state blob: {e}") from e


class BackupBundle(CamelModel):
    """User-facing JSON export of the current plan and its logs."""
    exported_at: str
    plan: Optional[UserPlan] = None
    dose_logs: List[DoseLogEntry] = Field(default_factory=list)
    biomarker_logs: List[BiomarkerLog] = Field(default_factory=list)
    symptom_entries: List[SymptomEntry] = Field(default_factory=list)
