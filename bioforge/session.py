"""
Application State

AppState is the one object the outer surfaces talk to. It owns the plan
store, the compendium, the tracking logs and the small amount of UI state
that is persisted (focus mode, recent command searches, settings), and
writes the whole blob to a StateBackend after every mutation when autosave
is on.
"""

import logging
import time
from typing import Any, Callable, Dict, List, Optional, Union

from bioforge.catalog.compendium import CompendiumStore, get_compendium_seed
from bioforge.catalog.loader import CatalogLoader, get_catalog
from bioforge.catalog.models import CompendiumItem, LibraryItem, SavedModule, VersionNote
from bioforge.catalog.organs import is_known_organ
from bioforge.config import Settings, get_settings
from bioforge.derive.focus import get_filtered_plan
from bioforge.importers.models import ParsedImportItem, ParsedQuickAdd
from bioforge.importers.quick_add import parse_quick_add_input, parse_quick_add_input_multiple
from bioforge.plans.models import FocusMode, PlanBlockDraft, UserPlan
from bioforge.plans.store import PlanStore
from bioforge.shared.models import new_id, now_iso
from bioforge.storage.backends import StateBackend, get_backend
from bioforge.storage.snapshot import (
    BackupBundle,
    PersistedState,
    SettingsState,
    load_state,
)
from bioforge.tracking.logs import TrackingLogs

logger = logging.getLogger(__name__)

MAX_RECENT_SEARCHES = 15

NOTE_KNOWLEDGE_IMPORT = "Knowledge Import"
NOTE_QUICK_ADD = "Quick-add"
NOTE_COMMAND_PALETTE = "Command palette"


def _epoch_ms() -> int:
    return int(time.time() * 1000)


class AppState:
    """Plan store, compendium, tracking logs and persisted UI state."""

    def __init__(
        self,
        backend: Optional[StateBackend] = None,
        autosave: bool = True,
        catalog: Optional[CatalogLoader] = None,
        clock: Callable[[], str] = now_iso,
        id_factory: Callable[[], str] = new_id,
        ms_clock: Callable[[], int] = _epoch_ms,
    ):
        self.backend = backend
        self.autosave = autosave
        self.catalog = catalog or get_catalog()
        self._clock = clock
        self._new_id = id_factory
        self._ms_clock = ms_clock
        self._restoring = False

        self.plans = PlanStore(clock=clock, id_factory=id_factory, on_change=self._changed)
        self.compendium = CompendiumStore(id_factory=id_factory, on_change=self._changed)
        self.tracking = TrackingLogs(id_factory=id_factory, on_change=self._changed)
        self.settings = SettingsState()
        self.focus_mode: FocusMode = FocusMode.FULL
        self.focus_module_id: Optional[str] = None
        self.recent_command_searches: List[str] = []

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None, **kwargs) -> "AppState":
        """Build state bound to the configured backend, restoring any saved blob."""
        settings = settings or get_settings()
        backend = get_backend(settings)
        state = cls(backend=backend, autosave=settings.autosave, **kwargs)
        blob = backend.load()
        if blob is not None:
            state.restore(blob)
        else:
            logger.info("No saved state found; starting with the default plan")
        return state

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _changed(self) -> None:
        if self._restoring or not self.autosave or self.backend is None:
            return
        self.backend.save(self.snapshot())

    def snapshot(self) -> Dict[str, Any]:
        """The whole persisted blob (camelCase keys)."""
        return PersistedState(
            current_plan=self.plans.current_plan,
            saved_plans=self.plans.saved_plans,
            dose_logs=self.tracking.dose_logs,
            biomarker_logs=self.tracking.biomarker_logs,
            symptom_entries=self.tracking.symptom_entries,
            retest_alerts=self.tracking.retest_alerts,
            settings=self.settings,
            compendium_items=self.compendium.items,
            saved_modules=self.compendium.modules,
            focus_mode=self.focus_mode,
            focus_module_id=self.focus_module_id,
            recent_command_searches=self.recent_command_searches,
        ).to_blob()

    def restore(self, blob: Dict[str, Any]) -> None:
        """Replace all state with a (possibly older) persisted blob."""
        state = load_state(blob)
        self._restoring = True
        try:
            self.plans = PlanStore(
                current_plan=state.current_plan,
                saved_plans=state.saved_plans,
                clock=self._clock,
                id_factory=self._new_id,
                on_change=self._changed,
                seed_default=False,
            )
            self.compendium = CompendiumStore(
                items=state.compendium_items,
                modules=state.saved_modules,
                id_factory=self._new_id,
                on_change=self._changed,
            )
            self.tracking = TrackingLogs(
                dose_logs=state.dose_logs,
                biomarker_logs=state.biomarker_logs,
                symptom_entries=state.symptom_entries,
                retest_alerts=state.retest_alerts,
                id_factory=self._new_id,
                on_change=self._changed,
            )
            self.settings = state.settings
            self.focus_mode = state.focus_mode
            self.focus_module_id = state.focus_module_id
            self.recent_command_searches = list(state.recent_command_searches)
        finally:
            self._restoring = False
        logger.info(
            f"Restored state: {len(self.plans.saved_plans)} saved plans, "
            f"{len(self.compendium.items)} compendium items"
        )

    def save(self) -> None:
        """Persist now, regardless of autosave."""
        if self.backend is not None:
            self.backend.save(self.snapshot())

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def current_plan(self) -> Optional[UserPlan]:
        return self.plans.current_plan

    # ------------------------------------------------------------------
    # Compendium -> plan
    # ------------------------------------------------------------------

    def ensure_compendium_seed(self) -> bool:
        """Fill an empty compendium with the starter items."""
        if self.compendium.items:
            return False
        self.compendium.set_items(get_compendium_seed(self.catalog, clock=self._clock))
        return True

    def add_compendium_item_to_plan(self, phase_index: int, item: CompendiumItem) -> bool:
        block = PlanBlockDraft(
            id=f"block-{item.id}-{self._ms_clock()}",
            type=item.type,
            ref_id=item.ref_id or item.id,
            label=item.name,
            notes=item.personal_notes,
        )
        return self.plans.add_block_to_phase(phase_index, 0, block)

    def add_compendium_items_to_plan(self, phase_index: int, item_ids: List[str]) -> int:
        """Add the listed items in compendium order; returns how many were placed."""
        wanted = set(item_ids)
        items = [i for i in self.compendium.items if i.id in wanted]
        return sum(1 for item in items if self.add_compendium_item_to_plan(phase_index, item))

    def add_library_item_to_phase(self, phase_index: int, item: LibraryItem) -> bool:
        block = PlanBlockDraft(
            id=f"block-{item.id}-{self._ms_clock()}",
            type=item.type,
            ref_id=item.id,
            label=item.label,
        )
        return self.plans.add_block_to_phase(phase_index, 0, block)

    def tag_block_organ(self, block_id: str, organ_id: str) -> bool:
        """Attach a known body region to a block; duplicates are ignored."""
        plan = self.plans.current_plan
        if plan is None or not is_known_organ(organ_id):
            logger.debug(f"tag_block_organ: unknown organ {organ_id!r} or no plan; no-op")
            return False
        found = plan.find_block(block_id)
        if found is None:
            return False
        organ_ids = list(found[1].organ_ids or [])
        if organ_id in organ_ids:
            return False
        return self.plans.update_block_organ_ids(block_id, organ_ids + [organ_id])

    # ------------------------------------------------------------------
    # Focus and UI state
    # ------------------------------------------------------------------

    def set_focus_mode(self, mode: Union[FocusMode, str], module_id: Optional[str] = None) -> None:
        self.focus_mode = FocusMode(mode)
        self.focus_module_id = module_id
        self._changed()

    def filtered_plan(self) -> Optional[UserPlan]:
        """The current plan as seen through the active focus mode."""
        return get_filtered_plan(
            self.plans.current_plan,
            self.focus_mode,
            self.focus_module_id,
            self.compendium.module_item_ids,
        )

    def add_recent_command_search(self, query: str) -> bool:
        q = (query or "").strip()
        if not q:
            return False
        recent = [q, *[r for r in self.recent_command_searches if r != q]]
        self.recent_command_searches = recent[:MAX_RECENT_SEARCHES]
        self._changed()
        return True

    def set_settings(self, **patch) -> SettingsState:
        self.settings = self.settings.model_copy(update=patch)
        self._changed()
        return self.settings

    # ------------------------------------------------------------------
    # Ingestion
    # ------------------------------------------------------------------

    def _to_compendium_item(
        self,
        parsed: Union[ParsedImportItem, ParsedQuickAdd],
        note: str,
    ) -> Dict[str, Any]:
        return {
            "id": self._new_id(),
            "name": parsed.name,
            "type": parsed.type,
            "ref_id": parsed.ref_id,
            "dose_examples": parsed.dose_examples,
            "moa": getattr(parsed, "moa", None),
            "personal_notes": parsed.personal_notes,
            "tags": list(getattr(parsed, "tags", None) or []),
            "version_history": [VersionNote(at=self._clock(), note=note)],
        }

    def import_parsed_items(
        self,
        items: List[ParsedImportItem],
        note: str = NOTE_KNOWLEDGE_IMPORT,
        add_to_plan: bool = False,
        phase_index: int = 0,
    ) -> List[CompendiumItem]:
        """Store parsed items in the compendium and optionally place them in a phase."""
        added = []
        for parsed in items:
            item = self.compendium.add_item(self._to_compendium_item(parsed, note))
            if add_to_plan:
                self.add_compendium_item_to_plan(phase_index, item)
            added.append(item)
        logger.info(f"Imported {len(added)} items ({note})")
        return added

    def save_import_as_module(self, name: str, items: List[ParsedImportItem]) -> Optional[SavedModule]:
        """Store parsed items and group them as a saved module; None for a blank name or no items."""
        name = (name or "").strip()
        if not name or not items:
            return None
        added = self.import_parsed_items(items)
        return self.compendium.add_module(name, [i.id for i in added])

    def quick_add(self, text: str, phase_index: int = 0) -> Optional[CompendiumItem]:
        parsed = parse_quick_add_input(text, self.catalog)
        if parsed is None:
            return None
        item = self.compendium.add_item(self._to_compendium_item(parsed, NOTE_QUICK_ADD))
        self.add_compendium_item_to_plan(phase_index, item)
        return item

    def run_command(self, text: str) -> List[CompendiumItem]:
        """
        Command palette entry: remember the search, then add every parsed
        item to the compendium and phase 0. A stack line yields several items.
        """
        self.add_recent_command_search(text)
        multi = parse_quick_add_input_multiple(text, self.catalog)
        if len(multi) > 1:
            parsed_items = multi
        else:
            single = parse_quick_add_input(text, self.catalog)
            parsed_items = [single] if single else []
        added = []
        for parsed in parsed_items:
            item = self.compendium.add_item(self._to_compendium_item(parsed, NOTE_COMMAND_PALETTE))
            self.add_compendium_item_to_plan(0, item)
            added.append(item)
        return added

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def backup_bundle(self) -> BackupBundle:
        return build_backup_bundle(self)


def build_backup_bundle(state: AppState) -> BackupBundle:
    return BackupBundle(
        exported_at=state._clock(),
        plan=state.plans.current_plan,
        dose_logs=state.tracking.dose_logs,
        biomarker_logs=state.tracking.biomarker_logs,
        symptom_entries=state.tracking.symptom_entries,
    )
