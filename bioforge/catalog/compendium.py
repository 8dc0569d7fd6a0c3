"""
Compendium Store

User-curated catalog entries and the saved modules (named subsets) built
from them. Mutations replace lists rather than editing them in place.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from pydantic import ValidationError

from bioforge.shared.models import new_id, now_iso

from .loader import CatalogLoader, get_catalog
from .models import CompendiumItem, EvidenceTier, PlanBlockType, SavedModule, VersionNote
from .seed import DIETS, FIVE_R_STAGES

logger = logging.getLogger(__name__)


def get_compendium_seed(
    catalog: Optional[CatalogLoader] = None,
    clock: Callable[[], str] = now_iso,
) -> List[CompendiumItem]:
    """
    Starter compendium: every peptide, the 5R stages, re-test biomarkers,
    diets and mission goals.
    """
    catalog = catalog or get_catalog()
    data = catalog.data
    items: List[CompendiumItem] = []

    for p in data.peptides:
        items.append(CompendiumItem(
            id=f"compendium-peptide-{p.id}",
            name=p.name,
            type=PlanBlockType.PEPTIDE,
            ref_id=p.id,
            dose_examples=[p.form] if p.form else None,
            moa=p.moa,
            evidence_tier=p.tier or EvidenceTier.A,
            tags=list(p.synergies),
            version_history=[VersionNote(at=clock(), note="2026 seed – " + (p.status or ""))],
        ))

    for item_id, label in FIVE_R_STAGES:
        items.append(CompendiumItem(
            id=f"compendium-{item_id}",
            name=label,
            type=PlanBlockType.FIVE_R,
        ))

    for b in data.biomarker_hierarchy.retest_biomarkers():
        items.append(CompendiumItem(
            id="compendium-test-" + "-".join(b.split()),
            name=b,
            type=PlanBlockType.TEST,
            ref_id=f"test-{b}",
        ))

    for item_id, label in DIETS:
        items.append(CompendiumItem(
            id=f"compendium-{item_id}",
            name=label,
            type=PlanBlockType.DIET,
            ref_id=item_id,
        ))

    for m in data.mission_modes:
        items.append(CompendiumItem(
            id=f"compendium-goal-{m.id}",
            name=m.name,
            type=PlanBlockType.GOAL,
            ref_id=m.id,
            tags=[m.id],
        ))

    return items


class CompendiumStore:
    """Compendium items plus saved modules."""

    def __init__(
        self,
        items: Optional[List[CompendiumItem]] = None,
        modules: Optional[List[SavedModule]] = None,
        id_factory: Callable[[], str] = new_id,
        on_change: Optional[Callable[[], None]] = None,
    ):
        self.items: List[CompendiumItem] = list(items or [])
        self.modules: List[SavedModule] = list(modules or [])
        self._new_id = id_factory
        self._on_change = on_change

    def _changed(self) -> None:
        if self._on_change:
            self._on_change()

    def get_item(self, item_id: str) -> Optional[CompendiumItem]:
        return next((i for i in self.items if i.id == item_id), None)

    def add_item(self, item: Dict[str, Any]) -> CompendiumItem:
        """
        Add an item given as a dict (snake_case or camelCase keys). A supplied
        non-empty id is kept, otherwise one is minted.
        """
        data = dict(item)
        if not data.get("id"):
            data["id"] = self._new_id()
        full = CompendiumItem.model_validate(data)
        self.items = [*self.items, full]
        self._changed()
        return full

    def update_item(self, item_id: str, patch: Dict[str, Any]) -> bool:
        """Shallow partial patch; unknown ids and invalid patches are a no-op."""
        current = self.get_item(item_id)
        if current is None:
            logger.debug(f"Compendium item {item_id} not found; update is a no-op")
            return False
        merged = {**current.model_dump(), **patch, "id": item_id}
        try:
            updated = CompendiumItem.model_validate(merged)
        except ValidationError as e:
            logger.warning(f"Compendium item {item_id} patch rejected: {e.error_count()} invalid field(s)")
            return False
        self.items = [updated if i.id == item_id else i for i in self.items]
        self._changed()
        return True

    def remove_item(self, item_id: str) -> bool:
        """Delete an item and drop it from every saved module."""
        if self.get_item(item_id) is None:
            return False
        self.items = [i for i in self.items if i.id != item_id]
        self.modules = [
            m.model_copy(update={"item_ids": [iid for iid in m.item_ids if iid != item_id]})
            for m in self.modules
        ]
        self._changed()
        return True

    def set_items(self, items: List[CompendiumItem]) -> None:
        self.items = list(items)
        self._changed()

    def add_module(self, name: str, item_ids: List[str]) -> SavedModule:
        module = SavedModule(id=self._new_id(), name=name, item_ids=list(item_ids))
        self.modules = [*self.modules, module]
        self._changed()
        return module

    def remove_module(self, module_id: str) -> bool:
        if not any(m.id == module_id for m in self.modules):
            return False
        self.modules = [m for m in self.modules if m.id != module_id]
        self._changed()
        return True

    def module_item_ids(self, module_id: str) -> List[str]:
        module = next((m for m in self.modules if m.id == module_id), None)
        return list(module.item_ids) if module else []
