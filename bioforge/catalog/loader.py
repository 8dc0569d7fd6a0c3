"""
Catalog Loader (singleton cache)

Builds the catalog once per process from the bundled seed, or from the JSON
file named by BIOFORGE_CATALOG_PATH, and indexes it for lookups.
"""

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

from bioforge.config import get_settings

from .matching import find_match
from .models import CatalogData, CatalogPeptide, LibraryItem, PlanBlockType
from .seed import DIETS, FIVE_R_STAGES, SEED_DATA

logger = logging.getLogger(__name__)


class CatalogLoader:
    """
    Singleton loader for the static catalog.
    Loads data once and caches it in memory.
    """
    _instance = None
    _loaded = False

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if not CatalogLoader._loaded:
            self._data: CatalogData = self._load_data()
            self._peptides_by_id: Dict[str, CatalogPeptide] = {
                p.id: p for p in self._data.peptides
            }
            CatalogLoader._loaded = True
            logger.info(
                f"Loaded catalog v{self._data.version} "
                f"({len(self._data.peptides)} peptides, "
                f"{len(self.retest_biomarkers())} re-test biomarkers)"
            )

    @classmethod
    def reset(cls):
        """Reset the singleton for testing purposes."""
        cls._instance = None
        cls._loaded = False

    def _load_data(self) -> CatalogData:
        override = get_settings().catalog_path
        if override:
            path = Path(override)
            if path.exists():
                with open(path, "r", encoding="utf-8") as f:
                    return CatalogData.model_validate(json.load(f))
            logger.warning(f"Catalog override not found: {path}; using seed catalog")
        return CatalogData.model_validate(SEED_DATA)

    @property
    def data(self) -> CatalogData:
        return self._data

    @property
    def version(self) -> str:
        return self._data.version

    @property
    def peptides(self) -> List[CatalogPeptide]:
        return self._data.peptides

    def get_peptide(self, ref_id: Optional[str]) -> Optional[CatalogPeptide]:
        """Exact id lookup; None when the ref id is not a catalog peptide."""
        if not ref_id:
            return None
        return self._peptides_by_id.get(ref_id)

    def find_peptide(self, name: str) -> Optional[CatalogPeptide]:
        """Fuzzy name lookup, see bioforge.catalog.matching."""
        return find_match(name, self._data.peptides)

    def retest_biomarkers(self) -> List[str]:
        return self._data.biomarker_hierarchy.retest_biomarkers()

    def library(self) -> Dict[str, List[LibraryItem]]:
        """
        Builder library grouped by category id.
        """
        hierarchy = self._data.biomarker_hierarchy
        return {
            "goals": [
                LibraryItem(id=m.id, label=m.name, type=PlanBlockType.GOAL, category="goals")
                for m in self._data.mission_modes
            ],
            "tests": [
                LibraryItem(id=f"test-{b}", label=b, type=PlanBlockType.TEST, category="tests")
                for b in hierarchy.retest_biomarkers()
            ],
            "5r": [
                LibraryItem(id=item_id, label=label, type=PlanBlockType.FIVE_R, category="5r")
                for item_id, label in FIVE_R_STAGES
            ],
            "peptides": [
                LibraryItem(id=p.id, label=p.name, type=PlanBlockType.PEPTIDE, category="peptides")
                for p in self._data.peptides
            ],
            "diet": [
                LibraryItem(id=item_id, label=label, type=PlanBlockType.DIET, category="diet")
                for item_id, label in DIETS
            ],
            "monitoring": [
                LibraryItem(id=f"mon-{b}", label=f"Track {b}", type=PlanBlockType.MONITORING, category="monitoring")
                for b in hierarchy.tier1
            ],
        }

    def find_library_item(self, item_id: str) -> Optional[LibraryItem]:
        for items in self.library().values():
            for item in items:
                if item.id == item_id:
                    return item
        return None


def get_catalog() -> CatalogLoader:
    """Get the singleton catalog."""
    return CatalogLoader()
