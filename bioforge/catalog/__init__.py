"""
BioForge Catalog

Static reference data (peptides, biomarker tiers, mission modes), the
fuzzy name matcher shared by parsers and the synergy graph, the body-map
organ registry, and the user-curated compendium.

Version: catalog_v1
"""

from .models import (
    PlanBlockType,
    PLAN_BLOCK_TYPES,
    EvidenceTier,
    CatalogPeptide,
    CatalogData,
    MissionMode,
    BiomarkerHierarchy,
    LibraryItem,
    CompendiumItem,
    SavedModule,
    VersionNote,
    Link,
)
from .matching import names_match, find_match, first_token, hyphenate
from .loader import CatalogLoader, get_catalog
from .compendium import CompendiumStore, get_compendium_seed

__all__ = [
    "PlanBlockType",
    "PLAN_BLOCK_TYPES",
    "EvidenceTier",
    "CatalogPeptide",
    "CatalogData",
    "MissionMode",
    "BiomarkerHierarchy",
    "LibraryItem",
    "CompendiumItem",
    "SavedModule",
    "VersionNote",
    "Link",
    "names_match",
    "find_match",
    "first_token",
    "hyphenate",
    "CatalogLoader",
    "get_catalog",
    "CompendiumStore",
    "get_compendium_seed",
]

__version__ = "catalog_v1"
