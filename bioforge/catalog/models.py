"""
Catalog Models

Reference data (peptides, biomarker tiers, mission modes) plus the
user-curated compendium records built on top of it.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from bioforge.shared.models import CamelModel


class PlanBlockType(str, Enum):
    """Kinds of item that can be placed in a plan."""
    GOAL = "goal"
    TEST = "test"
    FIVE_R = "5r"
    PEPTIDE = "peptide"
    DIET = "diet"
    MONITORING = "monitoring"


PLAN_BLOCK_TYPES = frozenset(t.value for t in PlanBlockType)


class EvidenceTier(str, Enum):
    S = "S"
    A = "A"
    FRONTIER = "Frontier"


class CatalogPeptide(CamelModel):
    """
    A peptide/compound from the static catalog.

    Synergies are free-text partner names, resolved by fuzzy name lookup
    rather than by id.
    """
    id: str
    name: str
    tier: Optional[EvidenceTier] = Field(
        default=None,
        description="Evidence tier: S, A or Frontier"
    )
    moa: str = Field(default="", description="Mechanism-of-action text")
    form: Optional[str] = Field(default=None, description="Administration form")
    status: Optional[str] = None
    synergies: List[str] = Field(default_factory=list)
    warning: Optional[str] = None

    class Config:
        frozen = True


class MissionMode(CamelModel):
    id: str
    name: str
    icon: str = ""

    class Config:
        frozen = True


class BiomarkerHierarchy(CamelModel):
    tier1: List[str] = Field(default_factory=list)
    tier2: List[str] = Field(default_factory=list)
    tier3: List[str] = Field(default_factory=list)

    def retest_biomarkers(self) -> List[str]:
        """Biomarkers that get scheduled re-test reminders (tier1 + tier2)."""
        return [*self.tier1, *self.tier2]


class CatalogData(CamelModel):
    """Complete static catalog, loaded once per process."""
    version: str
    mission_modes: List[MissionMode] = Field(default_factory=list)
    biomarker_hierarchy: BiomarkerHierarchy = Field(default_factory=BiomarkerHierarchy)
    peptides: List[CatalogPeptide] = Field(default_factory=list)
    core_frameworks: List[str] = Field(default_factory=list)
    starter_protocol: str = ""


class LibraryItem(BaseModel):
    """A draggable entry in the plan builder library."""
    id: str
    label: str
    type: PlanBlockType
    category: str


class VersionNote(CamelModel):
    at: str
    note: str


class Link(CamelModel):
    label: str
    url: str


class CompendiumItem(CamelModel):
    """
    User-curated catalog entry.

    Created by seeding, import parsing or manual edit; mutated by partial
    patch; deleted explicitly.
    """
    id: str
    name: str
    type: PlanBlockType
    ref_id: Optional[str] = Field(
        default=None,
        description="Catalog peptide id or synthetic catalog key"
    )
    dose_examples: Optional[List[str]] = None
    moa: Optional[str] = None
    evidence_tier: Optional[EvidenceTier] = None
    personal_notes: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    version_history: List[VersionNote] = Field(default_factory=list)
    links: List[Link] = Field(default_factory=list)


class SavedModule(CamelModel):
    """Named subset of compendium items, used for custom focus and subset export."""
    id: str
    name: str
    item_ids: List[str] = Field(default_factory=list)
