"""
Plan Models

A UserPlan is an ordered list of phases; each phase holds ordered blocks.
The store treats these as immutable snapshots and replaces them on every
mutation.
"""

from enum import Enum
from typing import Iterator, List, Optional, Tuple

from pydantic import Field, model_validator

from bioforge.catalog.models import PlanBlockType
from bioforge.shared.models import CamelModel

# Placeholder id of the seed plan; saving it mints a real id.
DEFAULT_PLAN_ID = "default"
DEFAULT_PLAN_NAME = "My Protocol"


class FocusMode(str, Enum):
    FULL = "full"
    PEPTIDES_ONLY = "peptides-only"
    PRECONCEPTION = "preconception"
    GUT_REPAIR = "gut-repair"
    COMPENDIUM_CUSTOM = "compendium-custom"


class PlanBlockDraft(CamelModel):
    """A block before it is placed in a phase."""
    id: str
    type: PlanBlockType
    ref_id: str
    label: str
    notes: Optional[str] = None
    organ_ids: Optional[List[str]] = None

    class Config:
        frozen = True

    def place(self, phase_index: int, week_index: int) -> "PlanBlock":
        return PlanBlock(
            **self.model_dump(),
            phase_index=phase_index,
            week_index=week_index,
        )


class PlanBlock(PlanBlockDraft):
    """
    A placed catalog/compendium item.

    phase_index mirrors the slot of the phase that holds the block; the
    store keeps the two consistent.
    """
    phase_index: int
    week_index: int = 0

    def to_draft(self) -> PlanBlockDraft:
        return PlanBlockDraft(**self.model_dump(exclude={"phase_index", "week_index"}))


class Phase(CamelModel):
    id: str
    name: str
    week_start: int = Field(ge=0)
    week_end: int = Field(ge=0, description="Inclusive")
    blocks: List[PlanBlock] = Field(default_factory=list)

    class Config:
        frozen = True

    @model_validator(mode="after")
    def _check_week_range(self):
        if self.week_end < self.week_start:
            raise ValueError(f"week_end ({self.week_end}) < week_start ({self.week_start})")
        return self

    @property
    def midpoint_week(self) -> int:
        return self.week_start + (self.week_end - self.week_start) // 2


class UserPlan(CamelModel):
    id: str
    name: str
    created_at: str
    updated_at: str
    phases: List[Phase] = Field(default_factory=list)

    class Config:
        frozen = True

    def iter_blocks(self) -> Iterator[PlanBlock]:
        for phase in self.phases:
            yield from phase.blocks

    def all_blocks(self) -> List[PlanBlock]:
        return list(self.iter_blocks())

    def find_block(self, block_id: str) -> Optional[Tuple[int, PlanBlock]]:
        """(phase index, block) of the first block with this id."""
        for index, phase in enumerate(self.phases):
            for block in phase.blocks:
                if block.id == block_id:
                    return index, block
        return None


def default_phases() -> List[Phase]:
    """The fixed initial layout: weeks 1-4, 5-8, 9-12."""
    return [
        Phase(id="p1", name="Phase 1", week_start=1, week_end=4),
        Phase(id="p2", name="Phase 2", week_start=5, week_end=8),
        Phase(id="p3", name="Phase 3", week_start=9, week_end=12),
    ]


def new_default_plan(timestamp: str) -> UserPlan:
    return UserPlan(
        id=DEFAULT_PLAN_ID,
        name=DEFAULT_PLAN_NAME,
        created_at=timestamp,
        updated_at=timestamp,
        phases=default_phases(),
    )
