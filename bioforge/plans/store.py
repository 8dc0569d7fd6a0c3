"""
Plan Store

Single authoritative current plan plus the list of saved plans.

CONTRACT:
- Every mutation produces new UserPlan/Phase snapshots; nothing handed out
  to callers is edited in place.
- Every mutation of a plan's phases refreshes updated_at.
- A reference to a missing plan, phase or block is a silent no-op. Methods
  return True when they changed state and False otherwise; they never raise.
"""

import logging
from typing import Callable, List, Optional

from bioforge.shared.models import new_id, now_iso

from .models import (
    DEFAULT_PLAN_ID,
    Phase,
    PlanBlock,
    PlanBlockDraft,
    UserPlan,
    default_phases,
    new_default_plan,
)

logger = logging.getLogger(__name__)

COPY_SUFFIX = " (copy)"
SUBSET_PLAN_NAME = "From subset"


class PlanStore:
    """Current plan and saved plans."""

    def __init__(
        self,
        current_plan: Optional[UserPlan] = None,
        saved_plans: Optional[List[UserPlan]] = None,
        clock: Callable[[], str] = now_iso,
        id_factory: Callable[[], str] = new_id,
        on_change: Optional[Callable[[], None]] = None,
        seed_default: bool = True,
    ):
        self._clock = clock
        self._new_id = id_factory
        self._on_change = on_change
        if current_plan is None and seed_default:
            current_plan = new_default_plan(clock())
        self.current_plan: Optional[UserPlan] = current_plan
        self.saved_plans: List[UserPlan] = list(saved_plans or [])

    def _changed(self) -> None:
        if self._on_change:
            self._on_change()

    def _with_phases(self, plan: UserPlan, phases: List[Phase]) -> UserPlan:
        return plan.model_copy(update={"phases": phases, "updated_at": self._clock()})

    def get_saved_plan(self, plan_id: str) -> Optional[UserPlan]:
        return next((p for p in self.saved_plans if p.id == plan_id), None)

    # ------------------------------------------------------------------
    # Current plan mutations
    # ------------------------------------------------------------------

    def set_current_plan(self, plan: Optional[UserPlan]) -> None:
        """Direct replace, no validation."""
        self.current_plan = plan
        self._changed()

    def update_current_plan_phases(self, phases: List[Phase]) -> bool:
        if self.current_plan is None:
            return False
        self.current_plan = self._with_phases(self.current_plan, list(phases))
        self._changed()
        return True

    def add_block_to_phase(self, phase_index: int, week_index: int, block: PlanBlockDraft) -> bool:
        """Place a block at the end of the phase's block list."""
        plan = self.current_plan
        if plan is None or not 0 <= phase_index < len(plan.phases):
            logger.debug(f"add_block_to_phase: phase {phase_index} not found; no-op")
            return False
        placed = block.place(phase_index, week_index)
        phases = list(plan.phases)
        phase = phases[phase_index]
        phases[phase_index] = phase.model_copy(update={"blocks": [*phase.blocks, placed]})
        self.current_plan = self._with_phases(plan, phases)
        self._changed()
        return True

    def remove_block(self, phase_index: int, block_id: str) -> bool:
        """Remove a block from the given phase only."""
        plan = self.current_plan
        if plan is None or not 0 <= phase_index < len(plan.phases):
            logger.debug(f"remove_block: phase {phase_index} not found; no-op")
            return False
        phase = plan.phases[phase_index]
        remaining = [b for b in phase.blocks if b.id != block_id]
        if len(remaining) == len(phase.blocks):
            logger.debug(f"remove_block: block {block_id} not in phase {phase_index}; no-op")
            return False
        phases = list(plan.phases)
        phases[phase_index] = phase.model_copy(update={"blocks": remaining})
        self.current_plan = self._with_phases(plan, phases)
        self._changed()
        return True

    def move_block(self, from_phase: int, block_id: str, to_phase: int, to_week_index: int) -> bool:
        """
        Remove-then-add. A missing source block or destination phase makes
        the whole move a no-op, so a block is never dropped halfway.
        """
        plan = self.current_plan
        if plan is None or not 0 <= from_phase < len(plan.phases):
            return False
        if not 0 <= to_phase < len(plan.phases):
            logger.debug(f"move_block: destination phase {to_phase} not found; no-op")
            return False
        block = next((b for b in plan.phases[from_phase].blocks if b.id == block_id), None)
        if block is None:
            logger.debug(f"move_block: block {block_id} not in phase {from_phase}; no-op")
            return False
        self.remove_block(from_phase, block_id)
        self.add_block_to_phase(to_phase, to_week_index, block.to_draft())
        return True

    def update_block_organ_ids(self, block_id: str, organ_ids: List[str]) -> bool:
        """Replace the body-region tags of a block anywhere in the current plan."""
        plan = self.current_plan
        if plan is None or plan.find_block(block_id) is None:
            return False
        phases = [
            phase.model_copy(update={
                "blocks": [
                    b.model_copy(update={"organ_ids": list(organ_ids)}) if b.id == block_id else b
                    for b in phase.blocks
                ]
            })
            for phase in plan.phases
        ]
        self.current_plan = self._with_phases(plan, phases)
        self._changed()
        return True

    # ------------------------------------------------------------------
    # Saved plans
    # ------------------------------------------------------------------

    def save_current_plan(self, name: str) -> Optional[UserPlan]:
        """
        Upsert the current plan into the saved list under `name`.

        The "default" placeholder id is swapped for a fresh one. created_at is
        reset on every save, including re-saves of the same plan.
        """
        if self.current_plan is None:
            return None
        timestamp = self._clock()
        plan_id = self._new_id() if self.current_plan.id == DEFAULT_PLAN_ID else self.current_plan.id
        plan = self.current_plan.model_copy(update={
            "id": plan_id,
            "name": name,
            "created_at": timestamp,
            "updated_at": timestamp,
        })
        if self.get_saved_plan(plan_id) is not None:
            self.saved_plans = [plan if p.id == plan_id else p for p in self.saved_plans]
        else:
            self.saved_plans = [*self.saved_plans, plan]
        self.current_plan = plan
        logger.info(f"Saved plan {plan_id} ({name})")
        self._changed()
        return plan

    def load_plan(self, plan_id: str) -> bool:
        plan = self.get_saved_plan(plan_id)
        if plan is None:
            return False
        self.current_plan = plan
        self._changed()
        return True

    def delete_plan(self, plan_id: str) -> bool:
        """Drop a saved plan; if it was current, there is no current plan afterwards."""
        if self.get_saved_plan(plan_id) is None and (
            self.current_plan is None or self.current_plan.id != plan_id
        ):
            return False
        self.saved_plans = [p for p in self.saved_plans if p.id != plan_id]
        if self.current_plan is not None and self.current_plan.id == plan_id:
            self.current_plan = None
        self._changed()
        return True

    def duplicate_plan(self, plan_id: str) -> Optional[UserPlan]:
        """
        Copy a saved plan under a new id and make it current.

        Phases are copied but the block objects, and therefore block ids, are
        shared with the original. Dose logs keyed by block id cannot tell the
        two plans apart.
        """
        plan = self.get_saved_plan(plan_id)
        if plan is None:
            return None
        timestamp = self._clock()
        copy = plan.model_copy(update={
            "id": self._new_id(),
            "name": plan.name + COPY_SUFFIX,
            "created_at": timestamp,
            "updated_at": timestamp,
            "phases": [p.model_copy(update={"blocks": list(p.blocks)}) for p in plan.phases],
        })
        self.saved_plans = [*self.saved_plans, copy]
        self.current_plan = copy
        self._changed()
        return copy

    def create_plan_from_blocks(self, blocks: List[PlanBlockDraft], name: Optional[str] = None) -> UserPlan:
        """Fresh three-phase plan with every block in phase 0; saved and activated."""
        timestamp = self._clock()
        phases = default_phases()
        phases[0] = phases[0].model_copy(update={"blocks": [b.place(0, 0) for b in blocks]})
        plan = UserPlan(
            id=self._new_id(),
            name=name or SUBSET_PLAN_NAME,
            created_at=timestamp,
            updated_at=timestamp,
            phases=phases,
        )
        self.saved_plans = [*self.saved_plans, plan]
        self.current_plan = plan
        self._changed()
        return plan

    def append_blocks_to_plan(self, plan_id: str, blocks: List[PlanBlockDraft], phase_index: int) -> bool:
        """
        Append blocks to a saved plan's phase. The current plan only follows
        when it is the same plan; the target is never activated.
        """
        plan = self.get_saved_plan(plan_id)
        if plan is None or not 0 <= phase_index < len(plan.phases):
            return False
        phases = list(plan.phases)
        phase = phases[phase_index]
        placed: List[PlanBlock] = [b.place(phase_index, 0) for b in blocks]
        phases[phase_index] = phase.model_copy(update={"blocks": [*phase.blocks, *placed]})
        updated = self._with_phases(plan, phases)
        self.saved_plans = [updated if p.id == plan_id else p for p in self.saved_plans]
        if self.current_plan is not None and self.current_plan.id == plan_id:
            self.current_plan = updated
        self._changed()
        return True
