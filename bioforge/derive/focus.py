"""
Focus Filter

Pure per-block visibility rules for the plan views. Filtering never
reorders blocks or changes the phase structure.
"""

from typing import Callable, Iterable, List, Optional, Set

from bioforge.plans.models import FocusMode, Phase, PlanBlock, UserPlan

ModuleItemResolver = Callable[[str], Iterable[str]]

PRECONCEPTION_REF = "preconception"
PRECONCEPTION_TEXT = "preconception"
GUT_REPAIR_REF = "gut-repair"
GUT_REPAIR_TEXT = "gut repair"


def _mentions(block: PlanBlock, ref_keyword: str, text_keyword: str) -> bool:
    return (
        ref_keyword in (block.ref_id or "").lower()
        or text_keyword in (block.label or "").lower()
        or text_keyword in (block.notes or "").lower()
    )


def filter_block(block: PlanBlock, mode: str, module_item_ids: Set[str]) -> bool:
    """
    Whether a block is visible in the given focus mode.

    Unknown modes show everything.
    """
    if mode == FocusMode.FULL:
        return True
    if mode == FocusMode.PEPTIDES_ONLY:
        return block.type == "peptide"
    if mode == FocusMode.PRECONCEPTION:
        return _mentions(block, PRECONCEPTION_REF, PRECONCEPTION_TEXT)
    if mode == FocusMode.GUT_REPAIR:
        return _mentions(block, GUT_REPAIR_REF, GUT_REPAIR_TEXT)
    if mode == FocusMode.COMPENDIUM_CUSTOM:
        return block.ref_id in module_item_ids or block.id in module_item_ids
    return True


def _module_item_ids(
    mode: str,
    module_id: Optional[str],
    resolve_module_items: Optional[ModuleItemResolver],
) -> Set[str]:
    if mode == FocusMode.COMPENDIUM_CUSTOM and module_id and resolve_module_items:
        return set(resolve_module_items(module_id))
    return set()


def get_filtered_phases(
    plan: Optional[UserPlan],
    mode: str,
    module_id: Optional[str] = None,
    resolve_module_items: Optional[ModuleItemResolver] = None,
) -> List[Phase]:
    """Every phase of the plan, keeping only the visible blocks. [] for no plan."""
    if plan is None:
        return []
    if mode == FocusMode.FULL:
        return list(plan.phases)
    item_ids = _module_item_ids(mode, module_id, resolve_module_items)
    return [
        phase.model_copy(update={
            "blocks": [b for b in phase.blocks if filter_block(b, mode, item_ids)]
        })
        for phase in plan.phases
    ]


def get_filtered_plan(
    plan: Optional[UserPlan],
    mode: str,
    module_id: Optional[str] = None,
    resolve_module_items: Optional[ModuleItemResolver] = None,
) -> Optional[UserPlan]:
    if plan is None:
        return None
    phases = get_filtered_phases(plan, mode, module_id, resolve_module_items)
    return plan.model_copy(update={"phases": phases})
