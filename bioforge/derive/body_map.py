"""
Body Map Views

Which plan blocks are tagged to which organ, and how strongly each organ
connection is lit up.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel

from bioforge.catalog.organs import connection_key, get_organ, organ_connections
from bioforge.plans.models import UserPlan

MAX_CONNECTION_STRENGTH = 3


class OrganBlockRef(BaseModel):
    id: str
    label: str
    phase: str


class OrganDetail(BaseModel):
    organ_id: str
    label: str
    blocks: List[OrganBlockRef]
    impact_score: int


def blocks_by_organ(plan: Optional[UserPlan]) -> Dict[str, List[OrganBlockRef]]:
    out: Dict[str, List[OrganBlockRef]] = {}
    if plan is None:
        return out
    for phase in plan.phases:
        for block in phase.blocks:
            for organ_id in block.organ_ids or []:
                out.setdefault(organ_id, []).append(
                    OrganBlockRef(id=block.id, label=block.label, phase=phase.name)
                )
    return out


def organ_connection_strength(plan: Optional[UserPlan]) -> Dict[str, int]:
    """Per connection key ("gut-vagus"): tagged blocks on both ends, capped at 3."""
    by_organ = blocks_by_organ(plan)
    strength: Dict[str, int] = {}
    for from_id, to_id, _label in organ_connections():
        total = len(by_organ.get(from_id, [])) + len(by_organ.get(to_id, []))
        strength[connection_key(from_id, to_id)] = min(MAX_CONNECTION_STRENGTH, total)
    return strength


def organ_detail(
    plan: Optional[UserPlan],
    organ_id: str,
    chemical_load: bool = False,
) -> Optional[OrganDetail]:
    """Blocks tagged to one organ; impact is their count (+1 with chemical load)."""
    organ = get_organ(organ_id)
    if organ is None:
        return None
    blocks = blocks_by_organ(plan).get(organ_id, [])
    return OrganDetail(
        organ_id=organ.id,
        label=organ.label,
        blocks=blocks,
        impact_score=len(blocks) + (1 if chemical_load else 0),
    )
