"""
Synergy Graph Builder

Nodes are plan blocks; an edge A -> B exists when A's catalog peptide
declares a synergy partner that matches block B (label, resolved peptide
name, or ref id), using the shared catalog matching rule. Unlike the
protocol generator, only partners actually present in the plan count.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from bioforge.catalog.loader import CatalogLoader, get_catalog
from bioforge.catalog.matching import names_match
from bioforge.plans.models import PlanBlock, UserPlan

TIER_STRENGTH: Dict[str, float] = {"S": 1.0, "A": 0.7, "Frontier": 0.5}
DEFAULT_STRENGTH = 0.6
MIN_GRAPH_BLOCKS = 2


class SynergyNode(BaseModel):
    id: str
    label: str
    type: str
    ref_id: Optional[str] = None
    moa: Optional[str] = None
    tier: Optional[str] = None


class SynergyEdge(BaseModel):
    source: str
    target: str
    label: Optional[str] = None
    strength: float = Field(default=DEFAULT_STRENGTH, ge=0.0, le=1.0)


class SynergyGraphData(BaseModel):
    nodes: List[SynergyNode]
    edges: List[SynergyEdge]


def _block_matches(synergy: str, block: PlanBlock, catalog: CatalogLoader) -> bool:
    if names_match(synergy, block.label, block.ref_id):
        return True
    pep = catalog.get_peptide(block.ref_id)
    return pep is not None and names_match(synergy, pep.name, pep.id)


def find_block_by_synergy(
    blocks: List[PlanBlock],
    synergy: str,
    catalog: Optional[CatalogLoader] = None,
) -> Optional[PlanBlock]:
    """First block in plan order matching a synergy partner name."""
    catalog = catalog or get_catalog()
    return next((b for b in blocks if _block_matches(synergy, b, catalog)), None)


def get_synergy_graph_data(
    plan: Optional[UserPlan],
    catalog: Optional[CatalogLoader] = None,
) -> Optional[SynergyGraphData]:
    """
    Build the graph; None when there is no plan or fewer than two blocks
    (nothing worth visualising).
    """
    if plan is None:
        return None
    blocks = plan.all_blocks()
    if len(blocks) < MIN_GRAPH_BLOCKS:
        return None

    catalog = catalog or get_catalog()
    nodes: List[SynergyNode] = []
    for block in blocks:
        pep = catalog.get_peptide(block.ref_id)
        nodes.append(SynergyNode(
            id=block.id,
            label=block.label,
            type=block.type.value,
            ref_id=block.ref_id,
            moa=pep.moa if pep else None,
            tier=pep.tier.value if pep and pep.tier else None,
        ))

    edges: List[SynergyEdge] = []
    for block_a in blocks:
        pep_a = catalog.get_peptide(block_a.ref_id)
        if pep_a is None or not pep_a.synergies:
            continue
        strength = TIER_STRENGTH.get(pep_a.tier.value, DEFAULT_STRENGTH) if pep_a.tier else DEFAULT_STRENGTH
        for synergy_name in pep_a.synergies:
            block_b = find_block_by_synergy(blocks, synergy_name, catalog)
            # first match only; a self-match means no partner in the plan
            if block_b is None or block_b.id == block_a.id:
                continue
            edges.append(SynergyEdge(
                source=block_a.id,
                target=block_b.id,
                label=f"{pep_a.name} + {synergy_name}",
                strength=strength,
            ))

    return SynergyGraphData(nodes=nodes, edges=edges)
