"""
Protocol Generator

Derives the export-ready protocol (per-phase doses, evidence, risks,
synergies, doctor scripts and re-test reminders) from a plan.

Two behaviours are intentionally unconditional:
- synergies list every partner the catalog declares for a peptide in the
  phase, whether or not that partner is in the plan ("potential synergies");
- every phase schedules a re-test of every tier1 + tier2 biomarker at its
  midpoint week, whatever the phase contains.
"""

import logging
from typing import List, Optional

from pydantic import BaseModel, Field

from bioforge.catalog.loader import CatalogLoader, get_catalog
from bioforge.plans.models import UserPlan
from bioforge.shared.hashing import canonicalize_and_hash

logger = logging.getLogger(__name__)

DEFAULT_FORM = "per protocol"


class ProtocolBlock(BaseModel):
    label: str
    type: str
    form: Optional[str] = None
    notes: Optional[str] = None


class ProtocolPhase(BaseModel):
    name: str
    week_range: str
    blocks: List[ProtocolBlock] = Field(default_factory=list)
    doses: List[str] = Field(default_factory=list)
    evidence: List[str] = Field(default_factory=list)
    risks: List[str] = Field(default_factory=list)
    synergies: List[str] = Field(default_factory=list)


class GeneratedProtocol(BaseModel):
    """Document-ready protocol, consumed by the PDF renderer."""
    plan_name: str
    phases: List[ProtocolPhase]
    doctor_scripts: List[str]
    biomarker_gates: List[str]
    updated_at: str
    protocol_hash: str = ""


def _unique(values: List[str]) -> List[str]:
    return list(dict.fromkeys(values))


def doctor_script_line(name: str, form: Optional[str]) -> str:
    return f"Request: {name} for [indication]. Form: {form or DEFAULT_FORM}."


def generate_protocol(
    plan: Optional[UserPlan],
    catalog: Optional[CatalogLoader] = None,
) -> Optional[GeneratedProtocol]:
    """
    Build the protocol for a plan; None when there is no plan.

    Blocks whose ref id is not a catalog peptide contribute only their own
    label, type and notes.
    """
    if plan is None:
        return None

    catalog = catalog or get_catalog()
    retest = catalog.retest_biomarkers()
    doctor_scripts: List[str] = []
    biomarker_gates: List[str] = []
    phases: List[ProtocolPhase] = []

    for phase in plan.phases:
        blocks: List[ProtocolBlock] = []
        doses: List[str] = []
        evidence: List[str] = []
        risks: List[str] = []
        synergies: List[str] = []

        for block in phase.blocks:
            pep = catalog.get_peptide(block.ref_id)
            blocks.append(ProtocolBlock(
                label=block.label,
                type=block.type.value,
                form=pep.form if pep else None,
                notes=block.notes,
            ))
            if pep is None:
                continue
            if pep.form:
                doses.append(f"{pep.name}: {pep.form}")
            evidence.append(pep.moa)
            if pep.warning:
                risks.append(pep.warning)
            synergies.extend(f"{pep.name} + {s}" for s in pep.synergies)
            doctor_scripts.append(doctor_script_line(pep.name, pep.form))

        week = phase.midpoint_week
        biomarker_gates.extend(f"Re-test {bm} at week {week}" for bm in retest)

        phases.append(ProtocolPhase(
            name=phase.name,
            week_range=f"Week {phase.week_start}-{phase.week_end}",
            blocks=blocks,
            doses=_unique(doses),
            evidence=_unique(evidence),
            risks=_unique(risks),
            synergies=_unique(synergies),
        ))

    protocol = GeneratedProtocol(
        plan_name=plan.name,
        phases=phases,
        doctor_scripts=_unique(doctor_scripts),
        biomarker_gates=_unique(biomarker_gates),
        updated_at=plan.updated_at,
    )
    protocol.protocol_hash = canonicalize_and_hash(protocol.model_dump(mode="json"))
    logger.debug(f"Generated protocol for {plan.id}: {protocol.protocol_hash}")
    return protocol


def generate_doctor_script_for_peptide(
    peptide_id: str,
    catalog: Optional[CatalogLoader] = None,
) -> str:
    """Single doctor script including the mechanism; "" for an unknown id."""
    pep = (catalog or get_catalog()).get_peptide(peptide_id)
    if pep is None:
        return ""
    return f"Request: {pep.name} for [indication]. Form: {pep.form or DEFAULT_FORM}. Mechanism: {pep.moa}"
