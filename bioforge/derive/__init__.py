"""
BioForge Derivations

Pure projections of a plan: focus filtering, protocol generation, the
synergy graph and body-map views.

Version: derive_v1
"""

from .focus import filter_block, get_filtered_phases, get_filtered_plan
from .protocol import (
    GeneratedProtocol,
    ProtocolBlock,
    ProtocolPhase,
    generate_doctor_script_for_peptide,
    generate_protocol,
)
from .synergy import (
    SynergyEdge,
    SynergyGraphData,
    SynergyNode,
    find_block_by_synergy,
    get_synergy_graph_data,
)
from .body_map import blocks_by_organ, organ_connection_strength, organ_detail

__all__ = [
    "filter_block",
    "get_filtered_phases",
    "get_filtered_plan",
    "GeneratedProtocol",
    "ProtocolBlock",
    "ProtocolPhase",
    "generate_doctor_script_for_peptide",
    "generate_protocol",
    "SynergyEdge",
    "SynergyGraphData",
    "SynergyNode",
    "find_block_by_synergy",
    "get_synergy_graph_data",
    "blocks_by_organ",
    "organ_connection_strength",
    "organ_detail",
]

__version__ = "derive_v1"
