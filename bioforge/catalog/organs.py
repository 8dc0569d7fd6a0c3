"""
Body Map Organ Registry

Organ ids that plan blocks can be tagged with, their undirected
connections, and the keyword table used to infer tags from free text.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple


@dataclass(frozen=True)
class OrganDef:
    id: str
    label: str
    connections: Tuple[str, ...] = field(default_factory=tuple)


ORGANS: List[OrganDef] = [
    OrganDef("brain", "Brain / CNS", ("vagus", "epigenetic")),
    OrganDef("vagus", "Vagus Nerve", ("brain", "gut", "heart")),
    OrganDef("lungs", "Lungs", ("heart", "blood")),
    OrganDef("heart", "Heart", ("vagus", "lungs", "blood", "mitochondria")),
    OrganDef("liver", "Liver", ("gut", "blood", "mitochondria")),
    OrganDef("gut", "Gut", ("vagus", "liver", "blood")),
    OrganDef("mitochondria", "Mitochondria", ("heart", "liver", "bone-muscle")),
    OrganDef("kidneys", "Kidneys", ("blood",)),
    OrganDef("blood", "Blood / Plasma", ("liver", "lungs", "gut", "kidneys")),
    OrganDef("skin", "Skin", ()),
    OrganDef("reproductive", "Reproductive", ("epigenetic",)),
    OrganDef("bone-muscle", "Bone / Muscle", ("mitochondria",)),
    OrganDef("epigenetic", "Epigenetic", ("brain", "reproductive")),
]

ORGAN_IDS: List[str] = [o.id for o in ORGANS]

_CONNECTION_LABELS = {
    ("vagus", "gut"): "Gut–Brain axis",
    ("liver", "mitochondria"): "Bile acids",
    ("gut", "blood"): "Gut–Blood axis",
}

# organ -> keywords; any keyword present in a text tags it with the organ
ORGAN_KEYWORDS: Dict[str, List[str]] = {
    "brain": ["brain", "cns", "cognitive", "bdnf", "gdf11", "neuro", "neuron", "blood-brain"],
    "liver": ["liver", "hepatic", "detox", "pfas", "toxin", "chemical load", "xenobiotic"],
    "blood": ["apheresis", "plasma", "blood", "serum", "circulation", "plasmapheresis"],
    "gut": ["gut", "intestinal", "gut-blood", "microbiome", "gut-brain", "vagus", "5r",
            "remove", "replace", "reinoculate", "repair", "rebalance"],
    "heart": ["heart", "cardiovascular", "cardiac"],
    "mitochondria": ["mitochondria", "mitophagy", "urolithin", "ss-31", "oxidative"],
    "reproductive": ["reproductive", "preconception", "fertility", "sperm", "egg"],
    "epigenetic": ["epigenetic", "methylation", "histone", "dna methylation"],
    "kidneys": ["kidney", "renal"],
    "lungs": ["lung", "pulmonary", "respiratory"],
    "skin": ["skin", "dermal"],
    "bone-muscle": ["bone", "muscle", "skeletal", "sarcopenia"],
}


def is_known_organ(organ_id: str) -> bool:
    return organ_id in ORGAN_IDS


def get_organ(organ_id: str) -> Optional[OrganDef]:
    return next((o for o in ORGANS if o.id == organ_id), None)


def infer_organ_ids(text: str) -> List[str]:
    """
    Organ ids whose keywords occur in the text (substring, case-insensitive),
    in keyword-table order.
    """
    lower = text.lower()
    return [
        organ_id
        for organ_id, keywords in ORGAN_KEYWORDS.items()
        if any(k in lower for k in keywords)
    ]


def organ_connections() -> List[Tuple[str, str, Optional[str]]]:
    """
    Deduplicated undirected connections as (from, to, label).
    """
    out: List[Tuple[str, str, Optional[str]]] = []
    seen = set()
    for organ in ORGANS:
        for to_id in organ.connections:
            key = tuple(sorted((organ.id, to_id)))
            if key in seen:
                continue
            seen.add(key)
            out.append((organ.id, to_id, _CONNECTION_LABELS.get((organ.id, to_id))))
    return out


def connection_key(a: str, b: str) -> str:
    return "-".join(sorted((a, b)))
