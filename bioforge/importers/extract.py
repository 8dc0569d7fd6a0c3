"""
Text Extraction Helpers

Dose/duration snippets, context tags and suggested module names.
"""

import re
from typing import List

_MG_DOSE = re.compile(r"\d+\s*mg\s*(?:daily|per day|/day|BID|QD)?", re.IGNORECASE)
_G_DOSE = re.compile(r"\d+(?:\.\d+)?\s*g\s*(?:daily|per day)?", re.IGNORECASE)
_DURATION = re.compile(r"\d+\s*weeks?|\d+\s*months?", re.IGNORECASE)

CONTEXT_TAGS = [
    "gut repair",
    "energy",
    "preconception",
    "mitochondria",
    "case study",
    "RCT",
    "2025",
    "2026",
    "Nature",
]


def extract_doses(text: str) -> List[str]:
    """
    Milligram doses, gram doses and week/month durations, each regex run
    independently; duplicates dropped, first occurrence order kept.
    """
    found: List[str] = []
    for pattern in (_MG_DOSE, _G_DOSE, _DURATION):
        found.extend(m.group(0).strip() for m in pattern.finditer(text))
    return list(dict.fromkeys(found))


def extract_context_tags(text: str) -> List[str]:
    lower = text.lower()
    return [t for t in CONTEXT_TAGS if t.lower() in lower]


def _has(pattern: str, text: str) -> bool:
    return re.search(pattern, text) is not None


def extract_suggested_modules(raw: str) -> List[str]:
    """Protocol module names suggested by document vocabulary."""
    text = raw.strip().lower()
    suggested: List[str] = []
    if _has(r"\bapheresis\b", text) and (_has(r"\btoxin\b", text) or _has(r"\bpfas\b", text)):
        suggested.append("Apheresis Toxin Reduction Stack")
    if _has(r"\b(gdf11|bdnf|growth factor)\b", text):
        suggested.append("Growth Factor Optimization")
    if _has(r"\bgut-blood\b", text) or (_has(r"\bgut\b", text) and _has(r"\baxis\b", text)):
        suggested.append("Gut-Blood Axis Protocol")
    if _has(r"\bpfas\b", text) and _has(r"\bchemical\b", text):
        suggested.append("PFAS & Chemical Mixture Mitigation")
    return list(dict.fromkeys(suggested))
