"""
Quick-Add Parser

Conversational one-liners such as
"Add Urolithin A 500mg daily for 12 weeks with mitophagy note" or
"Urolithin A + SS-31 for 8 weeks".
"""

import logging
import re
from typing import List, Optional, Tuple

from bioforge.catalog.loader import CatalogLoader, get_catalog
from bioforge.catalog.models import PlanBlockType

from .models import ParsedQuickAdd

logger = logging.getLogger(__name__)

_LEADING_VERB = re.compile(r"^(add|start)\s+", re.IGNORECASE)
_WITH_CLAUSE = re.compile(r"\s+with\s+(.+)$", re.IGNORECASE)
_FOR_DURATION = re.compile(r"\s+for\s+(\d+\s*weeks?|\d+\s*months?|\d+\s*days?)", re.IGNORECASE)
_MG_DOSE = re.compile(r"\d+\s*mg\s*(?:daily|per day|/day)?", re.IGNORECASE)
_STACK_SPLIT = re.compile(r"\s+and\s+|\s*\+\s*|\s+stack\s+", re.IGNORECASE)


def _strip_clauses(text: str) -> Tuple[str, str, List[str]]:
    """Peel off the trailing "with ..." note and the "for N weeks" duration."""
    rest = text
    note = ""
    dose_parts: List[str] = []

    with_match = _WITH_CLAUSE.search(rest)
    if with_match:
        note = with_match.group(1).strip()
        rest = rest[:with_match.start()].strip()

    for_match = _FOR_DURATION.search(rest)
    if for_match:
        dose_parts.append(for_match.group(1).strip())
        rest = (rest[:for_match.start()] + rest[for_match.end():]).strip()

    return rest, note, dose_parts


def _split_candidates(rest: str) -> List[str]:
    return [part.strip() for part in _STACK_SPLIT.split(rest) if part.strip()]


def parse_quick_add_input(
    raw: str,
    catalog: Optional[CatalogLoader] = None,
) -> Optional[ParsedQuickAdd]:
    """
    Parse a single quick-add line.

    Only the first stack candidate becomes the item. It is resolved against
    the catalog by fuzzy name; unmatched names are kept as typed, as a
    peptide. Returns None when no name is left after stripping.
    """
    text = (raw or "").strip()
    if not text:
        return None

    catalog = catalog or get_catalog()
    rest = _LEADING_VERB.sub("", text, count=1).strip()
    rest, note, dose_parts = _strip_clauses(rest)

    dose_match = _MG_DOSE.search(rest)
    if dose_match:
        dose_parts.append(dose_match.group(0).strip())
        rest = (rest[:dose_match.start()] + rest[dose_match.end():]).strip()

    candidates = _split_candidates(rest)
    name = candidates[0] if candidates else rest
    if not name:
        return None

    ref_id = None
    pep = catalog.find_peptide(name)
    if pep is not None:
        name = pep.name
        ref_id = pep.id

    logger.debug(f"Quick add parsed {raw!r} -> {name} (ref_id={ref_id})")
    return ParsedQuickAdd(
        name=name,
        type=PlanBlockType.PEPTIDE,
        ref_id=ref_id,
        dose_examples=dose_parts or None,
        personal_notes=note or None,
    )


def parse_quick_add_input_multiple(
    raw: str,
    catalog: Optional[CatalogLoader] = None,
) -> List[ParsedQuickAdd]:
    """
    Parse a stack line into one item per "and" / "+" / "stack" segment.

    Every item shares the line's duration and note. Milligram doses are not
    split out here; they stay part of the segment text.
    """
    text = _LEADING_VERB.sub("", (raw or "").strip(), count=1).strip()
    if not text:
        return []

    catalog = catalog or get_catalog()
    rest, note, dose_parts = _strip_clauses(text)

    results: List[ParsedQuickAdd] = []
    for part in _split_candidates(rest):
        pep = catalog.find_peptide(part)
        results.append(ParsedQuickAdd(
            name=pep.name if pep else part,
            type=PlanBlockType.PEPTIDE,
            ref_id=pep.id if pep else None,
            dose_examples=list(dose_parts) or None,
            personal_notes=note or None,
        ))
    return results
