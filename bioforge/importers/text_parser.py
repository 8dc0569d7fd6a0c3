"""
Free-Text Knowledge Import

Turns pasted notes or extracted document text into candidate compendium
items by spotting catalog peptide names and re-test biomarker names.

For non-empty input the result is never empty: when nothing is recognised a
single fallback item carries the text forward so it is not silently lost.
"""

import logging
import re
from typing import List, Optional

from bioforge.catalog.loader import CatalogLoader, get_catalog
from bioforge.catalog.models import CatalogPeptide, PlanBlockType
from bioforge.catalog.organs import infer_organ_ids

from .extract import extract_context_tags, extract_doses
from .models import ParsedImportItem

logger = logging.getLogger(__name__)

TEXT_IMPORT_TAG = "Imported from text"
FALLBACK_NAME = "Imported note"

SNIPPET_BEFORE = 20
SNIPPET_AFTER = 80
NOTE_SNIPPET_MIN = 60
NOTE_SNIPPET_MAX = 120
FALLBACK_NAME_MAX = 120
FALLBACK_NOTES_MAX = 300
ELLIPSIS = "…"


def peptide_pattern(name: str) -> re.Pattern:
    """Catalog name as a regex with flexible (optional) whitespace between words."""
    return re.compile(r"\s*".join(re.escape(word) for word in name.split()), re.IGNORECASE)


def _peptide_item(text: str, match: re.Match, pep: CatalogPeptide) -> ParsedImportItem:
    start = match.start()
    snippet = text[max(0, start - SNIPPET_BEFORE):start + SNIPPET_AFTER]
    doses = extract_doses(snippet)
    tags = extract_context_tags(snippet)
    organ_ids = infer_organ_ids(snippet + " " + (pep.moa or ""))
    notes: Optional[str] = None
    if len(snippet) > NOTE_SNIPPET_MIN:
        notes = snippet[:NOTE_SNIPPET_MAX].strip() + ELLIPSIS
    return ParsedImportItem(
        name=pep.name,
        type=PlanBlockType.PEPTIDE,
        ref_id=pep.id,
        moa=pep.moa,
        dose_examples=doses or None,
        personal_notes=notes,
        tags=tags or [TEXT_IMPORT_TAG],
        organ_ids=organ_ids or None,
    )


def _fallback_item(text: str) -> ParsedImportItem:
    first_line = text.split("\n")[0].strip()[:FALLBACK_NAME_MAX] or text[:FALLBACK_NAME_MAX]
    doses = extract_doses(text)
    organ_ids = infer_organ_ids(text)
    if len(text) > FALLBACK_NAME_MAX:
        notes = text[:FALLBACK_NOTES_MAX].strip() + ELLIPSIS
    else:
        notes = text
    return ParsedImportItem(
        name=first_line or FALLBACK_NAME,
        type=PlanBlockType.PEPTIDE,
        dose_examples=doses or None,
        personal_notes=notes,
        tags=[TEXT_IMPORT_TAG],
        organ_ids=organ_ids or None,
    )


def parse_knowledge_import_text(
    raw: str,
    catalog: Optional[CatalogLoader] = None,
) -> List[ParsedImportItem]:
    """
    Parse raw text into candidate items.

    1. One peptide item per catalog peptide found (first occurrence), with a
       notes snippet around the match, doses, context tags and inferred organs.
    2. One test item per re-test biomarker name found as a substring.
    3. If neither matched, one fallback item built from the first line.

    Returns [] for blank input.
    """
    text = (raw or "").strip()
    if not text:
        return []

    catalog = catalog or get_catalog()
    results: List[ParsedImportItem] = []
    seen = set()

    for pep in catalog.peptides:
        if pep.id in seen:
            continue
        match = peptide_pattern(pep.name).search(text)
        if match is None:
            continue
        seen.add(pep.id)
        results.append(_peptide_item(text, match, pep))

    lower = text.lower()
    text_organs = None
    for biomarker in catalog.retest_biomarkers():
        key = f"test-{biomarker}"
        if key in seen or biomarker.lower() not in lower:
            continue
        seen.add(key)
        if text_organs is None:
            text_organs = infer_organ_ids(text)
        results.append(ParsedImportItem(
            name=biomarker,
            type=PlanBlockType.TEST,
            ref_id=key,
            tags=[TEXT_IMPORT_TAG],
            organ_ids=text_organs or None,
        ))

    if not results:
        logger.debug("No catalog matches in imported text; using fallback item")
        return [_fallback_item(text)]

    logger.debug(f"Text import matched {len(results)} items: {[r.name for r in results]}")
    return results
