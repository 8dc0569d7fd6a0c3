"""
Structured JSON Knowledge Import

Accepts an array of objects (or a single object) shaped like
{name|label|title, type?, dose?|doseExamples?|duration?, moa?|description?,
notes?|personalNotes?|note?, tags?, refId?|id?}.
"""

import json
import logging
from typing import Any, Dict, List, Optional

from bioforge.catalog.loader import CatalogLoader, get_catalog
from bioforge.catalog.models import PLAN_BLOCK_TYPES, PlanBlockType
from bioforge.catalog.organs import infer_organ_ids

from .models import ParsedImportItem

logger = logging.getLogger(__name__)

JSON_IMPORT_TAG = "Imported from JSON"
UNNAMED = "Unnamed"


def _first_present(obj: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = obj.get(key)
        if value is not None:
            return value
    return None


def _as_text(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def _parse_entry(entry: Dict[str, Any], catalog: CatalogLoader) -> ParsedImportItem:
    name = str(_first_present(entry, "name", "label", "title") or UNNAMED)
    raw_type = entry.get("type")
    item_type = (
        PlanBlockType(raw_type)
        if isinstance(raw_type, str) and raw_type in PLAN_BLOCK_TYPES
        else PlanBlockType.PEPTIDE
    )

    dose_examples: List[str] = []
    if entry.get("dose"):
        dose_examples.append(str(entry["dose"]))
    if isinstance(entry.get("doseExamples"), list):
        dose_examples.extend(str(d) for d in entry["doseExamples"])
    if entry.get("duration"):
        dose_examples.append(str(entry["duration"]))

    pep = catalog.find_peptide(name) if item_type == PlanBlockType.PEPTIDE else None

    description = _as_text(_first_present(entry, "moa", "description"))
    organ_ids = infer_organ_ids((description or "") + " " + (_as_text(entry.get("notes")) or ""))

    tags = entry.get("tags")
    if not tags:
        tags = [JSON_IMPORT_TAG]
    elif isinstance(tags, list):
        tags = [str(t) for t in tags]
    else:
        tags = [str(tags)]

    return ParsedImportItem(
        name=pep.name if pep else name,
        type=item_type,
        ref_id=pep.id if pep else _as_text(_first_present(entry, "refId", "id")),
        moa=description if description is not None else (pep.moa if pep else None),
        dose_examples=dose_examples or None,
        personal_notes=_as_text(_first_present(entry, "notes", "personalNotes", "note")),
        tags=tags,
        organ_ids=organ_ids or None,
    )


def parse_knowledge_import_json(
    raw: str,
    catalog: Optional[CatalogLoader] = None,
) -> List[ParsedImportItem]:
    """
    Parse a JSON document into candidate items.

    Peptide-typed entries are resolved against the catalog by fuzzy name to
    pick up the canonical name, id and mechanism. Malformed JSON yields [].
    """
    try:
        data = json.loads(raw)
    except (TypeError, ValueError, RecursionError) as e:
        logger.warning(f"JSON import rejected: {e}")
        return []

    catalog = catalog or get_catalog()
    entries = data if isinstance(data, list) else [data]
    results: List[ParsedImportItem] = []
    for entry in entries:
        if isinstance(entry, str):
            entry = {"name": entry}
        if not isinstance(entry, dict):
            logger.warning(f"JSON import skipped non-object entry: {entry!r}")
            continue
        results.append(_parse_entry(entry, catalog))
    return results
