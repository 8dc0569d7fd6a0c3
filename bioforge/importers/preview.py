"""
Import preview: run the matching parser and collect stats for review.
"""

from typing import Optional

from bioforge.catalog.loader import CatalogLoader

from .extract import extract_suggested_modules
from .json_parser import parse_knowledge_import_json
from .models import ImportPreview
from .text_parser import parse_knowledge_import_text

SOURCE_FORMATS = ("text", "json")


def preview_import(
    raw: str,
    source_format: str = "text",
    catalog: Optional[CatalogLoader] = None,
) -> ImportPreview:
    """Parse raw input as text or JSON; anything but "json" is treated as text."""
    if source_format == "json":
        items = parse_knowledge_import_json(raw, catalog)
        suggested = []
    else:
        source_format = "text"
        items = parse_knowledge_import_text(raw, catalog)
        suggested = extract_suggested_modules(raw or "")

    stats = {
        "items": len(items),
        "peptides": sum(1 for i in items if i.type == "peptide"),
        "tests": sum(1 for i in items if i.type == "test"),
        "catalog_matched": sum(1 for i in items if i.type == "peptide" and i.ref_id),
    }
    return ImportPreview(
        items=items,
        suggested_modules=suggested,
        source_format=source_format,
        parse_stats=stats,
    )
