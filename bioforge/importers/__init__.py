"""
BioForge Import Parsers

Free-text, structured JSON and quick-add parsers that turn user input into
candidate catalog items. Parsers never raise: bad input yields [] or None.

Version: import_parsers_v1
"""

from .models import ImportPreview, ParsedImportItem, ParsedQuickAdd
from .extract import extract_context_tags, extract_doses, extract_suggested_modules
from .text_parser import parse_knowledge_import_text
from .json_parser import parse_knowledge_import_json
from .quick_add import parse_quick_add_input, parse_quick_add_input_multiple
from .preview import preview_import

__all__ = [
    "ImportPreview",
    "ParsedImportItem",
    "ParsedQuickAdd",
    "extract_context_tags",
    "extract_doses",
    "extract_suggested_modules",
    "parse_knowledge_import_text",
    "parse_knowledge_import_json",
    "parse_quick_add_input",
    "parse_quick_add_input_multiple",
    "preview_import",
]

__version__ = "import_parsers_v1"
