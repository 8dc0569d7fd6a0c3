"""
Import Parser Models

Parsers emit candidate records; the caller assigns ids and persists them.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from bioforge.catalog.models import PlanBlockType


class ParsedImportItem(BaseModel):
    """Candidate compendium item extracted from text or JSON."""
    name: str
    type: PlanBlockType
    dose_examples: Optional[List[str]] = None
    moa: Optional[str] = None
    personal_notes: Optional[str] = None
    ref_id: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    organ_ids: Optional[List[str]] = None


class ParsedQuickAdd(BaseModel):
    """Candidate item from a single conversational line."""
    name: str
    type: PlanBlockType = PlanBlockType.PEPTIDE
    dose_examples: Optional[List[str]] = None
    personal_notes: Optional[str] = None
    ref_id: Optional[str] = None


@dataclass
class ImportPreview:
    """What an import would add, shown to the user before committing."""
    items: List[ParsedImportItem]
    suggested_modules: List[str]
    source_format: str
    parse_stats: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["items"] = [item.model_dump(mode="json") for item in self.items]
        return data
