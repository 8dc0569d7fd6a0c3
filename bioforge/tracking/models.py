"""
Tracking Log Models

Records reference plan blocks by id only; deleting a block leaves its
dose history (with the denormalized label) in place.
"""

from typing import Optional

from pydantic import Field

from bioforge.shared.models import CamelModel


class DoseLogEntry(CamelModel):
    """At most one entry per (date, plan_block_id)."""
    date: str = Field(description="YYYY-MM-DD")
    plan_block_id: str
    ref_id: str
    label: str
    taken: bool

    class Config:
        frozen = True

    @property
    def key(self):
        return (self.date, self.plan_block_id)


class BiomarkerLog(CamelModel):
    id: str
    date: str
    biomarker_id: str
    biomarker_name: str
    value: float
    unit: Optional[str] = None

    class Config:
        frozen = True


class SymptomEntry(CamelModel):
    id: str
    date: str
    text: str

    class Config:
        frozen = True


class RetestAlert(CamelModel):
    id: str
    biomarker_id: str
    biomarker_name: str
    due_date: str
    dismissed: bool = False

    class Config:
        frozen = True
