"""
Base model and small helpers shared by every layer.
"""

import uuid
from datetime import datetime, timezone

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


def now_iso() -> str:
    """Current UTC timestamp in ISO format."""
    return datetime.now(timezone.utc).isoformat()


def new_id() -> str:
    return str(uuid.uuid4())


class CamelModel(BaseModel):
    """
    Persisted record.

    Serializes with camelCase aliases (refId, planBlockId, ...) so the stored
    blob keeps its documented shape, and accepts either spelling on input.
    """

    class Config:
        alias_generator = to_camel
        populate_by_name = True

    def to_blob(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
