"""BioForge Shared Utilities"""

from .hashing import (
    canonicalize,
    canonicalize_and_hash,
    verify_hash,
)
from .models import CamelModel, now_iso, new_id

__all__ = [
    "canonicalize",
    "canonicalize_and_hash",
    "verify_hash",
    "CamelModel",
    "now_iso",
    "new_id",
]
