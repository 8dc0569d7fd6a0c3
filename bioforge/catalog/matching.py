"""
Fuzzy Catalog Name Matching

One rule, shared by the import parsers and the synergy graph. A candidate
matches a catalog entry when, compared case-insensitively:

1. the catalog name contains the candidate, or
2. the candidate contains the catalog name's first token (split on
   whitespace, "(" or "/"), or
3. the candidate with whitespace runs replaced by "-" equals the entry id.

Conditions are checked in that order and the first catalog entry that
satisfies any of them wins.
"""

import re
from typing import Iterable, Optional, TypeVar

_TOKEN_SPLIT = re.compile(r"[\s(/]")
_WHITESPACE = re.compile(r"\s+")

T = TypeVar("T")


def first_token(name: str) -> str:
    """'SS-31 / Elamipretide (Forzinity)' -> 'ss-31'"""
    return _TOKEN_SPLIT.split(name, maxsplit=1)[0].lower()


def hyphenate(text: str) -> str:
    return _WHITESPACE.sub("-", text.lower())


def names_match(candidate: str, name: str, entry_id: Optional[str] = None) -> bool:
    """Apply the catalog matching rule to a single entry."""
    lower = candidate.lower()
    if not lower.strip():
        return False
    if lower in name.lower():
        return True
    token = first_token(name)
    if token and token in lower:
        return True
    return entry_id is not None and entry_id == hyphenate(candidate)


def find_match(candidate: str, entries: Iterable[T]) -> Optional[T]:
    """
    First entry (anything with .name and .id) matching the candidate.
    """
    for entry in entries:
        if names_match(candidate, entry.name, entry.id):
            return entry
    return None
