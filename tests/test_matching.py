"""
BioForge Catalog Matching - Tests
=================================
The single fuzzy matching rule shared by the parsers and the synergy graph.
"""

import sys
from dataclasses import dataclass
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from bioforge.catalog.matching import find_match, first_token, hyphenate, names_match


@dataclass
class Entry:
    id: str
    name: str


ENTRIES = [
    Entry("urolithin-a", "Urolithin A (Mitopure)"),
    Entry("ss31", "SS-31 / Elamipretide (Forzinity)"),
    Entry("mots-c", "MOTS-c"),
]


class TestHelpers:
    """Tokenizing and hyphenating."""

    def test_first_token_splits_on_space_paren_and_slash(self):
        assert first_token("Urolithin A (Mitopure)") == "urolithin"
        assert first_token("SS-31 / Elamipretide") == "ss-31"
        assert first_token("GHK-Cu(oral)") == "ghk-cu"

    def test_hyphenate_collapses_whitespace_runs(self):
        assert hyphenate("Urolithin   A") == "urolithin-a"


class TestNamesMatch:
    """Precedence: name contains candidate, candidate contains token, hyphenated id."""

    def test_catalog_name_contains_candidate(self):
        assert names_match("mitopure", "Urolithin A (Mitopure)")

    def test_candidate_contains_first_token(self):
        assert names_match("take SS-31 daily", "SS-31 / Elamipretide (Forzinity)")

    def test_hyphenated_candidate_equals_id(self):
        assert names_match("mots c", "Something Else", "mots-c")

    def test_case_insensitive(self):
        assert names_match("UROLITHIN", "Urolithin A (Mitopure)")

    def test_empty_candidate_never_matches(self):
        assert not names_match("", "Urolithin A (Mitopure)", "urolithin-a")
        assert not names_match("   ", "KPV", "kpv")

    def test_unrelated_name(self):
        assert not names_match("pomegranate diet", "SS-31 / Elamipretide (Forzinity)", "ss31")


class TestFindMatch:

    def test_first_matching_entry_wins(self):
        assert find_match("SS-31", ENTRIES).id == "ss31"
        assert find_match("Urolithin A", ENTRIES).id == "urolithin-a"

    def test_no_match_returns_none(self):
        assert find_match("Vitamin C", ENTRIES) is None
