"""
BioForge Quick-Add Parser - Tests
=================================
Conversational single-line and stack input.
"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from bioforge.catalog import CatalogLoader
from bioforge.importers import parse_quick_add_input, parse_quick_add_input_multiple


@pytest.fixture(autouse=True)
def reset_catalog():
    CatalogLoader.reset()
    yield
    CatalogLoader.reset()


class TestSingle:

    def test_full_sentence(self):
        parsed = parse_quick_add_input("Add Urolithin A 500mg daily for 12 weeks with mitophagy note")
        assert parsed.name == "Urolithin A (Mitopure)"
        assert parsed.ref_id == "urolithin-a"
        assert parsed.type == "peptide"
        assert "500mg daily" in parsed.dose_examples
        assert "12 weeks" in parsed.dose_examples
        assert parsed.personal_notes == "mitophagy note"

    def test_leading_start_verb(self):
        parsed = parse_quick_add_input("start KPV")
        assert parsed.ref_id == "kpv"
        assert parsed.dose_examples is None
        assert parsed.personal_notes is None

    def test_unmatched_name_kept_as_typed(self):
        parsed = parse_quick_add_input("Custom Tincture 10mg")
        assert parsed.name == "Custom Tincture"
        assert parsed.ref_id is None
        assert parsed.dose_examples == ["10mg"]

    def test_only_first_stack_candidate(self):
        parsed = parse_quick_add_input("KPV and BPC-157")
        assert parsed.ref_id == "kpv"

    @pytest.mark.parametrize("raw", ["", "   ", None])
    def test_empty_returns_none(self, raw):
        assert parse_quick_add_input(raw) is None


class TestMultiple:

    def test_stack_shares_duration(self):
        items = parse_quick_add_input_multiple("Urolithin A + SS-31 for 8 weeks")
        assert [i.ref_id for i in items] == ["urolithin-a", "ss31"]
        assert all(i.dose_examples == ["8 weeks"] for i in items)

    def test_stack_shares_note(self):
        items = parse_quick_add_input_multiple("Add KPV and BPC-157 with gut repair note")
        assert [i.name for i in items] == ["KPV", "BPC-157"]
        assert all(i.personal_notes == "gut repair note" for i in items)
        assert all(i.dose_examples is None for i in items)

    def test_single_name_is_one_item(self):
        assert len(parse_quick_add_input_multiple("KPV")) == 1

    def test_empty(self):
        assert parse_quick_add_input_multiple("") == []
