"""
BioForge Application State - Tests
==================================
Compendium-to-plan placement, ingestion flows, focus and UI state, autosave
and the persisted round-trip.
"""

import itertools
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from bioforge.catalog import CatalogLoader, LibraryItem
from bioforge.config import Settings
from bioforge.importers import parse_knowledge_import_text
from bioforge.plans import PlanBlockDraft
from bioforge.session import AppState, build_backup_bundle
from bioforge.storage import JsonFileBackend, MemoryBackend
from bioforge.tracking.models import DoseLogEntry


def make_clock():
    ticks = itertools.count(1)
    return lambda: f"2026-01-01T00:00:00.{next(ticks):06d}+00:00"


def make_ids():
    counter = itertools.count(1)
    return lambda: f"id-{next(counter)}"


def make_ms_clock():
    ticks = itertools.count(1_700_000_000_000)
    return lambda: next(ticks)


def make_state(backend=None, autosave=True):
    return AppState(
        backend=backend if backend is not None else MemoryBackend(),
        autosave=autosave,
        clock=make_clock(),
        id_factory=make_ids(),
        ms_clock=make_ms_clock(),
    )


def phase_blocks(state, phase_index):
    return state.current_plan.phases[phase_index].blocks


@pytest.fixture(autouse=True)
def reset_catalog():
    CatalogLoader.reset()
    yield
    CatalogLoader.reset()


@pytest.fixture
def state():
    return make_state()


class TestCompendiumPlacement:

    def test_add_compendium_item_to_plan(self, state):
        item = state.compendium.add_item({"name": "KPV", "type": "peptide", "refId": "kpv", "personalNotes": "am"})
        assert state.add_compendium_item_to_plan(1, item)
        [block] = phase_blocks(state, 1)
        assert block.id == f"block-{item.id}-1700000000000"
        assert (block.ref_id, block.label, block.notes, block.week_index) == ("kpv", "KPV", "am", 0)

    def test_ref_id_falls_back_to_item_id(self, state):
        item = state.compendium.add_item({"id": "custom-1", "name": "Custom", "type": "diet"})
        state.add_compendium_item_to_plan(0, item)
        assert phase_blocks(state, 0)[0].ref_id == "custom-1"

    def test_invalid_phase_is_noop(self, state):
        item = state.compendium.add_item({"name": "KPV", "type": "peptide"})
        assert state.add_compendium_item_to_plan(5, item) is False

    def test_add_items_in_compendium_order(self, state):
        a = state.compendium.add_item({"name": "A", "type": "peptide"})
        b = state.compendium.add_item({"name": "B", "type": "test"})
        assert state.add_compendium_items_to_plan(2, [b.id, a.id, "ghost"]) == 2
        assert [blk.label for blk in phase_blocks(state, 2)] == ["A", "B"]

    def test_add_library_item(self, state):
        item = LibraryItem(id="mon-HbA1c", label="Track HbA1c", type="monitoring", category="monitoring")
        assert state.add_library_item_to_phase(0, item)
        block = phase_blocks(state, 0)[0]
        assert block.ref_id == "mon-HbA1c"
        assert block.type == "monitoring"

    def test_seed_compendium_once(self, state):
        assert state.ensure_compendium_seed()
        count = len(state.compendium.items)
        assert count == 31
        assert state.ensure_compendium_seed() is False
        assert len(state.compendium.items) == count


class TestOrganTagging:

    def test_tag_known_organ(self, state):
        state.plans.add_block_to_phase(0, 0, PlanBlockDraft(id="b1", type="peptide", ref_id="kpv", label="KPV"))
        assert state.tag_block_organ("b1", "gut")
        assert state.tag_block_organ("b1", "brain")
        assert state.tag_block_organ("b1", "gut") is False
        assert phase_blocks(state, 0)[0].organ_ids == ["gut", "brain"]

    def test_unknown_organ_or_block(self, state):
        state.plans.add_block_to_phase(0, 0, PlanBlockDraft(id="b1", type="peptide", ref_id="kpv", label="KPV"))
        assert state.tag_block_organ("b1", "spleen") is False
        assert state.tag_block_organ("ghost", "gut") is False


class TestFocusAndUiState:

    def test_filtered_plan_with_module(self, state):
        a = state.compendium.add_item({"name": "KPV", "type": "peptide", "refId": "kpv"})
        b = state.compendium.add_item({"name": "HbA1c", "type": "test", "refId": "test-HbA1c"})
        state.add_compendium_items_to_plan(0, [a.id, b.id])
        module = state.compendium.add_module("Gut", [a.ref_id])

        state.set_focus_mode("compendium-custom", module.id)
        assert [blk.label for blk in state.filtered_plan().phases[0].blocks] == ["KPV"]

        state.set_focus_mode("full")
        assert state.focus_module_id is None
        assert len(state.filtered_plan().phases[0].blocks) == 2

    def test_unknown_focus_mode_rejected(self, state):
        with pytest.raises(ValueError):
            state.set_focus_mode("everything")

    def test_recent_searches(self, state):
        state.add_recent_command_search("  kpv  ")
        state.add_recent_command_search("ss-31")
        state.add_recent_command_search("kpv")
        assert state.add_recent_command_search("   ") is False
        assert state.recent_command_searches == ["kpv", "ss-31"]

    def test_recent_searches_capped(self, state):
        for i in range(20):
            state.add_recent_command_search(f"q{i}")
        assert len(state.recent_command_searches) == 15
        assert state.recent_command_searches[0] == "q19"

    def test_settings_patch(self, state):
        settings = state.set_settings(pwa_installed=True)
        assert settings.pwa_installed is True
        assert settings.supabase_sync is False


class TestIngestion:

    def test_import_parsed_items(self, state):
        parsed = parse_knowledge_import_text("KPV 500mg daily. Check HbA1c.")
        items = state.import_parsed_items(parsed, add_to_plan=True)
        assert [i.name for i in items] == ["KPV", "HbA1c"]
        assert items[0].version_history[0].note == "Knowledge Import"
        assert [b.label for b in phase_blocks(state, 0)] == ["KPV", "HbA1c"]

    def test_import_without_plan(self, state):
        state.import_parsed_items(parse_knowledge_import_text("KPV"))
        assert phase_blocks(state, 0) == []
        assert len(state.compendium.items) == 1

    def test_save_import_as_module(self, state):
        parsed = parse_knowledge_import_text("KPV and MOTS-c")
        module = state.save_import_as_module("  Morning stack ", parsed)
        assert module.name == "Morning stack"
        assert module.item_ids == [i.id for i in state.compendium.items]
        assert state.save_import_as_module("   ", parsed) is None
        assert state.save_import_as_module("Empty", []) is None

    def test_quick_add(self, state):
        item = state.quick_add("Add Urolithin A 500mg daily for 12 weeks with mitophagy note")
        assert item.ref_id == "urolithin-a"
        assert item.version_history[0].note == "Quick-add"
        assert phase_blocks(state, 0)[0].notes == "mitophagy note"
        assert state.quick_add("   ") is None

    def test_run_command_stack(self, state):
        items = state.run_command("Urolithin A + SS-31 for 8 weeks")
        assert [i.ref_id for i in items] == ["urolithin-a", "ss31"]
        assert all(i.version_history[0].note == "Command palette" for i in items)
        assert len(phase_blocks(state, 0)) == 2
        assert state.recent_command_searches == ["Urolithin A + SS-31 for 8 weeks"]

    def test_run_command_single(self, state):
        items = state.run_command("KPV 200mg daily")
        assert len(items) == 1
        assert items[0].dose_examples == ["200mg daily"]


class TestPersistence:

    def test_autosave_on_every_mutation(self):
        backend = MemoryBackend()
        state = make_state(backend)
        state.plans.add_block_to_phase(0, 0, PlanBlockDraft(id="b1", type="peptide", ref_id="kpv", label="KPV"))
        state.tracking.add_symptom("2026-03-01", "ok")
        assert backend.save_count == 2
        assert backend.blob["symptomEntries"][0]["text"] == "ok"

    def test_no_save_for_noops_or_without_autosave(self):
        backend = MemoryBackend()
        state = make_state(backend)
        state.plans.remove_block(0, "ghost")
        assert backend.save_count == 0
        quiet = make_state(MemoryBackend(), autosave=False)
        quiet.tracking.add_symptom("2026-03-01", "ok")
        assert quiet.backend.save_count == 0
        quiet.save()
        assert quiet.backend.save_count == 1

    def test_snapshot_shape(self, state):
        blob = state.snapshot()
        assert blob["schemaVersion"] == 1
        assert blob["currentPlan"]["id"] == "default"
        assert blob["focusMode"] == "full"
        assert set(blob) >= {
            "savedPlans", "doseLogs", "biomarkerLogs", "symptomEntries", "retestAlerts",
            "settings", "compendiumItems", "savedModules", "focusModuleId", "recentCommandSearches",
        }

    def test_round_trip(self, state):
        state.quick_add("KPV 200mg daily")
        state.tag_block_organ(phase_blocks(state, 0)[0].id, "gut")
        state.plans.save_current_plan("Gut")
        state.tracking.log_dose(DoseLogEntry(date="2026-03-01", plan_block_id="b1", ref_id="kpv", label="KPV", taken=True))
        state.tracking.add_biomarker_log("2026-03-01", "hba1c", "HbA1c", 5.4, "%")
        state.tracking.add_symptom("2026-03-01", "calm")
        state.tracking.add_retest_alert("hba1c", "HbA1c", "2026-04-01")
        state.add_recent_command_search("kpv")
        state.set_focus_mode("peptides-only")

        restored = make_state()
        restored.restore(state.snapshot())

        assert restored.current_plan == state.current_plan
        assert restored.plans.saved_plans == state.plans.saved_plans
        assert restored.tracking.dose_logs == state.tracking.dose_logs
        assert restored.tracking.biomarker_logs == state.tracking.biomarker_logs
        assert restored.tracking.symptom_entries == state.tracking.symptom_entries
        assert restored.tracking.retest_alerts == state.tracking.retest_alerts
        assert restored.compendium.items == state.compendium.items
        assert restored.recent_command_searches == ["kpv"]
        assert restored.focus_mode == "peptides-only"
        assert restored.snapshot() == state.snapshot()

    def test_restore_does_not_autosave(self, state):
        blob = state.snapshot()
        backend = MemoryBackend()
        other = make_state(backend)
        other.restore(blob)
        assert backend.save_count == 0

    def test_restore_keeps_missing_current_plan(self, state):
        blob = state.snapshot()
        blob["currentPlan"] = None
        state.restore(blob)
        assert state.current_plan is None

    def test_from_settings_restores_json_file(self, tmp_path):
        path = tmp_path / "state.json"
        first = AppState.from_settings(Settings(state_path=str(path)))
        first.quick_add("KPV")
        assert path.exists()

        second = AppState.from_settings(Settings(state_path=str(path)))
        assert [b.label for b in second.current_plan.phases[0].blocks] == ["KPV"]
        assert isinstance(second.backend, JsonFileBackend)

    def test_backup_bundle(self, state):
        state.tracking.add_symptom("2026-03-01", "calm")
        bundle = build_backup_bundle(state).to_blob()
        assert set(bundle) == {"exportedAt", "plan", "doseLogs", "biomarkerLogs", "symptomEntries"}
        assert bundle["plan"]["name"] == "My Protocol"
        assert bundle["symptomEntries"][0]["text"] == "calm"
