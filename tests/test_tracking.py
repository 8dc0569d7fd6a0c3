"""
BioForge Tracking Logs - Tests
==============================
Dose upserts, biomarker/symptom logs, re-test alerts and the chart timeline.
"""

import itertools
import sys
from pathlib import Path

import pandas as pd
import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from bioforge.plans import PlanBlockDraft, PlanStore
from bioforge.tracking import TrackingLogs, biomarker_timeline, loggable_blocks
from bioforge.tracking.models import DoseLogEntry


def make_ids():
    counter = itertools.count(1)
    return lambda: f"log-{next(counter)}"


def make_dose(date="2026-03-01", block_id="b1", taken=True, ref_id="kpv", label="KPV"):
    return DoseLogEntry(date=date, plan_block_id=block_id, ref_id=ref_id, label=label, taken=taken)


@pytest.fixture
def logs():
    return TrackingLogs(id_factory=make_ids())


class TestDoseLogs:

    def test_same_key_keeps_last_value(self, logs):
        logs.log_dose(make_dose(taken=True))
        logs.log_dose(make_dose(taken=False))
        entries = logs.doses_for_date("2026-03-01")
        assert len(entries) == 1
        assert entries[0].taken is False

    def test_distinct_keys_coexist(self, logs):
        logs.log_dose(make_dose(block_id="b1"))
        logs.log_dose(make_dose(block_id="b2"))
        logs.log_dose(make_dose(date="2026-03-02", block_id="b1"))
        assert len(logs.dose_logs) == 3
        assert len(logs.doses_for_date("2026-03-01")) == 2

    def test_taken_count(self, logs):
        logs.log_dose(make_dose(block_id="b1", taken=True))
        logs.log_dose(make_dose(block_id="b2", taken=False))
        logs.log_dose(make_dose(block_id="b3", taken=True))
        assert logs.taken_count("2026-03-01") == 2
        assert logs.taken_count("2026-03-02") == 0

    def test_accepts_camel_case_input(self):
        entry = DoseLogEntry.model_validate(
            {"date": "2026-03-01", "planBlockId": "b1", "refId": "kpv", "label": "KPV", "taken": True}
        )
        assert entry.plan_block_id == "b1"
        assert entry.to_blob()["planBlockId"] == "b1"


class TestBiomarkersAndSymptoms:

    def test_biomarker_logs_append(self, logs):
        first = logs.add_biomarker_log("2026-03-01", "hba1c", "HbA1c", 5.4, "%")
        logs.add_biomarker_log("2026-03-01", "hba1c", "HbA1c", 5.6)
        assert first.id == "log-1"
        assert first.unit == "%"
        assert len(logs.biomarker_logs) == 2

    def test_symptoms(self, logs):
        entry = logs.add_symptom("2026-03-01", "Better sleep")
        assert logs.delete_symptom(entry.id)
        assert logs.symptom_entries == []
        assert logs.delete_symptom(entry.id) is False


class TestRetestAlerts:

    def test_dismiss_is_one_way(self, logs):
        a = logs.add_retest_alert("hba1c", "HbA1c", "2026-04-01")
        b = logs.add_retest_alert("crp", "hs-CRP", "2026-04-01")
        assert a.dismissed is False
        assert logs.dismiss_retest_alert(a.id)
        assert logs.dismiss_retest_alert(a.id)
        assert [x.id for x in logs.active_retest_alerts()] == [b.id]

    def test_dismiss_unknown(self, logs):
        assert logs.dismiss_retest_alert("ghost") is False


class TestViews:

    def test_loggable_blocks_first_per_ref(self):
        store = PlanStore()
        store.add_block_to_phase(0, 0, PlanBlockDraft(id="b1", type="peptide", ref_id="kpv", label="KPV"))
        store.add_block_to_phase(1, 0, PlanBlockDraft(id="b2", type="peptide", ref_id="kpv", label="KPV again"))
        store.add_block_to_phase(1, 0, PlanBlockDraft(id="b3", type="test", ref_id="test-HbA1c", label="HbA1c"))
        assert [b.id for b in loggable_blocks(store.current_plan)] == ["b1", "b3"]
        assert loggable_blocks(None) == []

    def test_biomarker_timeline(self, logs):
        logs.add_biomarker_log("2026-03-08", "hba1c", "HbA1c", 5.2)
        logs.add_biomarker_log("2026-03-01", "hba1c", "HbA1c", 5.6)
        logs.add_biomarker_log("2026-03-01", "hba1c", "HbA1c", 9.9)
        logs.add_biomarker_log("2026-03-08", "crp", "hs-CRP", 1.1)

        df = biomarker_timeline(logs.biomarker_logs)

        assert list(df.columns) == ["date", "HbA1c", "hs-CRP"]
        assert list(df["date"]) == ["2026-03-01", "2026-03-08"]
        assert list(df["HbA1c"]) == [5.6, 5.2]
        assert pd.isna(df["hs-CRP"].iloc[0])
        assert df["hs-CRP"].iloc[1] == 1.1

    def test_empty_timeline(self):
        df = biomarker_timeline([])
        assert list(df.columns) == ["date"]
        assert len(df) == 0
