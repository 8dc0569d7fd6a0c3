"""
BioForge Export Script - Tests
==============================
scripts/export_state.py against a JSON state file.
"""

import json
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent.parent / "scripts"))

import export_state
from bioforge.catalog import CatalogLoader
from bioforge.config import Settings
from bioforge.session import AppState


@pytest.fixture
def state_file(tmp_path, monkeypatch):
    CatalogLoader.reset()
    path = tmp_path / "state.json"
    monkeypatch.setenv("BIOFORGE_STATE_PATH", str(path))
    monkeypatch.delenv("DATABASE_URL", raising=False)
    state = AppState.from_settings(Settings(state_path=str(path)))
    state.quick_add("Add KPV 200mg daily")
    yield path
    CatalogLoader.reset()


class TestExportState:

    def test_protocol_to_file(self, state_file, tmp_path):
        out = tmp_path / "protocol.json"
        assert export_state.main(["protocol", "--output", str(out)]) == 0
        protocol = json.loads(out.read_text())
        assert protocol["phases"][0]["doses"] == ["KPV: Oral capsule"]

    def test_backup_to_stdout(self, state_file, capsys):
        assert export_state.main(["backup"]) == 0
        bundle = json.loads(capsys.readouterr().out)
        assert bundle["plan"]["phases"][0]["blocks"][0]["refId"] == "kpv"

    def test_no_plan(self, state_file):
        blob = json.loads(state_file.read_text())
        blob["currentPlan"] = None
        state_file.write_text(json.dumps(blob))
        assert export_state.main(["protocol"]) == 1

    def test_unreadable_state(self, state_file):
        state_file.write_text("{broken")
        assert export_state.main(["state"]) == 2
