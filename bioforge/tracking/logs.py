"""
Tracking Logs

Dose logs (upsert by date + block), biomarker values and symptom notes
(append-only), and re-test alerts (dismiss is one-way).
"""

import logging
from typing import Callable, List, Optional

import pandas as pd

from bioforge.plans.models import PlanBlock, UserPlan
from bioforge.shared.models import new_id

from .models import BiomarkerLog, DoseLogEntry, RetestAlert, SymptomEntry

logger = logging.getLogger(__name__)


class TrackingLogs:
    """Log collections, keyed loosely by plan block id."""

    def __init__(
        self,
        dose_logs: Optional[List[DoseLogEntry]] = None,
        biomarker_logs: Optional[List[BiomarkerLog]] = None,
        symptom_entries: Optional[List[SymptomEntry]] = None,
        retest_alerts: Optional[List[RetestAlert]] = None,
        id_factory: Callable[[], str] = new_id,
        on_change: Optional[Callable[[], None]] = None,
    ):
        self.dose_logs: List[DoseLogEntry] = list(dose_logs or [])
        self.biomarker_logs: List[BiomarkerLog] = list(biomarker_logs or [])
        self.symptom_entries: List[SymptomEntry] = list(symptom_entries or [])
        self.retest_alerts: List[RetestAlert] = list(retest_alerts or [])
        self._new_id = id_factory
        self._on_change = on_change

    def _changed(self) -> None:
        if self._on_change:
            self._on_change()

    # Doses

    def log_dose(self, entry: DoseLogEntry) -> None:
        """Replace every entry with the same (date, plan_block_id) by this one."""
        rest = [e for e in self.dose_logs if e.key != entry.key]
        if len(rest) != len(self.dose_logs):
            logger.debug(f"Replacing dose log for {entry.date} / {entry.plan_block_id}")
        self.dose_logs = [*rest, entry]
        self._changed()

    def doses_for_date(self, date: str) -> List[DoseLogEntry]:
        return [e for e in self.dose_logs if e.date == date]

    def taken_count(self, date: str) -> int:
        return sum(1 for e in self.doses_for_date(date) if e.taken)

    # Biomarkers

    def add_biomarker_log(
        self,
        date: str,
        biomarker_id: str,
        biomarker_name: str,
        value: float,
        unit: Optional[str] = None,
    ) -> BiomarkerLog:
        log = BiomarkerLog(
            id=self._new_id(),
            date=date,
            biomarker_id=biomarker_id,
            biomarker_name=biomarker_name,
            value=value,
            unit=unit,
        )
        self.biomarker_logs = [*self.biomarker_logs, log]
        self._changed()
        return log

    def set_biomarker_logs(self, logs: List[BiomarkerLog]) -> None:
        self.biomarker_logs = list(logs)
        self._changed()

    # Symptoms

    def add_symptom(self, date: str, text: str) -> SymptomEntry:
        entry = SymptomEntry(id=self._new_id(), date=date, text=text)
        self.symptom_entries = [*self.symptom_entries, entry]
        self._changed()
        return entry

    def delete_symptom(self, entry_id: str) -> bool:
        remaining = [e for e in self.symptom_entries if e.id != entry_id]
        if len(remaining) == len(self.symptom_entries):
            return False
        self.symptom_entries = remaining
        self._changed()
        return True

    # Re-test alerts

    def add_retest_alert(self, biomarker_id: str, biomarker_name: str, due_date: str) -> RetestAlert:
        alert = RetestAlert(
            id=self._new_id(),
            biomarker_id=biomarker_id,
            biomarker_name=biomarker_name,
            due_date=due_date,
            dismissed=False,
        )
        self.retest_alerts = [*self.retest_alerts, alert]
        self._changed()
        return alert

    def dismiss_retest_alert(self, alert_id: str) -> bool:
        """One-way; there is no un-dismiss."""
        if not any(a.id == alert_id for a in self.retest_alerts):
            return False
        self.retest_alerts = [
            a.model_copy(update={"dismissed": True}) if a.id == alert_id else a
            for a in self.retest_alerts
        ]
        self._changed()
        return True

    def set_retest_alerts(self, alerts: List[RetestAlert]) -> None:
        self.retest_alerts = list(alerts)
        self._changed()

    def active_retest_alerts(self) -> List[RetestAlert]:
        return [a for a in self.retest_alerts if not a.dismissed]


def loggable_blocks(plan: Optional[UserPlan]) -> List[PlanBlock]:
    """Blocks offered for dose logging: the first block per ref id."""
    if plan is None:
        return []
    seen = set()
    out: List[PlanBlock] = []
    for block in plan.iter_blocks():
        if block.ref_id in seen:
            continue
        seen.add(block.ref_id)
        out.append(block)
    return out


def biomarker_timeline(logs: List[BiomarkerLog]) -> pd.DataFrame:
    """
    Chart data: one row per date (sorted), one column per biomarker name,
    holding the first value logged that day; missing cells are NaN.
    """
    if not logs:
        return pd.DataFrame(columns=["date"])
    df = pd.DataFrame(
        [{"date": log.date, "name": log.biomarker_name, "value": log.value} for log in logs]
    )
    names = list(dict.fromkeys(df["name"]))
    table = df.pivot_table(index="date", columns="name", values="value", aggfunc="first", sort=True)
    table = table.reindex(columns=names)
    table.columns.name = None
    return table.reset_index()
