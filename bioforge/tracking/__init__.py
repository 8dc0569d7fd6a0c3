"""
BioForge Tracking Logs

Dose adherence, biomarker values, symptom journal and re-test alerts.

Version: tracking_v1
"""

from .models import BiomarkerLog, DoseLogEntry, RetestAlert, SymptomEntry
from .logs import TrackingLogs, biomarker_timeline, loggable_blocks

__all__ = [
    "BiomarkerLog",
    "DoseLogEntry",
    "RetestAlert",
    "SymptomEntry",
    "TrackingLogs",
    "biomarker_timeline",
    "loggable_blocks",
]

__version__ = "tracking_v1"
