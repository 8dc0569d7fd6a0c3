"""
BioForge Plan Layer

Phased plan model and the store that owns the current and saved plans.

Version: plan_store_v1
"""

from .models import (
    DEFAULT_PLAN_ID,
    DEFAULT_PLAN_NAME,
    FocusMode,
    Phase,
    PlanBlock,
    PlanBlockDraft,
    UserPlan,
    default_phases,
    new_default_plan,
)
from .store import PlanStore

__all__ = [
    "DEFAULT_PLAN_ID",
    "DEFAULT_PLAN_NAME",
    "FocusMode",
    "Phase",
    "PlanBlock",
    "PlanBlockDraft",
    "UserPlan",
    "default_phases",
    "new_default_plan",
    "PlanStore",
]

__version__ = "plan_store_v1"
