"""
Domain models for the feedyard app.

These are pure Python/domain classes, separate from storage mappings.
"""

from .ration import Ration, RationIngredient, RationKPI, RationStage
from .assignment import (
    AssignmentStatus,
    PenRationAssignment,
    RationSchedule,
    ScheduleStatus,
)
from .activity import PenFeedActivity, PenMedicationActivity
from .pen import Pen

__all__ = [
    "Ration",
    "RationIngredient",
    "RationKPI",
    "RationStage",
    "AssignmentStatus",
    "PenRationAssignment",
    "RationSchedule",
    "ScheduleStatus",
    "PenFeedActivity",
    "PenMedicationActivity",
    "Pen",
]
