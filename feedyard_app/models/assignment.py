"""
Pen ration assignment and scheduled ration change models.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class AssignmentStatus(Enum):
    ACTIVE = "active"
    SUPERSEDED = "superseded"


class ScheduleStatus(Enum):
    PENDING = "pending"
    APPLIED = "applied"
    CANCELLED = "cancelled"


@dataclass(slots=True)
class PenRationAssignment:
    """Binding of a ration to a pen. Superseded records are kept as history."""

    id: str | None = None
    pen_id: str = ""
    pen_name: str = ""  # denormalized for display
    ration_id: str = ""
    ration_name: str = ""
    head_count: int = 0  # snapshot at assignment time
    start_date: str = ""
    assigned_at: str = ""
    end_date: str | None = None
    status: AssignmentStatus = AssignmentStatus.ACTIVE

    @property
    def is_active(self) -> bool:
        return self.status == AssignmentStatus.ACTIVE


@dataclass(slots=True)
class RationSchedule:
    """A deferred ration change that fires on its trigger date."""

    id: str | None = None
    pen_id: str = ""
    to_ration_id: str = ""
    from_ration_id: str | None = None
    trigger_date: str = ""
    status: ScheduleStatus = ScheduleStatus.PENDING
    notes: str | None = None
    created_at: str = ""
    applied_at: str | None = None

    @property
    def is_pending(self) -> bool:
        return self.status == ScheduleStatus.PENDING
