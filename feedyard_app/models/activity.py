"""
Pen-level feed and medication activity log entries.

Derived totals are filled in by the activity ledger when the entry is
recorded and stored with it; later edits to reference prices never change a
historical record.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..config.limits import DEFAULT_DOSAGE_UNIT, DEFAULT_FEED_UNIT


@dataclass(slots=True)
class PenFeedActivity:
    id: str | None = None
    pen_id: str = ""
    barn_id: str = ""
    date: str = ""
    feed_type: str = ""
    total_amount: float = 0.0
    unit: str = DEFAULT_FEED_UNIT
    cost_per_unit: float = 0.0
    cattle_count: int = 0  # head in pen when fed

    # Derived at write time
    average_per_cattle: float = 0.0
    total_cost: float = 0.0

    notes: str = ""
    created_at: str = ""
    created_by: str = ""


@dataclass(slots=True)
class PenMedicationActivity:
    id: str | None = None
    pen_id: str = ""
    barn_id: str = ""
    date: str = ""
    medication_name: str = ""
    purpose: str = ""  # treatment, prevention, ...
    dosage_per_head: float = 0.0
    unit: str = DEFAULT_DOSAGE_UNIT
    cattle_count: int = 0
    cost_per_head: float = 0.0
    withdrawal_days: int | None = None

    # Derived at write time
    total_dosage: float = 0.0
    total_cost: float = 0.0

    notes: str = ""
    created_at: str = ""
    created_by: str = ""
