"""
Feed ration model.

A ration is a named feed formulation with a fixed per-head daily quantity and
cost. Ingredients and KPIs are carried for display and projections; the
scheduling engine only needs the identity, name and per-head figures.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List


class RationStage(Enum):
    RECEIVING = "receiving"
    GROWING = "growing"
    FINISHING = "finishing"
    MAINTENANCE = "maintenance"
    CUSTOM = "custom"


@dataclass(slots=True)
class RationIngredient:
    """One feed component of a ration, per head per day."""

    feed_id: str = ""
    feed_name: str = ""
    amount_lbs: float = 0.0
    percentage: float = 0.0  # share of the ration's total weight
    cost_per_lb: float = 0.0


@dataclass(slots=True)
class RationKPI:
    """Nutritionist targets for a ration."""

    target_adg: float = 0.0  # lbs/day
    target_feed_conversion: float = 0.0  # feed:gain
    crude_protein: float = 0.0  # % CP
    total_digestible_nutrients: float = 0.0  # % TDN
    net_energy_maintenance: float = 0.0  # Mcal/lb
    net_energy_gain: float = 0.0  # Mcal/lb
    cost_per_pound_gain: float = 0.0


@dataclass(slots=True)
class Ration:
    id: str | None = None
    name: str = ""
    description: str = ""
    stage: RationStage = RationStage.CUSTOM
    ingredients: List[RationIngredient] = field(default_factory=list)

    # Daily figures per animal
    total_lbs_per_head: float = 0.0
    cost_per_head: float = 0.0

    kpis: RationKPI = field(default_factory=RationKPI)
    notes: str = ""
    is_active: bool = True
    created_at: str = ""
    updated_at: str = ""
