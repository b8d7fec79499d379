"""
Pen cost, ROI and feed consumption calculations.

Nothing here is cached or stored: ROI and feed projections are re-derived
from the ledgers and the catalog each time they are asked for.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Protocol

from ..config.limits import PROJECTION_DAYS
from ..models import PenRationAssignment, Ration
from .activity_ledger import DateRange
from .assignment_ledger import AssignmentLedger
from .ration_catalog import RationCatalog
from .validation import require_number, safe_divide


class CostSource(Protocol):
    def total_feed_cost_by_pen(self, pen_id: str, date_range: DateRange | None = None) -> float: ...

    def total_medication_cost_by_pen(self, pen_id: str, date_range: DateRange | None = None) -> float: ...


@dataclass(slots=True)
class PenROI:
    total_feed_cost: float
    total_medication_cost: float
    total_costs: float
    revenue: float
    profit: float
    roi: float  # percent

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(slots=True)
class PerHeadCost:
    head_count: int
    feed_cost: float
    medication_cost: float
    total_cost: float
    profit: float


@dataclass(slots=True)
class IngredientProjection:
    feed_id: str
    feed_name: str
    daily_amount_lbs: float  # whole pen
    daily_cost: float
    period_cost: float


@dataclass(slots=True)
class PenFeedProjection:
    pen_id: str
    pen_name: str
    ration_id: str
    ration_name: str
    head_count: int
    days: int
    lbs_per_head_per_day: float
    total_daily_lbs: float
    daily_cost: float
    period_cost: float
    ingredients: List[IngredientProjection] = field(default_factory=list)


@dataclass(slots=True)
class FeedCostTotals:
    """Projected feed spend across every pen with an active ration."""

    days: int
    pens: List[PenFeedProjection] = field(default_factory=list)
    head_count: int = 0
    daily_lbs: float = 0.0
    daily_cost: float = 0.0
    weekly_cost: float = 0.0
    period_cost: float = 0.0
    yearly_cost: float = 0.0


def roi_percent(profit: float, total_costs: float) -> float:
    """``profit / total_costs * 100``; 0 when nothing has been spent yet."""
    if total_costs <= 0:
        return 0.0
    return (profit / total_costs) * 100.0


def compute_roi(
    ledger: CostSource,
    pen_id: str,
    estimated_revenue: float,
    date_range: DateRange | None = None,
) -> PenROI:
    """
    Cost breakdown and ROI for a pen from its recorded activity.

    Args:
        ledger: Activity ledger (or anything exposing the per-pen cost totals)
        pen_id: Pen to evaluate
        estimated_revenue: Caller-supplied sale estimate for the pen
        date_range: Optional inclusive date bounds on the activity considered
    """
    revenue = require_number(estimated_revenue, "Estimated revenue", minimum=float("-inf"))
    feed_cost = ledger.total_feed_cost_by_pen(pen_id, date_range)
    medication_cost = ledger.total_medication_cost_by_pen(pen_id, date_range)
    total_costs = feed_cost + medication_cost
    profit = revenue - total_costs
    return PenROI(
        total_feed_cost=feed_cost,
        total_medication_cost=medication_cost,
        total_costs=total_costs,
        revenue=revenue,
        profit=profit,
        roi=roi_percent(profit, total_costs),
    )


def cost_per_head(roi: PenROI, head_count: int) -> PerHeadCost:
    """Spread a pen's costs and profit over its head count (zeros for an empty pen)."""
    return PerHeadCost(
        head_count=head_count,
        feed_cost=safe_divide(roi.total_feed_cost, head_count),
        medication_cost=safe_divide(roi.total_medication_cost, head_count),
        total_cost=safe_divide(roi.total_costs, head_count),
        profit=safe_divide(roi.profit, head_count),
    )


def project_pen_consumption(
    assignment: PenRationAssignment,
    ration: Ration,
    days: int = PROJECTION_DAYS,
) -> PenFeedProjection:
    """Expected feed use and cost for a pen on its assigned ration over ``days``."""
    head_count = assignment.head_count
    total_daily_lbs = ration.total_lbs_per_head * head_count
    daily_cost = ration.cost_per_head * head_count

    ingredients = []
    for ing in ration.ingredients:
        daily_amount = ing.amount_lbs * head_count
        ingredient_daily_cost = daily_amount * ing.cost_per_lb
        ingredients.append(
            IngredientProjection(
                feed_id=ing.feed_id,
                feed_name=ing.feed_name,
                daily_amount_lbs=daily_amount,
                daily_cost=ingredient_daily_cost,
                period_cost=ingredient_daily_cost * days,
            )
        )

    return PenFeedProjection(
        pen_id=assignment.pen_id,
        pen_name=assignment.pen_name,
        ration_id=ration.id or assignment.ration_id,
        ration_name=ration.name,
        head_count=head_count,
        days=days,
        lbs_per_head_per_day=ration.total_lbs_per_head,
        total_daily_lbs=total_daily_lbs,
        daily_cost=daily_cost,
        period_cost=daily_cost * days,
        ingredients=ingredients,
    )


def project_pen(
    ledger: AssignmentLedger,
    catalog: RationCatalog,
    pen_id: str,
    days: int = PROJECTION_DAYS,
) -> Optional[PenFeedProjection]:
    """Projection for a pen's current ration; ``None`` when unassigned or the ration is gone."""
    assignment = ledger.get_current(pen_id)
    if assignment is None:
        return None
    ration = catalog.get(assignment.ration_id)
    if ration is None:
        return None
    return project_pen_consumption(assignment, ration, days)


def project_all_pens(
    ledger: AssignmentLedger,
    catalog: RationCatalog,
    days: int = PROJECTION_DAYS,
) -> List[PenFeedProjection]:
    projections = []
    for assignment in sorted(ledger.list_active(), key=lambda a: a.pen_id):
        ration = catalog.get(assignment.ration_id)
        if ration is not None:
            projections.append(project_pen_consumption(assignment, ration, days))
    return projections


def total_feed_costs(
    ledger: AssignmentLedger,
    catalog: RationCatalog,
    days: int = PROJECTION_DAYS,
) -> FeedCostTotals:
    """
    Sum the projected feed use of all actively fed pens.

    Pens whose ration has been removed from the catalog are left out, the
    same as in ``project_pen``.
    """
    pens = project_all_pens(ledger, catalog, days)
    daily_cost = sum(p.daily_cost for p in pens)
    return FeedCostTotals(
        days=days,
        pens=pens,
        head_count=sum(p.head_count for p in pens),
        daily_lbs=sum(p.total_daily_lbs for p in pens),
        daily_cost=daily_cost,
        weekly_cost=daily_cost * 7,
        period_cost=daily_cost * days,
        yearly_cost=daily_cost * 365,
    )
