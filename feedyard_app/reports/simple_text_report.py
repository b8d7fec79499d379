"""
Simple text-based financial summary for a pen.
"""

from __future__ import annotations

from feedyard_app.models import PenRationAssignment
from feedyard_app.services.cost_calculator import PenROI, cost_per_head


def build_pen_cost_summary_text(
    pen_name: str,
    roi: PenROI,
    head_count: int | None = None,
    assignment: PenRationAssignment | None = None,
    period_label: str = "",
) -> str:
    lines: list[str] = []
    lines.append(f"Pen: {pen_name}" + (f" ({head_count} head)" if head_count is not None else ""))
    if assignment is not None:
        lines.append(f"Ration: {assignment.ration_name} since {assignment.start_date}")
    if period_label:
        lines.append(f"Period: {period_label}")
    lines.append("")
    lines.append(f"Feed costs: ${roi.total_feed_cost:,.2f}")
    lines.append(f"Medication costs: ${roi.total_medication_cost:,.2f}")
    lines.append(f"Total costs: ${roi.total_costs:,.2f}")
    lines.append(f"Estimated revenue: ${roi.revenue:,.2f}")
    lines.append(f"Profit: ${roi.profit:,.2f}")
    lines.append(f"ROI: {roi.roi:.1f}%")
    if head_count:
        per_head = cost_per_head(roi, head_count)
        lines.append("")
        lines.append(f"Cost per head: ${per_head.total_cost:,.2f}")
        lines.append(f"Profit per head: ${per_head.profit:,.2f}")
    return "\n".join(lines)
