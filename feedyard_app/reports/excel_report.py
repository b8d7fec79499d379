"""
Excel report generation for pen costs and ROI.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Sequence

import pandas as pd
from openpyxl.styles import Alignment, Font, PatternFill

from ..models import PenFeedActivity, PenMedicationActivity
from ..services.cost_calculator import PenROI, cost_per_head


def _fmt(value: object, fmt: str) -> str:
    """Safely format numeric values, falling back to string/blank."""
    if value is None:
        return ""
    try:
        return format(float(value), fmt)
    except (TypeError, ValueError):
        return str(value)


def _style_header(ws) -> None:
    header_fill = PatternFill(fill_type="solid", fgColor="4472C4")
    header_font = Font(bold=True, color="FFFFFF")
    header_alignment = Alignment(horizontal="center", vertical="center")
    for cell in ws[1]:
        cell.fill = header_fill
        cell.font = header_font
        cell.alignment = header_alignment


def _style_body_table(ws, *, start_row: int = 2, first_col_bold: bool = True, stripe: bool = True) -> None:
    """Zebra striping plus a bold, left-aligned first column."""
    stripe_fill = PatternFill(fill_type="solid", fgColor="F5F5F5")
    for row in ws.iter_rows(min_row=start_row, max_row=ws.max_row, min_col=1, max_col=ws.max_column):
        if first_col_bold and row and row[0].value not in (None, ""):
            row[0].font = Font(bold=True)
        for cell in row:
            if stripe and cell.row % 2 == 0:
                if cell.fill is None or cell.fill.fill_type is None:
                    cell.fill = stripe_fill
            if cell.column == 1:
                cell.alignment = Alignment(horizontal="left", vertical="center", wrap_text=True)


def _set_widths(ws, widths: Sequence[int]) -> None:
    for idx, width in enumerate(widths):
        ws.column_dimensions[chr(ord("A") + idx)].width = width


def _feed_rows(feed: List[PenFeedActivity]) -> List[dict]:
    return [
        {
            "Date": a.date,
            "Feed": a.feed_type,
            "Amount": a.total_amount,
            "Unit": a.unit,
            "Cost / unit": a.cost_per_unit,
            "Head": a.cattle_count,
            "Avg / head": round(a.average_per_cattle, 3),
            "Total cost": round(a.total_cost, 2),
            "Notes": a.notes,
        }
        for a in feed
    ]


def _medication_rows(meds: List[PenMedicationActivity]) -> List[dict]:
    return [
        {
            "Date": a.date,
            "Medication": a.medication_name,
            "Purpose": a.purpose,
            "Dose / head": a.dosage_per_head,
            "Unit": a.unit,
            "Head": a.cattle_count,
            "Total dose": round(a.total_dosage, 3),
            "Cost / head": a.cost_per_head,
            "Total cost": round(a.total_cost, 2),
            "Withdrawal (days)": "" if a.withdrawal_days is None else a.withdrawal_days,
        }
        for a in meds
    ]


def export_pen_costs_to_excel(
    filepath: Path,
    pen_name: str,
    roi: PenROI,
    feed: List[PenFeedActivity],
    meds: List[PenMedicationActivity],
    head_count: int | None = None,
) -> Path:
    """
    Write a multi-sheet workbook for one pen:
    - Pen summary (costs, revenue, profit, ROI, per-head figures)
    - Feed log
    - Medication log
    """
    summary = {
        "Parameter": [
            "Pen",
            "Feed costs",
            "Medication costs",
            "Total costs",
            "Estimated revenue",
            "Profit",
            "ROI (%)",
        ],
        "Value": [
            pen_name,
            _fmt(roi.total_feed_cost, ".2f"),
            _fmt(roi.total_medication_cost, ".2f"),
            _fmt(roi.total_costs, ".2f"),
            _fmt(roi.revenue, ".2f"),
            _fmt(roi.profit, ".2f"),
            _fmt(roi.roi, ".1f"),
        ],
    }
    if head_count:
        per_head = cost_per_head(roi, head_count)
        summary["Parameter"].extend(["Head count", "Cost per head", "Profit per head"])
        summary["Value"].extend(
            [str(head_count), _fmt(per_head.total_cost, ".2f"), _fmt(per_head.profit, ".2f")]
        )
    df_summary = pd.DataFrame(summary)

    feed_rows = _feed_rows(feed)
    med_rows = _medication_rows(meds)
    df_feed = pd.DataFrame(feed_rows) if feed_rows else None
    df_meds = pd.DataFrame(med_rows) if med_rows else None

    filepath.parent.mkdir(parents=True, exist_ok=True)
    with pd.ExcelWriter(str(filepath), engine="openpyxl") as writer:
        df_summary.to_excel(writer, sheet_name="Pen Summary", index=False)
        ws_summary = writer.sheets["Pen Summary"]
        _set_widths(ws_summary, (28, 24))
        _style_header(ws_summary)
        _style_body_table(ws_summary, start_row=2, first_col_bold=True, stripe=True)
        ws_summary.freeze_panes = "A2"

        # Profit cell green when positive, red when a loss
        profit_row = summary["Parameter"].index("Profit") + 2
        profit_cell = ws_summary.cell(row=profit_row, column=2)
        profit_cell.fill = PatternFill(
            fill_type="solid", fgColor="C6EFCE" if roi.profit >= 0 else "FFC7CE"
        )

        if df_feed is not None and not df_feed.empty:
            df_feed.to_excel(writer, sheet_name="Feed Log", index=False)
            ws_feed = writer.sheets["Feed Log"]
            _set_widths(ws_feed, (12, 20, 10, 8, 12, 8, 12, 12, 30))
            _style_header(ws_feed)
            _style_body_table(ws_feed, start_row=2, first_col_bold=False, stripe=True)
            ws_feed.freeze_panes = "A2"

        if df_meds is not None and not df_meds.empty:
            df_meds.to_excel(writer, sheet_name="Medication Log", index=False)
            ws_meds = writer.sheets["Medication Log"]
            _set_widths(ws_meds, (12, 22, 14, 12, 8, 8, 12, 12, 12, 16))
            _style_header(ws_meds)
            _style_body_table(ws_meds, start_row=2, first_col_bold=False, stripe=True)
            ws_meds.freeze_panes = "A2"

    return filepath
