"""
Reporting utilities (text/Excel) for pen costs.
"""

from feedyard_app.reports.simple_text_report import build_pen_cost_summary_text
from feedyard_app.reports.excel_report import export_pen_costs_to_excel

__all__ = [
    "build_pen_cost_summary_text",
    "export_pen_costs_to_excel",
]
