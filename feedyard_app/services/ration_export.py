"""
Ration export: catalog entry, assignments and usage with a timestamp.

Produces plain dicts that serialize directly to JSON for nutritionists.
"""

from __future__ import annotations

import json
from dataclasses import asdict
from enum import Enum
from pathlib import Path
from typing import Any, Dict

from ..utils.ids import utc_timestamp
from .assignment_ledger import AssignmentLedger
from .ration_catalog import RationCatalog
from .ration_schedule import RationScheduleQueue


def _plain(obj: Any) -> Any:
    """Convert dataclasses/enums into JSON-ready structures."""
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, dict):
        return {k: _plain(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_plain(v) for v in obj]
    if hasattr(obj, "__dataclass_fields__"):
        return _plain(asdict(obj))
    return obj


def export_ration(
    catalog: RationCatalog,
    ledger: AssignmentLedger,
    ration_id: str,
) -> Dict[str, Any] | None:
    """Snapshot of one ration with its assignments and usage stats; ``None`` on a miss."""
    ration = catalog.get(ration_id)
    if ration is None:
        return None
    stats = ledger.usage_stats(ration_id)
    assignments = stats.active_assignments + stats.historical_assignments
    return {
        "ration": _plain(ration),
        "assignments": _plain(assignments),
        "stats": {
            "ration_id": stats.ration_id,
            "pens_using": stats.pens_using,
            "total_head_count": stats.total_head_count,
        },
        "exported_at": utc_timestamp(),
    }


def export_all(
    catalog: RationCatalog,
    ledger: AssignmentLedger,
    queue: RationScheduleQueue,
) -> Dict[str, Any]:
    """Every ration, assignment (active and historical) and schedule of the account."""
    return {
        "rations": _plain(catalog.list()),
        "assignments": _plain(ledger.list_all()),
        "schedules": _plain(queue.list_all()),
        "exported_at": utc_timestamp(),
    }


def save_export(path: Path, data: Dict[str, Any]) -> Path:
    """Write an export dict to ``path`` as indented JSON."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
    return path
