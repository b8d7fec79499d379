"""
Pen ration assignment ledger.

Each pen has at most one active assignment. Reassigning a pen supersedes the
active record (keeping it as history) and writes the new one in the same
storage batch; calls for the same pen are serialized so two concurrent
assignments cannot both end up active.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Dict, Iterable, List, Optional

from ..models import AssignmentStatus, PenRationAssignment
from ..repositories.assignment_repository import AssignmentRepository
from ..repositories.document_store import BatchOp, DocumentStore
from ..repositories.pen_repository import PenRepository
from ..utils.ids import new_id, utc_timestamp
from .ration_catalog import RationCatalog
from .validation import NotFoundError, normalize_date, require_head_count, require_text

_LOG = logging.getLogger(__name__)


@dataclass(slots=True)
class RationUsageStats:
    ration_id: str
    pens_using: int = 0
    total_head_count: int = 0
    active_assignments: List[PenRationAssignment] = field(default_factory=list)
    historical_assignments: List[PenRationAssignment] = field(default_factory=list)


class AssignmentLedger:
    def __init__(
        self,
        store: DocumentStore,
        account_id: str,
        catalog: RationCatalog,
        clock: Callable[[], date] = date.today,
    ) -> None:
        self._repo = AssignmentRepository(store, account_id)
        self._pens = PenRepository(store, account_id)
        self._catalog = catalog
        self._clock = clock
        self._pen_locks: Dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def assign(
        self,
        pen_id: str,
        ration_id: str,
        head_count: int,
        start_date: date | str | None = None,
        pen_name: str | None = None,
        extra_ops: Iterable[BatchOp] = (),
    ) -> PenRationAssignment:
        """
        Bind ``ration_id`` to ``pen_id``, superseding the pen's active assignment.

        ``extra_ops`` are written in the same transaction as the new record.

        Raises:
            ValidationError: head count is not a positive whole number.
            NotFoundError: the ration is not in the catalog.
        """
        pen_id = require_text(pen_id, "Pen")
        head_count = require_head_count(head_count)
        start = normalize_date(start_date if start_date is not None else self._clock(), "Start date")

        ration = self._catalog.get(ration_id)
        if ration is None:
            raise NotFoundError(f"Ration {ration_id} not found.")

        if pen_name is None:
            pen = self._pens.get(pen_id)
            pen_name = pen.name if pen is not None else ""

        with self._lock_for(pen_id):
            superseded = self._supersede_all(pen_id, start)
            if not pen_name and superseded:
                pen_name = superseded[-1].pen_name
            assignment = PenRationAssignment(
                id=new_id("ration-assignment"),
                pen_id=pen_id,
                pen_name=pen_name,
                ration_id=ration.id or ration_id,
                ration_name=ration.name,
                head_count=head_count,
                start_date=start,
                assigned_at=utc_timestamp(),
                status=AssignmentStatus.ACTIVE,
            )
            self._repo.supersede_and_create(superseded, assignment, extra_ops)

        _LOG.info(
            "Pen %s now on ration %s (%d head from %s); superseded %d record(s)",
            pen_id, ration.name, head_count, start, len(superseded),
        )
        return assignment

    def get_current(self, pen_id: str) -> Optional[PenRationAssignment]:
        return self._repo.get_active_for_pen(pen_id)

    def unassign(self, pen_id: str) -> bool:
        """Supersede the pen's active assignment without a replacement."""
        with self._lock_for(pen_id):
            superseded = self._supersede_all(pen_id, normalize_date(self._clock(), "Today"))
            if not superseded:
                return False
            self._repo.supersede_and_create(superseded, None)
        _LOG.info("Pen %s unassigned from its ration", pen_id)
        return True

    def history(self, pen_id: str) -> List[PenRationAssignment]:
        """All assignments for a pen, newest first."""
        return sorted(
            self._repo.list_for_pen(pen_id),
            key=lambda a: (a.start_date, a.assigned_at),
            reverse=True,
        )

    def list_active(self) -> List[PenRationAssignment]:
        return self._repo.list_active()

    def list_all(self) -> List[PenRationAssignment]:
        return sorted(self._repo.list_all(), key=lambda a: (a.pen_id, a.start_date, a.assigned_at))

    def usage_stats(self, ration_id: str) -> RationUsageStats:
        assignments = [a for a in self._repo.list_all() if a.ration_id == ration_id]
        active = [a for a in assignments if a.is_active]
        return RationUsageStats(
            ration_id=ration_id,
            pens_using=len({a.pen_id for a in active}),
            total_head_count=sum(a.head_count for a in active),
            active_assignments=active,
            historical_assignments=[a for a in assignments if not a.is_active],
        )

    def _supersede_all(self, pen_id: str, end_date: str) -> List[PenRationAssignment]:
        # Every active record is closed, including strays from an earlier lost race
        active = [a for a in self._repo.list_for_pen(pen_id) if a.is_active]
        active.sort(key=lambda a: (a.assigned_at, a.start_date))
        for a in active:
            a.status = AssignmentStatus.SUPERSEDED
            a.end_date = end_date
        return active

    def _lock_for(self, pen_id: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._pen_locks.get(pen_id)
            if lock is None:
                lock = self._pen_locks[pen_id] = threading.Lock()
            return lock
