"""
Queue of date-triggered ration changes.

A schedule moves ``pending -> applied`` when ``advance`` fires it, or
``pending -> cancelled`` on user request; both end states are terminal.
Firing a schedule goes through ``AssignmentLedger.assign`` exactly like a
manual reassignment.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import replace
from datetime import date
from typing import Callable, List, Optional

from ..models import RationSchedule, ScheduleStatus
from ..repositories.assignment_repository import ScheduleRepository
from ..repositories.document_store import DocumentStore
from ..repositories.pen_repository import PenRepository
from ..utils.ids import new_id, utc_timestamp
from .assignment_ledger import AssignmentLedger
from .ration_catalog import RationCatalog
from .validation import NotFoundError, ValidationError, normalize_date, require_text

_LOG = logging.getLogger(__name__)


class RationScheduleQueue:
    def __init__(
        self,
        store: DocumentStore,
        account_id: str,
        catalog: RationCatalog,
        ledger: AssignmentLedger,
        clock: Callable[[], date] = date.today,
    ) -> None:
        self._repo = ScheduleRepository(store, account_id)
        self._pens = PenRepository(store, account_id)
        self._catalog = catalog
        self._ledger = ledger
        self._clock = clock
        self._advance_lock = threading.Lock()

    def schedule(
        self,
        pen_id: str,
        to_ration_id: str,
        trigger_date: date | str,
        from_ration_id: str | None = None,
        notes: str | None = None,
    ) -> RationSchedule:
        """
        Queue a ration change for ``pen_id`` on ``trigger_date``.

        ``from_ration_id`` defaults to the pen's current ration, if any.

        Raises:
            ValidationError: missing pen or a trigger date before today.
            NotFoundError: the target ration is not in the catalog.
        """
        pen_id = require_text(pen_id, "Pen")
        trigger = normalize_date(trigger_date, "Trigger date")
        today = normalize_date(self._clock(), "Today")
        if trigger < today:
            raise ValidationError(f"Trigger date {trigger} is in the past (today is {today}).")
        if self._catalog.get(to_ration_id) is None:
            raise NotFoundError(f"Ration {to_ration_id} not found.")

        if from_ration_id is None:
            current = self._ledger.get_current(pen_id)
            from_ration_id = current.ration_id if current is not None else None

        schedule = RationSchedule(
            id=new_id("ration-schedule"),
            pen_id=pen_id,
            to_ration_id=to_ration_id,
            from_ration_id=from_ration_id,
            trigger_date=trigger,
            status=ScheduleStatus.PENDING,
            notes=(notes or "").strip() or None,
            created_at=utc_timestamp(),
        )
        self._repo.save(schedule)
        _LOG.info("Scheduled ration %s for pen %s on %s", to_ration_id, pen_id, trigger)
        return schedule

    def cancel(self, schedule_id: str) -> RationSchedule:
        """
        Move a pending schedule to ``cancelled``.

        Waits for a running ``advance`` so a schedule it has just applied is
        never flipped to cancelled.
        """
        with self._advance_lock:
            schedule = self._repo.get(schedule_id)
            if schedule is None:
                raise NotFoundError(f"Ration schedule {schedule_id} not found.")
            if not schedule.is_pending:
                raise ValidationError(
                    f"Only pending schedules can be cancelled; {schedule_id} is {schedule.status.value}."
                )
            schedule.status = ScheduleStatus.CANCELLED
            self._repo.mark(schedule)
        _LOG.info("Cancelled ration schedule %s", schedule_id)
        return schedule

    def get(self, schedule_id: str) -> Optional[RationSchedule]:
        return self._repo.get(schedule_id)

    def list_all(self) -> List[RationSchedule]:
        return sorted(self._repo.list_all(), key=self._order_key)

    def list_pending(self) -> List[RationSchedule]:
        return [s for s in self.list_all() if s.is_pending]

    def pending_for_pen(self, pen_id: str) -> List[RationSchedule]:
        return [s for s in self.list_pending() if s.pen_id == pen_id]

    def delete(self, schedule_id: str) -> bool:
        if self._repo.get(schedule_id) is None:
            return False
        self._repo.delete(schedule_id)
        return True

    def advance(self, today: date | str | None = None) -> List[RationSchedule]:
        """
        Fire every pending schedule whose trigger date is on or before ``today``.

        Due schedules are applied oldest trigger date first, so when several
        target the same pen the latest-dated one ends up active. Schedules
        that cannot be applied (ration gone, no animals) stay pending and are
        retried on the next call. Returns the schedules applied by this call;
        a call that overlaps a running one returns an empty list.
        """
        if not self._advance_lock.acquire(blocking=False):
            _LOG.warning("Ration schedule advance already running; skipped")
            return []
        try:
            cutoff = normalize_date(today if today is not None else self._clock(), "Today")
            due = [s for s in self._repo.list_all() if s.is_pending and s.trigger_date <= cutoff]
            due.sort(key=self._order_key)

            applied: List[RationSchedule] = []
            for schedule in due:
                if self._apply(schedule):
                    applied.append(schedule)
            if due:
                _LOG.info("Advanced ration schedules to %s: %d of %d applied", cutoff, len(applied), len(due))
            return applied
        finally:
            self._advance_lock.release()

    def _apply(self, schedule: RationSchedule) -> bool:
        if self._catalog.get(schedule.to_ration_id) is None:
            _LOG.warning(
                "Schedule %s left pending: ration %s unavailable", schedule.id, schedule.to_ration_id
            )
            return False
        head_count = self._live_head_count(schedule.pen_id)
        applied = replace(schedule, status=ScheduleStatus.APPLIED, applied_at=utc_timestamp())
        try:
            # The applied mark commits with the reassignment or not at all
            self._ledger.assign(
                schedule.pen_id,
                schedule.to_ration_id,
                head_count,
                schedule.trigger_date,
                extra_ops=[self._repo.mark_op(applied)],
            )
        except (ValidationError, NotFoundError) as exc:
            _LOG.warning("Schedule %s left pending: %s", schedule.id, exc.message)
            return False
        schedule.status = applied.status
        schedule.applied_at = applied.applied_at
        return True

    def _live_head_count(self, pen_id: str) -> int:
        pen = self._pens.get(pen_id)
        if pen is not None:
            return pen.current_count
        current = self._ledger.get_current(pen_id)
        return current.head_count if current is not None else 0

    @staticmethod
    def _order_key(s: RationSchedule) -> tuple:
        return (s.trigger_date, s.created_at, s.id or "")
