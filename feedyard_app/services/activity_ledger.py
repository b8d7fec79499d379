"""
Append-only pen activity ledger for feed and medication events.

Derived totals are computed once when an entry is recorded and stored with
it, so historical costs never move when reference prices change. Dates are
normalized to ``YYYY-MM-DD`` on the way in, which keeps the string range
comparisons in ``total_*_by_pen`` correct.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Generic, List, TypeVar, Union

from ..models import PenFeedActivity, PenMedicationActivity
from ..repositories.activity_repository import ActivityRepository
from ..repositories.document_store import DocumentStore
from ..utils.ids import new_id, utc_timestamp
from .validation import (
    ValidationIssue,
    ValidationSeverity,
    normalize_date,
    require_head_count,
    require_number,
    require_text,
    safe_divide,
)

_LOG = logging.getLogger(__name__)

Activity = Union[PenFeedActivity, PenMedicationActivity]
T = TypeVar("T", PenFeedActivity, PenMedicationActivity)


@dataclass(slots=True)
class DateRange:
    """Inclusive ``[start, end]`` range of ISO dates; either bound may be open."""

    start: str | None = None
    end: str | None = None

    def __post_init__(self) -> None:
        if self.start is not None:
            self.start = normalize_date(self.start, "Range start")
        if self.end is not None:
            self.end = normalize_date(self.end, "Range end")

    def contains(self, iso_date: str) -> bool:
        if self.start is not None and iso_date < self.start:
            return False
        if self.end is not None and iso_date > self.end:
            return False
        return True


@dataclass(slots=True)
class RecordResult(Generic[T]):
    """A stored activity plus any non-blocking notices for the caller."""

    activity: T
    issues: List[ValidationIssue] = field(default_factory=list)

    @property
    def has_warnings(self) -> bool:
        return any(i.severity == ValidationSeverity.WARNING for i in self.issues)


def _zero_head_warning(pen_id: str) -> ValidationIssue:
    return ValidationIssue(
        code="ZERO_HEAD_COUNT",
        severity=ValidationSeverity.WARNING,
        message=f"Pen {pen_id} had no cattle recorded; per-head figures are 0.",
        value=0.0,
    )


def _in_range(activity: Activity, date_range: DateRange | None) -> bool:
    return date_range is None or date_range.contains(activity.date)


def _newest_first(activities: List[T]) -> List[T]:
    return sorted(activities, key=lambda a: (a.date, a.created_at), reverse=True)


class PenActivityLedger:
    def __init__(self, store: DocumentStore, account_id: str) -> None:
        self._repo = ActivityRepository(store, account_id)
        self._account_id = account_id

    def record_feed(self, entry: PenFeedActivity) -> RecordResult[PenFeedActivity]:
        """
        Validate and append a feed event.

        ``average_per_cattle`` and ``total_cost`` are derived here; a zero
        head count stores ``average_per_cattle = 0`` and returns a warning.

        Raises:
            ValidationError: non-positive amount, negative unit cost or head
                count, missing pen, or an unparseable date.
        """
        pen_id = require_text(entry.pen_id, "Pen")
        when = normalize_date(entry.date, "Feed date")
        total_amount = require_number(entry.total_amount, "Total amount", strict=True)
        cost_per_unit = require_number(entry.cost_per_unit, "Cost per unit")
        cattle_count = require_head_count(entry.cattle_count, "Cattle count", allow_zero=True)

        entry.pen_id = pen_id
        entry.date = when
        entry.total_amount = total_amount
        entry.cost_per_unit = cost_per_unit
        entry.cattle_count = cattle_count

        issues: List[ValidationIssue] = []
        if entry.cattle_count == 0:
            issues.append(_zero_head_warning(entry.pen_id))
            _LOG.warning("Feed entry for pen %s recorded with zero head count", entry.pen_id)

        entry.average_per_cattle = safe_divide(entry.total_amount, entry.cattle_count)
        entry.total_cost = entry.total_amount * entry.cost_per_unit
        entry.id = new_id("feed")
        entry.created_at = utc_timestamp()
        entry.created_by = entry.created_by or self._account_id

        self._repo.create_feed(entry)
        _LOG.info("Recorded feed for pen %s on %s: %.2f", entry.pen_id, entry.date, entry.total_cost)
        return RecordResult(entry, issues)

    def record_medication(self, entry: PenMedicationActivity) -> RecordResult[PenMedicationActivity]:
        """Validate and append a medication event; see ``record_feed``."""
        pen_id = require_text(entry.pen_id, "Pen")
        medication_name = require_text(entry.medication_name, "Medication name")
        when = normalize_date(entry.date, "Medication date")
        dosage_per_head = require_number(entry.dosage_per_head, "Dosage per head")
        cost_per_head = require_number(entry.cost_per_head, "Cost per head")
        cattle_count = require_head_count(entry.cattle_count, "Cattle count", allow_zero=True)
        withdrawal_days = entry.withdrawal_days
        if withdrawal_days is not None:
            withdrawal_days = require_head_count(withdrawal_days, "Withdrawal days", allow_zero=True)

        entry.pen_id = pen_id
        entry.medication_name = medication_name
        entry.date = when
        entry.dosage_per_head = dosage_per_head
        entry.cost_per_head = cost_per_head
        entry.cattle_count = cattle_count
        entry.withdrawal_days = withdrawal_days

        issues: List[ValidationIssue] = []
        if entry.cattle_count == 0:
            issues.append(_zero_head_warning(entry.pen_id))
            _LOG.warning("Medication entry for pen %s recorded with zero head count", entry.pen_id)

        entry.total_dosage = entry.dosage_per_head * entry.cattle_count
        entry.total_cost = entry.cost_per_head * entry.cattle_count
        entry.id = new_id("med")
        entry.created_at = utc_timestamp()
        entry.created_by = entry.created_by or self._account_id

        self._repo.create_medication(entry)
        _LOG.info(
            "Recorded medication %s for pen %s on %s: %.2f",
            entry.medication_name, entry.pen_id, entry.date, entry.total_cost,
        )
        return RecordResult(entry, issues)

    def list_feed_by_pen(self, pen_id: str) -> List[PenFeedActivity]:
        return _newest_first([a for a in self._repo.list_feed() if a.pen_id == pen_id])

    def list_medication_by_pen(self, pen_id: str) -> List[PenMedicationActivity]:
        return _newest_first([a for a in self._repo.list_medication() if a.pen_id == pen_id])

    def list_by_pen(self, pen_id: str) -> List[Activity]:
        """Feed and medication events for a pen, newest first."""
        combined: List[Activity] = [
            *self.list_feed_by_pen(pen_id),
            *self.list_medication_by_pen(pen_id),
        ]
        return sorted(combined, key=lambda a: (a.date, a.created_at), reverse=True)

    def total_feed_cost_by_pen(self, pen_id: str, date_range: DateRange | None = None) -> float:
        return sum(
            a.total_cost for a in self._repo.list_feed()
            if a.pen_id == pen_id and _in_range(a, date_range)
        )

    def total_medication_cost_by_pen(self, pen_id: str, date_range: DateRange | None = None) -> float:
        return sum(
            a.total_cost for a in self._repo.list_medication()
            if a.pen_id == pen_id and _in_range(a, date_range)
        )

    def total_cost_by_pen(self, pen_id: str, date_range: DateRange | None = None) -> float:
        """Sum of ``total_cost`` over every feed and medication event in range."""
        return self.total_feed_cost_by_pen(pen_id, date_range) + self.total_medication_cost_by_pen(
            pen_id, date_range
        )

    def delete_feed(self, activity_id: str) -> bool:
        deleted = self._repo.delete_feed(activity_id)
        if deleted:
            _LOG.info("Deleted feed activity %s", activity_id)
        return deleted

    def delete_medication(self, activity_id: str) -> bool:
        deleted = self._repo.delete_medication(activity_id)
        if deleted:
            _LOG.info("Deleted medication activity %s", activity_id)
        return deleted
