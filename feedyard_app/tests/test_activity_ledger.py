"""Tests for the pen activity ledger (feed and medication log)."""

from __future__ import annotations

import pytest

from feedyard_app.models import PenFeedActivity, PenMedicationActivity
from feedyard_app.services.activity_ledger import DateRange
from feedyard_app.services.validation import ValidationError, ValidationSeverity


def _feed(**overrides) -> PenFeedActivity:
    values = dict(
        pen_id="P1",
        barn_id="B1",
        date="2024-01-10",
        feed_type="Grower mix",
        total_amount=1000.0,
        cost_per_unit=0.5,
        cattle_count=50,
    )
    values.update(overrides)
    return PenFeedActivity(**values)


def _med(**overrides) -> PenMedicationActivity:
    values = dict(
        pen_id="P1",
        barn_id="B1",
        date="2024-01-12",
        medication_name="Draxxin",
        purpose="treatment",
        dosage_per_head=2.5,
        cattle_count=40,
        cost_per_head=3.0,
        withdrawal_days=18,
    )
    values.update(overrides)
    return PenMedicationActivity(**values)


class TestRecordFeed:
    def test_derived_totals(self, services):
        result = services.activities.record_feed(_feed())
        entry = result.activity
        assert entry.id is not None
        assert entry.average_per_cattle == pytest.approx(20.0)
        assert entry.total_cost == pytest.approx(500.0)
        assert entry.created_by == "rancher-1"
        assert result.issues == []

        stored = services.activities.list_feed_by_pen("P1")
        assert len(stored) == 1
        assert stored[0].total_cost == pytest.approx(500.0)

    def test_zero_cattle_warns_but_records(self, services):
        result = services.activities.record_feed(_feed(cattle_count=0))
        assert result.activity.average_per_cattle == 0.0
        assert result.activity.total_cost == pytest.approx(500.0)
        assert result.has_warnings
        assert result.issues[0].code == "ZERO_HEAD_COUNT"
        assert result.issues[0].severity == ValidationSeverity.WARNING
        assert len(services.activities.list_feed_by_pen("P1")) == 1

    @pytest.mark.parametrize(
        "overrides",
        [
            {"total_amount": 0},
            {"total_amount": -5},
            {"cost_per_unit": -0.1},
            {"cattle_count": -1},
            {"pen_id": ""},
            {"date": "10/01/2024"},
        ],
    )
    def test_rejects_bad_input(self, services, overrides):
        with pytest.raises(ValidationError):
            services.activities.record_feed(_feed(**overrides))
        assert services.activities.list_feed_by_pen("P1") == []

    def test_rejected_entry_is_left_untouched(self, services):
        entry = _feed(pen_id=" P1 ", date="2024-01-10T05:00:00", cost_per_unit=-1.0)
        with pytest.raises(ValidationError):
            services.activities.record_feed(entry)
        assert entry.pen_id == " P1 "
        assert entry.date == "2024-01-10T05:00:00"
        assert entry.id is None

    def test_date_time_part_dropped(self, services):
        result = services.activities.record_feed(_feed(date="2024-01-10T18:45:00Z"))
        assert result.activity.date == "2024-01-10"

    def test_stored_cost_is_a_snapshot(self, services):
        entry = services.activities.record_feed(_feed()).activity
        entry.cost_per_unit = 9.0
        assert services.activities.list_feed_by_pen("P1")[0].total_cost == pytest.approx(500.0)


class TestRecordMedication:
    def test_derived_totals(self, services):
        entry = services.activities.record_medication(_med()).activity
        assert entry.total_dosage == pytest.approx(100.0)
        assert entry.total_cost == pytest.approx(120.0)
        assert entry.unit == "ml"
        assert entry.withdrawal_days == 18

    def test_zero_cattle_warns(self, services):
        result = services.activities.record_medication(_med(cattle_count=0))
        assert result.has_warnings
        assert result.activity.total_cost == 0.0

    def test_rejected_entry_is_left_untouched(self, services):
        entry = _med(pen_id=" P1 ", medication_name=" Draxxin ", cattle_count=-4)
        with pytest.raises(ValidationError):
            services.activities.record_medication(entry)
        assert (entry.pen_id, entry.medication_name) == (" P1 ", " Draxxin ")

    def test_requires_medication_name(self, services):
        with pytest.raises(ValidationError):
            services.activities.record_medication(_med(medication_name="  "))

    def test_rejects_negative_cost(self, services):
        with pytest.raises(ValidationError):
            services.activities.record_medication(_med(cost_per_head=-2))


class TestTotals:
    def test_no_activity_totals_zero(self, services):
        assert services.activities.total_cost_by_pen("P1") == 0.0

    def test_unbounded_total_is_sum_of_entries(self, services):
        services.activities.record_feed(_feed())
        services.activities.record_feed(_feed(date="2024-01-11", total_amount=200.0, cost_per_unit=0.25))
        services.activities.record_medication(_med())
        services.activities.record_feed(_feed(pen_id="P2"))

        assert services.activities.total_feed_cost_by_pen("P1") == pytest.approx(550.0)
        assert services.activities.total_medication_cost_by_pen("P1") == pytest.approx(120.0)
        assert services.activities.total_cost_by_pen("P1") == pytest.approx(670.0)

    def test_date_range_is_inclusive(self, services):
        services.activities.record_feed(_feed(date="2024-01-01"))
        services.activities.record_feed(_feed(date="2024-01-15"))
        services.activities.record_feed(_feed(date="2024-01-31"))
        services.activities.record_feed(_feed(date="2024-02-01"))

        in_january = DateRange("2024-01-01", "2024-01-31")
        assert services.activities.total_feed_cost_by_pen("P1", in_january) == pytest.approx(1500.0)
        assert services.activities.total_feed_cost_by_pen("P1", DateRange(start="2024-01-31")) == pytest.approx(1000.0)
        assert services.activities.total_feed_cost_by_pen("P1", DateRange(end="2024-01-01")) == pytest.approx(500.0)

    def test_range_bounds_are_normalized(self):
        r = DateRange("2024-01-01T08:00:00", "2024-01-31T23:59:59Z")
        assert (r.start, r.end) == ("2024-01-01", "2024-01-31")
        assert r.contains("2024-01-31")
        assert not r.contains("2024-02-01")


class TestListingAndDelete:
    def test_list_by_pen_newest_first(self, services):
        services.activities.record_feed(_feed(date="2024-01-05"))
        services.activities.record_medication(_med(date="2024-01-20"))
        services.activities.record_feed(_feed(date="2024-01-10"))

        dates = [a.date for a in services.activities.list_by_pen("P1")]
        assert dates == ["2024-01-20", "2024-01-10", "2024-01-05"]

    def test_delete(self, services):
        feed = services.activities.record_feed(_feed()).activity
        med = services.activities.record_medication(_med()).activity

        assert services.activities.delete_feed(feed.id) is True
        assert services.activities.delete_feed(feed.id) is False
        assert services.activities.delete_medication(med.id) is True
        assert services.activities.total_cost_by_pen("P1") == 0.0
