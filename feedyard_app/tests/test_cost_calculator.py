"""Tests for pen ROI, per-head cost and feed projection."""

from __future__ import annotations

import pytest

from feedyard_app.models import PenFeedActivity, PenMedicationActivity
from feedyard_app.services.activity_ledger import DateRange
from feedyard_app.services.cost_calculator import (
    compute_roi,
    cost_per_head,
    project_all_pens,
    project_pen,
    project_pen_consumption,
    roi_percent,
    total_feed_costs,
)
from feedyard_app.services.validation import ValidationError


def _record_feed(services, date="2024-01-10", amount=1000.0, price=0.5, head=50):
    services.activities.record_feed(
        PenFeedActivity(pen_id="P1", date=date, total_amount=amount, cost_per_unit=price, cattle_count=head)
    )


class TestROI:
    def test_no_activity(self, services):
        roi = compute_roi(services.activities, "P1", 1000.0)
        assert roi.total_costs == 0.0
        assert roi.profit == 1000.0
        assert roi.roi == 0.0

    def test_feed_only(self, services):
        _record_feed(services)
        roi = compute_roi(services.activities, "P1", 10000.0)
        assert roi.total_feed_cost == pytest.approx(500.0)
        assert roi.total_medication_cost == 0.0
        assert roi.total_costs == pytest.approx(500.0)
        assert roi.profit == pytest.approx(9500.0)
        assert roi.roi == pytest.approx(1900.0)

    def test_medication_included(self, services):
        _record_feed(services)
        services.activities.record_medication(
            PenMedicationActivity(
                pen_id="P1", date="2024-01-11", medication_name="LA-200", cattle_count=50, cost_per_head=2.0
            )
        )
        roi = compute_roi(services.activities, "P1", 1200.0)
        assert roi.total_medication_cost == pytest.approx(100.0)
        assert roi.total_costs == pytest.approx(600.0)
        assert roi.profit == pytest.approx(600.0)
        assert roi.roi == pytest.approx(100.0)

    def test_loss_gives_negative_roi(self, services):
        _record_feed(services)
        roi = compute_roi(services.activities, "P1", 250.0)
        assert roi.profit == pytest.approx(-250.0)
        assert roi.roi == pytest.approx(-50.0)

    def test_date_range_limits_costs(self, services):
        _record_feed(services, date="2023-12-31")
        _record_feed(services, date="2024-01-10")
        roi = compute_roi(services.activities, "P1", 1000.0, DateRange("2024-01-01", "2024-01-31"))
        assert roi.total_costs == pytest.approx(500.0)

    def test_other_pens_ignored(self, services):
        services.activities.record_feed(
            PenFeedActivity(pen_id="P2", date="2024-01-10", total_amount=10.0, cost_per_unit=1.0, cattle_count=1)
        )
        assert compute_roi(services.activities, "P1", 0.0).total_costs == 0.0

    def test_non_numeric_revenue_rejected(self, services):
        with pytest.raises(ValidationError):
            compute_roi(services.activities, "P1", "lots")

    def test_to_dict(self, services):
        _record_feed(services)
        data = compute_roi(services.activities, "P1", 10000.0).to_dict()
        assert set(data) == {
            "total_feed_cost", "total_medication_cost", "total_costs", "revenue", "profit", "roi",
        }

    def test_roi_percent_without_costs(self):
        assert roi_percent(100.0, 0.0) == 0.0
        assert roi_percent(50.0, 200.0) == pytest.approx(25.0)


class TestPerHead:
    def test_cost_per_head(self, services):
        _record_feed(services)
        per_head = cost_per_head(compute_roi(services.activities, "P1", 10000.0), 50)
        assert per_head.feed_cost == pytest.approx(10.0)
        assert per_head.total_cost == pytest.approx(10.0)
        assert per_head.profit == pytest.approx(190.0)

    def test_empty_pen_is_zero(self, services):
        _record_feed(services)
        per_head = cost_per_head(compute_roi(services.activities, "P1", 10000.0), 0)
        assert per_head.total_cost == 0.0
        assert per_head.profit == 0.0


class TestProjection:
    def test_thirty_day_projection(self, services, rations, pens):
        assignment = services.assignments.assign("P1", rations["R1"].id, 50, "2024-01-01")
        projection = project_pen_consumption(assignment, rations["R1"])

        assert projection.days == 30
        assert projection.total_daily_lbs == pytest.approx(1000.0)
        assert projection.daily_cost == pytest.approx(200.0)
        assert projection.period_cost == pytest.approx(6000.0)

        corn = projection.ingredients[0]
        assert corn.feed_name == "Corn"
        assert corn.daily_amount_lbs == pytest.approx(600.0)
        assert corn.daily_cost == pytest.approx(120.0)
        assert corn.period_cost == pytest.approx(3600.0)

    def test_custom_period(self, services, rations, pens):
        assignment = services.assignments.assign("P1", rations["R2"].id, 10, "2024-01-01")
        projection = project_pen_consumption(assignment, rations["R2"], days=7)
        assert projection.period_cost == pytest.approx(5.5 * 10 * 7)
        assert projection.ingredients == []


class TestPenLookupProjection:
    def test_project_pen_by_id(self, services, rations, pens):
        services.assignments.assign("P1", rations["R1"].id, 50, "2024-01-01")
        projection = project_pen(services.assignments, services.catalog, "P1")
        assert projection.pen_name == "Pen 1"
        assert projection.ration_name == "Grower R1"
        assert projection.daily_cost == pytest.approx(200.0)
        assert projection.period_cost == pytest.approx(6000.0)

    def test_unassigned_pen_is_none(self, services, rations, pens):
        assert project_pen(services.assignments, services.catalog, "P1") is None

    def test_missing_ration_is_none(self, services, rations, pens):
        services.assignments.assign("P1", rations["R1"].id, 50, "2024-01-01")
        services.catalog._repo.delete(rations["R1"].id)
        assert project_pen(services.assignments, services.catalog, "P1") is None


class TestAllPensProjection:
    def test_totals_across_active_pens(self, services, rations, pens):
        services.assignments.assign("P1", rations["R1"].id, 50, "2024-01-01")
        services.assignments.assign("P2", rations["R1"].id, 10, "2024-01-01", pen_name="Pen 2")
        services.assignments.assign("P2", rations["R2"].id, 10, "2024-01-05")

        projections = project_all_pens(services.assignments, services.catalog)
        assert [p.pen_id for p in projections] == ["P1", "P2"]

        totals = total_feed_costs(services.assignments, services.catalog)
        assert totals.head_count == 60
        assert totals.daily_lbs == pytest.approx(50 * 20.0 + 10 * 24.0)
        assert totals.daily_cost == pytest.approx(200.0 + 55.0)
        assert totals.weekly_cost == pytest.approx(255.0 * 7)
        assert totals.period_cost == pytest.approx(255.0 * 30)
        assert totals.yearly_cost == pytest.approx(255.0 * 365)

    def test_pen_with_missing_ration_left_out(self, services, rations, pens):
        services.assignments.assign("P1", rations["R1"].id, 50, "2024-01-01")
        services.assignments.assign("P2", rations["R2"].id, 10, "2024-01-01", pen_name="Pen 2")
        services.catalog._repo.delete(rations["R2"].id)

        totals = total_feed_costs(services.assignments, services.catalog, days=7)
        assert [p.pen_id for p in totals.pens] == ["P1"]
        assert totals.period_cost == pytest.approx(200.0 * 7)

    def test_no_active_pens(self, services, rations):
        totals = total_feed_costs(services.assignments, services.catalog)
        assert totals.pens == []
        assert totals.daily_cost == 0.0
