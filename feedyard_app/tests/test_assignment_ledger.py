"""Tests for the pen ration assignment ledger."""

from __future__ import annotations

import threading

import pytest

from feedyard_app.models import AssignmentStatus
from feedyard_app.services.validation import NotFoundError, ValidationError


def _active(services, pen_id):
    return [a for a in services.assignments.history(pen_id) if a.status == AssignmentStatus.ACTIVE]


class TestAssign:
    def test_assign_creates_active_record(self, services, rations, pens):
        a = services.assignments.assign("P1", rations["R1"].id, 50, "2024-01-01")
        assert a.status == AssignmentStatus.ACTIVE
        assert a.pen_name == "Pen 1"
        assert a.ration_name == "Grower R1"
        assert a.head_count == 50
        assert a.start_date == "2024-01-01"

        current = services.assignments.get_current("P1")
        assert current is not None
        assert current.id == a.id

    def test_start_date_defaults_to_today(self, services, rations, pens, clock):
        a = services.assignments.assign("P1", rations["R1"].id, 50)
        assert a.start_date == clock.today.isoformat()

    def test_reassign_supersedes_previous(self, services, rations, pens):
        first = services.assignments.assign("P1", rations["R1"].id, 50, "2024-01-01")
        second = services.assignments.assign("P1", rations["R2"].id, 48, "2024-01-15")

        history = services.assignments.history("P1")
        assert [a.id for a in history] == [second.id, first.id]
        assert history[1].status == AssignmentStatus.SUPERSEDED
        assert history[1].end_date == "2024-01-15"
        assert services.assignments.get_current("P1").ration_id == rations["R2"].id

    def test_never_more_than_one_active(self, services, rations, pens):
        for i in range(5):
            ration = rations["R1"] if i % 2 else rations["R2"]
            services.assignments.assign("P1", ration.id, 50)
            assert len(_active(services, "P1")) == 1
        assert len(services.assignments.history("P1")) == 5

    def test_zero_head_count_rejected(self, services, rations, pens):
        with pytest.raises(ValidationError):
            services.assignments.assign("P1", rations["R1"].id, 0)
        with pytest.raises(ValidationError):
            services.assignments.assign("P1", rations["R1"].id, -3)
        assert services.assignments.get_current("P1") is None

    def test_unknown_ration_not_found(self, services, pens):
        with pytest.raises(NotFoundError):
            services.assignments.assign("P1", "ration-ghost", 10)

    def test_unknown_pen_still_assignable(self, services, rations):
        a = services.assignments.assign("P9", rations["R1"].id, 12, pen_name="Hospital pen")
        assert a.pen_name == "Hospital pen"

    def test_concurrent_assigns_leave_one_active(self, services, rations, pens):
        errors = []

        def worker(ration_id):
            try:
                services.assignments.assign("P1", ration_id, 50)
            except Exception as exc:  # pragma: no cover - surfaced below
                errors.append(exc)

        threads = [
            threading.Thread(target=worker, args=(rations["R1" if i % 2 else "R2"].id,))
            for i in range(6)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert len(_active(services, "P1")) == 1
        assert len(services.assignments.history("P1")) == 6


class TestUnassign:
    def test_unassign_supersedes_without_replacement(self, services, rations, pens):
        services.assignments.assign("P1", rations["R1"].id, 50)
        assert services.assignments.unassign("P1") is True
        assert services.assignments.get_current("P1") is None
        assert services.assignments.history("P1")[0].status == AssignmentStatus.SUPERSEDED

    def test_unassign_without_assignment(self, services, pens):
        assert services.assignments.unassign("P1") is False


class TestUsageStats:
    def test_usage_stats(self, services, rations, pens):
        services.assignments.assign("P1", rations["R1"].id, 50)
        services.assignments.assign("P2", rations["R1"].id, 30)
        services.assignments.assign("P2", rations["R2"].id, 30)

        stats = services.assignments.usage_stats(rations["R1"].id)
        assert stats.pens_using == 1
        assert stats.total_head_count == 50
        assert len(stats.historical_assignments) == 1

    def test_list_active(self, services, rations, pens):
        services.assignments.assign("P1", rations["R1"].id, 50)
        services.assignments.assign("P2", rations["R2"].id, 20)
        services.assignments.assign("P1", rations["R2"].id, 50)
        active = services.assignments.list_active()
        assert sorted(a.pen_id for a in active) == ["P1", "P2"]
