"""
Repositories for pen ration assignments and scheduled ration changes.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from .document_store import BatchOp, DocumentStore, collection_path
from ..models.assignment import (
    AssignmentStatus,
    PenRationAssignment,
    RationSchedule,
    ScheduleStatus,
)

ASSIGNMENTS_COLLECTION = "rationAssignments"
SCHEDULES_COLLECTION = "rationSchedules"


class AssignmentRepository:
    def __init__(self, store: DocumentStore, account_id: str) -> None:
        self._store = store
        self._account_id = account_id

    @property
    def _path(self) -> str:
        return collection_path(self._account_id, ASSIGNMENTS_COLLECTION)

    def list_all(self) -> List[PenRationAssignment]:
        return [self._to_model(doc) for doc in self._store.list(self._path)]

    def list_for_pen(self, pen_id: str) -> List[PenRationAssignment]:
        return [a for a in self.list_all() if a.pen_id == pen_id]

    def list_active(self) -> List[PenRationAssignment]:
        return [a for a in self.list_all() if a.is_active]

    def get_active_for_pen(self, pen_id: str) -> Optional[PenRationAssignment]:
        active = [a for a in self.list_for_pen(pen_id) if a.is_active]
        if not active:
            return None
        # Newest wins should an older writer have left a stray active record
        return max(active, key=lambda a: (a.assigned_at, a.start_date))

    def supersede_and_create(
        self,
        superseded: List[PenRationAssignment],
        new: PenRationAssignment | None,
        extra_ops: Iterable[BatchOp] = (),
    ) -> None:
        """
        Mark ``superseded`` records and write ``new`` in a single transaction.

        ``extra_ops`` are committed in the same batch, so a caller can tie its
        own bookkeeping to the reassignment.
        """
        ops = [
            BatchOp(
                "update",
                self._path,
                old.id,
                {"status": AssignmentStatus.SUPERSEDED.value, "end_date": old.end_date},
            )
            for old in superseded
            if old.id is not None
        ]
        if new is not None:
            if new.id is None:
                raise ValueError("PenRationAssignment.id must be set before saving")
            ops.append(BatchOp("create", self._path, new.id, self._to_doc(new)))
        ops.extend(extra_ops)
        self._store.write_batch(ops)

    @staticmethod
    def _to_doc(a: PenRationAssignment) -> Dict[str, Any]:
        return {
            "pen_id": a.pen_id,
            "pen_name": a.pen_name,
            "ration_id": a.ration_id,
            "ration_name": a.ration_name,
            "head_count": a.head_count,
            "start_date": a.start_date,
            "assigned_at": a.assigned_at,
            "end_date": a.end_date,
            "status": a.status.value,
        }

    @staticmethod
    def _to_model(doc: Dict[str, Any]) -> PenRationAssignment:
        return PenRationAssignment(
            id=doc["id"],
            pen_id=doc.get("pen_id", ""),
            pen_name=doc.get("pen_name", "") or "",
            ration_id=doc.get("ration_id", ""),
            ration_name=doc.get("ration_name", "") or "",
            head_count=int(doc.get("head_count", 0) or 0),
            start_date=doc.get("start_date", "") or "",
            assigned_at=doc.get("assigned_at", "") or "",
            end_date=doc.get("end_date"),
            status=AssignmentStatus(doc.get("status", AssignmentStatus.ACTIVE.value)),
        )


class ScheduleRepository:
    def __init__(self, store: DocumentStore, account_id: str) -> None:
        self._store = store
        self._account_id = account_id

    @property
    def _path(self) -> str:
        return collection_path(self._account_id, SCHEDULES_COLLECTION)

    def list_all(self) -> List[RationSchedule]:
        return [self._to_model(doc) for doc in self._store.list(self._path)]

    def get(self, schedule_id: str) -> Optional[RationSchedule]:
        doc = self._store.get(self._path, schedule_id)
        if doc is None:
            return None
        return self._to_model(doc)

    def save(self, schedule: RationSchedule) -> RationSchedule:
        if schedule.id is None:
            raise ValueError("RationSchedule.id must be set before saving")
        self._store.create(self._path, schedule.id, self._to_doc(schedule))
        return schedule

    def mark(self, schedule: RationSchedule) -> RationSchedule:
        """Persist a status transition."""
        self._store.write_batch([self.mark_op(schedule)])
        return schedule

    def mark_op(self, schedule: RationSchedule) -> BatchOp:
        """Status transition as a batch operation, for writes that must commit together."""
        if schedule.id is None:
            raise ValueError("RationSchedule.id must be set for update")
        return BatchOp(
            "update",
            self._path,
            schedule.id,
            {"status": schedule.status.value, "applied_at": schedule.applied_at},
        )

    def delete(self, schedule_id: str) -> None:
        self._store.delete(self._path, schedule_id)

    @staticmethod
    def _to_doc(s: RationSchedule) -> Dict[str, Any]:
        return {
            "pen_id": s.pen_id,
            "to_ration_id": s.to_ration_id,
            "from_ration_id": s.from_ration_id,
            "trigger_date": s.trigger_date,
            "status": s.status.value,
            "notes": s.notes,
            "created_at": s.created_at,
            "applied_at": s.applied_at,
        }

    @staticmethod
    def _to_model(doc: Dict[str, Any]) -> RationSchedule:
        return RationSchedule(
            id=doc["id"],
            pen_id=doc.get("pen_id", ""),
            to_ration_id=doc.get("to_ration_id", ""),
            from_ration_id=doc.get("from_ration_id"),
            trigger_date=doc.get("trigger_date", "") or "",
            status=ScheduleStatus(doc.get("status", ScheduleStatus.PENDING.value)),
            notes=doc.get("notes"),
            created_at=doc.get("created_at", "") or "",
            applied_at=doc.get("applied_at"),
        )
