"""
Repository for pen feed and medication activity logs.
"""

from __future__ import annotations

from typing import Any, Dict, List

from .document_store import DocumentStore, collection_path
from ..models.activity import PenFeedActivity, PenMedicationActivity

FEED_COLLECTION = "penFeedActivities"
MEDICATION_COLLECTION = "penMedicationActivities"


class ActivityRepository:
    def __init__(self, store: DocumentStore, account_id: str) -> None:
        self._store = store
        self._account_id = account_id

    # --- Feed ---

    def list_feed(self) -> List[PenFeedActivity]:
        path = collection_path(self._account_id, FEED_COLLECTION)
        return [self._feed_to_model(doc) for doc in self._store.list(path)]

    def create_feed(self, activity: PenFeedActivity) -> PenFeedActivity:
        if activity.id is None:
            raise ValueError("PenFeedActivity.id must be set before saving")
        path = collection_path(self._account_id, FEED_COLLECTION)
        self._store.create(path, activity.id, self._feed_to_doc(activity))
        return activity

    def delete_feed(self, activity_id: str) -> bool:
        path = collection_path(self._account_id, FEED_COLLECTION)
        if self._store.get(path, activity_id) is None:
            return False
        self._store.delete(path, activity_id)
        return True

    # --- Medication ---

    def list_medication(self) -> List[PenMedicationActivity]:
        path = collection_path(self._account_id, MEDICATION_COLLECTION)
        return [self._med_to_model(doc) for doc in self._store.list(path)]

    def create_medication(self, activity: PenMedicationActivity) -> PenMedicationActivity:
        if activity.id is None:
            raise ValueError("PenMedicationActivity.id must be set before saving")
        path = collection_path(self._account_id, MEDICATION_COLLECTION)
        self._store.create(path, activity.id, self._med_to_doc(activity))
        return activity

    def delete_medication(self, activity_id: str) -> bool:
        path = collection_path(self._account_id, MEDICATION_COLLECTION)
        if self._store.get(path, activity_id) is None:
            return False
        self._store.delete(path, activity_id)
        return True

    @staticmethod
    def _feed_to_doc(a: PenFeedActivity) -> Dict[str, Any]:
        return {
            "pen_id": a.pen_id,
            "barn_id": a.barn_id,
            "date": a.date,
            "feed_type": a.feed_type,
            "total_amount": a.total_amount,
            "unit": a.unit,
            "cost_per_unit": a.cost_per_unit,
            "cattle_count": a.cattle_count,
            "average_per_cattle": a.average_per_cattle,
            "total_cost": a.total_cost,
            "notes": a.notes,
            "created_at": a.created_at,
            "created_by": a.created_by,
        }

    @staticmethod
    def _feed_to_model(doc: Dict[str, Any]) -> PenFeedActivity:
        return PenFeedActivity(
            id=doc["id"],
            pen_id=doc.get("pen_id", ""),
            barn_id=doc.get("barn_id", "") or "",
            date=doc.get("date", ""),
            feed_type=doc.get("feed_type", "") or "",
            total_amount=float(doc.get("total_amount", 0.0) or 0.0),
            unit=doc.get("unit", "") or "",
            cost_per_unit=float(doc.get("cost_per_unit", 0.0) or 0.0),
            cattle_count=int(doc.get("cattle_count", 0) or 0),
            average_per_cattle=float(doc.get("average_per_cattle", 0.0) or 0.0),
            total_cost=float(doc.get("total_cost", 0.0) or 0.0),
            notes=doc.get("notes", "") or "",
            created_at=doc.get("created_at", "") or "",
            created_by=doc.get("created_by", "") or "",
        )

    @staticmethod
    def _med_to_doc(a: PenMedicationActivity) -> Dict[str, Any]:
        return {
            "pen_id": a.pen_id,
            "barn_id": a.barn_id,
            "date": a.date,
            "medication_name": a.medication_name,
            "purpose": a.purpose,
            "dosage_per_head": a.dosage_per_head,
            "unit": a.unit,
            "cattle_count": a.cattle_count,
            "cost_per_head": a.cost_per_head,
            "withdrawal_days": a.withdrawal_days,
            "total_dosage": a.total_dosage,
            "total_cost": a.total_cost,
            "notes": a.notes,
            "created_at": a.created_at,
            "created_by": a.created_by,
        }

    @staticmethod
    def _med_to_model(doc: Dict[str, Any]) -> PenMedicationActivity:
        withdrawal = doc.get("withdrawal_days")
        return PenMedicationActivity(
            id=doc["id"],
            pen_id=doc.get("pen_id", ""),
            barn_id=doc.get("barn_id", "") or "",
            date=doc.get("date", ""),
            medication_name=doc.get("medication_name", "") or "",
            purpose=doc.get("purpose", "") or "",
            dosage_per_head=float(doc.get("dosage_per_head", 0.0) or 0.0),
            unit=doc.get("unit", "") or "",
            cattle_count=int(doc.get("cattle_count", 0) or 0),
            cost_per_head=float(doc.get("cost_per_head", 0.0) or 0.0),
            withdrawal_days=int(withdrawal) if withdrawal is not None else None,
            total_dosage=float(doc.get("total_dosage", 0.0) or 0.0),
            total_cost=float(doc.get("total_cost", 0.0) or 0.0),
            notes=doc.get("notes", "") or "",
            created_at=doc.get("created_at", "") or "",
            created_by=doc.get("created_by", "") or "",
        )
