"""
Repository for the ration catalog.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from .document_store import DocumentStore, collection_path
from ..models.ration import Ration, RationIngredient, RationKPI, RationStage

RATIONS_COLLECTION = "rations"


class RationRepository:
    def __init__(self, store: DocumentStore, account_id: str) -> None:
        self._store = store
        self._account_id = account_id

    @property
    def _path(self) -> str:
        return collection_path(self._account_id, RATIONS_COLLECTION)

    def list_all(self) -> List[Ration]:
        """List all rations ordered by name, then id."""
        rations = [self._to_model(doc) for doc in self._store.list(self._path)]
        rations.sort(key=lambda r: (r.name.lower(), r.id or ""))
        return rations

    def get(self, ration_id: str) -> Optional[Ration]:
        doc = self._store.get(self._path, ration_id)
        if doc is None:
            return None
        return self._to_model(doc)

    def save(self, ration: Ration) -> Ration:
        if ration.id is None:
            raise ValueError("Ration.id must be set before saving")
        self._store.create(self._path, ration.id, self._to_doc(ration))
        return ration

    def delete(self, ration_id: str) -> None:
        self._store.delete(self._path, ration_id)

    @staticmethod
    def _to_doc(ration: Ration) -> Dict[str, Any]:
        return {
            "name": ration.name,
            "description": ration.description,
            "stage": ration.stage.value,
            "ingredients": [
                {
                    "feed_id": ing.feed_id,
                    "feed_name": ing.feed_name,
                    "amount_lbs": ing.amount_lbs,
                    "percentage": ing.percentage,
                    "cost_per_lb": ing.cost_per_lb,
                }
                for ing in ration.ingredients
            ],
            "total_lbs_per_head": ration.total_lbs_per_head,
            "cost_per_head": ration.cost_per_head,
            "kpis": {
                "target_adg": ration.kpis.target_adg,
                "target_feed_conversion": ration.kpis.target_feed_conversion,
                "crude_protein": ration.kpis.crude_protein,
                "total_digestible_nutrients": ration.kpis.total_digestible_nutrients,
                "net_energy_maintenance": ration.kpis.net_energy_maintenance,
                "net_energy_gain": ration.kpis.net_energy_gain,
                "cost_per_pound_gain": ration.kpis.cost_per_pound_gain,
            },
            "notes": ration.notes,
            "is_active": ration.is_active,
            "created_at": ration.created_at,
            "updated_at": ration.updated_at,
        }

    @staticmethod
    def _to_model(doc: Dict[str, Any]) -> Ration:
        kpis = doc.get("kpis") or {}
        try:
            stage = RationStage(doc.get("stage", RationStage.CUSTOM.value))
        except ValueError:
            stage = RationStage.CUSTOM
        return Ration(
            id=doc["id"],
            name=doc.get("name", ""),
            description=doc.get("description", "") or "",
            stage=stage,
            ingredients=[
                RationIngredient(
                    feed_id=ing.get("feed_id", ""),
                    feed_name=ing.get("feed_name", ""),
                    amount_lbs=float(ing.get("amount_lbs", 0.0) or 0.0),
                    percentage=float(ing.get("percentage", 0.0) or 0.0),
                    cost_per_lb=float(ing.get("cost_per_lb", 0.0) or 0.0),
                )
                for ing in doc.get("ingredients") or []
            ],
            total_lbs_per_head=float(doc.get("total_lbs_per_head", 0.0) or 0.0),
            cost_per_head=float(doc.get("cost_per_head", 0.0) or 0.0),
            kpis=RationKPI(
                target_adg=float(kpis.get("target_adg", 0.0) or 0.0),
                target_feed_conversion=float(kpis.get("target_feed_conversion", 0.0) or 0.0),
                crude_protein=float(kpis.get("crude_protein", 0.0) or 0.0),
                total_digestible_nutrients=float(kpis.get("total_digestible_nutrients", 0.0) or 0.0),
                net_energy_maintenance=float(kpis.get("net_energy_maintenance", 0.0) or 0.0),
                net_energy_gain=float(kpis.get("net_energy_gain", 0.0) or 0.0),
                cost_per_pound_gain=float(kpis.get("cost_per_pound_gain", 0.0) or 0.0),
            ),
            notes=doc.get("notes", "") or "",
            is_active=bool(doc.get("is_active", True)),
            created_at=doc.get("created_at", "") or "",
            updated_at=doc.get("updated_at", "") or "",
        )
