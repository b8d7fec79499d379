"""
Repository for pens.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from .document_store import DocumentStore, collection_path
from ..models.pen import Pen
from ..utils.sorting import get_pen_sort_key

PENS_COLLECTION = "pens"


class PenRepository:
    def __init__(self, store: DocumentStore, account_id: str) -> None:
        self._store = store
        self._account_id = account_id

    @property
    def _path(self) -> str:
        return collection_path(self._account_id, PENS_COLLECTION)

    def list_all(self) -> List[Pen]:
        pens = [self._to_model(doc) for doc in self._store.list(self._path)]
        pens.sort(key=get_pen_sort_key)
        return pens

    def get(self, pen_id: str) -> Optional[Pen]:
        doc = self._store.get(self._path, pen_id)
        if doc is None:
            return None
        return self._to_model(doc)

    def save(self, pen: Pen) -> Pen:
        if pen.id is None:
            raise ValueError("Pen.id must be set before saving")
        self._store.create(
            self._path,
            pen.id,
            {
                "name": pen.name,
                "barn_id": pen.barn_id,
                "capacity": pen.capacity,
                "current_count": pen.current_count,
                "notes": pen.notes,
            },
        )
        return pen

    def delete(self, pen_id: str) -> None:
        self._store.delete(self._path, pen_id)

    @staticmethod
    def _to_model(doc: Dict[str, Any]) -> Pen:
        return Pen(
            id=doc["id"],
            name=doc.get("name", "") or "",
            barn_id=doc.get("barn_id", "") or "",
            capacity=int(doc.get("capacity", 0) or 0),
            current_count=int(doc.get("current_count", 0) or 0),
            notes=doc.get("notes", "") or "",
        )
