"""
Generic account-scoped document store with change notification.

Documents are JSON objects addressed by ``(collection, doc_id)`` where the
collection path carries the owning account, e.g. ``users/<account>/rations``.
Every successful write is announced to subscribers after commit.
"""

from __future__ import annotations

import json
import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional

from sqlalchemy import DateTime, String, Text, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Mapped, Session, mapped_column, sessionmaker

from .database import Base

_LOG = logging.getLogger(__name__)

Document = Dict[str, Any]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class StorageError(Exception):
    """Persistence failed or the session has no authenticated account. Retryable."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


def collection_path(account_id: str, name: str) -> str:
    """Return the per-account path for a collection."""
    if not account_id or not account_id.strip():
        raise StorageError("Not authenticated: no account id for this session.")
    return f"users/{account_id.strip()}/{name}"


class DocumentORM(Base):
    __tablename__ = "documents"

    collection: Mapped[str] = mapped_column(String(255), primary_key=True)
    doc_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    payload_json: Mapped[str] = mapped_column(Text, default="{}")
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now, onupdate=_utc_now)


@dataclass(slots=True, frozen=True)
class DocumentChange:
    kind: str  # "create" | "update" | "delete"
    collection: str
    doc_id: str


class ChangeNotifier:
    """Listener registry; ``subscribe`` returns the matching unsubscribe handle."""

    def __init__(self) -> None:
        self._listeners: List[Callable[[DocumentChange], None]] = []
        self._lock = threading.Lock()

    def subscribe(self, callback: Callable[[DocumentChange], None]) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._listeners:
                    self._listeners.remove(callback)

        return unsubscribe

    def notify(self, change: DocumentChange) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(change)
            except Exception:
                # A broken subscriber must not hide a committed write from the others
                _LOG.exception("Change listener %r failed for %s", listener, change)


@dataclass(slots=True)
class BatchOp:
    kind: str  # "create" | "update" | "delete"
    collection: str
    doc_id: str
    value: Document = field(default_factory=dict)


class DocumentStore:
    """CRUD over JSON documents, one SQLAlchemy session per call."""

    def __init__(self, session_factory: sessionmaker, notifier: ChangeNotifier | None = None) -> None:
        self._session_factory = session_factory
        self._notifier = notifier or ChangeNotifier()

    @property
    def notifier(self) -> ChangeNotifier:
        return self._notifier

    def subscribe(self, callback: Callable[[DocumentChange], None]) -> Callable[[], None]:
        return self._notifier.subscribe(callback)

    def list(self, collection: str) -> List[Document]:
        with self._session("list") as db:
            rows = db.scalars(
                select(DocumentORM)
                .where(DocumentORM.collection == collection)
                .order_by(DocumentORM.doc_id)
            ).all()
            return [self._load(obj) for obj in rows]

    def get(self, collection: str, doc_id: str) -> Optional[Document]:
        with self._session("get") as db:
            obj = db.get(DocumentORM, (collection, doc_id))
            if obj is None:
                return None
            return self._load(obj)

    def create(self, collection: str, doc_id: str, value: Document) -> None:
        """Write ``value`` at ``doc_id``, replacing any previous document."""
        self.write_batch([BatchOp("create", collection, doc_id, value)])

    def update(self, collection: str, doc_id: str, partial: Document) -> None:
        """Merge ``partial`` into an existing document."""
        self.write_batch([BatchOp("update", collection, doc_id, partial)])

    def delete(self, collection: str, doc_id: str) -> None:
        self.write_batch([BatchOp("delete", collection, doc_id)])

    def write_batch(self, ops: Iterable[BatchOp]) -> None:
        """Apply all operations in one transaction, then notify subscribers."""
        ops = list(ops)
        if not ops:
            return
        with self._session("write") as db:
            for op in ops:
                self._apply(db, op)
            db.commit()
        for op in ops:
            self._notifier.notify(DocumentChange(op.kind, op.collection, op.doc_id))

    @contextmanager
    def _session(self, action: str) -> Iterator[Session]:
        try:
            with self._session_factory() as db:
                yield db
        except SQLAlchemyError as exc:
            _LOG.error("Document store %s failed", action, exc_info=True)
            raise StorageError(f"Storage {action} failed: {exc}") from exc

    @staticmethod
    def _apply(db: Session, op: BatchOp) -> None:
        obj = db.get(DocumentORM, (op.collection, op.doc_id))
        if op.kind == "create":
            payload = json.dumps(op.value, sort_keys=True)
            if obj is None:
                db.add(DocumentORM(collection=op.collection, doc_id=op.doc_id, payload_json=payload))
            else:
                obj.payload_json = payload
        elif op.kind == "update":
            if obj is None:
                raise StorageError(f"Document {op.collection}/{op.doc_id} does not exist")
            merged = json.loads(obj.payload_json or "{}")
            merged.update(op.value)
            obj.payload_json = json.dumps(merged, sort_keys=True)
        elif op.kind == "delete":
            if obj is not None:
                db.delete(obj)
        else:
            raise ValueError(f"Unknown batch operation: {op.kind}")

    @staticmethod
    def _load(obj: DocumentORM) -> Document:
        doc = json.loads(obj.payload_json or "{}")
        doc["id"] = obj.doc_id
        return doc
