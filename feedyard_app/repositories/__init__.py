"""
Repository layer for persistence (JSON documents in SQLite via SQLAlchemy).
"""

from .database import SessionLocal, Base, init_database, create_session_factory
from .document_store import (
    ChangeNotifier,
    DocumentChange,
    DocumentStore,
    StorageError,
    collection_path,
)
from .ration_repository import RationRepository
from .assignment_repository import AssignmentRepository, ScheduleRepository
from .activity_repository import ActivityRepository
from .pen_repository import PenRepository

__all__ = [
    "SessionLocal",
    "Base",
    "init_database",
    "create_session_factory",
    "ChangeNotifier",
    "DocumentChange",
    "DocumentStore",
    "StorageError",
    "collection_path",
    "RationRepository",
    "AssignmentRepository",
    "ScheduleRepository",
    "ActivityRepository",
    "PenRepository",
]
