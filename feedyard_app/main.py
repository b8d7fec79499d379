"""
Application entry point for the feedyard ration engine.

Sets up settings, logging and the database, wires the services for the
session's account and fires any ration schedules that have come due.
"""

import logging
import sys
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Callable

from sqlalchemy.orm import sessionmaker

from feedyard_app.config.settings import Settings, init_logging
from feedyard_app.repositories.database import init_database
from feedyard_app.repositories.document_store import DocumentStore, StorageError
from feedyard_app.services.activity_ledger import PenActivityLedger
from feedyard_app.services.assignment_ledger import AssignmentLedger
from feedyard_app.services.ration_catalog import RationCatalog
from feedyard_app.services.ration_schedule import RationScheduleQueue

_LOG = logging.getLogger(__name__)


@dataclass(slots=True)
class FeedyardServices:
    """Services for one account, sharing a single document store."""

    store: DocumentStore
    catalog: RationCatalog
    assignments: AssignmentLedger
    schedules: RationScheduleQueue
    activities: PenActivityLedger


def build_services(
    session_factory: sessionmaker,
    account_id: str,
    clock: Callable[[], date] = date.today,
) -> FeedyardServices:
    store = DocumentStore(session_factory)
    catalog = RationCatalog(store, account_id)
    assignments = AssignmentLedger(store, account_id, catalog, clock=clock)
    schedules = RationScheduleQueue(store, account_id, catalog, assignments, clock=clock)
    activities = PenActivityLedger(store, account_id)
    return FeedyardServices(
        store=store,
        catalog=catalog,
        assignments=assignments,
        schedules=schedules,
        activities=activities,
    )


def main() -> int:
    """Bootstraps a session and applies due ration schedules."""
    # Initialize logging & settings
    settings = Settings.default()
    init_logging(settings)

    # Initialize database (SQLite) and ORM mappings
    session_factory = init_database(settings.db_path)
    services = build_services(session_factory, settings.account_id)

    try:
        applied = services.schedules.advance()
    except StorageError as exc:
        _LOG.error("Could not apply ration schedules: %s", exc.message)
        print(f"Storage unavailable, please retry: {exc.message}", file=sys.stderr)
        return 1

    for schedule in applied:
        print(f"Pen {schedule.pen_id}: ration {schedule.to_ration_id} applied ({schedule.trigger_date})")
    _LOG.info("Session start complete; %d schedule(s) applied", len(applied))
    return 0


if __name__ == "__main__":
    # Allow running as a script: `python -m feedyard_app.main`
    project_root = Path(__file__).resolve().parents[1]
    if project_root.exists():
        sys.path.insert(0, str(project_root))
    sys.exit(main())
