"""Pytest configuration and fixtures."""

from __future__ import annotations

import sys
import tempfile
from datetime import date
from pathlib import Path

import pytest

# Ensure project root is on path when running tests
_project_root = Path(__file__).resolve().parents[2]
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from feedyard_app.main import build_services
from feedyard_app.models import Pen, Ration, RationIngredient, RationStage
from feedyard_app.repositories.database import create_session_factory
from feedyard_app.repositories.document_store import DocumentStore
from feedyard_app.repositories.pen_repository import PenRepository

ACCOUNT = "rancher-1"


class FixedClock:
    """Callable clock whose date tests can move."""

    def __init__(self, today: date) -> None:
        self.today = today

    def __call__(self) -> date:
        return self.today


@pytest.fixture
def temp_db():
    """Create a temporary SQLite database and return its path."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        path = Path(f.name)
    yield path
    try:
        path.unlink(missing_ok=True)
    except OSError:
        pass  # Windows may hold file; ignore cleanup failure


@pytest.fixture
def session_factory(temp_db):
    """Provide a sessionmaker bound to a database with initialized schema."""
    factory = create_session_factory(f"sqlite:///{temp_db}")
    yield factory
    factory.kw["bind"].dispose()


@pytest.fixture
def store(session_factory):
    return DocumentStore(session_factory)


@pytest.fixture
def clock():
    return FixedClock(date(2024, 1, 1))


@pytest.fixture
def services(session_factory, clock):
    return build_services(session_factory, ACCOUNT, clock=clock)


@pytest.fixture
def pens(services):
    """Pen P1 with 50 head and an empty pen P0."""
    repo = PenRepository(services.store, ACCOUNT)
    p1 = repo.save(Pen(id="P1", name="Pen 1", barn_id="B1", capacity=80, current_count=50))
    p0 = repo.save(Pen(id="P0", name="Pen 0", barn_id="B1", capacity=40, current_count=0))
    return {"P1": p1, "P0": p0}


@pytest.fixture
def sample_ration():
    """Ration R1 shape: 20 lbs and $4 per head per day."""
    return Ration(
        name="Grower R1",
        stage=RationStage.GROWING,
        ingredients=[
            RationIngredient(feed_id="corn", feed_name="Corn", amount_lbs=12.0, percentage=60.0, cost_per_lb=0.2),
            RationIngredient(feed_id="hay", feed_name="Hay", amount_lbs=8.0, percentage=40.0, cost_per_lb=0.2),
        ],
        total_lbs_per_head=20.0,
        cost_per_head=4.0,
    )


@pytest.fixture
def rations(services, sample_ration):
    r1 = services.catalog.add(sample_ration)
    r2 = services.catalog.add(
        Ration(name="Finisher R2", stage=RationStage.FINISHING, total_lbs_per_head=24.0, cost_per_head=5.5)
    )
    return {"R1": r1, "R2": r2}
