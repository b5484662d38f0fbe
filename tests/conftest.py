import os
import sys

import pytest

ROOT = os.path.join(os.path.dirname(__file__), "..")

# Add backend and the core library to path for imports
sys.path.append(os.path.join(ROOT, "backend"))
sys.path.append(os.path.join(ROOT, "libs", "gift_core"))

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("NOTIFICATIONS_ENABLED", "false")

from fakeredis import FakeRedis
from rq import Queue
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from app.core.notifications import MatchNotifier
from app.core.store import SQLDocumentStore
from app.models.document import Document  # noqa: F401
from app.schemas.group import GroupCreate, Occasion
from app.services.group_service import GroupService


@pytest.fixture
def engine():
    """Create an in-memory SQLite engine shared across sessions."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    return engine


@pytest.fixture
def db_session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def store(db_session):
    return SQLDocumentStore(db_session)


@pytest.fixture
def queue():
    return Queue("notifications", connection=FakeRedis())


@pytest.fixture
def notifier(queue):
    return MatchNotifier(queue)


@pytest.fixture
def service(store, notifier):
    return GroupService(store, notifier, max_members=5, max_owned_groups=3)


@pytest.fixture
def group_data():
    return GroupCreate(
        name="Office Party",
        description="Secret gifts for the team",
        occasion=Occasion.CHRISTMAS,
        budget="$25-$50",
    )
