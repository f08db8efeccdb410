import os
import tempfile

# Settings are read at import time, so the environment goes first
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="changelog-logs-"))
os.environ.setdefault("SEED_RESERVED_STATUSES", "False")

import pytest
import pytest_asyncio
from sqlalchemy import event
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from changelog_api.db.models import Base
from changelog_api.schemas.theme import ThemeCategory, ThemeManifest
from changelog_api.services.status_service import StatusService


@pytest_asyncio.fixture
async def db():
    """Fresh in-memory SQLite database per test"""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, autoflush=False, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    await engine.dispose()


@pytest.fixture
def manifest():
    return ThemeManifest(
        id="default",
        name="Default",
        version="1.0.0",
        categories=[
            ThemeCategory(id="feedback", label="Feedback", description="User ideas", order=0),
            ThemeCategory(id="proposed", label="Proposed", description="Open to votes", order=1),
            ThemeCategory(id="upcoming", label="Upcoming releases", description="In progress", order=2),
            ThemeCategory(id="released", label="Released", description="Shipped", order=3, multiple=False),
        ],
    )


@pytest_asyncio.fixture
async def board(db):
    """Backlogs(reserved), Proposed, Release, Archived(reserved) with orders 0..3

    Returned as a name -> id dict so tests never touch expired instances.
    """
    statuses = [
        await StatusService.create(db, "Backlogs", is_reserved=True),
        await StatusService.create(db, "Proposed"),
        await StatusService.create(db, "Release"),
        await StatusService.create(db, "Archived", is_reserved=True),
    ]
    return {status.display_name: status.id for status in statuses}
