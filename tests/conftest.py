"""Shared test fixtures.

Provides storage adapters for both local backends, a ready-made tracker over
them, the three kinds of actors, and a FastAPI ``TestClient`` wired to a
throwaway SQLite file.
"""

from collections.abc import AsyncIterator, Generator, Iterator
from pathlib import Path

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from jobtracker.core.config import Settings
from jobtracker.db.base import StorageAdapter
from jobtracker.db.kv import KeyValueAdapter, MemoryKeyValueStore
from jobtracker.db.selector import selector
from jobtracker.db.sqlite import SqliteAdapter
from jobtracker.models.actor import Actor
from jobtracker.models.enums import Role
from jobtracker.services.tracker import Tracker


# ---------------------------------------------------------------------------
# Adapters
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture()
async def kv_adapter() -> AsyncIterator[KeyValueAdapter]:
    adapter = KeyValueAdapter(MemoryKeyValueStore())
    await adapter.initialize()
    yield adapter
    await adapter.close()


@pytest_asyncio.fixture()
async def sqlite_adapter(tmp_path: Path) -> AsyncIterator[SqliteAdapter]:
    adapter = SqliteAdapter(str(tmp_path / "tracker.db"))
    await adapter.initialize()
    yield adapter
    await adapter.close()


@pytest_asyncio.fixture(params=["sqlite", "kv"])
async def adapter(
    request: pytest.FixtureRequest, tmp_path: Path
) -> AsyncIterator[StorageAdapter]:
    """Each local backend in turn, initialized and empty."""
    if request.param == "sqlite":
        instance: StorageAdapter = SqliteAdapter(str(tmp_path / "tracker.db"))
    else:
        instance = KeyValueAdapter(MemoryKeyValueStore())
    await instance.initialize()
    yield instance
    await instance.close()


@pytest_asyncio.fixture()
async def tracker(adapter: StorageAdapter) -> AsyncIterator[Tracker]:
    """Rule layer over each local backend; drains history writes on teardown."""
    instance = Tracker(adapter)
    yield instance
    await instance.history.drain()


# ---------------------------------------------------------------------------
# Actors
# ---------------------------------------------------------------------------

@pytest.fixture()
def candidate() -> Actor:
    return Actor(id="cand-1", role=Role.candidate)


@pytest.fixture()
def other_candidate() -> Actor:
    return Actor(id="cand-2", role=Role.candidate)


@pytest.fixture()
def recruiter() -> Actor:
    return Actor(id="rec-1", role=Role.recruiter)


@pytest.fixture()
def other_recruiter() -> Actor:
    return Actor(id="rec-2", role=Role.recruiter)


@pytest.fixture()
def admin() -> Actor:
    return Actor(id="admin-1", role=Role.admin)


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------

@pytest.fixture()
def api_settings(tmp_path: Path) -> Iterator[Settings]:
    """Point the process-wide selector at a temporary SQLite file."""
    config = Settings(STORAGE_PLATFORM="native", SQLITE_PATH=str(tmp_path / "api.db"))
    previous = selector._config
    selector._config = config
    yield config
    selector._config = previous


@pytest.fixture()
def test_client(api_settings: Settings) -> Generator[TestClient, None, None]:
    """Provide a FastAPI TestClient; the lifespan opens and closes storage."""
    from jobtracker.main import app

    with TestClient(app) as client:
        yield client
