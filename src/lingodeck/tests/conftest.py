"""Test configuration."""
import os
import tempfile
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Callable

import pytest

# Set test environment before any imports
os.environ["ENV"] = "test"
os.environ.setdefault("DATA_DIR", tempfile.mkdtemp(prefix="lingodeck-test-"))
os.environ["GOOGLE_CLOUD_API_KEY"] = ""

# Import after environment setup
from lingodeck.config import ensure_directories
from lingodeck.services.keyvalue_store import FileKeyValueStorage, KeyValueProgressStore
from lingodeck.services.relational_store import RelationalProgressStore


class FakeClock:
    """Deterministic clock advancing one second per call."""

    def __init__(self, start: datetime = datetime(2024, 1, 1, 12, 0, tzinfo=UTC)):
        self.now = start

    def __call__(self) -> datetime:
        current = self.now
        self.now += timedelta(seconds=1)
        return current


@pytest.fixture(autouse=True)
def setup_test_environment():
    """Set up test environment before each test."""
    ensure_directories()
    yield


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def relational_store_factory(tmp_path: Path, clock: FakeClock) -> Callable[[], RelationalProgressStore]:
    """Stores sharing one SQLite file."""
    url = f"sqlite:///{tmp_path / 'progress.db'}"
    return lambda: RelationalProgressStore(url, clock=clock)


@pytest.fixture
def keyvalue_store_factory(tmp_path: Path, clock: FakeClock) -> Callable[[], KeyValueProgressStore]:
    """Stores sharing one key-value directory."""
    directory = tmp_path / "storage"
    return lambda: KeyValueProgressStore(FileKeyValueStorage(directory), clock=clock)


@pytest.fixture(params=["relational", "keyvalue"])
async def store(request, relational_store_factory, keyvalue_store_factory):
    """An opened progress store, once per backend."""
    factory = relational_store_factory if request.param == "relational" else keyvalue_store_factory
    progress_store = factory()
    await progress_store.open()
    await progress_store.ensure_schema()
    yield progress_store
    await progress_store.close()
