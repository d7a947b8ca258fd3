import os
import sys
from pathlib import Path

import pytest

# Ensure project root is on sys.path for `import feedcache`
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Force a throwaway SQLite database for tests
test_db_path = ROOT / "test_run.db"
if test_db_path.exists():
    test_db_path.unlink()

os.environ.setdefault("DATABASE_URL", f"sqlite:///{test_db_path}")
os.environ.setdefault("AUTO_CREATE_TABLES", "1")

# Create tables if needed
from feedcache.db.database import engine, Base, SessionLocal
from feedcache.models.models import Option  # noqa: F401 ensures models are registered
from feedcache.cache.exceptions import StorageUnavailable
from feedcache.tiers.base import StorageTier

Base.metadata.create_all(bind=engine)


class FakeClock:
    """Manually advanced epoch-seconds clock."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FailingTier(StorageTier):
    """Tier whose backend is always down."""
    key_prefix = "failing_"

    def __init__(self, name: str = "failing"):
        self.name = name
        self.calls = []

    def read(self, storage_key):
        self.calls.append(("read", storage_key))
        raise StorageUnavailable(self.name, "backend down")

    def write(self, storage_key, entry):
        self.calls.append(("write", storage_key))
        raise StorageUnavailable(self.name, "backend down")

    def remove(self, storage_key):
        self.calls.append(("remove", storage_key))
        raise StorageUnavailable(self.name, "backend down")


@pytest.fixture(autouse=True)
def clean_options():
    """Every test starts with an empty options table."""
    with SessionLocal() as db:
        db.query(Option).delete()
        db.commit()
    yield


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def session_factory():
    return SessionLocal
