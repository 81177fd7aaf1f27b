import itertools
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from gradetrack.core.deps import get_tracker
from gradetrack.main import app
from gradetrack.services.files import LocalFileStore
from gradetrack.services.tracker import build_tracker
from gradetrack.stores.durability import MemoryKeyValueStore


def at(year: int, month: int, day: int, hour: int = 12, minute: int = 0) -> datetime:
    return datetime(year, month, day, hour, minute, tzinfo=timezone.utc)


class FixedClock:
    """Clock the tests move by hand."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def sequential_ids(prefix: str = "id"):
    counter = itertools.count(1)
    return lambda: f"{prefix}{next(counter)}"


@pytest.fixture()
def clock():
    return FixedClock(at(2024, 8, 1))


@pytest.fixture()
def durability():
    return MemoryKeyValueStore()


@pytest.fixture()
def tracker(durability, clock, tmp_path):
    return build_tracker(
        durability,
        files=LocalFileStore(tmp_path / "uploads"),
        clock=clock,
        id_factory=sequential_ids(),
    )


@pytest.fixture()
def assignment(tracker):
    """One assignment due 2024-08-15, owned by instructor1."""
    return tracker.assignments.create(
        {
            "title": "Math Assignment 1",
            "description": "Complete exercises 1-10 from chapter 3",
            "deadline": "2024-08-15",
            "instructor_id": "instructor1",
        }
    )


@pytest.fixture()
def client(tracker):
    """Test client that uses the test tracker via dependency override."""
    app.dependency_overrides[get_tracker] = lambda: tracker
    c = TestClient(app)
    yield c
    app.dependency_overrides.clear()
