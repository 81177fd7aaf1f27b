from datetime import datetime, timezone

import pytest

from gradetrack.core.exceptions import InvalidInput, NotFound
from gradetrack.schemas.assignment import AssignmentCreate, AssignmentUpdate
from gradetrack.stores.assignments import AssignmentStore
from gradetrack.stores.durability import MemoryKeyValueStore
from gradetrack.stores.events import ChangeKind
from tests.conftest import at


def test_create_sets_id_and_created_at(tracker, clock):
    a = tracker.assignments.create(
        AssignmentCreate(
            title="Science Lab Report",
            description="Write a lab report",
            deadline="2024-08-20",
            instructor_id="instructor1",
        )
    )

    assert a.id == "id1"
    assert a.created_at == clock.now
    assert a.deadline == datetime(2024, 8, 20, tzinfo=timezone.utc)
    assert tracker.assignments.get_by_id(a.id) == a
    assert tracker.assignments.list() == [a]


def test_create_strips_and_rejects_blank_text(tracker):
    a = tracker.assignments.create(
        {"title": "  HW1 ", "description": "read", "deadline": at(2024, 9, 1), "instructor_id": "i1"}
    )
    assert a.title == "HW1"

    with pytest.raises(InvalidInput):
        tracker.assignments.create(
            {"title": "   ", "description": "read", "deadline": "2024-09-01", "instructor_id": "i1"}
        )
    with pytest.raises(InvalidInput):
        tracker.assignments.create({"title": "HW2", "deadline": "2024-09-01", "instructor_id": "i1"})

    assert len(tracker.assignments.list()) == 1


def test_list_keeps_insertion_order(tracker, clock):
    first = tracker.assignments.create(
        {"title": "A", "description": "a", "deadline": "2024-09-01", "instructor_id": "i1"}
    )
    clock.now = at(2024, 8, 2)
    second = tracker.assignments.create(
        {"title": "B", "description": "b", "deadline": "2024-08-20", "instructor_id": "i1"}
    )

    assert [a.id for a in tracker.assignments.list()] == [first.id, second.id]


def test_naive_deadline_is_treated_as_utc(tracker):
    a = tracker.assignments.create(
        {"title": "A", "description": "a", "deadline": datetime(2024, 9, 1, 17, 30), "instructor_id": "i1"}
    )
    assert a.deadline == datetime(2024, 9, 1, 17, 30, tzinfo=timezone.utc)


def test_update_merges_fields(tracker, assignment):
    updated = tracker.assignments.update(
        assignment.id, AssignmentUpdate(title="Math Assignment 1 (revised)", deadline="2024-08-18")
    )

    assert updated.title == "Math Assignment 1 (revised)"
    assert updated.description == assignment.description
    assert updated.deadline == datetime(2024, 8, 18, tzinfo=timezone.utc)
    assert updated.id == assignment.id
    assert updated.created_at == assignment.created_at
    assert tracker.assignments.get_by_id(assignment.id) == updated


def test_update_rejects_read_only_fields(tracker, assignment):
    for field, value in (("id", "other"), ("instructor_id", "someone"), ("created_at", "2020-01-01")):
        with pytest.raises(InvalidInput):
            tracker.assignments.update(assignment.id, {field: value})

    assert tracker.assignments.get_by_id(assignment.id) == assignment


def test_update_rejects_blank_title(tracker, assignment):
    with pytest.raises(InvalidInput):
        tracker.assignments.update(assignment.id, {"title": "  "})
    assert tracker.assignments.get_by_id(assignment.id) == assignment


def test_update_unknown_id_raises_not_found(tracker):
    with pytest.raises(NotFound):
        tracker.assignments.update("missing", {"title": "x"})


def test_delete_is_idempotent(tracker, assignment):
    tracker.assignments.delete(assignment.id)
    tracker.assignments.delete(assignment.id)
    tracker.assignments.delete("never-existed")

    assert tracker.assignments.get_by_id(assignment.id) is None
    assert tracker.assignments.list() == []


def test_ids_are_never_reused():
    ids = iter(["a1", "a1", "a2"])
    store = AssignmentStore(MemoryKeyValueStore(), id_factory=lambda: next(ids))
    data = {"title": "A", "description": "a", "deadline": "2024-09-01", "instructor_id": "i1"}

    first = store.create(data)
    store.delete(first.id)
    second = store.create(data)

    assert first.id == "a1"
    assert second.id == "a2"


def test_change_events(tracker, assignment):
    events = []
    unsubscribe = tracker.assignments.subscribe(events.append)

    tracker.assignments.update(assignment.id, {"description": "new"})
    tracker.assignments.delete(assignment.id)
    tracker.assignments.delete(assignment.id)

    assert [(e.kind, e.record_id) for e in events] == [
        (ChangeKind.ASSIGNMENT_UPDATED, assignment.id),
        (ChangeKind.ASSIGNMENT_DELETED, assignment.id),
    ]

    unsubscribe()
    tracker.assignments.create(
        {"title": "B", "description": "b", "deadline": "2024-09-01", "instructor_id": "i1"}
    )
    assert len(events) == 2


def test_update_rejects_explicit_nulls(tracker, assignment):
    events = []
    tracker.assignments.subscribe(events.append)

    for field in ("title", "description", "deadline"):
        with pytest.raises(InvalidInput):
            tracker.assignments.update(assignment.id, {field: None})

    assert tracker.assignments.get_by_id(assignment.id) == assignment
    assert events == []


def test_empty_edit_is_a_no_op(tracker, assignment, durability):
    events = []
    tracker.assignments.subscribe(events.append)
    saved = durability.load("assignments")

    result = tracker.assignments.update(assignment.id, AssignmentUpdate())

    assert result == assignment
    assert events == []
    assert durability.load("assignments") == saved
