import pytest

from gradetrack.core.exceptions import InvalidGrade, InvalidInput, NotFound
from gradetrack.schemas.submission import SubmissionCreate, SubmissionStatus
from gradetrack.stores.assignments import AssignmentStore
from gradetrack.stores.durability import MemoryKeyValueStore
from gradetrack.stores.events import ChangeKind
from gradetrack.stores.submissions import SubmissionStore
from tests.conftest import FixedClock, at, sequential_ids


def submit(tracker, assignment_id: str, student_id: str = "student1", file_name: str = "work.pdf"):
    return tracker.submissions.create(
        SubmissionCreate(
            assignment_id=assignment_id,
            student_id=student_id,
            student_name="John Doe",
            file_name=file_name,
            file_url=f"/files/x/{file_name}",
        )
    )


def test_on_time_submission_is_submitted(tracker, assignment, clock):
    clock.now = at(2024, 8, 14)
    sub = submit(tracker, assignment.id)

    assert sub.status == SubmissionStatus.SUBMITTED
    assert sub.submitted_at == clock.now
    assert sub.grade is None and sub.feedback is None
    assert tracker.submissions.list_by_assignment(assignment.id) == [sub]


def test_submission_exactly_at_deadline_is_not_late(tracker, assignment, clock):
    clock.now = assignment.deadline
    assert submit(tracker, assignment.id).status == SubmissionStatus.SUBMITTED


def test_submission_after_deadline_is_late(tracker, assignment, clock):
    clock.now = at(2024, 8, 15, hour=0, minute=1)
    assert submit(tracker, assignment.id).status == SubmissionStatus.LATE


def test_resubmission_appends_a_second_record():
    clock = FixedClock(at(2024, 8, 1))
    assignments = AssignmentStore(MemoryKeyValueStore(), clock=clock, id_factory=lambda: "a1")
    submissions = SubmissionStore(
        MemoryKeyValueStore(), assignments, clock=clock, id_factory=sequential_ids("s")
    )
    a1 = assignments.create(
        {"title": "Math", "description": "ch. 3", "deadline": "2024-08-15", "instructor_id": "instructor1"}
    )
    data = {
        "assignment_id": "a1",
        "student_id": "student1",
        "student_name": "John Doe",
        "file_name": "math.pdf",
        "file_url": "#",
    }

    clock.now = at(2024, 8, 14)
    first = submissions.create(data)
    clock.now = at(2024, 8, 16)
    second = submissions.create(data)

    assert a1.id == "a1"
    assert first.status == SubmissionStatus.SUBMITTED
    assert second.status == SubmissionStatus.LATE
    assert first.id != second.id
    assert submissions.list_by_assignment("a1") == [first, second]
    assert submissions.list_by_student("student1") == [first, second]


def test_create_for_unknown_assignment_raises_not_found(tracker):
    with pytest.raises(NotFound):
        submit(tracker, "missing")
    assert tracker.submissions.list() == []


def test_create_rejects_missing_fields(tracker, assignment):
    with pytest.raises(InvalidInput):
        tracker.submissions.create({"assignment_id": assignment.id, "student_id": "student1"})


def test_grade_late_submission(tracker, assignment, clock):
    clock.now = at(2024, 8, 16)
    sub = submit(tracker, assignment.id)
    assert sub.status == SubmissionStatus.LATE

    graded = tracker.submissions.grade(sub.id, 85, "Good work")

    assert graded.status == SubmissionStatus.GRADED
    assert graded.grade == 85
    assert graded.feedback == "Good work"
    assert graded.submitted_at == sub.submitted_at
    assert tracker.submissions.get_by_id(sub.id) == graded


@pytest.mark.parametrize("grade", [0, 100])
def test_grade_accepts_bounds(tracker, assignment, grade):
    sub = submit(tracker, assignment.id)
    assert tracker.submissions.grade(sub.id, grade, "ok").grade == grade


@pytest.mark.parametrize("grade", [-1, 101, 85.5, True])
def test_invalid_grade_leaves_submission_unchanged(tracker, assignment, grade):
    sub = submit(tracker, assignment.id)

    with pytest.raises(InvalidGrade):
        tracker.submissions.grade(sub.id, grade, "x")

    assert tracker.submissions.get_by_id(sub.id) == sub


def test_regrade_overwrites(tracker, assignment):
    sub = submit(tracker, assignment.id)
    tracker.submissions.grade(sub.id, 60, "Needs work")
    regraded = tracker.submissions.grade(sub.id, 75, "Better after review")

    assert regraded.status == SubmissionStatus.GRADED
    assert (regraded.grade, regraded.feedback) == (75, "Better after review")


def test_grade_unknown_submission_raises_not_found(tracker):
    with pytest.raises(NotFound):
        tracker.submissions.grade("missing", 50, "x")


def test_delete_assignment_cascades(tracker, assignment):
    other = tracker.assignments.create(
        {"title": "Lab", "description": "report", "deadline": "2024-08-20", "instructor_id": "instructor1"}
    )
    submit(tracker, assignment.id, "student1")
    submit(tracker, assignment.id, "student2")
    kept = submit(tracker, other.id, "student1")

    tracker.assignments.delete(assignment.id)

    assert tracker.submissions.list_by_assignment(assignment.id) == []
    assert tracker.submissions.list() == [kept]


def test_cascade_runs_before_observers_are_told(tracker, assignment):
    submit(tracker, assignment.id)
    seen = []

    def on_change(event):
        if event.kind == ChangeKind.ASSIGNMENT_DELETED:
            seen.append(len(tracker.submissions.list_by_assignment(event.record_id)))

    sub_events = []
    tracker.assignments.subscribe(on_change)
    tracker.submissions.subscribe(sub_events.append)

    tracker.assignments.delete(assignment.id)

    assert seen == [0]
    assert [(e.kind, e.record_id) for e in sub_events] == [(ChangeKind.SUBMISSIONS_DELETED, assignment.id)]


def test_delete_by_assignment_without_matches_is_silent(tracker, assignment):
    events = []
    tracker.submissions.subscribe(events.append)

    tracker.submissions.delete_by_assignment(assignment.id)

    assert events == []
