from fastapi import APIRouter, Depends, HTTPException, Response, status

from gradetrack.core.deps import get_current_user, get_tracker
from gradetrack.core.permissions import ensure_owner, require_instructor
from gradetrack.schemas.assignment import (
    Assignment,
    AssignmentCreate,
    AssignmentDetail,
    AssignmentDraft,
    AssignmentUpdate,
)
from gradetrack.schemas.stats import SubmissionStats
from gradetrack.schemas.user import Identity
from gradetrack.services.tracker import Tracker

router = APIRouter()


def _ensure_assignment_exists(tracker: Tracker, assignment_id: str) -> Assignment:
    a = tracker.assignments.get_by_id(assignment_id)
    if not a:
        raise HTTPException(status_code=404, detail="Assignment not found")
    return a


def _detail(tracker: Tracker, a: Assignment) -> AssignmentDetail:
    return AssignmentDetail(
        **a.model_dump(),
        is_overdue=tracker.rules.is_overdue(a.deadline),
        submission_allowed=tracker.rules.is_submission_allowed(a.id),
    )


@router.get("/assignments", response_model=list[AssignmentDetail])
def list_assignments(
    tracker: Tracker = Depends(get_tracker),
    current_user: Identity = Depends(get_current_user),
):
    # newest first for display; the store keeps insertion order
    assignments = sorted(tracker.assignments.list(), key=lambda a: a.created_at, reverse=True)
    return [_detail(tracker, a) for a in assignments]


@router.get("/assignments/{assignment_id}", response_model=AssignmentDetail)
def get_assignment(
    assignment_id: str,
    tracker: Tracker = Depends(get_tracker),
    current_user: Identity = Depends(get_current_user),
):
    return _detail(tracker, _ensure_assignment_exists(tracker, assignment_id))


@router.post(
    "/assignments",
    response_model=Assignment,
    status_code=status.HTTP_201_CREATED,
)
def create_assignment(
    payload: AssignmentDraft,
    tracker: Tracker = Depends(get_tracker),
    instructor: Identity = Depends(require_instructor),
):
    return tracker.assignments.create(
        AssignmentCreate(**payload.model_dump(), instructor_id=instructor.id)
    )


@router.patch("/assignments/{assignment_id}", response_model=Assignment)
def update_assignment(
    assignment_id: str,
    payload: AssignmentUpdate,
    tracker: Tracker = Depends(get_tracker),
    instructor: Identity = Depends(require_instructor),
):
    ensure_owner(_ensure_assignment_exists(tracker, assignment_id), instructor)
    return tracker.assignments.update(assignment_id, payload)


@router.delete("/assignments/{assignment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_assignment(
    assignment_id: str,
    tracker: Tracker = Depends(get_tracker),
    instructor: Identity = Depends(require_instructor),
):
    a = tracker.assignments.get_by_id(assignment_id)
    # deleting something already gone is not an error
    if a is not None:
        ensure_owner(a, instructor)
        tracker.assignments.delete(assignment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/assignments/{assignment_id}/stats", response_model=SubmissionStats)
def assignment_stats(
    assignment_id: str,
    tracker: Tracker = Depends(get_tracker),
    instructor: Identity = Depends(require_instructor),
):
    ensure_owner(_ensure_assignment_exists(tracker, assignment_id), instructor)
    return tracker.rules.submission_stats(assignment_id)
