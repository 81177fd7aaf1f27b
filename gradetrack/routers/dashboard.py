from fastapi import APIRouter, Depends

from gradetrack.core.deps import get_tracker
from gradetrack.core.permissions import require_instructor, require_student
from gradetrack.schemas.stats import InstructorAssignmentRow, StudentDashboardRow, StudentSummary
from gradetrack.schemas.submission import Submission
from gradetrack.schemas.user import Identity
from gradetrack.services.rules import NOT_SUBMITTED
from gradetrack.services.tracker import Tracker

router = APIRouter()


@router.get("/instructor/dashboard", response_model=list[InstructorAssignmentRow])
def instructor_dashboard(
    tracker: Tracker = Depends(get_tracker),
    me: Identity = Depends(require_instructor),
):
    rows: list[InstructorAssignmentRow] = []

    for assignment in tracker.assignments.list():
        if assignment.instructor_id != me.id:
            continue
        rows.append(
            InstructorAssignmentRow(
                assignment=assignment,
                is_overdue=tracker.rules.is_overdue(assignment.deadline),
                stats=tracker.rules.submission_stats(assignment.id),
            )
        )

    return rows


@router.get("/instructor/pending", response_model=list[Submission])
def pending_reviews(
    tracker: Tracker = Depends(get_tracker),
    me: Identity = Depends(require_instructor),
):
    return tracker.rules.pending_reviews(instructor_id=me.id)


@router.get("/students/me/dashboard", response_model=list[StudentDashboardRow])
def student_dashboard(
    active_only: bool = False,
    tracker: Tracker = Depends(get_tracker),
    me: Identity = Depends(require_student),
):
    """
    One row per assignment with the student's latest standing.

    ``active_only`` keeps the rows still needing attention: not yet submitted,
    or submitted and waiting for a grade.
    """
    rows: list[StudentDashboardRow] = []

    for assignment in tracker.assignments.list():
        latest = tracker.rules.latest_submission(assignment.id, me.id)
        status = NOT_SUBMITTED if latest is None else latest.status.value
        if active_only and status not in (NOT_SUBMITTED, "submitted"):
            continue
        rows.append(
            StudentDashboardRow(
                assignment=assignment,
                status=status,
                grade=latest.grade if latest else None,
                is_overdue=tracker.rules.is_overdue(assignment.deadline),
                submission_allowed=tracker.rules.is_submission_allowed(assignment.id),
                already_submitted=latest is not None,
                latest_submission=latest,
            )
        )

    return rows


@router.get("/students/me/summary", response_model=StudentSummary)
def student_summary(
    tracker: Tracker = Depends(get_tracker),
    me: Identity = Depends(require_student),
):
    return tracker.rules.student_summary(me.id)
