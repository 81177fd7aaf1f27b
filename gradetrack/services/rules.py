from datetime import datetime
from typing import List, Optional

from gradetrack.core.clock import Clock, as_utc, utc_now
from gradetrack.schemas.stats import StudentSummary, SubmissionStats
from gradetrack.schemas.submission import Submission, SubmissionStatus
from gradetrack.stores.assignments import AssignmentStore
from gradetrack.stores.submissions import SubmissionStore

NOT_SUBMITTED = "not_submitted"


class RulesEngine:
    """Read-only eligibility and status derivations over the two stores.

    Nothing is cached: each call looks at the current records. Time-dependent
    queries accept ``now`` so callers can pin the clock; otherwise the injected
    clock is sampled.
    """

    def __init__(self, assignments: AssignmentStore, submissions: SubmissionStore, clock: Clock = utc_now):
        self._assignments = assignments
        self._submissions = submissions
        self._clock = clock

    def _now(self, now: Optional[datetime]) -> datetime:
        return as_utc(now if now is not None else self._clock())

    def is_overdue(self, deadline: datetime, now: Optional[datetime] = None) -> bool:
        return self._now(now) > as_utc(deadline)

    def is_submission_allowed(self, assignment_id: str, now: Optional[datetime] = None) -> bool:
        assignment = self._assignments.get_by_id(assignment_id)
        if assignment is None:
            return False
        return not self.is_overdue(assignment.deadline, now)

    def has_student_submitted(self, assignment_id: str, student_id: str) -> bool:
        return any(s.student_id == student_id for s in self._submissions.list_by_assignment(assignment_id))

    def submission_stats(self, assignment_id: str) -> SubmissionStats:
        subs = self._submissions.list_by_assignment(assignment_id)
        return SubmissionStats(
            total=len(subs),
            graded=sum(1 for s in subs if s.status == SubmissionStatus.GRADED),
            pending=sum(1 for s in subs if s.is_pending),
        )

    def latest_submission(self, assignment_id: str, student_id: str) -> Optional[Submission]:
        latest = None
        for s in self._submissions.list_by_assignment(assignment_id):
            # >= so that a later record wins a timestamp tie
            if s.student_id == student_id and (latest is None or s.submitted_at >= latest.submitted_at):
                latest = s
        return latest

    def student_status(self, assignment_id: str, student_id: str) -> str:
        latest = self.latest_submission(assignment_id, student_id)
        return NOT_SUBMITTED if latest is None else latest.status.value

    def pending_reviews(self, instructor_id: Optional[str] = None) -> List[Submission]:
        if instructor_id is None:
            return [s for s in self._submissions.list() if s.is_pending]
        owned = {a.id for a in self._assignments.list() if a.instructor_id == instructor_id}
        return [s for s in self._submissions.list() if s.is_pending and s.assignment_id in owned]

    def student_summary(self, student_id: str) -> StudentSummary:
        subs = self._submissions.list_by_student(student_id)
        grades = [s.grade for s in subs if s.grade is not None]
        return StudentSummary(
            total=len(subs),
            graded=sum(1 for s in subs if s.status == SubmissionStatus.GRADED),
            submitted=sum(1 for s in subs if s.status == SubmissionStatus.SUBMITTED),
            late=sum(1 for s in subs if s.status == SubmissionStatus.LATE),
            average_grade=round(sum(grades) / len(grades), 2) if grades else None,
        )
