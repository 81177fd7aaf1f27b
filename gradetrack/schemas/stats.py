from typing import Optional

from pydantic import BaseModel

from gradetrack.schemas.assignment import Assignment
from gradetrack.schemas.submission import Submission


class SubmissionStats(BaseModel):
    total: int
    graded: int
    pending: int


class StudentSummary(BaseModel):
    total: int
    graded: int
    submitted: int
    late: int
    average_grade: Optional[float] = None


class InstructorAssignmentRow(BaseModel):
    assignment: Assignment
    is_overdue: bool
    stats: SubmissionStats


class StudentDashboardRow(BaseModel):
    assignment: Assignment
    status: str  # "not_submitted" | "submitted" | "late" | "graded"
    grade: Optional[int] = None
    is_overdue: bool = False
    submission_allowed: bool = False
    already_submitted: bool = False
    latest_submission: Optional[Submission] = None
