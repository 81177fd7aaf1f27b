from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from gradetrack.schemas.assignment import Timestamp


class SubmissionStatus(str, Enum):
    SUBMITTED = "submitted"
    LATE = "late"
    GRADED = "graded"


class SubmissionCreate(BaseModel):
    assignment_id: str = Field(min_length=1)
    student_id: str = Field(min_length=1)
    student_name: str
    file_name: str = Field(min_length=1)
    file_url: str


class Submission(BaseModel):
    id: str
    assignment_id: str
    student_id: str
    student_name: str
    file_name: str
    file_url: str
    submitted_at: Timestamp
    status: SubmissionStatus
    grade: Optional[int] = None
    feedback: Optional[str] = None

    class Config:
        frozen = True

    @model_validator(mode="after")
    def _grade_only_when_graded(self):
        graded = self.status == SubmissionStatus.GRADED
        if graded != (self.grade is not None):
            raise ValueError("grade must be present exactly when status is graded")
        return self

    @property
    def is_pending(self) -> bool:
        return self.status in (SubmissionStatus.SUBMITTED, SubmissionStatus.LATE)


class SubmissionGradeUpdate(BaseModel):
    grade: int
    feedback: str = ""
