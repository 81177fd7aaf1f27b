from datetime import date, datetime, time, timezone
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, BeforeValidator, Field, model_validator

from gradetrack.core.clock import as_utc


def _coerce_deadline(value):
    # a bare calendar day means the start of that day in UTC
    if isinstance(value, str) and len(value) == 10:
        value = date.fromisoformat(value)
    if isinstance(value, date) and not isinstance(value, datetime):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    return value


Deadline = Annotated[datetime, BeforeValidator(_coerce_deadline), AfterValidator(as_utc)]
Timestamp = Annotated[datetime, AfterValidator(as_utc)]


class AssignmentDraft(BaseModel):
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    deadline: Deadline

    class Config:
        str_strip_whitespace = True


class AssignmentCreate(AssignmentDraft):
    instructor_id: str = Field(min_length=1)


class AssignmentUpdate(BaseModel):
    """Edit request for an existing assignment.

    Only title, description and deadline can change; anything else is rejected
    before the store is touched.
    """

    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = Field(default=None, min_length=1)
    deadline: Optional[Deadline] = None

    class Config:
        extra = "forbid"
        str_strip_whitespace = True

    @model_validator(mode="after")
    def _no_explicit_nulls(self):
        cleared = sorted(f for f in self.model_fields_set if getattr(self, f) is None)
        if cleared:
            raise ValueError(f"cannot clear {', '.join(cleared)}")
        return self

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class Assignment(BaseModel):
    id: str
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    deadline: Deadline
    instructor_id: str
    created_at: Timestamp

    class Config:
        frozen = True


class AssignmentDetail(Assignment):
    is_overdue: bool = False
    submission_allowed: bool = False
