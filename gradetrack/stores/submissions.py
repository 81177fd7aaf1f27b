import logging
from typing import List, Union

from gradetrack.core.clock import Clock, as_utc, utc_now
from gradetrack.core.config import MAX_GRADE, MIN_GRADE, SUBMISSIONS_KEY
from gradetrack.core.exceptions import InvalidGrade, NotFound
from gradetrack.schemas.submission import Submission, SubmissionCreate, SubmissionStatus
from gradetrack.stores.assignments import AssignmentStore
from gradetrack.stores.base import IdFactory, RecordStore, random_id, validate_input
from gradetrack.stores.durability import KeyValueStore
from gradetrack.stores.events import ChangeKind

logger = logging.getLogger(__name__)


class SubmissionStore(RecordStore[Submission]):
    record_type = Submission

    def __init__(
        self,
        durability: KeyValueStore,
        assignments: AssignmentStore,
        clock: Clock = utc_now,
        id_factory: IdFactory = random_id,
        key: str = SUBMISSIONS_KEY,
    ):
        super().__init__(durability, key, clock=clock, id_factory=id_factory)
        self._assignments = assignments

    def create(self, data: Union[SubmissionCreate, dict]) -> Submission:
        payload = validate_input(SubmissionCreate, data)
        assignment = self._assignments.get_by_id(payload.assignment_id)
        if assignment is None:
            raise NotFound(f"Assignment {payload.assignment_id} not found")

        now = as_utc(self._clock())
        status = SubmissionStatus.LATE if now > assignment.deadline else SubmissionStatus.SUBMITTED

        # resubmission appends a new record; the old one is kept
        submission = Submission(
            id=self._new_id(),
            submitted_at=now,
            status=status,
            **payload.model_dump(),
        )
        self._records.append(submission)
        self._persist()
        logger.info(
            "submission %s for assignment %s by %s (%s)",
            submission.id,
            submission.assignment_id,
            submission.student_id,
            status.value,
        )
        self._notify(ChangeKind.SUBMISSION_CREATED, submission.id)
        return submission

    def grade(self, submission_id: str, grade: int, feedback: str) -> Submission:
        i = self._index_of(submission_id)
        if i is None:
            raise NotFound(f"Submission {submission_id} not found")

        if isinstance(grade, bool) or not isinstance(grade, int):
            raise InvalidGrade(f"grade must be an integer, got {grade!r}")
        if grade < MIN_GRADE or grade > MAX_GRADE:
            raise InvalidGrade(f"grade must be between {MIN_GRADE} and {MAX_GRADE}")

        graded = self._records[i].model_copy(
            update={"grade": grade, "feedback": feedback, "status": SubmissionStatus.GRADED}
        )
        self._records[i] = graded
        self._persist()
        logger.info("submission %s graded %d", submission_id, grade)
        self._notify(ChangeKind.SUBMISSION_GRADED, submission_id)
        return graded

    def delete_by_assignment(self, assignment_id: str) -> None:
        kept = [s for s in self._records if s.assignment_id != assignment_id]
        removed = len(self._records) - len(kept)
        if not removed:
            return

        self._records = kept
        self._persist()
        logger.info("removed %d submission(s) of assignment %s", removed, assignment_id)
        self._notify(ChangeKind.SUBMISSIONS_DELETED, assignment_id)

    def list_by_assignment(self, assignment_id: str) -> List[Submission]:
        return [s for s in self._records if s.assignment_id == assignment_id]

    def list_by_student(self, student_id: str) -> List[Submission]:
        return [s for s in self._records if s.student_id == student_id]
