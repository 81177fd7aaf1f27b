import logging
from typing import Callable, List, Union

from pydantic import ValidationError

from gradetrack.core.clock import Clock, utc_now
from gradetrack.core.config import ASSIGNMENTS_KEY
from gradetrack.core.exceptions import InvalidInput, NotFound
from gradetrack.schemas.assignment import Assignment, AssignmentCreate, AssignmentUpdate
from gradetrack.stores.base import IdFactory, RecordStore, random_id, validate_input
from gradetrack.stores.durability import KeyValueStore
from gradetrack.stores.events import ChangeKind

logger = logging.getLogger(__name__)

Cascade = Callable[[str], None]


class AssignmentStore(RecordStore[Assignment]):
    record_type = Assignment

    def __init__(
        self,
        durability: KeyValueStore,
        clock: Clock = utc_now,
        id_factory: IdFactory = random_id,
        key: str = ASSIGNMENTS_KEY,
    ):
        super().__init__(durability, key, clock=clock, id_factory=id_factory)
        self._cascades: List[Cascade] = []

    def on_delete(self, cascade: Cascade) -> None:
        """Register a callback run with the assignment id whenever one is deleted."""
        self._cascades.append(cascade)

    def create(self, data: Union[AssignmentCreate, dict]) -> Assignment:
        payload = validate_input(AssignmentCreate, data)
        assignment = Assignment(
            id=self._new_id(),
            created_at=self._clock(),
            **payload.model_dump(),
        )
        self._records.append(assignment)
        self._persist()
        logger.info("assignment %s created by %s", assignment.id, assignment.instructor_id)
        self._notify(ChangeKind.ASSIGNMENT_CREATED, assignment.id)
        return assignment

    def update(self, assignment_id: str, edit: Union[AssignmentUpdate, dict]) -> Assignment:
        changes = validate_input(AssignmentUpdate, edit).changes()
        i = self._index_of(assignment_id)
        if i is None:
            raise NotFound(f"Assignment {assignment_id} not found")

        current = self._records[i]
        if not changes:
            return current

        try:
            updated = Assignment.model_validate({**current.model_dump(), **changes})
        except ValidationError as exc:
            raise InvalidInput(f"invalid assignment edit: {exc.errors(include_url=False)}") from exc

        self._records[i] = updated
        self._persist()
        logger.info("assignment %s updated (%s)", assignment_id, ", ".join(sorted(changes)))
        self._notify(ChangeKind.ASSIGNMENT_UPDATED, assignment_id)
        return updated

    def delete(self, assignment_id: str) -> None:
        i = self._index_of(assignment_id)
        if i is None:
            logger.debug("delete of unknown assignment %s ignored", assignment_id)
            return

        del self._records[i]
        self._persist()
        for cascade in self._cascades:
            cascade(assignment_id)
        logger.info("assignment %s deleted", assignment_id)
        self._notify(ChangeKind.ASSIGNMENT_DELETED, assignment_id)
