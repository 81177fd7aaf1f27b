import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List

logger = logging.getLogger(__name__)


class ChangeKind(str, Enum):
    ASSIGNMENT_CREATED = "assignment_created"
    ASSIGNMENT_UPDATED = "assignment_updated"
    ASSIGNMENT_DELETED = "assignment_deleted"
    SUBMISSION_CREATED = "submission_created"
    SUBMISSION_GRADED = "submission_graded"
    SUBMISSIONS_DELETED = "submissions_deleted"


@dataclass(frozen=True)
class ChangeEvent:
    kind: ChangeKind
    record_id: str


Listener = Callable[[ChangeEvent], None]


class ChangeNotifier:
    """Synchronous observer list shared by the stores.

    Listeners run in subscription order, after the mutation is complete and
    persisted, so they always see the new state.
    """

    def __init__(self):
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, kind: ChangeKind, record_id: str) -> None:
        event = ChangeEvent(kind=kind, record_id=record_id)
        logger.debug("change %s %s -> %d listener(s)", kind.value, record_id, len(self._listeners))
        for listener in list(self._listeners):
            listener(event)
