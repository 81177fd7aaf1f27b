from dataclasses import dataclass
from typing import Optional

from gradetrack.core.clock import Clock, utc_now
from gradetrack.services.files import FileStore
from gradetrack.services.rules import RulesEngine
from gradetrack.stores.assignments import AssignmentStore
from gradetrack.stores.base import IdFactory, random_id
from gradetrack.stores.durability import KeyValueStore
from gradetrack.stores.submissions import SubmissionStore


@dataclass
class Tracker:
    assignments: AssignmentStore
    submissions: SubmissionStore
    rules: RulesEngine
    files: Optional[FileStore] = None


def build_tracker(
    durability: KeyValueStore,
    files: Optional[FileStore] = None,
    clock: Clock = utc_now,
    id_factory: IdFactory = random_id,
) -> Tracker:
    """Wire one set of stores for a session; consumers share these instances."""
    assignments = AssignmentStore(durability, clock=clock, id_factory=id_factory)
    submissions = SubmissionStore(durability, assignments, clock=clock, id_factory=id_factory)
    assignments.on_delete(submissions.delete_by_assignment)
    rules = RulesEngine(assignments, submissions, clock=clock)
    return Tracker(assignments=assignments, submissions=submissions, rules=rules, files=files)
