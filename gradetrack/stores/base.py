import logging
import uuid
from typing import Callable, Generic, List, Optional, Set, Type, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from gradetrack.core.clock import Clock, utc_now
from gradetrack.core.exceptions import DurabilityError, InvalidInput
from gradetrack.stores.durability import KeyValueStore
from gradetrack.stores.events import ChangeNotifier

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)
ModelT = TypeVar("ModelT", bound=BaseModel)

IdFactory = Callable[[], str]


def random_id() -> str:
    return uuid.uuid4().hex[:12]


def validate_input(model: Type[ModelT], data) -> ModelT:
    """Coerce caller data into ``model``, turning validation failures into InvalidInput."""
    if isinstance(data, model):
        return data
    try:
        if isinstance(data, BaseModel):
            data = data.model_dump(exclude_unset=True)
        return model.model_validate(data)
    except ValidationError as exc:
        raise InvalidInput(f"invalid {model.__name__}: {exc.errors(include_url=False)}") from exc


class RecordStore(ChangeNotifier, Generic[RecordT]):
    """Ordered in-memory collection of immutable records, saved as one blob.

    The whole collection is loaded once at construction and written back after
    every mutation. A failed write is logged and the in-memory state is kept.
    """

    record_type: Type[RecordT]

    def __init__(
        self,
        durability: KeyValueStore,
        key: str,
        clock: Clock = utc_now,
        id_factory: IdFactory = random_id,
    ):
        super().__init__()
        self._durability = durability
        self._key = key
        self._clock = clock
        self._id_factory = id_factory
        self._adapter = TypeAdapter(List[self.record_type])
        self._records: List[RecordT] = self._load()
        self._issued_ids: Set[str] = {r.id for r in self._records}

    def _load(self) -> List[RecordT]:
        blob = self._durability.load(self._key)
        if blob is None:
            return []
        try:
            records = self._adapter.validate_json(blob)
        except ValidationError as exc:
            raise DurabilityError(f"stored {self._key!r} blob is corrupt: {exc}") from exc
        logger.info("loaded %d %s", len(records), self._key)
        return records

    def _persist(self) -> None:
        # backends report their failures as DurabilityError, see KeyValueStore
        try:
            self._durability.save(self._key, self._adapter.dump_json(self._records))
        except (DurabilityError, OSError) as exc:
            logger.warning("could not persist %s, keeping in-memory state: %s", self._key, exc)

    def _new_id(self) -> str:
        new_id = self._id_factory()
        while new_id in self._issued_ids:
            new_id = self._id_factory()
        self._issued_ids.add(new_id)
        return new_id

    def _index_of(self, record_id: str) -> Optional[int]:
        for i, record in enumerate(self._records):
            if record.id == record_id:
                return i
        return None

    def get_by_id(self, record_id: str) -> Optional[RecordT]:
        i = self._index_of(record_id)
        return None if i is None else self._records[i]

    def list(self) -> List[RecordT]:
        return list(self._records)

    def serialize(self) -> bytes:
        return self._adapter.dump_json(self._records)
