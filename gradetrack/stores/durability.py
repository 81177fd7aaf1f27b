"""
Key-value durability layer the stores persist through.

The stores only ever call ``load`` and ``save`` with one of the fixed blob keys;
how the bytes are kept is up to the implementation.
"""
import logging
from datetime import datetime, timezone
from typing import Dict, Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from gradetrack.core.exceptions import DurabilityError
from gradetrack.models.blob import StoredBlob

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Durability backend the stores write through.

    Implementations must raise ``DurabilityError`` for any backend failure
    (connection, disk, driver errors); the stores treat that as a non-fatal
    save failure. Any other exception is a programming error and propagates.
    """

    def load(self, key: str) -> Optional[bytes]: ...

    def save(self, key: str, value: bytes) -> None: ...


class MemoryKeyValueStore:
    def __init__(self, initial: Optional[Dict[str, bytes]] = None):
        self._data: Dict[str, bytes] = dict(initial or {})

    def load(self, key: str) -> Optional[bytes]:
        return self._data.get(key)

    def save(self, key: str, value: bytes) -> None:
        self._data[key] = bytes(value)


class SqlKeyValueStore:
    """Blobs kept one row per key in the ``stored_blobs`` table."""

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def load(self, key: str) -> Optional[bytes]:
        db: Session = self._session_factory()
        try:
            row = db.query(StoredBlob).filter(StoredBlob.key == key).first()
            return row.value if row else None
        except SQLAlchemyError as exc:
            raise DurabilityError(f"could not load {key!r}: {exc}") from exc
        finally:
            db.close()

    def save(self, key: str, value: bytes) -> None:
        db: Session = self._session_factory()
        try:
            row = db.query(StoredBlob).filter(StoredBlob.key == key).first()
            if row is None:
                row = StoredBlob(key=key)
                db.add(row)
            row.value = value
            row.updated_at = datetime.now(timezone.utc)
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            raise DurabilityError(f"could not save {key!r}: {exc}") from exc
        finally:
            db.close()
        logger.debug("saved %s (%d bytes)", key, len(value))
