import logging
import re
import shutil
import uuid
from pathlib import Path
from typing import BinaryIO, Protocol

from gradetrack.core.exceptions import NotFound

logger = logging.getLogger(__name__)

URL_PREFIX = "/files"
TOKEN_PATTERN = re.compile(r"[0-9a-f]{32}")


class FileStore(Protocol):
    def store(self, file_name: str, content: BinaryIO) -> str: ...

    def resolve(self, reference: str) -> Path: ...


class LocalFileStore:
    """Keeps uploads on disk as ``<root>/<token>/<file name>``."""

    def __init__(self, root: Path):
        self.root = Path(root)

    def store(self, file_name: str, content: BinaryIO) -> str:
        token = uuid.uuid4().hex
        name = Path(file_name).name or "upload"
        target = self.root / token / name
        target.parent.mkdir(parents=True, exist_ok=True)
        with target.open("wb") as out:
            shutil.copyfileobj(content, out)
        logger.info("stored %s (%d bytes)", target, target.stat().st_size)
        return f"{URL_PREFIX}/{token}/{name}"

    def resolve(self, reference: str) -> Path:
        prefix = URL_PREFIX + "/"
        if not reference.startswith(prefix):
            raise NotFound(f"File {reference} not found")
        token, _, name = reference[len(prefix):].partition("/")
        if not TOKEN_PATTERN.fullmatch(token) or not name or Path(name).name != name:
            raise NotFound(f"File {reference} not found")

        path = (self.root / token / name).resolve()
        # the resolved path must stay inside the upload root
        if not path.is_relative_to(self.root.resolve()) or not path.is_file():
            raise NotFound(f"File {reference} not found")
        return path
