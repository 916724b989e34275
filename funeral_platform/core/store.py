"""
JSON document store

Each logical collection is one whole-file JSON document (an array or a map
keyed by tenant slug). Reads never raise: a missing, empty or corrupt file
yields the caller's fallback. Writes go through a temp file and os.replace so
readers never observe a half-written document.
"""

import copy
import json
import os
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, Union

import structlog

from funeral_platform.core.exceptions import StorageError

logger = structlog.get_logger(__name__)

Document = Union[list, dict]
PathLike = Union[str, Path]


class JsonStore:
    """Read/write whole JSON documents with per-path write serialization"""

    def __init__(self):
        self._locks: Dict[str, threading.RLock] = {}
        self._locks_guard = threading.Lock()

    def _lock_for(self, path: Path) -> threading.RLock:
        key = str(path.resolve())
        with self._locks_guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.RLock()
            return lock

    def read(self, path: PathLike, fallback: Document) -> Document:
        """Load a document, returning a copy of `fallback` on any failure"""
        path = Path(path)
        try:
            if not path.exists():
                return copy.deepcopy(fallback)
            raw = path.read_text(encoding="utf-8")
            if not raw.strip():
                return copy.deepcopy(fallback)
            document = json.loads(raw)
        except (OSError, ValueError) as e:
            logger.error(f"JSON load error for {path}: {e}")
            return copy.deepcopy(fallback)

        if not isinstance(document, type(fallback)):
            logger.error(
                "JSON document has unexpected shape",
                path=str(path),
                expected=type(fallback).__name__,
                found=type(document).__name__,
            )
            return copy.deepcopy(fallback)
        return document

    def write(self, path: PathLike, document: Document) -> None:
        """Atomically replace the document at `path`"""
        path = Path(path)
        with self._lock_for(path):
            tmp_name = None
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
                fd, tmp_name = tempfile.mkstemp(
                    dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
                )
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    json.dump(document, fh, indent=2, ensure_ascii=False)
                    fh.write("\n")
                os.replace(tmp_name, path)
            except (OSError, TypeError, ValueError) as e:
                logger.error(f"JSON save error for {path}: {e}")
                if tmp_name and os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise StorageError(str(path)) from e

    @contextmanager
    def transaction(self, path: PathLike, fallback: Document) -> Iterator[Document]:
        """
        Hold the path's lock across one read-modify-write cycle.

        The yielded document may be mutated in place; it is written back on
        normal exit only if it changed. An exception inside the block discards
        the changes.
        """
        path = Path(path)
        with self._lock_for(path):
            document = self.read(path, fallback)
            original = copy.deepcopy(document)
            yield document
            if document != original:
                self.write(path, document)


store = JsonStore()


def get_store() -> JsonStore:
    return store
