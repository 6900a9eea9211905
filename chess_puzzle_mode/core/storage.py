"""
Session storage for Chess Puzzle Mode.

Progress is kept in a small key/value backend. A candidate backend is probed
once when the store is created; if it fails the probe, an in-memory backend is
used instead for the lifetime of the store. Individual writes that fail on a
working backend fall back to an in-memory shadow copy so play can continue.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Protocol, Union

logger = logging.getLogger(__name__)

PROBE_KEY = "__puzzle-mode-test__"
UNAVAILABLE_ERROR = "Persistent storage unavailable; progress is kept in memory only"


class StorageError(Exception):
    """Raised by storage backends that cannot read or write their medium."""
    pass


class StorageBackend(Protocol):
    """Minimal durable key/value interface."""

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> bool: ...

    def remove(self, key: str) -> None: ...


class MemoryStorage:
    """In-process storage backend."""

    def __init__(self):
        self._items: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set(self, key: str, value: str) -> bool:
        self._items[key] = value
        return True

    def remove(self, key: str) -> None:
        self._items.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._items

    def __len__(self) -> int:
        return len(self._items)


class JsonFileStorage:
    """
    Durable storage backend holding every key in one JSON object file.

    Writes go to a temporary file in the same directory which then replaces
    the original, so a crash never leaves a half-written file behind.
    """

    def __init__(self, path: Union[Path, str]):
        """
        Initialize the file backend.

        Args:
            path: Location of the JSON file; parent directories are created
        """
        self.path = Path(path).expanduser()

    def _read_all(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except (OSError, ValueError) as e:
            raise StorageError(f"Cannot read session file {self.path}: {e}")
        if not isinstance(data, dict):
            raise StorageError(f"Session file {self.path} does not contain a JSON object")
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _write_all(self, items: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=".sessions-", suffix=".json", dir=self.path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(items, handle, indent=2, sort_keys=True)
            os.replace(tmp_name, self.path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def get(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> bool:
        items = self._read_all()
        items[key] = value
        self._write_all(items)
        return True

    def remove(self, key: str) -> None:
        items = self._read_all()
        if items.pop(key, None) is not None:
            self._write_all(items)


def probe_storage(backend: StorageBackend) -> bool:
    """
    Check whether a backend can round-trip a value.

    Writes, reads back and deletes a sentinel key. Any exception or mismatch
    marks the backend as unavailable.
    """
    try:
        if not backend.set(PROBE_KEY, PROBE_KEY):
            return False
        ok = backend.get(PROBE_KEY) == PROBE_KEY
        backend.remove(PROBE_KEY)
        return ok
    except Exception as e:
        logger.warning(f"Storage backend {type(backend).__name__} failed probe: {e}")
        return False


@dataclass(frozen=True)
class SaveResult:
    """Outcome of one write."""

    persisted: bool
    error: Optional[str] = None


class SessionStore:
    """
    JSON document store for puzzle sessions.

    The backend is chosen once, at construction: the given backend if it
    passes the probe, otherwise an in-memory one. Writes that raise on the
    chosen backend are kept in a memory shadow which takes precedence on
    reads until the next successful write of the same key.
    """

    def __init__(self, backend: Optional[StorageBackend] = None):
        """
        Initialize the session store.

        Args:
            backend: Candidate durable backend; None means memory only
        """
        self.available = backend is not None and probe_storage(backend)
        if self.available:
            self._backend: StorageBackend = backend
        else:
            if backend is not None:
                logger.warning("Falling back to in-memory session storage")
            self._backend = MemoryStorage()
        self._shadow = MemoryStorage()

    @property
    def fallback_mode(self) -> str:
        """Name of the storage currently backing the session."""
        return "durable" if self.available else "memory"

    def load(self, key: str) -> Optional[Dict[str, Any]]:
        """Read and decode the document stored under key, or None."""
        try:
            raw = self._shadow.get(key)
            if raw is None:
                raw = self._backend.get(key)
        except Exception as e:
            logger.warning(f"Could not read session {key}: {e}")
            return None

        if not raw:
            return None
        try:
            data = json.loads(raw)
        except ValueError:
            logger.warning(f"Ignoring unreadable session payload for {key}")
            return None
        return data if isinstance(data, dict) else None

    def save(self, key: str, value: Dict[str, Any]) -> SaveResult:
        """Encode and write a document, reporting whether it reached durable storage."""
        try:
            serialized = json.dumps(value)
        except (TypeError, ValueError) as e:
            return SaveResult(persisted=False, error=f"Could not serialize session: {e}")

        if not self.available:
            self._backend.set(key, serialized)
            return SaveResult(persisted=False, error=UNAVAILABLE_ERROR)

        try:
            written = self._backend.set(key, serialized)
        except Exception as e:
            self._shadow.set(key, serialized)
            return SaveResult(persisted=False, error=str(e) or type(e).__name__)

        if not written:
            self._shadow.set(key, serialized)
            return SaveResult(persisted=False, error="Storage backend rejected the write")

        self._shadow.remove(key)
        return SaveResult(persisted=True)

    def clear(self, key: str) -> None:
        """Remove a document from both the backend and the memory shadow."""
        self._shadow.remove(key)
        try:
            self._backend.remove(key)
        except Exception as e:
            logger.warning(f"Could not clear session {key}: {e}")
