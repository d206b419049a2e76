"""
Persistence Port
================
One durable slot holding a JSON text blob. The form store and the submission
client each own a port instance, so tests can substitute InMemoryPersistence
for the file or session-state adapters.

Usage:
    port = build_port("file", "qc-funding-calc", ".funding_calculator", scope=SessionManager.storage_token())
    port.save('{"location": "montreal"}')
    port.load()
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional, Protocol, Union

from services.session_manager import SessionManager

logger = logging.getLogger(__name__)


class PersistencePort(Protocol):
    def load(self) -> Optional[str]:
        ...

    def save(self, text: str) -> None:
        ...

    def clear(self) -> None:
        ...


class InMemoryPersistence:
    """Process-local slot; used by tests."""

    def __init__(self, initial: Optional[str] = None):
        self.value = initial
        self.saves = 0

    def load(self) -> Optional[str]:
        return self.value

    def save(self, text: str) -> None:
        self.value = text
        self.saves += 1

    def clear(self) -> None:
        self.value = None


class JsonFilePersistence:
    """
    Slot backed by a single file on the local filesystem.

    Writes go to a temp file in the same directory and are renamed into place,
    so a crash mid-write never leaves a truncated blob behind.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def load(self) -> Optional[str]:
        if not self.path.exists():
            return None
        return self.path.read_text(encoding="utf-8")

    def save(self, text: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=str(self.path.parent), prefix=self.path.name, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(text)
            os.replace(tmp_name, self.path)
        except OSError:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def clear(self) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass
        logger.debug("Cleared %s", self.path)


class SessionStatePersistence:
    """Slot stored in Streamlit session state; lost when the browser session ends."""

    def __init__(self, key: str):
        self.key = key

    def load(self) -> Optional[str]:
        value = SessionManager.get(self.key)
        return value if isinstance(value, str) else None

    def save(self, text: str) -> None:
        SessionManager.set(self.key, text)

    def clear(self) -> None:
        SessionManager.delete(self.key)


def build_port(backend: str, key: str, state_dir: Union[str, Path], scope: Optional[str] = None) -> PersistencePort:
    """
    Port for `key` on the configured storage backend ('file' or 'session').

    Args:
        backend: Storage backend name
        key: Slot name
        state_dir: Directory for file slots
        scope: Browser-session token; file slots get one file per scope
    """
    if backend == "session":
        return SessionStatePersistence(key)
    if backend != "file":
        logger.warning("Unknown storage backend %r, using file storage", backend)
    name = f"{key}-{scope}.json" if scope else f"{key}.json"
    return JsonFilePersistence(Path(state_dir) / name)
