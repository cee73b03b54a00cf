"""
File session store adapter - Implements SessionStore protocol.

Values live in a single JSON object on disk so they survive process
restarts. Writes go to a temporary file that atomically replaces the
previous one; the last write wins.
"""

import asyncio
import json
import logging
import os
import threading
from pathlib import Path

from src.domain.exceptions import SessionWriteError

logger = logging.getLogger(__name__)


class FileSessionStore:
    """
    Implements SessionStore protocol with a JSON file.

    Uses structural subtyping - no explicit inheritance from Protocol.
    One instance is shared process-wide; a lock serializes writers.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    async def put(self, key: str, value: str) -> None:
        """
        Store ``value`` under ``key``.

        Raises:
            SessionWriteError: If the file cannot be read or written
        """
        await asyncio.to_thread(self._put, key, value)

    async def get(self, key: str) -> str | None:
        """Return the stored value, or None if absent."""
        return await asyncio.to_thread(lambda: self._load().get(key))

    def _put(self, key: str, value: str) -> None:
        with self._lock:
            try:
                data = self._load()
                data[key] = value
                self._path.parent.mkdir(parents=True, exist_ok=True)
                tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
                tmp_path.write_text(json.dumps(data), encoding="utf-8")
                os.replace(tmp_path, self._path)
            except (OSError, ValueError) as e:
                logger.error("Session write failed for key %s: %s", key, e)
                raise SessionWriteError(str(e)) from e

        logger.debug("Session key stored: %s", key)

    def _load(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        data = json.loads(self._path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"Session file is not a JSON object: {self._path}")
        return data
