"""JSON persistence for the bot's single data document."""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
import os
import tempfile
from collections.abc import Callable
from pathlib import Path
from typing import TypeVar

from boss_timer.models import PersistentState

T = TypeVar("T")
log = logging.getLogger(__name__)


def atomic_write_text(path: Path, content: str) -> None:
    """Write via tempfile + os.replace so readers never see a half-written file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
    try:
        try:
            os.write(fd, content.encode("utf-8"))
        finally:
            os.close(fd)
        os.replace(tmp, path)
    except BaseException:
        with contextlib.suppress(OSError):
            os.unlink(tmp)
        raise


class StateStore:
    """Owns the in-memory document and its file.

    All writers go through ``mutate``, which holds the lock for the whole
    read-modify-save so two mutations never interleave.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self._state = PersistentState()
        self._lock = asyncio.Lock()

    @property
    def state(self) -> PersistentState:
        return self._state

    def lock(self) -> asyncio.Lock:
        return self._lock

    def load(self) -> PersistentState:
        """Read the document; a missing or unreadable file yields the empty document."""
        self._state = self._read()
        return self._state

    def _read(self) -> PersistentState:
        if not self.path.exists():
            return PersistentState()
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            return PersistentState.from_dict(raw)
        except (OSError, ValueError) as e:
            log.error("Cannot load %s, starting with empty data: %s", self.path, e)
            return PersistentState()

    def save(self, state: PersistentState | None = None) -> None:
        """Rewrite the whole document. Failures are logged; memory stays authoritative."""
        if state is not None:
            self._state = state
        try:
            content = json.dumps(self._state.to_dict(), indent=2, ensure_ascii=False)
            atomic_write_text(self.path, content)
        except (OSError, TypeError, ValueError):
            log.exception("Failed to save %s", self.path)

    async def mutate(self, fn: Callable[[PersistentState], T]) -> T:
        """Apply ``fn`` to the live state under the lock, then save."""
        async with self._lock:
            result = fn(self._state)
            self.save()
            return result
