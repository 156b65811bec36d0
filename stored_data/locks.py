from __future__ import annotations

import asyncio
import logging
import threading
from pathlib import Path
from typing import Any, Awaitable, Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SequentialFileLock:
    """
    Runs async tasks one at a time, in the order `run` was called.

    Each call chains onto the previous call's completion future, so a task starts
    only after the one queued before it has settled. A failing task is logged and
    re-raised to its own caller; later tasks still run.

    Process-local only: there is no cross-process exclusion.
    """

    def __init__(self, name: str = "") -> None:
        self.name = name
        self._tail: asyncio.Future[None] | None = None
        self._pending = 0

    @property
    def pending(self) -> int:
        """Number of tasks queued or running."""
        return self._pending

    async def run(self, task: Callable[[], Awaitable[T]]) -> T:
        loop = asyncio.get_running_loop()
        previous = self._tail
        done: asyncio.Future[None] = loop.create_future()
        self._tail = done
        self._pending += 1
        try:
            if previous is not None and not previous.done():
                await asyncio.shield(previous)
            try:
                return await task()
            except Exception as e:
                logger.error("FILE LOCK %s: task failed: %r", self.name, e)
                raise
        finally:
            self._pending -= 1
            if previous is not None and not previous.done():
                # Cancelled while waiting: keep later tasks behind the earlier one.
                previous.add_done_callback(lambda _f: _settle(done))
            else:
                _settle(done)


def _settle(future: asyncio.Future[Any]) -> None:
    if not future.done():
        future.set_result(None)


class FileLockRegistry:
    """
    Provides one stable SequentialFileLock per canonical absolute file path.

    Stores opened against the same path through the same registry share a queue.
    Entries are created lazily and kept for the registry's lifetime.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, SequentialFileLock] = {}

    @staticmethod
    def key_for(path: Path | str) -> str:
        return str(Path(path).expanduser().resolve())

    def lock_for(self, path: Path | str) -> SequentialFileLock:
        key = self.key_for(path)
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = SequentialFileLock(key)
                self._locks[key] = lock
            return lock

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, (str, Path)):
            return False
        with self._guard:
            return self.key_for(path) in self._locks

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)
