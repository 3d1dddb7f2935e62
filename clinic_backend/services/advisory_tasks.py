"""Cancelable advisory requests keyed by screen and request id."""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import Awaitable, Dict, Optional, Set, TypeVar

from clinic_backend.errors import AdvisoryCancelledError

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


class AdvisoryTaskRegistry:
    """Tracks in-flight advisory calls so stale results can be dropped.

    A new request with the same (screen, request id) supersedes the earlier
    one, and leaving a screen cancels everything still running on it. A
    cancelled caller gets ``AdvisoryCancelledError`` instead of a result.
    """

    def __init__(self) -> None:
        self._tasks: Dict[str, Dict[str, asyncio.Task]] = {}
        self._superseded: Set[asyncio.Task] = set()
        self._lock = threading.Lock()

    async def run(self, screen: str, request_id: str, work: Awaitable[T]) -> T:
        task = asyncio.ensure_future(work)
        with self._lock:
            screen_tasks = self._tasks.setdefault(screen, {})
            previous = screen_tasks.get(request_id)
            screen_tasks[request_id] = task
        if previous is not None and not previous.done():
            LOGGER.info(
                "Superseding advisory request screen=%s request_id=%s",
                screen,
                request_id,
            )
            self._cancel(previous)

        try:
            return await task
        except asyncio.CancelledError:
            if task in self._superseded:
                raise AdvisoryCancelledError(screen, request_id) from None
            raise
        finally:
            with self._lock:
                self._superseded.discard(task)
                screen_tasks = self._tasks.get(screen, {})
                if screen_tasks.get(request_id) is task:
                    del screen_tasks[request_id]
                if not screen_tasks:
                    self._tasks.pop(screen, None)

    def cancel(self, screen: str, request_id: Optional[str] = None) -> int:
        """Cancel running requests on a screen; return how many were signalled."""

        with self._lock:
            screen_tasks = dict(self._tasks.get(screen, {}))
        if request_id is not None:
            screen_tasks = {
                key: task for key, task in screen_tasks.items() if key == request_id
            }

        cancelled = 0
        for key, task in screen_tasks.items():
            if task.done():
                continue
            LOGGER.info("Cancelling advisory request screen=%s request_id=%s", screen, key)
            self._cancel(task)
            cancelled += 1
        return cancelled

    def pending(self, screen: str) -> Set[str]:
        with self._lock:
            return {
                key for key, task in self._tasks.get(screen, {}).items() if not task.done()
            }

    def _cancel(self, task: asyncio.Task) -> None:
        with self._lock:
            self._superseded.add(task)

        loop = task.get_loop()
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None

        if running is loop:
            task.cancel()
        else:
            loop.call_soon_threadsafe(task.cancel)
