"""Fire-and-forget execution of post-commit side effects."""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Coroutine, Optional, Protocol, Set

logger = logging.getLogger(__name__)


class Dispatcher(Protocol):
    def submit(self, coro: Coroutine[Any, Any, Any], *, name: Optional[str] = None) -> Any:
        ...


class BackgroundDispatcher:
    """Runs coroutines as tracked asyncio tasks.

    Task failures are logged, never propagated. ``drain`` waits for
    outstanding work at shutdown.
    """

    def __init__(self) -> None:
        self._tasks: Set[asyncio.Task] = set()

    def submit(self, coro: Coroutine[Any, Any, Any], *, name: str | None = None) -> asyncio.Task:
        task = asyncio.create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.warning(
                "BackgroundDispatcher: task %s failed: %s", task.get_name(), exc,
                exc_info=(type(exc), exc, exc.__traceback__),
            )

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def drain(self, timeout: float = 10.0) -> None:
        if not self._tasks:
            return
        logger.info("BackgroundDispatcher: waiting for %d task(s)", len(self._tasks))
        _, still_running = await asyncio.wait(set(self._tasks), timeout=timeout)
        for task in still_running:
            task.cancel()
        if still_running:
            logger.warning("BackgroundDispatcher: cancelled %d unfinished task(s)", len(still_running))
