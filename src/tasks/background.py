import asyncio
from collections.abc import Coroutine
from typing import Any

import structlog

from src.core.utils.timeout import execute_with_timeout

logger = structlog.get_logger()


class BackgroundTaskRunner:
    """
    Runs coroutines as detached asyncio tasks.

    The caller never awaits the work it schedules. Each task is held until it
    finishes so it cannot be garbage collected mid-flight, and any exception it
    raises is logged by the done callback instead of propagating.
    """

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task[Any]] = set()

    @property
    def pending(self) -> int:
        """Number of tasks that have not finished yet."""
        return len(self._tasks)

    def spawn(self, coro: Coroutine[Any, Any, Any], name: str | None = None) -> asyncio.Task[Any]:
        """Schedule a coroutine on the running loop and return its task."""
        task = asyncio.create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            logger.warning("background_task_cancelled", task=task.get_name())
            return
        exc = task.exception()
        if exc is not None:
            logger.error("background_task_failed", task=task.get_name(), error=str(exc), exc_info=exc)

    async def drain(self, timeout: float = 10.0) -> None:
        """Wait for every in-flight task, cancelling whatever is left after the timeout."""
        if not self._tasks:
            return
        pending = list(self._tasks)
        logger.info("background_tasks_draining", count=len(pending))
        try:
            await execute_with_timeout(
                asyncio.gather(*pending, return_exceptions=True),
                timeout=timeout,
                timeout_message=f"{len(pending)} background tasks still running after {timeout} seconds",
            )
        except TimeoutError:
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)
