import asyncio
import logging
from functools import partial
from typing import Any, Callable, Set

from ...application.ports.task_runner import TaskRunner

logger = logging.getLogger(__name__)


def _log_outcome(label: str, outcome: Any) -> None:
    logger.info(f"{label} result: {outcome}")


def _log_failure(label: str, exc: BaseException) -> None:
    logger.error(f"{label} failed: {exc}", exc_info=exc)


class AsyncioTaskRunner(TaskRunner):
    """Runs blocking callables in a worker thread on the running event loop.

    The caller never awaits the task. Strong references are held until the
    task finishes so it cannot be garbage collected mid-flight, and the
    done-callback is the only place results and errors surface.
    """

    def __init__(self) -> None:
        self._tasks: Set[asyncio.Task] = set()

    def submit(self, label: str, fn: Callable[..., Any], *args: Any) -> None:
        loop = asyncio.get_running_loop()
        task = loop.create_task(asyncio.to_thread(fn, *args), name=label)
        self._tasks.add(task)
        task.add_done_callback(partial(self._on_done, label))

    def _on_done(self, label: str, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            logger.warning(f"{label} cancelled")
            return
        exc = task.exception()
        if exc is not None:
            _log_failure(label, exc)
        else:
            _log_outcome(label, task.result())

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def drain(self) -> None:
        """Wait for in-flight tasks, used on shutdown."""
        if self._tasks:
            logger.info(f"Waiting for {len(self._tasks)} background task(s)")
            await asyncio.gather(*list(self._tasks), return_exceptions=True)


class InlineTaskRunner(TaskRunner):
    """Runs the callable immediately. Same logging contract as AsyncioTaskRunner."""

    def submit(self, label: str, fn: Callable[..., Any], *args: Any) -> None:
        try:
            outcome = fn(*args)
        except Exception as exc:
            _log_failure(label, exc)
            return
        _log_outcome(label, outcome)

    async def drain(self) -> None:
        return None
