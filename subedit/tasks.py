"""Cancelable asynchronous tasks with progress reporting."""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, List, Optional

logger = logging.getLogger(__name__)


class TaskState(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class ProgressEvent:
    task_name: str
    fraction: float
    message: str = ""

    @property
    def percent(self) -> int:
        return int(self.fraction * 100)


ProgressListener = Callable[[ProgressEvent], None]


class ProgressReporter:
    """Handed to a task's work function; forwards progress to listeners."""

    def __init__(self, task_name: str):
        self.task_name = task_name
        self.fraction = 0.0
        self.message = ""
        self._listeners: List[ProgressListener] = []

    def add_listener(self, listener: ProgressListener) -> None:
        self._listeners.append(listener)

    def report(self, fraction: float, message: str = "") -> None:
        """Publishes progress. Values are clamped to [0, 1] and never move backwards."""
        fraction = min(max(float(fraction), 0.0), 1.0)
        self.fraction = max(self.fraction, fraction)
        self.message = message
        event = ProgressEvent(self.task_name, self.fraction, message)
        for listener in self._listeners:
            listener(event)


class ProcessingTask:
    """
    Runs an async work function as an asyncio task.

    The work function receives a ProgressReporter. Awaiting the task returns its
    result, re-raises its exception, or raises asyncio.CancelledError once it has
    been cancelled.
    """

    def __init__(self, name: str, work: Callable[[ProgressReporter], Awaitable[Any]]):
        self.name = name
        self.state = TaskState.PENDING
        self.progress = ProgressReporter(name)
        self._work = work
        self._task: Optional[asyncio.Task] = None

    def add_listener(self, listener: ProgressListener) -> None:
        self.progress.add_listener(listener)

    def start(self) -> "ProcessingTask":
        """Schedules the work on the running event loop."""
        if self._task is not None:
            raise RuntimeError(f"Task '{self.name}' was already started")
        self._task = asyncio.ensure_future(self._run())
        return self

    async def _run(self) -> Any:
        self.state = TaskState.RUNNING
        logger.info(f"Task '{self.name}' started.")
        try:
            result = await self._work(self.progress)
        except asyncio.CancelledError:
            self.state = TaskState.CANCELLED
            logger.warning(f"Task '{self.name}' cancelled at {self.progress.fraction:.0%}.")
            raise
        except Exception as e:
            self.state = TaskState.FAILED
            logger.error(f"Task '{self.name}' failed: {e}")
            raise
        self.progress.report(1.0, "Done")
        self.state = TaskState.COMPLETED
        logger.info(f"Task '{self.name}' completed.")
        return result

    def cancel(self) -> bool:
        """Requests cancellation. Returns False if the task is not running."""
        if self._task is None or self._task.done():
            return False
        cancelled = self._task.cancel()
        # A task cancelled before its first step never enters _run.
        if cancelled and self.state == TaskState.PENDING:
            self.state = TaskState.CANCELLED
        return cancelled

    @property
    def done(self) -> bool:
        return self.state in (TaskState.COMPLETED, TaskState.FAILED, TaskState.CANCELLED)

    def __await__(self):
        if self._task is None:
            self.start()
        return self._task.__await__()
