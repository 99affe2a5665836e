from __future__ import annotations

import logging
from typing import Any, Callable

from fastapi import BackgroundTasks

from service_booking.application.ports.task_scheduler import TaskSchedulerPort


class BackgroundTaskScheduler(TaskSchedulerPort):
    """Runs tasks after the HTTP response has been sent."""

    def __init__(self, background_tasks: BackgroundTasks) -> None:
        self._background_tasks = background_tasks

    def submit(self, func: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
        self._background_tasks.add_task(func, *args, **kwargs)


class QueuedTaskScheduler(TaskSchedulerPort):
    """Holds tasks until run_pending() is called."""

    def __init__(self) -> None:
        self.pending: list[tuple[Callable[..., Any], tuple[Any, ...], dict[str, Any]]] = []
        self._logger = logging.getLogger(__name__)

    def submit(self, func: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
        self.pending.append((func, args, kwargs))

    def run_pending(self) -> list[Any]:
        results = []
        while self.pending:
            func, args, kwargs = self.pending.pop(0)
            try:
                results.append(func(*args, **kwargs))
            except Exception as e:
                self._logger.exception("Deferred task failed", extra={"error": str(e)})
                results.append(None)
        return results
