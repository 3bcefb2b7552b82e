"""In-memory task list kept alongside an audit."""

from __future__ import annotations

import itertools
import logging
from collections.abc import Callable, Iterable, Iterator
from datetime import datetime

from yardaudit.models._base import utcnow
from yardaudit.models.task import Task, TaskPriority

_logger = logging.getLogger(__name__)

DEFAULT_TASKS: tuple[tuple[str, TaskPriority], ...] = (
    ("Verify maintenance logs for GHM 08-02", TaskPriority.HIGH),
    ("Check tire pressure on Camera Trucks", TaskPriority.NORMAL),
)


class TaskList:
    """Ordered task list, newest first.

    Tasks are immutable; toggling replaces the stored instance.
    """

    def __init__(
        self,
        tasks: Iterable[Task] = (),
        *,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._tasks: list[Task] = list(tasks)
        self._clock = clock
        self._ids = itertools.count(len(self._tasks) + 1)

    @classmethod
    def with_defaults(cls, *, clock: Callable[[], datetime] = utcnow) -> TaskList:
        task_list = cls(clock=clock)
        for text, priority in reversed(DEFAULT_TASKS):
            task_list.add(text, priority)
        return task_list

    def __iter__(self) -> Iterator[Task]:
        return iter(list(self._tasks))

    def __len__(self) -> int:
        return len(self._tasks)

    def _next_id(self) -> str:
        existing = {task.id for task in self._tasks}
        while True:
            candidate = str(next(self._ids))
            if candidate not in existing:
                return candidate

    def get(self, task_id: str) -> Task | None:
        return next((task for task in self._tasks if task.id == task_id), None)

    def add(self, text: str, priority: TaskPriority | str = TaskPriority.NORMAL) -> Task:
        """Prepend a new open task.

        Raises
        ------
        ValueError
            If *text* is blank.
        """
        stripped = text.strip()
        if not stripped:
            raise ValueError("task text must not be empty")
        task = Task(
            id=self._next_id(),
            text=stripped,
            priority=TaskPriority(priority),
            created_at=self._clock(),
        )
        self._tasks.insert(0, task)
        return task

    def toggle(self, task_id: str) -> Task | None:
        """Flip a task's completed flag; unknown ids are ignored."""
        for index, task in enumerate(self._tasks):
            if task.id == task_id:
                toggled = task.model_copy(update={"completed": not task.completed})
                self._tasks[index] = toggled
                return toggled
        _logger.debug("toggle: no task %s", task_id)
        return None

    def delete(self, task_id: str) -> bool:
        before = len(self._tasks)
        self._tasks = [task for task in self._tasks if task.id != task_id]
        return len(self._tasks) != before

    def pending(self) -> list[Task]:
        return [task for task in self._tasks if not task.completed]

    def pending_high_priority_count(self) -> int:
        return sum(1 for task in self.pending() if task.priority == TaskPriority.HIGH)
