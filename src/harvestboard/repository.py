"""In-memory working set of actionable tasks for one session."""

from __future__ import annotations

from typing import Iterable

from harvestboard.dates import normalize_date
from harvestboard.errors import TaskNotFoundError
from harvestboard.models import Task


class TaskRepository:
    """Ordered task list plus a ``row_key`` index over the same objects.

    Both views are always swapped together; nothing outside this class
    touches them.
    """

    def __init__(self, tasks: Iterable[Task] = ()):
        self._tasks: list[Task] = []
        self._index: dict[int, Task] = {}
        self.replace_all(tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    def all(self) -> list[Task]:
        return list(self._tasks)

    def by_key(self, row_key: int) -> Task:
        try:
            return self._index[row_key]
        except KeyError:
            raise TaskNotFoundError(row_key) from None

    def by_date(self, day: str) -> list[Task]:
        """Tasks whose harvest date, re-normalized, equals ``day`` as a string."""
        return [t for t in self._tasks if normalize_date(t.harvest_date) == day]

    def replace_all(self, tasks: Iterable[Task]) -> None:
        new_tasks = list(tasks)
        new_index = {t.row_key: t for t in new_tasks}
        self._tasks, self._index = new_tasks, new_index

    def clear(self) -> None:
        self.replace_all(())

    def apply_field_updates(self, row_key: int, fields: dict[str, str]) -> Task:
        task = self.by_key(row_key)
        task.fields.update(fields)
        return task

    def remove(self, row_key: int) -> Task:
        task = self._index.pop(row_key, None)
        if task is None:
            raise TaskNotFoundError(row_key)
        self._tasks = [t for t in self._tasks if t.row_key != row_key]
        return task
