"""Write user edits back to the sheet and merge them locally."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Protocol

from harvestboard.dates import today_iso
from harvestboard.errors import IncompleteFieldsError, MissingKeyError, TaskNotFoundError
from harvestboard.models import DEFAULT_KEY_COLUMN, Column, HarvestEdit, Task, TaskStatus
from harvestboard.repository import TaskRepository

logger = logging.getLogger(__name__)


class RowWriter(Protocol):
    async def patch_row(self, uid: str, changes: dict[str, str]) -> dict: ...


class Outcome(enum.StrEnum):
    UPDATED = "updated"
    COMPLETED = "completed"


@dataclass
class SubmitResult:
    outcome: Outcome
    row_key: int
    changes: dict[str, str]
    response: dict = field(default_factory=dict)
    merged: bool = True


def build_changes(edit: HarvestEdit, completing: bool, today: str) -> dict[str, str]:
    """The change set for one submit: non-blank edits plus derived status fields.

    Completing stamps today's date over ``Harvest Date``. A partial save with an
    assignee marks the row Assigned, every time.
    """
    changes = edit.to_changes()
    if completing:
        changes[Column.STATUS] = TaskStatus.COMPLETED.value
        changes[Column.HARVEST_DATE] = today
    elif edit.assignee:
        changes[Column.STATUS] = TaskStatus.ASSIGNED.value
    return changes


class Reconciler:
    def __init__(
        self,
        writer: RowWriter,
        repository: TaskRepository,
        key_column: str = DEFAULT_KEY_COLUMN,
        clock: Callable[[], date] | None = None,
    ):
        self.writer = writer
        self.repository = repository
        self.key_column = key_column
        self.clock = clock

    async def submit(self, task: Task, edit: HarvestEdit, completing: bool = False) -> SubmitResult:
        uid = task.uid(self.key_column)
        if not uid:
            raise MissingKeyError(self.key_column)

        if completing:
            missing = edit.missing_for_completion()
            if missing:
                raise IncompleteFieldsError(missing)

        changes = build_changes(edit, completing, today_iso(self.clock))
        response = await self.writer.patch_row(uid, changes)

        outcome = Outcome.COMPLETED if changes.get(Column.STATUS) == TaskStatus.COMPLETED else Outcome.UPDATED
        try:
            self.repository.apply_field_updates(task.row_key, changes)
            if outcome == Outcome.COMPLETED:
                self.repository.remove(task.row_key)
        except TaskNotFoundError:
            # The working set was reloaded while the write was in flight.
            logger.warning("Row %s saved remotely but no longer loaded; local copy not updated", task.row_key)
            return SubmitResult(outcome, task.row_key, changes, response, merged=False)

        return SubmitResult(outcome, task.row_key, changes, response)
