"""One board session: the working set, the open task and its pending edit."""

from __future__ import annotations

from datetime import date
from typing import Callable

from harvestboard.ingest import Ingestor, IngestResult, TextSource
from harvestboard.models import BoardConfig, HarvestEdit, Task
from harvestboard.reconciler import Outcome, Reconciler, RowWriter, SubmitResult
from harvestboard.repository import TaskRepository
from harvestboard.sheets import SheetSource, SheetWriter


class BoardSession:
    """Nothing here outlives the process; a new session re-runs ingestion."""

    def __init__(
        self,
        config: BoardConfig,
        source: TextSource | None = None,
        writer: RowWriter | None = None,
        clock: Callable[[], date] | None = None,
    ):
        self.config = config
        self.repository = TaskRepository()
        self.ingestor = Ingestor(source or SheetSource(config.csv_url, config.timeout), self.repository)
        self.reconciler = Reconciler(
            writer or SheetWriter(config.api_base_url, config.key_column, config.timeout),
            self.repository,
            key_column=config.key_column,
            clock=clock,
        )
        self.last_result: IngestResult | None = None
        self.open_key: int | None = None
        self.pending: HarvestEdit | None = None

    async def load(self) -> IngestResult:
        self.last_result = await self.ingestor.ingest()
        return self.last_result

    def tasks_for(self, day: str) -> list[Task]:
        return self.repository.by_date(day)

    def open(self, row_key: int) -> Task:
        """Open a task for editing; unsaved edits on the previous one are dropped."""
        task = self.repository.by_key(row_key)
        self.open_key = row_key
        self.pending = HarvestEdit.from_task(task)
        return task

    def close(self) -> None:
        self.open_key = None
        self.pending = None

    @property
    def open_task(self) -> Task | None:
        if self.open_key is None:
            return None
        return self.repository.by_key(self.open_key)

    def edit(self, **values: str) -> HarvestEdit:
        if self.pending is None:
            raise RuntimeError("No task selected.")
        self.pending = self.pending.merged_with(HarvestEdit(**values))
        return self.pending

    async def submit(self, completing: bool = False) -> SubmitResult:
        task = self.open_task
        if task is None or self.pending is None:
            raise RuntimeError("No task selected.")
        result = await self.reconciler.submit(task, self.pending, completing)
        if result.outcome == Outcome.COMPLETED or not result.merged:
            self.close()
        else:
            self.open(result.row_key)
        return result
