"""Fetch -> parse -> filter -> repository."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Callable, Protocol

from harvestboard.csvparse import parse_records
from harvestboard.dates import normalize_date
from harvestboard.errors import EmptySourceError, FetchError, HarvestBoardError
from harvestboard.models import Task, TaskStatus
from harvestboard.repository import TaskRepository

logger = logging.getLogger(__name__)

_LEADING_NUMBER_RE = re.compile(r"^\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


class TextSource(Protocol):
    async def fetch_text(self) -> str: ...


def parse_quantity(value: str) -> float | None:
    """Leading numeric prefix of ``value`` (``"3.5 bunches"`` -> 3.5), else None."""
    m = _LEADING_NUMBER_RE.match(value or "")
    if m is None:
        return None
    return float(m.group(0))


def is_actionable(task: Task) -> bool:
    if not task.crop:
        return False
    if not normalize_date(task.harvest_date):
        return False
    if task.status == TaskStatus.COMPLETED:
        return False
    qty = parse_quantity(task.quantity)
    return qty is not None and qty > 0


@dataclass
class IngestResult:
    tasks: list[Task] = field(default_factory=list)
    error: HarvestBoardError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class Ingestor:
    """Loads the actionable working set into a repository.

    Not reentrant: run one ``ingest()`` at a time.
    """

    def __init__(self, source: TextSource, repository: TaskRepository):
        self.source = source
        self.repository = repository
        self._observers: list[Callable[[IngestResult], None]] = []

    def subscribe(self, callback: Callable[[IngestResult], None]) -> None:
        self._observers.append(callback)

    async def ingest(self) -> IngestResult:
        try:
            text = await self.source.fetch_text()
            if not text or not text.strip():
                raise EmptySourceError()
            parsed = parse_records(text)
        except HarvestBoardError as e:
            logger.warning("Error fetching/parsing CSV: %s", e)
            self.repository.clear()
            result = IngestResult(error=e)
        except Exception as e:
            logger.warning("Unexpected error fetching CSV", exc_info=True)
            self.repository.clear()
            result = IngestResult(error=FetchError(f"Could not fetch CSV: {e}"))
        else:
            actionable = [t for t in parsed if is_actionable(t)]
            self.repository.replace_all(actionable)
            logger.debug("Loaded %d of %d rows", len(actionable), len(parsed))
            result = IngestResult(tasks=actionable)

        for callback in self._observers:
            callback(result)
        return result
