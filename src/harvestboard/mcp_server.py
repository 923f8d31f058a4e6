"""MCP server for harvestboard: exposes the harvest task board to AI assistants."""

from __future__ import annotations

import json

from mcp.server.fastmcp import FastMCP

from harvestboard.dates import normalize_date, today_iso
from harvestboard.errors import HarvestBoardError
from harvestboard.models import Task
from harvestboard.persistence import ConfigStore
from harvestboard.reconciler import Outcome
from harvestboard.session import BoardSession

mcp = FastMCP(
    "harvestboard",
    instructions="""\
harvestboard reads a farm's harvest plan from a published spreadsheet and \
writes field results back to it. Each task is one sheet row, identified here \
by its row number (row_key). Only actionable tasks are loaded: a crop is set, \
a harvest date is set, the quantity is positive and the status is not \
Completed.

Typical workflow:
1. Use list_tasks with a date (YYYY-MM-DD, default today) to see what to harvest
2. Use get_task for the full row including the sales breakdown
3. Use update_task to record progress (assignee, times, weight, notes); giving \
an assignee marks the row Assigned
4. Use complete_task once assignee, harvest time, weight and wash/pack time \
are all known; the row is then marked Completed and leaves the board
5. Use reload_tasks if the sheet was edited elsewhere

Row numbers can shift if rows are inserted or deleted in the sheet; reload \
before acting on a row you have not looked at recently.\
""",
)

_session: BoardSession | None = None


async def _get_session() -> BoardSession:
    global _session
    if _session is None:
        config = ConfigStore().load()
        if config is None:
            raise ValueError("Board not configured. Run 'harvestboard init' first.")
        _session = BoardSession(config)
        await _session.load()
    return _session


def _task_to_dict(t: Task) -> dict:
    return t.to_dict()


# ---------------------------------------------------------------------------
# Read tools
# ---------------------------------------------------------------------------


@mcp.tool()
async def list_tasks(date: str | None = None) -> str:
    """List actionable harvest tasks for a date.

    Args:
        date: Harvest date (YYYY-MM-DD or M/D/YYYY). Defaults to today.
    """
    try:
        session = await _get_session()
    except ValueError as e:
        return f"Error: {e}"
    if session.last_result is not None and not session.last_result.ok:
        return f"Error loading tasks: {session.last_result.error}"
    day = normalize_date(date) if date else today_iso()
    return json.dumps([_task_to_dict(t) for t in session.tasks_for(day)], indent=2)


@mcp.tool()
async def get_task(row_key: int) -> str:
    """Get every column of one task.

    Args:
        row_key: Sheet row number of the task
    """
    try:
        session = await _get_session()
        return json.dumps(_task_to_dict(session.repository.by_key(row_key)), indent=2)
    except (ValueError, HarvestBoardError) as e:
        return f"Error: {e}"


@mcp.tool()
async def reload_tasks() -> str:
    """Re-read the sheet, replacing the loaded tasks."""
    try:
        session = await _get_session()
    except ValueError as e:
        return f"Error: {e}"
    session.close()
    result = await session.load()
    if not result.ok:
        return f"Error loading tasks: {result.error}"
    return f"Loaded {len(result.tasks)} actionable tasks."


# ---------------------------------------------------------------------------
# Write tools
# ---------------------------------------------------------------------------


async def _submit(row_key: int, completing: bool, **values: str | None) -> str:
    try:
        session = await _get_session()
        session.open(row_key)
        session.edit(**{k: v or "" for k, v in values.items()})
        result = await session.submit(completing=completing)
    except (ValueError, HarvestBoardError) as e:
        return f"Error: {e}"

    if result.outcome == Outcome.COMPLETED:
        return f"Row {row_key} marked Completed."
    note = "" if result.merged else " (sheet updated; reload to see it)"
    return f"Updated row {row_key}: {', '.join(result.changes) or 'nothing'}{note}."


@mcp.tool()
async def update_task(
    row_key: int,
    assignee: str | None = None,
    harvest_time: str | None = None,
    weight: str | None = None,
    wash_pack_time: str | None = None,
    notes: str | None = None,
) -> str:
    """Record progress on a task.

    Omitted fields keep their sheet values, but the values already in the row
    are sent again with the provided ones. If the row has an assignee, its
    Status is therefore set to Assigned even when only notes are given.

    Args:
        row_key: Sheet row number of the task
        assignee: Who is harvesting (also marks the row Assigned)
        harvest_time: Time to harvest, in minutes
        weight: Harvest weight in kg
        wash_pack_time: Time to wash & pack, in minutes
        notes: Field crew notes
    """
    return await _submit(
        row_key,
        False,
        assignee=assignee,
        harvest_time=harvest_time,
        weight=weight,
        wash_pack_time=wash_pack_time,
        notes=notes,
    )


@mcp.tool()
async def complete_task(
    row_key: int,
    assignee: str | None = None,
    harvest_time: str | None = None,
    weight: str | None = None,
    wash_pack_time: str | None = None,
    notes: str | None = None,
) -> str:
    """Mark a task Completed and stamp today's date.

    Values already in the sheet count; assignee, harvest_time, weight and
    wash_pack_time must all be known after merging.

    Args:
        row_key: Sheet row number of the task
        assignee: Who harvested
        harvest_time: Time to harvest, in minutes
        weight: Harvest weight in kg
        wash_pack_time: Time to wash & pack, in minutes
        notes: Field crew notes
    """
    return await _submit(
        row_key,
        True,
        assignee=assignee,
        harvest_time=harvest_time,
        weight=weight,
        wash_pack_time=wash_pack_time,
        notes=notes,
    )


def main():
    """Entry point for the MCP server."""
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
