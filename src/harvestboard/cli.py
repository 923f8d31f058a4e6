"""Typer CLI for the harvest task board."""

from __future__ import annotations

import asyncio
import logging
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from harvestboard.dates import normalize_date, today_iso
from harvestboard.errors import HarvestBoardError
from harvestboard.models import BoardConfig, Column, DEFAULT_KEY_COLUMN, Task
from harvestboard.persistence import ConfigStore
from harvestboard.reconciler import Outcome
from harvestboard.session import BoardSession

app = typer.Typer(
    name="harvestboard",
    help="Harvest task board backed by a published spreadsheet.",
    no_args_is_help=True,
)
console = Console()


def _get_store() -> ConfigStore:
    return ConfigStore()


def _make_session(config: BoardConfig) -> BoardSession:
    return BoardSession(config)


def _require_config(config: BoardConfig | None) -> BoardConfig:
    if config is None:
        console.print("[red]No board config found. Run 'harvestboard init' first.[/red]")
        raise typer.Exit(1)
    return config


def _load_session() -> BoardSession:
    """Build a session and run ingestion; exits on a failed load."""
    config = _require_config(_get_store().load())
    session = _make_session(config)
    result = asyncio.run(session.load())
    if not result.ok:
        console.print(f"[red]Error loading tasks: {result.error}[/red]")
        raise typer.Exit(1)
    return session


def _open(session: BoardSession, row_key: int) -> Task:
    try:
        return session.open(row_key)
    except HarvestBoardError as e:
        console.print(f"[red]Could not open task: {e}[/red]")
        raise typer.Exit(1)


def _quantity(task: Task) -> str:
    return f"{task.get(Column.QUANTITY) or 'N/A'} {task.get(Column.UNIT)}".strip()


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging")] = False,
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command()
def init(
    csv_url: Annotated[str, typer.Option(help="Published sheet CSV URL", prompt="Published sheet CSV URL")],
    api_url: Annotated[str, typer.Option(help="Row-update API base URL", prompt="Row-update API base URL")],
    key_column: Annotated[str, typer.Option(help="Column holding each row's unique id")] = DEFAULT_KEY_COLUMN,
    timeout: Annotated[Optional[float], typer.Option(help="HTTP timeout in seconds")] = None,
) -> None:
    """Write the board configuration."""
    config = BoardConfig(csv_url=csv_url, api_base_url=api_url, key_column=key_column, timeout=timeout)
    _get_store().save(config)
    console.print(f"[green]Board configured. Updates keyed by '{key_column}'.[/green]")


@app.command("list")
def list_tasks(
    day: Annotated[Optional[str], typer.Option("--date", "-d", help="Harvest date (YYYY-MM-DD or M/D/YYYY), default today")] = None,
    csv: Annotated[Optional[str], typer.Option("--csv", help="Export list to CSV file")] = None,
) -> None:
    """List actionable harvest tasks for a date."""
    session = _load_session()
    selected = normalize_date(day) if day else today_iso()
    tasks = session.tasks_for(selected)

    if csv:
        import csv as csv_mod
        from pathlib import Path

        with Path(csv).open("w", newline="") as f:
            writer = csv_mod.writer(f)
            writer.writerow(["Row", Column.CROP, Column.LOCATION, Column.QUANTITY, Column.UNIT, Column.ASSIGNEE])
            for t in tasks:
                writer.writerow([
                    t.row_key,
                    t.crop,
                    t.get(Column.LOCATION),
                    t.get(Column.QUANTITY),
                    t.get(Column.UNIT),
                    t.get(Column.ASSIGNEE),
                ])
        console.print(f"[green]Exported {len(tasks)} tasks to {csv}[/green]")
        return

    if not tasks:
        console.print(f"No tasks to display for {selected}. / No hay tareas para esta fecha.")
        return

    table = Table(title=f"Harvest tasks {selected}")
    table.add_column("Row")
    table.add_column("Crop")
    table.add_column("Location / Ubicación")
    table.add_column("Quantity / Cantidad")
    table.add_column("Assigned To / Asignado a")

    for t in tasks:
        assignee = t.get(Column.ASSIGNEE)
        table.add_row(
            str(t.row_key),
            t.crop or "N/A",
            t.get(Column.LOCATION) or "-",
            _quantity(t),
            assignee or "Unassigned / Sin asignar",
            style=None if assignee else "dim",
        )

    console.print(table)
    console.print(f"[dim]Showing {len(tasks)} of {len(session.repository)} open tasks[/dim]")


@app.command()
def show(row: Annotated[int, typer.Argument(help="Sheet row number")]) -> None:
    """Show all details for a single task."""
    session = _load_session()
    t = _open(session, row)

    console.print(f"\n[bold]{t.crop or 'N/A'}[/bold]  (row {t.row_key})")
    console.print(f"  Location:       {t.get(Column.LOCATION) or '-'}")
    console.print(f"  Quantity:       {_quantity(t)}")
    console.print(f"  Harvest date:   {t.harvest_date}")
    console.print(f"  Status:         {t.status or '-'}")
    console.print(f"  Assignee:       {t.get(Column.ASSIGNEE) or 'Unassigned'}")
    console.print(f"  Harvest time:   {t.get(Column.HARVEST_TIME) or '-'}")
    console.print(f"  Weight (kg):    {t.get(Column.WEIGHT) or '-'}")
    console.print(f"  Wash/pack time: {t.get(Column.WASH_PACK_TIME) or '-'}")

    console.print("\n  [dim]── Sales breakdown / Desglose de ventas ──[/dim]")
    for col in Column.SALES:
        console.print(f"  {col}: {t.get(col) or 0}")

    notes = t.get(Column.NOTES)
    if notes:
        console.print("\n  [dim]── Field crew notes ──[/dim]")
        for line in notes.splitlines():
            console.print(f"  {line}")
    console.print()


def _submit(
    row: int,
    completing: bool,
    assignee: str | None,
    harvest_time: str | None,
    weight: str | None,
    wash_pack_time: str | None,
    notes: str | None,
) -> None:
    session = _load_session()
    _open(session, row)
    session.edit(
        assignee=assignee or "",
        harvest_time=harvest_time or "",
        weight=weight or "",
        wash_pack_time=wash_pack_time or "",
        notes=notes or "",
    )
    try:
        result = asyncio.run(session.submit(completing=completing))
    except HarvestBoardError as e:
        console.print(f"[red]Error updating task: {e}[/red]")
        raise typer.Exit(1)

    if result.outcome == Outcome.COMPLETED:
        console.print(f"[green]Row {row} marked Completed![/green]")
    else:
        fields = ", ".join(result.changes) or "nothing"
        console.print(f"[green]Row {row} updated ({fields}).[/green]")


@app.command()
def update(
    row: Annotated[int, typer.Argument(help="Sheet row number")],
    assignee: Annotated[Optional[str], typer.Option(help="Who is harvesting")] = None,
    harvest_time: Annotated[Optional[str], typer.Option(help="Time to harvest (min)")] = None,
    weight: Annotated[Optional[str], typer.Option(help="Harvest weight (kg)")] = None,
    wash_pack_time: Annotated[Optional[str], typer.Option(help="Time to wash & pack (mins)")] = None,
    notes: Annotated[Optional[str], typer.Option(help="Field crew notes")] = None,
) -> None:
    """Save progress on a task without completing it.

    Options left out keep the values already in the sheet.
    """
    _submit(row, False, assignee, harvest_time, weight, wash_pack_time, notes)


@app.command()
def complete(
    row: Annotated[int, typer.Argument(help="Sheet row number")],
    assignee: Annotated[Optional[str], typer.Option(help="Who harvested")] = None,
    harvest_time: Annotated[Optional[str], typer.Option(help="Time to harvest (min)")] = None,
    weight: Annotated[Optional[str], typer.Option(help="Harvest weight (kg)")] = None,
    wash_pack_time: Annotated[Optional[str], typer.Option(help="Time to wash & pack (mins)")] = None,
    notes: Annotated[Optional[str], typer.Option(help="Field crew notes")] = None,
) -> None:
    """Mark a task Completed. Assignee, times and weight must all be filled."""
    _submit(row, True, assignee, harvest_time, weight, wash_pack_time, notes)


if __name__ == "__main__":
    app()
