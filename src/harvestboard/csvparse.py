"""Quote-aware CSV parsing for the published sheet export.

Unlike a plain line split, quoted fields may span lines: a newline inside
quotes stays in the cell. ``""`` inside a quoted field is a literal quote.
If a quote is never closed, the text is re-read one line at a time so the
stray quote only damages its own line.
"""

from __future__ import annotations

import logging

from harvestboard.dates import normalize_date
from harvestboard.errors import EmptySourceError, MissingHeadersError
from harvestboard.models import Column, Task

logger = logging.getLogger(__name__)

FIRST_DATA_ROW = 2  # sheet row 1 holds the headers


def _scan(text: str) -> tuple[list[list[str]], bool]:
    """Rows of trimmed cells, and whether a quoted field was left open."""
    rows: list[list[str]] = []
    cells: list[str] = []
    value: list[str] = []
    in_quotes = False
    i = 0
    n = len(text)

    while i < n:
        char = text[i]
        if char == '"':
            if in_quotes and i + 1 < n and text[i + 1] == '"':
                value.append('"')
                i += 1
            else:
                in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            cells.append("".join(value).strip())
            value = []
        elif char == "\n" and not in_quotes:
            cells.append("".join(value).strip())
            rows.append(cells)
            cells, value = [], []
        elif char == "\r" and not in_quotes:
            pass
        else:
            value.append(char)
        i += 1

    cells.append("".join(value).strip())
    rows.append(cells)
    return rows, in_quotes


def parse_rows(text: str) -> list[list[str]]:
    """Split ``text`` into rows of trimmed cells."""
    if not text or not text.strip():
        raise EmptySourceError()

    text = text.strip()
    rows, unbalanced = _scan(text)
    if not unbalanced:
        return rows

    logger.warning("Unbalanced quote in CSV; parsing line by line")
    return [_scan(line)[0][0] for line in text.split("\n")]


def parse_records(text: str) -> list[Task]:
    """Parse ``text`` into tasks keyed by their sheet row number."""
    rows = parse_rows(text)
    headers = [h.strip() for h in rows[0]]
    if not any(headers):
        raise MissingHeadersError()

    tasks: list[Task] = []
    for i, row in enumerate(rows[1:]):
        fields: dict[str, str] = {}
        for j, header in enumerate(headers):
            value = row[j] if j < len(row) else ""
            if header == Column.HARVEST_DATE:
                value = normalize_date(value)
            fields[header] = value
        tasks.append(Task(row_key=FIRST_DATA_ROW + i, fields=fields))
    return tasks
