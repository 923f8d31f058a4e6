"""Harvest date normalization."""

from __future__ import annotations

import logging
import re
from datetime import date
from typing import Callable

logger = logging.getLogger(__name__)

_US_DATE_RE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")


def normalize_date(value) -> str:
    """Rewrite ``M/D/YYYY`` to ``YYYY-MM-DD``; anything else passes through trimmed.

    Quotes and carriage returns are removed first. Never raises: a value that
    cannot be handled yields ``""`` and a warning.
    """
    if not value:
        return ""
    try:
        text = str(value).replace('"', "").replace("'", "").replace("\r", "").strip()
        m = _US_DATE_RE.match(text)
        if m is None:
            return text
        month, day, year = m.groups()
        return f"{year}-{int(month):02d}-{int(day):02d}"
    except Exception:
        logger.warning("Error normalizing date %r", value, exc_info=True)
        return ""


def today_iso(clock: Callable[[], date] | None = None) -> str:
    """Today's date in canonical ``YYYY-MM-DD`` form."""
    return (clock or date.today)().isoformat()
