"""HTTP clients for the published CSV export and the row-update API."""

from __future__ import annotations

import asyncio
import logging
from urllib.parse import quote, urlencode

import requests

from harvestboard.errors import FetchError, WriteError

logger = logging.getLogger(__name__)


def build_query(changes: dict[str, str | None]) -> str:
    """URL-encode ``changes``, skipping ``None`` and blank values."""
    params = []
    for key, value in changes.items():
        if value is None:
            continue
        text = str(value).strip()
        if text:
            params.append((key, text))
    return urlencode(params)


class SheetSource:
    """Reads the whole sheet as CSV text in one request."""

    def __init__(self, url: str, timeout: float | None = None):
        self.url = url
        self.timeout = timeout

    def _get(self) -> str:
        logger.debug("GET %s", self.url)
        try:
            resp = requests.get(self.url, timeout=self.timeout)
        except requests.RequestException as e:
            raise FetchError(f"Could not fetch CSV: {e}") from e
        if not resp.ok:
            raise FetchError(f"HTTP {resp.status_code} while fetching CSV")
        resp.encoding = "utf-8"
        return resp.text

    async def fetch_text(self) -> str:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._get)


class SheetWriter:
    """Partial row updates: ``PATCH <base>/<key column>/<key value>?field=value``."""

    def __init__(self, base_url: str, key_column: str, timeout: float | None = None):
        self.base_url = base_url.rstrip("/")
        self.key_column = key_column
        self.timeout = timeout

    def row_url(self, uid: str, changes: dict[str, str]) -> str:
        url = f"{self.base_url}/{quote(self.key_column, safe='')}/{quote(uid, safe='')}"
        query = build_query(changes)
        return f"{url}?{query}" if query else url

    def _patch(self, uid: str, changes: dict[str, str]) -> dict:
        url = self.row_url(uid, changes)
        logger.debug("PATCH %s", url)
        try:
            resp = requests.patch(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise WriteError(f"Sheet update failed: {e}") from e
        if not resp.ok:
            raise WriteError(f"Sheet update failed (HTTP {resp.status_code})")
        try:
            return resp.json()
        except ValueError:
            return {}

    async def patch_row(self, uid: str, changes: dict[str, str]) -> dict:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._patch, uid, changes)
