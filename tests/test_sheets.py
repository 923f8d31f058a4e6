import asyncio

import pytest
import requests

from harvestboard.errors import FetchError, WriteError
from harvestboard.sheets import SheetSource, SheetWriter, build_query


class FakeResponse:
    def __init__(self, status_code=200, text="", payload=None):
        self.status_code = status_code
        self.text = text
        self.encoding = None
        self._payload = payload

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


def test_build_query_skips_blanks_and_encodes():
    query = build_query({"Field Crew Notes": "wet & cold", "Status": "", "Assignee(s)": None, "Harvest Weight (kg)": 4})
    assert query == "Field+Crew+Notes=wet+%26+cold&Harvest+Weight+%28kg%29=4"


def test_row_url_quotes_key_and_value():
    writer = SheetWriter("https://sheetdb.example/api/v1/abc/", "Row ID")
    assert writer.row_url("a/1", {}) == "https://sheetdb.example/api/v1/abc/Row%20ID/a%2F1"
    assert writer.row_url("u-1", {"Status": "Assigned"}).endswith("/Row%20ID/u-1?Status=Assigned")


def test_fetch_text(monkeypatch):
    seen = {}

    def fake_get(url, timeout=None):
        seen["url"] = url
        return FakeResponse(text="Crop\nKale")

    monkeypatch.setattr(requests, "get", fake_get)
    assert asyncio.run(SheetSource("https://example/csv").fetch_text()) == "Crop\nKale"
    assert seen["url"] == "https://example/csv"


def test_fetch_http_error(monkeypatch):
    monkeypatch.setattr(requests, "get", lambda url, timeout=None: FakeResponse(status_code=404))
    with pytest.raises(FetchError, match="HTTP 404"):
        asyncio.run(SheetSource("https://example/csv").fetch_text())


def test_fetch_transport_error(monkeypatch):
    def boom(url, timeout=None):
        raise requests.ConnectionError("offline")

    monkeypatch.setattr(requests, "get", boom)
    with pytest.raises(FetchError):
        asyncio.run(SheetSource("https://example/csv").fetch_text())


def test_patch_row(monkeypatch):
    seen = []

    def fake_patch(url, timeout=None):
        seen.append(url)
        return FakeResponse(payload={"updated": 1})

    monkeypatch.setattr(requests, "patch", fake_patch)
    writer = SheetWriter("https://sheetdb.example/api/v1/abc", "UID")
    assert asyncio.run(writer.patch_row("u-1", {"Status": "Completed"})) == {"updated": 1}
    assert seen == ["https://sheetdb.example/api/v1/abc/UID/u-1?Status=Completed"]


def test_patch_row_non_json_body(monkeypatch):
    monkeypatch.setattr(requests, "patch", lambda url, timeout=None: FakeResponse())
    writer = SheetWriter("https://sheetdb.example/api/v1/abc", "UID")
    assert asyncio.run(writer.patch_row("u-1", {"Status": "Assigned"})) == {}


def test_patch_row_http_error(monkeypatch):
    monkeypatch.setattr(requests, "patch", lambda url, timeout=None: FakeResponse(status_code=500))
    writer = SheetWriter("https://sheetdb.example/api/v1/abc", "UID")
    with pytest.raises(WriteError, match="HTTP 500"):
        asyncio.run(writer.patch_row("u-1", {"Status": "Assigned"}))
