from datetime import date

import pytest

from harvestboard.dates import normalize_date, today_iso


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("7/4/2024", "2024-07-04"),
        ("12/31/2024", "2024-12-31"),
        ("2024-07-04", "2024-07-04"),
        (' "07/04/2024"\r', "2024-07-04"),
        ('"7/4/2024 "', "2024-07-04"),
        ('"July 4 "', "July 4"),
        ("'1/2/2025'", "2025-01-02"),
        ("July 4", "July 4"),
        ("7/4/24", "7/4/24"),
        ("", ""),
        (None, ""),
    ],
)
def test_normalize_date(raw, expected):
    assert normalize_date(raw) == expected


def test_normalize_date_never_raises(caplog):
    class Broken:
        def __str__(self):
            raise RuntimeError("boom")

    assert normalize_date(Broken()) == ""
    assert "Error normalizing date" in caplog.text


def test_today_iso_uses_clock():
    assert today_iso(lambda: date(2024, 7, 4)) == "2024-07-04"
