"""Task model, sheet column names and board configuration."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field


class Column:
    """Sheet header names. They must match the spreadsheet exactly."""

    CROP = "Crop"
    LOCATION = "Location"
    QUANTITY = "Units to Harvest"
    UNIT = "Harvest Units"
    ASSIGNEE = "Assignee(s)"
    HARVEST_DATE = "Harvest Date"
    STATUS = "Status"
    HARVEST_TIME = "Time to Harvest (min)"
    WEIGHT = "Harvest Weight (kg)"
    WASH_PACK_TIME = "Time to Wash & Pack (mins)"
    NOTES = "Field Crew Notes"

    # Sales breakdown, display only
    CSA = "CSA"
    PARKDALE_BINS = "Parkdale Bins"
    COBOURG_MARKET = "Cobourg Farmers Market"
    KITCHEN = "Kitchen"
    ONLINE = "Online"

    SALES = (CSA, PARKDALE_BINS, COBOURG_MARKET, KITCHEN, ONLINE)


DEFAULT_KEY_COLUMN = "UID"


class TaskStatus(enum.StrEnum):
    ASSIGNED = "Assigned"
    COMPLETED = "Completed"


@dataclass
class BoardConfig:
    """Where the sheet is read from and written back to."""

    csv_url: str
    api_base_url: str
    key_column: str = DEFAULT_KEY_COLUMN
    timeout: float | None = None

    def to_dict(self) -> dict:
        return {
            "csv_url": self.csv_url,
            "api_base_url": self.api_base_url,
            "key_column": self.key_column,
            "timeout": self.timeout,
        }

    @classmethod
    def from_dict(cls, d: dict) -> BoardConfig:
        return cls(
            csv_url=d["csv_url"],
            api_base_url=d["api_base_url"],
            key_column=d.get("key_column", DEFAULT_KEY_COLUMN),
            timeout=d.get("timeout"),
        )


@dataclass
class Task:
    """One sheet row. ``row_key`` is the 1-based sheet row (header is row 1)."""

    row_key: int
    fields: dict[str, str] = field(default_factory=dict)

    def get(self, column: str, default: str = "") -> str:
        return self.fields.get(column, default)

    def uid(self, key_column: str = DEFAULT_KEY_COLUMN) -> str:
        return str(self.fields.get(key_column) or "").strip()

    @property
    def crop(self) -> str:
        return self.get(Column.CROP)

    @property
    def harvest_date(self) -> str:
        return self.get(Column.HARVEST_DATE)

    @property
    def status(self) -> str:
        return self.get(Column.STATUS)

    @property
    def quantity(self) -> str:
        return self.get(Column.QUANTITY)

    def to_dict(self) -> dict:
        d = dict(self.fields)
        d["row_key"] = self.row_key
        return d


@dataclass
class HarvestEdit:
    """Unsaved field values for the open task.

    Blank values mean "leave the sheet as it is".
    """

    assignee: str = ""
    harvest_time: str = ""
    weight: str = ""
    wash_pack_time: str = ""
    notes: str = ""

    COLUMNS = {
        "assignee": Column.ASSIGNEE,
        "harvest_time": Column.HARVEST_TIME,
        "weight": Column.WEIGHT,
        "wash_pack_time": Column.WASH_PACK_TIME,
        "notes": Column.NOTES,
    }
    REQUIRED_FOR_COMPLETION = ("assignee", "harvest_time", "weight", "wash_pack_time")

    def __post_init__(self):
        for name in self.COLUMNS:
            value = getattr(self, name)
            setattr(self, name, "" if value is None else str(value).strip())

    @classmethod
    def from_task(cls, task: Task) -> HarvestEdit:
        return cls(**{name: task.get(col) for name, col in cls.COLUMNS.items()})

    def merged_with(self, other: HarvestEdit) -> HarvestEdit:
        """Return a copy where non-blank values of ``other`` win."""
        return HarvestEdit(
            **{name: getattr(other, name) or getattr(self, name) for name in self.COLUMNS}
        )

    def missing_for_completion(self) -> list[str]:
        return [self.COLUMNS[name] for name in self.REQUIRED_FOR_COMPLETION if not getattr(self, name)]

    def to_changes(self) -> dict[str, str]:
        """Column -> value for every non-blank field, in sheet order."""
        return {col: getattr(self, name) for name, col in self.COLUMNS.items() if getattr(self, name)}
