"""Error taxonomy for ingestion and write-back."""

from __future__ import annotations


class HarvestBoardError(Exception):
    """Base class for every failure the board reports to its caller."""


class EmptySourceError(HarvestBoardError):
    def __init__(self, message: str = "Fetched CSV data is empty."):
        super().__init__(message)


class MissingHeadersError(HarvestBoardError):
    def __init__(self, message: str = "CSV headers are missing or empty."):
        super().__init__(message)


class FetchError(HarvestBoardError):
    pass


class WriteError(HarvestBoardError):
    pass


class MissingKeyError(HarvestBoardError):
    def __init__(self, key_column: str):
        self.key_column = key_column
        super().__init__(
            f"This row is missing a {key_column} value. "
            f"Add a unique {key_column} in the sheet and reload."
        )


class IncompleteFieldsError(HarvestBoardError):
    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(
            "Please complete all fields before marking as completed "
            f"(missing: {', '.join(missing)})."
        )


class TaskNotFoundError(HarvestBoardError):
    def __init__(self, row_key: int):
        self.row_key = row_key
        super().__init__(f"Task for row {row_key} not found.")
