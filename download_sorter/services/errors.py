from __future__ import annotations

from typing import ClassVar

from ..models.outcome import ErrorKind

"""Exceptions raised inside the sorter core.

Each exception carries its ErrorKind and the user-facing title/message the
controllers show when converting it into an alert at their boundary.
"""

__all__ = [
    "SorterError",
    "NoDataError",
    "ColumnNotFoundError",
    "NoBackupError",
    "PersistenceFailure",
    "WriteFailure",
]


class SorterError(Exception):
    """Base exception for sorter failures."""
    kind: ClassVar[ErrorKind] = ErrorKind.UNEXPECTED
    title: ClassVar[str] = "Error"
    default_message: ClassVar[str] = "An error occurred"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class NoDataError(SorterError):
    kind = ErrorKind.NO_DATA
    default_message = "No data found to sort!"


class ColumnNotFoundError(SorterError):
    kind = ErrorKind.COLUMN_NOT_FOUND
    default_message = 'Could not find "Downloads Last Month" column!'


class NoBackupError(SorterError):
    kind = ErrorKind.NO_BACKUP
    title = "No Backup Found"
    default_message = "No backup data found. Please sort the data first to create a backup."


class PersistenceFailure(SorterError):
    kind = ErrorKind.PERSISTENCE_FAILURE
    default_message = "Snapshot could not be persisted"


class WriteFailure(SorterError):
    kind = ErrorKind.WRITE_FAILURE
    default_message = "Writing to the sheet failed; the sheet may be partially updated"
