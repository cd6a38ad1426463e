from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

"""Operation outcome models: sort direction, failure kinds and the result
record every controller returns to its caller.
"""


class SortDirection(Enum):
    """Ordering applied to the sort key.

    - DESC: highest downloads first
    - ASC: lowest downloads first
    """
    DESC = "desc"
    ASC = "asc"

    @property
    def label(self) -> str:
        return "highest to lowest" if self is SortDirection.DESC else "lowest to highest"


class ErrorKind(Enum):
    """Failure kinds surfaced by the controllers.

    UNEXPECTED covers any exception that is not one of the documented kinds.
    """
    NO_DATA = "NoData"
    COLUMN_NOT_FOUND = "ColumnNotFound"
    NO_BACKUP = "NoBackup"
    PERSISTENCE_FAILURE = "PersistenceFailure"
    WRITE_FAILURE = "WriteFailure"
    UNEXPECTED = "Unexpected"


@dataclass(frozen=True)
class OperationOutcome:
    """Result of one sort or restore invocation."""
    operation: str  # "sort" | "restore"
    ok: bool
    message: str
    error_kind: ErrorKind | None = None
    rows: int = 0  # data rows sorted, or grid rows restored
    direction: SortDirection | None = None
    snapshot_saved: bool = False
    aborted: bool = False  # user declined the restore confirmation
    elapsed_seconds: float = 0.0

    @property
    def status(self) -> str:
        if self.aborted:
            return "aborted"
        return "ok" if self.ok else "failed"
