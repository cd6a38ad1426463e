from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for the failure log.

One record per failed sort/restore, written as a JSON Lines entry with a fixed
set of keys.
"""

__all__ = [
    "ErrorRecord",
]


@dataclass(frozen=True)
class ErrorRecord:
    """Structured failure record.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        workbook: Workbook file name
        sheet: Sheet name ("" when the sheet could not be opened)
        operation: "sort" or "restore"
        error_type: ErrorKind value, e.g. "ColumnNotFound"
        message: User-facing failure message
    """
    timestamp: str
    workbook: str
    sheet: str
    operation: str
    error_type: str
    message: str

    @staticmethod
    def create(workbook: str, sheet: str, operation: str, error_type: str, message: str) -> ErrorRecord:
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            workbook=workbook,
            sheet=sheet,
            operation=operation,
            error_type=error_type,
            message=message,
        )

    def to_json_line(self) -> str:
        return json.dumps(asdict(self), ensure_ascii=False)
