from __future__ import annotations

import logging
from datetime import UTC, datetime
from pathlib import Path

from download_sorter.models.error_record import ErrorRecord
from download_sorter.models.outcome import ErrorKind, OperationOutcome

"""Failure log for sort/restore invocations that did not succeed.

Each failed outcome becomes one JSON Lines entry in
``logs/errors-YYYYMMDD-HHMMSS.log``. The file name is fixed (UTC) on the first
record, so every failure of one run lands in the same file. Aborted outcomes
are not failures and are never recorded.
"""

__all__ = [
    "ErrorRecord",
    "FailureLog",
]

logger = logging.getLogger(__name__)

LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"


class FailureLog:
    """Appends failed outcomes for one workbook sheet to the failure log."""

    def __init__(self, workbook: Path, sheet: str, logs_dir: Path = LOGS_DIR) -> None:
        self.workbook = Path(workbook)
        self.sheet = sheet
        self._logs_dir = logs_dir
        self._path: Path | None = None

    @property
    def path(self) -> Path | None:
        """Log file written so far; None until the first record."""
        return self._path

    def _open_path(self) -> Path:
        if self._path is None:
            self._logs_dir.mkdir(parents=True, exist_ok=True)
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._path = self._logs_dir / f"errors-{stamp}.log"
        return self._path

    def record(self, outcome: OperationOutcome) -> Path:
        if outcome.ok or outcome.aborted:
            raise ValueError(f"{outcome.operation} outcome with status={outcome.status} is not a failure")
        kind = outcome.error_kind or ErrorKind.UNEXPECTED
        entry = ErrorRecord.create(self.workbook.name, self.sheet, outcome.operation, kind.value, outcome.message)
        path = self._open_path()
        with path.open("a", encoding="utf-8") as f:
            f.write(entry.to_json_line() + "\n")
        logger.debug(f"failure recorded in {path}")
        return path
