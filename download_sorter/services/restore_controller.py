from __future__ import annotations

import logging
import time
from enum import Enum

from ..models.cell import grid_shape
from ..models.outcome import ErrorKind, OperationOutcome
from .errors import NoBackupError, SorterError, WriteFailure
from .ports import TabularDataSource, UserInteraction
from .snapshot_store import SnapshotStore

"""Restore orchestration.

State transitions: idle → checking → confirming → restoring → idle

Restoring clears the whole current region and writes the snapshot grid back
verbatim, header included. Like sorting, the write phase is not transactional.
"""

logger = logging.getLogger(__name__)

TIMESTAMP_DISPLAY_FMT = "%Y-%m-%d %H:%M:%S %Z"


class RestoreState(Enum):
    IDLE = "idle"
    CHECKING = "checking"
    CONFIRMING = "confirming"
    RESTORING = "restoring"


class RestoreController:
    """Put the sheet back to the state captured by the last sort."""

    def __init__(self, source: TabularDataSource, snapshots: SnapshotStore, ui: UserInteraction) -> None:
        self.source = source
        self.snapshots = snapshots
        self.ui = ui
        self.state = RestoreState.IDLE

    def _enter(self, state: RestoreState) -> None:
        logger.debug("restore: %s -> %s", self.state.value, state.value)
        self.state = state

    def restore(self) -> OperationOutcome:
        """Run one restore. Never raises; failures come back as an outcome."""
        start = time.perf_counter()
        try:
            return self._run(start)
        except SorterError as e:
            return self._fail(e.kind, e.title, str(e), start)
        except Exception as e:
            logger.exception("restore failed unexpectedly")
            return self._fail(
                ErrorKind.UNEXPECTED, "Error", f"Failed to restore original data: {e}", start
            )
        finally:
            self._enter(RestoreState.IDLE)

    def _run(self, start: float) -> OperationOutcome:
        self._enter(RestoreState.CHECKING)
        snapshot = self.snapshots.load()
        if snapshot is None:
            raise NoBackupError()
        if snapshot.source_label != self.source.label:
            logger.warning(
                f"backup was taken from '{snapshot.source_label}', restoring into '{self.source.label}'"
            )

        self._enter(RestoreState.CONFIRMING)
        stamp = snapshot.timestamp.strftime(TIMESTAMP_DISPLAY_FMT).strip()
        if not self.ui.confirm("Restore Original Order", f"Restore data to original order from {stamp}?"):
            logger.info("restore cancelled by user")
            return OperationOutcome(
                operation="restore",
                ok=False,
                message="Restore cancelled",
                aborted=True,
                elapsed_seconds=time.perf_counter() - start,
            )

        self._enter(RestoreState.RESTORING)
        try:
            current_rows, current_cols = grid_shape(self.source.read_grid())
            if current_rows and current_cols:
                self.source.clear_region(0, 0, current_rows, current_cols)
            self.source.write_region(0, 0, snapshot.grid)
        except Exception as e:
            raise WriteFailure(f"restore write failed: {e}") from e

        message = "Data restored to original order successfully!"
        self.ui.alert("Restored!", message)
        logger.info("restored %d rows from backup of %s", len(snapshot.grid), stamp)
        return OperationOutcome(
            operation="restore",
            ok=True,
            message=message,
            rows=len(snapshot.grid),
            elapsed_seconds=time.perf_counter() - start,
        )

    def _fail(self, kind: ErrorKind, title: str, message: str, start: float) -> OperationOutcome:
        logger.error(f"restore: {kind.value}: {message}")
        self.ui.alert(title, message)
        return OperationOutcome(
            operation="restore",
            ok=False,
            message=message,
            error_kind=kind,
            elapsed_seconds=time.perf_counter() - start,
        )
