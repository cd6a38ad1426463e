from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from enum import Enum

from ..models.cell import grid_shape
from ..models.outcome import ErrorKind, OperationOutcome, SortDirection
from .errors import ColumnNotFoundError, NoDataError, PersistenceFailure, SorterError, WriteFailure
from .permutation import DEFAULT_KEY_TOKENS, find_key_column, reorder
from .ports import TabularDataSource, UserInteraction
from .snapshot_store import SnapshotStore

"""Sort orchestration.

State transitions: idle → validating → snapshotting → reordering → writing → idle

Validation and snapshotting happen before any destructive write, so a failure
there leaves the sheet untouched. The write phase goes through the data source
cell by cell and is not transactional: a WriteFailure may leave the data rows
partially overwritten. No rollback is attempted; the snapshot taken at the
start of the sort is what RestoreController uses to recover.
"""

logger = logging.getLogger(__name__)


class SortState(Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    SNAPSHOTTING = "snapshotting"
    REORDERING = "reordering"
    WRITING = "writing"


class SortController:
    """Sort the data rows of a sheet by the downloads-per-month column."""

    def __init__(
        self,
        source: TabularDataSource,
        snapshots: SnapshotStore,
        ui: UserInteraction,
        *,
        key_tokens: Sequence[str] = DEFAULT_KEY_TOKENS,
    ) -> None:
        self.source = source
        self.snapshots = snapshots
        self.ui = ui
        self.key_tokens = tuple(key_tokens)
        self.state = SortState.IDLE

    def _enter(self, state: SortState) -> None:
        logger.debug("sort: %s -> %s", self.state.value, state.value)
        self.state = state

    def sort(self, direction: SortDirection = SortDirection.DESC) -> OperationOutcome:
        """Run one sort. Never raises; failures come back as an outcome."""
        start = time.perf_counter()
        try:
            rows, saved = self._run(direction)
        except SorterError as e:
            return self._fail(e.kind, e.title, str(e), direction, start)
        except Exception as e:
            logger.exception("sort failed unexpectedly")
            return self._fail(ErrorKind.UNEXPECTED, "Error", f"An error occurred: {e}", direction, start)
        finally:
            self._enter(SortState.IDLE)

        message = (
            f"Data sorted by downloads ({direction.label}). "
            "All hyperlinks and formatting preserved!"
        )
        if not saved:
            message += " Restore is unavailable because the backup could not be saved."
        self.ui.alert("Success!", message)
        logger.info("sorted %d rows direction=%s source=%s", rows, direction.value, self.source.label)
        return OperationOutcome(
            operation="sort",
            ok=True,
            message=message,
            rows=rows,
            direction=direction,
            snapshot_saved=saved,
            elapsed_seconds=time.perf_counter() - start,
        )

    def _run(self, direction: SortDirection) -> tuple[int, bool]:
        self._enter(SortState.VALIDATING)
        grid = self.source.read_grid()
        total_rows, cols = grid_shape(grid)
        if total_rows < 2:
            raise NoDataError()
        key_index = find_key_column(grid[0], self.key_tokens)
        if key_index is None:
            raise ColumnNotFoundError()
        logger.debug("key column index=%d header=%r", key_index, grid[0][key_index].display)

        self._enter(SortState.SNAPSHOTTING)
        saved = True
        try:
            self.snapshots.save(grid, self.source.label)
        except PersistenceFailure as e:
            saved = False
            logger.warning(f"backup: {e} (continuing without restore point)")

        self._enter(SortState.REORDERING)
        ordered = reorder(grid, key_index, direction)

        self._enter(SortState.WRITING)
        data_rows = ordered[1:]
        try:
            self.source.clear_region(1, 0, len(data_rows), cols)
            self.source.write_region(1, 0, data_rows)
        except Exception as e:
            raise WriteFailure(f"write failed: {e}") from e
        return len(data_rows), saved

    def _fail(
        self, kind: ErrorKind, title: str, message: str, direction: SortDirection, start: float
    ) -> OperationOutcome:
        logger.error(f"sort: {kind.value}: {message}")
        self.ui.alert(title, message)
        return OperationOutcome(
            operation="sort",
            ok=False,
            message=message,
            error_kind=kind,
            direction=direction,
            elapsed_seconds=time.perf_counter() - start,
        )
