from __future__ import annotations

import logging
from collections.abc import Sequence

from ..models.cell import Cell, Grid, grid_shape
from ..models.data_row import DataRow
from ..models.outcome import SortDirection
from .errors import ColumnNotFoundError, NoDataError
from .value_parser import parse_download_value

"""Row permutation engine.

Builds one DataRow per non-header row, orders them by the parsed download
magnitude and materializes a new grid. Cells are moved as whole objects, so a
formula cell (e.g. a HYPERLINK) stays a formula and a literal stays a literal.

Ties: rows with equal sort keys are currently emitted in their original
relative order because ``sorted`` is stable, but callers must not rely on it.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "DEFAULT_KEY_TOKENS",
    "find_key_column",
    "build_data_rows",
    "reorder",
]

DEFAULT_KEY_TOKENS: tuple[str, ...] = ("downloads", "month")


def find_key_column(header: Sequence[Cell], tokens: Sequence[str] = DEFAULT_KEY_TOKENS) -> int | None:
    """Return the index of the first header whose lower-cased name contains every token.

    Substring matching: "Downloads Last Month", "monthly downloads" and
    "DOWNLOADS (month)" all match the default tokens.
    """
    wanted = [t.lower() for t in tokens]
    for i, cell in enumerate(header):
        name = "" if cell.display is None else str(cell.display).lower()
        if all(t in name for t in wanted):
            return i
    return None


def build_data_rows(grid: Grid, key_column_index: int) -> list[DataRow]:
    """Build DataRows for every non-header row of ``grid``.

    Raises:
        NoDataError: grid has no data rows
        ColumnNotFoundError: key_column_index is outside the grid
    """
    rows, cols = grid_shape(grid)
    if rows < 2:
        raise NoDataError()
    if not 0 <= key_column_index < cols:
        raise ColumnNotFoundError(f"key column index {key_column_index} out of range (0..{cols - 1})")
    return [
        DataRow(
            original_index=i,
            cells=row,
            sort_key=parse_download_value(row[key_column_index].display),
        )
        for i, row in enumerate(grid[1:])
    ]


def reorder(grid: Grid, key_column_index: int, direction: SortDirection) -> Grid:
    """Return a new grid with the header first and data rows ordered by sort key."""
    data_rows = build_data_rows(grid, key_column_index)
    ordered = sorted(
        data_rows,
        key=lambda r: r.sort_key,
        reverse=direction is SortDirection.DESC,
    )
    logger.debug(
        "reorder: %d rows direction=%s order=%s",
        len(ordered),
        direction.value,
        [r.original_index for r in ordered],
    )
    return [list(grid[0])] + [list(r.cells) for r in ordered]
