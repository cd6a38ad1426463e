from __future__ import annotations

import logging
import zipfile
from pathlib import Path
from typing import Any

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException
from openpyxl.worksheet.formula import ArrayFormula

from ..models.cell import Cell, Formula, Grid, Literal
from ..services.progress import RowProgress

"""openpyxl-backed tabular data source.

The workbook is loaded twice: once with formulas (what gets written back) and
once with ``data_only=True`` for the values Excel cached the last time it
computed the sheet. Formula cells take their display value from the cached
copy, which is None for files that were never opened in a spreadsheet app.

Writes and clears only touch the in-memory workbook; ``save()`` persists it.
openpyxl drops cached formula results on save, so formula cells read back
from a file saved here display None until the file is recalculated.

Cell-level hyperlink objects and styles are not part of the value/formula
contract and stay at their positions. Array formulas keep only their text:
they move as plain formulas and lose their spill range.
"""

__all__ = [
    "WorkbookError",
    "WorkbookDataSource",
]

logger = logging.getLogger(__name__)


class WorkbookError(Exception):
    """Raised when the workbook or the requested sheet cannot be opened."""


def _to_cell(raw: Any, data_type: str, cached: Any) -> Cell:
    if data_type == "f":
        if isinstance(raw, ArrayFormula):
            logger.warning(f"array formula over {raw.ref} is handled as a plain formula: {raw.text}")
            return Formula(text=raw.text or "", display=cached)
        return Formula(text=str(raw), display=cached)
    return Literal(raw)


class WorkbookDataSource:
    """TabularDataSource over one worksheet of an .xlsx file."""

    def __init__(self, path: Path, sheet_name: str | None = None) -> None:
        self.path = Path(path)
        try:
            self._wb = load_workbook(self.path)
            self._cached_wb = load_workbook(self.path, data_only=True)
        except (OSError, InvalidFileException, zipfile.BadZipFile, KeyError) as e:
            raise WorkbookError(f"cannot open workbook {self.path}: {e}") from e

        if sheet_name is None:
            self._ws = self._wb.active
            self._cached_ws = self._cached_wb[self._ws.title]
        else:
            if sheet_name not in self._wb.sheetnames:
                raise WorkbookError(
                    f"sheet '{sheet_name}' not found in {self.path.name}; available: {self._wb.sheetnames}"
                )
            self._ws = self._wb[sheet_name]
            self._cached_ws = self._cached_wb[sheet_name]
        self.dirty = False

    @property
    def label(self) -> str:
        return self._ws.title

    @property
    def sheet_names(self) -> list[str]:
        return list(self._wb.sheetnames)

    def read_grid(self) -> Grid:
        """Read the used region (``max_row`` x ``max_column``) as a Grid."""
        ws = self._ws
        grid: Grid = []
        for row_idx in range(1, ws.max_row + 1):
            row: list[Cell] = []
            for col_idx in range(1, ws.max_column + 1):
                cell = ws.cell(row=row_idx, column=col_idx)
                cached = self._cached_ws.cell(row=row_idx, column=col_idx).value
                row.append(_to_cell(cell.value, cell.data_type, cached))
            grid.append(row)
        logger.debug("read %s: %d rows x %d cols", self.label, ws.max_row, ws.max_column)
        return grid

    def write_region(self, top_row: int, left_col: int, rows: list[list[Cell]]) -> None:
        """Write cells starting at 0-based (top_row, left_col).

        The cached copy receives each cell's display value so that a later
        ``read_grid`` on this instance pairs moved formulas with their own values.
        """
        self.dirty = True
        with RowProgress(len(rows), description=f"Writing {self.label}") as progress:
            for r, row in enumerate(rows):
                for c, cell in enumerate(row):
                    target = self._ws.cell(row=top_row + r + 1, column=left_col + c + 1)
                    target.value = cell.content
                    if isinstance(cell, Literal) and target.data_type == "f":
                        # openpyxl binds any "=..." string as a formula
                        target.data_type = "s"
                    self._cached_ws.cell(row=top_row + r + 1, column=left_col + c + 1).value = cell.display
                progress.advance()

    def clear_region(self, top_row: int, left_col: int, rows: int, cols: int) -> None:
        self.dirty = True
        for r in range(top_row + 1, top_row + rows + 1):
            for c in range(left_col + 1, left_col + cols + 1):
                self._ws.cell(row=r, column=c).value = None
                self._cached_ws.cell(row=r, column=c).value = None

    def save(self, path: Path | None = None) -> Path:
        target = Path(path) if path is not None else self.path
        self._wb.save(target)
        self.dirty = False
        logger.debug("saved workbook %s", target)
        return target
