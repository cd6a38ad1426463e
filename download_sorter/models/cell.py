from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any, Union

"""Cell and Grid models for the download sorter.

A cell holds exactly one active representation: either a formula (authoritative
text such as ``=HYPERLINK("https://...", "App")``) or a literal scalar. The host
hands cells over as a pair (displayValue, formulaText); ``cell_from_pair`` folds
that pair into the tagged union so the "exactly one active" rule is structural.
"""

__all__ = [
    "Scalar",
    "Formula",
    "Literal",
    "Cell",
    "Grid",
    "cell_from_pair",
    "grid_from_arrays",
    "grid_to_arrays",
    "grid_shape",
]

Scalar = Union[str, int, float, bool, date, datetime, time, None]


@dataclass(frozen=True)
class Formula:
    """Formula cell. ``text`` is what gets written back; ``display`` is the
    rendered value the host last computed (may be None if never computed)."""
    text: str
    display: Scalar = None

    @property
    def content(self) -> str:
        return self.text

    @property
    def formula_text(self) -> str:
        return self.text


@dataclass(frozen=True)
class Literal:
    """Literal cell. ``Literal(None)`` is a truly empty cell."""
    value: Scalar = None

    @property
    def display(self) -> Scalar:
        return self.value

    @property
    def content(self) -> Scalar:
        return self.value

    @property
    def formula_text(self) -> str:
        return ""


Cell = Union[Formula, Literal]
Grid = list[list[Cell]]


def cell_from_pair(display_value: Any, formula_text: str | None) -> Cell:
    if formula_text:
        return Formula(text=formula_text, display=display_value)
    return Literal(display_value)


def grid_from_arrays(values: list[list[Any]], formulas: list[list[str]] | None = None) -> Grid:
    """Build a Grid from the host's two parallel 2-D arrays.

    ``formulas`` may be None (no formulas at all). Shapes must agree.
    """
    if formulas is not None and len(formulas) != len(values):
        raise ValueError(f"values has {len(values)} rows but formulas has {len(formulas)}")
    grid: Grid = []
    for r, row_values in enumerate(values):
        row_formulas = formulas[r] if formulas is not None else [""] * len(row_values)
        if len(row_formulas) != len(row_values):
            raise ValueError(f"row {r}: values/formulas width mismatch")
        grid.append([cell_from_pair(v, f) for v, f in zip(row_values, row_formulas)])
    grid_shape(grid)
    return grid


def grid_to_arrays(grid: Grid) -> tuple[list[list[Scalar]], list[list[str]]]:
    """Split a Grid into (values, formulas) arrays; ``""`` means no formula."""
    values = [[cell.display for cell in row] for row in grid]
    formulas = [[cell.formula_text for cell in row] for row in grid]
    return values, formulas


def grid_shape(grid: Grid) -> tuple[int, int]:
    """Return (rows, cols). Raises ValueError when rows differ in width."""
    if not grid:
        return (0, 0)
    width = len(grid[0])
    for i, row in enumerate(grid):
        if len(row) != width:
            raise ValueError(f"ragged grid: row {i} has {len(row)} cells, expected {width}")
    return (len(grid), width)
