from __future__ import annotations

from dataclasses import dataclass

from .cell import Cell

"""DataRow model: one non-header row during a single sort invocation."""

__all__ = [
    "DataRow",
]


@dataclass(frozen=True)
class DataRow:
    """Transient row built per sort and discarded once the new order is written.

    ``original_index`` is 0-based and excludes the header row.
    """
    original_index: int
    cells: list[Cell]
    sort_key: float
