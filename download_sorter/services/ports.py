from __future__ import annotations

from typing import Protocol

from ..models.cell import Cell, Grid

"""Collaborator ports implemented by the host integration layer.

Controllers receive these handles at construction. Row/column addressing is
0-based here; converting to the host's 1-based ranges is the adapter's job.
"""

__all__ = [
    "TabularDataSource",
    "PropertyStore",
    "UserInteraction",
]


class TabularDataSource(Protocol):
    """Port for the sheet being sorted (values and formulas of its used region)."""

    @property
    def label(self) -> str:
        """Identifier of the data's origin, e.g. the sheet name."""
        ...

    def read_grid(self) -> Grid:
        ...

    def write_region(self, top_row: int, left_col: int, rows: list[list[Cell]]) -> None:
        """Write cells one by one: formula text for Formula cells, the value otherwise.

        Not transactional: a failure part way leaves earlier cells written.
        """
        ...

    def clear_region(self, top_row: int, left_col: int, rows: int, cols: int) -> None:
        ...


class PropertyStore(Protocol):
    """Key-value persistence scoped to one data source."""

    def set_property(self, key: str, value: str) -> None:
        ...

    def get_property(self, key: str) -> str | None:
        ...


class UserInteraction(Protocol):
    def alert(self, title: str, message: str) -> None:
        ...

    def confirm(self, title: str, message: str) -> bool:
        ...

    def show_info_panel(self, html: str) -> None:
        ...
