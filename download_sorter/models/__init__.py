"""Domain models for the download sorter.

Cells and grids, the transient DataRow built during a sort, the single-slot
Snapshot and the outcome records returned by the controllers.
"""

from .cell import Cell, Formula, Grid, Literal, cell_from_pair, grid_from_arrays, grid_shape, grid_to_arrays
from .data_row import DataRow
from .outcome import ErrorKind, OperationOutcome, SortDirection
from .snapshot import Snapshot

__all__ = [
    # Grid models
    "Cell",
    "Formula",
    "Literal",
    "Grid",
    "cell_from_pair",
    "grid_from_arrays",
    "grid_to_arrays",
    "grid_shape",
    # Processing models
    "DataRow",
    "Snapshot",
    # Outcomes
    "ErrorKind",
    "OperationOutcome",
    "SortDirection",
]
