from __future__ import annotations

import sys
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

"""Progress display for row writes with tqdm (TTY only).

Writes go cell by cell, so large sheets get a progress bar. In non-TTY
environments (CI, pipes) no bar is created to avoid ANSI control sequences
in captured output. Small writes below ``min_rows`` never show a bar.
"""

__all__ = [
    "RowProgress",
    "is_tty_enabled",
]

DEFAULT_MIN_ROWS = 200


def is_tty_enabled() -> bool:
    """Return True if stdout is a TTY and progress should be displayed."""
    return sys.stdout.isatty()


class RowProgress:
    """Row-level progress bar for region writes."""

    def __init__(
        self, total_rows: int, *, description: str = "Writing rows", min_rows: int = DEFAULT_MIN_ROWS
    ) -> None:
        self.total_rows = total_rows
        self.description = description
        self.current_row = 0

        self.enabled = total_rows >= min_rows and is_tty_enabled()
        self.pbar: TqdmType[Any] | None
        if self.enabled:
            self.pbar = tqdm(
                total=total_rows,
                desc=description,
                unit="row",
                disable=False,
                leave=False,
                position=0,
                ncols=80,
                ascii=True,
            )
        else:
            self.pbar = None

    def advance(self, rows: int = 1) -> None:
        self.current_row += rows
        if self.enabled and self.pbar is not None:
            self.pbar.update(rows)

    def close(self) -> None:
        if self.enabled and self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> RowProgress:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
