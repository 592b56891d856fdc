"""Formatting of result tables as fixed-width text."""

from __future__ import annotations

from typing import Sequence


class RecordPrinter:
    """Renders rows of a fixed number of columns as boxed text lines."""

    COL_WIDTH = 16

    def __init__(self, num_cols: int) -> None:
        if num_cols <= 0:
            raise ValueError("number of columns must be positive")
        self.num_cols = num_cols

    def separator(self) -> str:
        """Return a horizontal separator line."""
        return ("+" + "-" * (self.COL_WIDTH + 2)) * self.num_cols + "+\n"

    def record(self, values: Sequence[str]) -> str:
        """Return one row; values longer than the column width are truncated."""
        if len(values) != self.num_cols:
            raise ValueError(f"expected {self.num_cols} values, got {len(values)}")
        cells = []
        for value in values:
            if len(value) > self.COL_WIDTH:
                value = value[: self.COL_WIDTH - 3] + "..."
            cells.append(f"| {value:>{self.COL_WIDTH}} ")
        return "".join(cells) + "|\n"

    @staticmethod
    def record_count(num_rec: int) -> str:
        """Return the trailing record-count line."""
        return f"Total record(s): {num_rec}\n"