"""Enumerations for buffer layouts, broadcast relations and elementwise ops."""

from enum import IntEnum


class Layout(IntEnum):
    """Physical ordering of a matrix's flat buffer."""

    ROW_MAJOR = 0  # consecutive offsets walk along a row
    COLUMN_MAJOR = 1  # consecutive offsets walk down a column

    @property
    def is_row_major(self) -> bool:
        return self is Layout.ROW_MAJOR

    @property
    def order(self) -> str:
        """numpy order code ('C' or 'F')."""
        return "C" if self is Layout.ROW_MAJOR else "F"

    def flipped(self) -> "Layout":
        """Layout seen through a transpose."""
        if self is Layout.ROW_MAJOR:
            return Layout.COLUMN_MAJOR
        return Layout.ROW_MAJOR

    @classmethod
    def parse(cls, value) -> "Layout":
        """Accept a Layout, its name, or a numpy order code."""
        if isinstance(value, Layout):
            return value
        key = str(value).strip().lower()
        if key in ("row_major", "row", "c"):
            return cls.ROW_MAJOR
        if key in ("column_major", "col_major", "column", "col", "f"):
            return cls.COLUMN_MAJOR
        raise ValueError(f"Unknown layout: {value!r}")


class Broadcast(IntEnum):
    """How a second operand lines up with the first."""

    EXACT = 0  # same shape
    COLUMN = 1  # (rows, 1) column vector
    ROW = 2  # (1, cols) row vector


class BinaryOp(IntEnum):
    """Elementwise combining functions understood by the kernels."""

    ADD = 0
    SUB = 1
    MUL = 2
