"""Exceptions raised by matrix operations."""


class MatrixError(Exception):
    """Base class for all matrix errors."""


class OutOfRangeError(MatrixError, IndexError):
    """A (row, col) coordinate falls outside the matrix."""

    def __init__(self, row: int, col: int, rows: int, cols: int):
        self.row = row
        self.col = col
        super().__init__(
            f"Index ({row}, {col}) out of range for matrix of shape ({rows}, {cols})"
        )


class ShapeMismatchError(MatrixError, ValueError):
    """Operand shapes are incompatible for the requested operation."""


class InvalidReshapeError(MatrixError, ValueError):
    """New dimensions do not preserve the element count."""


class InvalidConstructionError(MatrixError, ValueError):
    """A matrix cannot be built from the given inputs."""
