"""Dense 2D matrix with dual-layout addressing and broadcast arithmetic."""

from agentsmith.matrix.base import Matrix, Shape
from agentsmith.matrix.enums import BinaryOp, Broadcast, Layout
from agentsmith.matrix.errors import (
    MatrixError,
    OutOfRangeError,
    ShapeMismatchError,
    InvalidReshapeError,
    InvalidConstructionError,
)
from agentsmith.matrix.ops import add, sub, mul_each, scale, dot, multiply

__all__ = [
    "Matrix",
    "Shape",
    "Layout",
    "Broadcast",
    "BinaryOp",
    # Errors
    "MatrixError",
    "OutOfRangeError",
    "ShapeMismatchError",
    "InvalidReshapeError",
    "InvalidConstructionError",
    # Non-mutating arithmetic
    "add",
    "sub",
    "mul_each",
    "scale",
    "dot",
    "multiply",
]
