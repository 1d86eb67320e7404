"""
AgentSmith - dense 2D matrices over flat buffers

Row-major and column-major storage, zero-copy transposition and
row/column vector broadcasting.
"""

__version__ = "0.1.0"

from agentsmith.matrix import (
    Matrix,
    Layout,
    MatrixError,
    OutOfRangeError,
    ShapeMismatchError,
    InvalidReshapeError,
    InvalidConstructionError,
    add,
    sub,
    mul_each,
    scale,
    dot,
    multiply,
)
from agentsmith.utils.config import Config

__all__ = [
    "Matrix",
    "Layout",
    "Config",
    "MatrixError",
    "OutOfRangeError",
    "ShapeMismatchError",
    "InvalidReshapeError",
    "InvalidConstructionError",
    "add",
    "sub",
    "mul_each",
    "scale",
    "dot",
    "multiply",
]
