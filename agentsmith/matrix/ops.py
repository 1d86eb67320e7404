"""
Non-mutating matrix arithmetic.

Every function leaves its operands untouched and returns a new matrix
(or a float for ``dot``).
"""

from agentsmith.matrix.base import Matrix


def add(mat1: Matrix, mat2: Matrix) -> Matrix:
    """``mat1 + mat2`` with row/column vector broadcasting."""
    return Matrix.add(mat1, mat2)


def sub(mat1: Matrix, mat2: Matrix) -> Matrix:
    """``mat1 - mat2`` with row/column vector broadcasting."""
    return Matrix.sub(mat1, mat2)


def mul_each(mat1: Matrix, mat2: Matrix) -> Matrix:
    """Elementwise product with row/column vector broadcasting."""
    return Matrix.mul_each(mat1, mat2)


def scale(mat: Matrix, factor: float) -> Matrix:
    return Matrix.times(mat, factor)


def dot(mat1: Matrix, mat2: Matrix) -> float:
    return mat1.dot(mat2)


def multiply(mat1: Matrix, mat2: Matrix) -> Matrix:
    """Matrix product of shapes (n, k) and (k, m)."""
    return mat1.multiply(mat2)
