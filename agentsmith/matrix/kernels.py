"""
Compiled loops behind the matrix addressing layer and arithmetic engine.

Includes:
- Offset translation for row-major and column-major buffers
- Elementwise combine over flat buffers and over logical cells
- Scaling, inner product and matrix product
- Exact and tolerance-based comparison

Op codes are the integer values of ``BinaryOp``.
"""

import numpy as np
import numba


OP_ADD = 0
OP_SUB = 1
OP_MUL = 2


@numba.jit(nopython=True, cache=True)
def flat_offset(row: int, col: int, rows: int, cols: int, row_major: bool) -> int:
    """
    Translate a logical coordinate into a buffer offset.

    Parameters
    ----------
    row, col : int
        Logical coordinate (assumed in range)
    rows, cols : int
        Logical shape
    row_major : bool
        True for row-major buffers, False for column-major

    Returns
    -------
    int
        Offset into the flat buffer

    Examples
    --------
    >>> flat_offset(1, 2, 3, 4, True)
    6
    >>> flat_offset(1, 2, 3, 4, False)
    7
    """
    if row_major:
        return row * cols + col
    return col * rows + row


@numba.jit(nopython=True, cache=True)
def apply_op(a: float, b: float, op: int) -> float:
    """Combine two scalars with the function selected by ``op``."""
    if op == OP_ADD:
        return a + b
    elif op == OP_SUB:
        return a - b
    return a * b


@numba.jit(nopython=True, cache=True)
def combine_flat(dst: np.ndarray, src: np.ndarray, n: int, op: int) -> None:
    """
    Combine two equally laid out buffers index-by-index, writing into ``dst``.

    Parameters
    ----------
    dst : np.ndarray
        Left operand buffer, updated in place
    src : np.ndarray
        Right operand buffer
    n : int
        Number of logical elements
    op : int
        BinaryOp code
    """
    for i in range(n):
        dst[i] = apply_op(dst[i], src[i], op)


@numba.jit(nopython=True, cache=True)
def combine_cells(
    dst: np.ndarray,
    rows: int,
    cols: int,
    dst_row_major: bool,
    src: np.ndarray,
    src_rows: int,
    src_cols: int,
    src_row_major: bool,
    row_step: int,
    col_step: int,
    op: int,
) -> None:
    """
    Combine over logical cells, each operand translating its own offsets.

    The right operand is read at ``(row * row_step, col * col_step)``, so a
    step of 0 broadcasts a column vector (col_step) or row vector (row_step).

    Parameters
    ----------
    dst : np.ndarray
        Left operand buffer, updated in place
    rows, cols : int
        Left operand shape
    dst_row_major : bool
        Left operand layout
    src : np.ndarray
        Right operand buffer
    src_rows, src_cols : int
        Right operand shape
    src_row_major : bool
        Right operand layout
    row_step, col_step : int
        1 to follow the left operand's coordinate, 0 to pin it
    op : int
        BinaryOp code
    """
    for row in range(rows):
        src_row = row * row_step
        for col in range(cols):
            d = flat_offset(row, col, rows, cols, dst_row_major)
            s = flat_offset(src_row, col * col_step, src_rows, src_cols, src_row_major)
            dst[d] = apply_op(dst[d], src[s], op)


@numba.jit(nopython=True, cache=True)
def scale_flat(data: np.ndarray, n: int, factor: float) -> None:
    """Multiply the first ``n`` buffer entries by ``factor`` in place."""
    for i in range(n):
        data[i] = data[i] * factor


@numba.jit(nopython=True, cache=True)
def dot_flat(a: np.ndarray, b: np.ndarray, n: int) -> float:
    """Inner product of two equally laid out buffers."""
    total = 0.0
    for i in range(n):
        total += np.float64(a[i]) * np.float64(b[i])
    return total


@numba.jit(nopython=True, cache=True)
def dot_cells(
    a: np.ndarray,
    b: np.ndarray,
    rows: int,
    cols: int,
    a_row_major: bool,
    b_row_major: bool,
) -> float:
    """Inner product over logical cells of two differently laid out buffers."""
    total = 0.0
    for row in range(rows):
        for col in range(cols):
            x = a[flat_offset(row, col, rows, cols, a_row_major)]
            y = b[flat_offset(row, col, rows, cols, b_row_major)]
            total += np.float64(x) * np.float64(y)
    return total


@numba.jit(nopython=True, cache=True)
def matmul(
    out: np.ndarray,
    a: np.ndarray,
    a_rows: int,
    a_cols: int,
    a_row_major: bool,
    b: np.ndarray,
    b_cols: int,
    b_row_major: bool,
) -> None:
    """
    Matrix product written into a row-major ``out`` of shape (a_rows, b_cols).

    Parameters
    ----------
    out : np.ndarray
        Result buffer, length >= a_rows * b_cols
    a : np.ndarray
        Left operand buffer, shape (a_rows, a_cols)
    a_rows, a_cols : int
        Left operand shape
    a_row_major : bool
        Left operand layout
    b : np.ndarray
        Right operand buffer, shape (a_cols, b_cols)
    b_cols : int
        Right operand column count
    b_row_major : bool
        Right operand layout
    """
    for row in range(a_rows):
        for col in range(b_cols):
            total = 0.0
            for i in range(a_cols):
                x = a[flat_offset(row, i, a_rows, a_cols, a_row_major)]
                y = b[flat_offset(i, col, a_cols, b_cols, b_row_major)]
                total += np.float64(x) * np.float64(y)
            out[row * b_cols + col] = total


@numba.jit(nopython=True, cache=True)
def values_match(a: float, b: float, tolerance: float, exact: bool) -> bool:
    """Exact equality, or strict ``|a - b| < tolerance``."""
    if exact:
        return a == b
    return abs(np.float64(a) - np.float64(b)) < tolerance


@numba.jit(nopython=True, cache=True)
def match_flat(
    a: np.ndarray,
    b: np.ndarray,
    n: int,
    tolerance: float,
    exact: bool,
) -> bool:
    """Compare two equally laid out buffers entry-by-entry."""
    for i in range(n):
        if not values_match(a[i], b[i], tolerance, exact):
            return False
    return True


@numba.jit(nopython=True, cache=True)
def match_cells(
    a: np.ndarray,
    b: np.ndarray,
    rows: int,
    cols: int,
    a_row_major: bool,
    b_row_major: bool,
    tolerance: float,
    exact: bool,
) -> bool:
    """Compare two differently laid out buffers cell-by-cell."""
    for row in range(rows):
        for col in range(cols):
            x = a[flat_offset(row, col, rows, cols, a_row_major)]
            y = b[flat_offset(row, col, rows, cols, b_row_major)]
            if not values_match(x, y, tolerance, exact):
                return False
    return True
