"""
Broadcasting and reshaping utilities for flat matrix buffers.

These functions hold the shape-compatibility rules shared by every
elementwise operation, plus the conversions between a flat buffer and
its logical 2D view.
"""

import numpy as np
from typing import Optional, Tuple

from agentsmith.matrix.enums import Broadcast, Layout


def broadcast_relation(
    shape: Tuple[int, int],
    other_shape: Tuple[int, int],
) -> Optional[Broadcast]:
    """
    Resolve how ``other_shape`` lines up with ``shape``.

    Parameters
    ----------
    shape : tuple
        (rows, cols) of the left operand
    other_shape : tuple
        (rows, cols) of the right operand

    Returns
    -------
    Broadcast or None
        EXACT, COLUMN or ROW, or None when the shapes are incompatible

    Examples
    --------
    >>> broadcast_relation((3, 4), (3, 1))
    <Broadcast.COLUMN: 1>
    >>> broadcast_relation((3, 4), (1, 4))
    <Broadcast.ROW: 2>
    >>> broadcast_relation((3, 4), (4, 3)) is None
    True
    """
    rows, cols = shape
    other_rows, other_cols = other_shape

    if other_rows == rows and other_cols == cols:
        return Broadcast.EXACT
    if other_rows == rows and other_cols == 1:
        return Broadcast.COLUMN
    if other_cols == cols and other_rows == 1:
        return Broadcast.ROW
    return None


def broadcast_steps(relation: Broadcast) -> Tuple[int, int]:
    """
    Row and column multipliers applied to the right operand's coordinates.

    A step of 0 pins that coordinate to 0 so a single vector entry is
    reused across the whole row or column.

    Parameters
    ----------
    relation : Broadcast
        Resolved relation

    Returns
    -------
    tuple
        (row_step, col_step)
    """
    if relation is Broadcast.COLUMN:
        return 1, 0
    if relation is Broadcast.ROW:
        return 0, 1
    return 1, 1


def to_2d(data: np.ndarray, rows: int, cols: int, layout: Layout) -> np.ndarray:
    """
    View a flat buffer as its logical (rows, cols) array.

    The result shares memory with ``data``; writes through it land in the
    buffer.

    Parameters
    ----------
    data : np.ndarray
        1D buffer with at least rows * cols entries
    rows : int
        Logical row count
    cols : int
        Logical column count
    layout : Layout
        How the buffer is ordered

    Returns
    -------
    np.ndarray
        2D view

    Examples
    --------
    >>> buf = np.arange(6, dtype=np.float32)
    >>> to_2d(buf, 2, 3, Layout.COLUMN_MAJOR)[0]
    array([0., 2., 4.], dtype=float32)
    """
    if data.ndim != 1:
        raise ValueError(f"Expected 1D array, got {data.ndim}D")

    return data[: rows * cols].reshape((rows, cols), order=layout.order)


def to_1d(arr: np.ndarray, layout: Layout = Layout.ROW_MAJOR) -> np.ndarray:
    """
    Flatten a 2D array into a buffer ordered by ``layout``.

    Parameters
    ----------
    arr : np.ndarray
        2D array
    layout : Layout
        ROW_MAJOR (default) or COLUMN_MAJOR

    Returns
    -------
    np.ndarray
        Flattened array (a copy unless the input is already contiguous
        in the requested order)
    """
    if arr.ndim != 2:
        raise ValueError(f"Expected 2D array, got {arr.ndim}D")

    return arr.ravel(order=layout.order)


def layout_of(arr: np.ndarray) -> Layout:
    """
    Pick the layout that lets ``arr`` be flattened without a copy.

    Parameters
    ----------
    arr : np.ndarray
        2D array

    Returns
    -------
    Layout
        COLUMN_MAJOR for Fortran-ordered arrays, ROW_MAJOR otherwise
    """
    if arr.flags.f_contiguous and not arr.flags.c_contiguous:
        return Layout.COLUMN_MAJOR
    return Layout.ROW_MAJOR
