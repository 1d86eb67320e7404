"""
Dense 2D matrix over a flat buffer.

A matrix is addressed by (row, col) under one of two layouts. Transposition
flips the layout on an alias instead of moving data, so every operation
goes through layout-aware addressing. Elementwise arithmetic accepts an
operand of the same shape, a (rows, 1) column vector or a (1, cols) row
vector.

Buffers shared by aliases are not thread-safe. Independently owned
matrices are safe when only one thread at a time uses each of them.
"""

import functools
import logging
import numbers
import types
from collections import namedtuple
from typing import Any, Callable, Optional, Sequence

import numpy as np
import pandas as pd

from agentsmith.base.array_wrapper import ArrayWrapper
from agentsmith.base.reshape_fns import (
    broadcast_relation,
    broadcast_steps,
    layout_of,
    to_1d,
    to_2d,
)
from agentsmith.matrix import kernels
from agentsmith.matrix.enums import BinaryOp, Broadcast, Layout
from agentsmith.matrix.errors import (
    InvalidConstructionError,
    InvalidReshapeError,
    OutOfRangeError,
    ShapeMismatchError,
)
from agentsmith.utils.config import Config


logger = logging.getLogger(__name__)

Shape = namedtuple("Shape", ["rows", "cols"])


def _default_dtype() -> np.dtype:
    return np.dtype(Config.get("matrix.dtype", "float32"))


def _check_dim(value: Any, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise InvalidConstructionError(f"{name} must be an integer, got {value!r}")
    if value <= 0:
        raise InvalidConstructionError(f"{name} must be positive, got {value}")
    return int(value)


def _readable_source(dst: np.ndarray, src: np.ndarray) -> np.ndarray:
    """
    Return ``src``, copied if writes to ``dst`` could change it mid-loop.

    Identical views (same start address and strides) are safe for
    index-by-index loops; any other overlap is not.
    """
    if not np.shares_memory(dst, src):
        return src
    same_view = (
        dst.__array_interface__["data"][0] == src.__array_interface__["data"][0]
        and dst.strides == src.strides
    )
    return src if same_view else src.copy()


def _is_sequence(obj: Any) -> bool:
    if isinstance(obj, (str, bytes)):
        return False
    return isinstance(obj, (Sequence, np.ndarray))


def _flatten_rows(nested: Sequence[Sequence[float]]):
    """Validate a nested array-of-rows and return (rows, cols, flat list)."""
    if not _is_sequence(nested):
        raise InvalidConstructionError("Input must be a sequence of rows")
    if len(nested) == 0:
        raise InvalidConstructionError("Input must contain at least one row")

    cols = None
    flat = []
    for i, row in enumerate(nested):
        if not _is_sequence(row):
            raise InvalidConstructionError(f"Row {i} is not a sequence")
        if cols is None:
            cols = len(row)
        elif len(row) != cols:
            raise InvalidConstructionError(
                f"Row {i} has {len(row)} entries, expected {cols}"
            )
        flat.extend(row)

    if cols == 0:
        raise InvalidConstructionError("Rows must contain at least one entry")
    return len(nested), cols, flat


def _to_buffer(values: Any, dtype: np.dtype) -> np.ndarray:
    """Convert ``values`` to a numpy buffer, reporting bad entries as construction errors."""
    try:
        return np.asarray(values, dtype=dtype)
    except (TypeError, ValueError) as e:
        raise InvalidConstructionError(f"Cannot convert entries to {dtype}: {e}") from e


def _parse_layout(value: Any) -> Layout:
    try:
        return Layout.parse(value)
    except ValueError as e:
        raise InvalidConstructionError(str(e)) from e


class inplace_or_copy:
    """
    Descriptor for in-place operators that also have a copying form.

    Accessed on an instance it is the in-place method: ``a.add(b)`` mutates
    and returns ``a``. Accessed on the class it is the non-mutating
    counterpart: ``Matrix.add(a, b)`` clones ``a`` first and returns the
    clone.
    """

    def __init__(self, func: Callable):
        self._func = func
        self.__doc__ = func.__doc__
        self.__name__ = func.__name__

    def __get__(self, instance, owner):
        if instance is None:
            func = self._func

            @functools.wraps(func)
            def copying(first, *args, **kwargs):
                return func(first.clone(), *args, **kwargs)

            return copying
        return types.MethodType(self._func, instance)


class Matrix:
    """
    Fixed-shape 2D numeric container over a flat buffer.

    Attributes
    ----------
    rows, cols : int
        Logical shape
    length : int
        rows * cols
    data : np.ndarray
        Flat buffer, length >= rows * cols
    layout : Layout
        How (row, col) maps to a buffer offset
    owns_data : bool
        False when the buffer is shared with another matrix or the caller
    """

    __hash__ = None

    def __init__(
        self,
        rows: int,
        cols: int,
        data: Optional[Any] = None,
        layout: Optional[Layout] = None,
    ):
        """
        Parameters
        ----------
        rows, cols : int
            Positive dimensions
        data : array-like, optional
            Flat buffer with at least rows * cols entries. numpy arrays of
            the configured dtype are adopted without copying. Zero-filled
            when omitted.
        layout : Layout or str, optional
            Buffer layout, defaults to ``Config`` "matrix.layout"
        """
        self.rows = _check_dim(rows, "rows")
        self.cols = _check_dim(cols, "cols")
        self.length = self.rows * self.cols
        if layout is None:
            layout = Config.get("matrix.layout", "row_major")
        self.layout = _parse_layout(layout)

        dtype = _default_dtype()
        if data is None:
            self.data = np.zeros(self.length, dtype=dtype)
            self.owns_data = True
        else:
            buf = _to_buffer(data, dtype)
            if buf.ndim != 1:
                raise InvalidConstructionError(
                    f"Buffer must be 1D, got {buf.ndim}D"
                )
            if buf.shape[0] < self.length:
                raise InvalidConstructionError(
                    f"Buffer of length {buf.shape[0]} cannot hold "
                    f"{self.rows}x{self.cols} matrix"
                )
            self.data = buf
            self.owns_data = buf is not data
            if not self.owns_data:
                logger.debug("Adopted caller buffer of length %d", buf.shape[0])

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_array(cls, nested: Sequence[Sequence[float]]) -> "Matrix":
        """
        Build a row-major matrix from a nested array of rows.

        Parameters
        ----------
        nested : sequence of sequences
            Rectangular rows, e.g. ``[[1, 2], [3, 4]]``

        Returns
        -------
        Matrix
        """
        rows, cols, flat = _flatten_rows(nested)
        return cls(rows, cols, _to_buffer(flat, _default_dtype()), Layout.ROW_MAJOR)._own()

    from_rows = from_array

    @classmethod
    def from_col_vectors(cls, vectors: Sequence["Matrix"]) -> "Matrix":
        """
        Stack (n, 1) column vectors side by side into an (n, len(vectors)) matrix.

        Parameters
        ----------
        vectors : sequence of Matrix
            Column vectors with equal row counts

        Returns
        -------
        Matrix
        """
        if not _is_sequence(vectors):
            raise InvalidConstructionError("Input must be a sequence of column vectors")
        if len(vectors) == 0:
            raise InvalidConstructionError("Input must contain at least one vector")

        rows = None
        for i, vec in enumerate(vectors):
            if not isinstance(vec, Matrix) or vec.cols != 1:
                raise InvalidConstructionError(f"Vector {i} is not a column vector")
            if rows is None:
                rows = vec.rows
            elif vec.rows != rows:
                raise InvalidConstructionError(
                    f"Vector {i} has {vec.rows} rows, expected {rows}"
                )

        result = cls(rows, len(vectors))
        result.set_each_cell(lambda row, col: vectors[col].get(row, 0))
        return result

    from_column_vectors = from_col_vectors

    @classmethod
    def from_numpy(cls, arr: np.ndarray, layout: Optional[Layout] = None) -> "Matrix":
        """
        Copy a 2D numpy array into a new matrix.

        Parameters
        ----------
        arr : np.ndarray
            2D array
        layout : Layout, optional
            Target layout. Defaults to whichever layout ``arr`` already has.

        Returns
        -------
        Matrix
        """
        arr = np.asarray(arr)
        if arr.ndim != 2 or arr.size == 0:
            raise InvalidConstructionError(
                f"Expected non-empty 2D array, got shape {arr.shape}"
            )
        layout = layout_of(arr) if layout is None else _parse_layout(layout)
        flat = _to_buffer(to_1d(arr, layout), _default_dtype()).copy()
        return cls(arr.shape[0], arr.shape[1], flat, layout)._own()

    @classmethod
    def from_frame(cls, df: pd.DataFrame) -> "Matrix":
        """Copy the values of a DataFrame into a new row-major matrix."""
        return cls.from_numpy(df.to_numpy(dtype=_default_dtype()), Layout.ROW_MAJOR)

    def _own(self) -> "Matrix":
        self.owns_data = True
        return self

    # ------------------------------------------------------------------
    # Copy semantics
    # ------------------------------------------------------------------

    def _copy_properties(self, other: "Matrix") -> None:
        self.rows = other.rows
        self.cols = other.cols
        self.length = other.length
        self.layout = other.layout

    def clone(self) -> "Matrix":
        """Deep copy with an independent buffer and the same layout."""
        new = Matrix.__new__(Matrix)
        new._copy_properties(self)
        new.data = self.data.copy()
        new.owns_data = True
        return new

    def alias(self) -> "Matrix":
        """Shallow copy sharing this matrix's buffer, shape and layout."""
        new = Matrix.__new__(Matrix)
        new._copy_properties(self)
        new.data = self.data
        new.owns_data = False
        return new

    def shares_buffer(self, other: "Matrix") -> bool:
        """True when both matrices read and write the same memory."""
        return np.shares_memory(self.data, other.data)

    # ------------------------------------------------------------------
    # Addressing
    # ------------------------------------------------------------------

    def _offset(self, row: int, col: int) -> int:
        if not (0 <= row < self.rows and 0 <= col < self.cols):
            raise OutOfRangeError(row, col, self.rows, self.cols)
        return kernels.flat_offset(row, col, self.rows, self.cols, self.layout.is_row_major)

    def get(self, row: int, col: int) -> float:
        """Value at (row, col)."""
        return float(self.data[self._offset(row, col)])

    def set(self, row: int, col: int, value: float) -> "Matrix":
        """Store ``value`` at (row, col) and return self."""
        self.data[self._offset(row, col)] = value
        return self

    def __getitem__(self, key):
        row, col = key
        return self.get(row, col)

    def __setitem__(self, key, value):
        row, col = key
        self.set(row, col, value)

    def map(self, func: Callable[[float], float]) -> "Matrix":
        """Replace every element with ``func(element)``, in buffer order."""
        data = self.data
        for i in range(self.length):
            data[i] = func(float(data[i]))
        return self

    def for_each_cell(self, func: Callable[[int, int], Any]) -> "Matrix":
        """Call ``func(row, col)`` for every cell, row by row."""
        for row in range(self.rows):
            for col in range(self.cols):
                func(row, col)
        return self

    def set_each_cell(self, func: Callable[[int, int], float]) -> "Matrix":
        """Set every cell to ``func(row, col)``."""
        for row in range(self.rows):
            for col in range(self.cols):
                self.set(row, col, func(row, col))
        return self

    def zeros(self) -> "Matrix":
        self.data[: self.length] = 0
        return self

    def set_array(self, nested: Sequence[Sequence[float]]) -> "Matrix":
        """
        Replace the buffer with a fresh row-major copy of ``nested``.

        The nested rows must match the current shape. Aliases created
        before the call keep the old buffer.
        """
        rows, cols, flat = _flatten_rows(nested)
        if (rows, cols) != (self.rows, self.cols):
            raise ShapeMismatchError(
                f"Cannot set {rows}x{cols} array into {self.rows}x{self.cols} matrix"
            )
        self.data = _to_buffer(flat, self.data.dtype)
        self.layout = Layout.ROW_MAJOR
        self.owns_data = True
        logger.debug("Replaced buffer of %dx%d matrix", self.rows, self.cols)
        return self

    # ------------------------------------------------------------------
    # Shape
    # ------------------------------------------------------------------

    @property
    def shape(self) -> Shape:
        return Shape(self.rows, self.cols)

    def reshape(self, rows: int, cols: int) -> "Matrix":
        """
        Change the logical shape in place, keeping buffer and layout.

        Raises
        ------
        InvalidReshapeError
            If rows * cols differs from the current element count
        """
        if (
            isinstance(rows, bool) or isinstance(cols, bool)
            or not isinstance(rows, numbers.Integral)
            or not isinstance(cols, numbers.Integral)
            or rows <= 0 or cols <= 0
        ):
            raise InvalidReshapeError(f"Invalid dimensions ({rows}, {cols})")
        if rows * cols != self.length:
            raise InvalidReshapeError(
                f"Cannot reshape {self.rows}x{self.cols} matrix into {rows}x{cols}"
            )
        self.rows = int(rows)
        self.cols = int(cols)
        return self

    def transpose(self) -> "Matrix":
        """Alias with rows and cols swapped and the layout flipped. No data moves."""
        alias = self.alias()
        alias.rows, alias.cols = self.cols, self.rows
        alias.layout = self.layout.flipped()
        logger.debug(
            "Transposed %dx%d %s matrix", self.rows, self.cols, self.layout.name
        )
        return alias

    t = transpose

    @property
    def T(self) -> "Matrix":
        return self.transpose()

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    def _relation(self, mat: "Matrix", allowed=None) -> Broadcast:
        if not isinstance(mat, Matrix):
            raise TypeError(f"Expected Matrix operand, got {type(mat).__name__}")
        relation = broadcast_relation(self.shape, mat.shape)
        if relation is None or (allowed is not None and relation not in allowed):
            raise ShapeMismatchError(
                f"Shape {tuple(mat.shape)} does not match {tuple(self.shape)}"
            )
        return relation

    def _combine(self, mat: "Matrix", op: BinaryOp) -> "Matrix":
        relation = self._relation(mat)
        src = _readable_source(self.data, mat.data)

        if relation is Broadcast.EXACT and self.layout is mat.layout:
            logger.debug("%s: flat path over %d elements", op.name, self.length)
            kernels.combine_flat(self.data, src, self.length, int(op))
            return self

        if src is mat.data and np.shares_memory(self.data, src):
            # offsets differ per operand on the cell path
            src = src.copy()
        row_step, col_step = broadcast_steps(relation)
        logger.debug(
            "%s: cell path (%s, %s vs %s)",
            op.name, relation.name, self.layout.name, mat.layout.name,
        )
        kernels.combine_cells(
            self.data, self.rows, self.cols, self.layout.is_row_major,
            src, mat.rows, mat.cols, mat.layout.is_row_major,
            row_step, col_step, int(op),
        )
        return self

    @inplace_or_copy
    def add(self, mat: "Matrix") -> "Matrix":
        """Add ``mat`` (same shape, row vector or column vector)."""
        return self._combine(mat, BinaryOp.ADD)

    @inplace_or_copy
    def sub(self, mat: "Matrix") -> "Matrix":
        """Subtract ``mat`` (same shape, row vector or column vector)."""
        return self._combine(mat, BinaryOp.SUB)

    @inplace_or_copy
    def mul_each(self, mat: "Matrix") -> "Matrix":
        """Multiply elementwise by ``mat`` (same shape, row vector or column vector)."""
        return self._combine(mat, BinaryOp.MUL)

    @inplace_or_copy
    def times(self, factor: float) -> "Matrix":
        """Scale every element by ``factor``."""
        kernels.scale_flat(self.data, self.length, float(factor))
        return self

    scale = times

    def dot(self, mat: "Matrix") -> float:
        """
        Inner product: sum of ``self[r, c] * mat[r, c]`` over all cells.

        Shapes must match exactly; vectors are not broadcast.
        """
        self._relation(mat, allowed=(Broadcast.EXACT,))
        if self.layout is mat.layout:
            return float(kernels.dot_flat(self.data, mat.data, self.length))
        return float(kernels.dot_cells(
            self.data, mat.data, self.rows, self.cols,
            self.layout.is_row_major, mat.layout.is_row_major,
        ))

    def multiply(self, mat: "Matrix") -> "Matrix":
        """
        Matrix product, returned as a new row-major matrix.

        Works as ``Matrix.multiply(mat1, mat2)`` or ``mat1.multiply(mat2)``.
        """
        if not isinstance(mat, Matrix):
            raise TypeError(f"Expected Matrix operand, got {type(mat).__name__}")
        if self.cols != mat.rows:
            raise ShapeMismatchError(
                f"Cannot multiply {self.rows}x{self.cols} by {mat.rows}x{mat.cols}"
            )
        result = Matrix(self.rows, mat.cols, layout=Layout.ROW_MAJOR)
        kernels.matmul(
            result.data,
            self.data, self.rows, self.cols, self.layout.is_row_major,
            mat.data, mat.cols, mat.layout.is_row_major,
        )
        return result

    mul = multiply

    # ------------------------------------------------------------------
    # Comparison
    # ------------------------------------------------------------------

    def _matches(self, mat: "Matrix", tolerance: float, exact: bool) -> bool:
        self._relation(mat, allowed=(Broadcast.EXACT,))
        if self.layout is mat.layout:
            return bool(kernels.match_flat(self.data, mat.data, self.length, tolerance, exact))
        return bool(kernels.match_cells(
            self.data, mat.data, self.rows, self.cols,
            self.layout.is_row_major, mat.layout.is_row_major,
            tolerance, exact,
        ))

    def equals(self, mat: "Matrix") -> bool:
        """Exact cell-by-cell equality. Shapes must match."""
        return self._matches(mat, 0.0, True)

    def nearly_equals(self, mat: "Matrix", tolerance: Optional[float] = None) -> bool:
        """
        Cell-by-cell equality within ``tolerance``.

        Two values match when ``|a - b| < tolerance`` (strict). The default
        comes from ``Config`` "compare.tolerance" (0.01).
        """
        if tolerance is None:
            tolerance = Config.get("compare.tolerance", 0.01)
        return self._matches(mat, float(tolerance), False)

    # ------------------------------------------------------------------
    # Operators
    # ------------------------------------------------------------------

    def __add__(self, other):
        if not isinstance(other, Matrix):
            return NotImplemented
        return Matrix.add(self, other)

    def __iadd__(self, other):
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other):
        if not isinstance(other, Matrix):
            return NotImplemented
        return Matrix.sub(self, other)

    def __isub__(self, other):
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.sub(other)

    def __mul__(self, other):
        if isinstance(other, Matrix):
            return Matrix.mul_each(self, other)
        if isinstance(other, numbers.Real):
            return Matrix.times(self, other)
        return NotImplemented

    def __rmul__(self, other):
        if isinstance(other, numbers.Real):
            return Matrix.times(self, other)
        return NotImplemented

    def __imul__(self, other):
        if isinstance(other, Matrix):
            return self.mul_each(other)
        if isinstance(other, numbers.Real):
            return self.times(other)
        return NotImplemented

    def __matmul__(self, other):
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.multiply(other)

    def __eq__(self, other):
        if not isinstance(other, Matrix):
            return NotImplemented
        if self.shape != other.shape:
            return False
        return self.equals(other)

    # ------------------------------------------------------------------
    # Interop
    # ------------------------------------------------------------------

    def to_numpy(self) -> np.ndarray:
        """Logical (rows, cols) view of the buffer. Writes go through."""
        return to_2d(self.data, self.rows, self.cols, self.layout)

    def to_list(self):
        return self.to_numpy().tolist()

    def to_frame(self, index: Optional[pd.Index] = None, columns: Optional[pd.Index] = None) -> pd.DataFrame:
        """
        Labelled DataFrame copy of the logical contents.

        Parameters
        ----------
        index : pd.Index, optional
            Row labels, defaults to a RangeIndex
        columns : pd.Index, optional
            Column labels, defaults to a RangeIndex
        """
        wrapper = ArrayWrapper.from_shape(self.shape, index=index, columns=columns)
        return wrapper.wrap(self.to_numpy().copy())

    def __repr__(self) -> str:
        return (
            f"Matrix(rows={self.rows}, cols={self.cols}, "
            f"layout={self.layout.name}, owns_data={self.owns_data})"
        )
