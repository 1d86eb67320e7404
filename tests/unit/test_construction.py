"""
Unit tests for matrix construction and buffer ownership.
"""

import numpy as np
import pandas as pd
import pytest

from agentsmith import (
    Config,
    InvalidConstructionError,
    Layout,
    Matrix,
    ShapeMismatchError,
)


class TestConstructor:
    """Tests for Matrix(rows, cols, data, layout)."""

    def test_zero_filled(self):
        m = Matrix(3, 2)
        assert m.shape == (3, 2)
        assert m.length == 6
        assert m.data.dtype == np.float32
        assert m.data.shape == (6,)
        assert not m.data.any()
        assert m.owns_data
        assert m.layout is Layout.ROW_MAJOR

    def test_adopts_float32_buffer(self):
        """A float32 numpy buffer is used as-is and marked shared."""
        buf = np.arange(4, dtype=np.float32)
        m = Matrix(2, 2, buf)
        assert m.data is buf
        assert not m.owns_data
        m.set(0, 0, 7.0)
        assert buf[0] == 7.0

    def test_copies_other_inputs(self):
        """Lists and other dtypes are converted into an owned buffer."""
        m = Matrix(2, 2, [1, 2, 3, 4])
        assert m.owns_data
        assert m.get(1, 1) == 4.0

        src = np.arange(4, dtype=np.float64)
        m = Matrix(2, 2, src)
        assert m.data is not src
        assert m.data.dtype == np.float32

    def test_longer_buffer_allowed(self):
        m = Matrix(2, 2, np.zeros(10, dtype=np.float32))
        assert m.length == 4

    def test_short_buffer_rejected(self):
        with pytest.raises(InvalidConstructionError):
            Matrix(2, 3, [1, 2, 3])

    def test_2d_buffer_rejected(self):
        with pytest.raises(InvalidConstructionError):
            Matrix(2, 2, np.zeros((2, 2), dtype=np.float32))

    @pytest.mark.parametrize("rows,cols", [(0, 3), (3, 0), (-1, 2), (2.5, 2), (True, 2)])
    def test_invalid_dims(self, rows, cols):
        with pytest.raises(InvalidConstructionError):
            Matrix(rows, cols)

    def test_numpy_integer_dims(self):
        m = Matrix(np.int64(2), np.int32(3))
        assert m.shape == (2, 3)

    def test_layout_by_name(self):
        assert Matrix(2, 2, layout="column_major").layout is Layout.COLUMN_MAJOR
        assert Matrix(2, 2, layout="F").layout is Layout.COLUMN_MAJOR

    def test_unknown_layout_rejected(self):
        with pytest.raises(InvalidConstructionError):
            Matrix(2, 2, layout="diagonal")
        with pytest.raises(InvalidConstructionError):
            Matrix.from_numpy(np.zeros((2, 2)), "diagonal")

    def test_non_numeric_buffer_rejected(self):
        with pytest.raises(InvalidConstructionError):
            Matrix(1, 2, ["a", "b"])

    def test_default_layout_from_config(self):
        Config.set("matrix.layout", "column_major")
        assert Matrix(2, 2).layout is Layout.COLUMN_MAJOR

    def test_dtype_from_config(self):
        Config.set("matrix.dtype", "float64")
        assert Matrix(2, 2).data.dtype == np.float64


class TestFromArray:
    """Tests for construction from nested rows."""

    def test_basic(self, square_rows):
        m = Matrix.from_array(square_rows)
        assert m.shape == (2, 2)
        assert m.layout is Layout.ROW_MAJOR
        assert m.owns_data
        assert m.data.tolist() == [1.0, 2.0, 3.0, 4.0]

    def test_from_rows_alias(self, square_rows):
        assert Matrix.from_rows(square_rows).equals(Matrix.from_array(square_rows))

    def test_ragged_rejected(self):
        with pytest.raises(InvalidConstructionError):
            Matrix.from_array([[1, 2], [3]])

    @pytest.mark.parametrize("bad", [[], [[]], "abc", 5])
    def test_empty_or_non_sequence_rejected(self, bad):
        with pytest.raises(InvalidConstructionError):
            Matrix.from_array(bad)

    @pytest.mark.parametrize("bad", [[["a", "b"]], [[1, [2]]], [[1.0, "x"]]])
    def test_non_numeric_entries_rejected(self, bad):
        with pytest.raises(InvalidConstructionError):
            Matrix.from_array(bad)

    def test_set_array_non_numeric_rejected(self):
        m = Matrix(1, 2)
        with pytest.raises(InvalidConstructionError):
            m.set_array([["x", 1.0]])
        assert m.to_list() == [[0.0, 0.0]]


class TestFromColVectors:
    """Tests for stacking column vectors."""

    def test_stacks_columns(self):
        v0 = Matrix.from_array([[1], [2], [3]])
        v1 = Matrix.from_array([[4], [5], [6]])
        m = Matrix.from_col_vectors([v0, v1])
        assert m.shape == (3, 2)
        assert m.to_list() == [[1, 4], [2, 5], [3, 6]]

    def test_accepts_transposed_row_vectors(self):
        """A transposed row vector is a valid (column-major) column vector."""
        v = Matrix.from_array([[1, 2, 3]]).t()
        m = Matrix.from_column_vectors([v, v])
        assert m.to_list() == [[1, 1], [2, 2], [3, 3]]

    def test_not_a_sequence(self):
        with pytest.raises(InvalidConstructionError):
            Matrix.from_col_vectors(Matrix(3, 1))

    def test_empty(self):
        with pytest.raises(InvalidConstructionError):
            Matrix.from_col_vectors([])

    def test_not_column_vectors(self):
        with pytest.raises(InvalidConstructionError):
            Matrix.from_col_vectors([Matrix(3, 2)])

    def test_mismatched_rows(self):
        with pytest.raises(InvalidConstructionError):
            Matrix.from_col_vectors([Matrix(3, 1), Matrix(2, 1)])


class TestFromNumpy:
    """Tests for numpy and pandas interop constructors."""

    def test_c_order_becomes_row_major(self):
        arr = np.arange(6, dtype=np.float32).reshape(2, 3)
        m = Matrix.from_numpy(arr)
        assert m.layout is Layout.ROW_MAJOR
        assert m.to_numpy().tolist() == arr.tolist()

    def test_f_order_becomes_column_major(self):
        arr = np.asfortranarray(np.arange(6, dtype=np.float32).reshape(2, 3))
        m = Matrix.from_numpy(arr)
        assert m.layout is Layout.COLUMN_MAJOR
        assert m.data.tolist() == [0, 3, 1, 4, 2, 5]
        assert m.to_numpy().tolist() == arr.tolist()

    def test_copies_input(self):
        arr = np.zeros((2, 2), dtype=np.float32)
        m = Matrix.from_numpy(arr)
        m.set(0, 0, 1.0)
        assert arr[0, 0] == 0.0

    def test_rejects_non_2d(self):
        with pytest.raises(InvalidConstructionError):
            Matrix.from_numpy(np.zeros(3))

    def test_from_frame(self):
        df = pd.DataFrame({"a": [1.0, 2.0], "b": [3.0, 4.0]})
        m = Matrix.from_frame(df)
        assert m.to_list() == [[1.0, 3.0], [2.0, 4.0]]


class TestSetArray:
    """Tests for buffer replacement."""

    def test_replaces_buffer(self, square_rows):
        m = Matrix(2, 2, layout=Layout.COLUMN_MAJOR)
        old = m.data
        m.set_array(square_rows)
        assert m.data is not old
        assert m.layout is Layout.ROW_MAJOR
        assert m.to_list() == square_rows

    def test_detaches_aliases(self, square_rows):
        m = Matrix(2, 2)
        a = m.alias()
        m.set_array(square_rows)
        assert a.to_list() == [[0, 0], [0, 0]]
        assert m.owns_data

    def test_shape_must_match(self):
        m = Matrix(2, 2)
        with pytest.raises(ShapeMismatchError):
            m.set_array([[1, 2, 3]])
