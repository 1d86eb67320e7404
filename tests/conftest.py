"""
Pytest fixtures for matrix tests.
"""

import numpy as np
import pytest

from agentsmith import Config, Layout, Matrix


@pytest.fixture(autouse=True)
def reset_config():
    """Keep Config changes from leaking between tests."""
    Config.reset()
    yield
    Config.reset()


@pytest.fixture
def seed():
    """Fixed random seed for reproducibility."""
    return 42


@pytest.fixture
def rng(seed):
    return np.random.default_rng(seed)


@pytest.fixture
def square_rows():
    return [[1.0, 2.0], [3.0, 4.0]]


@pytest.fixture
def grid_3x4():
    """3x4 matrix holding 0..11 in row-major logical order."""
    return Matrix.from_array([
        [0.0, 1.0, 2.0, 3.0],
        [4.0, 5.0, 6.0, 7.0],
        [8.0, 9.0, 10.0, 11.0],
    ])


@pytest.fixture
def grid_3x4_column_major(grid_3x4):
    """Same logical contents as grid_3x4, stored column-major."""
    return Matrix.from_numpy(grid_3x4.to_numpy(), Layout.COLUMN_MAJOR)


@pytest.fixture
def col_vector():
    """3x1 column vector [1, 2, 3]."""
    return Matrix.from_array([[1.0], [2.0], [3.0]])


@pytest.fixture
def row_vector():
    """1x4 row vector [10, 20, 30, 40]."""
    return Matrix.from_array([[10.0, 20.0, 30.0, 40.0]])


@pytest.fixture
def make_in_layout():
    """Factory building a matrix from a 2D array in the requested layout."""
    def _make(arr, layout):
        return Matrix.from_numpy(np.asarray(arr, dtype=np.float32), layout)
    return _make
