"""
Array wrapper that attaches row/column labels to logical matrix views.

Matrices keep their values in flat numpy buffers; this wrapper tracks what
each axis represents so a logical 2D view can be handed out as a labelled
pandas object.
"""

import numpy as np
import pandas as pd
from typing import Optional, Tuple, Union

from agentsmith.matrix.errors import ShapeMismatchError


class ArrayWrapper:
    """
    Wraps logical 2D arrays with index and column information.

    Dimensions:
    - axis 0: matrix rows
    - axis 1: matrix columns
    """

    def __init__(
        self,
        index: Optional[pd.Index] = None,
        columns: Optional[pd.Index] = None,
    ):
        """
        Parameters
        ----------
        index : pd.Index, optional
            Row labels
        columns : pd.Index, optional
            Column labels
        """
        self._index = index
        self._columns = columns

    @property
    def index(self) -> Optional[pd.Index]:
        """Row labels."""
        return self._index

    @property
    def columns(self) -> Optional[pd.Index]:
        """Column labels."""
        return self._columns

    @property
    def shape(self) -> Tuple[int, int]:
        """Shape derived from index/columns."""
        return (
            len(self.index) if self.index is not None else 0,
            len(self.columns) if self.columns is not None else 0,
        )

    def wrap(self, arr: np.ndarray) -> pd.DataFrame:
        """
        Convert a logical 2D array to a DataFrame with proper index/columns.

        Parameters
        ----------
        arr : np.ndarray
            Array to wrap (shape must match wrapper dimensions)

        Returns
        -------
        pd.DataFrame
            Wrapped data with index and columns
        """
        if arr.ndim != 2:
            raise ValueError(f"Expected 2D array, got {arr.ndim}D")
        if arr.shape != self.shape:
            raise ShapeMismatchError(
                f"Array shape {arr.shape} doesn't match labels {self.shape}"
            )

        return pd.DataFrame(arr, index=self.index, columns=self.columns)

    @classmethod
    def from_shape(
        cls,
        shape: Tuple[int, int],
        index: Optional[Union[pd.Index, list]] = None,
        columns: Optional[Union[pd.Index, list]] = None,
    ) -> "ArrayWrapper":
        """
        Create wrapper from shape, generating default indices if needed.

        Parameters
        ----------
        shape : tuple
            (rows, cols)
        index : pd.Index, optional
            Row index
        columns : pd.Index, optional
            Column index

        Returns
        -------
        ArrayWrapper
        """
        rows, cols = shape

        index = pd.RangeIndex(rows) if index is None else pd.Index(index)
        columns = pd.RangeIndex(cols) if columns is None else pd.Index(columns)

        if len(index) != rows or len(columns) != cols:
            raise ShapeMismatchError(
                f"Labels ({len(index)}, {len(columns)}) don't fit shape ({rows}, {cols})"
            )

        return cls(index=index, columns=columns)
