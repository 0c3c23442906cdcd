from __future__ import annotations
import operator
import sys
from typing import Any, Optional, Tuple

import numpy as np

from .errors import IndexOutOfRange, InvalidDimensions

# Largest element count a single allocation may address
_MAX_ELEMENTS = sys.maxsize


def _check_size(value: Any, name: str) -> int:
    if isinstance(value, (bool, np.bool_)):
        raise InvalidDimensions(f"{name} must be an integer, got bool.")
    try:
        n = operator.index(value)
    except TypeError:
        raise InvalidDimensions(f"{name} must be an integer, got {type(value).__name__}.") from None
    if n < 0:
        raise InvalidDimensions(f"{name} must be non-negative, got {n}.")
    return n


def _check_dims(rows: Any, cols: Any) -> Tuple[int, int]:
    r = _check_size(rows, "rows")
    c = _check_size(cols, "cols")
    if c and r > _MAX_ELEMENTS // c:
        raise InvalidDimensions(f"{r} x {c} elements exceed the addressable size.")
    return r, c


class DenseBuffer:
    """Rectangular row/column store of a single element type.

    The buffer exclusively owns a C-contiguous ``(rows, cols)`` numpy array.
    A buffer with ``rows == 0`` or ``cols == 0`` is empty and holds no
    storage. Element access is bounds checked; negative indices are out of
    range rather than wrapping around.
    """

    __slots__ = ("_data", "_rows", "_cols", "_dtype")

    def __init__(self, rows: int = 0, cols: int = 0, dtype: Any = np.float32, fill: Any = 0) -> None:
        self._dtype = np.dtype(dtype)
        self._data: Optional[np.ndarray] = None
        self._rows = 0
        self._cols = 0
        self.resize(rows, cols, fill=fill)

    @classmethod
    def from_array(cls, array: Any, dtype: Any = None) -> "DenseBuffer":
        """Build a buffer owning a copy of a 2D array."""
        arr = np.asarray(array)
        if arr.ndim != 2:
            raise InvalidDimensions(f"Expected a 2D array, got {arr.ndim} dimension(s).")
        buf = cls(0, 0, dtype=arr.dtype if dtype is None else dtype)
        rows, cols = arr.shape
        if rows and cols:
            buf._data = np.array(arr, dtype=buf._dtype, order="C", copy=True)
        buf._rows, buf._cols = rows, cols
        return buf

    # -- sizing --
    def resize(self, rows: int, cols: int, fill: Any = 0) -> None:
        """Reallocate to ``rows x cols``, discarding the previous content."""
        r, c = _check_dims(rows, cols)
        if r == 0 or c == 0:
            self._data = None
        else:
            value = np.asarray(fill, dtype=self._dtype)
            if value.ndim != 0:
                raise ValueError(f"fill must be a scalar, got shape {value.shape}.")
            try:
                data = np.empty((r, c), dtype=self._dtype)
            except (MemoryError, ValueError) as exc:
                raise InvalidDimensions(f"Cannot allocate {r} x {c} buffer: {exc}") from exc
            data.fill(value)
            self._data = data
        self._rows, self._cols = r, c

    def clear(self) -> None:
        self._data = None
        self._rows = 0
        self._cols = 0

    # -- properties --
    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cols(self) -> int:
        return self._cols

    @property
    def shape(self) -> Tuple[int, int]:
        return (self._rows, self._cols)

    @property
    def size(self) -> int:
        return self._rows * self._cols

    @property
    def dtype(self) -> np.dtype:
        return self._dtype

    @property
    def empty(self) -> bool:
        return self._data is None

    # -- access --
    def ptr(self) -> np.ndarray:
        """Return the owned storage for bulk access.

        The array is the buffer's own storage, not a copy. It is invalidated
        by the next :meth:`resize` or :meth:`clear`. Empty buffers return a
        zero-sized ``(rows, cols)`` array.
        """
        if self._data is None:
            return np.empty((self._rows, self._cols), dtype=self._dtype)
        return self._data

    def _check_index(self, row: Any, col: Any) -> Tuple[int, int]:
        try:
            r = operator.index(row)
            c = operator.index(col)
        except TypeError:
            raise IndexOutOfRange(f"Indices must be integers, got ({row!r}, {col!r}).") from None
        if not (0 <= r < self._rows and 0 <= c < self._cols):
            raise IndexOutOfRange(f"Index ({r}, {c}) outside buffer of shape {self.shape}.")
        return r, c

    def row(self, row: int) -> np.ndarray:
        """Writable view of one row."""
        try:
            r = operator.index(row)
        except TypeError:
            raise IndexOutOfRange(f"Row index must be an integer, got {row!r}.") from None
        if self._data is None or not 0 <= r < self._rows:
            raise IndexOutOfRange(f"Row {r} outside buffer of shape {self.shape}.")
        return self._data[r]

    def __getitem__(self, key: Tuple[int, int]) -> Any:
        if not isinstance(key, tuple) or len(key) != 2:
            raise IndexOutOfRange("DenseBuffer is indexed with a (row, col) pair.")
        r, c = self._check_index(*key)
        return self._data[r, c]  # type: ignore[index]

    def __setitem__(self, key: Tuple[int, int], value: Any) -> None:
        if not isinstance(key, tuple) or len(key) != 2:
            raise IndexOutOfRange("DenseBuffer is indexed with a (row, col) pair.")
        r, c = self._check_index(*key)
        self._data[r, c] = value  # type: ignore[index]

    def __len__(self) -> int:
        return self._rows

    def copy(self) -> "DenseBuffer":
        buf = DenseBuffer(0, 0, dtype=self._dtype)
        if self._data is not None:
            buf._data = self._data.copy()
        buf._rows, buf._cols = self._rows, self._cols
        return buf

    def __copy__(self) -> "DenseBuffer":
        return self.copy()

    def __deepcopy__(self, memo: dict) -> "DenseBuffer":
        return self.copy()

    def __repr__(self) -> str:
        return f"DenseBuffer(rows={self._rows}, cols={self._cols}, dtype={self._dtype.name})"
