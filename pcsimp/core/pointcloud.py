from __future__ import annotations
from enum import Enum
from typing import Any, FrozenSet, List, Optional, Tuple

import numpy as np

from .buffer import DenseBuffer
from .errors import IndexOutOfRange, InvalidDimensions
from .flags import AttributeFlag, compose, decompose, has
from .utils import get_logger, split_ranges

_log = get_logger()

COLOR_DTYPE = np.uint8
INDEX_DTYPE = np.uint32


class Primitive(Enum):
    """Primitive a renderer should draw the cloud with."""

    POINTS = 0
    TRIANGLES = 1


class PointCloud:
    """Points plus optional color, normal and triangle channels.

    ``rows``/``cols`` mirror the points buffer and are only updated by
    :meth:`set_points` (or the sized constructor). :meth:`clear` releases all
    buffers but leaves the counters alone, so check :meth:`has_storage`
    before trusting them after a clear.

    Color rows are expected to line up with point rows; the container does
    not enforce it.
    """

    def __init__(
        self,
        rows: Optional[int] = None,
        cols: Optional[int] = None,
        *,
        dtype: Any = np.float32,
        flags: int = 0,
    ) -> None:
        self.dtype = np.dtype(dtype)
        if self.dtype.kind != "f":
            raise TypeError(f"Point element type must be floating point, got {self.dtype}.")
        self.points = DenseBuffer(dtype=self.dtype)
        self.colors = DenseBuffer(dtype=COLOR_DTYPE)
        self.normals = DenseBuffer(dtype=self.dtype)
        self.triangles = DenseBuffer(dtype=INDEX_DTYPE)
        self.rows = 0
        self.cols = 0
        self.flags = compose(flags, AttributeFlag.POINTS) if flags else 0
        if rows is not None or cols is not None:
            if rows is None or cols is None:
                raise InvalidDimensions("Provide both rows and cols, or neither.")
            self.set_points(rows, cols)

    # -- sizing --
    def set_points(self, rows: int, cols: int) -> None:
        self.points.resize(rows, cols)
        self.rows, self.cols = self.points.shape
        self.flags = compose(self.flags, AttributeFlag.POINTS)
        _log.debug("Allocated points buffer %d x %d (%s)", self.rows, self.cols, self.dtype.name)

    def set_colors(self, rows: int, cols: int) -> None:
        self.colors.resize(rows, cols)
        self.flags = compose(self.flags, AttributeFlag.RGB)
        _log.debug("Allocated colors buffer %d x %d", rows, cols)

    def set_normals(self, rows: int, cols: int) -> None:
        self.normals.resize(rows, cols)
        self.flags = compose(self.flags, AttributeFlag.NORMALS)
        _log.debug("Allocated normals buffer %d x %d", rows, cols)

    def set_triangles(self, count: int, corners: int = 3) -> None:
        self.triangles.resize(count, corners)
        self.flags = compose(self.flags, AttributeFlag.TRIANGLES)
        _log.debug("Allocated triangle buffer %d x %d", count, corners)

    def allocate(self, rows: int, cols: int, flags: Optional[int] = None, n_triangles: int = 0) -> None:
        """Allocate every buffer the flags select.

        Colors get three channels, normals get ``cols`` components. The
        triangle buffer is only sized when ``TRIANGLES`` is selected.
        """
        if flags is not None:
            self.flags |= compose(flags, AttributeFlag.POINTS)
        channels = self.channels()
        self.set_points(rows, cols)
        if AttributeFlag.RGB in channels:
            self.set_colors(rows, 3)
        if AttributeFlag.NORMALS in channels:
            self.set_normals(rows, cols)
        if AttributeFlag.TRIANGLES in channels:
            self.set_triangles(n_triangles)

    def clear(self) -> None:
        self.points.clear()
        self.colors.clear()
        self.normals.clear()
        self.triangles.clear()

    def has_storage(self) -> bool:
        return not self.points.empty

    # -- bulk access --
    def get_points_ptr(self) -> np.ndarray:
        return self.points.ptr()

    def get_colors_ptr(self) -> np.ndarray:
        return self.colors.ptr()

    def get_normals_ptr(self) -> np.ndarray:
        return self.normals.ptr()

    def get_triangles_ptr(self) -> np.ndarray:
        return self.triangles.ptr()

    # -- element access --
    def get_point(self, row: int, col: int) -> Any:
        return self.points[row, col]

    def set_point(self, row: int, col: int, value: Any) -> None:
        self.points[row, col] = value

    def get_color(self, row: int, col: int) -> Any:
        return self.colors[row, col]

    def set_color(self, row: int, col: int, value: Any) -> None:
        self.colors[row, col] = value

    def get_normal(self, row: int, col: int) -> Any:
        return self.normals[row, col]

    def set_normal(self, row: int, col: int, value: Any) -> None:
        self.normals[row, col] = value

    def point(self, row: int) -> np.ndarray:
        return self.points.row(row)

    def color(self, row: int) -> np.ndarray:
        return self.colors.row(row)

    def normal(self, row: int) -> np.ndarray:
        return self.normals.row(row)

    # -- flags --
    def has(self, flag: AttributeFlag) -> bool:
        return has(self.flags, flag)

    def channels(self) -> FrozenSet[AttributeFlag]:
        return decompose(self.flags)

    def enable(self, flag: AttributeFlag) -> None:
        self.flags = compose(self.flags, flag)

    def primitive(self) -> Primitive:
        if AttributeFlag.TRIANGLES in self.channels() and not self.triangles.empty:
            return Primitive.TRIANGLES
        return Primitive.POINTS

    # -- helpers --
    def bounds(self) -> Tuple[np.ndarray, np.ndarray]:
        """Per-dimension minimum and maximum of the points buffer."""
        if self.points.empty:
            raise InvalidDimensions("Cannot compute bounds of an empty point cloud.")
        pts = self.points.ptr()
        return pts.min(axis=0), pts.max(axis=0)

    def subset(self, indices: Any) -> "PointCloud":
        """New cloud holding the listed rows, in list order.

        Points plus, when present, colors and normals are gathered;
        triangles are not, since their indices refer to the full cloud.
        Any index outside ``[0, rows)`` raises :class:`IndexOutOfRange`.
        """
        idx = np.asarray(indices)
        if idx.size == 0:
            idx = idx.astype(np.intp).reshape(0)
        if idx.ndim != 1 or idx.dtype.kind not in "iu":
            raise IndexOutOfRange("Subset indices must be a 1D sequence of integers.")
        if idx.size and (idx.min() < 0 or idx.max() >= self.points.rows):
            bad = idx[(idx < 0) | (idx >= self.points.rows)][0]
            raise IndexOutOfRange(f"Subset index {bad} outside [0, {self.points.rows}).")

        channels = self.channels()
        out = PointCloud(dtype=self.dtype)
        out.set_points(idx.size, self.points.cols)
        for flag in (AttributeFlag.RGB, AttributeFlag.NORMALS):
            if flag in channels:
                out.enable(flag)
        if idx.size:
            out.get_points_ptr()[:] = self.points.ptr()[idx]
        for name in ("colors", "normals"):
            src: DenseBuffer = getattr(self, name)
            if src.empty:
                continue
            if idx.size and idx.max() >= src.rows:
                raise IndexOutOfRange(f"Subset index {int(idx.max())} outside {name} rows [0, {src.rows}).")
            dst: DenseBuffer = getattr(out, name)
            dst.resize(idx.size, src.cols)
            if idx.size:
                dst.ptr()[:] = src.ptr()[idx]
        return out

    def row_ranges(self, parts: int) -> List[Tuple[int, int]]:
        """Disjoint row ranges for fanning work out over ``parts`` workers."""
        return split_ranges(self.points.rows, parts)

    def __len__(self) -> int:
        return self.points.rows

    def copy(self) -> "PointCloud":
        out = PointCloud(dtype=self.dtype)
        out.points = self.points.copy()
        out.colors = self.colors.copy()
        out.normals = self.normals.copy()
        out.triangles = self.triangles.copy()
        out.rows, out.cols = self.rows, self.cols
        out.flags = self.flags
        return out

    def __copy__(self) -> "PointCloud":
        return self.copy()

    def __deepcopy__(self, memo: dict) -> "PointCloud":
        return self.copy()

    def __repr__(self) -> str:
        return (
            f"PointCloud(rows={self.rows}, cols={self.cols}, dtype={self.dtype.name}, "
            f"flags=0b{self.flags:08b})"
        )
