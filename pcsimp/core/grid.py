from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Any, Optional, Tuple

import numpy as np

from .errors import InvalidDomain
from .pointcloud import INDEX_DTYPE, PointCloud
from .utils import get_logger

_log = get_logger()

# Ratios within this relative distance of a whole number of steps snap to it,
# so a span of 0.1 + 0.2 at 0.1 spacing (ratio 3.0000000000000004) counts 3
# steps rather than 4.
_STEP_RTOL = 1e-9


def _steps(span: float, quant: float) -> int:
    ratio = span / quant
    if not math.isfinite(ratio):
        raise InvalidDomain(f"Span {span} over spacing {quant} does not give a finite step count.")
    nearest = round(ratio)
    if abs(ratio - nearest) <= _STEP_RTOL * max(1.0, abs(ratio)):
        return int(nearest)
    return int(math.ceil(ratio))


def grid_shape(x_left: float, x_right: float, y_left: float, y_right: float, quant: float) -> Tuple[int, int]:
    """Number of lattice steps ``(nx, ny)`` for a domain and spacing."""
    values = (x_left, x_right, y_left, y_right, quant)
    if not all(math.isfinite(float(v)) for v in values):
        raise InvalidDomain(f"Grid domain values must be finite, got {values}.")
    if quant <= 0:
        raise InvalidDomain(f"Grid spacing must be positive, got {quant}.")
    if x_right < x_left:
        raise InvalidDomain(f"x_right ({x_right}) is left of x_left ({x_left}).")
    if y_right < y_left:
        raise InvalidDomain(f"y_right ({y_right}) is below y_left ({y_left}).")
    return _steps(x_right - x_left, quant), _steps(y_right - y_left, quant)


def grid_triangles(nx: int, ny: int) -> np.ndarray:
    """Two counter-clockwise triangles per lattice cell.

    Vertex ``ix * ny + iy`` is the point at step ``(ix, iy)``, matching the
    order :func:`mesh_grid` emits points in.
    """
    if nx < 2 or ny < 2:
        return np.zeros((0, 3), dtype=INDEX_DTYPE)
    ix, iy = np.meshgrid(np.arange(nx - 1), np.arange(ny - 1), indexing="ij")
    a = (ix * ny + iy).ravel()
    b = a + 1          # next y
    c = a + ny         # next x
    d = c + 1
    tris = np.empty((2 * a.size, 3), dtype=INDEX_DTYPE)
    tris[0::2] = np.column_stack([a, c, d])
    tris[1::2] = np.column_stack([a, d, b])
    return tris


def grid_lines(nx: int, ny: int) -> np.ndarray:
    """Edge list of the lattice wireframe, shape ``(E, 2)``."""
    if nx <= 0 or ny <= 0:
        return np.zeros((0, 2), dtype=INDEX_DTYPE)
    idx = np.arange(nx * ny).reshape(nx, ny)
    along_y = np.column_stack([idx[:, :-1].ravel(), idx[:, 1:].ravel()])
    along_x = np.column_stack([idx[:-1, :].ravel(), idx[1:, :].ravel()])
    return np.concatenate([along_y, along_x]).astype(INDEX_DTYPE, copy=False)


def mesh_grid(
    cloud: PointCloud,
    x_left: float,
    x_right: float,
    y_left: float,
    y_right: float,
    quant: float,
    indices: bool = False,
) -> Tuple[int, int]:
    """Fill ``cloud`` with a regular 2D lattice.

    The points buffer is resized to ``nx * ny`` rows by 2 columns and filled
    in row-major order (outer x, inner y) with ``x_left + ix * quant`` and
    ``y_left + iy * quant``. With ``indices`` the triangle buffer is filled
    from :func:`grid_triangles` as well.

    Returns ``(nx, ny)``.
    """
    nx, ny = grid_shape(x_left, x_right, y_left, y_right, quant)
    cloud.set_points(nx * ny, 2)
    if nx and ny:
        ix, iy = np.meshgrid(np.arange(nx), np.arange(ny), indexing="ij")
        pts = cloud.get_points_ptr()
        pts[:, 0] = x_left + ix.ravel() * quant
        pts[:, 1] = y_left + iy.ravel() * quant

    if indices:
        tris = grid_triangles(nx, ny)
        cloud.set_triangles(len(tris), 3)
        if len(tris):
            cloud.get_triangles_ptr()[:] = tris
    else:
        # connectivity from an earlier lattice would index past the new points
        cloud.triangles.clear()
    return nx, ny


@dataclass
class GridSamplerConfig:
    x_left: float = 0.0
    x_right: float = 1.0
    y_left: float = 0.0
    y_right: float = 1.0
    quant: float = 0.1
    indices: bool = False


class GridSampler:
    """Generates lattice point clouds from a :class:`GridSamplerConfig`."""

    def __init__(self, cfg: Optional[GridSamplerConfig] = None, dtype: Any = np.float32) -> None:
        self.cfg = cfg or GridSamplerConfig()
        self.dtype = np.dtype(dtype)

    def shape(self) -> Tuple[int, int]:
        c = self.cfg
        return grid_shape(c.x_left, c.x_right, c.y_left, c.y_right, c.quant)

    def sample(self, cloud: Optional[PointCloud] = None) -> PointCloud:
        c = self.cfg
        cloud = cloud if cloud is not None else PointCloud(dtype=self.dtype)
        nx, ny = mesh_grid(cloud, c.x_left, c.x_right, c.y_left, c.y_right, c.quant, indices=c.indices)
        _log.info(
            "Grid sampler finished: %d x %d lattice → %d points, %d triangles",
            nx, ny, len(cloud), cloud.triangles.rows,
        )
        return cloud
