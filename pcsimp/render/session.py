from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

import numpy as np

from ..core.flags import AttributeFlag
from ..core.pointcloud import PointCloud, Primitive
from ..core.utils import get_logger

_log = get_logger()


@dataclass(frozen=True)
class WindowSpec:
    position_x: int = 0
    position_y: int = 0
    width: int = 640
    height: int = 480

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("Window width and height must be positive.")
        if self.position_x < 0 or self.position_y < 0:
            raise ValueError("Window position must be non-negative.")


@dataclass
class DrawData:
    """Snapshot of the buffers a renderer reads from a point cloud."""

    points: np.ndarray                       # (N, D)
    colors: Optional[np.ndarray] = None      # (N, C) uint8
    triangles: Optional[np.ndarray] = None   # (T, 3)
    primitive: Primitive = Primitive.POINTS

    @classmethod
    def from_cloud(cls, cloud: PointCloud) -> "DrawData":
        if not cloud.has_storage():
            raise ValueError("Point cloud has no point storage to draw.")
        points = cloud.get_points_ptr().copy()
        channels = cloud.channels()
        colors = None
        if AttributeFlag.RGB in channels and not cloud.colors.empty:
            colors = cloud.get_colors_ptr().copy()
            if len(colors) != len(points):
                raise ValueError(f"Color rows ({len(colors)}) != point rows ({len(points)}).")
        primitive = cloud.primitive()
        triangles = cloud.get_triangles_ptr().copy() if primitive is Primitive.TRIANGLES else None
        return cls(points=points, colors=colors, triangles=triangles, primitive=primitive)


@dataclass
class _Window:
    spec: WindowSpec
    items: List[DrawData] = field(default_factory=list)


class RenderSession:
    """Owns the windows opened for previewing point clouds.

    Each session counts its own windows; nothing is shared between sessions.
    Previews are rendered off-screen with matplotlib.
    """

    def __init__(self) -> None:
        self._windows: Dict[int, _Window] = {}
        self._next_handle = 0
        self._closed = False

    @property
    def window_count(self) -> int:
        return len(self._windows)

    def open_window(self, spec: Optional[WindowSpec] = None) -> int:
        if self._closed:
            raise RuntimeError("Render session is closed.")
        handle = self._next_handle
        self._next_handle += 1
        self._windows[handle] = _Window(spec or WindowSpec())
        _log.debug("Opened window %d (%d open)", handle, self.window_count)
        return handle

    def _window(self, handle: int) -> _Window:
        try:
            return self._windows[handle]
        except KeyError:
            raise KeyError(f"No open window with handle {handle}.") from None

    def close_window(self, handle: int) -> None:
        self._window(handle)
        del self._windows[handle]
        _log.debug("Closed window %d (%d open)", handle, self.window_count)

    def add(self, handle: int, cloud: PointCloud) -> DrawData:
        data = DrawData.from_cloud(cloud)
        self._window(handle).items.append(data)
        return data

    def draw_data(self, handle: int) -> List[DrawData]:
        return list(self._window(handle).items)

    def save_preview(self, handle: int, path: str | Path, dpi: int = 100) -> Path:
        """Render a window's contents top-down (XY) into an image file."""
        from matplotlib.backends.backend_agg import FigureCanvasAgg
        from matplotlib.figure import Figure
        from matplotlib.tri import Triangulation

        window = self._window(handle)
        if not window.items:
            raise ValueError(f"Window {handle} has nothing to draw.")

        fig = Figure(figsize=(window.spec.width / dpi, window.spec.height / dpi), dpi=dpi)
        FigureCanvasAgg(fig)
        ax = fig.add_subplot(1, 1, 1)
        for item in window.items:
            xy = item.points[:, :2].astype(np.float64, copy=False)
            if xy.shape[1] < 2:
                raise ValueError("Preview needs at least two point dimensions.")
            colors = None
            if item.colors is not None and item.colors.shape[1] >= 3:
                colors = item.colors[:, :3] / 255.0
            if item.primitive is Primitive.TRIANGLES and item.triangles is not None:
                tri = Triangulation(xy[:, 0], xy[:, 1], item.triangles.astype(np.int64))
                ax.triplot(tri, linewidth=0.5, color="0.4")
            ax.scatter(xy[:, 0], xy[:, 1], s=2, c=colors)
        ax.set_xlabel("X")
        ax.set_ylabel("Y")
        ax.set_aspect("equal", adjustable="box")
        fig.tight_layout()

        out = Path(path)
        out.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(out)
        _log.info("Saved preview of window %d to %s", handle, out)
        return out

    def close(self) -> None:
        self._windows.clear()
        self._closed = True

    def __enter__(self) -> "RenderSession":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
