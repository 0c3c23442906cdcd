"""pcsimp – point-cloud data model for the simplification toolkit.

This package contains the shared data contract used by simplification,
rendering and I/O routines:
- DenseBuffer, an exclusively owned rectangular store (core.buffer)
- AttributeFlag & mask helpers (core.flags)
- PointCloud container with points/colors/normals/triangles (core.pointcloud)
- ParameterDict & SimpParams for algorithm settings (core.params)
- Grid sampler producing regular lattices (core.grid)
- RenderSession for off-screen previews (render.session)
"""

from .core.errors import (
    PointcloudError, InvalidDimensions, IndexOutOfRange, InvalidDomain,
    MissingParameter, TypeMismatch,
)
from .core.buffer import DenseBuffer
from .core.flags import (
    AttributeFlag, compose, compose_all, has, constituents, decompose, declared, implies,
)
from .core.pointcloud import PointCloud, Primitive
from .core.params import ParameterDict, SimpParams, has_param, get_param, machine_epsilon
from .core.grid import GridSampler, GridSamplerConfig, mesh_grid, grid_triangles, grid_lines
from .render.session import RenderSession, WindowSpec, DrawData
