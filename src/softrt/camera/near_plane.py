"""Fixed near-plane camera for primary ray generation.

The camera sits at a fixed position and looks along +Z through a near plane
at z = 0 spanning [-1, 1] in both x and y. Pixel (i, j) maps to the near-plane
point:

    x = -1 + (2 / width) * i
    y =  1 - (2 / height) * j
    z =  0

so pixel (0, 0) is the top-left corner. The primary ray starts at the camera
position and points at that near-plane point; its direction is not
normalized.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from softrt.camera.near_plane import NearPlaneCamera, setup_camera
    >>> setup_camera(NearPlaneCamera(position=(0.0, 0.0, -2.0)))
    >>>
    >>> @ti.kernel
    ... def render():
    ...     ray = get_primary_ray(0, 0, 512, 512)  # Top-left pixel
"""

from dataclasses import dataclass

import taichi as ti

from softrt.core.vector import Ray, make_ray, vec3

# Depth of the near plane in world space
NEAR_PLANE_Z = 0.0

DEFAULT_CAMERA_POSITION = (0.0, 0.0, -2.0)


@dataclass
class NearPlaneCamera:
    """Configuration for the near-plane camera.

    Attributes:
        position: Camera position in world space (x, y, z). Also the reference
            point used to rank hits in the closest-hit search.
    """

    position: tuple[float, float, float] = DEFAULT_CAMERA_POSITION


# Camera position (GPU-accessible)
_camera_position = ti.Vector.field(3, dtype=ti.f32, shape=())

_active_camera: NearPlaneCamera | None = None


def setup_camera(camera: NearPlaneCamera) -> None:
    """Write the camera configuration to Taichi fields.

    Args:
        camera: Camera configuration.
    """
    global _active_camera

    _camera_position[None] = [camera.position[0], camera.position[1], camera.position[2]]
    _active_camera = camera


def get_active_camera() -> NearPlaneCamera:
    """Get the active camera, installing the default camera if unset."""
    if _active_camera is None:
        setup_camera(NearPlaneCamera())
    return _active_camera


def get_camera_info() -> dict[str, tuple[float, float, float]]:
    """Get the current camera parameters (for debugging)."""
    p = _camera_position[None]
    return {"position": (float(p[0]), float(p[1]), float(p[2]))}


@ti.func
def get_camera_position() -> vec3:
    """Get the camera position inside a kernel."""
    return _camera_position[None]


@ti.func
def get_near_plane_point(i: ti.i32, j: ti.i32, width: ti.i32, height: ti.i32) -> vec3:
    """Map pixel (i, j) to its point on the near plane."""
    dx = 2.0 / ti.cast(width, ti.f32)
    dy = 2.0 / ti.cast(height, ti.f32)
    return vec3(
        -1.0 + dx * ti.cast(i, ti.f32),
        1.0 - dy * ti.cast(j, ti.f32),
        NEAR_PLANE_Z,
    )


@ti.func
def get_primary_ray(i: ti.i32, j: ti.i32, width: ti.i32, height: ti.i32) -> Ray:
    """Generate the primary ray for pixel (i, j).

    Args:
        i: Pixel column (0 = left).
        j: Pixel row (0 = top).
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        A ray from the camera position toward the pixel's near-plane point.
    """
    origin = _camera_position[None]
    return make_ray(origin, get_near_plane_point(i, j, width, height) - origin)


# Python-side access for tooling and tests
_query_direction = ti.Vector.field(3, dtype=ti.f32, shape=())


@ti.kernel
def _primary_direction_single(i: ti.i32, j: ti.i32, width: ti.i32, height: ti.i32):
    _query_direction[None] = get_primary_ray(i, j, width, height).direction


def primary_ray_direction(i: int, j: int, width: int, height: int) -> tuple[float, float, float]:
    """Get the primary ray direction for a pixel from Python."""
    get_active_camera()
    _primary_direction_single(i, j, width, height)
    d = _query_direction[None]
    return (float(d[0]), float(d[1]), float(d[2]))

