"""Camera module for primary ray generation.

Components:
    near_plane: Fixed-position camera looking along +Z through a [-1, 1]
        near plane at z = 0

Camera responsibilities:
    - Map pixel (i, j) to a world-space ray
    - Provide the reference point used to rank closest hits

Pixel (0, 0) is the top-left corner of the image.
"""

from .near_plane import (
    DEFAULT_CAMERA_POSITION,
    NEAR_PLANE_Z,
    NearPlaneCamera,
    get_active_camera,
    get_camera_info,
    get_camera_position,
    get_near_plane_point,
    get_primary_ray,
    primary_ray_direction,
    setup_camera,
)

__all__ = [
    "NearPlaneCamera",
    "setup_camera",
    "get_active_camera",
    "get_camera_info",
    "get_camera_position",
    "get_near_plane_point",
    "get_primary_ray",
    "primary_ray_direction",
    "DEFAULT_CAMERA_POSITION",
    "NEAR_PLANE_Z",
]
