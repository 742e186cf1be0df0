"""Shading engine: closest hit, local lighting, shadows and normal bounces.

For every ray the engine finds the closest sphere (ranked by distance from
the camera position), lights it with a single directional light and then
follows one secondary ray cast along the surface normal. The result at each
level is

    diffuse_color = color * max(diffuse, ambient)
    base          = lerp(diffuse_color, bounced, 1 - roughness)
    result        = lerp(base, white, specular)

where `bounced` is the color returned by the next level. At the depth limit
the bounce is skipped and the level returns lerp(diffuse_color, white,
specular). A ray that hits nothing returns the sky color.

Taichi functions cannot recurse, so the depth-limited recursion is unrolled.
Expanding the blend gives

    result = lerp(diffuse_color * roughness, white, specular)
             + bounced * (1 - roughness) * (1 - specular)

so each level adds its own term scaled by the running weight and multiplies
the weight by (1 - roughness) * (1 - specular) before continuing.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from softrt.core.shading import ShadingConfig, setup_shading, shade_ray
    >>> setup_shading(ShadingConfig(max_depth=8))
    >>> shade_ray((0, 0, -2), (0, 0, 1))
"""

import math
from dataclasses import dataclass, replace

import taichi as ti
import taichi.math as tm

from softrt.camera.near_plane import get_active_camera, get_camera_position
from softrt.core.vector import dot, lerp, normalize
from softrt.materials.material import get_material
from softrt.scene.intersection import SceneHitRecord, find_closest_hit, is_occluded

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Shading Constants
# =============================================================================

# Default light direction before normalization
DEFAULT_LIGHT_DIRECTION = (1.0, 1.0, -1.0)

# Color returned for rays that escape the scene
DEFAULT_SKY_COLOR = (0.75, 0.75, 1.0)

# Lower bound on the diffuse term so unlit surfaces keep some color
DEFAULT_AMBIENT = 0.15

# Blinn highlight exponent
DEFAULT_SPECULAR_EXPONENT = 128.0

# Number of normal bounces after the primary hit
DEFAULT_MAX_DEPTH = 8

# Upper bound accepted for max_depth
MAX_DEPTH_LIMIT = 64

# Offset along the normal for shadow and bounce ray origins
DEFAULT_SURFACE_EPSILON = 1e-3


@dataclass(frozen=True)
class ShadingConfig:
    """Constants used by the shading engine for one render.

    Attributes:
        light_direction: Direction toward the light. Normalized by
            setup_shading().
        sky_color: Color of rays that hit nothing.
        ambient: Minimum diffuse factor.
        specular_exponent: Exponent of the Blinn highlight.
        max_depth: Number of bounce levels after the primary hit. 0 disables
            bouncing.
        surface_epsilon: Offset along the normal for secondary ray origins.
    """

    light_direction: tuple[float, float, float] = DEFAULT_LIGHT_DIRECTION
    sky_color: tuple[float, float, float] = DEFAULT_SKY_COLOR
    ambient: float = DEFAULT_AMBIENT
    specular_exponent: float = DEFAULT_SPECULAR_EXPONENT
    max_depth: int = DEFAULT_MAX_DEPTH
    surface_epsilon: float = DEFAULT_SURFACE_EPSILON


# =============================================================================
# Shading State (GPU-accessible)
# =============================================================================

_light_direction = ti.Vector.field(3, dtype=ti.f32, shape=())
_sky_color = ti.Vector.field(3, dtype=ti.f32, shape=())
_ambient = ti.field(dtype=ti.f32, shape=())
_specular_exponent = ti.field(dtype=ti.f32, shape=())
_max_depth = ti.field(dtype=ti.i32, shape=())
_surface_epsilon = ti.field(dtype=ti.f32, shape=())

_active_config: ShadingConfig | None = None


def setup_shading(config: ShadingConfig) -> ShadingConfig:
    """Validate a shading configuration and write it to Taichi fields.

    Args:
        config: The configuration to install.

    Returns:
        The installed configuration, with light_direction normalized.

    Raises:
        ValueError: If the light direction is zero-length, max_depth is
            negative or above MAX_DEPTH_LIMIT, or ambient, specular_exponent
            or surface_epsilon is negative.
    """
    global _active_config

    lx, ly, lz = config.light_direction
    light_length = math.sqrt(lx * lx + ly * ly + lz * lz)
    if light_length <= 0.0:
        raise ValueError("Light direction must be non-zero")
    if config.max_depth < 0 or config.max_depth > MAX_DEPTH_LIMIT:
        raise ValueError(f"max_depth = {config.max_depth} is outside [0, {MAX_DEPTH_LIMIT}]")
    if config.ambient < 0.0:
        raise ValueError(f"ambient = {config.ambient} is negative")
    if config.specular_exponent < 0.0:
        raise ValueError(f"specular_exponent = {config.specular_exponent} is negative")
    if config.surface_epsilon < 0.0:
        raise ValueError(f"surface_epsilon = {config.surface_epsilon} is negative")

    config = replace(
        config,
        light_direction=(lx / light_length, ly / light_length, lz / light_length),
    )

    _light_direction[None] = list(config.light_direction)
    _sky_color[None] = list(config.sky_color)
    _ambient[None] = config.ambient
    _specular_exponent[None] = config.specular_exponent
    _max_depth[None] = config.max_depth
    _surface_epsilon[None] = config.surface_epsilon

    _active_config = config
    return config


def get_shading_config() -> ShadingConfig:
    """Get the active shading configuration, installing defaults if unset."""
    if _active_config is None:
        return setup_shading(ShadingConfig())
    return _active_config


# =============================================================================
# Shading Core
# =============================================================================


@ti.func
def local_lighting(rec: SceneHitRecord):
    """Compute the lit diffuse color and specular factor at a hit.

    Args:
        rec: A SceneHitRecord with hit == 1.

    Returns:
        A tuple of (diffuse_color, specular) where:
        - diffuse_color: Material color scaled by max(diffuse, ambient).
        - specular: Blinn highlight in [0, 1], zero when shadowed.
    """
    light_dir = _light_direction[None]
    normal = rec.normal
    material = get_material(rec.material_id)

    diffuse = tm.max(dot(normal, light_dir), 0.0)

    half = normalize(-rec.view_direction + light_dir)
    specular = tm.max(dot(normal, half), 0.0) ** _specular_exponent[None]

    shadow_origin = rec.point + normal * _surface_epsilon[None]
    if is_occluded(shadow_origin, light_dir) == 1:
        diffuse = 0.0
        specular = 0.0

    diffuse_color = material.color * tm.max(diffuse, _ambient[None])
    return diffuse_color, specular


@ti.func
def shade(ray_origin: vec3, ray_direction: vec3, camera_position: vec3) -> vec3:
    """Shade a ray, following normal bounces up to the configured depth.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray.
        camera_position: Reference point for ranking hits; fixed for the
            whole path.

    Returns:
        The shaded color (RGB, unclamped).
    """
    white = vec3(1.0, 1.0, 1.0)
    color = vec3(0.0, 0.0, 0.0)
    weight = 1.0

    origin = ray_origin
    direction = ray_direction
    max_depth = _max_depth[None]

    # Active flag for loop continuation
    active = 1

    ti.loop_config(serialize=True)
    for depth in range(max_depth + 1):
        if active == 1:
            rec = find_closest_hit(origin, direction, camera_position)

            if rec.hit == 0:
                color += weight * _sky_color[None]
                active = 0
            else:
                diffuse_color, specular = local_lighting(rec)

                if depth < max_depth:
                    roughness = get_material(rec.material_id).roughness
                    color += weight * lerp(diffuse_color * roughness, white, specular)
                    weight *= (1.0 - roughness) * (1.0 - specular)

                    origin = rec.point + rec.normal * _surface_epsilon[None]
                    direction = rec.normal
                else:
                    color += weight * lerp(diffuse_color, white, specular)
                    active = 0

    return color


# =============================================================================
# Python-side Query
# =============================================================================


@ti.kernel
def _shade_single(origin: vec3, direction: vec3, camera_position: vec3) -> vec3:
    return shade(origin, direction, camera_position)


@ti.kernel
def _shade_single_from_camera(origin: vec3, direction: vec3) -> vec3:
    return shade(origin, direction, get_camera_position())


def shade_ray(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    camera_position: tuple[float, float, float] | None = None,
) -> tuple[float, float, float]:
    """Shade a single ray from Python.

    Args:
        origin: Ray origin as (x, y, z).
        direction: Ray direction as (x, y, z).
        camera_position: Reference point for ranking hits. Defaults to the
            position set by setup_camera().

    Returns:
        Tuple of (R, G, B) color values, unclamped.
    """
    get_shading_config()
    if camera_position is None:
        get_active_camera()
        color = _shade_single_from_camera(vec3(*origin), vec3(*direction))
    else:
        color = _shade_single(vec3(*origin), vec3(*direction), vec3(*camera_position))
    return (float(color[0]), float(color[1]), float(color[2]))
