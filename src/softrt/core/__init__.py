"""Core rendering module.

This module contains the fundamental building blocks of the tracer:

Components:
    vector: Ray data structure and vector utilities
    shading: Closest-hit shading with local lighting, shadows and bounces
    renderer: Frame driver mapping pixels to rays and handing colors to a sink

All compute-intensive operations use Taichi kernels.
"""

from .vector import (
    DEGENERATE_LENGTH_SQUARED,
    Ray,
    distance,
    dot,
    length,
    length_squared,
    lerp,
    make_ray,
    normalize,
    ray_at,
    saturate,
    vec3,
)

# Note: shading and renderer are NOT imported here to avoid circular imports.
# Import directly from softrt.core.shading or softrt.core.renderer when needed.

__all__ = [
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "dot",
    "length",
    "length_squared",
    "distance",
    "normalize",
    "lerp",
    "saturate",
    "DEGENERATE_LENGTH_SQUARED",
]
