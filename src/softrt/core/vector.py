"""Ray data structure and vector utilities for the sphere tracer.

This module provides the Ray dataclass and the small set of vector helpers
used by intersection and shading. All helpers are Taichi functions and are
meant to be called from inside kernels.

Arithmetic (add, subtract, scale, component-wise multiply) comes directly from
Taichi's vector operators and never normalizes implicitly. Normalization is
always an explicit call.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> origin = ti.math.vec3(0.0, 0.0, -2.0)
    >>> direction = ti.math.vec3(0.0, 0.0, 2.0)
    >>> ray = Ray(origin=origin, direction=direction)
    >>> point = ray_at(ray, 0.5)  # (0, 0, -1)
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Squared lengths at or below this are treated as zero vectors
DEGENERATE_LENGTH_SQUARED = 1e-12


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction vector of the ray (vec3). Not required to be
            unit length; intersection math accounts for its magnitude.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: ti.f32) -> vec3:
    """Compute the point along the ray at parametric distance t."""
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction inside a kernel."""
    return Ray(origin=origin, direction=direction)


# =============================================================================
# Vector Utility Functions
# =============================================================================


@ti.func
def dot(a: vec3, b: vec3) -> ti.f32:
    """Compute the dot product of two vectors."""
    return tm.dot(a, b)


@ti.func
def length_squared(v: vec3) -> ti.f32:
    """Compute the squared length of a vector.

    Cheaper than length() when only comparing magnitudes.
    """
    return tm.dot(v, v)


@ti.func
def length(v: vec3) -> ti.f32:
    """Compute the Euclidean length of a vector."""
    return tm.length(v)


@ti.func
def distance(a: vec3, b: vec3) -> ti.f32:
    """Compute the distance between two points."""
    return length(a - b)


@ti.func
def normalize(v: vec3) -> vec3:
    """Normalize a vector to unit length.

    Computed as v * (1 / length(v)).

    Args:
        v: The input vector.

    Returns:
        A unit vector in the same direction as v. A zero-length (or
        vanishingly short) vector yields the zero vector instead of NaN.
    """
    result = vec3(0.0, 0.0, 0.0)
    len_sq = tm.dot(v, v)
    if len_sq > DEGENERATE_LENGTH_SQUARED:
        result = v * (1.0 / ti.sqrt(len_sq))
    return result


@ti.func
def lerp(a: vec3, b: vec3, t: ti.f32) -> vec3:
    """Linearly interpolate between two vectors.

    Computes a + (b - a) * t. The parameter is not clamped, so values outside
    [0, 1] extrapolate; clamp beforehand if saturation is wanted.

    Args:
        a: Value at t = 0.
        b: Value at t = 1.
        t: Interpolation parameter.

    Returns:
        The interpolated vector.
    """
    return a + (b - a) * t


@ti.func
def saturate(x: ti.f32) -> ti.f32:
    """Clamp a scalar to [0, 1]."""
    return tm.clamp(x, 0.0, 1.0)
