"""Sphere primitive with analytic ray-sphere intersection.

This module provides the Sphere dataclass and the intersection routine used by
both the closest-hit search and the shadow (occlusion) query.

The ray-sphere intersection is found by solving:
    |ray_origin + t * ray_direction - center|^2 = radius^2

which expands to a*t^2 + b*t + c = 0 with:
    L = ray_origin - center
    a = dot(direction, direction)
    b = 2 * dot(direction, L)
    c = dot(L, L) - radius^2

Only roots with t >= 0 are reported. The second root is only considered when
the discriminant exceeds INTERSECT_EPSILON, so a grazing ray yields a single
point rather than two near-duplicates.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from softrt.geometry.sphere import intersect_sphere_points
    >>> intersect_sphere_points((0, 0, -5), (0, 0, 1), (0, 0, 0), 1.0)
    [(0.0, 0.0, -1.0), (0.0, 0.0, 1.0)]
"""

import taichi as ti
import taichi.math as tm

from softrt.core.vector import DEGENERATE_LENGTH_SQUARED, dot

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Discriminants at or below this produce a single (tangent) intersection
INTERSECT_EPSILON = 1e-5


@ti.dataclass
class Sphere:
    """A sphere defined by center point, radius and material index.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere (non-negative float).
        material_id: Index into the material table.
    """

    center: vec3
    radius: ti.f32
    material_id: ti.i32


@ti.dataclass
class SphereHits:
    """Ordered intersections of a ray with one sphere.

    Attributes:
        count: Number of valid intersections (0, 1 or 2).
        near: The nearer intersection point. Only valid if count >= 1.
        far: The farther intersection point. Only valid if count == 2.
        near_t: Parametric distance of near. Only valid if count >= 1.
        far_t: Parametric distance of far. Only valid if count == 2.
    """

    count: ti.i32
    near: vec3
    far: vec3
    near_t: ti.f32
    far_t: ti.f32


@ti.func
def intersect_sphere(ray_origin: vec3, ray_direction: vec3, sphere: Sphere) -> SphereHits:
    """Intersect a ray with a sphere.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray (need not be normalized).
        sphere: The sphere to test against.

    Returns:
        A SphereHits with the non-negative intersections ordered by ascending
        parametric distance. A zero-length direction yields no intersections.
    """
    oc = ray_origin - sphere.center
    a = dot(ray_direction, ray_direction)
    b = 2.0 * dot(ray_direction, oc)
    c = dot(oc, oc) - sphere.radius * sphere.radius
    discriminant = b * b - 4.0 * a * c

    # Taichi requires outer-scope declaration
    count = 0
    near = vec3(0.0, 0.0, 0.0)
    far = vec3(0.0, 0.0, 0.0)
    near_t = 0.0
    far_t = 0.0

    if discriminant >= 0.0 and a > DEGENERATE_LENGTH_SQUARED:
        sqrt_d = ti.sqrt(discriminant)

        t0 = (-b + sqrt_d) / (2.0 * a)
        if t0 >= 0.0:
            near = ray_origin + ray_direction * t0
            near_t = t0
            count = 1

        if discriminant > INTERSECT_EPSILON:
            t1 = (-b - sqrt_d) / (2.0 * a)
            if t1 >= 0.0:
                p1 = ray_origin + ray_direction * t1
                if count == 0:
                    near = p1
                    near_t = t1
                elif t1 < t0:
                    far = near
                    far_t = near_t
                    near = p1
                    near_t = t1
                else:
                    far = p1
                    far_t = t1
                count += 1

    return SphereHits(count=count, near=near, far=far, near_t=near_t, far_t=far_t)


@ti.func
def make_sphere(center: vec3, radius: ti.f32, material_id: ti.i32) -> Sphere:
    """Create a sphere inside a kernel."""
    return Sphere(center=center, radius=radius, material_id=material_id)


# =============================================================================
# Python-side Query
# =============================================================================

_query_count = ti.field(dtype=ti.i32, shape=())
_query_points = ti.Vector.field(3, dtype=ti.f32, shape=2)


@ti.kernel
def _intersect_single(origin: vec3, direction: vec3, center: vec3, radius: ti.f32):
    hits = intersect_sphere(origin, direction, Sphere(center=center, radius=radius, material_id=0))
    _query_count[None] = hits.count
    _query_points[0] = hits.near
    _query_points[1] = hits.far


def intersect_sphere_points(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    center: tuple[float, float, float],
    radius: float,
) -> list[tuple[float, float, float]]:
    """Intersect a ray with a sphere from Python.

    Runs intersect_sphere in a one-off kernel. Intended for tooling and tests;
    rendering uses the Taichi function directly.

    Args:
        origin: Ray origin as (x, y, z).
        direction: Ray direction as (x, y, z).
        center: Sphere center as (x, y, z).
        radius: Sphere radius.

    Returns:
        Zero, one or two intersection points, nearest first.
    """
    _intersect_single(vec3(*origin), vec3(*direction), vec3(*center), radius)
    count = int(_query_count[None])
    points = []
    for i in range(count):
        p = _query_points[i]
        points.append((float(p[0]), float(p[1]), float(p[2])))
    return points
