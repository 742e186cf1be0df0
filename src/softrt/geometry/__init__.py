"""Geometry module for the sphere primitive.

Components:
    sphere: Sphere dataclass with analytic ray-sphere intersection

The intersection routine is a Taichi function (@ti.func) shared by the
closest-hit search and the shadow query:

    hits = intersect_sphere(ray_origin, ray_direction, sphere)
"""

from .sphere import (
    INTERSECT_EPSILON,
    Sphere,
    SphereHits,
    intersect_sphere,
    intersect_sphere_points,
    make_sphere,
)

__all__ = [
    "Sphere",
    "SphereHits",
    "intersect_sphere",
    "intersect_sphere_points",
    "make_sphere",
    "INTERSECT_EPSILON",
]
