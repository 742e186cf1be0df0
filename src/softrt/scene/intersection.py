"""Scene-level sphere storage, closest-hit search and occlusion query.

Spheres are stored in Taichi fields (structure of arrays) and scanned
linearly for every ray; there is no acceleration structure.

The closest-hit search ranks spheres by the distance from the camera
position to each sphere's first intersection point, not by the parametric
distance from the ray origin. Bounce rays share the same camera reference
point as the primary ray, so ranking stays consistent along a path.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from softrt.scene.intersection import add_sphere, clear_scene, trace_occlusion, vec3
    >>> clear_scene()
    >>> add_sphere(vec3(0, 0, 0), 1.0, material_id=0)
    >>> trace_occlusion((0, 0, -5), (0, 0, 1))
    True
"""

from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from softrt.core.vector import length, normalize
from softrt.geometry.sphere import Sphere, intersect_sphere

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Initial closest distance; larger than any in-scene distance
NO_HIT_DISTANCE = 1.0e30


@ti.dataclass
class SceneHitRecord:
    """Record of the closest ray-scene intersection.

    Attributes:
        hit: Whether the ray intersected any sphere (1 if hit, 0 if miss).
        point: The first intersection point on the closest sphere.
        normal: Unit outward normal of the sphere at point.
        view_direction: Unit vector from the camera position to point.
        distance: Distance from the camera position to point.
        material_id: Material index of the hit sphere, -1 on a miss.
    """

    hit: ti.i32
    point: vec3
    normal: vec3
    view_direction: vec3
    distance: ti.f32
    material_id: ti.i32


# Maximum number of spheres supported in the scene
MAX_SPHERES = 1024

# Sphere storage: Structure of Arrays layout
sphere_centers = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
sphere_material_ids = ti.field(dtype=ti.i32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Clear all spheres from the scene.

    Resets the sphere count to zero. Field data is overwritten as new spheres
    are added.
    """
    num_spheres[None] = 0


def add_sphere(center: vec3, radius: float, material_id: int = 0) -> int:
    """Add a sphere to the scene.

    Args:
        center: The center point of the sphere.
        radius: The radius of the sphere (must be non-negative).
        material_id: The material index to associate with this sphere.

    Returns:
        The index of the added sphere.

    Raises:
        RuntimeError: If the maximum number of spheres is exceeded.
        ValueError: If radius is negative.
    """
    if radius < 0.0:
        raise ValueError(f"Sphere radius = {radius} is negative.")
    idx = num_spheres[None]
    if idx >= MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
    sphere_centers[idx] = center
    sphere_radii[idx] = radius
    sphere_material_ids[idx] = material_id
    num_spheres[None] = idx + 1
    return idx


def get_sphere_count() -> int:
    """Get the number of spheres in the scene."""
    return int(num_spheres[None])


@ti.func
def get_sphere(idx: ti.i32) -> Sphere:
    """Load a sphere from storage."""
    return Sphere(
        center=sphere_centers[idx],
        radius=sphere_radii[idx],
        material_id=sphere_material_ids[idx],
    )


@ti.func
def _make_miss_record() -> SceneHitRecord:
    """Create a SceneHitRecord indicating no intersection."""
    return SceneHitRecord(
        hit=0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 1.0, 0.0),
        view_direction=vec3(0.0, 0.0, 0.0),
        distance=NO_HIT_DISTANCE,
        material_id=-1,
    )


@ti.func
def find_closest_hit(
    ray_origin: vec3,
    ray_direction: vec3,
    camera_position: vec3,
) -> SceneHitRecord:
    """Find the sphere whose first intersection is closest to the camera.

    Every sphere is tested. Ties keep the earlier sphere in storage order.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray.
        camera_position: Reference point for ranking hits.

    Returns:
        A SceneHitRecord for the closest sphere, or a miss record.
    """
    result = _make_miss_record()
    closest = NO_HIT_DISTANCE

    n_spheres = num_spheres[None]
    ti.loop_config(serialize=True)
    for i in range(n_spheres):
        sphere = get_sphere(i)
        hits = intersect_sphere(ray_origin, ray_direction, sphere)
        if hits.count > 0:
            eye_vec = hits.near - camera_position
            dist = length(eye_vec)
            if dist < closest:
                closest = dist
                result = SceneHitRecord(
                    hit=1,
                    point=hits.near,
                    normal=normalize(hits.near - sphere.center),
                    view_direction=normalize(eye_vec),
                    distance=dist,
                    material_id=sphere.material_id,
                )

    return result


@ti.func
def is_occluded(ray_origin: vec3, ray_direction: vec3) -> ti.i32:
    """Test if the ray hits any sphere (shadow ray query).

    Stops testing spheres after the first hit. Callers offset the origin off the
    surface to keep the ray from hitting its own sphere.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray.

    Returns:
        1 if any sphere was hit, 0 otherwise.
    """
    hit_any = 0

    n_spheres = num_spheres[None]
    ti.loop_config(serialize=True)
    for i in range(n_spheres):
        if hit_any == 0:
            hits = intersect_sphere(ray_origin, ray_direction, get_sphere(i))
            if hits.count > 0:
                hit_any = 1

    return hit_any


# =============================================================================
# Python-side Queries
# =============================================================================


@dataclass
class ClosestHit:
    """Closest-hit result returned to Python.

    Attributes:
        point: The hit point.
        normal: Unit outward surface normal at the hit point.
        view_direction: Unit vector from the camera position to the hit point.
        distance: Distance from the camera position to the hit point.
        material_id: Material index of the hit sphere.
    """

    point: tuple[float, float, float]
    normal: tuple[float, float, float]
    view_direction: tuple[float, float, float]
    distance: float
    material_id: int


_query_hit = ti.field(dtype=ti.i32, shape=())
_query_material_id = ti.field(dtype=ti.i32, shape=())
_query_distance = ti.field(dtype=ti.f32, shape=())
# point, normal, view_direction
_query_vectors = ti.Vector.field(3, dtype=ti.f32, shape=3)


@ti.kernel
def _closest_hit_single(origin: vec3, direction: vec3, camera_position: vec3):
    rec = find_closest_hit(origin, direction, camera_position)
    _query_hit[None] = rec.hit
    _query_material_id[None] = rec.material_id
    _query_distance[None] = rec.distance
    _query_vectors[0] = rec.point
    _query_vectors[1] = rec.normal
    _query_vectors[2] = rec.view_direction


@ti.kernel
def _occlusion_single(origin: vec3, direction: vec3) -> ti.i32:
    return is_occluded(origin, direction)


def _to_tuple(v) -> tuple[float, float, float]:
    return (float(v[0]), float(v[1]), float(v[2]))


def query_closest_hit(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    camera_position: tuple[float, float, float],
) -> ClosestHit | None:
    """Run the closest-hit search for one ray from Python.

    Args:
        origin: Ray origin as (x, y, z).
        direction: Ray direction as (x, y, z).
        camera_position: Reference point for ranking hits.

    Returns:
        A ClosestHit, or None if the ray misses every sphere.
    """
    _closest_hit_single(vec3(*origin), vec3(*direction), vec3(*camera_position))
    if _query_hit[None] == 0:
        return None
    return ClosestHit(
        point=_to_tuple(_query_vectors[0]),
        normal=_to_tuple(_query_vectors[1]),
        view_direction=_to_tuple(_query_vectors[2]),
        distance=float(_query_distance[None]),
        material_id=int(_query_material_id[None]),
    )


def trace_occlusion(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
) -> bool:
    """Run the occlusion query for one ray from Python.

    Args:
        origin: Ray origin as (x, y, z).
        direction: Ray direction as (x, y, z).

    Returns:
        True if any sphere in the scene intersects the ray.
    """
    return bool(_occlusion_single(vec3(*origin), vec3(*direction)))
