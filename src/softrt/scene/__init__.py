"""Scene module for sphere storage and scene building.

Components:
    intersection: Sphere storage, closest-hit search and occlusion query
    manager: Scene manager coordinating spheres and materials
    random_spheres: The random spheres demo scene

Scene data lives in Taichi fields (structure of arrays) and is scanned
linearly per ray.
"""

from .intersection import (
    MAX_SPHERES,
    ClosestHit,
    SceneHitRecord,
    add_sphere,
    clear_scene,
    find_closest_hit,
    get_sphere_count,
    is_occluded,
    query_closest_hit,
    trace_occlusion,
)
from .manager import MaterialInfo, SceneConfig, SceneManager, SphereInfo
from .random_spheres import (
    MATERIAL_PALETTE,
    create_random_spheres_scene,
    generate_random_spheres_config,
)

__all__ = [
    # Intersection module
    "SceneHitRecord",
    "ClosestHit",
    "add_sphere",
    "clear_scene",
    "get_sphere_count",
    "find_closest_hit",
    "is_occluded",
    "query_closest_hit",
    "trace_occlusion",
    "MAX_SPHERES",
    # Manager module
    "SceneManager",
    "SceneConfig",
    "MaterialInfo",
    "SphereInfo",
    # Random spheres module
    "create_random_spheres_scene",
    "generate_random_spheres_config",
    "MATERIAL_PALETTE",
]
