"""Random spheres scene configuration.

This module builds the demo scene: a palette of fourteen materials, a set of
randomly placed spheres cycling through the palette, and one very large
sphere acting as the ground.

Randomness comes only from the numpy Generator passed in (or seeded here), so
the scene description is fully determined before rendering starts and the
trace itself stays deterministic.

Sphere placement (before scaling by 0.01):
    x in [-500, 500), y in [0, 500), z in [0, 1000)
    radius in [0, 1000) scaled by 0.00125

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from softrt.scene.random_spheres import create_random_spheres_scene
    >>> from softrt.camera.near_plane import setup_camera
    >>>
    >>> scene, camera = create_random_spheres_scene(seed=43)
    >>> setup_camera(camera)
"""

import numpy as np

from softrt.camera.near_plane import NearPlaneCamera
from softrt.scene.manager import SceneConfig, SceneManager

# =============================================================================
# Scene Constants
# =============================================================================

DEFAULT_SEED = 43
DEFAULT_NUM_SPHERES = 40

# (color, roughness); entry 0 is also the ground material
MATERIAL_PALETTE: list[tuple[tuple[float, float, float], float]] = [
    ((0.75, 1.0, 0.75), 0.975),
    ((0.0, 0.0, 1.0), 0.9),
    ((1.0, 0.0, 0.0), 0.9),
    ((0.0, 1.0, 0.0), 1.0),
    ((1.0, 1.0, 0.0), 0.985),
    ((0.0, 1.0, 1.0), 0.985),
    ((1.0, 0.0, 1.0), 0.985),
    ((1.0, 1.0, 1.0), 0.95),
    ((0.25, 0.25, 1.0), 0.95),
    ((1.0, 0.25, 0.25), 0.95),
    ((0.5, 1.0, 0.25), 0.95),
    ((1.0, 1.0, 0.25), 0.9),
    ((0.25, 1.0, 1.0), 0.9),
    ((1.0, 0.25, 1.0), 0.9),
]

# Ground sphere: top surface at y = -1
GROUND_CENTER = (0.0, -1000.0, 5.0)
GROUND_RADIUS = 999.0
GROUND_MATERIAL_ID = 0


# =============================================================================
# Scene Factory
# =============================================================================


def generate_random_spheres_config(
    rng: np.random.Generator,
    num_spheres: int = DEFAULT_NUM_SPHERES,
) -> SceneConfig:
    """Generate the random spheres scene description.

    Args:
        rng: Random source for sphere placement and size.
        num_spheres: Number of random spheres (the ground sphere is extra).

    Returns:
        A SceneConfig with the material palette, the random spheres and the
        ground sphere, in that order.

    Raises:
        ValueError: If num_spheres is negative.
    """
    if num_spheres < 0:
        raise ValueError(f"num_spheres = {num_spheres} is negative")

    config = SceneConfig()
    for color, roughness in MATERIAL_PALETTE:
        config.materials.append({"color": list(color), "roughness": roughness})

    for i in range(num_spheres):
        x = float(rng.integers(0, 1000) - 500) * 0.01
        y = float(rng.integers(0, 500)) * 0.01
        z = float(rng.integers(0, 1000)) * 0.01
        radius = float(rng.integers(0, 1000)) * 0.00125
        config.spheres.append(
            {
                "center": [x, y, z],
                "radius": radius,
                "material_id": i % len(MATERIAL_PALETTE),
            }
        )

    config.spheres.append(
        {
            "center": list(GROUND_CENTER),
            "radius": GROUND_RADIUS,
            "material_id": GROUND_MATERIAL_ID,
        }
    )
    return config


def create_random_spheres_scene(
    seed: int = DEFAULT_SEED,
    num_spheres: int = DEFAULT_NUM_SPHERES,
    rng: np.random.Generator | None = None,
) -> tuple[SceneManager, NearPlaneCamera]:
    """Create and load the random spheres scene.

    Args:
        seed: Seed for the random generator. Ignored if rng is given.
        num_spheres: Number of random spheres (the ground sphere is extra).
        rng: Optional random source to use instead of a seeded one.

    Returns:
        A tuple of (SceneManager, NearPlaneCamera) where:
        - SceneManager holds the loaded materials and spheres
        - NearPlaneCamera is the default camera at (0, 0, -2)
    """
    if rng is None:
        rng = np.random.default_rng(seed)

    scene = SceneManager()
    scene.from_config(generate_random_spheres_config(rng, num_spheres))
    return scene, NearPlaneCamera()
