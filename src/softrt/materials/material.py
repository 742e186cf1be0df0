"""Material table (albedo color + roughness).

Spheres refer to materials by integer index into this table, so several
spheres can share a material and no sphere holds a reference that can
outlive the material it points to.

Roughness blends local shading against the bounce contribution:
    roughness = 1: only the local diffuse color is kept
    roughness = 0: the surface shows only what the bounce ray sees

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from softrt.materials.material import add_material
    >>> grass = add_material((0.75, 1.0, 0.75), roughness=0.975)
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.dataclass
class Material:
    """Material properties.

    Attributes:
        color: The albedo color (RGB, each component in [0, 1]).
        roughness: Blend weight of local shading versus the bounce, in [0, 1].
    """

    color: vec3
    roughness: ti.f32


# Maximum number of materials
MAX_MATERIALS = 256

# Taichi fields for material storage
material_colors = ti.Vector.field(3, dtype=ti.f32, shape=MAX_MATERIALS)
material_roughnesses = ti.field(dtype=ti.f32, shape=MAX_MATERIALS)
num_materials = ti.field(dtype=ti.i32, shape=())


def clear_materials() -> None:
    """Clear all materials from the table."""
    num_materials[None] = 0


def validate_material(color: tuple[float, float, float], roughness: float) -> None:
    """Check material parameters without touching the table.

    Raises:
        ValueError: If any color component or the roughness is outside [0, 1].
    """
    for i, component in enumerate(color):
        if component < 0.0 or component > 1.0:
            raise ValueError(f"Color component {i} = {component} is outside [0, 1].")

    if roughness < 0.0 or roughness > 1.0:
        raise ValueError(
            f"Roughness = {roughness} is outside [0, 1]. "
            "Roughness must be between 0 (bounce only) and 1 (local shading only)."
        )


def add_material(
    color: tuple[float, float, float],
    roughness: float,
) -> int:
    """Add a material to the table.

    Args:
        color: The albedo color as (R, G, B) tuple. Each component must be
            in [0, 1].
        roughness: Blend weight in [0, 1].

    Returns:
        The index of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        ValueError: If any color component or the roughness is outside [0, 1].
    """
    validate_material(color, roughness)

    idx = num_materials[None]
    if idx >= MAX_MATERIALS:
        raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")

    material_colors[idx] = vec3(color[0], color[1], color[2])
    material_roughnesses[idx] = roughness
    num_materials[None] = idx + 1
    return idx


def get_material_count() -> int:
    """Get the number of materials in the table."""
    return int(num_materials[None])


@ti.func
def get_material_color(material_idx: ti.i32) -> vec3:
    """Get the albedo color for a material by index."""
    return material_colors[material_idx]


@ti.func
def get_material_roughness(material_idx: ti.i32) -> ti.f32:
    """Get the roughness for a material by index."""
    return material_roughnesses[material_idx]


@ti.func
def get_material(material_idx: ti.i32) -> Material:
    """Get a material by index as a Material struct."""
    return Material(
        color=material_colors[material_idx],
        roughness=material_roughnesses[material_idx],
    )
