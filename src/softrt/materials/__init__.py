"""Materials module.

Components:
    material: Material table holding albedo color and roughness per index

Spheres store a material index; shading looks the material up with the
Taichi functions get_material_color() / get_material_roughness().
"""

from .material import (
    MAX_MATERIALS,
    Material,
    add_material,
    clear_materials,
    get_material,
    get_material_color,
    get_material_count,
    get_material_roughness,
    validate_material,
)

__all__ = [
    "Material",
    "MAX_MATERIALS",
    "add_material",
    "clear_materials",
    "get_material",
    "get_material_color",
    "get_material_count",
    "get_material_roughness",
    "validate_material",
]
