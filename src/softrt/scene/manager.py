"""Scene building on top of the sphere storage and the material table.

Spheres refer to materials by index. SceneManager keeps a host-side copy of
everything it writes to the Taichi fields, checks every material index before
it reaches the sphere storage, and converts the scene to and from plain
dictionaries so it can be stored as JSON.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from softrt.scene.manager import SceneManager
    >>> scene = SceneManager()
    >>> red = scene.add_material(color=(1.0, 0.0, 0.0), roughness=0.9)
    >>> scene.add_sphere(center=(0, 0, 0), radius=1.0, material_id=red)
    0
"""

import logging
from dataclasses import asdict, dataclass, field
from typing import Any

import taichi.math as tm

from softrt.materials.material import (
    MAX_MATERIALS,
    add_material,
    clear_materials,
    get_material_count,
    validate_material,
)
from softrt.scene.intersection import (
    MAX_SPHERES,
    add_sphere,
    clear_scene,
    get_sphere_count,
)

logger = logging.getLogger(__name__)

vec3 = tm.vec3


@dataclass
class MaterialInfo:
    """Host-side record of one material table entry.

    Attributes:
        material_id: Index into the material table.
        color: Albedo as (R, G, B).
        roughness: Weight of local shading against the bounce.
    """

    material_id: int
    color: tuple[float, float, float]
    roughness: float


@dataclass
class SphereInfo:
    """Host-side record of one stored sphere.

    Attributes:
        sphere_index: Slot in the sphere storage fields.
        center: Sphere center as (x, y, z).
        radius: Sphere radius.
        material_id: Material table index used by the sphere.
    """

    sphere_index: int
    center: tuple[float, float, float]
    radius: float
    material_id: int


@dataclass
class SceneConfig:
    """JSON-compatible scene description.

    Attributes:
        materials: Entries of the form {"color": [r, g, b], "roughness": float}.
            A sphere's material_id is the position of its material here.
        spheres: Entries of the form
            {"center": [x, y, z], "radius": float, "material_id": int}.
    """

    materials: list[dict[str, Any]] = field(default_factory=list)
    spheres: list[dict[str, Any]] = field(default_factory=list)


def _as_triple(values: Any, name: str) -> tuple[float, float, float]:
    """Convert a 3-element sequence from a config entry into a float tuple."""
    if len(values) != 3:
        raise ValueError(f"{name} must have 3 components, got {len(values)}")
    return (float(values[0]), float(values[1]), float(values[2]))


def _require(entry: dict[str, Any], key: str, kind: str, index: int) -> Any:
    """Fetch a mandatory key from a config entry."""
    if key not in entry:
        raise ValueError(f"{kind} entry {index} is missing '{key}'")
    return entry[key]


def _parse_config(
    config: SceneConfig,
) -> tuple[
    list[tuple[tuple[float, float, float], float]],
    list[tuple[tuple[float, float, float], float, int]],
]:
    """Validate a SceneConfig and convert it to plain tuples.

    Returns:
        (materials, spheres) as lists of (color, roughness) and
        (center, radius, material_id).

    Raises:
        ValueError: If any entry is missing a key, is out of range or refers
            to a material that is not in the config.
        RuntimeError: If the config exceeds the sphere or material capacity.
    """
    if len(config.materials) > MAX_MATERIALS:
        raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")
    if len(config.spheres) > MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")

    materials = []
    for i, entry in enumerate(config.materials):
        color = _as_triple(_require(entry, "color", "Material", i), "color")
        roughness = float(_require(entry, "roughness", "Material", i))
        validate_material(color, roughness)
        materials.append((color, roughness))

    spheres = []
    for i, entry in enumerate(config.spheres):
        center = _as_triple(_require(entry, "center", "Sphere", i), "center")
        radius = float(_require(entry, "radius", "Sphere", i))
        material_id = int(_require(entry, "material_id", "Sphere", i))
        if radius < 0.0:
            raise ValueError(f"Sphere entry {i} has negative radius {radius}")
        if not 0 <= material_id < len(materials):
            raise ValueError(f"Invalid material_id: {material_id} in sphere entry {i}")
        spheres.append((center, radius, material_id))

    return materials, spheres


class SceneManager:
    """Builds the active scene.

    The Taichi fields read by the shading kernels are module-level, so there
    is one active scene per process. Constructing a SceneManager empties it.

    Attributes:
        materials: MaterialInfo for every material, in table order.
        spheres: SphereInfo for every sphere, in storage order.

    Example:
        >>> scene = SceneManager()
        >>> ground = scene.add_material((0.75, 1.0, 0.75), roughness=0.975)
        >>> blue = scene.add_material((0.0, 0.0, 1.0), roughness=0.9)
        >>> scene.add_sphere((0.0, -1000.0, 5.0), 999.0, ground)
        0
        >>> scene.add_sphere((0.5, 0.2, 3.0), 0.4, blue)
        1
    """

    def __init__(self) -> None:
        self.materials: list[MaterialInfo] = []
        self.spheres: list[SphereInfo] = []
        self.clear()

    def clear(self) -> None:
        """Remove every sphere and material, host records included."""
        clear_scene()
        clear_materials()
        self.materials = []
        self.spheres = []

    # -------------------------------------------------------------------------
    # Materials
    # -------------------------------------------------------------------------

    def add_material(
        self,
        color: tuple[float, float, float],
        roughness: float,
    ) -> int:
        """Append a material to the table.

        Args:
            color: Albedo as (R, G, B), each component in [0, 1].
            roughness: Blend weight in [0, 1].

        Returns:
            The new material index.

        Raises:
            ValueError: If color or roughness is out of range.
            RuntimeError: If the table is full.
        """
        material_id = add_material(color, roughness)
        self.materials.append(MaterialInfo(material_id, tuple(color), roughness))
        return material_id

    def get_material_count(self) -> int:
        return get_material_count()

    def get_material_info(self, material_id: int) -> MaterialInfo | None:
        """Look up a material record; None for an unknown index."""
        if material_id < 0 or material_id >= len(self.materials):
            return None
        return self.materials[material_id]

    # -------------------------------------------------------------------------
    # Spheres
    # -------------------------------------------------------------------------

    def add_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        material_id: int,
    ) -> int:
        """Store a sphere that uses an existing material.

        Args:
            center: Sphere center as (x, y, z).
            radius: Sphere radius, non-negative.
            material_id: Index returned by add_material().

        Returns:
            The new sphere's storage index.

        Raises:
            ValueError: If material_id is not in the table or radius is
                negative.
            RuntimeError: If the sphere storage is full.
        """
        if not 0 <= material_id < get_material_count():
            raise ValueError(
                f"Invalid material_id: {material_id} "
                f"(table holds {get_material_count()} materials)"
            )

        index = add_sphere(vec3(center[0], center[1], center[2]), radius, material_id)
        self.spheres.append(SphereInfo(index, tuple(center), radius, material_id))
        return index

    def add_sphere_with_material(
        self,
        center: tuple[float, float, float],
        radius: float,
        color: tuple[float, float, float],
        roughness: float,
    ) -> tuple[int, int]:
        """Create a material and a sphere using it.

        Returns:
            (sphere_index, material_id)
        """
        material_id = self.add_material(color, roughness)
        return self.add_sphere(center, radius, material_id), material_id

    def get_sphere_count(self) -> int:
        return get_sphere_count()

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_config(self) -> SceneConfig:
        """Describe the current scene as a SceneConfig."""
        materials = [
            {"color": list(info.color), "roughness": info.roughness} for info in self.materials
        ]
        spheres = []
        for info in self.spheres:
            entry = asdict(info)
            del entry["sphere_index"]
            entry["center"] = list(info.center)
            spheres.append(entry)
        return SceneConfig(materials=materials, spheres=spheres)

    def from_config(self, config: SceneConfig) -> None:
        """Replace the current scene with the one described by config.

        Every entry is validated before the current scene is cleared, so a
        bad config leaves the loaded scene untouched.

        Raises:
            ValueError: If an entry is missing a key, is out of range or
                refers to a material that is not in the config.
            RuntimeError: If the config exceeds the sphere or material
                capacity.
        """
        materials, spheres = _parse_config(config)

        self.clear()
        for color, roughness in materials:
            self.add_material(color, roughness)
        for center, radius, material_id in spheres:
            self.add_sphere(center, radius, material_id)

        logger.debug(
            "Loaded scene with %d materials and %d spheres",
            len(self.materials),
            len(self.spheres),
        )

    def to_dict(self) -> dict[str, Any]:
        """Describe the current scene as a JSON-compatible dictionary."""
        return asdict(self.to_config())

    def from_dict(self, data: dict[str, Any]) -> None:
        """Replace the current scene with one read from a dictionary.

        Args:
            data: Mapping with optional "materials" and "spheres" lists.
        """
        self.from_config(SceneConfig(data.get("materials", []), data.get("spheres", [])))

    # -------------------------------------------------------------------------
    # Capacity
    # -------------------------------------------------------------------------

    @staticmethod
    def get_max_spheres() -> int:
        return MAX_SPHERES

    @staticmethod
    def get_max_materials() -> int:
        return MAX_MATERIALS
