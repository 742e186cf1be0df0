"""Unit tests for the material table and SceneManager.

Tests cover:
- Material validation and indexing
- Sphere creation with material index checks
- Scene clearing
- Serialization to and from dictionaries
"""

import json

import pytest


class TestMaterialTable:
    """Tests for the module-level material functions."""

    def test_add_material_returns_sequential_indices(self):
        """Test that material indices are assigned in order."""
        from softrt.materials.material import add_material, get_material_count

        assert add_material((1.0, 0.0, 0.0), 0.9) == 0
        assert add_material((0.0, 1.0, 0.0), 1.0) == 1
        assert get_material_count() == 2

    def test_material_fields_written(self):
        """Test that color and roughness land in the Taichi fields."""
        from softrt.materials.material import (
            add_material,
            material_colors,
            material_roughnesses,
        )

        idx = add_material((0.25, 0.5, 0.75), 0.4)
        c = material_colors[idx]
        assert abs(c[0] - 0.25) < 1e-6
        assert abs(c[1] - 0.5) < 1e-6
        assert abs(c[2] - 0.75) < 1e-6
        assert abs(material_roughnesses[idx] - 0.4) < 1e-6

    @pytest.mark.parametrize("color", [(1.5, 0.0, 0.0), (0.0, -0.1, 0.0)])
    def test_color_out_of_range(self, color):
        """Test that color components outside [0, 1] are rejected."""
        from softrt.materials.material import add_material

        with pytest.raises(ValueError, match="Color component"):
            add_material(color, 0.5)

    @pytest.mark.parametrize("roughness", [-0.1, 1.1])
    def test_roughness_out_of_range(self, roughness):
        """Test that roughness outside [0, 1] is rejected."""
        from softrt.materials.material import add_material

        with pytest.raises(ValueError, match="Roughness"):
            add_material((0.5, 0.5, 0.5), roughness)

    def test_clear_materials(self):
        """Test that clear_materials empties the table."""
        from softrt.materials.material import add_material, clear_materials, get_material_count

        add_material((0.5, 0.5, 0.5), 0.5)
        clear_materials()
        assert get_material_count() == 0


class TestSceneManager:
    """Tests for SceneManager."""

    def test_new_manager_clears_previous_scene(self):
        """Test that constructing a manager resets the scene."""
        from softrt.scene.intersection import add_sphere, get_sphere_count, vec3
        from softrt.scene.manager import SceneManager

        add_sphere(vec3(0, 0, 0), 1.0)
        scene = SceneManager()
        assert get_sphere_count() == 0
        assert scene.get_material_count() == 0

    def test_add_sphere_with_valid_material(self):
        """Test adding a sphere that references an existing material."""
        from softrt.scene.manager import SceneManager

        scene = SceneManager()
        red = scene.add_material((1.0, 0.0, 0.0), 0.9)
        idx = scene.add_sphere((0.0, 0.0, 3.0), 1.0, red)

        assert idx == 0
        assert scene.get_sphere_count() == 1
        assert scene.spheres[0].material_id == red
        assert scene.get_material_info(red).color == (1.0, 0.0, 0.0)

    def test_add_sphere_invalid_material(self):
        """Test that unknown material indices are rejected."""
        from softrt.scene.manager import SceneManager

        scene = SceneManager()
        scene.add_material((1.0, 0.0, 0.0), 0.9)

        with pytest.raises(ValueError, match="Invalid material_id"):
            scene.add_sphere((0.0, 0.0, 0.0), 1.0, 1)
        with pytest.raises(ValueError, match="Invalid material_id"):
            scene.add_sphere((0.0, 0.0, 0.0), 1.0, -1)
        assert scene.get_sphere_count() == 0

    def test_add_sphere_with_material(self):
        """Test the combined sphere + material helper."""
        from softrt.scene.manager import SceneManager

        scene = SceneManager()
        scene.add_material((0.0, 0.0, 1.0), 0.9)
        sphere_index, material_id = scene.add_sphere_with_material(
            (1.0, 2.0, 3.0), 0.5, (1.0, 1.0, 0.0), 0.985
        )
        assert sphere_index == 0
        assert material_id == 1

    def test_get_material_info_unknown(self):
        """Test that unknown material indices return None."""
        from softrt.scene.manager import SceneManager

        scene = SceneManager()
        assert scene.get_material_info(0) is None

    def test_clear(self):
        """Test that clear removes spheres and materials."""
        from softrt.scene.manager import SceneManager

        scene = SceneManager()
        scene.add_sphere_with_material((0, 0, 0), 1.0, (0.5, 0.5, 0.5), 0.5)
        scene.clear()
        assert scene.get_sphere_count() == 0
        assert scene.get_material_count() == 0
        assert scene.spheres == []
        assert scene.materials == []

    def test_capacity(self):
        """Test the capacity accessors."""
        from softrt.materials.material import MAX_MATERIALS
        from softrt.scene.intersection import MAX_SPHERES
        from softrt.scene.manager import SceneManager

        assert SceneManager.get_max_spheres() == MAX_SPHERES
        assert SceneManager.get_max_materials() == MAX_MATERIALS


class TestSceneSerialization:
    """Tests for to_dict / from_dict."""

    def test_round_trip_through_json(self):
        """Test that a scene survives a JSON round trip."""
        from softrt.scene.manager import SceneManager

        scene = SceneManager()
        ground = scene.add_material((0.75, 1.0, 0.75), 0.975)
        blue = scene.add_material((0.0, 0.0, 1.0), 0.9)
        scene.add_sphere((0.0, -1000.0, 5.0), 999.0, ground)
        scene.add_sphere((0.5, 0.2, 3.0), 0.4, blue)

        data = json.loads(json.dumps(scene.to_dict()))

        loaded = SceneManager()
        loaded.from_dict(data)
        assert loaded.get_material_count() == 2
        assert loaded.get_sphere_count() == 2
        assert loaded.spheres[1].material_id == blue
        assert loaded.spheres[0].center == (0.0, -1000.0, 5.0)
        assert loaded.to_dict() == scene.to_dict()

    def test_from_dict_invalid_reference(self):
        """Test that a sphere referencing a missing material is rejected."""
        from softrt.scene.manager import SceneManager

        scene = SceneManager()
        with pytest.raises(ValueError):
            scene.from_dict(
                {
                    "materials": [],
                    "spheres": [{"center": [0, 0, 0], "radius": 1.0, "material_id": 0}],
                }
            )

    def test_from_dict_bad_center(self):
        """Test that centers must have three components."""
        from softrt.scene.manager import SceneManager

        scene = SceneManager()
        with pytest.raises(ValueError, match="center"):
            scene.from_dict(
                {
                    "materials": [{"color": [1, 1, 1], "roughness": 0.5}],
                    "spheres": [{"center": [0, 0], "radius": 1.0, "material_id": 0}],
                }
            )

    @pytest.mark.parametrize(
        "data,missing",
        [
            ({"materials": [{"roughness": 0.5}], "spheres": []}, "color"),
            ({"materials": [{"color": [1, 1, 1]}], "spheres": []}, "roughness"),
            ({"materials": [], "spheres": [{"radius": 1.0, "material_id": 0}]}, "center"),
            ({"materials": [], "spheres": [{"center": [0, 0, 0], "material_id": 0}]}, "radius"),
            ({"materials": [], "spheres": [{"center": [0, 0, 0], "radius": 1.0}]}, "material_id"),
        ],
    )
    def test_from_dict_missing_key(self, data, missing):
        """Test that entries without a required key are rejected."""
        from softrt.scene.manager import SceneManager

        scene = SceneManager()
        with pytest.raises(ValueError, match=f"missing '{missing}'"):
            scene.from_dict(data)

    def test_from_dict_empty_entries(self):
        """Test that empty entries do not load default geometry."""
        from softrt.scene.manager import SceneManager

        scene = SceneManager()
        with pytest.raises(ValueError):
            scene.from_dict({"materials": [{}], "spheres": [{}]})
        assert scene.get_sphere_count() == 0
        assert scene.get_material_count() == 0

    def test_failed_load_keeps_current_scene(self):
        """Test that a config with a bad later entry leaves the loaded scene intact."""
        from softrt.scene.manager import SceneManager

        scene = SceneManager()
        scene.add_sphere_with_material((0.0, 0.0, 3.0), 1.0, (1.0, 0.0, 0.0), 0.9)
        before = scene.to_dict()

        with pytest.raises(ValueError, match="Invalid material_id"):
            scene.from_dict(
                {
                    "materials": [{"color": [0, 0, 1], "roughness": 0.5}],
                    "spheres": [
                        {"center": [1, 2, 3], "radius": 0.5, "material_id": 0},
                        {"center": [0, 0, 0], "radius": 1.0, "material_id": 7},
                    ],
                }
            )

        assert scene.to_dict() == before
        assert scene.get_sphere_count() == 1
        assert scene.get_material_count() == 1

    @pytest.mark.parametrize(
        "material,sphere",
        [
            ({"color": [1.5, 0, 0], "roughness": 0.5}, None),
            ({"color": [1, 0, 0], "roughness": 2.0}, None),
            (
                {"color": [1, 0, 0], "roughness": 0.5},
                {"center": [0, 0, 0], "radius": -1.0, "material_id": 0},
            ),
        ],
    )
    def test_failed_range_check_keeps_current_scene(self, material, sphere):
        """Test that out-of-range values are caught before anything is cleared."""
        from softrt.scene.manager import SceneManager

        scene = SceneManager()
        scene.add_sphere_with_material((0.0, 0.0, 3.0), 1.0, (1.0, 0.0, 0.0), 0.9)

        with pytest.raises(ValueError):
            scene.from_dict({"materials": [material], "spheres": [sphere] if sphere else []})

        assert scene.get_sphere_count() == 1
        assert scene.get_material_count() == 1
