"""Unit tests for ray-sphere intersection.

Tests cover:
- Ray hitting a sphere from outside (two points, nearest first)
- Ray missing a sphere
- Ray tangent to a sphere (single point)
- Ray starting inside a sphere (exit point only)
- Sphere entirely behind the ray
- Degenerate (zero-length) ray direction
- Unnormalized ray directions
"""

import pytest
import taichi as ti


def _assert_point(actual, expected, tol=1e-4):
    for c in range(3):
        assert abs(actual[c] - expected[c]) < tol, f"{actual} != {expected}"


class TestSphereBasics:
    """Tests for Sphere dataclass and basic operations."""

    def test_make_sphere(self):
        """Test make_sphere convenience function."""
        from softrt.geometry.sphere import make_sphere, vec3

        center_result = ti.field(dtype=ti.math.vec3, shape=())
        radius_result = ti.field(dtype=ti.f32, shape=())
        material_result = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            sphere = make_sphere(vec3(1.0, 2.0, 3.0), 0.5, 7)
            center_result[None] = sphere.center
            radius_result[None] = sphere.radius
            material_result[None] = sphere.material_id

        test_kernel()
        _assert_point(center_result[None], (1.0, 2.0, 3.0), tol=1e-6)
        assert abs(radius_result[None] - 0.5) < 1e-6
        assert material_result[None] == 7


class TestSphereIntersection:
    """Tests for intersect_sphere."""

    def test_direct_hit_two_points(self):
        """Test that a ray through the center yields entry then exit point."""
        from softrt.geometry.sphere import intersect_sphere_points

        points = intersect_sphere_points((0, 0, -5), (0, 0, 1), (0, 0, 0), 1.0)
        assert len(points) == 2
        _assert_point(points[0], (0.0, 0.0, -1.0))
        _assert_point(points[1], (0.0, 0.0, 1.0))

    def test_hit_points_at_center_distance_plus_minus_radius(self):
        """Test distances from origin equal |O - C| -/+ r."""
        from softrt.geometry.sphere import intersect_sphere_points

        origin = (1.0, 2.0, -10.0)
        center = (1.0, 2.0, 3.0)
        radius = 2.5
        points = intersect_sphere_points(origin, (0, 0, 1), center, radius)
        assert len(points) == 2
        assert abs(points[0][2] - origin[2] - (13.0 - radius)) < 1e-4
        assert abs(points[1][2] - origin[2] - (13.0 + radius)) < 1e-4

    def test_miss(self):
        """Test that a ray passing beside the sphere reports nothing."""
        from softrt.geometry.sphere import intersect_sphere_points

        points = intersect_sphere_points((0, 2, -5), (0, 0, 1), (0, 0, 0), 1.0)
        assert points == []

    def test_tangent_single_point(self):
        """Test that a grazing ray yields exactly one point."""
        from softrt.geometry.sphere import intersect_sphere_points

        points = intersect_sphere_points((0, 1, -5), (0, 0, 1), (0, 0, 0), 1.0)
        assert len(points) == 1
        _assert_point(points[0], (0.0, 1.0, 0.0))

    def test_near_tangent_single_point(self):
        """Test that a discriminant inside (0, epsilon] yields one point, not two."""
        import math

        from softrt.geometry.sphere import INTERSECT_EPSILON, intersect_sphere_points

        height = math.sqrt(1.0 - 1e-6)
        origin = (0.0, height, -0.5)

        # a = 1, b = -1, c = height^2 + 0.25 - 1
        discriminant = 1.0 - 4.0 * (height * height + 0.25 - 1.0)
        assert 0.0 < discriminant <= INTERSECT_EPSILON

        points = intersect_sphere_points(origin, (0, 0, 1), (0, 0, 0), 1.0)
        assert len(points) == 1
        assert abs(points[0][1] - height) < 1e-4

    def test_origin_inside_sphere(self):
        """Test that a ray starting inside only reports the exit point."""
        from softrt.geometry.sphere import intersect_sphere_points

        points = intersect_sphere_points((0, 0, 0), (0, 0, 1), (0, 0, 0), 1.0)
        assert len(points) == 1
        _assert_point(points[0], (0.0, 0.0, 1.0))

    def test_sphere_behind_ray(self):
        """Test that intersections with negative t are discarded."""
        from softrt.geometry.sphere import intersect_sphere_points

        points = intersect_sphere_points((0, 0, 5), (0, 0, 1), (0, 0, 0), 1.0)
        assert points == []

    def test_zero_direction(self):
        """Test that a zero-length direction never reports a hit."""
        from softrt.geometry.sphere import intersect_sphere_points

        points = intersect_sphere_points((0, 0, 0), (0, 0, 0), (0, 0, 0), 1.0)
        assert points == []

    @pytest.mark.parametrize("scale", [0.25, 1.0, 4.0])
    def test_unnormalized_direction(self, scale):
        """Test that hit points do not depend on direction magnitude."""
        from softrt.geometry.sphere import intersect_sphere_points

        points = intersect_sphere_points((0, 0, -5), (0, 0, scale), (0, 0, 0), 1.0)
        assert len(points) == 2
        _assert_point(points[0], (0.0, 0.0, -1.0))
        _assert_point(points[1], (0.0, 0.0, 1.0))

    def test_parametric_distances_ordered(self):
        """Test near_t <= far_t inside a kernel."""
        from softrt.geometry.sphere import Sphere, intersect_sphere, vec3

        count = ti.field(dtype=ti.i32, shape=())
        near_t = ti.field(dtype=ti.f32, shape=())
        far_t = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            sphere = Sphere(center=vec3(0.0, 0.0, 0.0), radius=1.0, material_id=0)
            hits = intersect_sphere(vec3(0.0, 0.0, -5.0), vec3(0.0, 0.0, 2.0), sphere)
            count[None] = hits.count
            near_t[None] = hits.near_t
            far_t[None] = hits.far_t

        test_kernel()
        assert count[None] == 2
        assert abs(near_t[None] - 2.0) < 1e-5
        assert abs(far_t[None] - 3.0) < 1e-5
