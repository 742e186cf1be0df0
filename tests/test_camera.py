"""Tests for the near-plane camera.

Tests cover:
- Pixel to near-plane mapping (top-left origin, y up)
- Primary ray direction from the camera position
- Camera setup and the default camera
"""

import pytest


class TestNearPlaneMapping:
    """Tests for primary ray directions."""

    def test_top_left_pixel(self):
        """Test that pixel (0, 0) maps to the near-plane corner (-1, 1)."""
        from softrt.camera.near_plane import primary_ray_direction

        d = primary_ray_direction(0, 0, 4, 4)
        assert d == pytest.approx((-1.0, 1.0, 2.0))

    def test_center_pixel(self):
        """Test that the middle pixel maps to the near-plane center."""
        from softrt.camera.near_plane import primary_ray_direction

        d = primary_ray_direction(2, 2, 4, 4)
        assert d == pytest.approx((0.0, 0.0, 2.0))

    def test_y_decreases_downward(self):
        """Test that larger row indices map to lower near-plane points."""
        from softrt.camera.near_plane import primary_ray_direction

        d = primary_ray_direction(3, 1, 4, 4)
        assert d == pytest.approx((0.5, 0.5, 2.0))

    def test_non_square_image(self):
        """Test that x and y steps follow width and height independently."""
        from softrt.camera.near_plane import primary_ray_direction

        d = primary_ray_direction(4, 1, 8, 2)
        assert d == pytest.approx((0.0, 0.0, 2.0))

    def test_custom_camera_position(self):
        """Test that the direction points from the camera to the near plane."""
        from softrt.camera.near_plane import NearPlaneCamera, primary_ray_direction, setup_camera

        setup_camera(NearPlaneCamera(position=(1.0, 0.0, -3.0)))
        d = primary_ray_direction(2, 2, 4, 4)
        assert d == pytest.approx((-1.0, 0.0, 3.0))


class TestCameraSetup:
    """Tests for camera configuration."""

    def test_default_position(self):
        """Test the default camera position."""
        from softrt.camera.near_plane import NearPlaneCamera

        assert NearPlaneCamera().position == (0.0, 0.0, -2.0)

    def test_camera_info(self):
        """Test that get_camera_info reflects setup_camera."""
        from softrt.camera.near_plane import NearPlaneCamera, get_camera_info, setup_camera

        setup_camera(NearPlaneCamera(position=(0.5, 1.0, -4.0)))
        assert get_camera_info()["position"] == pytest.approx((0.5, 1.0, -4.0))

    def test_active_camera(self):
        """Test that get_active_camera returns the installed camera."""
        from softrt.camera.near_plane import NearPlaneCamera, get_active_camera, setup_camera

        camera = NearPlaneCamera(position=(0.0, 1.0, -2.0))
        setup_camera(camera)
        assert get_active_camera() is camera
