"""Pytest configuration for softrt tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield


@pytest.fixture(autouse=True)
def reset_render_state():
    """Reset scene, materials, shading and camera before and after each test.

    This ensures tests are isolated from each other.
    """
    # Import here so Taichi is initialized before any field is touched
    from softrt.camera.near_plane import NearPlaneCamera, setup_camera
    from softrt.core.shading import ShadingConfig, setup_shading
    from softrt.materials.material import clear_materials
    from softrt.scene.intersection import clear_scene

    def _reset():
        clear_scene()
        clear_materials()
        setup_shading(ShadingConfig())
        setup_camera(NearPlaneCamera())

    _reset()

    yield

    _reset()
