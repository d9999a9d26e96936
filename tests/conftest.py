"""Pytest configuration for renderer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    from pathtracer.backend import init_backend

    init_backend(arch="cpu")
    yield


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Clear world, material and render target data around each test."""
    # Import here so that Taichi is initialized before fields are declared
    from pathtracer.core.integrator import clear_render_target
    from pathtracer.materials.material import clear_materials
    from pathtracer.scene.world import clear_world_fields

    def _clear_all():
        clear_world_fields()
        clear_materials()
        clear_render_target()

    _clear_all()
    yield
    _clear_all()


@pytest.fixture
def simple_camera():
    """A pinhole camera at the origin looking down -z with a 90 degree fov."""
    from pathtracer.camera import ThinLensCamera, setup_camera

    camera = ThinLensCamera(
        lookfrom=(0.0, 0.0, 0.0),
        lookat=(0.0, 0.0, -1.0),
        vup=(0.0, 1.0, 0.0),
        vfov=90.0,
        aspect_ratio=1.0,
    )
    setup_camera(camera)
    return camera
