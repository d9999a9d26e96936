"""Random spheres demo scene.

The classic closing image of "Ray Tracing in One Weekend": a large grey
ground sphere covered by a grid of small spheres with randomly chosen
materials, plus three large feature spheres (glass, diffuse, mirror).

Grid cells pick a material with these odds:
- 80% diffuse, albedo = random color * random color
- 15% metal, albedo in [0.5, 1), fuzz in [0, 0.5)
- 5% glass, ior 1.5

Small spheres that would overlap the front feature sphere are skipped.

Example:
    >>> from pathtracer.camera import setup_camera
    >>> from pathtracer.scene.random_spheres import create_random_scene
    >>>
    >>> world, camera = create_random_scene(seed=7)
    >>> setup_camera(camera)
"""

import logging

import numpy as np

from pathtracer.camera.thin_lens import ThinLensCamera
from pathtracer.materials.dielectric import Dielectric
from pathtracer.materials.lambertian import Lambertian
from pathtracer.materials.metal import Metal
from pathtracer.scene.world import World

logger = logging.getLogger(__name__)

# =============================================================================
# Scene Constants
# =============================================================================

DEFAULT_GRID = 11

GROUND_CENTER = (0.0, -1000.0, 0.0)
GROUND_RADIUS = 1000.0
GROUND_ALBEDO = (0.5, 0.5, 0.5)

SMALL_RADIUS = 0.2
GLASS_IOR = 1.5

# Small spheres closer than this to the reference point are skipped
CLEARANCE_POINT = np.array((4.0, 0.2, 0.0))
CLEARANCE = 0.9

# Cumulative material odds for the grid
DIFFUSE_ODDS = 0.8
METAL_ODDS = 0.95

FEATURE_RADIUS = 1.0
GLASS_CENTER = (0.0, 1.0, 0.0)
DIFFUSE_CENTER = (-4.0, 1.0, 0.0)
DIFFUSE_ALBEDO = (0.4, 0.2, 0.1)
MIRROR_CENTER = (4.0, 1.0, 0.0)
MIRROR_ALBEDO = (0.7, 0.6, 0.5)

# Camera
LOOKFROM = (13.0, 2.0, 3.0)
LOOKAT = (0.0, 0.0, 0.0)
VUP = (0.0, 1.0, 0.0)
VFOV = 20.0
ASPECT_RATIO = 16.0 / 9.0
APERTURE = 0.1
FOCUS_DIST = 10.0


def _as_tuple(values: np.ndarray) -> tuple[float, float, float]:
    return (float(values[0]), float(values[1]), float(values[2]))


def create_random_camera(aspect_ratio: float = ASPECT_RATIO) -> ThinLensCamera:
    """Create the camera framing the random spheres scene."""
    return ThinLensCamera(
        lookfrom=LOOKFROM,
        lookat=LOOKAT,
        vup=VUP,
        vfov=VFOV,
        aspect_ratio=aspect_ratio,
        aperture=APERTURE,
        focus_dist=FOCUS_DIST,
    )


def create_random_scene(
    seed: int | None = None,
    grid: int = DEFAULT_GRID,
    aspect_ratio: float = ASPECT_RATIO,
) -> tuple[World, ThinLensCamera]:
    """Build the random spheres world and its camera.

    Args:
        seed: Seed for the scene layout. None gives a different layout on
            every call.
        grid: Small spheres are placed on cells ``a, b`` in ``[-grid, grid)``.
        aspect_ratio: Aspect ratio of the returned camera.

    Returns:
        Tuple of (world, camera).

    Raises:
        ValueError: If grid is negative.
        RuntimeError: If the grid needs more spheres than the world can hold.
    """
    if grid < 0:
        raise ValueError(f"grid must be non-negative, got {grid}")

    rng = np.random.default_rng(seed)
    world = World()

    world.add_sphere(GROUND_CENTER, GROUND_RADIUS, Lambertian(albedo=GROUND_ALBEDO))

    for a in range(-grid, grid):
        for b in range(-grid, grid):
            choose_mat = rng.random()
            center = np.array((a + 0.9 * rng.random(), SMALL_RADIUS, b + 0.9 * rng.random()))

            if np.linalg.norm(center - CLEARANCE_POINT) <= CLEARANCE:
                continue

            if choose_mat < DIFFUSE_ODDS:
                material = Lambertian(albedo=_as_tuple(rng.random(3) * rng.random(3)))
            elif choose_mat < METAL_ODDS:
                material = Metal(
                    albedo=_as_tuple(rng.uniform(0.5, 1.0, 3)),
                    fuzz=float(rng.uniform(0.0, 0.5)),
                )
            else:
                material = Dielectric(ior=GLASS_IOR)

            world.add_sphere(_as_tuple(center), SMALL_RADIUS, material)

    world.add_sphere(GLASS_CENTER, FEATURE_RADIUS, Dielectric(ior=GLASS_IOR))
    world.add_sphere(DIFFUSE_CENTER, FEATURE_RADIUS, Lambertian(albedo=DIFFUSE_ALBEDO))
    world.add_sphere(MIRROR_CENTER, FEATURE_RADIUS, Metal(albedo=MIRROR_ALBEDO, fuzz=0.0))

    logger.debug(
        "Random scene: %d spheres, %d materials", world.sphere_count, world.material_count
    )
    return world, create_random_camera(aspect_ratio)
