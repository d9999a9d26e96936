"""Scene module: world storage and scene factories.

Components:
    world: Ordered list of hittable objects and the nearest-hit query
    random_spheres: The random spheres demo scene and its camera

Scene data lives in Taichi fields (structure-of-arrays layout) so kernels
can read it directly; ``World`` is the host-side builder.
"""

from .random_spheres import create_random_camera, create_random_scene
from .world import (
    MAX_OBJECTS,
    MAX_SPHERES,
    HittableType,
    SphereInfo,
    World,
    WorldHitRecord,
    clear_world_fields,
    hit_world,
)

__all__ = [
    # World
    "World",
    "SphereInfo",
    "HittableType",
    "WorldHitRecord",
    "MAX_OBJECTS",
    "MAX_SPHERES",
    "clear_world_fields",
    "hit_world",
    # Scenes
    "create_random_scene",
    "create_random_camera",
]
