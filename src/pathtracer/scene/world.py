"""World storage and nearest-hit queries.

The world is a flat, ordered list of hittable objects. Each object is a tagged
variant (``HittableType``) pointing into the storage of its primitive type, and
``hit_world`` scans every object with a shrinking ``t_max``, so the nearest hit
wins. There is deliberately no spatial index.

Primitives and materials live in Taichi fields (structure-of-arrays layout) so
kernels can read them; the ``World`` class is the host-side builder that writes
those fields and keeps Python-side records of what was added. There is one
world per process: constructing a ``World`` clears the previous one.

Example:
    >>> from pathtracer.materials import Dielectric, Lambertian
    >>> world = World()
    >>> glass = Dielectric(ior=1.5)
    >>> world.add_sphere((0.0, 0.0, -1.0), 0.5, glass)
    0
    >>> world.add_sphere((1.0, 0.0, -1.0), 0.5, glass)  # shares the material
    1
    >>> world.material_count
    1
"""

import logging
from dataclasses import dataclass
from enum import IntEnum

import taichi as ti

from pathtracer.core.ray import Ray, vec3
from pathtracer.geometry.sphere import HitRecord, Sphere, hit_sphere
from pathtracer.materials.material import Material, clear_materials, register_material

logger = logging.getLogger(__name__)


class HittableType(IntEnum):
    """Enumeration of supported primitive types."""

    SPHERE = 0


@ti.dataclass
class WorldHitRecord:
    """Record of a ray-world intersection with material information.

    Extends HitRecord with the material ID of the object hit.

    Attributes:
        hit: 1 if the ray intersected any object, 0 on a miss.
        t: Ray parameter of the nearest intersection.
        point: The nearest intersection point.
        normal: Unit surface normal facing against the ray.
        front_face: 1 if the ray hit the outside of the surface.
        material_id: Material ID of the object hit, -1 on a miss.
    """

    hit: ti.i32
    t: ti.f64
    point: vec3
    normal: vec3
    front_face: ti.i32
    material_id: ti.i32


# Maximum number of objects supported in the world
MAX_OBJECTS = 1024
MAX_SPHERES = 1024

# Object list: variant tag and index into that variant's storage
object_types = ti.field(dtype=ti.i32, shape=MAX_OBJECTS)
object_indices = ti.field(dtype=ti.i32, shape=MAX_OBJECTS)
num_objects = ti.field(dtype=ti.i32, shape=())

# Sphere storage
sphere_centers = ti.Vector.field(3, dtype=ti.f64, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=ti.f64, shape=MAX_SPHERES)
sphere_material_ids = ti.field(dtype=ti.i32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())

# Bumped whenever a World takes over the fields; older handles become stale
_world_generation = 0


def clear_world_fields() -> None:
    """Reset the object and primitive counts to zero."""
    num_objects[None] = 0
    num_spheres[None] = 0


def _append_object(hittable_type: HittableType, index: int) -> int:
    idx = num_objects[None]
    if idx >= MAX_OBJECTS:
        raise RuntimeError(f"Maximum number of objects ({MAX_OBJECTS}) exceeded")
    object_types[idx] = int(hittable_type)
    object_indices[idx] = index
    num_objects[None] = idx + 1
    return idx


def _append_sphere(center: tuple[float, float, float], radius: float, material_id: int) -> int:
    idx = num_spheres[None]
    if idx >= MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
    sphere_centers[idx] = vec3(center[0], center[1], center[2])
    sphere_radii[idx] = radius
    sphere_material_ids[idx] = material_id
    num_spheres[None] = idx + 1
    _append_object(HittableType.SPHERE, idx)
    return idx


@dataclass(frozen=True)
class SphereInfo:
    """A sphere in the world.

    Attributes:
        center: The center of the sphere.
        radius: The radius of the sphere (positive).
        material: The material of the sphere. May be shared with other spheres.
    """

    center: tuple[float, float, float]
    radius: float
    material: Material

    def __post_init__(self) -> None:
        if len(self.center) != 3:
            raise ValueError(f"Center must have 3 components, got {len(self.center)}")
        if self.radius <= 0.0:
            raise ValueError(f"Sphere radius must be positive, got {self.radius}")


class World:
    """Host-side builder for the world.

    Materials are registered once per instance: spheres that reference the
    same material object share one material ID.

    The Taichi fields hold a single world. Constructing a World (or calling
    ``clear`` on an older one) takes them over, and any other instance becomes
    stale: adding to it or querying its counts raises RuntimeError. Its
    ``spheres`` list is left as it was.

    Attributes:
        spheres: SphereInfo records in insertion order.
    """

    def __init__(self) -> None:
        self.spheres: list[SphereInfo] = []
        self._materials: list[Material] = []
        self._material_ids: dict[int, int] = {}
        self._generation = -1
        self.clear()

    @property
    def is_active(self) -> bool:
        """True while this instance owns the world fields."""
        return self._generation == _world_generation

    def _check_active(self) -> None:
        if not self.is_active:
            raise RuntimeError("This World was replaced by a newer World; call clear() to reuse it")

    def clear(self) -> None:
        """Remove every object and material, including the Taichi field data."""
        global _world_generation
        _world_generation += 1
        self._generation = _world_generation
        clear_world_fields()
        clear_materials()
        self.spheres.clear()
        self._materials.clear()
        self._material_ids.clear()

    def get_material_id(self, material: Material) -> int:
        """Return the material ID of a material, registering it if new.

        Raises:
            RuntimeError: If the maximum number of materials is exceeded.
            ValueError: If material is not a supported variant.
        """
        self._check_active()
        key = id(material)
        if key not in self._material_ids:
            self._material_ids[key] = register_material(material)
            # Hold a reference so the id() key stays unique
            self._materials.append(material)
        return self._material_ids[key]

    def add(self, sphere: SphereInfo) -> int:
        """Add a sphere to the world.

        Args:
            sphere: The sphere to add.

        Returns:
            The index of the sphere.

        Raises:
            RuntimeError: If a capacity limit is exceeded or this World is stale.
        """
        material_id = self.get_material_id(sphere.material)
        index = _append_sphere(sphere.center, sphere.radius, material_id)
        self.spheres.append(sphere)
        logger.debug("Added sphere %d (material %d)", index, material_id)
        return index

    def add_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        material: Material,
    ) -> int:
        """Add a sphere given its center, radius and material.

        Returns:
            The index of the sphere.

        Raises:
            ValueError: If the radius is not positive.
            RuntimeError: If a capacity limit is exceeded.
        """
        return self.add(SphereInfo(center=center, radius=radius, material=material))

    @property
    def sphere_count(self) -> int:
        """Number of spheres in the world."""
        self._check_active()
        return int(num_spheres[None])

    @property
    def material_count(self) -> int:
        """Number of distinct materials referenced by the world."""
        return len(self._materials)

    def __len__(self) -> int:
        self._check_active()
        return int(num_objects[None])


@ti.func
def _miss_record() -> WorldHitRecord:
    return WorldHitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        front_face=0,
        material_id=-1,
    )


@ti.func
def _to_world_hit_record(rec: HitRecord, material_id: ti.i32) -> WorldHitRecord:
    return WorldHitRecord(
        hit=rec.hit,
        t=rec.t,
        point=rec.point,
        normal=rec.normal,
        front_face=rec.front_face,
        material_id=material_id,
    )


@ti.func
def _hit_object(object_idx: ti.i32, ray: Ray, t_min: ti.f64, t_max: ti.f64) -> WorldHitRecord:
    """Intersect one object, dispatching on its variant."""
    result = _miss_record()
    kind = object_types[object_idx]
    index = object_indices[object_idx]

    if kind == int(HittableType.SPHERE):
        sphere = Sphere(center=sphere_centers[index], radius=sphere_radii[index])
        rec = hit_sphere(ray, sphere, t_min, t_max)
        result = _to_world_hit_record(rec, sphere_material_ids[index])

    return result


@ti.func
def hit_world(ray: Ray, t_min: ti.f64, t_max: ti.f64) -> WorldHitRecord:
    """Find the nearest intersection of a ray with the world.

    Each hit shrinks the search interval to ``(t_min, t)``, so later objects
    can only win by being strictly closer; on an exact tie the earlier object
    is kept.

    Args:
        ray: The ray to trace.
        t_min: Minimum t value to consider a valid hit.
        t_max: Maximum t value to consider a valid hit.

    Returns:
        A WorldHitRecord for the closest hit, or a miss record.
    """
    closest_t = t_max
    result = _miss_record()

    for k in range(num_objects[None]):
        rec = _hit_object(k, ray, t_min, closest_t)
        if rec.hit == 1:
            closest_t = rec.t
            result = rec

    return result
