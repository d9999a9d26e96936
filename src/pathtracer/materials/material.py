"""Unified material table and scatter dispatch.

Materials form a closed set of variants ({Lambertian, Metal, Dielectric}).
Every registered material gets a material ID; the table stores its variant tag
plus the parameters of every variant in structure-of-arrays Taichi fields, and
``scatter`` is the single dispatch point the integrator calls.

Example:
    >>> glass = Dielectric(ior=1.5)
    >>> material_id = register_material(glass)
    >>> get_material_type(material_id)  # doctest: +SKIP
"""

from enum import IntEnum

import taichi as ti

from pathtracer.core.ray import Ray, vec3
from pathtracer.materials.dielectric import Dielectric, scatter_dielectric
from pathtracer.materials.lambertian import Lambertian, scatter_lambertian
from pathtracer.materials.metal import Metal, scatter_metal

Material = Lambertian | Metal | Dielectric


class MaterialType(IntEnum):
    """Enumeration of supported material variants.

    Used by ``scatter`` to pick the variant's scattering function.
    """

    LAMBERTIAN = 0
    METAL = 1
    DIELECTRIC = 2


# Maximum number of materials across all variants
MAX_MATERIALS = 1024

# material_types[i] stores the MaterialType of material_id i
material_types = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
material_albedos = ti.Vector.field(3, dtype=ti.f64, shape=MAX_MATERIALS)
material_fuzz = ti.field(dtype=ti.f64, shape=MAX_MATERIALS)
material_iors = ti.field(dtype=ti.f64, shape=MAX_MATERIALS)
num_materials = ti.field(dtype=ti.i32, shape=())


def clear_materials() -> None:
    """Clear the material table.

    Existing data in the fields is overwritten as new materials are added.
    """
    num_materials[None] = 0


def get_material_count() -> int:
    """Get the number of registered materials."""
    return int(num_materials[None])


def material_type_of(material: Material) -> MaterialType:
    """Return the variant tag for a material value.

    Raises:
        ValueError: If material is not one of the supported variants.
    """
    if isinstance(material, Lambertian):
        return MaterialType.LAMBERTIAN
    if isinstance(material, Metal):
        return MaterialType.METAL
    if isinstance(material, Dielectric):
        return MaterialType.DIELECTRIC
    raise ValueError(f"Unsupported material: {material!r}")


def register_material(material: Material) -> int:
    """Append a material to the table.

    Args:
        material: A Lambertian, Metal or Dielectric value.

    Returns:
        The material ID.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        ValueError: If material is not a supported variant.
    """
    material_type = material_type_of(material)

    material_id = num_materials[None]
    if material_id >= MAX_MATERIALS:
        raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")

    albedo = (0.0, 0.0, 0.0)
    fuzz = 0.0
    ior = 1.0
    if isinstance(material, (Lambertian, Metal)):
        albedo = material.albedo
    if isinstance(material, Metal):
        fuzz = material.fuzz
    if isinstance(material, Dielectric):
        ior = material.ior

    material_types[material_id] = int(material_type)
    material_albedos[material_id] = vec3(albedo[0], albedo[1], albedo[2])
    material_fuzz[material_id] = fuzz
    material_iors[material_id] = ior
    num_materials[None] = material_id + 1
    return material_id


@ti.func
def get_material_type(material_id: ti.i32) -> ti.i32:
    """Get the variant tag for a material ID, or -1 for invalid IDs."""
    result = -1
    if 0 <= material_id < num_materials[None]:
        result = material_types[material_id]
    return result


@ti.func
def scatter(
    material_id: ti.i32,
    ray_in: Ray,
    point: vec3,
    normal: vec3,
    front_face: ti.i32,
    state: ti.u32,
):
    """Dispatch to the scattering function of the material's variant.

    Args:
        material_id: The material ID of the surface hit.
        ray_in: The incoming ray.
        point: The hit point.
        normal: The unit surface normal facing the incoming ray.
        front_face: 1 if the ray hit the outside of the surface.
        state: The pixel's random state.

    Returns:
        A tuple of (did_scatter, attenuation, origin, direction, new_state).
        did_scatter is 0 when the ray is absorbed (including unknown IDs).
    """
    mat_type = get_material_type(material_id)

    did_scatter = 0
    attenuation = vec3(0.0, 0.0, 0.0)
    origin = point
    direction = vec3(0.0, 0.0, 0.0)
    new_state = state

    if mat_type == int(MaterialType.LAMBERTIAN):
        did_scatter, attenuation, origin, direction, new_state = scatter_lambertian(
            material_albedos[material_id], point, normal, state
        )

    elif mat_type == int(MaterialType.METAL):
        did_scatter, attenuation, origin, direction, new_state = scatter_metal(
            material_albedos[material_id],
            material_fuzz[material_id],
            ray_in.direction,
            point,
            normal,
            state,
        )

    elif mat_type == int(MaterialType.DIELECTRIC):
        did_scatter, attenuation, origin, direction, new_state = scatter_dielectric(
            material_iors[material_id], ray_in.direction, point, normal, front_face, state
        )

    return did_scatter, attenuation, origin, direction, new_state
