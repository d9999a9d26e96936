"""Materials module: the closed set of scattering behaviours.

Components:
    lambertian: Ideal diffuse reflection
    metal: Mirror reflection with optional fuzz
    dielectric: Glass-like refraction with Schlick reflectance
    material: Unified material table and the single ``scatter`` dispatch

Each variant provides a frozen dataclass used to build scenes and a Taichi
function returning ``(did_scatter, attenuation, origin, direction, state)``.
Material values are immutable and may be shared by any number of spheres.
"""

from .dielectric import Dielectric, cannot_refract, refraction_ratio, scatter_dielectric
from .lambertian import Lambertian, diffuse_direction, scatter_lambertian, validate_albedo
from .material import (
    MAX_MATERIALS,
    Material,
    MaterialType,
    clear_materials,
    get_material_count,
    get_material_type,
    material_type_of,
    register_material,
    scatter,
)
from .metal import Metal, scatter_metal

__all__ = [
    # Variants
    "Lambertian",
    "scatter_lambertian",
    "diffuse_direction",
    "validate_albedo",
    "Metal",
    "scatter_metal",
    "Dielectric",
    "scatter_dielectric",
    "refraction_ratio",
    "cannot_refract",
    # Table and dispatch
    "Material",
    "MaterialType",
    "MAX_MATERIALS",
    "register_material",
    "clear_materials",
    "get_material_count",
    "get_material_type",
    "material_type_of",
    "scatter",
]
