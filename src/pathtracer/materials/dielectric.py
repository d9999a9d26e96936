"""Dielectric (glass/water) material implementation.

This module implements the dielectric BSDF, which models transparent materials
like glass and water with refraction and Fresnel reflectance.

Key physics:
    - Snell's law for refraction: n1 * sin(theta1) = n2 * sin(theta2)
    - Schlick's approximation for Fresnel reflectance
    - Total internal reflection when the refracted sine would exceed 1

The material randomly chooses between reflection and refraction based on the
Fresnel reflectance probability, which increases at grazing angles.
Dielectrics are colorless: the attenuation is always white.

Example:
    >>> from pathtracer.materials.dielectric import Dielectric
    >>> glass = Dielectric(ior=1.5)
"""

from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from pathtracer.core.ray import normalize, reflect, refract, schlick_reflectance, vec3
from pathtracer.core.rng import random_f64


@dataclass(frozen=True)
class Dielectric:
    """Dielectric material.

    Attributes:
        ior: Index of refraction. Common values:
            - Air: 1.0
            - Water: 1.33
            - Glass: 1.5
            - Diamond: 2.4
    """

    ior: float = 1.5

    def __post_init__(self) -> None:
        if self.ior < 1.0:
            raise ValueError(
                f"Index of refraction = {self.ior} is less than 1.0. "
                "IOR must be >= 1.0 for physically meaningful materials."
            )


@ti.func
def refraction_ratio(ior: ti.f64, front_face: ti.i32) -> ti.f64:
    """Ratio of refractive indices across the surface.

    Air to material (front face) is ``1 / ior``; material to air is ``ior``.
    """
    ratio = 1.0 / ior
    if front_face == 0:
        ratio = ior
    return ratio


@ti.func
def cannot_refract(ior: ti.f64, incident_direction: vec3, normal: vec3, front_face: ti.i32) -> ti.i32:
    """Return 1 if the ray undergoes total internal reflection."""
    ratio = refraction_ratio(ior, front_face)
    unit_direction = normalize(incident_direction)
    cos_theta = tm.min(-tm.dot(unit_direction, normal), 1.0)
    sin_theta = ti.sqrt(tm.max(1.0 - cos_theta * cos_theta, 0.0))
    return ratio * sin_theta > 1.0


@ti.func
def scatter_dielectric(
    ior: ti.f64,
    incident_direction: vec3,
    point: vec3,
    normal: vec3,
    front_face: ti.i32,
    state: ti.u32,
):
    """Reflect or refract a ray at a dielectric surface.

    Args:
        ior: Index of refraction of the material.
        incident_direction: The incoming ray direction (any length).
        point: The hit point (origin of the scattered ray).
        normal: The unit surface normal facing the incoming ray.
        front_face: 1 if the ray arrives from outside the material.
        state: The pixel's random state.

    Returns:
        A tuple of (did_scatter, attenuation, origin, direction, new_state).
        Dielectrics always scatter.
    """
    attenuation = vec3(1.0, 1.0, 1.0)
    ratio = refraction_ratio(ior, front_face)

    unit_direction = normalize(incident_direction)
    cos_theta = tm.min(-tm.dot(unit_direction, normal), 1.0)
    must_reflect = cannot_refract(ior, incident_direction, normal, front_face)

    # Always draw, so the stream advances the same way on every branch
    u, new_state = random_f64(state)

    direction = vec3(0.0, 0.0, 0.0)
    if must_reflect == 1 or schlick_reflectance(cos_theta, ratio) > u:
        direction = reflect(unit_direction, normal)
    else:
        direction = refract(unit_direction, normal, ratio)

    return 1, attenuation, point, direction, new_state
