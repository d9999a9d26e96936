"""Metal (specular reflective) material implementation.

This module implements the metal BSDF: mirror reflection about the surface
normal, optionally perturbed by a fuzz term that models a rough or brushed
surface. The reflection formula is:

    R = I - 2(I . N)N

For fuzzy metals the reflected direction is offset by ``fuzz`` times a random
unit vector. Rays that end up pointing into the surface are absorbed.

Example:
    >>> from pathtracer.materials.metal import Metal
    >>> gold = Metal(albedo=(0.8, 0.6, 0.2), fuzz=0.3)
"""

from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from pathtracer.core.ray import normalize, reflect, vec3
from pathtracer.core.rng import random_unit_vector
from pathtracer.materials.lambertian import validate_albedo


@dataclass(frozen=True)
class Metal:
    """Metal material.

    Attributes:
        albedo: The reflective color (RGB, each component in [0, 1]).
        fuzz: Radius of the random perturbation applied to the reflected
            direction, in [0, 1]. 0 is a perfect mirror.
    """

    albedo: tuple[float, float, float]
    fuzz: float = 0.0

    def __post_init__(self) -> None:
        validate_albedo(self.albedo)
        if self.fuzz < 0.0 or self.fuzz > 1.0:
            raise ValueError(
                f"Fuzz = {self.fuzz} is outside [0, 1]. "
                "Fuzz must be between 0 (perfect mirror) and 1 (maximum fuzz)."
            )


@ti.func
def scatter_metal(
    albedo: vec3,
    fuzz: ti.f64,
    incident_direction: vec3,
    point: vec3,
    normal: vec3,
    state: ti.u32,
):
    """Reflect a ray off a metal surface.

    Args:
        albedo: The reflective color.
        fuzz: The fuzz radius in [0, 1].
        incident_direction: The incoming ray direction (any length).
        point: The hit point (origin of the scattered ray).
        normal: The unit surface normal facing the incoming ray.
        state: The pixel's random state.

    Returns:
        A tuple of (did_scatter, attenuation, origin, direction, new_state).
        did_scatter is 0 when the fuzzed direction points into the surface.
    """
    reflected = reflect(normalize(incident_direction), normal)
    offset, new_state = random_unit_vector(state)
    direction = reflected + fuzz * offset

    did_scatter = 1
    if tm.dot(direction, normal) <= 0.0:
        did_scatter = 0

    return did_scatter, albedo, point, direction, new_state
