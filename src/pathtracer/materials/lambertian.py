"""Lambertian (ideal diffuse) material implementation.

A Lambertian surface scatters incoming light around the surface normal. The
scattered direction is ``normal + random_unit_vector``, which yields a
cosine-weighted distribution over the hemisphere, so the attenuation is simply
the albedo.

Example:
    >>> from pathtracer.materials.lambertian import Lambertian
    >>> ground = Lambertian(albedo=(0.5, 0.5, 0.5))
    >>> # did_scatter, attenuation, origin, direction, state = scatter_lambertian(
    >>> #     albedo, point, normal, state) inside a kernel
"""

from dataclasses import dataclass

import taichi as ti

from pathtracer.core.ray import near_zero, vec3
from pathtracer.core.rng import random_unit_vector


def validate_albedo(albedo: tuple[float, float, float]) -> None:
    """Check that an albedo is an RGB triple with components in [0, 1].

    Raises:
        ValueError: If albedo has the wrong length or a component is outside
            [0, 1].
    """
    if len(albedo) != 3:
        raise ValueError(f"Albedo must have 3 components, got {len(albedo)}")
    for i, component in enumerate(albedo):
        if component < 0.0 or component > 1.0:
            raise ValueError(
                f"Albedo component {i} = {component} is outside [0, 1]. "
                "This would violate energy conservation."
            )


@dataclass(frozen=True)
class Lambertian:
    """Lambertian (ideal diffuse) material.

    Attributes:
        albedo: The diffuse reflectance color (RGB, each component in [0, 1]).
    """

    albedo: tuple[float, float, float]

    def __post_init__(self) -> None:
        validate_albedo(self.albedo)


@ti.func
def diffuse_direction(normal: vec3, offset: vec3) -> vec3:
    """Offset the normal by a unit vector, falling back to the normal itself
    when the two cancel almost exactly."""
    direction = normal + offset
    if near_zero(direction):
        direction = normal
    return direction


@ti.func
def scatter_lambertian(albedo: vec3, point: vec3, normal: vec3, state: ti.u32):
    """Scatter a ray off a Lambertian surface.

    Args:
        albedo: The diffuse reflectance color.
        point: The hit point (origin of the scattered ray).
        normal: The unit surface normal facing the incoming ray.
        state: The pixel's random state.

    Returns:
        A tuple of (did_scatter, attenuation, origin, direction, new_state).
        Lambertian surfaces always scatter.
    """
    offset, new_state = random_unit_vector(state)
    return 1, albedo, point, diffuse_direction(normal, offset), new_state
