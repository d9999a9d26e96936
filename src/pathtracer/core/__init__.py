"""Core rendering module.

Components:
    ray: Ray data structure and vector algebra
    rng: Per-pixel random streams and the sampling routines built on them
    integrator: Light transport, per-pixel sampling and the render target
    renderer: Band-by-band renderer with progress reporting

All compute-intensive operations are Taichi functions and kernels.
"""

from .ray import (
    Color,
    Ray,
    cross,
    dot,
    length,
    length_squared,
    make_ray,
    near_zero,
    normalize,
    ray_at,
    reflect,
    refract,
    schlick_reflectance,
    vec3,
)
from .rng import (
    random_f64,
    random_in_unit_disk,
    random_in_unit_sphere,
    random_range,
    random_unit_vector,
    seed_pixel,
)

# Note: integrator and renderer are NOT imported here to avoid circular imports.
# Import directly from pathtracer.core.integrator or pathtracer.core.renderer.

__all__ = [
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "Color",
    "length",
    "length_squared",
    "normalize",
    "dot",
    "cross",
    "reflect",
    "refract",
    "schlick_reflectance",
    "near_zero",
    "seed_pixel",
    "random_f64",
    "random_range",
    "random_in_unit_sphere",
    "random_unit_vector",
    "random_in_unit_disk",
]
