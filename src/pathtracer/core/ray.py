"""Ray data structure and vector utilities.

This module provides the Ray dataclass and the vector algebra used throughout
the renderer. Vectors are double-precision Taichi vectors and double as linear
RGB colors (``Color``). All functions are ``@ti.func`` and run inside kernels.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> origin = vec3(0.0, 0.0, 0.0)
    >>> direction = vec3(0.0, 0.0, -1.0)
    >>> ray = Ray(origin=origin, direction=direction)
    >>> # point = ray_at(ray, 5.0) inside a kernel
"""

import taichi as ti
import taichi.math as tm

# Double-precision 3-vector; also used as linear RGB
vec3 = ti.types.vector(3, ti.f64)
Color = vec3

# Threshold below which every component counts as zero
NEAR_ZERO_EPSILON = 1e-8


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray.
        direction: The direction of the ray. Not required to be unit length.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: ti.f64) -> vec3:
    """Compute the point ``origin + t * direction``."""
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction inside a kernel."""
    return Ray(origin=origin, direction=direction)


# =============================================================================
# Vector Utility Functions
# =============================================================================


@ti.func
def length(v: vec3) -> ti.f64:
    """Euclidean length of a vector."""
    return tm.length(v)


@ti.func
def length_squared(v: vec3) -> ti.f64:
    """Squared length of a vector (no square root)."""
    return tm.dot(v, v)


@ti.func
def normalize(v: vec3) -> vec3:
    """Return the unit vector in the direction of v.

    The result is undefined for a zero vector; callers never pass one.
    """
    return v / tm.length(v)


@ti.func
def dot(a: vec3, b: vec3) -> ti.f64:
    """Dot product a . b."""
    return tm.dot(a, b)


@ti.func
def cross(a: vec3, b: vec3) -> vec3:
    """Cross product a x b."""
    return tm.cross(a, b)


@ti.func
def reflect(incident: vec3, normal: vec3) -> vec3:
    """Reflect an incident vector about a normal.

    Computes ``v - 2 * dot(v, n) * n``. The normal must be unit length.

    Args:
        incident: The incoming direction (pointing toward the surface).
        normal: The unit surface normal.

    Returns:
        The reflected direction. Its length equals the incident length.
    """
    return incident - 2.0 * tm.dot(incident, normal) * normal


@ti.func
def refract(incident: vec3, normal: vec3, eta_ratio: ti.f64) -> vec3:
    """Refract a unit incident vector through a surface (Snell's law).

    Splits the refracted direction into the components perpendicular and
    parallel to the normal. Total internal reflection is not detected here;
    callers must check ``eta_ratio * sin_theta > 1`` first and reflect instead.

    Args:
        incident: The unit incoming direction.
        normal: The unit surface normal, on the same side as the incoming ray.
        eta_ratio: Ratio of refractive indices, incident over transmitted.

    Returns:
        The refracted direction (unit length when refraction is possible).
    """
    cos_theta = tm.min(-tm.dot(incident, normal), 1.0)
    r_perp = eta_ratio * (incident + cos_theta * normal)
    r_parallel = -ti.sqrt(ti.abs(1.0 - tm.dot(r_perp, r_perp))) * normal
    return r_perp + r_parallel


@ti.func
def schlick_reflectance(cosine: ti.f64, ref_idx: ti.f64) -> ti.f64:
    """Fresnel reflectance using Schlick's approximation.

    Args:
        cosine: Cosine of the angle between the incident ray and the normal.
        ref_idx: Ratio of refractive indices.

    Returns:
        The probability that the ray reflects rather than refracts.
    """
    r0 = (1.0 - ref_idx) / (1.0 + ref_idx)
    r0 = r0 * r0
    return r0 + (1.0 - r0) * ((1.0 - cosine) ** 5)


@ti.func
def near_zero(v: vec3) -> ti.i32:
    """Return 1 if every component of v is below NEAR_ZERO_EPSILON in magnitude."""
    s = NEAR_ZERO_EPSILON
    return ti.abs(v.x) < s and ti.abs(v.y) < s and ti.abs(v.z) < s
