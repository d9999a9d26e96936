"""Per-pixel random streams for Monte Carlo sampling.

Each pixel owns a private 32-bit generator state derived from the render seed
and the pixel index, so the sequence of random draws for a pixel does not
depend on which thread renders it or in which order pixels are scheduled.

State is threaded functionally: every sampler takes the current state and
returns the advanced state along with its sample::

    u, state = random_f64(state)
    p, state = random_in_unit_sphere(state)

The stream itself is xorshift32; seeds are scrambled with the Wang hash so
neighbouring pixels start from uncorrelated states.
"""

import taichi as ti

from pathtracer.core.ray import length_squared, normalize, vec3

# Rejection sampling bound; the acceptance rate is >= 52% so this is never hit
MAX_REJECTION_ATTEMPTS = 64

_INV_2_POW_32 = 1.0 / 4294967296.0


@ti.func
def wang_hash(x: ti.u32) -> ti.u32:
    """Scramble a 32-bit integer (Thomas Wang's integer hash)."""
    h = (x ^ ti.u32(61)) ^ (x >> ti.u32(16))
    h *= ti.u32(9)
    h ^= h >> ti.u32(4)
    h *= ti.u32(668265261)
    h ^= h >> ti.u32(15)
    return h


@ti.func
def seed_pixel(seed: ti.u32, pixel_index: ti.u32) -> ti.u32:
    """Derive the initial generator state for one pixel.

    Args:
        seed: The render seed.
        pixel_index: Row-major pixel index (``j * width + i``).

    Returns:
        A non-zero generator state.
    """
    state = wang_hash(seed ^ wang_hash(pixel_index + ti.u32(1)))
    if state == ti.u32(0):
        state = ti.u32(1327217884)
    return state


@ti.func
def next_state(state: ti.u32) -> ti.u32:
    """Advance an xorshift32 state. Zero is a fixed point and must be avoided."""
    x = state
    x ^= x << ti.u32(13)
    x ^= x >> ti.u32(17)
    x ^= x << ti.u32(5)
    return x


@ti.func
def random_f64(state: ti.u32):
    """Draw a uniform float in [0, 1).

    Returns:
        A tuple of (value, new_state).
    """
    advanced = next_state(state)
    return ti.cast(advanced, ti.f64) * _INV_2_POW_32, advanced


@ti.func
def random_range(lo: ti.f64, hi: ti.f64, state: ti.u32):
    """Draw a uniform float in [lo, hi).

    Returns:
        A tuple of (value, new_state).
    """
    u, advanced = random_f64(state)
    return lo + (hi - lo) * u, advanced


@ti.func
def random_in_unit_sphere(state: ti.u32):
    """Draw a point uniformly inside the unit sphere by rejection.

    Returns:
        A tuple of (point, new_state) with ``|point| < 1``.
    """
    p = vec3(0.0, 0.0, 0.0)
    current = state
    found = 0
    for _ in range(MAX_REJECTION_ATTEMPTS):
        if found == 0:
            x, current = random_range(-1.0, 1.0, current)
            y, current = random_range(-1.0, 1.0, current)
            z, current = random_range(-1.0, 1.0, current)
            candidate = vec3(x, y, z)
            if length_squared(candidate) < 1.0:
                p = candidate
                found = 1
    return p, current


@ti.func
def random_unit_vector(state: ti.u32):
    """Draw a unit vector, uniformly distributed on the sphere.

    Returns:
        A tuple of (direction, new_state).
    """
    p, current = random_in_unit_sphere(state)
    # Reject the (vanishingly rare) draws too close to the centre to normalize
    if length_squared(p) < 1e-160:
        p = vec3(0.0, 0.0, 1.0)
    return normalize(p), current


@ti.func
def random_in_unit_disk(state: ti.u32):
    """Draw a point uniformly inside the unit disk in the xy-plane.

    Returns:
        A tuple of (point, new_state) with ``point.z == 0``.
    """
    p = vec3(0.0, 0.0, 0.0)
    current = state
    found = 0
    for _ in range(MAX_REJECTION_ATTEMPTS):
        if found == 0:
            x, current = random_range(-1.0, 1.0, current)
            y, current = random_range(-1.0, 1.0, current)
            if x * x + y * y < 1.0:
                p = vec3(x, y, 0.0)
                found = 1
    return p, current
