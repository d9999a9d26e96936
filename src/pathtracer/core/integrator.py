"""Path tracing integrator.

This module traces rays through the world and turns per-pixel sample sums into
display pixels. Light transport is the classic recursion

    color(ray) = attenuation * color(scattered ray)

with a sky gradient returned when a ray escapes. It is evaluated as a loop
that carries the running attenuation product and the active ray, ending on a
miss, an absorption, or when the bounce budget runs out (black).

Every pixel is rendered independently: it draws ``samples`` jittered camera
rays from its own random stream (seeded from the render seed and the pixel
index), sums their colors, then divides, gamma-corrects (square root) and
quantizes to 8 bits. Pixels are distributed across threads by a Taichi
struct-for; a serial kernel variant is provided, and both produce identical
images because no random state is shared between pixels.

Example:
    >>> from pathtracer.core.integrator import setup_render_target, render_rows
    >>> setup_render_target(400, 225)
    >>> render_rows(0, 225, samples=100, max_depth=50, seed=1234)
    >>> pixels = get_image_uint8()  # (225, 400, 3), row 0 is the top row
"""

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from pathtracer.camera.thin_lens import get_ray
from pathtracer.core.ray import Ray, make_ray, normalize, vec3
from pathtracer.core.rng import random_f64, seed_pixel
from pathtracer.materials.material import scatter
from pathtracer.scene.world import hit_world

# =============================================================================
# Rendering Constants
# =============================================================================

# t_min keeps secondary rays from re-hitting the surface they leave
T_MIN = 0.001
T_MAX = 1.0e30

# Sky gradient endpoints, interpolated on the ray direction's y component
HORIZON_COLOR = (1.0, 1.0, 1.0)
ZENITH_COLOR = (0.5, 0.7, 1.0)

# Largest channel value before quantization (keeps 256 * x below 256)
MAX_CHANNEL = 0.999

# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Final 8-bit pixels, indexed (i, j) with j = 0 at the bottom row
_pixels = ti.Vector.field(3, dtype=ti.u8, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

_render_target_initialized = ti.field(dtype=ti.i32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Set the active image dimensions and clear the pixel buffer.

    Args:
        width: Image width in pixels (max MAX_IMAGE_WIDTH).
        height: Image height in pixels (max MAX_IMAGE_HEIGHT).

    Raises:
        ValueError: If a dimension is not positive or exceeds the maximum.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1
    clear_render_target()


def clear_render_target() -> None:
    """Clear the pixel buffer to black."""
    _pixels.fill(0)


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions as (width, height)."""
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


# =============================================================================
# Light Transport
# =============================================================================


@ti.func
def background_color(ray: Ray) -> vec3:
    """Sky gradient seen by rays that escape the world.

    Linearly interpolates from white at ``y = -1`` to light blue at ``y = 1``
    using the unit ray direction.
    """
    unit_direction = normalize(ray.direction)
    a = 0.5 * (unit_direction.y + 1.0)
    horizon = vec3(HORIZON_COLOR[0], HORIZON_COLOR[1], HORIZON_COLOR[2])
    zenith = vec3(ZENITH_COLOR[0], ZENITH_COLOR[1], ZENITH_COLOR[2])
    return (1.0 - a) * horizon + a * zenith


@ti.func
def trace_color(ray: Ray, depth_limit: ti.i32, state: ti.u32):
    """Resolve the color carried back along a ray.

    Args:
        ray: The camera (or any) ray.
        depth_limit: Maximum number of surface interactions. 0 returns black.
        state: The pixel's random state.

    Returns:
        A tuple of (color, new_state).
    """
    throughput = vec3(1.0, 1.0, 1.0)
    color = vec3(0.0, 0.0, 0.0)
    origin = ray.origin
    direction = ray.direction
    rng = state

    # Taichi doesn't support break in ti.func loops
    active = 1

    for _ in range(depth_limit):
        if active == 1:
            current = make_ray(origin, direction)
            rec = hit_world(current, T_MIN, T_MAX)

            if rec.hit == 0:
                color = throughput * background_color(current)
                active = 0
            else:
                did_scatter, attenuation, new_origin, new_direction, rng = scatter(
                    rec.material_id, current, rec.point, rec.normal, rec.front_face, rng
                )
                if did_scatter == 0:
                    # Absorbed
                    active = 0
                else:
                    throughput *= attenuation
                    origin = new_origin
                    direction = new_direction

    # Paths still active here ran out of bounces and stay black
    return color, rng


@ti.func
def resolve_pixel(color_sum: vec3, samples: ti.i32):
    """Average, gamma-correct (gamma 2) and quantize a pixel's sample sum.

    Returns:
        An integer RGB vector with components in [0, 255].
    """
    average = ti.max(color_sum / ti.cast(samples, ti.f64), 0.0)
    corrected = ti.min(ti.sqrt(average), MAX_CHANNEL)
    return ti.cast(256.0 * corrected, ti.i32)


@ti.func
def _render_pixel(
    i: ti.i32,
    j: ti.i32,
    width: ti.i32,
    height: ti.i32,
    samples: ti.i32,
    max_depth: ti.i32,
    seed: ti.u32,
):
    rng = seed_pixel(seed, ti.cast(j * width + i, ti.u32))
    color_sum = vec3(0.0, 0.0, 0.0)

    # Floored at 1 so single-pixel images still divide safely
    s_scale = 1.0 / ti.cast(ti.max(width - 1, 1), ti.f64)
    t_scale = 1.0 / ti.cast(ti.max(height - 1, 1), ti.f64)

    for _ in range(samples):
        jitter_s, rng = random_f64(rng)
        jitter_t, rng = random_f64(rng)
        s = (ti.cast(i, ti.f64) + jitter_s) * s_scale
        t = (ti.cast(j, ti.f64) + jitter_t) * t_scale

        origin, direction, rng = get_ray(s, t, rng)
        sample, rng = trace_color(make_ray(origin, direction), max_depth, rng)

        # Skip NaN/Inf contributions
        finite = 1
        for c in ti.static(range(3)):
            if tm.isnan(sample[c]) or tm.isinf(sample[c]):
                finite = 0
        if finite == 1:
            color_sum += sample

    _pixels[i, j] = ti.cast(resolve_pixel(color_sum, samples), ti.u8)


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_rows_parallel(
    row_start: ti.i32,
    row_end: ti.i32,
    width: ti.i32,
    height: ti.i32,
    samples: ti.i32,
    max_depth: ti.i32,
    seed: ti.u32,
):
    for j, i in ti.ndrange((row_start, row_end), width):
        _render_pixel(i, j, width, height, samples, max_depth, seed)


@ti.kernel
def _render_rows_serial(
    row_start: ti.i32,
    row_end: ti.i32,
    width: ti.i32,
    height: ti.i32,
    samples: ti.i32,
    max_depth: ti.i32,
    seed: ti.u32,
):
    ti.loop_config(serialize=True)
    for j, i in ti.ndrange((row_start, row_end), width):
        _render_pixel(i, j, width, height, samples, max_depth, seed)


@ti.kernel
def _trace_single(
    ox: ti.f64,
    oy: ti.f64,
    oz: ti.f64,
    dx: ti.f64,
    dy: ti.f64,
    dz: ti.f64,
    depth_limit: ti.i32,
    seed: ti.u32,
) -> vec3:
    state = seed_pixel(seed, ti.u32(0))
    ray = make_ray(vec3(ox, oy, oz), vec3(dx, dy, dz))
    color, _ = trace_color(ray, depth_limit, state)
    return color


# =============================================================================
# Public Rendering API
# =============================================================================


def render_rows(
    row_start: int,
    row_end: int,
    samples: int,
    max_depth: int,
    seed: int,
    parallel: bool = True,
) -> None:
    """Render the image rows ``row_start <= j < row_end`` (j = 0 is the bottom).

    Args:
        row_start: First row to render.
        row_end: One past the last row to render.
        samples: Samples per pixel.
        max_depth: Maximum scatter events per path.
        seed: 32-bit render seed.
        parallel: Distribute pixels across threads (True) or run serially.

    Raises:
        RuntimeError: If the render target has not been set up.
        ValueError: If the row range is outside the image.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    if not 0 <= row_start <= row_end <= height:
        raise ValueError(f"Row range [{row_start}, {row_end}) is outside [0, {height})")

    kernel = _render_rows_parallel if parallel else _render_rows_serial
    kernel(row_start, row_end, width, height, samples, max_depth, seed)


def trace_ray_color(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    depth_limit: int,
    seed: int = 0,
) -> tuple[float, float, float]:
    """Trace a single ray through the current world.

    This is a Python-callable function for testing and debugging. For
    production rendering, use render_rows() which processes pixels in parallel.

    Returns:
        Tuple of (R, G, B) linear color values.
    """
    color = _trace_single(
        origin[0], origin[1], origin[2],
        direction[0], direction[1], direction[2],
        depth_limit,
        seed,
    )
    return (float(color[0]), float(color[1]), float(color[2]))


def get_image_uint8() -> npt.NDArray[np.uint8]:
    """Get the rendered image as an 8-bit NumPy array.

    Returns:
        Array of shape (height, width, 3), row-major, row 0 at the top.

    Raises:
        RuntimeError: If the render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()

    full_image = _pixels.to_numpy()
    image = full_image[:width, :height, :]

    # Transpose from (width, height, 3) to (height, width, 3) for standard image format
    image = np.transpose(image, (1, 0, 2))

    # Flip vertically (j = 0 is the bottom row, images use a top-left origin)
    image = np.flipud(image)

    return np.ascontiguousarray(image, dtype=np.uint8)
