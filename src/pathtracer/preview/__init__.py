"""Preview module for image output.

Components:
    export: PNG export via Pillow and image comparison helpers

Example:
    >>> from pathtracer.preview import save_png_with_fallback
    >>> save_png_with_fallback(pixels, "out/spheres.png")
"""

from pathtracer.preview.export import (
    DEFAULT_FALLBACK_PATH,
    compute_rmse,
    save_png,
    save_png_with_fallback,
)

__all__ = [
    "DEFAULT_FALLBACK_PATH",
    "save_png",
    "save_png_with_fallback",
    "compute_rmse",
]
