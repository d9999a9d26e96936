"""Image export utilities for rendered images.

Rendered images are already gamma-corrected and quantized by the integrator,
so export is a straight write of the 8-bit pixel grid.

Supported formats:
    - PNG (8-bit RGB via Pillow)

Example:
    >>> from pathtracer.preview.export import save_png
    >>> save_png(renderer.get_image_uint8(), "output.png")
"""

from __future__ import annotations

import logging
import os

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

logger = logging.getLogger(__name__)

# Written to the working directory when the requested path fails
DEFAULT_FALLBACK_PATH = "ray.png"


def _check_pixels(pixels: npt.NDArray[np.uint8]) -> None:
    if pixels.ndim != 3 or pixels.shape[2] != 3:
        raise ValueError(f"Expected an (H, W, 3) image, got shape {pixels.shape}")
    if pixels.dtype != np.uint8:
        raise ValueError(f"Expected a uint8 image, got dtype {pixels.dtype}")


def save_png(pixels: npt.NDArray[np.uint8], filepath: str | os.PathLike[str]) -> None:
    """Save an 8-bit RGB image as a PNG file.

    Args:
        pixels: Image array of shape (H, W, 3), dtype uint8, row 0 at the top.
        filepath: Output file path (should end in .png).

    Raises:
        ValueError: If the array is not an (H, W, 3) uint8 image.
        OSError: If the file cannot be written.
    """
    _check_pixels(pixels)
    pil_image = PILImage.fromarray(np.ascontiguousarray(pixels))
    pil_image.save(filepath, format="PNG")


def save_png_with_fallback(
    pixels: npt.NDArray[np.uint8],
    filepath: str | os.PathLike[str],
    fallback: str | os.PathLike[str] = DEFAULT_FALLBACK_PATH,
) -> str:
    """Save a PNG, retrying at a fallback path if the target can't be written.

    Args:
        pixels: Image array of shape (H, W, 3), dtype uint8.
        filepath: Preferred output path.
        fallback: Path used when writing ``filepath`` fails.

    Returns:
        The path the image was written to.

    Raises:
        OSError: If both paths fail.
    """
    try:
        save_png(pixels, filepath)
        return os.fspath(filepath)
    except OSError as exc:
        logger.warning("Could not write %s (%s); saving to %s instead", filepath, exc, fallback)

    save_png(pixels, fallback)
    return os.fspath(fallback)


def compute_rmse(
    image_a: npt.NDArray[np.generic],
    image_b: npt.NDArray[np.generic],
) -> float:
    """Compute root mean squared error between two images.

    Args:
        image_a: First image array.
        image_b: Second image array (must have same shape as image_a).

    Returns:
        RMSE value (lower is more similar).

    Raises:
        ValueError: If image shapes don't match.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(f"Image shapes must match: {image_a.shape} vs {image_b.shape}")

    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))
