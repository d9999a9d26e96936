"""Render configuration.

``RenderSettings`` carries the tunables of a render pass: image size, sample
count, bounce limit and the random seed. Values are validated on construction
so the kernels never see zero or negative sizes.

Example:
    >>> settings = RenderSettings.from_aspect_ratio(400, 16.0 / 9.0, samples_per_pixel=50)
    >>> settings.height
    225
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass

# Defaults match the reference "random spheres" render
DEFAULT_SAMPLES_PER_PIXEL = 100
DEFAULT_MAX_DEPTH = 50
DEFAULT_ROWS_PER_BATCH = 16

MAX_SEED = 2**32


@dataclass(frozen=True)
class RenderSettings:
    """Parameters of one render pass.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        samples_per_pixel: Number of jittered samples averaged per pixel.
        max_depth: Maximum number of scatter events per path.
        seed: 32-bit seed for the per-pixel random streams. None draws a fresh
            seed from the OS entropy pool for every render.
        rows_per_batch: Number of image rows rendered per kernel launch.
            Only affects progress granularity, never the pixels.
        parallel: Render pixels in parallel (True) or on a single thread.
    """

    width: int
    height: int
    samples_per_pixel: int = DEFAULT_SAMPLES_PER_PIXEL
    max_depth: int = DEFAULT_MAX_DEPTH
    seed: int | None = None
    rows_per_batch: int = DEFAULT_ROWS_PER_BATCH
    parallel: bool = True

    def __post_init__(self) -> None:
        for name in ("width", "height", "samples_per_pixel", "max_depth", "rows_per_batch"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")
        if self.seed is not None and not 0 <= self.seed < MAX_SEED:
            raise ValueError(f"seed must be in [0, 2**32), got {self.seed}")

    @classmethod
    def from_aspect_ratio(
        cls,
        width: int,
        aspect_ratio: float,
        **kwargs: object,
    ) -> RenderSettings:
        """Build settings whose height is derived from an aspect ratio.

        Args:
            width: Image width in pixels.
            aspect_ratio: Width divided by height.
            **kwargs: Any other RenderSettings field.

        Raises:
            ValueError: If aspect_ratio is not positive or the derived
                height is zero.
        """
        if aspect_ratio <= 0.0:
            raise ValueError(f"aspect_ratio must be positive, got {aspect_ratio}")
        return cls(width=width, height=int(width / aspect_ratio), **kwargs)  # type: ignore[arg-type]

    @property
    def aspect_ratio(self) -> float:
        """Width divided by height."""
        return self.width / self.height

    def resolved_seed(self) -> int:
        """Return the configured seed, or a fresh random one if unset."""
        if self.seed is not None:
            return self.seed
        return secrets.randbits(32)
