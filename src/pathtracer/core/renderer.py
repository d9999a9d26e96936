"""Band-by-band renderer with progress reporting.

This module wraps the integrator kernels in a small stateful object:
- Renders the image in horizontal bands, top band first
- Reports progress through a callback or a generator
- Resolves the render seed once, so a render can be reproduced

Bands only control how often progress is reported. Every pixel owns its
random stream, so the image is the same whatever the band size, thread count
or serial/parallel mode.

Example:
    >>> from pathtracer.backend import init_backend
    >>> init_backend(arch="cpu")
    >>> from pathtracer.camera import setup_camera
    >>> from pathtracer.config import RenderSettings
    >>> from pathtracer.core.renderer import Renderer
    >>> from pathtracer.scene.random_spheres import create_random_scene
    >>>
    >>> world, camera = create_random_scene(seed=7)
    >>> setup_camera(camera)
    >>> renderer = Renderer(RenderSettings.from_aspect_ratio(400, 16 / 9, seed=42))
    >>> renderer.render()
    >>> renderer.save_image("spheres.png")
"""

import logging
import time
from collections.abc import Callable, Generator

import numpy as np
import numpy.typing as npt

from pathtracer.config import RenderSettings
from pathtracer.core.integrator import (
    clear_render_target,
    get_image_uint8,
    render_rows,
    setup_render_target,
)
from pathtracer.preview.export import save_png

logger = logging.getLogger(__name__)

# Callback receives (rows_done, total_rows)
ProgressCallback = Callable[[int, int], None]


class Renderer:
    """Renders the current world through the current camera.

    The world and camera are module-level state: build a ``World`` and call
    ``setup_camera`` before rendering.

    Attributes:
        settings: The render settings this renderer was built with.
    """

    def __init__(self, settings: RenderSettings) -> None:
        """Set up the render target for the settings' image size.

        Raises:
            ValueError: If the image is larger than the render target supports.
        """
        self.settings = settings
        self._seed = settings.resolved_seed()
        self._rows_done = 0
        setup_render_target(settings.width, settings.height)

    @property
    def width(self) -> int:
        return self.settings.width

    @property
    def height(self) -> int:
        return self.settings.height

    @property
    def seed(self) -> int:
        """The 32-bit seed used for every pixel stream of this renderer."""
        return self._seed

    @property
    def rows_done(self) -> int:
        """Number of image rows finished by the last render."""
        return self._rows_done

    def reset(self) -> None:
        """Clear the image so it can be rendered again."""
        clear_render_target()
        self._rows_done = 0

    def render(self, callback: ProgressCallback | None = None) -> None:
        """Render the whole image.

        Args:
            callback: Optional function called after each band with
                (rows_done, total_rows).
        """
        for rows_done, total_rows in self.render_progressive():
            if callback is not None:
                callback(rows_done, total_rows)

    def render_progressive(self) -> Generator[tuple[int, int], None, None]:
        """Render the whole image, yielding after each band.

        Yields:
            Tuple of (rows_done, total_rows).

        Example:
            >>> for done, total in renderer.render_progressive():
            ...     print(f"{done}/{total} rows")
        """
        settings = self.settings
        total_rows = settings.height
        self.reset()

        logger.info(
            "Rendering %dx%d, %d spp, depth %d, seed %d (%s)",
            settings.width,
            settings.height,
            settings.samples_per_pixel,
            settings.max_depth,
            self._seed,
            "parallel" if settings.parallel else "serial",
        )
        start = time.perf_counter()

        # Row j = height - 1 is the top of the image
        row_end = total_rows
        while row_end > 0:
            row_start = max(0, row_end - settings.rows_per_batch)
            render_rows(
                row_start,
                row_end,
                settings.samples_per_pixel,
                settings.max_depth,
                self._seed,
                parallel=settings.parallel,
            )
            self._rows_done += row_end - row_start
            row_end = row_start

            logger.debug("Scanlines remaining: %d", total_rows - self._rows_done)
            yield (self._rows_done, total_rows)

        logger.info("Render finished in %.2fs", time.perf_counter() - start)

    def get_image_uint8(self) -> npt.NDArray[np.uint8]:
        """Get the rendered image, shape (height, width, 3), row 0 at the top."""
        return get_image_uint8()

    def save_image(self, filepath: str) -> None:
        """Save the rendered image as a PNG file."""
        save_png(self.get_image_uint8(), filepath)
        logger.info("Saved %s", filepath)
