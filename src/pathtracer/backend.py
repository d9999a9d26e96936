"""Taichi runtime initialisation.

All rendering state lives in module-level Taichi fields, so Taichi has to be
initialised exactly once, before any module that declares fields is imported.
The renderer works in double precision; ``init_backend`` sets ``default_fp``
accordingly.

Example:
    >>> from pathtracer.backend import init_backend
    >>> init_backend(arch="cpu", num_threads=4)
    >>> from pathtracer.scene.world import World  # safe to import now
"""

from __future__ import annotations

import logging
import os
from typing import Any

import taichi as ti

logger = logging.getLogger(__name__)

_ARCHES: dict[str, Any] = {
    "cpu": ti.cpu,
    "gpu": ti.gpu,
    "cuda": ti.cuda,
    "vulkan": ti.vulkan,
    "metal": ti.metal,
}


def resolve_arch(name: str) -> Any:
    """Map a backend name to a Taichi arch.

    Args:
        name: One of "cpu", "gpu", "cuda", "vulkan", "metal" (case-insensitive).

    Returns:
        The Taichi arch object.

    Raises:
        ValueError: If the name is not a known backend.
    """
    try:
        return _ARCHES[name.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown backend '{name}'. Expected one of: {', '.join(sorted(_ARCHES))}"
        ) from None


def init_backend(
    arch: str = "cpu",
    num_threads: int | None = None,
    debug: bool = False,
) -> int:
    """Initialise Taichi for rendering.

    Args:
        arch: Backend name (see ``resolve_arch``). Double precision is only
            guaranteed on "cpu" and "cuda".
        num_threads: Maximum CPU worker threads. None uses every available
            hardware thread.
        debug: Enable Taichi's debug mode (bounds checks, slower).

    Returns:
        The CPU thread count Taichi was configured with.

    Raises:
        ValueError: If arch is unknown or num_threads is not positive.
    """
    if num_threads is not None and num_threads <= 0:
        raise ValueError(f"num_threads must be positive, got {num_threads}")

    threads = num_threads if num_threads is not None else (os.cpu_count() or 1)
    ti.init(
        arch=resolve_arch(arch),
        default_fp=ti.f64,
        cpu_max_num_threads=threads,
        debug=debug,
    )
    logger.info("Taichi initialised: arch=%s threads=%d", arch, threads)
    return threads
