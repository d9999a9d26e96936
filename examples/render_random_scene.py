#!/usr/bin/env python3
"""Render the random spheres scene.

Builds the random spheres world, renders it band by band while reporting
progress, and writes a PNG. If the output path can't be written the image is
saved to ``ray.png`` in the working directory instead.

Usage:
    python -m examples.render_random_scene [options]

Options:
    --width WIDTH       Image width in pixels (default: 1280)
    --aspect RATIO      Width / height (default: 16/9)
    --samples SAMPLES   Samples per pixel (default: 100)
    --depth DEPTH       Maximum bounces per path (default: 50)
    --seed SEED         Render seed (default: random)
    --scene-seed SEED   Scene layout seed (default: random)
    --threads N         CPU worker threads (default: all)
    --arch ARCH         Taichi backend: cpu, gpu, cuda, vulkan, metal (default: cpu)
    --serial            Render on a single thread
    --output OUTPUT     Output file path (default: random_spheres.png)
    --quiet             Only log warnings and errors

Example:
    python -m examples.render_random_scene --width 400 --samples 20 --seed 1
"""

from __future__ import annotations

import argparse
import logging
import sys

logger = logging.getLogger("render_random_scene")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the random spheres scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--width", type=int, default=1280, help="Image width in pixels (default: 1280)")
    parser.add_argument(
        "--aspect",
        type=float,
        default=16.0 / 9.0,
        help="Aspect ratio, width / height (default: 16/9)",
    )
    parser.add_argument("--samples", type=int, default=100, help="Samples per pixel (default: 100)")
    parser.add_argument("--depth", type=int, default=50, help="Maximum bounces per path (default: 50)")
    parser.add_argument("--seed", type=int, default=None, help="Render seed (default: random)")
    parser.add_argument(
        "--scene-seed",
        type=int,
        default=None,
        help="Scene layout seed (default: random)",
    )
    parser.add_argument("--threads", type=int, default=None, help="CPU worker threads (default: all)")
    parser.add_argument("--arch", type=str, default="cpu", help="Taichi backend (default: cpu)")
    parser.add_argument("--serial", action="store_true", help="Render on a single thread")
    parser.add_argument(
        "--output",
        type=str,
        default="random_spheres.png",
        help="Output file path (default: random_spheres.png)",
    )
    parser.add_argument("--quiet", action="store_true", help="Only log warnings and errors")
    return parser.parse_args(argv)


def init_taichi(arch: str, threads: int | None) -> None:
    """Initialise Taichi, falling back to the CPU if the backend is unavailable."""
    from pathtracer.backend import init_backend

    if arch == "cpu":
        init_backend(arch="cpu", num_threads=threads)
        return

    try:
        init_backend(arch=arch, num_threads=threads)
    except RuntimeError as exc:
        logger.warning("Backend %s unavailable (%s); falling back to CPU", arch, exc)
        init_backend(arch="cpu", num_threads=threads)


def render_random_scene(args: argparse.Namespace) -> str:
    """Render the scene described by the parsed arguments.

    Returns:
        The path the image was written to.
    """
    # Lazy imports to allow Taichi initialization first
    from pathtracer.camera import setup_camera
    from pathtracer.config import RenderSettings
    from pathtracer.core.renderer import Renderer
    from pathtracer.preview.export import save_png_with_fallback
    from pathtracer.scene.random_spheres import create_random_scene

    settings = RenderSettings.from_aspect_ratio(
        args.width,
        args.aspect,
        samples_per_pixel=args.samples,
        max_depth=args.depth,
        seed=args.seed,
        parallel=not args.serial,
    )

    world, camera = create_random_scene(seed=args.scene_seed, aspect_ratio=settings.aspect_ratio)
    setup_camera(camera)
    logger.info("Scene: %d spheres, %d materials", world.sphere_count, world.material_count)

    renderer = Renderer(settings)

    def progress_callback(rows_done: int, total_rows: int) -> None:
        logger.info("Scanlines remaining: %d", total_rows - rows_done)

    renderer.render(callback=progress_callback)

    path = save_png_with_fallback(renderer.get_image_uint8(), args.output)
    logger.info("Saved to %s (seed %d)", path, renderer.seed)
    return path


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.WARNING if args.quiet else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        init_taichi(args.arch, args.threads)
        render_random_scene(args)
        return 0
    except (ValueError, RuntimeError, OSError) as e:
        logger.error("Error: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
