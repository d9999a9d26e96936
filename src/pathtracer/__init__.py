"""Taichi-based stochastic path tracer for scenes of spheres.

This package renders a static scene of spheres into an 8-bit RGB pixel grid
using Monte Carlo path tracing, with support for:
- Lambertian, metal (fuzzy reflection) and dielectric (glass) materials
- A thin-lens camera with depth of field
- Deterministic per-pixel random streams, identical across thread counts
- Parallel rendering across pixels on any Taichi CPU or GPU backend

Subpackages:
    core: Vector utilities, random streams, integrator and render driver
    geometry: Sphere primitive and ray-sphere intersection
    materials: Material variants and scatter dispatch
    scene: World storage and the demo scene builder
    camera: Thin-lens camera with ray generation
    preview: Image export

Taichi must be initialised (see ``pathtracer.backend.init_backend``) before
importing modules that declare Taichi fields.
"""

__version__ = "0.1.0"
