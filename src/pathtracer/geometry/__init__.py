"""Geometry module for shape primitives.

Components:
    sphere: Sphere primitive with robust ray-sphere intersection

Intersection routines are Taichi functions (``@ti.func``) returning a
HitRecord whose normal always faces the incoming ray.
"""

from .sphere import HitRecord, Sphere, hit_sphere, make_sphere

__all__ = [
    "Sphere",
    "HitRecord",
    "hit_sphere",
    "make_sphere",
]
