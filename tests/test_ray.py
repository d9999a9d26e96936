"""Unit tests for the ray module.

Tests cover:
- Ray dataclass and ray_at function
- Vector utility functions (dot, cross, normalize, length)
- Reflection, refraction and Schlick reflectance
"""

import math

import pytest
import taichi as ti


def _vec_field():
    return ti.Vector.field(3, dtype=ti.f64, shape=())


class TestRayBasics:
    """Tests for Ray dataclass and basic operations."""

    def test_ray_at_origin(self):
        """Test ray_at returns origin when t=0."""
        from pathtracer.core.ray import Ray, ray_at, vec3

        result = _vec_field()

        @ti.kernel
        def test_kernel():
            ray = Ray(origin=vec3(1.0, 2.0, 3.0), direction=vec3(0.0, 0.0, -1.0))
            result[None] = ray_at(ray, 0.0)

        test_kernel()
        assert tuple(result.to_numpy()) == pytest.approx((1.0, 2.0, 3.0))

    def test_ray_at_positive_t(self):
        """Test ray_at computes origin + t * direction without normalizing."""
        from pathtracer.core.ray import make_ray, ray_at, vec3

        result = _vec_field()

        @ti.kernel
        def test_kernel():
            ray = make_ray(vec3(1.0, 0.0, 0.0), vec3(0.0, 2.0, 0.0))
            result[None] = ray_at(ray, 2.5)

        test_kernel()
        assert tuple(result.to_numpy()) == pytest.approx((1.0, 5.0, 0.0))

    def test_ray_at_negative_t(self):
        """Test ray_at handles negative t (behind origin)."""
        from pathtracer.core.ray import Ray, ray_at, vec3

        result = _vec_field()

        @ti.kernel
        def test_kernel():
            ray = Ray(origin=vec3(0.0, 0.0, 0.0), direction=vec3(0.0, 1.0, 0.0))
            result[None] = ray_at(ray, -3.0)

        test_kernel()
        assert tuple(result.to_numpy()) == pytest.approx((0.0, -3.0, 0.0))


class TestVectorUtilities:
    """Tests for vector utility functions."""

    def test_length_and_length_squared(self):
        from pathtracer.core.ray import length, length_squared, vec3

        result = ti.field(dtype=ti.f64, shape=2)

        @ti.kernel
        def test_kernel():
            v = vec3(3.0, 4.0, 12.0)
            result[0] = length(v)
            result[1] = length_squared(v)

        test_kernel()
        assert result[0] == pytest.approx(13.0)
        assert result[1] == pytest.approx(169.0)

    def test_normalize(self):
        from pathtracer.core.ray import length, normalize, vec3

        result = _vec_field()
        norm = ti.field(dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            n = normalize(vec3(0.0, 3.0, 4.0))
            result[None] = n
            norm[None] = length(n)

        test_kernel()
        assert tuple(result.to_numpy()) == pytest.approx((0.0, 0.6, 0.8))
        assert norm[None] == pytest.approx(1.0, abs=1e-12)

    def test_dot_and_cross(self):
        from pathtracer.core.ray import cross, dot, vec3

        d = ti.field(dtype=ti.f64, shape=())
        c = _vec_field()

        @ti.kernel
        def test_kernel():
            d[None] = dot(vec3(1.0, 2.0, 3.0), vec3(4.0, -5.0, 6.0))
            c[None] = cross(vec3(1.0, 0.0, 0.0), vec3(0.0, 1.0, 0.0))

        test_kernel()
        assert d[None] == pytest.approx(12.0)
        assert tuple(c.to_numpy()) == pytest.approx((0.0, 0.0, 1.0))

    def test_near_zero(self):
        from pathtracer.core.ray import near_zero, vec3

        result = ti.field(dtype=ti.i32, shape=3)

        @ti.kernel
        def test_kernel():
            result[0] = near_zero(vec3(1e-9, -1e-9, 0.0))
            result[1] = near_zero(vec3(1e-9, 1e-3, 0.0))
            result[2] = near_zero(vec3(0.0, 0.0, 0.0))

        test_kernel()
        assert result[0] == 1
        assert result[1] == 0
        assert result[2] == 1


class TestReflect:
    """Tests for mirror reflection."""

    @pytest.mark.parametrize(
        "incident,normal",
        [
            ((1.0, -1.0, 0.0), (0.0, 1.0, 0.0)),
            ((0.3, -0.7, 0.2), (0.0, 1.0, 0.0)),
            ((2.0, 5.0, -1.0), (0.6, 0.0, 0.8)),
        ],
    )
    def test_reflect_negates_normal_component(self, incident, normal):
        """dot(reflect(v, n), n) == -dot(v, n) for a unit normal."""
        from pathtracer.core.ray import dot, reflect, vec3

        result = ti.field(dtype=ti.f64, shape=2)

        @ti.kernel
        def test_kernel():
            v = vec3(incident[0], incident[1], incident[2])
            n = vec3(normal[0], normal[1], normal[2])
            result[0] = dot(reflect(v, n), n)
            result[1] = dot(v, n)

        test_kernel()
        assert result[0] == pytest.approx(-result[1], abs=1e-12)

    def test_reflect_preserves_tangent_component(self):
        from pathtracer.core.ray import reflect, vec3

        result = _vec_field()

        @ti.kernel
        def test_kernel():
            result[None] = reflect(vec3(1.0, -1.0, 0.5), vec3(0.0, 1.0, 0.0))

        test_kernel()
        assert tuple(result.to_numpy()) == pytest.approx((1.0, 1.0, 0.5))


class TestRefract:
    """Tests for Snell's law refraction."""

    def test_refract_head_on_passes_straight_through(self):
        from pathtracer.core.ray import refract, vec3

        result = _vec_field()

        @ti.kernel
        def test_kernel():
            result[None] = refract(vec3(0.0, 0.0, -1.0), vec3(0.0, 0.0, 1.0), 1.0 / 1.5)

        test_kernel()
        assert tuple(result.to_numpy()) == pytest.approx((0.0, 0.0, -1.0), abs=1e-12)

    def test_refract_obeys_snell(self):
        """eta * sin(theta_in) == sin(theta_out)."""
        from pathtracer.core.ray import refract, vec3

        eta = 1.0 / 1.5
        theta = math.radians(40.0)
        result = _vec_field()

        @ti.kernel
        def test_kernel():
            incident = vec3(ti.sin(theta), -ti.cos(theta), 0.0)
            result[None] = refract(incident, vec3(0.0, 1.0, 0.0), eta)

        test_kernel()
        r = result.to_numpy()
        assert math.sqrt(r[0] ** 2 + r[1] ** 2 + r[2] ** 2) == pytest.approx(1.0)
        assert r[0] == pytest.approx(eta * math.sin(theta))
        assert r[1] < 0.0

    def test_refract_unit_ratio_is_identity(self):
        from pathtracer.core.ray import normalize, refract, vec3

        result = _vec_field()

        @ti.kernel
        def test_kernel():
            incident = normalize(vec3(0.4, -1.0, 0.3))
            result[None] = refract(incident, vec3(0.0, 1.0, 0.0), 1.0) - incident

        test_kernel()
        assert tuple(result.to_numpy()) == pytest.approx((0.0, 0.0, 0.0), abs=1e-12)


class TestSchlick:
    """Tests for Schlick's Fresnel approximation."""

    def test_normal_incidence_glass(self):
        from pathtracer.core.ray import schlick_reflectance

        result = ti.field(dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = schlick_reflectance(1.0, 1.5)

        test_kernel()
        assert result[None] == pytest.approx(0.04)

    def test_grazing_incidence_reflects_everything(self):
        from pathtracer.core.ray import schlick_reflectance

        result = ti.field(dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = schlick_reflectance(0.0, 1.5)

        test_kernel()
        assert result[None] == pytest.approx(1.0)

    def test_matched_index_never_reflects_head_on(self):
        from pathtracer.core.ray import schlick_reflectance

        result = ti.field(dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = schlick_reflectance(1.0, 1.0)

        test_kernel()
        assert result[None] == 0.0
