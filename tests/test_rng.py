"""Tests for the per-pixel random streams.

Tests cover:
- Seeding is deterministic, never zero, and differs between pixels
- Uniform draws stay in [0, 1) with a sane mean
- Sphere, unit-vector and disk samplers respect their domains
"""

import numpy as np
import pytest
import taichi as ti

N = 4096


class TestSeeding:
    """Tests for seed_pixel and the state stream."""

    def test_seed_pixel_is_deterministic(self):
        from pathtracer.core.rng import seed_pixel

        result = ti.field(dtype=ti.u32, shape=2)

        @ti.kernel
        def test_kernel():
            result[0] = seed_pixel(ti.u32(1234), ti.u32(77))
            result[1] = seed_pixel(ti.u32(1234), ti.u32(77))

        test_kernel()
        assert result[0] == result[1]

    def test_seed_pixel_never_zero(self):
        from pathtracer.core.rng import seed_pixel

        states = ti.field(dtype=ti.u32, shape=N)

        @ti.kernel
        def test_kernel():
            for k in range(N):
                states[k] = seed_pixel(ti.u32(0), ti.u32(k))

        test_kernel()
        values = states.to_numpy()
        assert np.all(values != 0)
        # Neighbouring pixels start from distinct states
        assert len(np.unique(values)) == N

    def test_different_seeds_give_different_streams(self):
        from pathtracer.core.rng import random_f64, seed_pixel

        result = ti.field(dtype=ti.f64, shape=2)

        @ti.kernel
        def test_kernel():
            a, _ = random_f64(seed_pixel(ti.u32(1), ti.u32(0)))
            b, _ = random_f64(seed_pixel(ti.u32(2), ti.u32(0)))
            result[0] = a
            result[1] = b

        test_kernel()
        assert result[0] != result[1]


class TestUniform:
    """Tests for random_f64 and random_range."""

    def test_random_f64_range_and_mean(self):
        from pathtracer.core.rng import random_f64, seed_pixel

        values = ti.field(dtype=ti.f64, shape=N)

        @ti.kernel
        def test_kernel():
            # One stream, drawn sequentially
            for _ in range(1):
                state = seed_pixel(ti.u32(99), ti.u32(0))
                for k in range(N):
                    u, state = random_f64(state)
                    values[k] = u

        test_kernel()
        v = values.to_numpy()
        assert v.min() >= 0.0
        assert v.max() < 1.0
        assert v.mean() == pytest.approx(0.5, abs=0.03)

    def test_random_range(self):
        from pathtracer.core.rng import random_range, seed_pixel

        values = ti.field(dtype=ti.f64, shape=N)

        @ti.kernel
        def test_kernel():
            for k in range(N):
                x, _ = random_range(-2.0, 3.0, seed_pixel(ti.u32(5), ti.u32(k)))
                values[k] = x

        test_kernel()
        v = values.to_numpy()
        assert v.min() >= -2.0
        assert v.max() < 3.0


class TestGeometricSamplers:
    """Tests for the sphere, unit vector and disk samplers."""

    def test_random_in_unit_sphere(self):
        from pathtracer.core.rng import random_in_unit_sphere, seed_pixel

        points = ti.Vector.field(3, dtype=ti.f64, shape=N)

        @ti.kernel
        def test_kernel():
            for k in range(N):
                p, _ = random_in_unit_sphere(seed_pixel(ti.u32(7), ti.u32(k)))
                points[k] = p

        test_kernel()
        p = points.to_numpy()
        assert np.all(np.linalg.norm(p, axis=1) < 1.0)
        assert np.abs(p.mean(axis=0)).max() < 0.05

    def test_random_unit_vector(self):
        from pathtracer.core.rng import random_unit_vector, seed_pixel

        points = ti.Vector.field(3, dtype=ti.f64, shape=N)

        @ti.kernel
        def test_kernel():
            for k in range(N):
                p, _ = random_unit_vector(seed_pixel(ti.u32(11), ti.u32(k)))
                points[k] = p

        test_kernel()
        p = points.to_numpy()
        np.testing.assert_allclose(np.linalg.norm(p, axis=1), 1.0, atol=1e-12)

    def test_random_in_unit_disk(self):
        from pathtracer.core.rng import random_in_unit_disk, seed_pixel

        points = ti.Vector.field(3, dtype=ti.f64, shape=N)

        @ti.kernel
        def test_kernel():
            for k in range(N):
                p, _ = random_in_unit_disk(seed_pixel(ti.u32(13), ti.u32(k)))
                points[k] = p

        test_kernel()
        p = points.to_numpy()
        assert np.all(p[:, 2] == 0.0)
        assert np.all(p[:, 0] ** 2 + p[:, 1] ** 2 < 1.0)
