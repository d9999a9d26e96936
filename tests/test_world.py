"""Tests for the world builder and nearest-hit queries.

Tests cover:
- Adding spheres and sharing materials
- Validation and capacity limits
- Nearest hit selection across overlapping spheres
"""

import pytest
import taichi as ti


def _query(origin, direction, t_min=0.001, t_max=1.0e30):
    """Run hit_world in a kernel and return (hit, t, material_id, normal)."""
    from pathtracer.core.ray import Ray, vec3
    from pathtracer.scene.world import hit_world

    hit = ti.field(dtype=ti.i32, shape=())
    t_val = ti.field(dtype=ti.f64, shape=())
    material_id = ti.field(dtype=ti.i32, shape=())
    normal = ti.Vector.field(3, dtype=ti.f64, shape=())

    @ti.kernel
    def test_kernel():
        ray = Ray(
            origin=vec3(origin[0], origin[1], origin[2]),
            direction=vec3(direction[0], direction[1], direction[2]),
        )
        rec = hit_world(ray, t_min, t_max)
        hit[None] = rec.hit
        t_val[None] = rec.t
        material_id[None] = rec.material_id
        normal[None] = rec.normal

    test_kernel()
    return hit[None], t_val[None], material_id[None], tuple(normal.to_numpy())


class TestWorldBuilder:
    """Tests for the host-side World API."""

    def test_add_sphere_returns_indices(self):
        from pathtracer.materials import Lambertian
        from pathtracer.scene.world import World

        world = World()
        matte = Lambertian(albedo=(0.5, 0.5, 0.5))
        assert world.add_sphere((0.0, 0.0, -1.0), 0.5, matte) == 0
        assert world.add_sphere((0.0, -100.5, -1.0), 100.0, matte) == 1
        assert len(world) == 2
        assert world.sphere_count == 2

    def test_shared_material_registered_once(self):
        from pathtracer.materials import Dielectric, Metal, get_material_count
        from pathtracer.scene.world import World

        world = World()
        glass = Dielectric(ior=1.5)
        world.add_sphere((0.0, 0.0, -1.0), 0.5, glass)
        world.add_sphere((1.0, 0.0, -1.0), 0.5, glass)
        world.add_sphere((2.0, 0.0, -1.0), 0.5, Metal(albedo=(0.8, 0.8, 0.8)))

        assert world.material_count == 2
        assert get_material_count() == 2

    def test_equal_but_distinct_materials_are_separate(self):
        from pathtracer.materials import Lambertian
        from pathtracer.scene.world import World

        world = World()
        world.add_sphere((0.0, 0.0, -1.0), 0.5, Lambertian(albedo=(0.1, 0.2, 0.3)))
        world.add_sphere((1.0, 0.0, -1.0), 0.5, Lambertian(albedo=(0.1, 0.2, 0.3)))
        assert world.material_count == 2

    def test_new_world_clears_previous(self):
        from pathtracer.materials import Lambertian
        from pathtracer.scene.world import World

        first = World()
        first.add_sphere((0.0, 0.0, -1.0), 0.5, Lambertian(albedo=(0.5, 0.5, 0.5)))
        second = World()
        assert len(second) == 0
        assert second.material_count == 0

    def test_replaced_world_is_stale(self):
        from pathtracer.materials import Lambertian
        from pathtracer.scene.world import World

        matte = Lambertian(albedo=(0.5, 0.5, 0.5))
        first = World()
        first.add_sphere((0.0, 0.0, -1.0), 0.5, matte)
        second = World()

        assert not first.is_active
        assert second.is_active
        with pytest.raises(RuntimeError, match="replaced"):
            first.add_sphere((1.0, 0.0, -1.0), 0.5, matte)
        with pytest.raises(RuntimeError, match="replaced"):
            len(first)
        with pytest.raises(RuntimeError, match="replaced"):
            _ = first.sphere_count
        # The failed add touched neither world
        assert len(second) == 0
        assert len(first.spheres) == 1

    def test_clear_reactivates_stale_world(self):
        from pathtracer.materials import Lambertian
        from pathtracer.scene.world import World

        first = World()
        second = World()
        first.clear()

        assert first.is_active
        assert not second.is_active
        assert first.add_sphere((0.0, 0.0, -1.0), 0.5, Lambertian(albedo=(0.5, 0.5, 0.5))) == 0
        assert len(first) == 1

    def test_clear(self):
        from pathtracer.materials import Lambertian
        from pathtracer.scene.world import World

        world = World()
        world.add_sphere((0.0, 0.0, -1.0), 0.5, Lambertian(albedo=(0.5, 0.5, 0.5)))
        world.clear()
        assert len(world) == 0
        assert world.spheres == []

    @pytest.mark.parametrize("radius", [0.0, -1.0])
    def test_rejects_non_positive_radius(self, radius):
        from pathtracer.materials import Lambertian
        from pathtracer.scene.world import World

        world = World()
        with pytest.raises(ValueError, match="radius"):
            world.add_sphere((0.0, 0.0, 0.0), radius, Lambertian(albedo=(0.5, 0.5, 0.5)))

    def test_rejects_unknown_material(self):
        from pathtracer.scene.world import World

        world = World()
        with pytest.raises(ValueError, match="Unsupported material"):
            world.add_sphere((0.0, 0.0, 0.0), 1.0, "chrome")  # type: ignore[arg-type]

    def test_capacity_limit(self):
        from pathtracer.materials import Lambertian
        from pathtracer.scene.world import MAX_SPHERES, World

        world = World()
        matte = Lambertian(albedo=(0.5, 0.5, 0.5))
        for k in range(MAX_SPHERES):
            world.add_sphere((float(k), 0.0, 0.0), 0.1, matte)
        with pytest.raises(RuntimeError, match="Maximum number"):
            world.add_sphere((0.0, 5.0, 0.0), 0.1, matte)


class TestHitWorld:
    """Tests for nearest-hit queries."""

    def test_empty_world_misses(self):
        from pathtracer.scene.world import World

        World()
        hit, _, material_id, _ = _query((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert hit == 0
        assert material_id == -1

    def test_nearest_hit_wins_regardless_of_order(self):
        from pathtracer.materials import Lambertian
        from pathtracer.scene.world import World

        world = World()
        far = Lambertian(albedo=(0.1, 0.1, 0.1))
        near = Lambertian(albedo=(0.9, 0.9, 0.9))
        world.add_sphere((0.0, 0.0, -10.0), 1.0, far)
        world.add_sphere((0.0, 0.0, -4.0), 1.0, near)

        hit, t, material_id, normal = _query((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert hit == 1
        assert t == pytest.approx(3.0)
        assert material_id == world.get_material_id(near)
        assert normal == pytest.approx((0.0, 0.0, 1.0))

    def test_exact_tie_keeps_first_object(self):
        from pathtracer.materials import Lambertian, Metal
        from pathtracer.scene.world import World

        world = World()
        first = Lambertian(albedo=(0.5, 0.5, 0.5))
        second = Metal(albedo=(0.5, 0.5, 0.5))
        world.add_sphere((0.0, 0.0, -4.0), 1.0, first)
        world.add_sphere((0.0, 0.0, -4.0), 1.0, second)

        _, _, material_id, _ = _query((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert material_id == world.get_material_id(first)

    def test_t_max_bounds_the_search(self):
        from pathtracer.materials import Lambertian
        from pathtracer.scene.world import World

        world = World()
        world.add_sphere((0.0, 0.0, -4.0), 1.0, Lambertian(albedo=(0.5, 0.5, 0.5)))
        hit, _, _, _ = _query((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), t_max=2.0)
        assert hit == 0
