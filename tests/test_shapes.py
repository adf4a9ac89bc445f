"""Tests for geometric shapes and bounding boxes."""

import pytest
import numpy as np

from raytrace.vec3 import Vec3, Point3, Color
from raytrace.ray import Ray
from raytrace.shapes import Sphere, HittableList, AABB
from raytrace.materials import Lambertian


class TestSphere:
    """Test Sphere class."""

    def test_creation(self):
        sphere = Sphere(Point3(1, 2, 3), 0.5)
        assert sphere.center == Point3(1, 2, 3)
        assert sphere.radius == 0.5

    @pytest.mark.parametrize("radius", [0.0, -1.0])
    def test_rejects_non_positive_radius(self, radius):
        with pytest.raises(ValueError):
            Sphere(Point3(0, 0, 0), radius)

    def test_hit_through_center(self):
        sphere = Sphere(Point3(0, 0, -5), 1.0)
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, -1))
        hit = sphere.hit(ray, 0.001, float('inf'))

        assert hit is not None
        assert abs(hit.t - 4.0) < 1e-9
        assert hit.point == Point3(0, 0, -4)
        assert hit.normal == Vec3(0, 0, 1)

    def test_entry_normal_scaled_by_radius(self):
        center = Point3(1, 2, -6)
        sphere = Sphere(center, 2.5)
        ray = Ray(Point3(0, 0, 0), center - Point3(0, 0, 0))
        hit = sphere.hit(ray, 0.001, float('inf'))

        assert hit is not None
        assert abs(hit.normal.dot(hit.point - center) - 2.5) < 1e-9
        assert abs(hit.normal.length() - 1.0) < 1e-9

    def test_miss(self):
        sphere = Sphere(Point3(0, 0, -5), 1.0)
        ray = Ray(Point3(0, 5, 0), Vec3(0, 0, -1))
        assert sphere.hit(ray, 0.001, float('inf')) is None

    def test_tangent_ray_misses(self):
        # Discriminant is exactly zero
        sphere = Sphere(Point3(0, 0, -5), 1.0)
        ray = Ray(Point3(1, 0, 0), Vec3(0, 0, -1))
        assert sphere.hit(ray, 0.001, float('inf')) is None

    def test_behind_ray(self):
        sphere = Sphere(Point3(0, 0, 5), 1.0)
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, -1))
        assert sphere.hit(ray, 0.001, float('inf')) is None

    def test_hit_from_inside_returns_far_root(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, -1))
        hit = sphere.hit(ray, 0.001, float('inf'))

        assert hit is not None
        assert abs(hit.t - 1.0) < 1e-9
        # Normal stays outward facing
        assert hit.normal == Vec3(0, 0, -1)

    def test_interval_is_open_at_t_max(self):
        sphere = Sphere(Point3(0, 0, -5), 1.0)
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, -1))
        assert sphere.hit(ray, 0.001, 4.0) is None

    def test_interval_is_open_at_t_min(self):
        sphere = Sphere(Point3(0, 0, -5), 1.0)
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, -1))
        hit = sphere.hit(ray, 4.0, float('inf'))
        assert hit is not None
        assert abs(hit.t - 6.0) < 1e-9

    def test_t_strictly_inside_window(self):
        rng = np.random.default_rng(5)
        sphere = Sphere(Point3(0, 0, -3), 1.0)
        for _ in range(100):
            direction = Vec3(rng.uniform(-0.4, 0.4), rng.uniform(-0.4, 0.4), -1)
            t_min, t_max = rng.uniform(0, 2), rng.uniform(2, 5)
            hit = sphere.hit(Ray(Point3(0, 0, 0), direction), t_min, t_max)
            if hit is not None:
                assert t_min < hit.t < t_max

    def test_unnormalized_direction(self):
        sphere = Sphere(Point3(0, 0, -5), 1.0)
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, -2))
        hit = sphere.hit(ray, 0.001, float('inf'))
        assert abs(hit.t - 2.0) < 1e-9

    def test_with_material(self):
        mat = Lambertian(Color(1, 0, 0))
        sphere = Sphere(Point3(0, 0, -5), 1.0, mat)
        hit = sphere.hit(Ray(Point3(0, 0, 0), Vec3(0, 0, -1)), 0.001, float('inf'))
        assert hit.material is mat

    def test_bounding_box(self):
        sphere = Sphere(Point3(1, 2, 3), 0.5)
        bbox = sphere.bounding_box(0.0, 1.0)
        assert bbox.minimum == Point3(0.5, 1.5, 2.5)
        assert bbox.maximum == Point3(1.5, 2.5, 3.5)


class TestAABB:
    """Test AABB slab test and box algebra."""

    def test_hit_through(self):
        box = AABB(Point3(-1, -1, -1), Point3(1, 1, 1))
        ray = Ray(Point3(0, 0, -5), Vec3(0, 0, 1))
        assert box.hit(ray, 0.001, float('inf'))

    def test_miss(self):
        box = AABB(Point3(-1, -1, -1), Point3(1, 1, 1))
        ray = Ray(Point3(5, 5, -5), Vec3(0, 0, 1))
        assert not box.hit(ray, 0.001, float('inf'))

    def test_ray_inside(self):
        box = AABB(Point3(-1, -1, -1), Point3(1, 1, 1))
        ray = Ray(Point3(0, 0, 0), Vec3(1, 0, 0))
        assert box.hit(ray, 0.001, float('inf'))

    def test_negative_direction(self):
        box = AABB(Point3(-1, -1, -6), Point3(1, 1, -4))
        ray = Ray(Point3(0.5, -0.5, 0), Vec3(0, 0, -1))
        assert box.hit(ray, 0.001, float('inf'))

    def test_pointing_away(self):
        box = AABB(Point3(-1, -1, -6), Point3(1, 1, -4))
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, 1))
        assert not box.hit(ray, 0.001, float('inf'))

    def test_zero_direction_component_inside_slab(self):
        box = AABB(Point3(-1, -1, -1), Point3(1, 1, 1))
        ray = Ray(Point3(-5, 0.5, 0), Vec3(1, 0, 0))
        assert box.hit(ray, 0.001, float('inf'))

    def test_zero_direction_component_outside_slab(self):
        box = AABB(Point3(-1, -1, -1), Point3(1, 1, 1))
        ray = Ray(Point3(-5, 2, 0), Vec3(1, 0, 0))
        assert not box.hit(ray, 0.001, float('inf'))

    def test_window_excludes_box(self):
        box = AABB(Point3(-1, -1, -6), Point3(1, 1, -4))
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, -1))
        assert not box.hit(ray, 0.001, 3.0)
        assert not box.hit(ray, 7.0, float('inf'))

    def test_rejects_inverted_corners(self):
        with pytest.raises(ValueError):
            AABB(Point3(1, 0, 0), Point3(0, 1, 1))

    def test_volume(self):
        box = AABB(Point3(0, 0, 0), Point3(1, 2, 3))
        assert box.volume() == 6

    def test_flat_box_has_zero_volume(self):
        box = AABB(Point3(0, 0, 0), Point3(1, 0, 3))
        assert box.volume() == 0

    def test_surrounding_box(self):
        box1 = AABB(Point3(0, 0, 0), Point3(1, 1, 1))
        box2 = AABB(Point3(2, -1, 0.5), Point3(3, 0.5, 4))
        combined = AABB.surrounding_box(box1, box2)
        assert combined.minimum == Point3(0, -1, 0)
        assert combined.maximum == Point3(3, 1, 4)

    def test_surrounding_box_symmetric_and_contains_inputs(self):
        rng = np.random.default_rng(11)
        for _ in range(50):
            lo_a, lo_b = rng.uniform(-5, 5, 3), rng.uniform(-5, 5, 3)
            a = AABB(Vec3.from_array(lo_a), Vec3.from_array(lo_a + rng.uniform(0, 3, 3)))
            b = AABB(Vec3.from_array(lo_b), Vec3.from_array(lo_b + rng.uniform(0, 3, 3)))
            ab = AABB.surrounding_box(a, b)
            assert ab == AABB.surrounding_box(b, a)
            assert ab.contains(a)
            assert ab.contains(b)

    def test_contains_rejects_larger_box(self):
        small = AABB(Point3(0, 0, 0), Point3(1, 1, 1))
        large = AABB(Point3(-1, 0, 0), Point3(1, 1, 1))
        assert large.contains(small)
        assert not small.contains(large)


class TestHittableList:
    """Test HittableList class."""

    def test_empty_list(self):
        world = HittableList()
        assert world.hit(Ray(Point3(0, 0, 0), Vec3(1, 0, 0)), 0.001, float('inf')) is None
        assert world.bounding_box(0.0, 1.0) is None

    def test_hit_closest(self):
        world = HittableList()
        world.add(Sphere(Point3(0, 0, -10), 1.0))
        world.add(Sphere(Point3(0, 0, -5), 1.0))
        world.add(Sphere(Point3(0, 0, -15), 1.0))

        hit = world.hit(Ray(Point3(0, 0, 0), Vec3(0, 0, -1)), 0.001, float('inf'))
        assert abs(hit.t - 4.0) < 1e-9

    def test_add_and_clear(self):
        world = HittableList()
        world.add(Sphere(Point3(0, 0, 0), 1.0))
        assert len(world) == 1
        world.clear()
        assert len(world) == 0

    def test_iteration(self):
        spheres = [Sphere(Point3(i, 0, 0), 0.5) for i in range(3)]
        world = HittableList(spheres)
        assert list(world) == spheres

    def test_bounding_box(self):
        world = HittableList([
            Sphere(Point3(-5, 0, 0), 1.0),
            Sphere(Point3(5, 0, 0), 1.0),
        ])
        bbox = world.bounding_box(0.0, 1.0)
        assert bbox.minimum == Point3(-6, -1, -1)
        assert bbox.maximum == Point3(6, 1, 1)

    def test_does_not_share_caller_list(self):
        spheres = [Sphere(Point3(i, 0, 0), 0.5) for i in range(2)]
        world = HittableList(spheres)
        world.add(Sphere(Point3(5, 0, 0), 0.5))
        assert len(spheres) == 2
        world.clear()
        assert len(spheres) == 2
