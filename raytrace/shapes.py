"""
Geometric shapes for the ray tracer.

Each shape implements the Hittable interface: a `hit` method returning
the nearest intersection inside an open (t_min, t_max) window, and a
`bounding_box` method used to build the BVH.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING
import math

from .vec3 import Vec3, Point3
from .ray import Ray

if TYPE_CHECKING:
    from .materials import Material


@dataclass
class HitRecord:
    """Stores information about a ray-object intersection.

    Attributes:
        t: The ray parameter at intersection
        point: The intersection point in world space
        normal: The unit surface normal, always pointing out of the object
        material: The material at the hit point
    """
    t: float
    point: Point3
    normal: Vec3
    material: Optional[Material] = None


class AABB:
    """Axis-Aligned Bounding Box for acceleration structures."""

    __slots__ = ('minimum', 'maximum')

    def __init__(self, minimum: Point3, maximum: Point3):
        """Create an AABB from corner points.

        Args:
            minimum: Corner with smallest x, y, z values
            maximum: Corner with largest x, y, z values

        Raises:
            ValueError: If minimum exceeds maximum on any axis
        """
        for axis in range(3):
            if minimum[axis] > maximum[axis]:
                raise ValueError(f"AABB minimum {minimum} exceeds maximum {maximum}")
        self.minimum = minimum
        self.maximum = maximum

    def hit(self, ray: Ray, t_min: float, t_max: float) -> bool:
        """Test if ray intersects this AABB using the slab method.

        Each axis yields an entry/exit interval; the box is hit when the
        intersection of all three intervals with (t_min, t_max) is non-empty.
        """
        for i in range(3):
            direction = ray.direction[i]
            origin = ray.origin[i]

            if direction == 0.0:
                # Parallel to this slab: no constraint unless outside it
                if origin < self.minimum[i] or origin > self.maximum[i]:
                    return False
                continue

            inv_d = 1.0 / direction
            t0 = (self.minimum[i] - origin) * inv_d
            t1 = (self.maximum[i] - origin) * inv_d

            if inv_d < 0:
                t0, t1 = t1, t0

            t_min = max(t0, t_min)
            t_max = min(t1, t_max)

            if t_max <= t_min:
                return False

        return True

    def contains(self, other: AABB) -> bool:
        """Return True if ``other`` lies entirely inside this box."""
        return all(
            self.minimum[i] <= other.minimum[i] and other.maximum[i] <= self.maximum[i]
            for i in range(3)
        )

    def volume(self) -> float:
        """Return the volume enclosed by the box."""
        extent = self.maximum - self.minimum
        return extent.x * extent.y * extent.z

    @staticmethod
    def surrounding_box(box0: AABB, box1: AABB) -> AABB:
        """Return the smallest AABB that contains both input boxes."""
        small = Point3(
            min(box0.minimum.x, box1.minimum.x),
            min(box0.minimum.y, box1.minimum.y),
            min(box0.minimum.z, box1.minimum.z)
        )
        big = Point3(
            max(box0.maximum.x, box1.maximum.x),
            max(box0.maximum.y, box1.maximum.y),
            max(box0.maximum.z, box1.maximum.z)
        )
        return AABB(small, big)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AABB):
            return NotImplemented
        return self.minimum == other.minimum and self.maximum == other.maximum

    def __repr__(self) -> str:
        return f"AABB(min={self.minimum}, max={self.maximum})"


class Hittable(ABC):
    """Abstract base class for all objects that can be hit by rays."""

    @abstractmethod
    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        """Test if ray intersects this object.

        Args:
            ray: The ray to test
            t_min: Exclusive lower bound on t (avoids self-intersection)
            t_max: Exclusive upper bound on t

        Returns:
            HitRecord of the nearest intersection, None otherwise
        """

    @abstractmethod
    def bounding_box(self, time0: float, time1: float) -> Optional[AABB]:
        """Get a box enclosing this object for every time in [time0, time1].

        Returns:
            AABB if the object is bounded, None otherwise
        """


def _hit_sphere(
    center: Point3, radius: float, material: Optional[Material],
    ray: Ray, t_min: float, t_max: float
) -> Optional[HitRecord]:
    """Solve |origin + t*dir - center|^2 = radius^2 for the nearest root.

    With oc = origin - center the quadratic reduces to
    a*t^2 + 2*b*t + c = 0 where a = dir.dir, b = oc.dir and
    c = oc.oc - radius^2, so the discriminant is b^2 - a*c.
    """
    oc = ray.origin - center
    a = ray.direction.length_squared()
    b = oc.dot(ray.direction)
    c = oc.length_squared() - radius * radius

    discriminant = b * b - a * c
    if discriminant <= 0:
        return None

    sqrtd = math.sqrt(discriminant)

    for root in ((-b - sqrtd) / a, (-b + sqrtd) / a):
        if t_min < root < t_max:
            point = ray.at(root)
            return HitRecord(
                t=root,
                point=point,
                normal=(point - center) / radius,
                material=material
            )

    return None


def _sphere_box(center: Point3, radius: float) -> AABB:
    r_vec = Vec3(radius, radius, radius)
    return AABB(center - r_vec, center + r_vec)


class Sphere(Hittable):
    """A sphere defined by center and radius."""

    def __init__(self, center: Point3, radius: float, material: Optional[Material] = None):
        """Create a sphere.

        Args:
            center: Center point of the sphere
            radius: Radius of the sphere, must be positive
            material: Material for shading

        Raises:
            ValueError: If radius is not positive
        """
        if not radius > 0:
            raise ValueError(f"Sphere radius must be positive, got {radius}")
        self.center = center
        self.radius = radius
        self.material = material

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        return _hit_sphere(self.center, self.radius, self.material, ray, t_min, t_max)

    def bounding_box(self, time0: float = 0.0, time1: float = 0.0) -> Optional[AABB]:
        """Return the AABB containing this sphere (static, time-independent)."""
        return _sphere_box(self.center, self.radius)

    def __repr__(self) -> str:
        return f"Sphere(center={self.center}, radius={self.radius})"


class MovingSphere(Hittable):
    """A sphere that moves linearly between two positions over time.

    Used for motion blur effects. Outside [time0, time1] the sphere rests
    at the nearer end of its path.
    """

    def __init__(
        self,
        center0: Point3,
        center1: Point3,
        time0: float,
        time1: float,
        radius: float,
        material: Optional[Material] = None
    ):
        """Create a moving sphere.

        Args:
            center0: Center position at time0
            center1: Center position at time1
            time0: Start time
            time1: End time, must be later than time0
            radius: Radius of the sphere, must be positive
            material: Material for shading

        Raises:
            ValueError: If radius is not positive or the time window is empty
        """
        if not radius > 0:
            raise ValueError(f"MovingSphere radius must be positive, got {radius}")
        if not time1 > time0:
            raise ValueError(f"MovingSphere needs time1 > time0, got [{time0}, {time1}]")
        self.center0 = center0
        self.center1 = center1
        self.time0 = time0
        self.time1 = time1
        self.radius = radius
        self.material = material

    def center(self, time: float) -> Point3:
        """Get the center position at a given time."""
        t = (time - self.time0) / (self.time1 - self.time0)
        t = min(max(t, 0.0), 1.0)
        return self.center0 + (self.center1 - self.center0) * t

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        """Test ray-sphere intersection at the ray's time."""
        return _hit_sphere(self.center(ray.time), self.radius, self.material, ray, t_min, t_max)

    def bounding_box(self, time0: float, time1: float) -> Optional[AABB]:
        """Return an AABB that contains the sphere over [time0, time1].

        Motion is linear, so the boxes at both ends of the range enclose
        every position in between.
        """
        box0 = _sphere_box(self.center(time0), self.radius)
        box1 = _sphere_box(self.center(time1), self.radius)
        return AABB.surrounding_box(box0, box1)

    def __repr__(self) -> str:
        return (
            f"MovingSphere(center0={self.center0}, center1={self.center1}, "
            f"time=[{self.time0}, {self.time1}], radius={self.radius})"
        )


class HittableList(Hittable):
    """A collection of hittable objects searched exhaustively."""

    def __init__(self, objects: Optional[list[Hittable]] = None):
        self.objects: list[Hittable] = list(objects) if objects is not None else []

    def add(self, obj: Hittable) -> None:
        """Add an object to the list."""
        self.objects.append(obj)

    def clear(self) -> None:
        """Remove all objects."""
        self.objects.clear()

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        """Find the closest intersection among all objects."""
        closest_hit: Optional[HitRecord] = None
        closest_t = t_max

        for obj in self.objects:
            hit_record = obj.hit(ray, t_min, closest_t)
            if hit_record is not None:
                closest_hit = hit_record
                closest_t = hit_record.t

        return closest_hit

    def bounding_box(self, time0: float, time1: float) -> Optional[AABB]:
        """Return the AABB containing all objects."""
        output_box: Optional[AABB] = None

        for obj in self.objects:
            box = obj.bounding_box(time0, time1)
            if box is None:
                return None
            output_box = box if output_box is None else AABB.surrounding_box(output_box, box)

        return output_box

    def __len__(self) -> int:
        return len(self.objects)

    def __iter__(self):
        return iter(self.objects)
