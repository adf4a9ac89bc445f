"""
Ray class for representing rays in 3D space.

A ray is defined by an origin point, a direction vector and the
time at which it was cast (used for motion blur).
Ray(t) = origin + t * direction
"""

from __future__ import annotations
from dataclasses import dataclass

from .vec3 import Vec3, Point3


@dataclass(frozen=True)
class Ray:
    """A ray with origin, direction and sample time.

    The parametric form is: P(t) = origin + t * direction.
    The direction is not required to be normalized.
    """

    origin: Point3
    direction: Vec3
    time: float = 0.0

    def at(self, t: float) -> Point3:
        """Get the point along the ray at parameter t.

        Args:
            t: The parameter value (distance if direction is normalized)

        Returns:
            The point at origin + t * direction
        """
        return self.origin + self.direction * t

    def __repr__(self) -> str:
        return f"Ray(origin={self.origin}, direction={self.direction}, time={self.time})"
