"""
Materials system.

Implements:
- Lambertian diffuse
- Metal (specular reflection with fuzz)
- Dielectric (glass, water - with refraction)

Every scatter call takes the random stream explicitly so renders are
reproducible from a seed.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional
import math

import numpy as np

from .vec3 import Vec3, Color
from .ray import Ray
from .shapes import HitRecord


@dataclass(frozen=True)
class ScatterResult:
    """Result of a material scatter operation."""
    attenuation: Color
    scattered_ray: Ray


def reflect(v: Vec3, n: Vec3) -> Vec3:
    """Reflect v around the normal n."""
    return v - n * (2 * v.dot(n))


def refract(v: Vec3, n: Vec3, ni_over_nt: float) -> Optional[Vec3]:
    """Refract v through a surface with normal n using Snell's law.

    Args:
        v: Incident direction (any length)
        n: Unit normal on the side the ray arrives from
        ni_over_nt: Ratio of refractive indices (n1/n2)

    Returns:
        Refracted direction, or None on total internal reflection
    """
    uv = v.normalize()
    dt = uv.dot(n)
    discriminant = 1.0 - ni_over_nt * ni_over_nt * (1 - dt * dt)
    if discriminant <= 0:
        return None
    return (uv - n * dt) * ni_over_nt - n * math.sqrt(discriminant)


def schlick(cosine: float, ref_idx: float) -> float:
    """Schlick's approximation for reflectance."""
    r0 = (1 - ref_idx) / (1 + ref_idx)
    r0 = r0 * r0
    return r0 + (1 - r0) * pow(1 - cosine, 5)


class Material(ABC):
    """Abstract base class for materials."""

    @abstractmethod
    def scatter(self, ray_in: Ray, hit: HitRecord, rng: np.random.Generator) -> Optional[ScatterResult]:
        """Compute the scattered ray and attenuation.

        Args:
            ray_in: The incoming ray
            hit: The intersection being shaded
            rng: Random stream for any stochastic choices

        Returns:
            ScatterResult if ray scatters, None if absorbed
        """


class Lambertian(Material):
    """Diffuse material with Lambertian (ideal matte) scattering."""

    def __init__(self, albedo: Color):
        """Create a Lambertian material.

        Args:
            albedo: The base color (RGB, each component 0-1)
        """
        self.albedo = albedo

    def scatter(self, ray_in: Ray, hit: HitRecord, rng: np.random.Generator) -> Optional[ScatterResult]:
        target = hit.point + hit.normal + Vec3.random_in_unit_sphere(rng)
        scatter_direction = target - hit.point

        # Catch degenerate scatter direction
        if scatter_direction.near_zero():
            scatter_direction = hit.normal

        return ScatterResult(
            attenuation=self.albedo,
            scattered_ray=Ray(hit.point, scatter_direction, ray_in.time)
        )

    def __repr__(self) -> str:
        return f"Lambertian(albedo={self.albedo})"


class Metal(Material):
    """Metallic material with specular reflection."""

    def __init__(self, albedo: Color, fuzz: float = 0.0):
        """Create a metal material.

        Args:
            albedo: The reflection color
            fuzz: Radius of the reflection perturbation (0 = mirror),
                values above 1 are clamped to 1

        Raises:
            ValueError: If fuzz is negative
        """
        if fuzz < 0:
            raise ValueError(f"Metal fuzz must be non-negative, got {fuzz}")
        self.albedo = albedo
        self.fuzz = min(fuzz, 1.0)

    def scatter(self, ray_in: Ray, hit: HitRecord, rng: np.random.Generator) -> Optional[ScatterResult]:
        reflected = reflect(ray_in.direction.normalize(), hit.normal)
        direction = reflected + Vec3.random_in_unit_sphere(rng) * self.fuzz

        # Absorbed when the perturbed ray points into the surface
        if direction.dot(hit.normal) <= 0:
            return None

        return ScatterResult(
            attenuation=self.albedo,
            scattered_ray=Ray(hit.point, direction, ray_in.time)
        )

    def __repr__(self) -> str:
        return f"Metal(albedo={self.albedo}, fuzz={self.fuzz})"


class Dielectric(Material):
    """Dielectric (glass-like) material with refraction.

    Chooses between reflection and refraction stochastically, weighted by
    Schlick reflectance. Never tints the light passing through it.
    """

    def __init__(self, ior: float = 1.5):
        """Create a dielectric material.

        Args:
            ior: Index of refraction (1.0 = air, 1.5 = glass, 2.4 = diamond)

        Raises:
            ValueError: If ior is not positive
        """
        if not ior > 0:
            raise ValueError(f"Index of refraction must be positive, got {ior}")
        self.ior = ior

    def scatter(self, ray_in: Ray, hit: HitRecord, rng: np.random.Generator) -> Optional[ScatterResult]:
        direction = ray_in.direction
        reflected = reflect(direction, hit.normal)
        d_dot_n = direction.dot(hit.normal)

        if d_dot_n > 0:
            # Exiting the object
            outward_normal = -hit.normal
            ni_over_nt = self.ior
            cosine = self.ior * d_dot_n / direction.length()
        else:
            outward_normal = hit.normal
            ni_over_nt = 1.0 / self.ior
            cosine = -d_dot_n / direction.length()

        refracted = refract(direction, outward_normal, ni_over_nt)
        if refracted is None or rng.random() < schlick(cosine, self.ior):
            scattered = Ray(hit.point, reflected, ray_in.time)
        else:
            scattered = Ray(hit.point, refracted, ray_in.time)

        return ScatterResult(attenuation=Color(1.0, 1.0, 1.0), scattered_ray=scattered)

    def __repr__(self) -> str:
        return f"Dielectric(ior={self.ior})"
