"""
Built-in scenes.

- simple_scene: a single diffuse sphere resting on a large ground sphere
- random_scene: the classic field of small random spheres around three
  large ones (glass, diffuse, metal), optionally with moving spheres
"""

from __future__ import annotations
import logging
from typing import List, Sequence

import numpy as np

from .vec3 import Color, Point3
from .shapes import Hittable, HittableList, Sphere, MovingSphere
from .materials import Lambertian, Metal, Dielectric

logger = logging.getLogger(__name__)


def validate_scene(objects: Sequence[Hittable]) -> None:
    """Reject scenes that cannot be rendered.

    Raises:
        ValueError: If the scene has no primitives
    """
    if len(objects) == 0:
        raise ValueError("A scene must contain at least one primitive")


def simple_scene() -> HittableList:
    """Create a diffuse sphere sitting on a ground sphere."""
    world = HittableList()
    world.add(Sphere(Point3(0, 0, -1), 0.5, Lambertian(Color(0.5, 0.5, 0.5))))
    world.add(Sphere(Point3(0, -100.5, -1), 100, Lambertian(Color(0.5, 0.5, 0.5))))
    return world


def random_scene(rng: np.random.Generator, moving: bool = False) -> HittableList:
    """Create the random sphere field.

    Args:
        rng: Random stream used to place and color the small spheres
        moving: If True, diffuse spheres bounce upward over time [0, 1]

    Returns:
        The scene as a HittableList
    """
    world = HittableList()

    # Ground
    world.add(Sphere(Point3(0, -1000, 0), 1000, Lambertian(Color(0.5, 0.5, 0.5))))

    clearance_point = Point3(4, 0.2, 0)

    for a in range(-11, 11):
        for b in range(-11, 11):
            choose_mat = rng.random()
            center = Point3(a + 0.9 * rng.random(), 0.2, b + 0.9 * rng.random())
            if (center - clearance_point).length() <= 0.9:
                continue

            if choose_mat < 0.8:
                # Diffuse
                albedo = Color(*(rng.random(3) * rng.random(3)))
                material = Lambertian(albedo)
                if moving:
                    center1 = center + Point3(0, 0.5 * rng.random(), 0)
                    world.add(MovingSphere(center, center1, 0.0, 1.0, 0.2, material))
                else:
                    world.add(Sphere(center, 0.2, material))
            elif choose_mat < 0.95:
                # Metal
                albedo = Color(*(0.5 * (1 + rng.random(3))))
                world.add(Sphere(center, 0.2, Metal(albedo, 0.5 * rng.random())))
            else:
                # Glass
                world.add(Sphere(center, 0.2, Dielectric(1.5)))

    world.add(Sphere(Point3(0, 1, 0), 1.0, Dielectric(1.5)))
    world.add(Sphere(Point3(-4, 1, 0), 1.0, Lambertian(Color(0.4, 0.2, 0.1))))
    world.add(Sphere(Point3(4, 1, 0), 1.0, Metal(Color(0.7, 0.6, 0.5), 0.0)))

    logger.debug(f"Random scene created with {len(world)} objects (moving={moving})")
    return world


SCENES = ('random', 'moving', 'simple')


def create_scene(name: str, rng: np.random.Generator) -> List[Hittable]:
    """Create a built-in scene by name.

    Raises:
        ValueError: If the name is unknown
    """
    if name == 'simple':
        world = simple_scene()
    elif name == 'random':
        world = random_scene(rng)
    elif name == 'moving':
        world = random_scene(rng, moving=True)
    else:
        raise ValueError(f"Unknown scene: {name}")

    validate_scene(world.objects)
    return world.objects
