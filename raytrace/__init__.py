"""
raytrace - A Python Path Tracer

A small, complete Monte-Carlo path tracer with:
- Spheres and moving spheres (motion blur)
- Bounding volume hierarchy acceleration
- Lambertian, metal and dielectric materials
- Thin-lens camera with depth of field
- Reproducible seeded rendering to PPM or PNG
"""

__version__ = "0.1.0"

from .vec3 import Vec3, Point3, Color
from .ray import Ray
from .shapes import AABB, HitRecord, Hittable, Sphere, MovingSphere, HittableList
from .bvh import BVH, BVHNode, BVHBuildError, build_bvh
from .materials import Material, ScatterResult, Lambertian, Metal, Dielectric, reflect, refract, schlick
from .camera import Camera
from .renderer import Renderer, RenderSettings, create_rng, format_ppm, sky_color, trace
from .scenes import create_scene, random_scene, simple_scene, validate_scene
