"""
Renderer module - the heart of the ray tracer.

Implements:
- Recursive path tracing with a fixed depth cutoff
- Seeded, reproducible random streams
- Square-root gamma correction and 8-bit quantization
- Plain-text PPM (P3) and Pillow image output
"""

from __future__ import annotations
import logging
import math
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Callable, Union
import numpy as np

from .vec3 import Color
from .ray import Ray
from .camera import Camera
from .shapes import Hittable

logger = logging.getLogger(__name__)

MAX_DEPTH = 50
T_MIN = 0.001  # Offset that keeps scattered rays off their own surface

SKY_WHITE = Color(1.0, 1.0, 1.0)
SKY_BLUE = Color(0.5, 0.7, 1.0)


def create_rng(seed: int, worker_index: int = 0) -> np.random.Generator:
    """Create a reproducible random stream.

    Streams for different worker indices derived from the same seed are
    statistically independent, so per-worker rendering stays reproducible.

    Args:
        seed: Master seed for the render
        worker_index: Index of the worker consuming the stream

    Returns:
        A numpy random Generator
    """
    return np.random.default_rng(np.random.SeedSequence(seed, spawn_key=(worker_index,)))


def sky_color(ray: Ray) -> Color:
    """Background gradient from white at the horizon to blue overhead."""
    unit_direction = ray.direction.normalize()
    t = 0.5 * (unit_direction.y + 1.0)
    return SKY_WHITE * (1.0 - t) + SKY_BLUE * t


def trace(
    ray: Ray,
    world: Hittable,
    rng: np.random.Generator,
    depth: int = 0,
    max_depth: int = MAX_DEPTH
) -> Color:
    """Estimate the radiance arriving along a ray.

    Args:
        ray: The ray to trace
        world: The scene to trace against
        rng: Random stream for material sampling
        depth: Number of bounces already taken
        max_depth: Bounce count at which a path stops contributing

    Returns:
        Linear color carried back along the ray
    """
    hit_record = world.hit(ray, T_MIN, math.inf)

    if hit_record is None:
        return sky_color(ray)

    if depth < max_depth and hit_record.material is not None:
        scatter_result = hit_record.material.scatter(ray, hit_record, rng)
        if scatter_result is not None:
            return scatter_result.attenuation * trace(
                scatter_result.scattered_ray, world, rng, depth + 1, max_depth
            )

    # Absorbed or out of bounces
    return Color(0.0, 0.0, 0.0)


@dataclass
class RenderSettings:
    """Configuration for the renderer."""
    width: int = 200
    height: int = 100
    samples_per_pixel: int = 100
    max_depth: int = MAX_DEPTH
    seed: int = 0
    time0: float = 0.0
    time1: float = 1.0

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Image size must be positive, got {self.width}x{self.height}")
        if self.samples_per_pixel <= 0:
            raise ValueError(f"samples_per_pixel must be positive, got {self.samples_per_pixel}")
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be non-negative, got {self.max_depth}")
        if self.time1 < self.time0:
            raise ValueError(f"Shutter interval is reversed: [{self.time0}, {self.time1}]")

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height


class Renderer:
    """Single-threaded path tracing renderer."""

    def __init__(self, settings: RenderSettings = None):
        """Create a renderer with the given settings.

        Args:
            settings: Render configuration (uses defaults if None)
        """
        self.settings = settings if settings else RenderSettings()
        self._progress_callback: Optional[Callable[[float], None]] = None

    def set_progress_callback(self, callback: Callable[[float], None]) -> None:
        """Set a callback function for progress updates.

        Args:
            callback: Function that takes progress as float (0.0 to 1.0)
        """
        self._progress_callback = callback

    def render(self, scene: Hittable, camera: Camera) -> np.ndarray:
        """Render the scene and return the image as a numpy array.

        Scanlines are traced bottom to top, but the returned array stores
        the top row first.

        Args:
            scene: The scene to render (any Hittable, usually a BVH)
            camera: The camera to render from

        Returns:
            Linear HDR image as numpy array of shape (height, width, 3)
        """
        width = self.settings.width
        height = self.settings.height
        samples = self.settings.samples_per_pixel
        max_depth = self.settings.max_depth
        rng = create_rng(self.settings.seed)

        logger.info(f"Rendering {width}x{height} at {samples} spp, max depth {max_depth}")
        start_time = time.perf_counter()

        image = np.zeros((height, width, 3), dtype=np.float64)

        for j in reversed(range(height)):
            row = height - 1 - j
            for i in range(width):
                pixel_color = np.zeros(3, dtype=np.float64)

                for _ in range(samples):
                    u = (i + rng.random()) / width
                    v = (j + rng.random()) / height
                    ray = camera.get_ray(u, v, rng)
                    pixel_color += trace(ray, scene, rng, 0, max_depth).to_array()

                image[row, i] = pixel_color / samples

            if self._progress_callback:
                self._progress_callback((row + 1) / height)

        elapsed = time.perf_counter() - start_time
        logger.info(f"Render finished in {elapsed:.2f}s")
        return image

    @staticmethod
    def to_ldr(hdr_image: np.ndarray) -> np.ndarray:
        """Convert HDR image to 8-bit LDR with square-root gamma correction.

        Args:
            hdr_image: HDR image array (float64)

        Returns:
            LDR image as uint8 array
        """
        corrected = np.sqrt(np.clip(hdr_image, 0, None))
        ldr = np.clip(np.floor(255.99 * corrected), 0, 255).astype(np.uint8)
        return ldr

    def save_image(self, image: np.ndarray, filename: Union[str, Path]) -> None:
        """Save image to file.

        Args:
            image: Image array (HDR or LDR)
            filename: Output filename; .ppm is written as plain-text P3,
                anything else goes through Pillow
        """
        from PIL import Image as PILImage

        if image.dtype == np.float64 or image.dtype == np.float32:
            image = self.to_ldr(image)

        path = Path(filename)
        if path.suffix.lower() == '.ppm':
            path.write_text(format_ppm(image))
        else:
            PILImage.fromarray(image).save(path)
        logger.info(f"Saved {image.shape[1]}x{image.shape[0]} image to {path}")


def format_ppm(ldr_image: np.ndarray) -> str:
    """Format an 8-bit image as plain-text PPM (P3).

    Args:
        ldr_image: uint8 array of shape (height, width, 3), top row first

    Returns:
        The P3 header followed by one "R G B" line per pixel
    """
    height, width = ldr_image.shape[:2]
    lines = ["P3", f"{width} {height}", "255"]
    lines.extend(
        f"{r} {g} {b}" for r, g, b in ldr_image.reshape(-1, 3).tolist()
    )
    return "\n".join(lines) + "\n"
