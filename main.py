#!/usr/bin/env python3
"""
raytrace - A Python Path Tracer

Main entry point for rendering the built-in scenes.
"""

import argparse
import logging
import sys
import time
from pathlib import Path

from raytrace.vec3 import Vec3, Point3
from raytrace.camera import Camera
from raytrace.bvh import BVH
from raytrace.renderer import Renderer, RenderSettings, create_rng, format_ppm
from raytrace.scenes import SCENES, create_scene


def create_camera(scene: str, settings: RenderSettings) -> Camera:
    """Create the camera that frames a built-in scene."""
    if scene == 'simple':
        return Camera(
            look_from=Point3(0, 0, 0),
            look_at=Point3(0, 0, -1),
            vup=Vec3(0, 1, 0),
            vfov=90,
            aspect_ratio=settings.aspect_ratio
        )

    # Only the moving scene samples a shutter time per ray
    if scene == 'moving':
        shutter_open, shutter_close = settings.time0, settings.time1
    else:
        shutter_open = shutter_close = settings.time0

    look_from = Point3(16, 2, 4)
    focal_point = Point3(4, 1, 0)
    return Camera(
        look_from=look_from,
        look_at=Point3(0, 0.5, 0),
        vup=Vec3(0, 1, 0),
        vfov=15,
        aspect_ratio=settings.aspect_ratio,
        aperture=1.0 / 16.0,
        focus_dist=(look_from - focal_point).length(),
        shutter_open=shutter_open,
        shutter_close=shutter_close
    )


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description='raytrace - A Python Path Tracer',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  python main.py --scene simple --output simple.ppm
  python main.py --width 400 --height 200 --samples 200 --output render.png
  python main.py --scene moving --samples 10 --output - > moving.ppm
        '''
    )

    parser.add_argument('--width', type=int, default=200, help='Image width (default: 200)')
    parser.add_argument('--height', type=int, default=100, help='Image height (default: 100)')
    parser.add_argument('--samples', type=int, default=100, help='Samples per pixel (default: 100)')
    parser.add_argument('--depth', type=int, default=50, help='Max ray depth (default: 50)')
    parser.add_argument('--seed', type=int, default=0, help='Random seed (default: 0)')
    parser.add_argument('--output', type=str, default='output/render.ppm',
                        help='Output filename, or - for P3 on stdout')
    parser.add_argument('--scene', type=str, default='random', choices=SCENES,
                        help='Scene to render (default: random)')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s %(name)s %(levelname)s: %(message)s',
        stream=sys.stderr
    )

    settings = RenderSettings(
        width=args.width,
        height=args.height,
        samples_per_pixel=args.samples,
        max_depth=args.depth,
        seed=args.seed
    )

    # Status goes to stderr so stdout can carry the image
    print("=" * 60, file=sys.stderr)
    print("raytrace Path Tracer", file=sys.stderr)
    print("=" * 60, file=sys.stderr)
    print(f"  Resolution: {settings.width}x{settings.height}", file=sys.stderr)
    print(f"  Samples: {settings.samples_per_pixel}", file=sys.stderr)
    print(f"  Max Depth: {settings.max_depth}", file=sys.stderr)
    print(f"  Seed: {settings.seed}", file=sys.stderr)

    print(f"\nCreating scene: {args.scene}", file=sys.stderr)
    objects = create_scene(args.scene, create_rng(settings.seed, worker_index=1))
    world = BVH(objects, settings.time0, settings.time1)
    camera = create_camera(args.scene, settings)
    print(f"  Objects in scene: {len(world)}", file=sys.stderr)

    renderer = Renderer(settings)

    last_progress = [0]

    def progress_callback(progress: float):
        pct = int(progress * 100)
        if pct > last_progress[0]:
            last_progress[0] = pct
            bar_len = 40
            filled = int(bar_len * progress)
            bar = '█' * filled + '░' * (bar_len - filled)
            print(f'\rRendering: [{bar}] {pct}%', end='', flush=True, file=sys.stderr)

    renderer.set_progress_callback(progress_callback)

    start_time = time.time()
    image = renderer.render(world, camera)
    elapsed = time.time() - start_time

    print(f"\nRender completed in {elapsed:.2f} seconds", file=sys.stderr)
    print(f"  Rays per second: {(settings.width * settings.height * settings.samples_per_pixel) / max(elapsed, 1e-9):.0f}",
          file=sys.stderr)

    if args.output == '-':
        sys.stdout.write(format_ppm(renderer.to_ldr(image)))
    else:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        print(f"Saving to: {args.output}", file=sys.stderr)
        renderer.save_image(image, output_path)

    return 0


if __name__ == '__main__':
    sys.exit(main())
