#!/usr/bin/env python3
"""Render a small demonstration scene of spheres on a checkerboard floor.

The scene holds a red diffuse sphere, a mirror sphere and a glass sphere
resting on a checkerboard plane, lit by a point light and a small emissive
sphere.

Usage:
    python -m examples.render_spheres [options]

Options:
    --width WIDTH           Image width in pixels (default: 160)
    --height HEIGHT         Image height in pixels (default: 120)
    --samples SAMPLES       Samples per pixel (default: 4)
    --integrator NAME       whitted, path or importance (default: path)
    --sampler NAME          pseudorandom, stratified or best-candidate
    --max-depth DEPTH       Maximum ray depth (default: 5)
    --workers WORKERS       Worker threads (default: 1)
    --seed SEED             Random seed for reproducible renders
    --config FILE           JSON file of RenderConfig fields (overrides options)
    --output OUTPUT         Output file path (default: spheres.png)
    --verbose               Log debug output

Example:
    python -m examples.render_spheres --width 320 --height 240 --samples 16 --workers 4
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from pathlib import Path

logger = logging.getLogger("examples.render_spheres")


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a demonstration scene of spheres.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--width", type=int, default=160, help="Image width in pixels (default: 160)")
    parser.add_argument("--height", type=int, default=120, help="Image height in pixels (default: 120)")
    parser.add_argument("--samples", type=int, default=4, help="Samples per pixel (default: 4)")
    parser.add_argument(
        "--integrator",
        choices=("whitted", "path", "importance"),
        default="path",
        help="Light-transport integrator (default: path)",
    )
    parser.add_argument(
        "--sampler",
        choices=("pseudorandom", "stratified", "best-candidate"),
        default="stratified",
        help="Sampling strategy (default: stratified)",
    )
    parser.add_argument("--max-depth", type=int, default=5, help="Maximum ray depth (default: 5)")
    parser.add_argument("--workers", type=int, default=1, help="Worker threads (default: 1)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--config", type=str, default=None, help="JSON file of RenderConfig fields")
    parser.add_argument("--output", type=str, default="spheres.png", help="Output file path")
    parser.add_argument("--verbose", action="store_true", help="Log debug output")
    return parser.parse_args()


def build_scene(width: int, height: int):
    """Create the demonstration world and a camera for it.

    Returns:
        Tuple of (World, PinholeCamera).
    """
    from src.lightpath.camera.pinhole import PinholeCamera
    from src.lightpath.core.spectrum import Spectrum
    from src.lightpath.core.transform import ScaleTransform, TranslationTransform
    from src.lightpath.geometry.plane import Plane
    from src.lightpath.geometry.sphere import Sphere
    from src.lightpath.materials.dielectric import DielectricBSDF
    from src.lightpath.materials.lambertian import LambertianBSDF
    from src.lightpath.materials.specular import PerfectSpecularBSDF
    from src.lightpath.materials.texture import CheckerboardTexture, ConstantTexture
    from src.lightpath.scene.light import PointLight
    from src.lightpath.scene.primitive import Primitive
    from src.lightpath.scene.world import World

    floor = Primitive(
        Plane([TranslationTransform(0.0, -1.0, 0.0)]),
        LambertianBSDF(
            CheckerboardTexture(
                ConstantTexture(Spectrum(0.8, 0.8, 0.8)),
                ConstantTexture(Spectrum(0.2, 0.2, 0.3)),
            )
        ),
    )
    red = Primitive(
        Sphere(1.0, [TranslationTransform(-2.2, 0.0, 0.0)]),
        LambertianBSDF(ConstantTexture(Spectrum(0.8, 0.1, 0.1))),
    )
    mirror = Primitive(
        Sphere(1.0, [TranslationTransform(0.0, 0.0, -0.5)]),
        PerfectSpecularBSDF(ConstantTexture(Spectrum(0.9, 0.9, 0.9))),
    )
    glass = Primitive(
        Sphere(1.0, [ScaleTransform(0.8, 0.8, 0.8), TranslationTransform(2.2, -0.2, 0.5)]),
        DielectricBSDF(index_of_refraction=1.5),
    )
    lamp = Primitive(
        Sphere(0.3, [TranslationTransform(1.0, 2.5, 1.5)]),
        LambertianBSDF(
            ConstantTexture(Spectrum(0.0, 0.0, 0.0)),
            emissive=ConstantTexture(Spectrum(8.0, 8.0, 7.0)),
        ),
    )
    light = PointLight(Spectrum(40.0, 40.0, 40.0), [TranslationTransform(-3.0, 6.0, 4.0)])

    world = World([floor, red, mirror, glass, lamp], [light])
    camera = PinholeCamera(
        lookfrom=(0.0, 1.5, 7.0),
        lookat=(0.0, 0.0, 0.0),
        vup=(0.0, 1.0, 0.0),
        vfov=40.0,
        image_width=width,
        image_height=height,
    )
    return world, camera


def load_config(args: argparse.Namespace):
    """Build a RenderConfig from the options, then apply any JSON overrides."""
    from src.lightpath.core.config import RenderConfig

    values = {
        "width": args.width,
        "height": args.height,
        "samples_per_pixel": args.samples,
        "max_depth": args.max_depth,
        "sampler": args.sampler,
        "integrator": args.integrator,
        "workers": args.workers,
        "seed": args.seed,
    }
    if args.config is not None:
        with open(args.config) as f:
            values.update(json.load(f))
    return RenderConfig.from_dict(values)


def main() -> int:
    """Main entry point."""
    args = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    from src.lightpath.core.render import render
    from src.lightpath.film.export import save_png

    try:
        config = load_config(args)
        world, camera = build_scene(config.width, config.height)

        start_time = time.time()
        film = render(world, camera, config)
        elapsed = time.time() - start_time

        output_file = Path(args.output)
        save_png(film, str(output_file), tone_map="reinhard", gamma=2.2)
        logger.info("Saved %s in %.2fs", output_file.absolute(), elapsed)
        return 0
    except (OSError, ValueError) as e:
        logger.error("Error: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
