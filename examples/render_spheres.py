#!/usr/bin/env python3
"""Render the random spheres scene.

Builds the scene (or loads one from JSON), traces one ray per pixel and saves
the frame as a PNG.

Usage:
    python -m examples.render_spheres [options]

Options:
    --width WIDTH         Image width in pixels (default: 512)
    --height HEIGHT       Image height in pixels (default: 512)
    --seed SEED           Random seed for sphere placement (default: 43)
    --num-spheres N       Number of random spheres (default: 40)
    --scene PATH          Load the scene from a JSON file instead
    --dump-scene PATH     Write the scene description to a JSON file
    --max-depth DEPTH     Number of normal bounces (default: 8)
    --output OUTPUT       Output file path (default: spheres.png)
    --cpu                 Force the Taichi CPU backend
    --verbose             Enable debug logging

Example:
    python -m examples.render_spheres --width 256 --height 256 --seed 7
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

import taichi as ti

logger = logging.getLogger("render_spheres")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the random spheres scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=512,
        help="Image width in pixels (default: 512)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=512,
        help="Image height in pixels (default: 512)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=43,
        help="Random seed for sphere placement (default: 43)",
    )
    parser.add_argument(
        "--num-spheres",
        type=int,
        default=40,
        help="Number of random spheres (default: 40)",
    )
    parser.add_argument(
        "--scene",
        type=str,
        default=None,
        help="Load the scene from a JSON file instead of generating it",
    )
    parser.add_argument(
        "--dump-scene",
        type=str,
        default=None,
        help="Write the scene description to a JSON file",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=8,
        help="Number of normal bounces (default: 8)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="spheres.png",
        help="Output file path (default: spheres.png)",
    )
    parser.add_argument(
        "--cpu",
        action="store_true",
        help="Force the Taichi CPU backend",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser.parse_args(argv)


def render_spheres(
    width: int = 512,
    height: int = 512,
    seed: int = 43,
    num_spheres: int = 40,
    scene_path: str | None = None,
    dump_scene_path: str | None = None,
    max_depth: int = 8,
    output_path: str = "spheres.png",
) -> Path:
    """Render the scene and save it to a PNG file.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        seed: Random seed for sphere placement.
        num_spheres: Number of random spheres.
        scene_path: Optional JSON scene file to load instead of generating.
        dump_scene_path: Optional path to write the scene description to.
        max_depth: Number of normal bounces.
        output_path: Output file path (PNG).

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from softrt.camera.near_plane import NearPlaneCamera
    from softrt.core.renderer import render
    from softrt.core.shading import ShadingConfig, setup_shading
    from softrt.output.sinks import ArraySink
    from softrt.scene.manager import SceneManager
    from softrt.scene.random_spheres import create_random_spheres_scene

    if scene_path is not None:
        logger.info("Loading scene from %s", scene_path)
        scene = SceneManager()
        scene.from_dict(json.loads(Path(scene_path).read_text()))
        camera = NearPlaneCamera()
    else:
        logger.info("Creating random spheres scene (seed=%d, spheres=%d)", seed, num_spheres)
        scene, camera = create_random_spheres_scene(seed=seed, num_spheres=num_spheres)

    if dump_scene_path is not None:
        Path(dump_scene_path).write_text(json.dumps(scene.to_dict(), indent=2))
        logger.info("Wrote scene description to %s", dump_scene_path)

    setup_shading(ShadingConfig(max_depth=max_depth))

    logger.info("Rendering %dx%d...", width, height)
    sink = ArraySink(width, height)
    render(width, height, sink, camera=camera)

    output_file = Path(output_path)
    sink.save_png(str(output_file))
    logger.info("Saved to: %s", output_file.absolute())

    return output_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Use GPU if available, fall back to CPU
    if args.cpu:
        ti.init(arch=ti.cpu)
    else:
        try:
            ti.init(arch=ti.gpu)
            logger.info("Using GPU backend")
        except Exception:
            ti.init(arch=ti.cpu)
            logger.info("Using CPU backend")

    try:
        render_spheres(
            width=args.width,
            height=args.height,
            seed=args.seed,
            num_spheres=args.num_spheres,
            scene_path=args.scene,
            dump_scene_path=args.dump_scene,
            max_depth=args.max_depth,
            output_path=args.output,
        )
        return 0
    except Exception as e:
        logger.error("Error: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
