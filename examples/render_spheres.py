#!/usr/bin/env python3
"""Render a scene of diffuse spheres.

This script demonstrates end-to-end rendering: it builds the default scene
(or loads one from JSON), sets up the pinhole camera, renders one pass per
seed in parallel worker threads and averages the passes into the output
image.

Usage:
    python examples/render_spheres.py [options]

Options:
    --width WIDTH         Image width in pixels (default: 320)
    --height HEIGHT       Image height in pixels (default: 240)
    --fov DEGREES         Field of view across the larger axis (default: 90)
    --samples SAMPLES     Samples per pixel and pass (default: scene setting)
    --depth DEPTH         Maximum path depth (default: scene setting)
    --seeds SEED [...]    One render pass per seed (default: 0 1 2 3)
    --backend BACKEND     "numpy" or "taichi" (default: numpy)
    --scene PATH          Scene JSON as written by SceneManager.to_dict()
    --output OUTPUT       Output file, .ppm or .png (default: spheres.ppm)
    --show                Display the result with Matplotlib
    --debug-directions    Write the ray direction debug image instead
    --verbose             Enable debug logging
    --quiet               Suppress progress output

Example:
    python examples/render_spheres.py --width 160 --height 120 --seeds 1 2 3 4 5 6 7 8
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from pathlib import Path

import taichi as ti


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a scene of diffuse spheres.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=320,
        help="Image width in pixels (default: 320)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=240,
        help="Image height in pixels (default: 240)",
    )
    parser.add_argument(
        "--fov",
        type=float,
        default=90.0,
        help="Field of view in degrees across the larger axis (default: 90)",
    )
    parser.add_argument(
        "--samples",
        type=int,
        default=None,
        help="Samples per pixel and pass (default: scene setting)",
    )
    parser.add_argument(
        "--depth",
        type=int,
        default=None,
        help="Maximum path depth (default: scene setting)",
    )
    parser.add_argument(
        "--seeds",
        type=int,
        nargs="+",
        default=[0, 1, 2, 3],
        help="Seeds of the render passes to average (default: 0 1 2 3)",
    )
    parser.add_argument(
        "--backend",
        choices=("numpy", "taichi"),
        default="numpy",
        help="Render backend (default: numpy)",
    )
    parser.add_argument(
        "--scene",
        type=str,
        default=None,
        help="Scene JSON file (default: built-in scene)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="spheres.ppm",
        help="Output file path, .ppm or .png (default: spheres.ppm)",
    )
    parser.add_argument(
        "--show",
        action="store_true",
        help="Display the result with Matplotlib",
    )
    parser.add_argument(
        "--debug-directions",
        action="store_true",
        help="Render primary ray directions instead of the scene",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser.parse_args(argv)


def load_scene_manager(path: str | None):
    """Load a SceneManager from JSON, or build the default one."""
    from diffuse_tracer.scene.manager import SceneManager
    from diffuse_tracer.scene.presets import create_default_scene_manager

    if path is None:
        return create_default_scene_manager()

    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    return SceneManager.from_dict_new(data)


def init_taichi(quiet: bool = False) -> None:
    """Initialize Taichi, preferring the GPU."""
    try:
        ti.init(arch=ti.gpu)
        if not quiet:
            print("Using GPU backend")
    except Exception:
        ti.init(arch=ti.cpu)
        if not quiet:
            print("Using CPU backend")


def render_spheres(args: argparse.Namespace) -> Path:
    """Render according to the parsed arguments and save the image.

    Returns:
        Path to the saved image file.
    """
    from diffuse_tracer.core.image import Image
    from diffuse_tracer.core.shader import RayDirectionShader, apply_shader
    from diffuse_tracer.preview.export import save_image
    from diffuse_tracer.scene.presets import create_default_camera

    camera = create_default_camera(args.width, args.height, args.fov)
    output_file = Path(args.output)

    if args.debug_directions:
        image = apply_shader(RayDirectionShader(camera), Image(args.width, args.height))
        save_image(image, output_file)
        if not args.quiet:
            print(f"Saved ray directions to: {output_file.absolute()}")
        return output_file

    manager = load_scene_manager(args.scene)
    if args.samples is not None:
        manager.samples_per_pixel = args.samples
    if args.depth is not None:
        manager.max_depth = args.depth
    scene, settings = manager.build()

    if args.backend == "taichi":
        from diffuse_tracer.core.accelerated import TaichiRenderer

        init_taichi(args.quiet)
        renderer = TaichiRenderer(scene, camera, settings)
    else:
        from diffuse_tracer.core.renderer import Renderer

        renderer = Renderer(scene, camera, settings)

    if not args.quiet:
        print(
            f"Rendering {len(args.seeds)} passes of {args.width}x{args.height} "
            f"at {settings.samples_per_pixel} spp ({args.backend})..."
        )

    start_time = time.time()

    def progress_callback(done: int, total: int) -> None:
        if not args.quiet:
            elapsed = time.time() - start_time
            print(
                f"\r  Progress: {done}/{total} passes ({done / total * 100:.1f}%) "
                f"- {elapsed:.1f}s",
                end="",
                flush=True,
            )

    image = renderer.average_render(args.seeds, callback=progress_callback)

    if not args.quiet:
        print()  # Newline after progress

    save_image(image, output_file)

    total_time = time.time() - start_time
    if not args.quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {total_time:.2f}s")

    if args.show:
        from diffuse_tracer.preview.display import show_image

        show_image(image, title=f"{len(args.seeds)} passes")

    return output_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        render_spheres(args)
        return 0
    except (OSError, KeyError, TypeError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
