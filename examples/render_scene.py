#!/usr/bin/env python3
"""Render a sphere scene to an image file.

This script renders either the built-in demo scene or a JSON render
configuration (see whitted.scene.config for the format) and saves the result
as a PNG.

Usage:
    python -m examples.render_scene [options]

Options:
    --scene PATH        JSON render configuration (default: built-in demo scene)
    --width WIDTH       Override canvas width in pixels
    --height HEIGHT     Override canvas height in pixels
    --depth DEPTH       Override reflection recursion depth
    --output OUTPUT     Output file path (default: render.png)
    --band-rows ROWS    Rows rendered between progress updates (default: 32)
    --cpu               Force the Taichi CPU backend
    --quiet             Suppress progress output

Example:
    python -m examples.render_scene --width 300 --height 300 --depth 2
    python -m examples.render_scene --scene examples/scenes/demo.json
"""

from __future__ import annotations

import argparse
import sys
import time
from dataclasses import replace
from pathlib import Path

import taichi as ti


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a sphere scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--scene",
        type=str,
        default=None,
        help="JSON render configuration (default: built-in demo scene)",
    )
    parser.add_argument(
        "--width",
        type=int,
        default=None,
        help="Override canvas width in pixels",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=None,
        help="Override canvas height in pixels",
    )
    parser.add_argument(
        "--depth",
        type=int,
        default=None,
        help="Override reflection recursion depth",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="render.png",
        help="Output file path (default: render.png)",
    )
    parser.add_argument(
        "--band-rows",
        type=int,
        default=32,
        help="Rows rendered between progress updates (default: 32)",
    )
    parser.add_argument(
        "--cpu",
        action="store_true",
        help="Force the Taichi CPU backend",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser.parse_args(argv)


def render_scene(
    scene_path: str | None = None,
    width: int | None = None,
    height: int | None = None,
    depth: int | None = None,
    output_path: str = "render.png",
    band_rows: int = 32,
    quiet: bool = False,
) -> Path:
    """Load or build a scene, render it and save it to a file.

    Args:
        scene_path: JSON render configuration, or None for the demo scene.
        width: Canvas width override.
        height: Canvas height override.
        depth: Recursion depth override.
        output_path: Output file path (PNG).
        band_rows: Rows rendered between progress updates.
        quiet: If True, suppress progress output.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from whitted.core.renderer import render
    from whitted.preview.export import save_png
    from whitted.scene.config import load_render_config
    from whitted.scene.presets import create_demo_scene

    if scene_path is None:
        scene, camera, settings = create_demo_scene()
    else:
        scene, camera, settings = load_render_config(scene_path)

    overrides = {}
    if width is not None:
        overrides["canvas_width"] = width
    if height is not None:
        overrides["canvas_height"] = height
    if depth is not None:
        overrides["max_depth"] = depth
    if overrides:
        settings = replace(settings, **overrides)

    if not quiet:
        print(
            f"Rendering {scene.sphere_count} spheres, {scene.light_count} lights "
            f"({settings.canvas_width}x{settings.canvas_height}, depth {settings.max_depth})..."
        )

    start_time = time.time()

    def progress_callback(current: int, target: int) -> None:
        if not quiet:
            elapsed = time.time() - start_time
            progress_pct = (current / target) * 100 if target > 0 else 0
            print(
                f"\r  Progress: {current}/{target} rows ({progress_pct:.1f}%) - {elapsed:.1f}s",
                end="",
                flush=True,
            )

    frame = render(scene, camera, settings, band_rows=band_rows, callback=progress_callback)

    if not quiet:
        print()  # Newline after progress

    output_file = Path(output_path)
    save_png(frame, output_file)

    total_time = time.time() - start_time
    if not quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {total_time:.2f}s")

    return output_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    if args.cpu:
        ti.init(arch=ti.cpu, default_fp=ti.f64)
    else:
        # f64 kernels: CUDA when available, otherwise CPU
        try:
            ti.init(arch=ti.cuda, default_fp=ti.f64)
        except Exception:
            ti.init(arch=ti.cpu, default_fp=ti.f64)

    try:
        render_scene(
            scene_path=args.scene,
            width=args.width,
            height=args.height,
            depth=args.depth,
            output_path=args.output,
            band_rows=args.band_rows,
            quiet=args.quiet,
        )
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
