"""
Command-Line Interface for Voxel Canvas

Usage:
    voxrender cube 4 4 4 -o cube.png
    voxrender pyramid 9 5 9 --color "#7fb069" --scale 4 -o pyramid.png
    voxrender ellipsoid 12 8 12 --opaque --background 202020 --show

"""

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import List, Optional

from . import __version__
from .config import RenderSettings
from .palette import parse_color
from .presentation import ImageTarget
from .scenes import SceneBuilder, SHAPES


def _positive_int(text: str) -> int:
    """argparse type for strictly positive integers."""
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {text!r}") from None
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be positive, got {value}")
    return value


def _color(text: str) -> int:
    """argparse type for hex colors."""
    try:
        return parse_color(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    defaults = RenderSettings()

    parser = argparse.ArgumentParser(
        prog="voxrender",
        description="Voxel Canvas - Render procedural voxel shapes as isometric pixel art",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  voxrender cube 4 4 4 -o cube.png
      Render a 4x4x4 cube

  voxrender pyramid 9 5 9 --scale 4 -o pyramid.png
      Render a stepped pyramid, upscaled 4x

  voxrender ellipsoid 12 8 12 --geometry 6 2 3 --opaque --show
      Use a larger voxel footprint on an opaque background

Shapes:
  cube       - Solid box filling the grid
  pyramid    - Stepped pyramid shrinking by one voxel per side per layer
  ellipsoid  - Ellipsoid inscribed in the grid
        """
    )

    parser.add_argument("shape", choices=SHAPES, help="Shape to render")
    parser.add_argument("width", type=_positive_int, help="Grid width (x) in voxels")
    parser.add_argument("height", type=_positive_int, help="Grid height (y) in voxels")
    parser.add_argument("depth", type=_positive_int, help="Grid depth (z) in voxels")

    parser.add_argument(
        "-o", "--output",
        help="Output image path (default: <shape>.png)"
    )

    parser.add_argument(
        "--color",
        type=_color,
        default=defaults.voxel_color,
        help="Voxel base color as hex (default: edc9af)"
    )

    parser.add_argument(
        "--background",
        type=_color,
        default=defaults.background,
        help="Background color as hex (default: 000000)"
    )

    parser.add_argument(
        "--opaque",
        action="store_true",
        help="Draw an opaque background instead of a transparent one"
    )

    parser.add_argument(
        "--geometry",
        nargs=3,
        type=int,
        metavar=("WIDTH", "TOP", "BOTTOM"),
        default=[defaults.geom_width, defaults.top_height, defaults.bottom_height],
        help="Voxel footprint in pixels (default: 4 1 2)"
    )

    parser.add_argument(
        "--scale",
        type=_positive_int,
        default=defaults.scale,
        help="Integer upscale factor for the output image (default: 1)"
    )

    parser.add_argument(
        "--show",
        action="store_true",
        help="Open the result in the system image viewer"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output with statistics"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    return parser


def settings_from_args(args) -> RenderSettings:
    """Build render settings from parsed arguments."""
    geom_width, top_height, bottom_height = args.geometry
    return RenderSettings(
        geom_width=geom_width,
        top_height=top_height,
        bottom_height=bottom_height,
        voxel_color=args.color,
        background=args.background,
        transparent_background=not args.opaque,
        scale=args.scale,
    )


def render(args) -> int:
    """Render one shape and save or show it."""
    start_time = time.time()

    try:
        settings = settings_from_args(args)
        target = ImageTarget(scale=settings.scale)
        builder = SceneBuilder(
            settings.geometry(),
            settings.palette(),
            target_factory=lambda: target
        )

        if args.verbose:
            print(f"Rendering {args.shape} {args.width}x{args.height}x{args.depth}")

        surface = builder.render(
            args.shape,
            args.width,
            args.height,
            args.depth,
            transparent_background=settings.transparent_background
        )

        if args.verbose:
            print("\nSurface Statistics:")
            print(f"  Voxels: {surface.voxel_count}")
            print(f"  Grid size: {surface.shape}")
            print(f"  Image size: {surface.pixel_buffer_width}x{surface.pixel_buffer_height}")

        if args.output or not args.show:
            output_path = Path(args.output) if args.output else Path(f"{args.shape}.png")
            target.save(surface, output_path)
            if args.verbose:
                print(f"Exported: {output_path}")

        if args.show:
            target.show(surface)

        elapsed = time.time() - start_time
        if args.verbose:
            print(f"\nCompleted in {elapsed:.2f}s")

        return 0

    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    # Root stays at WARNING, numba logs its compiler passes at DEBUG
    logging.basicConfig(
        level=logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s"
    )
    if args.verbose:
        logging.getLogger("voxel_canvas").setLevel(logging.DEBUG)

    return render(args)


if __name__ == "__main__":
    sys.exit(main())
