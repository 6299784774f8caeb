#!/usr/bin/env python3
"""
Voxel Canvas Demo Script

This script demonstrates the rendering pipeline by:
1. Building the procedural demo shapes (cube, pyramid, ellipsoid)
2. Rasterizing each one
3. Saving PNGs and printing statistics
4. Showing a hand-built multi-material scene

Run with: python examples/demo.py
"""

import sys
from pathlib import Path
import time

# Add src to path for development
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from voxel_canvas import (
    ImageTarget,
    RenderSettings,
    SceneBuilder,
    VoxelSurface,
)


def build_village(settings: RenderSettings, target: ImageTarget) -> VoxelSurface:
    """
    Build a small scene using three materials.

    Returns:
        Unrendered surface
    """
    palette = settings.palette()
    palette.set_entry_shaded(2, 0x7FB069)  # Grass
    palette.set_entry_shaded(3, 0xA05A2C)  # Brick
    palette.set_entry_shaded(4, 0x4A6FA5)  # Roof

    surface = VoxelSurface(settings.geometry(), palette, 16, 8, 16, target)

    # Ground
    surface.fill(2, 0, 0, 0, 16, 1, 16)

    # Houses
    for hx, hz in [(2, 2), (9, 3), (4, 10)]:
        surface.fill(3, hx, 1, hz, 4, 3, 4)
        surface.fill(4, hx, 4, hz, 4, 1, 4)
        surface.fill(4, hx + 1, 5, hz + 1, 2, 1, 2)

    # Well
    surface.fill(1, 12, 1, 12, 2, 1, 2)

    return surface


def run_demo():
    """Run the demonstration."""
    print("=" * 60)
    print("Voxel Canvas - Demo")
    print("=" * 60)
    print()

    # Create output directory
    output_dir = Path(__file__).parent / "output"
    output_dir.mkdir(exist_ok=True)

    settings = RenderSettings(scale=4)
    target = ImageTarget(scale=settings.scale)
    builder = SceneBuilder(
        settings.geometry(),
        settings.palette(),
        target_factory=lambda: target
    )

    scenes = [
        ("cube", (8, 8, 8)),
        ("pyramid", (15, 8, 15)),
        ("ellipsoid", (16, 12, 16)),
        ("ellipsoid", (24, 6, 10)),
    ]

    total_start = time.time()

    for name, (w, h, d) in scenes:
        print(f"\n--- Rendering: {name} {w}x{h}x{d} ---")

        start = time.time()
        surface = builder.render(name, w, h, d, settings.transparent_background)
        render_time = time.time() - start

        print(f"  Voxel count: {surface.voxel_count}")
        print(f"  Image size: {surface.pixel_buffer_width}x{surface.pixel_buffer_height}")
        print(f"  Render: {render_time*1000:.1f}ms")

        # A second update is free while nothing changed
        start = time.time()
        surface.update(settings.transparent_background)
        print(f"  Cached update: {(time.time() - start)*1000:.3f}ms")

        output_path = target.save(surface, output_dir / f"{name}_{w}x{h}x{d}.png")
        print(f"  Saved: {output_path}")

    print("\n--- Rendering: village ---")
    village = build_village(settings, target)
    village.update(transparent_background=False)
    output_path = target.save(village, output_dir / "village.png")
    print(f"  Voxel count: {village.voxel_count}")
    print(f"  Saved: {output_path}")

    total_time = time.time() - total_start

    print("\n" + "=" * 60)
    print(f"Demo complete! Total time: {total_time:.2f}s")
    print(f"Output files in: {output_dir}")
    print("=" * 60)

    return 0


if __name__ == "__main__":
    run_demo()
