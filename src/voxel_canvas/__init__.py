"""
Voxel Canvas
============

Renders a dense 3D grid of voxel ids as 2:1 isometric pixel art.

Each voxel is drawn as a small rectangle: a top face above a left and a right
side face. Colors come from a 16-bit palette with four faces per voxel id, so
shading is baked in when the palette is built rather than computed per pixel.

Key Features:
- Tightly bounded RGBA output, no clipping
- Painter's-algorithm rasterization with Numba JIT compilation
- Memoized redraws: update() is free until the grid changes
- Pillow output (PNG) and procedural cube/pyramid/ellipsoid scenes

Example Usage:
    from voxel_canvas import VoxelGeometry, VoxelPalette, VoxelSurface, to_image

    palette = VoxelPalette()
    palette.set_entry_shaded(1, 0xEDC9AF)

    surface = VoxelSurface(VoxelGeometry(4, 1, 2), palette, 8, 8, 8)
    surface.fill(1, 0, 0, 0, 8, 4, 8)
    surface.update(transparent_background=True)
    to_image(surface, scale=4).save("slab.png")
"""

__version__ = "1.0.0"
__author__ = "Voxel Canvas Team"

from .errors import VoxelCanvasError, InvalidGeometry, OutOfRange, InvalidPaletteKey
from .geometry import VoxelGeometry
from .palette import VoxelFace, VoxelPalette, parse_color, unpack_color
from .presentation import ArrayTarget, ImageTarget, to_image
from .surface import VoxelSurface
from .config import RenderSettings
from .scenes import SceneBuilder, SHAPES

__all__ = [
    "VoxelCanvasError",
    "InvalidGeometry",
    "OutOfRange",
    "InvalidPaletteKey",
    "VoxelGeometry",
    "VoxelFace",
    "VoxelPalette",
    "parse_color",
    "unpack_color",
    "ArrayTarget",
    "ImageTarget",
    "to_image",
    "VoxelSurface",
    "RenderSettings",
    "SceneBuilder",
    "SHAPES",
]
