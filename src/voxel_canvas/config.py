"""
Render Settings

Default geometry and colors used by the scene builder, the CLI and the web
demo. A 4x1+2 footprint gives the classic 2:1 look.
"""

from dataclasses import dataclass

from .geometry import VoxelGeometry
from .palette import VoxelFace, VoxelPalette


DEFAULT_VOXEL_COLOR = 0xEDC9AF   # Sand
DEFAULT_BACKGROUND = 0x000000


@dataclass
class RenderSettings:
    """
    Settings for building a geometry and a single-material palette.

    Attributes:
        geom_width: Pixel width of one voxel (even)
        top_height: Pixel height of the top face
        bottom_height: Pixel height of the side faces
        voxel_color: Base color of voxel id 1
        background: Color of voxel id 0, used to clear the buffer. Stored
            as-is in the TOP face, not shaded
        transparent_background: Clear with alpha 0
        scale: Upscale factor when presenting as an image
    """

    geom_width: int = 4
    top_height: int = 1
    bottom_height: int = 2
    voxel_color: int = DEFAULT_VOXEL_COLOR
    background: int = DEFAULT_BACKGROUND
    transparent_background: bool = True
    scale: int = 1

    def geometry(self) -> VoxelGeometry:
        """Build the voxel geometry."""
        return VoxelGeometry(self.geom_width, self.top_height, self.bottom_height)

    def palette(self) -> VoxelPalette:
        """Build a palette with the background at id 0 and the color at id 1."""
        palette = VoxelPalette()
        palette.set_entry(0, VoxelFace.TOP, self.background)
        palette.set_entry_shaded(1, self.voxel_color)
        return palette
