"""
Procedural Scenes

Builds simple shapes on a VoxelSurface using only fill() and set_voxel().
Geometry and palette are passed in explicitly so several builders can share
or vary them.
"""

import logging
from typing import Callable, Optional
import numpy as np

from .geometry import VoxelGeometry
from .palette import VoxelPalette
from .surface import VoxelSurface

logger = logging.getLogger(__name__)

SHAPES = ("cube", "pyramid", "ellipsoid")


class SceneBuilder:
    """
    Factory for procedural voxel scenes.

    Example:
        builder = SceneBuilder(VoxelGeometry(4, 1, 2), palette)
        surface = builder.render("pyramid", 9, 5, 9)
        to_image(surface).save("pyramid.png")
    """

    def __init__(
        self,
        geometry: VoxelGeometry,
        palette: VoxelPalette,
        target_factory: Optional[Callable] = None
    ):
        """
        Args:
            geometry: Voxel footprint shared by every built surface
            palette: Palette shared by every built surface
            target_factory: Called with no arguments to create the
                presentation target of each new surface
        """
        self.geometry = geometry
        self.palette = palette
        self.target_factory = target_factory

    def new_surface(self, width: int, height: int, depth: int) -> VoxelSurface:
        """Create an empty surface."""
        target = self.target_factory() if self.target_factory else None
        return VoxelSurface(self.geometry, self.palette, width, height, depth, target)

    def cube(self, width: int, height: int, depth: int, voxel: int = 1) -> VoxelSurface:
        """Solid box filling the whole grid."""
        surface = self.new_surface(width, height, depth)
        surface.fill(voxel, 0, 0, 0, width, height, depth)
        return surface

    def pyramid(self, width: int, height: int, depth: int, voxel: int = 1) -> VoxelSurface:
        """
        Stepped pyramid.

        Each layer is one voxel higher and shrinks by one voxel on every
        side, until the footprint or the grid height runs out.
        """
        surface = self.new_surface(width, height, depth)

        x = y = z = 0
        w, d = width, depth
        while w > 0 and d > 0 and y < height:
            surface.fill(voxel, x, y, z, w, 1, d)
            x += 1
            y += 1
            z += 1
            w -= 2
            d -= 2

        return surface

    def ellipsoid(self, width: int, height: int, depth: int, voxel: int = 1) -> VoxelSurface:
        """
        Ellipsoid inscribed in the grid.

        A cell (i, j, k) is solid when
        (i-cx)^2/cx^2 + (j-cy)^2/cy^2 + (k-cz)^2/cz^2 <= 1,
        with the center at half of each extent.
        """
        surface = self.new_surface(width, height, depth)

        cx = width / 2
        cy = height / 2
        cz = depth / 2
        i, j, k = np.ogrid[0:width, 0:height, 0:depth]
        q = (
            (i - cx) ** 2 / (cx * cx) +
            (j - cy) ** 2 / (cy * cy) +
            (k - cz) ** 2 / (cz * cz)
        )

        for x, y, z in np.argwhere(q <= 1.0):
            surface.set_voxel(voxel, int(x), int(y), int(z))

        return surface

    def build(self, kind: str, width: int, height: int, depth: int, voxel: int = 1) -> VoxelSurface:
        """Build a shape by name without rendering it."""
        builders = {
            "cube": self.cube,
            "pyramid": self.pyramid,
            "ellipsoid": self.ellipsoid,
        }
        if kind not in builders:
            raise ValueError(f"Unknown shape: {kind} (expected one of {', '.join(SHAPES)})")
        return builders[kind](width, height, depth, voxel)

    def render(
        self,
        kind: str,
        width: int,
        height: int,
        depth: int,
        transparent_background: bool = True,
        voxel: int = 1
    ) -> VoxelSurface:
        """
        Build a shape by name and rasterize it.

        Returns:
            The rendered surface
        """
        surface = self.build(kind, width, height, depth, voxel)
        surface.update(transparent_background)
        logger.debug(
            "Built %s %dx%dx%d with %d voxels",
            kind, width, height, depth, surface.voxel_count
        )
        return surface
