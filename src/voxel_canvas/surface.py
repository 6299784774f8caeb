"""
Voxel Surface and Rasterization Engine

This module provides:
- VoxelSurface: dense voxel id grid plus the RGBA pixel buffer it renders to
- Numba kernels for the background fill and the painter's-algorithm pass

Layout:
- Voxel grid: flat uint16, index = z * width * height + y * width + x
- Pixel buffer: flat uint8 RGBA, row-major, 4 bytes per pixel

The pixel buffer is sized from the extreme screen positions of the corner
voxels, so every voxel lands inside it and nothing is clipped.
"""

import logging
from numbers import Integral
import numpy as np
from numba import njit

from .errors import InvalidGeometry, InvalidPaletteKey, OutOfRange
from .geometry import VoxelGeometry
from .palette import VoxelPalette, VoxelFace, PALETTE_ENTRIES, ENTRY_STRIDE
from .presentation import ArrayTarget

logger = logging.getLogger(__name__)


@njit(cache=True)
def _pixel_offset(
    x: int, y: int, z: int,
    width: int, depth: int,
    geom_width: int, top_height: int, bottom_height: int,
    buffer_width: int, buffer_height: int
) -> int:
    """
    Byte offset of the top-left pixel of a voxel's rectangle.

    Args:
        x, y, z: Voxel coordinates
        width, depth: Grid extents along x and z
        geom_width, top_height, bottom_height: Voxel footprint
        buffer_width, buffer_height: Pixel buffer dimensions

    Returns:
        Offset into the flat RGBA buffer
    """
    half = geom_width // 2
    if width != depth:
        # Centering only holds for a square footprint, anchor on x instead
        px = (width - 1) * half + (z - x) * half
    else:
        px = buffer_width // 2 - half + (z - x) * half
    py = (buffer_height - (top_height + bottom_height)
          - (z + x) * top_height - y * bottom_height)
    return (py * buffer_width + px) * 4


@njit(cache=True)
def _fill_background(pixels: np.ndarray, r: int, g: int, b: int, a: int):
    """Set every pixel of a flat RGBA buffer to one color."""
    for i in range(0, pixels.shape[0], 4):
        pixels[i] = r
        pixels[i + 1] = g
        pixels[i + 2] = b
        pixels[i + 3] = a


@njit(cache=True)
def _rasterize(
    voxels: np.ndarray,
    palette: np.ndarray,
    pixels: np.ndarray,
    width: int, height: int, depth: int,
    geom_width: int, top_height: int, bottom_height: int,
    buffer_width: int, buffer_height: int
) -> int:
    """
    Draw every solid voxel back to front.

    Traversal is z descending, y ascending, x descending, so nearer and
    higher voxels overwrite the ones behind them.

    Args:
        voxels: Flat uint16 voxel grid
        palette: Flat uint8 palette table
        pixels: Flat uint8 RGBA buffer, written in place
        width, height, depth: Grid extents
        geom_width, top_height, bottom_height: Voxel footprint
        buffer_width, buffer_height: Pixel buffer dimensions

    Returns:
        Number of voxels drawn
    """
    half = geom_width // 2
    layer = width * height
    row_stride = buffer_width * 4
    drawn = 0

    for k in range(depth - 1, -1, -1):
        for j in range(height):
            for i in range(width - 1, -1, -1):
                v = voxels[k * layer + j * width + i]
                if v == 0:
                    continue

                base = int(v) * ENTRY_STRIDE

                # Only the (x+1, z+1) neighbour dims the top, never y+1
                face = 3  # TOP2
                if i < width - 1 and k < depth - 1:
                    if voxels[(k + 1) * layer + j * width + i + 1] != 0:
                        face = 0  # TOP

                p = _pixel_offset(
                    i, j, k, width, depth,
                    geom_width, top_height, bottom_height,
                    buffer_width, buffer_height
                )

                c = base + face * 3
                r = palette[c]
                g = palette[c + 1]
                b = palette[c + 2]
                for m in range(top_height):
                    for n in range(geom_width):
                        q = p + n * 4
                        pixels[q] = r
                        pixels[q + 1] = g
                        pixels[q + 2] = b
                        pixels[q + 3] = 255
                    p += row_stride

                left = base + 3
                right = base + 6
                for m in range(bottom_height):
                    for n in range(half):
                        q = p + n * 4
                        pixels[q] = palette[left]
                        pixels[q + 1] = palette[left + 1]
                        pixels[q + 2] = palette[left + 2]
                        pixels[q + 3] = 255
                    for n in range(half, geom_width):
                        q = p + n * 4
                        pixels[q] = palette[right]
                        pixels[q + 1] = palette[right + 1]
                        pixels[q + 2] = palette[right + 2]
                        pixels[q + 3] = 255
                    p += row_stride

                drawn += 1

    return drawn


def _is_integer(value) -> bool:
    """True for Python and numpy integers, False for bools and floats."""
    return isinstance(value, Integral) and not isinstance(value, bool)


def _as_pixel_array(buffer, size: int) -> np.ndarray:
    """
    View an allocated RGBA buffer as a flat writable uint8 array.

    Args:
        buffer: numpy array or object supporting the buffer protocol
        size: Required length in bytes

    Returns:
        Flat uint8 array sharing memory with the buffer
    """
    if isinstance(buffer, np.ndarray):
        if buffer.dtype != np.uint8:
            raise ValueError(f"Pixel buffer must be uint8, got {buffer.dtype}")
        if not buffer.flags.c_contiguous:
            raise ValueError("Pixel buffer must be C-contiguous")
        array = buffer.reshape(-1)
    else:
        array = np.frombuffer(buffer, dtype=np.uint8)

    if not array.flags.writeable:
        raise ValueError("Pixel buffer must be writable")
    if array.size != size:
        raise ValueError(
            f"Pixel buffer has {array.size} bytes, expected {size}"
        )
    return array


class VoxelSurface:
    """
    A voxel grid and the image it renders to.

    The pixel buffer matches the grid exactly while the surface is clean.
    Every mutation marks it dirty; update() redraws it and marks it clean.

    The geometry and palette are shared and must not change during update().
    """

    def __init__(
        self,
        geometry: VoxelGeometry,
        palette: VoxelPalette,
        width: int,
        height: int,
        depth: int,
        target=None
    ):
        """
        Allocate the grid and pixel buffer.

        Args:
            geometry: Pixel footprint of one voxel
            palette: Colors per voxel id and face
            width, height, depth: Grid extents in voxels
            target: Presentation target that allocates the pixel buffer
                (defaults to an in-memory ArrayTarget)
        """
        for name, value in (("width", width), ("height", height), ("depth", depth)):
            if isinstance(value, bool) or not isinstance(value, Integral):
                raise InvalidGeometry(f"Surface {name} must be an integer, got {value!r}")
            if value <= 0:
                raise InvalidGeometry(f"Surface {name} must be positive, got {value}")

        self.geometry = geometry
        self.palette = palette
        self.width = int(width)
        self.height = int(height)
        self.depth = int(depth)

        self._voxels = np.zeros(self.width * self.height * self.depth, dtype=np.uint16)

        diagonal = (self.width - 1) + (self.depth - 1)
        self.pixel_buffer_width = geometry.width + geometry.half_width * diagonal
        self.pixel_buffer_height = (
            geometry.height +
            diagonal * geometry.top_height +
            (self.height - 1) * geometry.bottom_height
        )

        # 4 components per pixel (r, g, b, a)
        self.pixel_buffer_size = self.pixel_buffer_width * self.pixel_buffer_height * 4

        self.target = target if target is not None else ArrayTarget()
        self._pixels = _as_pixel_array(
            self.target.allocate(self.pixel_buffer_width, self.pixel_buffer_height),
            self.pixel_buffer_size
        )

        logger.debug(
            "Allocated %dx%dx%d surface, pixel buffer %dx%d",
            self.width, self.height, self.depth,
            self.pixel_buffer_width, self.pixel_buffer_height
        )

        self._dirty = True
        self.clear()

    @property
    def shape(self):
        """Grid extents (width, height, depth)."""
        return (self.width, self.height, self.depth)

    @property
    def dirty(self) -> bool:
        """True when the pixel buffer is out of date."""
        return self._dirty

    @property
    def voxel_buffer(self) -> np.ndarray:
        """Flat voxel id array."""
        return self._voxels

    @property
    def grid(self) -> np.ndarray:
        """Voxel ids as a (depth, height, width) view."""
        return self._voxels.reshape(self.depth, self.height, self.width)

    @property
    def pixel_buffer(self) -> np.ndarray:
        """Flat RGBA byte buffer."""
        return self._pixels

    @property
    def pixels(self) -> np.ndarray:
        """RGBA buffer as a (height, width, 4) view."""
        return self._pixels.reshape(self.pixel_buffer_height, self.pixel_buffer_width, 4)

    @property
    def voxel_count(self) -> int:
        """Number of non-empty cells."""
        return int(np.count_nonzero(self._voxels))

    def _check_coords(self, x: int, y: int, z: int):
        if not (_is_integer(x) and _is_integer(y) and _is_integer(z)):
            raise OutOfRange(f"Voxel coordinates must be integers, got ({x!r}, {y!r}, {z!r})")
        if not (0 <= x < self.width and 0 <= y < self.height and 0 <= z < self.depth):
            raise OutOfRange(
                f"Voxel ({x}, {y}, {z}) outside surface {self.shape}"
            )

    @staticmethod
    def _check_value(value: int):
        if not _is_integer(value):
            raise InvalidPaletteKey(f"Voxel id must be an integer, got {value!r}")
        if not 0 <= value < PALETTE_ENTRIES:
            raise InvalidPaletteKey(
                f"Voxel id {value} outside 0..{PALETTE_ENTRIES - 1}"
            )

    def voxel_index(self, x: int, y: int, z: int) -> int:
        """Index of a cell in the flat voxel buffer."""
        self._check_coords(x, y, z)
        return z * self.width * self.height + y * self.width + x

    def pixel_index(self, x: int, y: int, z: int) -> int:
        """Byte offset of the top-left pixel of a cell's rectangle."""
        self._check_coords(x, y, z)
        return int(_pixel_offset(
            int(x), int(y), int(z),
            self.width, self.depth,
            self.geometry.width, self.geometry.top_height, self.geometry.bottom_height,
            self.pixel_buffer_width, self.pixel_buffer_height
        ))

    def get_voxel(self, x: int, y: int, z: int) -> int:
        """Voxel id at a cell."""
        return int(self._voxels[self.voxel_index(x, y, z)])

    def set_voxel(self, value: int, x: int, y: int, z: int):
        """
        Set a single cell.

        Args:
            value: Voxel id (0 clears the cell)
            x, y, z: Cell coordinates
        """
        self._check_value(value)
        self._voxels[self.voxel_index(x, y, z)] = value
        self._dirty = True

    def fill(self, value: int, x: int, y: int, z: int, w: int, h: int, d: int):
        """
        Set every cell of the box [x, x+w) x [y, y+h) x [z, z+d).

        Args:
            value: Voxel id
            x, y, z: Box origin
            w, h, d: Box extents (zero is allowed)
        """
        self._check_value(value)
        for origin, extent, limit, axis in (
            (x, w, self.width, "x"),
            (y, h, self.height, "y"),
            (z, d, self.depth, "z"),
        ):
            if not (_is_integer(origin) and _is_integer(extent)):
                raise OutOfRange(
                    f"Fill range {axis} must be integers, got origin={origin!r} extent={extent!r}"
                )
            if extent < 0 or origin < 0 or origin + extent > limit:
                raise OutOfRange(
                    f"Fill range {axis}=[{origin}, {origin + extent}) "
                    f"outside [0, {limit})"
                )

        self.grid[z:z + d, y:y + h, x:x + w] = value
        self._dirty = True

    def clear(self):
        """Empty the whole grid."""
        self.fill(0, 0, 0, 0, self.width, self.height, self.depth)

    def update(self, transparent_background: bool = False) -> bool:
        """
        Redraw the pixel buffer if the grid changed.

        The buffer is cleared to the palette's voxel 0 TOP color, then every
        solid voxel is drawn back to front.

        Args:
            transparent_background: Clear with alpha 0 instead of 255

        Returns:
            True if the buffer was redrawn, False if it was already clean
        """
        if not self._dirty:
            logger.debug("Surface is clean, skipping update")
            return False

        clear_r, clear_g, clear_b = self.palette.get_color(0, VoxelFace.TOP)
        clear_a = 0x00 if transparent_background else 0xff
        _fill_background(self._pixels, clear_r, clear_g, clear_b, clear_a)

        geometry = self.geometry
        drawn = _rasterize(
            self._voxels,
            self.palette.buffer,
            self._pixels,
            self.width, self.height, self.depth,
            geometry.width, geometry.top_height, geometry.bottom_height,
            self.pixel_buffer_width, self.pixel_buffer_height
        )

        self._dirty = False
        logger.debug(
            "Rendered %d voxels into %dx%d buffer",
            drawn, self.pixel_buffer_width, self.pixel_buffer_height
        )
        return True

    def present(self):
        """Hand the pixel buffer to the presentation target."""
        return self.target.present(self)
