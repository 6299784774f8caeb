"""
Voxel Palette Module

Handles:
- The 16-bit voxel palette: one RGB triple per (voxel id, face)
- Baked face shading derived from a single base color
- Packed 24-bit color parsing

Shading Background:
The renderer has no light source. A fixed overhead light is baked into the
palette instead: the unoccluded top is drawn at full brightness, the left
side at 1/2, the right side at 1/4, and a top that sits in front of another
voxel (a seam) at 3/4.
"""

from enum import IntEnum
from typing import Tuple, Union
import numpy as np

from .errors import InvalidPaletteKey


PALETTE_BITS = 16
PALETTE_ENTRIES = 1 << PALETTE_BITS
PALETTE_FACES = 4
PALETTE_CHANNELS = 3

# Bytes per voxel id in the flat table
ENTRY_STRIDE = PALETTE_FACES * PALETTE_CHANNELS


class VoxelFace(IntEnum):
    """Rendered faces of a voxel."""
    TOP = 0    # Top, occluded by the diagonal neighbour
    LEFT = 1
    RIGHT = 2
    TOP2 = 3   # Top, unoccluded


def unpack_color(color: int) -> Tuple[int, int, int]:
    """
    Split a packed 0xRRGGBB color into channels.

    Args:
        color: Packed 24-bit color

    Returns:
        (r, g, b) tuple of bytes
    """
    return ((color >> 16) & 0xff, (color >> 8) & 0xff, color & 0xff)


def parse_color(value: Union[str, int]) -> int:
    """
    Parse a hex color string into a packed 24-bit color.

    Accepts "#edc9af", "0xedc9af" and "edc9af". Integers pass through.

    Args:
        value: Color string or packed integer

    Returns:
        Packed 0xRRGGBB color
    """
    if isinstance(value, int):
        color = value
    else:
        text = value.strip().lower()
        if text.startswith("#"):
            text = text[1:]
        elif text.startswith("0x"):
            text = text[2:]
        if len(text) != 6:
            raise ValueError(f"Expected a 6 digit hex color, got {value!r}")
        try:
            color = int(text, 16)
        except ValueError:
            raise ValueError(f"Invalid hex color: {value!r}") from None

    if not 0 <= color <= 0xffffff:
        raise ValueError(f"Color out of 24-bit range: {value!r}")
    return color


class VoxelPalette:
    """
    A 16-bit palette for rendering voxels.

    The table is a flat uint8 array addressed by
    voxel * 12 + face * 3 + channel. Voxel 0 is air; its TOP entry is used
    as the background color when a surface is cleared.
    """

    def __init__(self):
        """Allocate a zeroed table covering every 16-bit voxel id."""
        self._buffer = np.zeros(PALETTE_ENTRIES * ENTRY_STRIDE, dtype=np.uint8)

    @staticmethod
    def palette_index(voxel: int, face: int) -> int:
        """
        Offset of the red channel of an entry.

        Raises:
            InvalidPaletteKey: voxel or face outside the table
        """
        if not 0 <= voxel < PALETTE_ENTRIES:
            raise InvalidPaletteKey(
                f"Voxel id {voxel} outside 0..{PALETTE_ENTRIES - 1}"
            )
        if not 0 <= face < PALETTE_FACES:
            raise InvalidPaletteKey(f"Face {face} outside 0..{PALETTE_FACES - 1}")
        return int(voxel) * ENTRY_STRIDE + int(face) * PALETTE_CHANNELS

    @property
    def buffer(self) -> np.ndarray:
        """Raw palette table."""
        return self._buffer

    def get_r(self, voxel: int, face: int) -> int:
        return int(self._buffer[self.palette_index(voxel, face)])

    def get_g(self, voxel: int, face: int) -> int:
        return int(self._buffer[self.palette_index(voxel, face) + 1])

    def get_b(self, voxel: int, face: int) -> int:
        return int(self._buffer[self.palette_index(voxel, face) + 2])

    def get_color(self, voxel: int, face: int) -> Tuple[int, int, int]:
        """Get an entry as an (r, g, b) tuple."""
        index = self.palette_index(voxel, face)
        r, g, b = self._buffer[index:index + 3]
        return (int(r), int(g), int(b))

    def set_entry(self, voxel: int, face: int, color: int):
        """
        Set an entry from a packed color.

        Args:
            voxel: Voxel id
            face: VoxelFace
            color: Packed 0xRRGGBB color
        """
        index = self.palette_index(voxel, face)
        self._buffer[index:index + 3] = unpack_color(color)

    def set_r(self, voxel: int, face: int, value: int):
        self._set_channel(voxel, face, 0, value)

    def set_g(self, voxel: int, face: int, value: int):
        self._set_channel(voxel, face, 1, value)

    def set_b(self, voxel: int, face: int, value: int):
        self._set_channel(voxel, face, 2, value)

    def _set_channel(self, voxel: int, face: int, channel: int, value: int):
        if not 0 <= value <= 0xff:
            raise ValueError(f"Channel value {value} outside 0..255")
        self._buffer[self.palette_index(voxel, face) + channel] = value

    def set_entry_shaded(self, voxel: int, color: int):
        """
        Derive all four faces of a voxel from one base color.

        TOP2 gets the color itself, LEFT half of each channel, RIGHT a
        quarter, and TOP three quarters. Channels are floored.

        Args:
            voxel: Voxel id
            color: Packed 0xRRGGBB base color
        """
        self.set_entry(voxel, VoxelFace.TOP2, color)

        r, g, b = unpack_color(color)

        self.set_r(voxel, VoxelFace.LEFT, r // 2)
        self.set_g(voxel, VoxelFace.LEFT, g // 2)
        self.set_b(voxel, VoxelFace.LEFT, b // 2)

        self.set_r(voxel, VoxelFace.RIGHT, r // 4)
        self.set_g(voxel, VoxelFace.RIGHT, g // 4)
        self.set_b(voxel, VoxelFace.RIGHT, b // 4)

        # floor(c / 4 * 3)
        self.set_r(voxel, VoxelFace.TOP, r * 3 // 4)
        self.set_g(voxel, VoxelFace.TOP, g * 3 // 4)
        self.set_b(voxel, VoxelFace.TOP, b * 3 // 4)
