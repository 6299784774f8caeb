"""
Error Types

All errors raised by voxel_canvas derive from VoxelCanvasError and also from
the matching builtin, so callers can catch either.
"""


class VoxelCanvasError(Exception):
    """Base class for voxel_canvas errors."""


class InvalidGeometry(VoxelCanvasError, ValueError):
    """Geometry or surface dimensions that cannot be rendered."""


class OutOfRange(VoxelCanvasError, IndexError):
    """Grid coordinates outside the surface bounds."""


class InvalidPaletteKey(VoxelCanvasError, KeyError):
    """Voxel id or face outside the palette table."""

    def __str__(self) -> str:
        # KeyError quotes its message
        return str(self.args[0]) if self.args else ""
