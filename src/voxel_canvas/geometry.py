"""
Voxel Geometry

Describes the screen footprint of one rendered voxel. A rendered voxel is a
rectangle split into a top and a bottom sub-rectangle:

    *-----------*
    |   Top     |   top_height rows, upward facing side
    <-- width -->
    |  Bottom   |   bottom_height rows, left half / right half
    *-----------*

Varying the two heights changes the apparent viewing angle.
"""

from dataclasses import dataclass
from numbers import Integral

from .errors import InvalidGeometry


@dataclass(frozen=True)
class VoxelGeometry:
    """
    Pixel footprint of a single voxel.

    The width is split exactly in half between the left and right faces,
    so it must be even.
    """

    width: int = 4
    top_height: int = 1
    bottom_height: int = 2

    def __post_init__(self):
        """Validate the footprint."""
        for name in ("width", "top_height", "bottom_height"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, Integral):
                raise InvalidGeometry(f"{name} must be an integer, got {value!r}")

        if self.width <= 0:
            raise InvalidGeometry(f"width must be positive, got {self.width}")
        if self.width % 2 != 0:
            raise InvalidGeometry(f"width must be even, got {self.width}")
        if self.top_height < 0 or self.bottom_height < 0:
            raise InvalidGeometry(
                f"heights must not be negative, got "
                f"top={self.top_height} bottom={self.bottom_height}"
            )
        if self.height == 0:
            raise InvalidGeometry("top_height + bottom_height must be positive")

    @property
    def height(self) -> int:
        """Total pixel height of one voxel."""
        return self.top_height + self.bottom_height

    @property
    def half_width(self) -> int:
        """Width of each side face."""
        return self.width // 2
