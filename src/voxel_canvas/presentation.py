"""
Presentation Targets

A surface does not own its pixel memory. At construction it asks a target to
allocate a writable RGBA buffer of the exact size it needs, renders into it
in place, and later hands it back to the target for display.

Targets:
- ArrayTarget: plain numpy buffer, present() returns an (H, W, 4) array
- ImageTarget: bytearray buffer, present() returns a Pillow RGBA image
"""

from pathlib import Path
from typing import Union
import numpy as np
from PIL import Image


def to_image(surface, scale: int = 1) -> Image.Image:
    """
    Convert a surface's pixel buffer to a Pillow image.

    Args:
        surface: Rendered VoxelSurface
        scale: Integer upscale factor (nearest neighbor, keeps hard pixels)

    Returns:
        RGBA image of size (pixel_buffer_width, pixel_buffer_height) * scale
    """
    if scale < 1:
        raise ValueError(f"Scale must be at least 1, got {scale}")

    size = (surface.pixel_buffer_width, surface.pixel_buffer_height)
    image = Image.frombytes("RGBA", size, surface.pixel_buffer.tobytes())

    if scale != 1:
        image = image.resize(
            (size[0] * scale, size[1] * scale),
            Image.Resampling.NEAREST
        )
    return image


class ArrayTarget:
    """In-memory target backed by a numpy array."""

    def allocate(self, width: int, height: int) -> np.ndarray:
        return np.zeros(width * height * 4, dtype=np.uint8)

    def present(self, surface) -> np.ndarray:
        return surface.pixels


class ImageTarget:
    """
    Target that presents the buffer as a Pillow image.

    Use save() to write a PNG or show() to open the platform image viewer.
    """

    def __init__(self, scale: int = 1):
        """
        Args:
            scale: Integer upscale factor applied when presenting
        """
        if scale < 1:
            raise ValueError(f"Scale must be at least 1, got {scale}")
        self.scale = scale

    def allocate(self, width: int, height: int) -> bytearray:
        return bytearray(width * height * 4)

    def present(self, surface) -> Image.Image:
        return to_image(surface, self.scale)

    def save(self, surface, output_path: Union[str, Path]) -> Path:
        """
        Write the rendered surface to an image file (PNG keeps alpha).

        Args:
            surface: Rendered VoxelSurface
            output_path: Destination path, format taken from the extension

        Returns:
            The output path
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        self.present(surface).save(output_path)
        return output_path

    def show(self, surface):
        """Open the rendered surface in the platform image viewer."""
        self.present(surface).show()
