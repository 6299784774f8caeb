"""
Unit tests for the Voxel Canvas core: geometry, palette and surface.
"""

import sys
from pathlib import Path
import numpy as np
import unittest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from voxel_canvas.errors import InvalidGeometry, InvalidPaletteKey, OutOfRange
from voxel_canvas.geometry import VoxelGeometry
from voxel_canvas.palette import VoxelFace, VoxelPalette, parse_color, unpack_color
from voxel_canvas.surface import VoxelSurface


SAND = 0xEDC9AF
SAND_TOP2 = (0xED, 0xC9, 0xAF)
SAND_LEFT = (0x76, 0x64, 0x57)
SAND_RIGHT = (0x3B, 0x32, 0x2B)
SAND_TOP = (0xB1, 0x96, 0x83)
BACKGROUND = (0x10, 0x20, 0x30)


def make_palette() -> VoxelPalette:
    palette = VoxelPalette()
    palette.set_entry(0, VoxelFace.TOP, 0x102030)
    palette.set_entry_shaded(1, SAND)
    return palette


class TestVoxelGeometry(unittest.TestCase):
    """Tests for VoxelGeometry."""

    def test_height_is_derived(self):
        """Test height = top + bottom."""
        geometry = VoxelGeometry(width=4, top_height=1, bottom_height=2)
        assert geometry.height == 3
        assert geometry.half_width == 2

    def test_invalid_geometry(self):
        """Test rejected footprints."""
        for args in [(3, 1, 2), (0, 1, 2), (-4, 1, 2), (4, -1, 2), (4, 0, 0), (4.0, 1, 2)]:
            with self.assertRaises(InvalidGeometry):
                VoxelGeometry(*args)

    def test_invalid_geometry_is_value_error(self):
        """Test InvalidGeometry can be caught as ValueError."""
        with self.assertRaises(ValueError):
            VoxelGeometry(5, 1, 2)


class TestVoxelPalette(unittest.TestCase):
    """Tests for VoxelPalette."""

    def test_unset_entries_are_zero(self):
        """Test a fresh palette reads as black."""
        palette = VoxelPalette()
        assert palette.get_r(42, VoxelFace.LEFT) == 0
        assert palette.get_g(65535, VoxelFace.TOP2) == 0
        assert palette.get_b(0, VoxelFace.TOP) == 0

    def test_set_entry_decodes_packed_color(self):
        """Test 0xRRGGBB decoding."""
        palette = VoxelPalette()
        palette.set_entry(7, VoxelFace.RIGHT, 0x123456)

        assert palette.get_r(7, VoxelFace.RIGHT) == 0x12
        assert palette.get_g(7, VoxelFace.RIGHT) == 0x34
        assert palette.get_b(7, VoxelFace.RIGHT) == 0x56
        # Neighbouring entries untouched
        assert palette.get_color(7, VoxelFace.TOP2) == (0, 0, 0)
        assert palette.get_color(8, VoxelFace.RIGHT) == (0, 0, 0)

    def test_set_channels(self):
        """Test per-channel setters."""
        palette = VoxelPalette()
        palette.set_r(3, VoxelFace.TOP, 1)
        palette.set_g(3, VoxelFace.TOP, 2)
        palette.set_b(3, VoxelFace.TOP, 255)
        assert palette.get_color(3, VoxelFace.TOP) == (1, 2, 255)

    def test_flat_layout(self):
        """Test voxel * 12 + face * 3 + channel addressing."""
        palette = VoxelPalette()
        palette.set_entry(2, VoxelFace.TOP2, 0xAABBCC)

        assert VoxelPalette.palette_index(2, VoxelFace.TOP2) == 33
        assert list(palette.buffer[33:36]) == [0xAA, 0xBB, 0xCC]

    def test_set_entry_shaded(self):
        """Test the four derived faces use floor division."""
        palette = VoxelPalette()
        palette.set_entry_shaded(1, SAND)

        assert palette.get_color(1, VoxelFace.TOP2) == SAND_TOP2
        assert palette.get_color(1, VoxelFace.LEFT) == SAND_LEFT
        assert palette.get_color(1, VoxelFace.RIGHT) == SAND_RIGHT
        assert palette.get_color(1, VoxelFace.TOP) == SAND_TOP

        # Each channel independently
        assert palette.get_r(1, VoxelFace.TOP) == 237 * 3 // 4
        assert palette.get_g(1, VoxelFace.TOP) == 150
        assert palette.get_b(1, VoxelFace.TOP) == 131
        assert palette.get_g(1, VoxelFace.LEFT) == 100
        assert palette.get_b(1, VoxelFace.RIGHT) == 43

    def test_invalid_keys(self):
        """Test out-of-range voxel ids and faces."""
        palette = VoxelPalette()
        with self.assertRaises(InvalidPaletteKey):
            palette.get_r(65536, VoxelFace.TOP)
        with self.assertRaises(InvalidPaletteKey):
            palette.get_g(-1, VoxelFace.TOP)
        with self.assertRaises(InvalidPaletteKey):
            palette.set_entry(0, 4, 0xffffff)
        with self.assertRaises(KeyError):
            palette.set_entry_shaded(70000, 0xffffff)

    def test_invalid_channel_value(self):
        """Test channel values outside a byte."""
        palette = VoxelPalette()
        with self.assertRaises(ValueError):
            palette.set_r(1, VoxelFace.TOP, 256)
        with self.assertRaises(ValueError):
            palette.set_b(1, VoxelFace.TOP, -1)

    def test_parse_color(self):
        """Test hex color parsing."""
        assert parse_color("#edc9af") == SAND
        assert parse_color("0xEDC9AF") == SAND
        assert parse_color("edc9af") == SAND
        assert parse_color(0x102030) == 0x102030
        assert unpack_color(SAND) == SAND_TOP2

        for bad in ["#fff", "zzzzzz", "0x1000000", 0x1000000]:
            with self.assertRaises(ValueError):
                parse_color(bad)


class TestSurfaceLayout(unittest.TestCase):
    """Tests for surface sizing and indexing."""

    def test_pixel_buffer_size(self):
        """Test buffer dimensions for an asymmetric footprint."""
        surface = VoxelSurface(VoxelGeometry(4, 1, 2), make_palette(), 4, 1, 2)

        assert surface.pixel_buffer_width == 4 + 2 * (3 + 1)
        assert surface.pixel_buffer_width == 12
        assert surface.pixel_buffer_height == 3 + 4 * 1 + 0
        assert surface.pixel_buffer_size == 12 * 7 * 4
        assert surface.pixel_buffer.shape == (12 * 7 * 4,)
        assert surface.pixels.shape == (7, 12, 4)

    def test_voxel_index(self):
        """Test z-major, then y, then x ordering."""
        surface = VoxelSurface(VoxelGeometry(), make_palette(), 3, 4, 5)

        assert surface.voxel_index(0, 0, 0) == 0
        assert surface.voxel_index(1, 0, 0) == 1
        assert surface.voxel_index(0, 1, 0) == 3
        assert surface.voxel_index(0, 0, 1) == 12
        assert surface.voxel_index(2, 3, 4) == 4 * 12 + 3 * 3 + 2

    def test_pixel_index_symmetric(self):
        """Test rectangle origins when width == depth."""
        surface = VoxelSurface(VoxelGeometry(4, 1, 2), make_palette(), 2, 1, 2)
        assert surface.pixel_buffer_width == 8
        assert surface.pixel_buffer_height == 5

        # px = 8/2 - 2 + (z-x)*2, py = 5 - 3 - (z+x)
        assert surface.pixel_index(0, 0, 0) == (2 * 8 + 2) * 4
        assert surface.pixel_index(1, 0, 1) == (0 * 8 + 2) * 4
        assert surface.pixel_index(1, 0, 0) == (1 * 8 + 0) * 4
        assert surface.pixel_index(0, 0, 1) == (1 * 8 + 4) * 4

    def test_pixel_index_asymmetric(self):
        """Test rectangle origins anchor on width - 1 when width != depth."""
        surface = VoxelSurface(VoxelGeometry(4, 1, 2), make_palette(), 4, 1, 2)

        # px = 3*2 + (z-x)*2, py = 7 - 3 - (z+x)
        assert surface.pixel_index(0, 0, 0) == (4 * 12 + 6) * 4
        assert surface.pixel_index(3, 0, 0) == (1 * 12 + 0) * 4
        assert surface.pixel_index(0, 0, 1) == (3 * 12 + 8) * 4

    def test_pixel_index_height_layers(self):
        """Test each y layer shifts the rectangle by bottom_height rows."""
        surface = VoxelSurface(VoxelGeometry(4, 1, 2), make_palette(), 2, 3, 2)
        width = surface.pixel_buffer_width

        low = surface.pixel_index(0, 0, 0)
        high = surface.pixel_index(0, 1, 0)
        assert low - high == 2 * width * 4

    def test_out_of_range(self):
        """Test bounds-checked indexing."""
        surface = VoxelSurface(VoxelGeometry(), make_palette(), 2, 2, 2)
        for coords in [(2, 0, 0), (0, 2, 0), (0, 0, 2), (-1, 0, 0)]:
            with self.assertRaises(OutOfRange):
                surface.voxel_index(*coords)
            with self.assertRaises(OutOfRange):
                surface.pixel_index(*coords)
        with self.assertRaises(IndexError):
            surface.get_voxel(5, 5, 5)

    def test_invalid_dimensions(self):
        """Test surfaces need positive integer extents."""
        for dims in [(0, 1, 1), (1, -1, 1), (1, 1, 0), (1.5, 1, 1)]:
            with self.assertRaises(InvalidGeometry):
                VoxelSurface(VoxelGeometry(), make_palette(), *dims)


class TestSurfaceMutation(unittest.TestCase):
    """Tests for fill, set_voxel and clear."""

    def setUp(self):
        self.surface = VoxelSurface(VoxelGeometry(), make_palette(), 4, 4, 4)

    def test_starts_empty_and_dirty(self):
        """Test a new surface is cleared but not rendered."""
        assert self.surface.voxel_count == 0
        assert self.surface.dirty

    def test_fill_and_set_voxel(self):
        """Test fill over a sub-box then a single voxel outside it."""
        self.surface.update()
        assert not self.surface.dirty

        self.surface.fill(2, 1, 1, 1, 2, 2, 2)
        assert self.surface.dirty
        self.surface.update()

        self.surface.set_voxel(3, 0, 0, 0)
        assert self.surface.dirty

        assert self.surface.voxel_count == 9
        assert self.surface.get_voxel(0, 0, 0) == 3
        assert self.surface.get_voxel(1, 1, 1) == 2
        assert self.surface.get_voxel(2, 2, 2) == 2
        assert self.surface.get_voxel(3, 3, 3) == 0
        assert self.surface.get_voxel(1, 0, 1) == 0

        # grid view is (z, y, x)
        assert np.all(self.surface.grid[1:3, 1:3, 1:3] == 2)

    def test_fill_zero_extent(self):
        """Test an empty box changes nothing but still marks dirty."""
        self.surface.update()
        self.surface.fill(1, 4, 0, 0, 0, 4, 4)
        assert self.surface.voxel_count == 0
        assert self.surface.dirty

    def test_fill_out_of_range(self):
        """Test fill boxes leaving the grid."""
        with self.assertRaises(OutOfRange):
            self.surface.fill(1, 0, 0, 0, 5, 1, 1)
        with self.assertRaises(OutOfRange):
            self.surface.fill(1, 3, 3, 3, 1, 1, 2)
        with self.assertRaises(OutOfRange):
            self.surface.fill(1, -1, 0, 0, 2, 1, 1)
        with self.assertRaises(OutOfRange):
            self.surface.fill(1, 2, 0, 0, -1, 1, 1)
        assert self.surface.voxel_count == 0

    def test_set_voxel_errors(self):
        """Test set_voxel bounds and id checks."""
        with self.assertRaises(OutOfRange):
            self.surface.set_voxel(1, 0, 4, 0)
        with self.assertRaises(InvalidPaletteKey):
            self.surface.set_voxel(65536, 0, 0, 0)
        with self.assertRaises(InvalidPaletteKey):
            self.surface.fill(-1, 0, 0, 0, 1, 1, 1)

    def test_clear(self):
        """Test clear empties the grid."""
        self.surface.fill(1, 0, 0, 0, 4, 4, 4)
        self.surface.update()
        self.surface.clear()
        assert self.surface.voxel_count == 0
        assert self.surface.dirty

    def test_non_integer_arguments(self):
        """Test floats are rejected instead of truncated."""
        with self.assertRaises(OutOfRange):
            self.surface.set_voxel(1, 0.5, 0, 0)
        with self.assertRaises(OutOfRange):
            self.surface.voxel_index(0, 0, 1.0)
        with self.assertRaises(OutOfRange):
            self.surface.fill(1, 0, 0, 0, 1.5, 1, 1)
        with self.assertRaises(InvalidPaletteKey):
            self.surface.set_voxel(1.7, 0, 0, 0)
        with self.assertRaises(InvalidPaletteKey):
            self.surface.fill(True, 0, 0, 0, 1, 1, 1)
        assert self.surface.voxel_count == 0

        # numpy integers are fine
        self.surface.set_voxel(np.uint16(2), np.int64(1), np.int32(1), np.int8(1))
        assert self.surface.get_voxel(1, 1, 1) == 2

    def test_large_voxel_ids(self):
        """Test the grid stores full 16-bit ids."""
        self.surface.set_voxel(65535, 1, 2, 3)
        assert self.surface.get_voxel(1, 2, 3) == 65535


class TestRasterization(unittest.TestCase):
    """Tests for update()."""

    def test_clear_transparent(self):
        """Test an empty surface renders as transparent background."""
        surface = VoxelSurface(VoxelGeometry(4, 1, 2), make_palette(), 3, 2, 3)
        surface.clear()

        assert surface.update(True)
        assert not surface.dirty

        pixels = surface.pixels
        assert np.all(pixels[:, :, 3] == 0)
        assert np.all(pixels[:, :, :3] == BACKGROUND)

    def test_update_is_memoized(self):
        """Test a clean surface is left byte-identical."""
        surface = VoxelSurface(VoxelGeometry(4, 1, 2), make_palette(), 3, 2, 3)
        surface.fill(1, 0, 0, 0, 3, 1, 3)
        surface.update(True)
        before = surface.pixel_buffer.tobytes()

        assert not surface.update(True)
        assert surface.pixel_buffer.tobytes() == before

        # Not redrawn even when asked for a different background
        assert not surface.update(False)
        assert surface.pixel_buffer.tobytes() == before

    def test_single_voxel(self):
        """Test one voxel draws exactly one rectangle."""
        surface = VoxelSurface(VoxelGeometry(4, 1, 2), make_palette(), 3, 3, 3)
        assert surface.pixel_buffer_width == 12
        assert surface.pixel_buffer_height == 11

        surface.set_voxel(1, 1, 1, 1)
        surface.update(False)

        # px = 12/2 - 2 + 0, py = 11 - 3 - 2 - 2
        assert surface.pixel_index(1, 1, 1) == (4 * 12 + 4) * 4

        expected = np.zeros((11, 12, 4), dtype=np.uint8)
        expected[:, :, :3] = BACKGROUND
        expected[:, :, 3] = 255
        expected[4, 4:8, :3] = SAND_TOP2
        expected[5:7, 4:6, :3] = SAND_LEFT
        expected[5:7, 6:8, :3] = SAND_RIGHT

        assert np.array_equal(surface.pixels, expected)

    def test_diagonal_neighbour_dims_top(self):
        """Test the (x+1, z+1) neighbour selects the TOP face."""
        surface = VoxelSurface(VoxelGeometry(4, 1, 2), make_palette(), 2, 1, 2)
        surface.set_voxel(1, 0, 0, 0)
        surface.set_voxel(1, 1, 0, 1)
        surface.update(True)
        pixels = surface.pixels

        # (1, 0, 1) sits at rows 0-2, drawn first
        assert np.all(pixels[0, 2:6, :3] == SAND_TOP2)
        assert np.all(pixels[1, 2:4, :3] == SAND_LEFT)
        assert np.all(pixels[1, 4:6, :3] == SAND_RIGHT)

        # (0, 0, 0) sits at rows 2-4, drawn over it with the dim top
        assert np.all(pixels[2, 2:6, :3] == SAND_TOP)
        assert np.all(pixels[3:5, 2:4, :3] == SAND_LEFT)
        assert np.all(pixels[3:5, 4:6, :3] == SAND_RIGHT)

        assert np.all(pixels[:, 2:6, 3] == 255)
        assert np.all(pixels[:, 0:2, 3] == 0)
        assert np.all(pixels[:, 6:8, 3] == 0)

    def test_neighbour_on_other_layer_does_not_dim_top(self):
        """Test only the same-layer (x+1, z+1) neighbour is consulted."""
        surface = VoxelSurface(VoxelGeometry(4, 1, 2), make_palette(), 2, 2, 2)
        surface.set_voxel(1, 0, 0, 0)
        surface.set_voxel(1, 1, 1, 1)
        surface.update(True)
        pixels = surface.pixels

        # (0, 0, 0) at rows 4-6, (1, 1, 1) at rows 0-2
        assert np.all(pixels[4, 2:6, :3] == SAND_TOP2)
        assert np.all(pixels[0, 2:6, :3] == SAND_TOP2)
        assert np.all(pixels[3, :, 3] == 0)

    def test_painter_order(self):
        """Test nearer voxels overwrite farther ones."""
        palette = make_palette()
        palette.set_entry_shaded(2, 0x00FF00)
        surface = VoxelSurface(VoxelGeometry(4, 1, 2), palette, 2, 1, 2)

        # (1, 0, 1) is farther than (0, 0, 0) and overlaps it on row 2
        surface.set_voxel(2, 1, 0, 1)
        surface.set_voxel(1, 0, 0, 0)
        surface.update(True)

        assert np.all(surface.pixels[2, 2:6, :3] == SAND_TOP)
        assert np.all(surface.pixels[0, 2:6, :3] == (0, 255, 0))

    def test_full_grid_is_tightly_bounded(self):
        """Test a full asymmetric grid touches every buffer edge."""
        surface = VoxelSurface(VoxelGeometry(4, 1, 2), make_palette(), 5, 3, 2)
        surface.fill(1, 0, 0, 0, 5, 3, 2)
        surface.update(True)

        alpha = surface.pixels[:, :, 3]
        rows = np.where(alpha.any(axis=1))[0]
        cols = np.where(alpha.any(axis=0))[0]

        assert rows[0] == 0
        assert rows[-1] == surface.pixel_buffer_height - 1
        assert cols[0] == 0
        assert cols[-1] == surface.pixel_buffer_width - 1

    def test_mutation_triggers_redraw(self):
        """Test removing a voxel clears its pixels on the next update."""
        surface = VoxelSurface(VoxelGeometry(4, 1, 2), make_palette(), 2, 2, 2)
        surface.set_voxel(1, 0, 0, 0)
        surface.update(True)
        assert np.any(surface.pixels[:, :, 3] == 255)

        surface.set_voxel(0, 0, 0, 0)
        assert surface.update(True)
        assert np.all(surface.pixels[:, :, 3] == 0)


if __name__ == "__main__":
    unittest.main(verbosity=2)
