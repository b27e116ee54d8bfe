#!/usr/bin/env python3
"""
Tests for palette and bitmap serialization.

Usage:
    python tests/test_bitmap.py
"""

import sys
from pathlib import Path

import numpy as np

sys.path.insert(0, str(Path(__file__).parent.parent))

from next_files import (
    ColorQuantizer,
    Palette,
    RasterOrder,
    TileRef,
    render_cel,
    serialize_bitmap,
    serialize_palette,
)
from external_files import bitmap_to_image
from utils import make_cel, make_tileset, run_tests, solid_tile

RED = (255, 0, 0, 255)
GREEN = (0, 255, 0, 255)


def _red_green_cel(canvas=(16, 8), x_pos=0):
    tileset = make_tileset([solid_tile(RED, side=8), solid_tile(GREEN, side=8)], tile_size=8)
    return make_cel(tileset, [(0, 0, 0), (1, 0, 1)], canvas=canvas, x_pos=x_pos)


def test_palette_is_one_byte_per_color():
    palette = Palette([[255, 0, 0, 255], [0, 0, 0, 0], [0xE0, 0x00, 0xC0, 0xFF]])
    assert serialize_palette(palette) == bytes([0xE0, 227, 228])


def test_palette_uses_custom_quantizer():
    palette = Palette([[0, 0, 0, 0]])
    assert serialize_palette(palette, ColorQuantizer(transparent_index=0)) == bytes([0])


def test_row_major_bitmap():
    data = serialize_bitmap(_red_green_cel(), RasterOrder.ROW_MAJOR)
    assert len(data) == 16 * 8
    assert data[:16] == bytes([0xE0] * 8 + [0x1C] * 8)


def test_column_major_bitmap():
    data = serialize_bitmap(_red_green_cel(), RasterOrder.COLUMN_MAJOR)
    assert data[:64] == bytes([0xE0]) * 64
    assert data[64:] == bytes([0x1C]) * 64


def test_orders_hold_the_same_pixels():
    cel = _red_green_cel(canvas=(24, 16))
    rows = np.frombuffer(serialize_bitmap(cel, RasterOrder.ROW_MAJOR), dtype=np.uint8)
    columns = np.frombuffer(serialize_bitmap(cel, RasterOrder.COLUMN_MAJOR), dtype=np.uint8)
    assert (rows.reshape(16, 24) == columns.reshape(24, 16).T).all()


def test_uncovered_rgba_pixels_are_zero():
    image = render_cel(_red_green_cel(canvas=(24, 8)))
    assert (image[:, 16:] == 0).all()


def test_uncovered_indexed_pixels_are_zero():
    tileset = make_tileset([solid_tile(7, side=8)], tile_size=8)
    cel = make_cel(tileset, [(0, 0, 0)], canvas=(16, 8))
    image = render_cel(cel)
    assert (image[:, :8] == 7).all()
    assert (image[:, 8:] == 0).all()


def test_tiles_are_clipped_to_canvas():
    image = render_cel(_red_green_cel(canvas=(16, 8), x_pos=-4))
    assert (image[:, :4] == 0xE0).all()
    assert (image[:, 4:12] == 0x1C).all()
    assert (image[:, 12:] == 0).all()


def test_flips_are_not_applied():
    content = np.zeros(64, dtype=np.uint8)
    content[0] = 9
    tileset = make_tileset([content], tile_size=8)
    cel = make_cel(tileset, [TileRef(0, 0, 0, x_flip=True, y_flip=True)], canvas=(8, 8))
    image = render_cel(cel)
    assert image[0, 0] == 9
    assert image[7, 7] == 0


def test_bitmap_to_image_decodes_colors():
    image = bitmap_to_image(bytes([0xE0, 0x03]), 2, 1)
    assert image.mode == "P"
    assert image.size == (2, 1)
    rgb = image.convert("RGB")
    assert rgb.getpixel((0, 0)) == (224, 0, 0)
    assert rgb.getpixel((1, 0)) == (0, 0, 192)


def test_bitmap_to_image_column_major():
    image = bitmap_to_image(bytes([1, 2, 3, 4]), 2, 2, RasterOrder.COLUMN_MAJOR)
    assert image.getpixel((0, 1)) == 2
    assert image.getpixel((1, 0)) == 3


if __name__ == "__main__":
    sys.exit(run_tests(globals()))
