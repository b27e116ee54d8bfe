#!/usr/bin/env python3
"""
Tests for the centered tilemap rasterizer.

Usage:
    python tests/test_tilemap.py
"""

import sys
from pathlib import Path

import numpy as np

sys.path.insert(0, str(Path(__file__).parent.parent))

from next_files import (
    UnsupportedLayerConfigurationError,
    UnsupportedTilesetError,
    rasterize,
    rasterize16,
)
from next_files.tilemap import center
from utils import make_cel, make_tileset, run_tests, solid_tile


def _tileset(count=8):
    return make_tileset([solid_tile(i, side=8) for i in range(count)], tile_size=8)


def test_center_margins():
    assert center(0, 8, 4) == -1
    assert center(2, 8, 4) == 0
    assert center(5, 8, 4) == 3
    assert center(6, 8, 4) == -1
    # Half margins round up, blanking content that no longer fits
    assert [center(p, 4, 1) for p in range(4)] == [-1, -1, -1, -1]
    assert [center(p, 3, 1) for p in range(3)] == [-1, 0, -1]
    assert [center(p, 4, 2) for p in range(4)] == [-1, 0, 1, -1]


def test_small_map_is_centered():
    cel = make_cel(_tileset(), [(0, 0, 5), (3, 3, 7)], width=4, height=4, canvas=(32, 32))
    data = np.frombuffer(rasterize(cel, 8, 8), dtype=np.uint8).reshape(8, 8)

    assert data[2, 2] == 5
    assert data[5, 5] == 7
    assert np.count_nonzero(data) == 2


def test_larger_map_is_cropped():
    cel = make_cel(
        _tileset(),
        [(0, 0, 1), (1, 1, 2), (2, 1, 3), (1, 2, 4), (2, 2, 5)],
        width=4,
        height=4,
        canvas=(32, 32),
    )
    assert rasterize(cel, 2, 2) == bytes([2, 3, 4, 5])


def test_default_size_matches_canvas():
    cel = make_cel(_tileset(), [(1, 0, 6)], width=2, height=1, canvas=(16, 8))
    assert rasterize(cel, 2, 1) == bytes([0, 6])


def test_wide_entries_are_little_endian():
    tileset = make_tileset([solid_tile(1, side=8)], tile_size=8, first_index=300)
    cel = make_cel(tileset, [(0, 0, 300)], width=1, height=1, canvas=(8, 8))

    assert rasterize16(cel, 1, 1) == bytes([0x2C, 0x01])
    try:
        rasterize(cel, 1, 1)
    except UnsupportedTilesetError:
        pass
    else:
        raise AssertionError("index 300 written as a byte")


def test_large_tiles_rejected():
    tileset = make_tileset([solid_tile(1)], tile_size=16)
    cel = make_cel(tileset, [(0, 0, 0)], canvas=(16, 16))
    try:
        rasterize(cel, 2, 2)
    except UnsupportedLayerConfigurationError:
        pass
    else:
        raise AssertionError("16x16 tilemap accepted")


if __name__ == "__main__":
    sys.exit(run_tests(globals()))
