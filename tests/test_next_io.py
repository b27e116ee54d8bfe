#!/usr/bin/env python3
"""
Tests for the Next asset file writers.

Usage:
    python tests/test_next_io.py
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from data import read_file_to_bytes
from next_files import (
    EmptyCelError,
    MissingPaletteError,
    Palette,
    RasterOrder,
    ReferencePoint,
    UnsupportedLayerConfigurationError,
    UnsupportedTilesetError,
    decode_sprite_file,
    write_balloon_map,
    write_bitmap,
    write_layer_bitmaps,
    write_palettes,
    write_sprite_file,
    write_tile_definitions,
    write_tilemaps,
)
from utils import (
    make_cel,
    make_sprite,
    make_tileset,
    run_tests,
    solid_tile,
    temp_output_dir,
)

RED = (255, 0, 0, 255)


def _sprite_frames(frame_count=2):
    tileset = make_tileset([solid_tile(RED), solid_tile(3)[:, None].repeat(4, axis=1)])
    cels = [
        make_cel(tileset, [(0, 0, 0), (1, 0, 1)], canvas=(32, 16), frame_index=i)
        for i in range(frame_count)
    ]
    return make_sprite(cels)


def _tiled_sprite(frame_count=2, name="tiles"):
    tileset = make_tileset([solid_tile(i, side=8) for i in range(4)], tile_size=8)
    cels = [
        make_cel(tileset, [(i % 2, 0, i + 1)], width=2, height=1, canvas=(16, 8), frame_index=i)
        for i in range(frame_count)
    ]
    return make_sprite(cels, name=name, tileset=tileset, tiled=True)


def test_sprite_file_layout():
    with temp_output_dir("sprite_file") as folder:
        path = folder / "hero.sp"
        size = write_sprite_file(_sprite_frames(), path, ReferencePoint.TOP_LEFT)
        data = read_file_to_bytes(path)

    assert size == len(data)
    assert data[0] == 2
    frames = decode_sprite_file(data)
    assert len(frames) == 2
    assert sum(frame.size for frame in frames) + 1 == len(data)
    assert [len(frame.records) for frame in frames] == [2, 2]


def test_failing_frame_writes_nothing():
    sprite = _sprite_frames()
    tileset = sprite.layers[0].cels[0].tileset
    sprite.layers[0].cels.append(make_cel(tileset, [], width=1, height=1, canvas=(32, 16), frame_index=2))

    with temp_output_dir("sprite_file_error") as folder:
        path = folder / "hero.sp"
        try:
            write_sprite_file(sprite, path)
        except EmptyCelError as e:
            assert e.frame_index == 2
            assert e.layer_name == "Layer 1"
            assert "frame 2" in str(e)
        else:
            raise AssertionError("empty frame accepted")
        assert not path.exists()


def test_tile_definitions_skip_rgba_tilesets():
    rgba = _sprite_frames()
    rgba.tilesets = [rgba.layers[0].cels[0].tileset]

    with temp_output_dir("tile_definitions") as folder:
        path = folder / "tiles.til"
        size = write_tile_definitions([_tiled_sprite(), rgba, _tiled_sprite()], path)
        assert size == 2 * 4 * 32
        assert read_file_to_bytes(path)[32:64] == bytes([0x11]) * 32

        try:
            write_tile_definitions([rgba], folder / "none.til")
        except UnsupportedTilesetError:
            pass
        else:
            raise AssertionError("RGBA only input accepted")


def test_tilemaps_per_frame_and_concatenated():
    sprite = _tiled_sprite()
    with temp_output_dir("tilemaps") as folder:
        paths = write_tilemaps(sprite, str(folder / "map{frame}.map"))
        assert [p.name for p in paths] == ["map0.map", "map1.map"]
        assert read_file_to_bytes(paths[0]) == bytes([1, 0])
        assert read_file_to_bytes(paths[1]) == bytes([0, 2])

        paths = write_tilemaps(sprite, str(folder / "all.map"), width=2, height=1)
        assert read_file_to_bytes(paths[0]) == bytes([1, 0, 0, 2])

        paths = write_tilemaps(sprite, str(folder / "wide.map"), wide=True)
        assert read_file_to_bytes(paths[0]) == bytes([1, 0, 0, 0, 0, 0, 2, 0])


def test_tilemap_needs_a_tiled_layer():
    with temp_output_dir("tilemap_error") as folder:
        try:
            write_tilemaps(_sprite_frames(), str(folder / "x.map"))
        except UnsupportedLayerConfigurationError:
            pass
        else:
            raise AssertionError("image layer accepted as tilemap")


def test_palettes_are_concatenated():
    first = _tiled_sprite()
    first.palette = Palette([[255, 0, 0, 255], [0, 0, 0, 0]])
    second = _tiled_sprite()
    second.palette = Palette([[0, 0, 255, 255]])

    with temp_output_dir("palettes") as folder:
        path = folder / "all.pal"
        write_palettes([first, _tiled_sprite(), second], path)
        assert read_file_to_bytes(path) == bytes([0xE0, 227, 0x03])

        try:
            write_palettes([_tiled_sprite()], folder / "none.pal")
        except MissingPaletteError:
            pass
        else:
            raise AssertionError("missing palette accepted")


def test_layer_bitmaps_insert_frame_number():
    with temp_output_dir("layer_bitmaps") as folder:
        paths = write_layer_bitmaps(_tiled_sprite(), str(folder / "title.l2"))
        assert [p.name for p in paths] == ["title0.l2", "title1.l2"]
        assert len(read_file_to_bytes(paths[0])) == 16 * 8

        paths = write_layer_bitmaps(_tiled_sprite(frame_count=1), str(folder / "one.l2"))
        assert [p.name for p in paths] == ["one.l2"]

        paths = write_layer_bitmaps(_tiled_sprite(), str(folder / "f{frame}.l2"))
        assert [p.name for p in paths] == ["f0.l2", "f1.l2"]


def test_layer_bitmap_is_column_major_by_default():
    with temp_output_dir("layer_bitmap_order") as folder:
        path = write_layer_bitmaps(_tiled_sprite(frame_count=1), str(folder / "a.l2"))[0]
        # Column 0 is tile 1 (palette index 1), 8 pixels tall
        assert read_file_to_bytes(path)[:8] == bytes([1]) * 8
        assert read_file_to_bytes(path)[64:72] == bytes(8)


def test_bitmap_concatenates_frames():
    with temp_output_dir("bitmap") as folder:
        path = folder / "all.bmp8"
        size = write_bitmap(_tiled_sprite(), path, RasterOrder.ROW_MAJOR)
        data = read_file_to_bytes(path)
    assert size == 2 * 16 * 8
    assert data[:16] == bytes([1] * 8 + [0] * 8)
    assert data[128:144] == bytes([0] * 8 + [2] * 8)


def test_balloon_map_file():
    with temp_output_dir("balloon") as folder:
        path = folder / "b.blm"
        assert write_balloon_map(_tiled_sprite(), path) == 104
        assert read_file_to_bytes(path) == bytes(104)


if __name__ == "__main__":
    sys.exit(run_tests(globals()))
