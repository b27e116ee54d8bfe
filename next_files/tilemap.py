"""
Dense tilemaps for the 8x8 tilemap layer.
"""

import math
import numpy as np

from data import TILE_SIZE_SMALL

from .constants import Tilemap
from .errors import UnsupportedLayerConfigurationError, UnsupportedTilesetError
from .sprite import Cel


def center(position: int, output_size: int, content_size: int) -> int:
    """Content coordinate shown at an output coordinate, or -1 for margin.

    A negative margin (output smaller than content) crops the content.
    """
    margin = math.floor((output_size - content_size) / 2 + 0.5)
    if position < margin:
        return -1
    if position >= output_size - margin:
        return -1
    return position - margin


def tile_indexes(cel: Cel, output_width: int, output_height: int) -> np.ndarray:
    """Tile index per output cell, shape (output_height, output_width)."""
    if cel.tileset.tile_size != (TILE_SIZE_SMALL, TILE_SIZE_SMALL):
        raise UnsupportedLayerConfigurationError(
            f"Tilemaps need {TILE_SIZE_SMALL}x{TILE_SIZE_SMALL} tiles, got "
            f"{cel.tileset.tile_width}x{cel.tileset.tile_height}",
            frame_index=cel.frame_index,
            tileset_id=cel.tileset.tileset_id,
        )

    map_width = cel.canvas_width // Tilemap.TILE_SIZE
    map_height = cel.canvas_height // Tilemap.TILE_SIZE

    indexes = np.full((output_height, output_width), Tilemap.EMPTY_TILE, dtype=np.int64)
    for y in range(output_height):
        tile_y = center(y, output_height, map_height)
        if tile_y == -1 or tile_y >= map_height:
            continue
        for x in range(output_width):
            tile_x = center(x, output_width, map_width)
            if tile_x == -1 or tile_x >= map_width:
                continue
            ref = cel.tile_at(tile_x, tile_y)
            if ref is not None:
                indexes[y, x] = ref.tile_index
    return indexes


def rasterize(cel: Cel, output_width: int, output_height: int) -> bytes:
    """One byte per output cell, row-major."""
    indexes = tile_indexes(cel, output_width, output_height)
    if indexes.size and indexes.max() > Tilemap.MAX_INDEX_8BIT:
        raise UnsupportedTilesetError(
            f"Tile index {int(indexes.max())} does not fit in 8 bits, "
            "use the 16-bit tilemap",
            frame_index=cel.frame_index,
            tileset_id=cel.tileset.tileset_id,
        )
    return indexes.astype(np.uint8).tobytes()


def rasterize16(cel: Cel, output_width: int, output_height: int) -> bytes:
    """Two bytes (little-endian) per output cell, row-major."""
    indexes = tile_indexes(cel, output_width, output_height)
    if indexes.size and indexes.max() > Tilemap.MAX_INDEX_16BIT:
        raise UnsupportedTilesetError(
            f"Tile index {int(indexes.max())} does not fit in 16 bits",
            frame_index=cel.frame_index,
            tileset_id=cel.tileset.tileset_id,
        )
    return indexes.astype("<u2").tobytes()
