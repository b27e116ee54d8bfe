"""
Tile definitions (4 bits per pixel) for the tilemap layer.
"""

import numpy as np

from .constants import TileDefs
from .errors import UnsupportedTilesetError
from .sprite import Tileset


def is_tile_definition_tileset(tileset: Tileset) -> bool:
    return tileset.is_indexed and tileset.tile_size in TileDefs.SUPPORTED_SIZES


def _quadrant_byte_offsets(tile_area: int) -> np.ndarray:
    """Destination byte of each even pixel of a 16x16 tile.

    The hardware stores a 16x16 tile as four 8x8 quadrants:
    top-left, top-right, bottom-left, bottom-right.
    """
    points = np.arange(0, tile_area, 2)
    quadrant = (points >> 3) % 2 + 2 * (points >> 7)
    quadrant_point = points % 8 + 8 * ((points >> 4) % 8)
    return (quadrant * TileDefs.QUADRANT_AREA + quadrant_point) // 2


def encode_tileset(tileset: Tileset) -> bytes:
    """Pack every tile of an indexed 8x8 or 16x16 tileset, two pixels per byte.

    Each byte holds (p0 << 4) | p1 for two consecutive pixels. 8x8 tiles keep
    raster order; 16x16 tiles are rearranged into hardware quadrant order.

    Raises:
        UnsupportedTilesetError: RGBA tileset or unsupported tile size
    """
    if not tileset.is_indexed:
        raise UnsupportedTilesetError(
            "The tileset must be indexed. The tileset is RGBA",
            tileset_id=tileset.tileset_id,
        )
    if tileset.tile_size not in TileDefs.SUPPORTED_SIZES:
        raise UnsupportedTilesetError(
            f"Unsupported tile size {tileset.tile_width}x{tileset.tile_height}, "
            "expected 8x8 or 16x16",
            tileset_id=tileset.tileset_id,
        )

    tile_area = tileset.tile_width * tileset.tile_height
    tile_bytes = tile_area // 2
    is_quadrant_tile = tileset.tile_width == 16
    offsets = _quadrant_byte_offsets(tile_area) if is_quadrant_tile else None

    buffer = np.zeros(len(tileset.tiles) * tile_bytes, dtype=np.uint8)
    for position, tile in enumerate(tileset.tiles):
        pixels = tile.content & TileDefs.NIBBLE_MASK
        packed = (pixels[0::2] << 4) | pixels[1::2]

        start = position * tile_bytes
        if is_quadrant_tile:
            buffer[start + offsets] = packed
        else:
            buffer[start : start + tile_bytes] = packed

    return buffer.tobytes()
