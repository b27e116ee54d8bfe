"""
Text balloon overlay: a fixed 13x4 tile window of the first cel.
"""

from data import write_uint8, fits_uint8

from .constants import Balloon
from .errors import UnsupportedTilesetError
from .sprite import Cel, Sprite


def balloon_cells(cel: Cel) -> bytes:
    """[character, attribute] per window cell, columns first.

    Columns are written first so the runtime can grow the balloon
    horizontally. Cells without a tile are written as [0, 0]. Characters
    follow the tile definition numbering: indexed tilesets keep their
    Aseprite tile ids, 0-based tilesets are shifted past the empty tile.
    """
    result = bytearray()
    for x in range(Balloon.MAP_X, Balloon.MAP_X + Balloon.WIDTH):
        for y in range(Balloon.MAP_Y, Balloon.MAP_Y + Balloon.HEIGHT):
            ref = cel.tile_at(x, y)
            if ref is None:
                result.extend(bytes(2))
                continue

            character = ref.tile_index if cel.tileset.is_indexed else ref.tile_index + 1
            if not fits_uint8(character):
                raise UnsupportedTilesetError(
                    f"Balloon tile {ref.tile_index} at ({x}, {y}) does not fit in a byte",
                    frame_index=cel.frame_index,
                    tileset_id=cel.tileset.tileset_id,
                )
            attr = (
                (Balloon.PALETTE << 4)
                | (int(ref.x_flip) << 3)
                | (int(ref.y_flip) << 2)
            )
            result.extend(write_uint8(character))
            result.extend(write_uint8(attr))
    return bytes(result)


def extract_balloon_map(sprite: Sprite) -> bytes:
    """Balloon map of the first cel of the first layer."""
    layer = sprite.first_layer()
    if not layer.cels:
        raise ValueError(f"Layer '{layer.name}' has no cels")
    return balloon_cells(layer.cels[0])
