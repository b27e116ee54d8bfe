"""
Next files module for encoding sprites, tiles, tilemaps, palettes, and bitmaps
in ZX Spectrum Next hardware formats.
"""

from .next_io import (
    write_sprite_file,
    write_tile_definitions,
    write_tilemaps,
    write_palettes,
    write_layer_bitmaps,
    write_bitmap,
    write_balloon_map,
)
from .sprite import (
    # Document model
    ColorMode,
    Tile,
    Tileset,
    TileRef,
    Cel,
    Layer,
    Frame,
    Palette,
    Sprite,
)
from .colors import ColorQuantizer, decode_color
from .anchor import select_anchor, deduplicate, count_patterns
from .sprite_attrs import (
    SpriteAttributes,
    SpriteFrame,
    encode_attributes,
    decode_attributes,
    decode_sprite_file,
    frame_offset,
)
from .patterns import encode_tileset, is_tile_definition_tileset
from .tilemap import rasterize, rasterize16
from .bitmap import RasterOrder, serialize_palette, serialize_bitmap, render_cel
from .balloon import extract_balloon_map
from .errors import (
    NextAssetError,
    OversizedCelError,
    EmptyCelError,
    TooManyPatternsError,
    TooManySpritesError,
    OffsetOutOfRangeError,
    UnsupportedTilesetError,
    MissingPaletteError,
    UnsupportedLayerConfigurationError,
)
from .constants import (
    # Constants
    SpriteAttr,
    TileDefs,
    Tilemap,
    Balloon,
    ReferencePoint,
)

__all__ = [
    # IO functions
    "write_sprite_file",
    "write_tile_definitions",
    "write_tilemaps",
    "write_palettes",
    "write_layer_bitmaps",
    "write_bitmap",
    "write_balloon_map",
    # Document model
    "ColorMode",
    "Tile",
    "Tileset",
    "TileRef",
    "Cel",
    "Layer",
    "Frame",
    "Palette",
    "Sprite",
    # Encoders
    "ColorQuantizer",
    "decode_color",
    "select_anchor",
    "deduplicate",
    "count_patterns",
    "SpriteAttributes",
    "SpriteFrame",
    "encode_attributes",
    "decode_attributes",
    "decode_sprite_file",
    "frame_offset",
    "encode_tileset",
    "is_tile_definition_tileset",
    "rasterize",
    "rasterize16",
    "RasterOrder",
    "serialize_palette",
    "serialize_bitmap",
    "render_cel",
    "extract_balloon_map",
    # Errors
    "NextAssetError",
    "OversizedCelError",
    "EmptyCelError",
    "TooManyPatternsError",
    "TooManySpritesError",
    "OffsetOutOfRangeError",
    "UnsupportedTilesetError",
    "MissingPaletteError",
    "UnsupportedLayerConfigurationError",
    # Constants
    "SpriteAttr",
    "TileDefs",
    "Tilemap",
    "Balloon",
    "ReferencePoint",
]
