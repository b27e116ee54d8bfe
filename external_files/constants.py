class AsepriteFormat:
    """Aseprite file layout constants."""

    HEADER_LENGTH = 128
    HEADER_MAGIC = 0xA5E0
    FRAME_HEADER_LENGTH = 16
    FRAME_MAGIC = 0xF1FA
    CHUNK_HEADER_LENGTH = 6
    CEL_HEADER_LENGTH = 16

    COLOR_DEPTH_INDEXED = 8
    COLOR_DEPTH_RGBA = 32


class ChunkType:
    OLD_PALETTE = 0x0004
    LAYER = 0x2004
    CEL = 0x2005
    TAGS = 0x2018
    PALETTE = 0x2019
    TILESET = 0x2023


class LayerType:
    NORMAL = 0
    TILEMAP = 2


class LayerFlag:
    VISIBLE = 0x01


class CelType:
    RAW_IMAGE = 0
    LINKED = 1
    COMPRESSED_IMAGE = 2
    COMPRESSED_TILEMAP = 3


class TilesetFlag:
    EXTERNAL_FILE = 0x01
    INTERNAL_TILES = 0x02


class PaletteEntryFlag:
    HAS_NAME = 0x01


# Frames inside a tag with this name are never exported
OMIT_TAG = "omit"

# Tile size used when splitting merged image layers
MERGED_TILE_SIZE = 16
