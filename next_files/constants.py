"""
ZX Next hardware format constants.
"""


class SpriteAttr:
    RECORD_LENGTH = 5
    HEADER_LENGTH = 4
    # Pixel distance covered by one grid step of a 16x16 sprite
    GRID_STEP = 16
    MAX_GRID_SIZE = 16
    ANCHOR_WINDOW = 8
    PATTERN_MASK = 0x3F
    MAX_PATTERNS = 63
    MAX_SPRITES = 0xFF
    PALETTE_INDEX = 0

    # attr2
    X_MIRROR = 0x08
    Y_MIRROR = 0x04
    ROTATE = 0x02
    RELATIVE_PALETTE = 0x01

    # attr3
    VISIBLE_WITH_ATTR4 = 0xC0

    # attr4
    RELATIVE_PATTERN = 0x01
    BIG_SPRITE = 0x20
    NO_COLLISION = 0x40


class TileDefs:
    SUPPORTED_SIZES = ((8, 8), (16, 16))
    NIBBLE_MASK = 0x0F
    QUADRANT_AREA = 64


class Tilemap:
    TILE_SIZE = 8
    EMPTY_TILE = 0
    MAX_INDEX_8BIT = 0xFF
    MAX_INDEX_16BIT = 0xFFFF


class Balloon:
    MAP_X = 19
    MAP_Y = 5
    WIDTH = 13
    HEIGHT = 4
    PALETTE = 2


class ReferencePoint:
    """Normalized canvas positions usable as the logical sprite origin."""

    TOP_LEFT = (0.0, 0.0)
    TOP_CENTER = (0.5, 0.0)
    TOP_RIGHT = (1.0, 0.0)
    BOTTOM_LEFT = (0.0, 1.0)
    BOTTOM_CENTER = (0.5, 1.0)
    BOTTOM_RIGHT = (1.0, 1.0)
    CENTER = (0.5, 0.5)

    BY_NAME = {
        "top-left": TOP_LEFT,
        "top-center": TOP_CENTER,
        "top-right": TOP_RIGHT,
        "bottom-left": BOTTOM_LEFT,
        "bottom-center": BOTTOM_CENTER,
        "bottom-right": BOTTOM_RIGHT,
        "center": CENTER,
    }
