SEPARATOR_LINE_LENGTH = 60

# Tile sides supported by the hardware
TILE_SIZE_SMALL = 8
TILE_SIZE_LARGE = 16

# Pixels in one 16x16 sprite pattern
SPRITE_PATTERN_AREA = TILE_SIZE_LARGE * TILE_SIZE_LARGE

FRAME_PLACEHOLDER = "{frame}"
