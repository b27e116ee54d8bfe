# Default output suffixes, appended to the input file stem
DEFAULT_SUFFIXES = {
    "layer_bitmap": "{frame}.l2",
    "sprite_attributes": ".sp",
    "tile_definitions": ".til",
    "tilemap": ".map",
    "palette": ".pal",
    "bitmap": ".bmp8",
    "balloon_map": ".blm",
}

ASEPRITE_SUFFIXES = (".aseprite", ".ase")

PREVIEW_SUFFIX = ".png"
