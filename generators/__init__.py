"""
Next Assets Generators Module

This module provides the export pipelines run by the command line tool
"""

from .sprite_exporter import report_frame_count, export_sprite_attributes

from .tile_exporter import (
    export_tile_definitions,
    export_tilemap,
    export_balloon_map,
)

from .bitmap_exporter import (
    export_layer_bitmaps,
    export_bitmap,
    export_palettes,
)

from .utils import (
    ExportOptions,
    load_input,
    validate_aseprite_input,
    process_single,
    process_multiple,
    process_batch,
)

from .constants import DEFAULT_SUFFIXES

__all__ = [
    # Sprite exporters
    "report_frame_count",
    "export_sprite_attributes",
    # Tile exporters
    "export_tile_definitions",
    "export_tilemap",
    "export_balloon_map",
    # Bitmap exporters
    "export_layer_bitmaps",
    "export_bitmap",
    "export_palettes",
    # Utils functions
    "ExportOptions",
    "load_input",
    "validate_aseprite_input",
    "process_single",
    "process_multiple",
    "process_batch",
    # Constants
    "DEFAULT_SUFFIXES",
]
