"""
External files module for reading Aseprite documents and writing PNG previews.
"""

from .aseprite_reader import (
    load_sprite,
    AsepriteParser,
    AsepriteFormatError,
)
from .images import bitmap_to_image, export_bitmap_png

__all__ = [
    "load_sprite",
    "AsepriteParser",
    "AsepriteFormatError",
    "bitmap_to_image",
    "export_bitmap_png",
]
