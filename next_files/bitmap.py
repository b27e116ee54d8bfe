"""
Palette and full-canvas bitmap serialization (one byte per color or pixel).
"""

import numpy as np
from enum import Enum
from typing import Optional

from .colors import ColorQuantizer
from .sprite import Cel, Palette


class RasterOrder(Enum):
    """Pixel traversal used when flattening a canvas."""

    ROW_MAJOR = "row"
    COLUMN_MAJOR = "column"

    def flatten(self, image: np.ndarray) -> bytes:
        """Flatten an (height, width) array in this order."""
        if self is RasterOrder.COLUMN_MAJOR:
            return np.ascontiguousarray(image.T).tobytes()
        return np.ascontiguousarray(image).tobytes()


def serialize_palette(palette: Palette, quantizer: Optional[ColorQuantizer] = None) -> bytes:
    quantizer = quantizer or ColorQuantizer()
    return quantizer.quantize_array(palette.colors).tobytes()


def render_cel(cel: Cel, quantizer: Optional[ColorQuantizer] = None) -> np.ndarray:
    """Quantized canvas of one cel, shape (canvas_height, canvas_width).

    Pixels not covered by any tile are 0 whatever the color mode. Tile
    transforms are not applied: pixels are taken from the pattern as stored.
    """
    quantizer = quantizer or ColorQuantizer()
    tileset = cel.tileset
    image = np.zeros((cel.canvas_height, cel.canvas_width), dtype=np.uint8)

    tile_width, tile_height = tileset.tile_width, tileset.tile_height
    for ref in cel.tilemap:
        pixels = quantizer.pixel_bytes(cel.tile(ref)).reshape(tile_height, tile_width)

        left = cel.x_pos + ref.x * tile_width
        top = cel.y_pos + ref.y * tile_height

        # Clip to the canvas
        x0, y0 = max(left, 0), max(top, 0)
        x1 = min(left + tile_width, cel.canvas_width)
        y1 = min(top + tile_height, cel.canvas_height)
        if x0 >= x1 or y0 >= y1:
            continue
        image[y0:y1, x0:x1] = pixels[y0 - top : y1 - top, x0 - left : x1 - left]

    return image


def serialize_bitmap(
    cel: Cel,
    order: RasterOrder = RasterOrder.ROW_MAJOR,
    quantizer: Optional[ColorQuantizer] = None,
) -> bytes:
    """Every canvas pixel of the cel, one byte each, in the given order."""
    return order.flatten(render_cel(cel, quantizer))
