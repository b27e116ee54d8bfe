"""
PNG previews of quantized Next bitmaps.
"""

import numpy as np
from pathlib import Path
from PIL import Image

from next_files import RasterOrder, decode_color


def bitmap_to_image(
    buffer: bytes,
    width: int,
    height: int,
    order: RasterOrder = RasterOrder.ROW_MAJOR,
) -> Image.Image:
    """Build a palettized image from a one byte per pixel bitmap.

    Args:
        buffer: Bitmap bytes, RRRGGGBB per pixel
        width: Canvas width in pixels
        height: Canvas height in pixels
        order: Traversal the buffer was written with
    """
    pixels = np.frombuffer(buffer, dtype=np.uint8, count=width * height)
    if order is RasterOrder.COLUMN_MAJOR:
        pixel_arr = pixels.reshape(width, height).T
    else:
        pixel_arr = pixels.reshape(height, width)

    img = Image.fromarray(np.ascontiguousarray(pixel_arr))
    img.putpalette([value for index in range(256) for value in decode_color(index)])
    return img


def export_bitmap_png(
    buffer: bytes,
    width: int,
    height: int,
    path: Path,
    order: RasterOrder = RasterOrder.ROW_MAJOR,
) -> None:
    """Save a bitmap as a PNG preview, converting colors back to RGB."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    bitmap_to_image(buffer, width, height, order).convert("RGB").save(path, "PNG")
