"""
RGBA to 256 color (RRRGGGBB) quantization.
"""

import numpy as np
from typing import Sequence, Tuple

from data import DEFAULT_TRANSPARENT_INDEX, DEFAULT_ALTERNATIVE_INDEX

from .sprite import ColorMode, Tile


class ColorQuantizer:
    """Maps RGBA colors to 8-bit palette indexes using a fixed 3-3-2 layout.

    Fully transparent colors map to transparent_index. An opaque color whose
    index collides with transparent_index is moved to alternative_index so it
    does not render as transparent.
    """

    def __init__(
        self,
        transparent_index: int = DEFAULT_TRANSPARENT_INDEX,
        alternative_index: int = DEFAULT_ALTERNATIVE_INDEX,
    ):
        for name, value in (
            ("transparent_index", transparent_index),
            ("alternative_index", alternative_index),
        ):
            if not 0 <= value <= 0xFF:
                raise ValueError(f"{name} must be in range [0, 255], got {value}")
        self.transparent_index = transparent_index
        self.alternative_index = alternative_index

    def __call__(self, color: Sequence[int]) -> int:
        r, g, b, a = (int(c) for c in color)
        if a == 0:
            return self.transparent_index
        index = (r & 0b11100000) | ((g & 0b11100000) >> 3) | ((b & 0b11000000) >> 6)
        return self.alternative_index if index == self.transparent_index else index

    def quantize_array(self, colors: np.ndarray) -> np.ndarray:
        """Vectorized form of __call__ for arrays shaped (..., 4)."""
        colors = np.asarray(colors, dtype=np.uint8)
        r, g, b, a = (colors[..., i] for i in range(4))
        index = (r & 0b11100000) | ((g & 0b11100000) >> 3) | ((b & 0b11000000) >> 6)
        index = np.where(
            index == self.transparent_index, self.alternative_index, index
        )
        index = np.where(a == 0, self.transparent_index, index)
        return index.astype(np.uint8)

    def pixel_bytes(self, tile: Tile) -> np.ndarray:
        """Tile content as one byte per pixel.

        Indexed content already holds palette indexes and passes through.
        """
        if tile.color_mode is ColorMode.INDEXED:
            return tile.content
        return self.quantize_array(tile.content)

    def __repr__(self) -> str:
        return (
            f"ColorQuantizer(transparent_index={self.transparent_index}, "
            f"alternative_index={self.alternative_index})"
        )


def decode_color(index: int) -> Tuple[int, int, int]:
    """Expand an RRRGGGBB index back to 8-bit RGB."""
    return index & 0b11100000, (index & 0b00011100) << 3, (index & 0b00000011) << 6
