"""
Errors raised while encoding documents into Next asset formats.

Every encoding error is fatal for the command that triggered it: hardware
consumers cannot tolerate malformed records, so nothing is written.
"""

from typing import Optional


class NextAssetError(Exception):
    """Base error. Carries optional frame, layer and tileset context."""

    def __init__(
        self,
        message: str,
        frame_index: Optional[int] = None,
        layer_name: Optional[str] = None,
        tileset_id: Optional[int] = None,
    ):
        self.message = message
        self.frame_index = frame_index
        self.layer_name = layer_name
        self.tileset_id = tileset_id
        super().__init__(self._format())

    def _format(self) -> str:
        context = []
        if self.layer_name is not None:
            context.append(f"layer '{self.layer_name}'")
        if self.frame_index is not None:
            context.append(f"frame {self.frame_index}")
        if self.tileset_id is not None:
            context.append(f"tileset {self.tileset_id}")
        if not context:
            return self.message
        return f"{self.message} ({', '.join(context)})"

    def with_context(
        self,
        frame_index: Optional[int] = None,
        layer_name: Optional[str] = None,
        tileset_id: Optional[int] = None,
    ) -> "NextAssetError":
        """Fill in missing context fields and refresh the message."""
        if self.frame_index is None:
            self.frame_index = frame_index
        if self.layer_name is None:
            self.layer_name = layer_name
        if self.tileset_id is None:
            self.tileset_id = tileset_id
        self.args = (self._format(),)
        return self

    def __str__(self) -> str:
        return self._format()


class OversizedCelError(NextAssetError):
    """Cel grid too large for anchor-relative sprite encoding."""


class EmptyCelError(NextAssetError):
    """No tile of the cel can act as anchor."""


class TooManyPatternsError(NextAssetError):
    """More distinct patterns than the 6-bit pattern field can address."""


class TooManySpritesError(NextAssetError):
    """More tile references than the one-byte sprite count can hold."""


class OffsetOutOfRangeError(NextAssetError):
    """Frame offset does not fit in a signed byte."""


class UnsupportedTilesetError(NextAssetError):
    """Wrong color mode or tile size for the requested serializer."""


class MissingPaletteError(NextAssetError):
    """Palette export requested but no input carries a palette."""


class UnsupportedLayerConfigurationError(NextAssetError):
    """Tilemap export requested on a layer without 8x8 tiles."""
