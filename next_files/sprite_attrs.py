"""
Sprite attribute encoding for anchor-relative (unified) hardware sprites.

One frame is encoded as:

    [nTiles:1][nPatterns:1][offsetX:int8][offsetY:int8]
    [attribute records: nTiles x 5 bytes]
    [patterns: nPatterns x 256 bytes, one palette index per pixel]

The first record is the anchor, the rest are relative to it. Pattern 0 is
always the anchor's pattern so relative pattern numbers stay small.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from data import (
    read_uint8,
    read_int8,
    write_uint8,
    write_int8,
    fits_int8,
    SPRITE_PATTERN_AREA,
    TILE_SIZE_LARGE,
)

from .anchor import deduplicate, select_anchor
from .colors import ColorQuantizer
from .constants import SpriteAttr, ReferencePoint
from .errors import (
    OffsetOutOfRangeError,
    OversizedCelError,
    TooManyPatternsError,
    TooManySpritesError,
    UnsupportedTilesetError,
)
from .sprite import Cel, Point, TileRef


@dataclass
class SpriteAttributes:
    """One 5-byte attribute record.

    x and y are grid offsets from the anchor (the anchor itself is 0, 0).
    """

    x: int
    y: int
    pattern: int
    x_flip: bool = False
    y_flip: bool = False
    rotation: bool = False
    is_anchor: bool = False
    palette: int = SpriteAttr.PALETTE_INDEX

    def to_bytes(self) -> bytes:
        """
        Encode the record.

        Anchor:   X, Y unsigned; attr2 bit0 = X MSB; attr4 = Y MSB | big sprite
        Relative: X, Y signed;   attr2 bit0 = 1;     attr4 = relative pattern | no collision
        """
        pixel_x = self.x * SpriteAttr.GRID_STEP
        pixel_y = self.y * SpriteAttr.GRID_STEP

        result = bytearray()
        if self.is_anchor:
            result.extend(write_uint8(pixel_x & 0xFF))
            result.extend(write_uint8(pixel_y & 0xFF))
        else:
            result.extend(write_int8(pixel_x))
            result.extend(write_int8(pixel_y))

        attr2_bit0 = (pixel_x & 0x100) >> 8 if self.is_anchor else SpriteAttr.RELATIVE_PALETTE
        attr2 = (
            ((self.palette & 0x0F) << 4)
            | (SpriteAttr.X_MIRROR if self.x_flip else 0)
            | (SpriteAttr.Y_MIRROR if self.y_flip else 0)
            | (SpriteAttr.ROTATE if self.rotation else 0)
            | attr2_bit0
        )
        result.extend(write_uint8(attr2))

        attr3 = (self.pattern & SpriteAttr.PATTERN_MASK) | SpriteAttr.VISIBLE_WITH_ATTR4
        result.extend(write_uint8(attr3))

        # Bits 1 to 4 stay 0 (no scaling)
        if self.is_anchor:
            attr4 = ((pixel_y & 0x100) >> 8) | SpriteAttr.BIG_SPRITE
        else:
            attr4 = SpriteAttr.RELATIVE_PATTERN | SpriteAttr.NO_COLLISION
        result.extend(write_uint8(attr4))

        return bytes(result)

    @classmethod
    def from_bytes(cls, data: bytes, offset: int = 0) -> "SpriteAttributes":
        attr2 = read_uint8(data, offset + 2)
        attr3 = read_uint8(data, offset + 3)
        attr4 = read_uint8(data, offset + 4)
        is_anchor = bool(attr4 & SpriteAttr.BIG_SPRITE)

        if is_anchor:
            pixel_x = read_uint8(data, offset) | ((attr2 & 0x01) << 8)
            pixel_y = read_uint8(data, offset + 1) | ((attr4 & 0x01) << 8)
        else:
            pixel_x = read_int8(data, offset)
            pixel_y = read_int8(data, offset + 1)

        return cls(
            x=pixel_x // SpriteAttr.GRID_STEP,
            y=pixel_y // SpriteAttr.GRID_STEP,
            pattern=attr3 & SpriteAttr.PATTERN_MASK,
            x_flip=bool(attr2 & SpriteAttr.X_MIRROR),
            y_flip=bool(attr2 & SpriteAttr.Y_MIRROR),
            rotation=bool(attr2 & SpriteAttr.ROTATE),
            is_anchor=is_anchor,
            palette=attr2 >> 4,
        )


@dataclass
class SpriteFrame:
    """Decoded form of one encoded frame."""

    offset_x: int
    offset_y: int
    records: List[SpriteAttributes] = field(default_factory=list)
    patterns: List[bytes] = field(default_factory=list)

    @property
    def size(self) -> int:
        return (
            SpriteAttr.HEADER_LENGTH
            + len(self.records) * SpriteAttr.RECORD_LENGTH
            + len(self.patterns) * SPRITE_PATTERN_AREA
        )


def frame_offset(
    cel: Cel, reference_point: Point, anchor: Optional[TileRef] = None
) -> Tuple[int, int]:
    """Anchor canvas position relative to the reference point, in pixels."""
    if anchor is None:
        anchor = select_anchor(cel)

    ref_x = reference_point[0] * cel.canvas_width
    ref_y = reference_point[1] * cel.canvas_height
    anchor_x = anchor.x * SpriteAttr.GRID_STEP + cel.x_pos
    anchor_y = anchor.y * SpriteAttr.GRID_STEP + cel.y_pos

    offset_x = anchor_x - ref_x
    offset_y = anchor_y - ref_y
    for value in (offset_x, offset_y):
        if not -0x80 <= value <= 0x7F:
            raise OffsetOutOfRangeError(
                f"Frame offset ({offset_x}, {offset_y}) does not fit in a signed byte",
                frame_index=cel.frame_index,
            )
    return int(offset_x), int(offset_y)


def build_records(cel: Cel, anchor: TileRef, remapping: dict) -> List[SpriteAttributes]:
    """Anchor record first, then the others in tilemap order."""
    ordered = [anchor] + [ref for ref in cel.tilemap if ref is not anchor]

    records = []
    for ref in ordered:
        is_anchor = ref is anchor
        dx = ref.x - anchor.x
        dy = ref.y - anchor.y
        if not is_anchor and not (
            fits_int8(dx * SpriteAttr.GRID_STEP) and fits_int8(dy * SpriteAttr.GRID_STEP)
        ):
            raise OversizedCelError(
                f"Tile at ({ref.x}, {ref.y}) is ({dx}, {dy}) tiles away from the "
                f"anchor at ({anchor.x}, {anchor.y}), outside the relative range",
                frame_index=cel.frame_index,
            )
        records.append(
            SpriteAttributes(
                x=dx,
                y=dy,
                pattern=remapping[ref.tile_index],
                x_flip=ref.x_flip,
                y_flip=ref.y_flip,
                rotation=ref.rotation,
                is_anchor=is_anchor,
            )
        )
    return records


def encode_attributes(
    cel: Cel,
    reference_point: Point = ReferencePoint.BOTTOM_CENTER,
    quantizer: Optional[ColorQuantizer] = None,
) -> bytes:
    """Encode a cel as one unified sprite frame (attributes + patterns)."""
    quantizer = quantizer or ColorQuantizer()

    if cel.tileset.tile_size != (TILE_SIZE_LARGE, TILE_SIZE_LARGE):
        raise UnsupportedTilesetError(
            f"Sprite patterns must be {TILE_SIZE_LARGE}x{TILE_SIZE_LARGE}, "
            f"got {cel.tileset.tile_width}x{cel.tileset.tile_height}",
            frame_index=cel.frame_index,
            tileset_id=cel.tileset.tileset_id,
        )

    anchor = select_anchor(cel)
    patterns = deduplicate(cel, anchor)

    if len(cel.tilemap) > SpriteAttr.MAX_SPRITES:
        raise TooManySpritesError(
            f"{len(cel.tilemap)} tiles exceed the limit of {SpriteAttr.MAX_SPRITES} sprites",
            frame_index=cel.frame_index,
        )
    if len(patterns) > SpriteAttr.MAX_PATTERNS:
        raise TooManyPatternsError(
            f"{len(patterns)} distinct patterns exceed the limit of "
            f"{SpriteAttr.MAX_PATTERNS}",
            frame_index=cel.frame_index,
            tileset_id=cel.tileset.tileset_id,
        )

    remapping = {tile.tile_index: index for index, tile in enumerate(patterns)}
    records = build_records(cel, anchor, remapping)
    offset_x, offset_y = frame_offset(cel, reference_point, anchor)

    buffer = bytearray()
    buffer.extend(write_uint8(len(records)))
    buffer.extend(write_uint8(len(patterns)))
    buffer.extend(write_int8(offset_x))
    buffer.extend(write_int8(offset_y))

    for record in records:
        buffer.extend(record.to_bytes())

    for tile in patterns:
        buffer.extend(quantizer.pixel_bytes(tile).tobytes())

    return bytes(buffer)


def decode_attributes(data: bytes, offset: int = 0) -> SpriteFrame:
    """Parse one encoded frame starting at offset."""
    n_tiles = read_uint8(data, offset)
    n_patterns = read_uint8(data, offset + 1)
    frame = SpriteFrame(
        offset_x=read_int8(data, offset + 2),
        offset_y=read_int8(data, offset + 3),
    )

    pos = offset + SpriteAttr.HEADER_LENGTH
    for _ in range(n_tiles):
        frame.records.append(SpriteAttributes.from_bytes(data, pos))
        pos += SpriteAttr.RECORD_LENGTH

    for _ in range(n_patterns):
        pattern = bytes(data[pos : pos + SPRITE_PATTERN_AREA])
        if len(pattern) != SPRITE_PATTERN_AREA:
            raise ValueError(f"Truncated pattern data at offset {pos}")
        frame.patterns.append(pattern)
        pos += SPRITE_PATTERN_AREA

    return frame


def decode_sprite_file(data: bytes) -> List[SpriteFrame]:
    """Parse a whole sprite file: [nFrames:1] followed by the frames."""
    n_frames = read_uint8(data, 0)
    frames = []
    pos = 1
    for _ in range(n_frames):
        frame = decode_attributes(data, pos)
        frames.append(frame)
        pos += frame.size
    return frames
