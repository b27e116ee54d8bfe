"""
Anchor selection and pattern deduplication for anchor-relative sprites.

Relative sprite coordinates are signed bytes, so every tile must sit within
-128..+127 pixels of the anchor. For grids up to 16x16 tiles the anchor is
taken from the bottom-right area of the grid:

     0  1  2  3  4  5  6  7  8  9 10 11 12 13 14 15
                             A
    -8 -7 -6 -5 -4 -3 -2 -1  0 +1 +2 +3 +4 +5 +6 +7
"""

from typing import List

from .constants import SpriteAttr
from .errors import EmptyCelError, OversizedCelError
from .sprite import Cel, Tile, TileRef


def select_anchor(cel: Cel) -> TileRef:
    """Return the first tile (in tilemap order) inside the anchor window.

    Raises:
        OversizedCelError: the grid is wider or taller than 16 tiles
        EmptyCelError: the cel has no tiles or none lies inside the anchor window
    """
    if cel.width > SpriteAttr.MAX_GRID_SIZE or cel.height > SpriteAttr.MAX_GRID_SIZE:
        raise OversizedCelError(
            f"Tile grid {cel.width}x{cel.height} exceeds "
            f"{SpriteAttr.MAX_GRID_SIZE}x{SpriteAttr.MAX_GRID_SIZE}, "
            "cannot be converted to a unified sprite",
            frame_index=cel.frame_index,
        )

    min_x = max(0, cel.width - SpriteAttr.ANCHOR_WINDOW)
    min_y = max(0, cel.height - SpriteAttr.ANCHOR_WINDOW)

    if cel.is_empty:
        raise EmptyCelError(
            "All tiles are empty: no anchor can be used", frame_index=cel.frame_index
        )

    for ref in cel.tilemap:
        if ref.x >= min_x and ref.y >= min_y:
            return ref

    raise EmptyCelError(
        f"No tile inside the anchor window from ({min_x}, {min_y}): "
        "no anchor can be used",
        frame_index=cel.frame_index,
    )


def deduplicate(cel: Cel, anchor: TileRef) -> List[Tile]:
    """Distinct patterns of the cel, anchor pattern first, then first-seen order."""
    patterns = [cel.tile(anchor)]
    seen = {anchor.tile_index}
    for ref in cel.tilemap:
        if ref.tile_index not in seen:
            seen.add(ref.tile_index)
            patterns.append(cel.tile(ref))
    return patterns


def count_patterns(cel: Cel) -> int:
    return len({ref.tile_index for ref in cel.tilemap})
