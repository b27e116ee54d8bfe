"""
Document model shared by the loader and every encoder.

Entities are built once by the loader and treated as read-only snapshots.
Tiles live in a per-tileset arena; tile references only hold a tile index.
"""

import numpy as np
from enum import Enum
from typing import Dict, List, Optional, Tuple
from dataclasses import dataclass, field

RGBAColor = Tuple[int, int, int, int]
Point = Tuple[float, float]


class ColorMode(Enum):
    INDEXED = "indexed"
    RGBA = "rgba"


@dataclass(eq=False)
class Tile:
    """Pixel content of one pattern.

    content is a flat uint8 array: shape (side*side,) for indexed tiles,
    (side*side, 4) for RGBA tiles.
    """

    tile_index: int
    content: np.ndarray

    def __post_init__(self):
        self.content = np.array(self.content, dtype=np.uint8)
        self.content.flags.writeable = False

    @property
    def color_mode(self) -> ColorMode:
        return ColorMode.RGBA if self.content.ndim == 2 else ColorMode.INDEXED


@dataclass(eq=False)
class Tileset:
    """Arena of tiles drawn by a layer. Never mixes color modes."""

    tileset_id: int
    tile_width: int
    tile_height: int
    color_mode: ColorMode
    tiles: List[Tile] = field(default_factory=list)
    _by_index: Dict[int, Tile] = field(init=False, repr=False)

    def __post_init__(self):
        self._by_index = {}
        area = self.tile_width * self.tile_height
        for tile in self.tiles:
            if tile.color_mode is not self.color_mode:
                raise ValueError(
                    f"Tileset {self.tileset_id}: tile {tile.tile_index} is "
                    f"{tile.color_mode.value}, expected {self.color_mode.value}"
                )
            if tile.content.shape[0] != area:
                raise ValueError(
                    f"Tileset {self.tileset_id}: tile {tile.tile_index} has "
                    f"{tile.content.shape[0]} pixels, expected {area}"
                )
            if tile.tile_index in self._by_index:
                raise ValueError(
                    f"Tileset {self.tileset_id}: duplicated tile index {tile.tile_index}"
                )
            self._by_index[tile.tile_index] = tile

    @property
    def is_indexed(self) -> bool:
        return self.color_mode is ColorMode.INDEXED

    @property
    def tile_size(self) -> Tuple[int, int]:
        return self.tile_width, self.tile_height

    def get(self, tile_index: int) -> Tile:
        return self._by_index[tile_index]


@dataclass(eq=False)
class TileRef:
    """Placement of a tile at a cel-local grid cell."""

    x: int
    y: int
    tile_index: int
    x_flip: bool = False
    y_flip: bool = False
    rotation: bool = False


@dataclass
class Frame:
    frame_index: int
    duration: int = 100


@dataclass(eq=False)
class Cel:
    """One frame of one layer.

    width and height are the grid size in tiles. x_pos and y_pos place the
    grid on the canvas, in pixels. tilemap keeps scan order.
    """

    frame_index: int
    canvas_width: int
    canvas_height: int
    width: int
    height: int
    tileset: Tileset
    x_pos: int = 0
    y_pos: int = 0
    tilemap: List[TileRef] = field(default_factory=list)
    _by_position: Dict[Tuple[int, int], TileRef] = field(init=False, repr=False)

    def __post_init__(self):
        self._by_position = {}
        for ref in self.tilemap:
            position = (ref.x, ref.y)
            if position in self._by_position:
                raise ValueError(
                    f"Cel of frame {self.frame_index}: two tiles at {position}"
                )
            self._by_position[position] = ref

    def tile(self, ref: TileRef) -> Tile:
        return self.tileset.get(ref.tile_index)

    def tile_at(self, x: int, y: int) -> Optional[TileRef]:
        return self._by_position.get((x, y))

    @property
    def is_empty(self) -> bool:
        return not self.tilemap


@dataclass(eq=False)
class Layer:
    layer_index: int
    name: str
    cels: List[Cel] = field(default_factory=list)
    tileset: Optional[Tileset] = None


@dataclass(eq=False)
class Palette:
    """Ordered RGBA colors, shape (n, 4)."""

    colors: np.ndarray

    def __post_init__(self):
        self.colors = np.asarray(self.colors, dtype=np.uint8).reshape(-1, 4)

    def __len__(self) -> int:
        return self.colors.shape[0]


@dataclass(eq=False)
class Sprite:
    """Root of a loaded document."""

    name: str
    width: int
    height: int
    layers: List[Layer] = field(default_factory=list)
    frames: List[Frame] = field(default_factory=list)
    tilesets: List[Tileset] = field(default_factory=list)
    palette: Optional[Palette] = None

    def first_layer(self) -> Layer:
        if not self.layers:
            raise ValueError(f"Sprite '{self.name}' has no visible layers")
        return self.layers[0]
