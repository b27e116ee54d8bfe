"""
Aseprite file reader.

Only the chunks needed by the Next exporters are decoded: palettes, layers,
cels, tags and tilesets with internal tiles. Visible tilemap layers are kept
as they are; visible image layers are merged and cut into 16x16 RGBA tiles.
"""

import struct
import zlib
import numpy as np
import xxhash
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from data import (
    config,
    read_uint32,
    read_uint16,
    read_uint8,
    read_int16,
    read_file_to_bytes,
)
from next_files import (
    ColorMode,
    Tile,
    Tileset,
    TileRef,
    Cel,
    Layer,
    Frame,
    Palette,
    Sprite,
    NextAssetError,
)
from .constants import (
    AsepriteFormat,
    ChunkType,
    LayerType,
    LayerFlag,
    CelType,
    TilesetFlag,
    PaletteEntryFlag,
    OMIT_TAG,
    MERGED_TILE_SIZE,
)


class AsepriteFormatError(NextAssetError):
    """Malformed or unsupported Aseprite file."""


def _read_string(data: bytes, offset: int) -> Tuple[str, int]:
    """Read a length prefixed UTF-8 string, returning it and the next offset."""
    length = read_uint16(data, offset)
    start = offset + 2
    return data[start : start + length].decode("utf-8"), start + length


class AsepriteHeader:
    """Aseprite file header (128 bytes)."""

    def __init__(self):
        self.file_size = 0
        self.frame_count = 0
        self.width = 0
        self.height = 0
        self.color_depth = 0
        self.flags = 0
        self.transparent_index = 0
        self.color_count = 0

    @classmethod
    def read_from_bytes(cls, data: bytes, offset: int = 0) -> "AsepriteHeader":
        """Read file header from bytes."""
        magic = read_uint16(data, offset + 4)
        if magic != AsepriteFormat.HEADER_MAGIC:
            raise AsepriteFormatError(f"Invalid header magic 0x{magic:04X}")

        header = cls()
        header.file_size = read_uint32(data, offset)
        header.frame_count = read_uint16(data, offset + 6)
        header.width = read_uint16(data, offset + 8)
        header.height = read_uint16(data, offset + 10)
        header.color_depth = read_uint16(data, offset + 12)
        header.flags = read_uint32(data, offset + 14)
        header.transparent_index = read_uint8(data, offset + 28)
        header.color_count = read_uint16(data, offset + 32)
        return header

    @property
    def bytes_per_pixel(self) -> int:
        return self.color_depth // 8

    @property
    def is_indexed(self) -> bool:
        return self.color_depth == AsepriteFormat.COLOR_DEPTH_INDEXED


class FrameHeader:
    """Frame header (16 bytes)."""

    def __init__(self):
        self.frame_size = 0
        self.duration = 0
        self.chunk_count = 0

    @classmethod
    def read_from_bytes(cls, data: bytes, offset: int) -> "FrameHeader":
        """Read frame header from bytes."""
        magic = read_uint16(data, offset + 4)
        if magic != AsepriteFormat.FRAME_MAGIC:
            raise AsepriteFormatError(
                f"Invalid frame magic 0x{magic:04X} at offset {offset}"
            )

        header = cls()
        header.frame_size = read_uint32(data, offset)
        old_chunk_count = read_uint16(data, offset + 6)
        header.duration = read_uint16(data, offset + 8)
        new_chunk_count = read_uint32(data, offset + 12)
        # The old field saturates at 0xFFFF, the new one is 0 in old files
        header.chunk_count = new_chunk_count or old_chunk_count
        return header


class LayerChunk:
    """Layer chunk (0x2004). Layers are numbered by order of appearance."""

    def __init__(self):
        self.layer_index = 0
        self.flags = 0
        self.layer_type = LayerType.NORMAL
        self.child_level = 0
        self.name = ""
        self.tileset_index: Optional[int] = None

    @classmethod
    def read_from_bytes(
        cls, data: bytes, offset: int, layer_index: int
    ) -> "LayerChunk":
        """Read layer chunk data from bytes."""
        layer = cls()
        layer.layer_index = layer_index
        layer.flags = read_uint16(data, offset)
        layer.layer_type = read_uint16(data, offset + 2)
        layer.child_level = read_uint16(data, offset + 4)
        layer.name, next_offset = _read_string(data, offset + 16)
        if layer.layer_type == LayerType.TILEMAP:
            layer.tileset_index = read_uint32(data, next_offset)
        return layer

    @property
    def is_visible(self) -> bool:
        return bool(self.flags & LayerFlag.VISIBLE)

    @property
    def is_tilemap(self) -> bool:
        return self.layer_type == LayerType.TILEMAP


class CelChunk:
    """Cel chunk (0x2005) with its pixel or tile data decompressed."""

    def __init__(self):
        self.layer_index = 0
        self.x = 0
        self.y = 0
        self.cel_type = CelType.RAW_IMAGE
        self.width = 0
        self.height = 0
        self.linked_frame = 0
        self.data = b""
        # Tilemap cels only
        self.bits_per_tile = 32
        self.tile_id_mask = 0
        self.x_flip_mask = 0
        self.y_flip_mask = 0
        self.rotation_mask = 0

    @classmethod
    def read_from_bytes(cls, data: bytes, offset: int, end: int) -> "CelChunk":
        """Read cel chunk data from bytes."""
        cel = cls()
        cel.layer_index = read_uint16(data, offset)
        cel.x = read_int16(data, offset + 2)
        cel.y = read_int16(data, offset + 4)
        cel.cel_type = read_uint16(data, offset + 7)

        body = offset + AsepriteFormat.CEL_HEADER_LENGTH
        if cel.cel_type == CelType.LINKED:
            cel.linked_frame = read_uint16(data, body)
            return cel

        cel.width = read_uint16(data, body)
        cel.height = read_uint16(data, body + 2)

        if cel.cel_type == CelType.RAW_IMAGE:
            cel.data = bytes(data[body + 4 : end])
        elif cel.cel_type == CelType.COMPRESSED_IMAGE:
            cel.data = zlib.decompress(data[body + 4 : end])
        elif cel.cel_type == CelType.COMPRESSED_TILEMAP:
            cel.bits_per_tile = read_uint16(data, body + 4)
            cel.tile_id_mask = read_uint32(data, body + 6)
            cel.x_flip_mask = read_uint32(data, body + 10)
            cel.y_flip_mask = read_uint32(data, body + 14)
            cel.rotation_mask = read_uint32(data, body + 18)
            cel.data = zlib.decompress(data[body + 32 : end])
        else:
            raise AsepriteFormatError(f"Unknown cel type {cel.cel_type}")
        return cel

    @property
    def is_tilemap(self) -> bool:
        return self.cel_type == CelType.COMPRESSED_TILEMAP

    def tile_values(self) -> np.ndarray:
        """Raw tile values in scan order."""
        dtype = np.dtype(f"<u{self.bits_per_tile // 8}")
        count = self.width * self.height
        return np.frombuffer(self.data, dtype=dtype, count=count)


class TilesetChunk:
    """Tileset chunk (0x2023). Tiles are stored as one vertical strip."""

    def __init__(self):
        self.tileset_id = 0
        self.flags = 0
        self.tile_count = 0
        self.tile_width = 0
        self.tile_height = 0
        self.name = ""
        self.data = b""

    @classmethod
    def read_from_bytes(cls, data: bytes, offset: int) -> "TilesetChunk":
        """Read tileset chunk data from bytes."""
        tileset = cls()
        tileset.tileset_id = read_uint32(data, offset)
        tileset.flags = read_uint32(data, offset + 4)
        tileset.tile_count = read_uint32(data, offset + 8)
        tileset.tile_width = read_uint16(data, offset + 12)
        tileset.tile_height = read_uint16(data, offset + 14)
        tileset.name, next_offset = _read_string(data, offset + 32)

        if tileset.flags & TilesetFlag.EXTERNAL_FILE:
            next_offset += 8
        if tileset.flags & TilesetFlag.INTERNAL_TILES:
            length = read_uint32(data, next_offset)
            start = next_offset + 4
            tileset.data = zlib.decompress(data[start : start + length])
        return tileset

    @property
    def has_internal_tiles(self) -> bool:
        return bool(self.flags & TilesetFlag.INTERNAL_TILES)


def read_tags(data: bytes, offset: int) -> List[Tuple[str, int, int]]:
    """Read a tags chunk (0x2018) as (name, from_frame, to_frame) tuples."""
    count = read_uint16(data, offset)
    tags = []
    offset += 10
    for _ in range(count):
        from_frame = read_uint16(data, offset)
        to_frame = read_uint16(data, offset + 2)
        name, offset = _read_string(data, offset + 17)
        tags.append((name, from_frame, to_frame))
    return tags


def read_palette(data: bytes, offset: int, colors: np.ndarray) -> np.ndarray:
    """Apply a palette chunk (0x2019) to colors, growing it when needed."""
    size = read_uint32(data, offset)
    first = read_uint32(data, offset + 4)
    last = read_uint32(data, offset + 8)

    if colors.shape[0] < size:
        grown = np.zeros((size, 4), dtype=np.uint8)
        grown[: colors.shape[0]] = colors
        colors = grown

    offset += 20
    for index in range(first, last + 1):
        flags = read_uint16(data, offset)
        colors[index] = tuple(data[offset + 2 : offset + 6])
        offset += 6
        if flags & PaletteEntryFlag.HAS_NAME:
            _, offset = _read_string(data, offset)
    return colors


def read_old_palette(data: bytes, offset: int) -> np.ndarray:
    """Read an old palette chunk (0x0004). Colors are opaque."""
    packet_count = read_uint16(data, offset)
    colors = np.zeros((256, 4), dtype=np.uint8)
    index = 0
    last = 0
    offset += 2
    for _ in range(packet_count):
        index += read_uint8(data, offset)
        count = read_uint8(data, offset + 1) or 256
        offset += 2
        for _ in range(count):
            colors[index] = (*data[offset : offset + 3], 0xFF)
            index += 1
            offset += 3
        last = max(last, index)
    return colors[:last]


class AsepriteParser:
    """Parser for Aseprite files."""

    def __init__(self, rawdata: bytes, name: str):
        """Initialize parser with raw file data and the document name."""
        self.rawdata = rawdata
        self.name = name
        self.header: Optional[AsepriteHeader] = None
        self.frames: List[Frame] = []
        self.layers: List[LayerChunk] = []
        self.cels: Dict[Tuple[int, int], CelChunk] = {}
        self.tilesets: Dict[int, TilesetChunk] = {}
        self.tags: List[Tuple[str, int, int]] = []
        self.colors: Optional[np.ndarray] = None
        self.old_colors: Optional[np.ndarray] = None

    def parse(self, dedupe_tiles: bool = False) -> Sprite:
        """Parse the file into a Sprite.

        Args:
            dedupe_tiles: Share one tile for identical merged image tiles
        """
        try:
            self._read_chunks()
            palette = self._build_palette()
            tilesets = {
                tileset_id: self._build_tileset(chunk)
                for tileset_id, chunk in self.tilesets.items()
            }
            layers = self._build_layers(tilesets, palette, dedupe_tiles)
        except (struct.error, zlib.error, IndexError, ValueError) as e:
            raise AsepriteFormatError(f"Error parsing '{self.name}': {e}") from e

        return Sprite(
            name=self.name,
            width=self.header.width,
            height=self.header.height,
            layers=layers,
            frames=self._kept_frames(),
            tilesets=list(tilesets.values()),
            palette=palette,
        )

    def _read_chunks(self) -> None:
        """Read the header and index every chunk of interest."""
        self.header = AsepriteHeader.read_from_bytes(self.rawdata)
        if self.header.color_depth not in (
            AsepriteFormat.COLOR_DEPTH_INDEXED,
            AsepriteFormat.COLOR_DEPTH_RGBA,
        ):
            raise AsepriteFormatError(
                f"'{self.name}': unsupported color depth {self.header.color_depth}"
            )

        offset = AsepriteFormat.HEADER_LENGTH
        for frame_index in range(self.header.frame_count):
            frame_header = FrameHeader.read_from_bytes(self.rawdata, offset)
            self.frames.append(Frame(frame_index, frame_header.duration))

            chunk_offset = offset + AsepriteFormat.FRAME_HEADER_LENGTH
            for _ in range(frame_header.chunk_count):
                chunk_size = read_uint32(self.rawdata, chunk_offset)
                chunk_type = read_uint16(self.rawdata, chunk_offset + 4)
                self._read_chunk(
                    chunk_type,
                    chunk_offset + AsepriteFormat.CHUNK_HEADER_LENGTH,
                    chunk_offset + chunk_size,
                    frame_index,
                )
                chunk_offset += chunk_size

            offset += frame_header.frame_size

    def _read_chunk(
        self, chunk_type: int, offset: int, end: int, frame_index: int
    ) -> None:
        data = self.rawdata
        if chunk_type == ChunkType.LAYER:
            self.layers.append(
                LayerChunk.read_from_bytes(data, offset, len(self.layers))
            )
        elif chunk_type == ChunkType.CEL:
            cel = CelChunk.read_from_bytes(data, offset, end)
            self.cels[(frame_index, cel.layer_index)] = cel
        elif chunk_type == ChunkType.TILESET:
            tileset = TilesetChunk.read_from_bytes(data, offset)
            self.tilesets[tileset.tileset_id] = tileset
        elif chunk_type == ChunkType.TAGS:
            self.tags.extend(read_tags(data, offset))
        elif chunk_type == ChunkType.PALETTE:
            if self.colors is None:
                self.colors = np.zeros((0, 4), dtype=np.uint8)
            self.colors = read_palette(data, offset, self.colors)
        elif chunk_type == ChunkType.OLD_PALETTE:
            self.old_colors = read_old_palette(data, offset)
        elif config.DEBUG:
            print(f"[DEBUG] {self.name}: skipping chunk 0x{chunk_type:04X}")

    def _omitted_frames(self) -> set:
        omitted = set()
        for name, from_frame, to_frame in self.tags:
            if name == OMIT_TAG:
                omitted.update(range(from_frame, to_frame + 1))
        return omitted

    def _kept_frames(self) -> List[Frame]:
        omitted = self._omitted_frames()
        return [frame for frame in self.frames if frame.frame_index not in omitted]

    def _build_palette(self) -> Optional[Palette]:
        if self.colors is not None:
            return Palette(self.colors)
        if self.old_colors is None:
            return None

        colors = self.old_colors.copy()
        if self.header.transparent_index < colors.shape[0]:
            colors[self.header.transparent_index, 3] = 0
        return Palette(colors)

    def _build_tileset(self, chunk: TilesetChunk) -> Tileset:
        """Convert a tileset chunk into the document model.

        Indexed tilesets keep the Aseprite tile ids (tile 0 is the empty
        tile), RGBA tilesets drop the empty tile and number from 0.
        """
        if not chunk.has_internal_tiles:
            raise AsepriteFormatError(
                f"'{self.name}': tileset has no internal tiles",
                tileset_id=chunk.tileset_id,
            )

        area = chunk.tile_width * chunk.tile_height
        pixels = np.frombuffer(chunk.data, dtype=np.uint8)
        expected = area * chunk.tile_count * self.header.bytes_per_pixel
        if pixels.size < expected:
            raise AsepriteFormatError(
                f"'{self.name}': tileset data is {pixels.size} bytes, expected {expected}",
                tileset_id=chunk.tileset_id,
            )

        if self.header.is_indexed:
            contents = pixels[:expected].reshape(chunk.tile_count, area)
            tiles = [Tile(i, contents[i]) for i in range(chunk.tile_count)]
            color_mode = ColorMode.INDEXED
        else:
            contents = pixels[:expected].reshape(chunk.tile_count, area, 4)
            tiles = [Tile(i - 1, contents[i]) for i in range(1, chunk.tile_count)]
            color_mode = ColorMode.RGBA

        return Tileset(
            tileset_id=chunk.tileset_id,
            tile_width=chunk.tile_width,
            tile_height=chunk.tile_height,
            color_mode=color_mode,
            tiles=tiles,
        )

    def _resolve_cel(self, frame_index: int, layer_index: int) -> Optional[CelChunk]:
        """Cel of a layer at a frame, following linked cels."""
        cel = self.cels.get((frame_index, layer_index))
        for _ in range(len(self.frames)):
            if cel is None or cel.cel_type != CelType.LINKED:
                return cel
            cel = self.cels.get((cel.linked_frame, layer_index))
        raise AsepriteFormatError(
            f"'{self.name}': linked cel cycle",
            frame_index=frame_index,
        )

    def _build_layers(
        self,
        tilesets: Dict[int, Tileset],
        palette: Optional[Palette],
        dedupe_tiles: bool,
    ) -> List[Layer]:
        """Tilemap layers first, then all image layers merged into one."""
        visible = [layer for layer in self.layers if layer.is_visible]
        frames = self._kept_frames()
        layers = []

        for chunk in visible:
            if not chunk.is_tilemap:
                continue
            tileset = tilesets.get(chunk.tileset_index)
            if tileset is None:
                raise AsepriteFormatError(
                    f"'{self.name}': layer '{chunk.name}' uses a missing tileset",
                    tileset_id=chunk.tileset_index,
                )
            cels = [
                self._build_tiled_cel(frame.frame_index, chunk, tileset)
                for frame in frames
            ]
            layers.append(Layer(chunk.layer_index, chunk.name, cels, tileset))

        image_layers = [
            layer
            for layer in visible
            if layer.layer_type == LayerType.NORMAL
        ]
        if image_layers:
            next_id = max(tilesets, default=-1) + 1
            cels = [
                self._merge_image_cels(
                    frame.frame_index, image_layers, palette, next_id + i, dedupe_tiles
                )
                for i, frame in enumerate(frames)
            ]
            reference = image_layers[0]
            layers.append(Layer(reference.layer_index, reference.name, cels))

        if config.DEBUG:
            for layer in layers:
                print(
                    f"[DEBUG] {self.name}: layer '{layer.name}' with "
                    f"{len(layer.cels)} cels"
                )

        return layers

    def _build_tiled_cel(
        self, frame_index: int, chunk: LayerChunk, tileset: Tileset
    ) -> Cel:
        width, height = self.header.width, self.header.height
        cel = self._resolve_cel(frame_index, chunk.layer_index)
        if cel is None:
            return Cel(frame_index, width, height, 0, 0, tileset)
        if not cel.is_tilemap:
            raise AsepriteFormatError(
                f"'{self.name}': tilemap layer holds an image cel",
                frame_index=frame_index,
                layer_name=chunk.name,
            )

        tile_count = self.tilesets[chunk.tileset_index].tile_count
        tilemap = []
        for i, value in enumerate(cel.tile_values().tolist()):
            tile_id = value & cel.tile_id_mask
            if tile_id == 0:
                continue
            if tile_id >= tile_count:
                raise AsepriteFormatError(
                    f"'{self.name}': tile id {tile_id} outside tileset",
                    frame_index=frame_index,
                    layer_name=chunk.name,
                    tileset_id=chunk.tileset_index,
                )
            tilemap.append(
                TileRef(
                    x=i % cel.width,
                    y=i // cel.width,
                    tile_index=tile_id if tileset.is_indexed else tile_id - 1,
                    x_flip=bool(value & cel.x_flip_mask),
                    y_flip=bool(value & cel.y_flip_mask),
                    rotation=bool(value & cel.rotation_mask),
                )
            )

        return Cel(
            frame_index,
            width,
            height,
            cel.width,
            cel.height,
            tileset,
            cel.x,
            cel.y,
            tilemap,
        )

    def _cel_rgba(self, cel: CelChunk, palette: Optional[Palette]) -> np.ndarray:
        """Pixels of an image cel as an (height, width, 4) array."""
        count = cel.width * cel.height
        if not self.header.is_indexed:
            pixels = np.frombuffer(cel.data, dtype=np.uint8, count=count * 4)
            return pixels.reshape(cel.height, cel.width, 4)

        if palette is None:
            raise AsepriteFormatError(f"'{self.name}': indexed file without palette")

        lookup = np.zeros((256, 4), dtype=np.uint8)
        lookup[: min(len(palette), 256)] = palette.colors[:256]
        indexes = np.frombuffer(cel.data, dtype=np.uint8, count=count)
        rgba = lookup[indexes]
        rgba[indexes == self.header.transparent_index, 3] = 0
        return rgba.reshape(cel.height, cel.width, 4)

    def _merge_image_cels(
        self,
        frame_index: int,
        image_layers: List[LayerChunk],
        palette: Optional[Palette],
        tileset_id: int,
        dedupe_tiles: bool,
    ) -> Cel:
        """Merge the image cels of a frame and cut them into 16x16 tiles.

        Non transparent pixels of later layers replace earlier ones. Only
        tiles with at least one visible pixel are kept.
        """
        size = MERGED_TILE_SIZE
        images = []
        for layer in image_layers:
            cel = self._resolve_cel(frame_index, layer.layer_index)
            if cel is None or cel.width == 0 or cel.height == 0:
                continue
            images.append((cel.x, cel.y, self._cel_rgba(cel, palette)))

        if not images:
            tileset = Tileset(tileset_id, size, size, ColorMode.RGBA)
            return Cel(frame_index, self.header.width, self.header.height, 0, 0, tileset)

        left = min(x for x, _, _ in images)
        top = min(y for _, y, _ in images)
        right = max(x + image.shape[1] for x, _, image in images)
        bottom = max(y + image.shape[0] for _, y, image in images)
        columns = -(-(right - left) // size)
        rows = -(-(bottom - top) // size)

        canvas = np.zeros((rows * size, columns * size, 4), dtype=np.uint8)
        for x, y, image in images:
            region = canvas[
                y - top : y - top + image.shape[0], x - left : x - left + image.shape[1]
            ]
            opaque = image[..., 3] != 0
            region[opaque] = image[opaque]

        tiles: List[Tile] = []
        tilemap: List[TileRef] = []
        seen: Dict[int, int] = {}
        for ty in range(rows):
            for tx in range(columns):
                block = canvas[ty * size : (ty + 1) * size, tx * size : (tx + 1) * size]
                if not block[..., 3].any():
                    continue
                content = block.reshape(-1, 4)

                tile_index = None
                if dedupe_tiles:
                    digest = xxhash.xxh3_64(content.tobytes()).intdigest()
                    tile_index = seen.get(digest)
                    if tile_index is None:
                        seen[digest] = len(tiles)
                if tile_index is None:
                    tile_index = len(tiles)
                    tiles.append(Tile(tile_index, content))
                tilemap.append(TileRef(tx, ty, tile_index))

        tileset = Tileset(tileset_id, size, size, ColorMode.RGBA, tiles)
        return Cel(
            frame_index,
            self.header.width,
            self.header.height,
            columns,
            rows,
            tileset,
            left,
            top,
            tilemap,
        )


def load_sprite(path: Path, dedupe_tiles: bool = False) -> Sprite:
    """Load an Aseprite file.

    Args:
        path: Path to the .aseprite or .ase file
        dedupe_tiles: Share one tile for identical merged image tiles

    Returns:
        Sprite named after the file stem
    """
    path = Path(path)
    rawdata = read_file_to_bytes(path)
    return AsepriteParser(rawdata, path.stem).parse(dedupe_tiles)
