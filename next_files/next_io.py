"""
Writers for every Next asset file produced from loaded sprites.

Buffers are fully encoded before the output file is opened, so a failing
frame never leaves a partially written file behind.
"""

from pathlib import Path
from typing import Callable, List, Optional, Sequence

from data import (
    config,
    write_uint8,
    write_chunks_to_file,
    resolve_frame_path,
    has_frame_placeholder,
    FRAME_PLACEHOLDER,
)

from .anchor import count_patterns
from .balloon import extract_balloon_map
from .bitmap import RasterOrder, serialize_bitmap, serialize_palette
from .colors import ColorQuantizer
from .constants import ReferencePoint, Tilemap
from .errors import (
    MissingPaletteError,
    NextAssetError,
    UnsupportedLayerConfigurationError,
    UnsupportedTilesetError,
)
from .patterns import encode_tileset, is_tile_definition_tileset
from .sprite import Cel, Layer, Point, Sprite
from .sprite_attrs import encode_attributes
from .tilemap import rasterize, rasterize16


def _write(output_path: Path, chunks: Sequence[bytes]) -> int:
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    return write_chunks_to_file(output_path, chunks)


def _encode_cels(layer: Layer, encode: Callable[[Cel], bytes]) -> List[bytes]:
    """Encode every cel of a layer, tagging errors with layer and frame."""
    buffers = []
    for cel in layer.cels:
        try:
            buffers.append(encode(cel))
        except NextAssetError as e:
            raise e.with_context(frame_index=cel.frame_index, layer_name=layer.name)
    return buffers


def _tilemap_layer(sprite: Sprite) -> Layer:
    """First tiled layer with 8x8 tiles."""
    tile_size = (Tilemap.TILE_SIZE, Tilemap.TILE_SIZE)
    for layer in sprite.layers:
        if layer.tileset is not None and layer.tileset.tile_size == tile_size:
            return layer
    raise UnsupportedLayerConfigurationError(
        f"Sprite '{sprite.name}' has no tilemap layer with "
        f"{Tilemap.TILE_SIZE}x{Tilemap.TILE_SIZE} tiles"
    )


def write_sprite_file(
    sprite: Sprite,
    output_path: Path,
    reference_point: Point = ReferencePoint.BOTTOM_CENTER,
    quantizer: Optional[ColorQuantizer] = None,
) -> int:
    """
    Write the sprite attribute + pattern file of the first layer.

    Layout: [nFrames:1] followed by one encoded frame per cel.

    Args:
        sprite: Loaded sprite
        output_path: Output file path
        reference_point: Normalized canvas point used as the sprite origin
        quantizer: Color quantizer for RGBA patterns

    Returns:
        Number of bytes written
    """
    quantizer = quantizer or ColorQuantizer()
    layer = sprite.first_layer()

    if len(layer.cels) > 0xFF:
        raise NextAssetError(
            f"{len(layer.cels)} frames exceed the limit of 255", layer_name=layer.name
        )

    frames = _encode_cels(
        layer, lambda cel: encode_attributes(cel, reference_point, quantizer)
    )

    if config.DEBUG:
        for cel, frame in zip(layer.cels, frames):
            print(
                f"[DEBUG] Frame {cel.frame_index}: {len(cel.tilemap)} tiles, "
                f"{count_patterns(cel)} patterns, {len(frame)} bytes"
            )

    return _write(output_path, [write_uint8(len(frames))] + frames)


def write_tile_definitions(sprites: Sequence[Sprite], output_path: Path) -> int:
    """
    Write the tile definitions of every indexed 8x8 or 16x16 tileset.

    Returns:
        Number of bytes written
    """
    tilesets = [
        tileset
        for sprite in sprites
        for tileset in sprite.tilesets
        if is_tile_definition_tileset(tileset)
    ]
    if not tilesets:
        raise UnsupportedTilesetError("No indexed 8x8 or 16x16 tilesets found")

    chunks = [encode_tileset(tileset) for tileset in tilesets]

    if config.DEBUG:
        for tileset, chunk in zip(tilesets, chunks):
            print(
                f"[DEBUG] Tileset {tileset.tileset_id}: {len(tileset.tiles)} tiles "
                f"{tileset.tile_width}x{tileset.tile_height}, {len(chunk)} bytes"
            )

    return _write(output_path, chunks)


def write_tilemaps(
    sprite: Sprite,
    output_template: str,
    width: Optional[int] = None,
    height: Optional[int] = None,
    wide: bool = False,
) -> List[Path]:
    """
    Write the tilemap of every frame of the first tilemap layer.

    With a {frame} placeholder in output_template one file per frame is
    written, otherwise all tilemaps are concatenated into a single file.

    Args:
        sprite: Loaded sprite
        output_template: Output path, optionally containing {frame}
        width: Tilemap width in tiles (defaults to the canvas width / 8)
        height: Tilemap height in tiles (defaults to the canvas height / 8)
        wide: Write 16-bit entries instead of 8-bit ones

    Returns:
        List of written paths
    """
    layer = _tilemap_layer(sprite)
    width = width or sprite.width // Tilemap.TILE_SIZE
    height = height or sprite.height // Tilemap.TILE_SIZE
    encode = rasterize16 if wide else rasterize

    buffers = _encode_cels(layer, lambda cel: encode(cel, width, height))

    if has_frame_placeholder(output_template):
        paths = []
        for frame, buffer in enumerate(buffers):
            path = resolve_frame_path(output_template, frame)
            _write(path, [buffer])
            paths.append(path)
        return paths

    path = Path(output_template)
    _write(path, buffers)
    return [path]


def write_palettes(
    sprites: Sequence[Sprite],
    output_path: Path,
    quantizer: Optional[ColorQuantizer] = None,
) -> int:
    """
    Write the palettes of every sprite carrying one, in input order.

    Raises:
        MissingPaletteError: none of the sprites has a palette
    """
    palettes = [sprite.palette for sprite in sprites if sprite.palette is not None]
    if not palettes:
        raise MissingPaletteError("No palettes found")

    return _write(output_path, [serialize_palette(p, quantizer) for p in palettes])


def write_layer_bitmaps(
    sprite: Sprite,
    output_template: str,
    order: RasterOrder = RasterOrder.COLUMN_MAJOR,
    quantizer: Optional[ColorQuantizer] = None,
) -> List[Path]:
    """
    Write one layer bitmap per frame of the first layer.

    Without a {frame} placeholder and with several frames the frame number is
    inserted before the file extension.

    Returns:
        List of written paths
    """
    layer = sprite.first_layer()
    buffers = _encode_cels(layer, lambda cel: serialize_bitmap(cel, order, quantizer))

    if not has_frame_placeholder(output_template) and len(buffers) > 1:
        template = Path(output_template)
        output_template = str(
            template.with_name(f"{template.stem}{FRAME_PLACEHOLDER}{template.suffix}")
        )

    paths = []
    for frame, buffer in enumerate(buffers):
        path = resolve_frame_path(output_template, frame)
        _write(path, [buffer])
        paths.append(path)
    return paths


def write_bitmap(
    sprite: Sprite,
    output_path: Path,
    order: RasterOrder = RasterOrder.ROW_MAJOR,
    quantizer: Optional[ColorQuantizer] = None,
) -> int:
    """Write the bitmaps of all frames of the first layer into one file."""
    layer = sprite.first_layer()
    buffers = _encode_cels(layer, lambda cel: serialize_bitmap(cel, order, quantizer))
    return _write(output_path, buffers)


def write_balloon_map(sprite: Sprite, output_path: Path) -> int:
    layer = sprite.first_layer()
    try:
        balloon = extract_balloon_map(sprite)
    except NextAssetError as e:
        raise e.with_context(layer_name=layer.name)
    return _write(output_path, [balloon])
