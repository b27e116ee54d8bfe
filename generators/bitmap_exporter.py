from pathlib import Path
from typing import List

from data import read_file_to_bytes
from external_files import export_bitmap_png
from next_files import (
    RasterOrder,
    Sprite,
    write_layer_bitmaps,
    write_bitmap,
    write_palettes,
)
from .constants import PREVIEW_SUFFIX
from .utils import ExportOptions


def export_layer_bitmaps(
    sprite: Sprite,
    input_path: Path,
    options: ExportOptions,
    order: RasterOrder = RasterOrder.COLUMN_MAJOR,
    preview: bool = False,
) -> List[Path]:
    """Write one layer bitmap per frame, with optional PNG previews."""
    output_template = options.output_for(input_path, "layer_bitmap")
    paths = write_layer_bitmaps(sprite, output_template, order, options.quantizer)

    for frame, path in enumerate(paths):
        if options.verbose:
            print(f"[INFO] Frame {frame} written to: {path}")

        if preview:
            preview_path = path.with_suffix(PREVIEW_SUFFIX)
            export_bitmap_png(
                read_file_to_bytes(path), sprite.width, sprite.height, preview_path, order
            )
            if options.verbose:
                print(f"[INFO] Frame {frame} preview saved to: {preview_path}")

    print(f"[OK] {len(paths)} layer bitmap(s) written from: {input_path.name}")
    return paths


def export_bitmap(
    sprite: Sprite,
    input_path: Path,
    options: ExportOptions,
    order: RasterOrder = RasterOrder.ROW_MAJOR,
) -> Path:
    """Write the bitmaps of every frame into a single file."""
    output_path = Path(options.output_for(input_path, "bitmap"))
    size = write_bitmap(sprite, output_path, order, options.quantizer)
    print(f"[OK] {size} bytes of bitmap written to: {output_path}")
    return output_path


def export_palettes(
    sprites: List[Sprite], input_paths: List[Path], options: ExportOptions
) -> Path:
    """Write the palettes of every input into a single file."""
    output_path = Path(options.output_for(input_paths[0], "palette"))

    if options.verbose:
        for sprite in sprites:
            if sprite.palette is None:
                print(f"[WARNING] '{sprite.name}' has no palette, skipped")
            else:
                print(f"[INFO] '{sprite.name}': {len(sprite.palette)} color(s)")

    size = write_palettes(sprites, output_path, options.quantizer)
    print(f"[OK] {size} bytes of palettes written to: {output_path}")
    return output_path
