from pathlib import Path
from typing import List, Optional

from next_files import (
    Sprite,
    write_tile_definitions,
    write_tilemaps,
    write_balloon_map,
)
from .utils import ExportOptions


def export_tile_definitions(
    sprites: List[Sprite], input_paths: List[Path], options: ExportOptions
) -> Path:
    """Write the tile definitions of every input into a single file."""
    output_path = Path(options.output_for(input_paths[0], "tile_definitions"))

    if options.verbose:
        for sprite in sprites:
            for tileset in sprite.tilesets:
                print(
                    f"[INFO] '{sprite.name}' tileset {tileset.tileset_id}: "
                    f"{len(tileset.tiles)} tile(s) "
                    f"{tileset.tile_width}x{tileset.tile_height} "
                    f"{tileset.color_mode.value}"
                )

    size = write_tile_definitions(sprites, output_path)
    print(f"[OK] {size} bytes of tile definitions written to: {output_path}")
    return output_path


def export_tilemap(
    sprite: Sprite,
    input_path: Path,
    options: ExportOptions,
    width: Optional[int] = None,
    height: Optional[int] = None,
    wide: bool = False,
) -> List[Path]:
    """Write the tilemaps of the first tilemap layer."""
    output_template = options.output_for(input_path, "tilemap")
    paths = write_tilemaps(sprite, output_template, width, height, wide)

    if options.verbose:
        for path in paths:
            print(f"[INFO] Wrote {path}")

    print(f"[OK] {len(paths)} tilemap file(s) written from: {input_path.name}")
    return paths


def export_balloon_map(
    sprite: Sprite, input_path: Path, options: ExportOptions
) -> Path:
    """Write the text balloon overlay tilemap."""
    output_path = Path(options.output_for(input_path, "balloon_map"))
    size = write_balloon_map(sprite, output_path)
    print(f"[OK] {size} bytes of balloon map written to: {output_path}")
    return output_path
