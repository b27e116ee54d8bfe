#!/usr/bin/env python3
"""
Export Aseprite files as ZX Spectrum Next assets.

Usage:
    python next_assets.py export-sprite-attributes hero.aseprite
    python next_assets.py export-layer-bitmap title.aseprite -o "title{frame}.l2"
    python next_assets.py export-tile-definitions map.aseprite font.aseprite -o tiles.til
    python next_assets.py report-frame-count hero.aseprite
"""

import sys
import argparse
from functools import partial
from pathlib import Path

# Add parent directory to path for imports
script_dir = Path(__file__).parent
if str(script_dir.parent) not in sys.path:
    sys.path.insert(0, str(script_dir.parent))

from data import (
    CURRENT_VERSION,
    DEFAULT_TRANSPARENT_INDEX,
    DEFAULT_ALTERNATIVE_INDEX,
    set_debug,
)
from generators import (
    ExportOptions,
    report_frame_count,
    export_sprite_attributes,
    export_tile_definitions,
    export_tilemap,
    export_balloon_map,
    export_layer_bitmaps,
    export_bitmap,
    export_palettes,
    process_multiple,
    process_batch,
)
from next_files import ColorQuantizer, RasterOrder, ReferencePoint


def byte_value(value: str) -> int:
    """argparse type for a palette index."""
    number = int(value, 0)
    if not 0 <= number <= 0xFF:
        raise argparse.ArgumentTypeError(f"{value} is not in 0..255")
    return number


def positive_int(value: str) -> int:
    number = int(value, 0)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"{value} must be positive")
    return number


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("inputs", nargs="+", help="Input Aseprite file(s)")
    common.add_argument(
        "-o",
        "--output",
        help="Output file. {frame} is replaced with the frame number "
        "(default: derived from the input name)",
    )
    common.add_argument(
        "-v", "--verbose", action="store_true", help="Print per-frame progress"
    )
    common.add_argument("--debug", action="store_true", help="Print debug output")
    common.add_argument(
        "--transparent-index",
        type=byte_value,
        default=DEFAULT_TRANSPARENT_INDEX,
        help=f"Palette index of transparent pixels (default: {DEFAULT_TRANSPARENT_INDEX})",
    )
    common.add_argument(
        "--alternative-index",
        type=byte_value,
        default=DEFAULT_ALTERNATIVE_INDEX,
        help="Index used for opaque colors that quantize to the transparent "
        f"index (default: {DEFAULT_ALTERNATIVE_INDEX})",
    )
    common.add_argument(
        "--dedupe-tiles",
        action="store_true",
        help="Share identical 16x16 tiles of merged image layers",
    )

    parser = argparse.ArgumentParser(
        description="Export Aseprite files as ZX Spectrum Next assets"
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {CURRENT_VERSION}"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    layer_bitmap = subparsers.add_parser(
        "export-layer-bitmap",
        parents=[common],
        help="Export every frame as a layer bitmap",
    )
    layer_bitmap.add_argument(
        "--row-major",
        action="store_true",
        help="Write pixels row by row instead of column by column",
    )
    layer_bitmap.add_argument(
        "--preview", action="store_true", help="Also save a PNG preview per frame"
    )

    subparsers.add_parser(
        "report-frame-count",
        parents=[common],
        help="Print the number of frames",
    )

    sprite_attributes = subparsers.add_parser(
        "export-sprite-attributes",
        parents=[common],
        help="Export the first layer as sprite attributes and patterns",
    )
    sprite_attributes.add_argument(
        "--reference-point",
        choices=list(ReferencePoint.BY_NAME),
        default="bottom-center",
        help="Canvas point used as the sprite origin (default: bottom-center)",
    )

    subparsers.add_parser(
        "export-tile-definitions",
        parents=[common],
        help="Export indexed 8x8 and 16x16 tilesets of all inputs",
    )

    bitmap = subparsers.add_parser(
        "export-bitmap",
        parents=[common],
        help="Export all frames as one bitmap file",
    )
    bitmap.add_argument(
        "--columnar",
        action="store_true",
        help="Write pixels column by column instead of row by row",
    )

    tilemap = subparsers.add_parser(
        "export-tilemap",
        parents=[common],
        help="Export the tilemap of every frame",
    )
    tilemap.add_argument(
        "--width", type=positive_int, help="Tilemap width in tiles"
    )
    tilemap.add_argument(
        "--height", type=positive_int, help="Tilemap height in tiles"
    )
    tilemap.add_argument(
        "--wide", action="store_true", help="Write 16-bit tile indexes"
    )

    subparsers.add_parser(
        "export-palette",
        parents=[common],
        help="Export the palettes of all inputs",
    )

    subparsers.add_parser(
        "export-balloon-map",
        parents=[common],
        help="Export the text balloon overlay tilemap",
    )

    return parser


def run_command(args: argparse.Namespace, options: ExportOptions) -> bool:
    input_paths = [Path(path) for path in args.inputs]
    command = args.command

    if command == "report-frame-count":
        return process_batch(input_paths, options, report_frame_count)
    if command == "export-tile-definitions":
        return process_batch(input_paths, options, export_tile_definitions)
    if command == "export-palette":
        return process_batch(input_paths, options, export_palettes)

    if command == "export-layer-bitmap":
        order = RasterOrder.ROW_MAJOR if args.row_major else RasterOrder.COLUMN_MAJOR
        export = partial(export_layer_bitmaps, order=order, preview=args.preview)
        title = "Exporting layer bitmaps"
    elif command == "export-sprite-attributes":
        reference_point = ReferencePoint.BY_NAME[args.reference_point]
        export = partial(export_sprite_attributes, reference_point=reference_point)
        title = "Exporting sprite attributes"
    elif command == "export-bitmap":
        order = RasterOrder.COLUMN_MAJOR if args.columnar else RasterOrder.ROW_MAJOR
        export = partial(export_bitmap, order=order)
        title = "Exporting bitmaps"
    elif command == "export-tilemap":
        export = partial(
            export_tilemap, width=args.width, height=args.height, wide=args.wide
        )
        title = "Exporting tilemaps"
    else:
        export = export_balloon_map
        title = "Exporting balloon maps"

    return process_multiple(input_paths, options, export, title)


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.debug:
        set_debug(True)

    try:
        quantizer = ColorQuantizer(args.transparent_index, args.alternative_index)
    except ValueError as e:
        print(f"[ERROR] {e}")
        return 1

    options = ExportOptions(
        output=args.output,
        verbose=args.verbose,
        dedupe_tiles=args.dedupe_tiles,
        quantizer=quantizer,
    )

    return 0 if run_command(args, options) else 1


if __name__ == "__main__":
    sys.exit(main())
