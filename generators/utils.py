from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from data import (
    config,
    default_output_path,
    validate_path_exists_and_is_file,
    SEPARATOR_LINE_LENGTH,
)
from external_files import load_sprite
from next_files import ColorQuantizer, NextAssetError, Sprite
from .constants import ASEPRITE_SUFFIXES, DEFAULT_SUFFIXES


@dataclass
class ExportOptions:
    """Options shared by every export command."""

    output: Optional[str] = None
    verbose: bool = False
    dedupe_tiles: bool = False
    quantizer: ColorQuantizer = field(default_factory=ColorQuantizer)

    def output_for(self, input_path: Path, kind: str) -> str:
        """Explicit output, or a path derived from the input name."""
        if self.output:
            return self.output
        return default_output_path(input_path, DEFAULT_SUFFIXES[kind])


SingleExport = Callable[[Sprite, Path, ExportOptions], None]
BatchExport = Callable[[List[Sprite], List[Path], ExportOptions], None]

# Errors reported per input, anything else is a bug and propagates
EXPORT_ERRORS = (NextAssetError, OSError, ValueError)


def validate_aseprite_input(input_path: Path) -> bool:
    """Check that the input exists and looks like an Aseprite file."""
    if not validate_path_exists_and_is_file(input_path, "Input file"):
        return False

    if input_path.suffix.lower() not in ASEPRITE_SUFFIXES:
        print(f"[WARNING] Unexpected extension, reading as Aseprite: {input_path}")

    return True


def load_input(input_path: Path, options: ExportOptions) -> Sprite:
    """Load an Aseprite file, printing what was found."""
    sprite = load_sprite(input_path, dedupe_tiles=options.dedupe_tiles)

    if options.verbose or config.DEBUG:
        print(
            f"[OK] Loaded '{sprite.name}': {sprite.width}x{sprite.height}, "
            f"{len(sprite.frames)} frame(s), {len(sprite.layers)} layer(s), "
            f"{len(sprite.tilesets)} tileset(s)"
        )

    return sprite


def print_header(title: str, lines: Sequence[str]) -> None:
    print("=" * SEPARATOR_LINE_LENGTH)
    print(f"[START] {title}")
    for line in lines:
        print(f"[INFO] {line}")
    print("=" * SEPARATOR_LINE_LENGTH)


def print_summary(total: int, failed_items: Sequence[str]) -> None:
    print()
    print("=" * SEPARATOR_LINE_LENGTH)
    print("[SUMMARY] PROCESSING SUMMARY")
    print("=" * SEPARATOR_LINE_LENGTH)
    print(f"[INFO] Total: {total}")
    print(f"[INFO] Successful: {total - len(failed_items)}")
    print(f"[INFO] Failed: {len(failed_items)}")

    if failed_items:
        print("\n[ERROR] Failed items:")
        for item in failed_items:
            print(f"   - {item}")

    print("=" * SEPARATOR_LINE_LENGTH)


def process_single(
    input_path: Path, options: ExportOptions, export: SingleExport
) -> bool:
    """Load one input and run an export on it.

    Returns:
        True if successful, False otherwise
    """
    if not validate_aseprite_input(input_path):
        return False

    if options.verbose:
        print(f"[INFO] Processing Aseprite file: {input_path}")

    try:
        sprite = load_input(input_path, options)
        export(sprite, input_path, options)
        return True

    except EXPORT_ERRORS as e:
        print(f"[ERROR] {input_path.name}: {e}")
        return False


def process_multiple(
    input_paths: Sequence[Path],
    options: ExportOptions,
    export: SingleExport,
    title: str,
) -> bool:
    """Run an export on every input, one output per input.

    Returns:
        True if every input succeeded
    """
    if options.output and len(input_paths) > 1:
        print("[ERROR] --output cannot be used with several inputs for this command")
        return False

    if len(input_paths) > 1:
        print_header(title, [f"Found {len(input_paths)} input(s) to process"])

    failed_items = []
    for input_path in input_paths:
        if not process_single(input_path, options, export):
            failed_items.append(input_path.name)

    if len(input_paths) > 1:
        print_summary(len(input_paths), failed_items)

    return not failed_items


def process_batch(
    input_paths: Sequence[Path],
    options: ExportOptions,
    export: BatchExport,
) -> bool:
    """Load every input and run one export over all of them.

    Returns:
        True if successful, False otherwise
    """
    sprites = []
    for input_path in input_paths:
        if not validate_aseprite_input(input_path):
            return False
        try:
            sprites.append(load_input(input_path, options))
        except EXPORT_ERRORS as e:
            print(f"[ERROR] {input_path.name}: {e}")
            return False

    try:
        export(sprites, list(input_paths), options)
        return True

    except EXPORT_ERRORS as e:
        print(f"[ERROR] {e}")
        return False
