from pathlib import Path
from typing import List

from next_files import (
    ReferencePoint,
    Sprite,
    count_patterns,
    write_sprite_file,
)
from next_files.sprite import Point
from .utils import ExportOptions


def report_frame_count(
    sprites: List[Sprite], input_paths: List[Path], options: ExportOptions
) -> None:
    """Print the number of exported frames of each input.

    A single input prints the bare number so scripts can capture it.
    """
    if len(sprites) == 1:
        print(len(sprites[0].frames))
        return

    for sprite, input_path in zip(sprites, input_paths):
        print(f"{input_path.name}: {len(sprite.frames)}")


def export_sprite_attributes(
    sprite: Sprite,
    input_path: Path,
    options: ExportOptions,
    reference_point: Point = ReferencePoint.BOTTOM_CENTER,
) -> Path:
    """Write the sprite attribute and pattern file of the first layer."""
    output_path = Path(options.output_for(input_path, "sprite_attributes"))
    layer = sprite.first_layer()

    if options.verbose:
        print(f"[INFO] Layer '{layer.name}', reference point {reference_point}")
        for cel in layer.cels:
            print(
                f"[INFO] Frame {cel.frame_index}: {len(cel.tilemap)} sprite(s), "
                f"{count_patterns(cel)} pattern(s)"
            )

    size = write_sprite_file(sprite, output_path, reference_point, options.quantizer)
    print(f"[OK] {len(layer.cels)} frame(s), {size} bytes written to: {output_path}")
    return output_path
