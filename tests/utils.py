"""Common utility functions for test scripts."""

import hashlib
import shutil
import struct
import traceback
import zlib
from contextlib import contextmanager
from pathlib import Path

import numpy as np

from data import read_file_to_bytes, SEPARATOR_LINE_LENGTH
from next_files import Cel, ColorMode, Layer, Sprite, Tile, TileRef, Tileset

SECTION_SEPARATOR = "=" * SEPARATOR_LINE_LENGTH
TEMP_OUTPUT_DIR = Path(__file__).parent / "temp_test_output"


def safe_remove_folder(folder_path: Path, description=""):
    """Safely remove a folder with optional description."""
    if not folder_path.exists():
        return False
    try:
        shutil.rmtree(folder_path)
        if description:
            print(f"[OK] Removed {description}")
        return True
    except OSError as e:
        if description:
            print(f"[WARNING] Failed to remove {description}: {e}")
        return False


@contextmanager
def temp_output_dir(name: str):
    """Empty folder under tests/temp_test_output, removed afterwards."""
    folder = TEMP_OUTPUT_DIR / name
    safe_remove_folder(folder)
    folder.mkdir(parents=True)
    try:
        yield folder
    finally:
        safe_remove_folder(folder)


def get_file_checksum(file_path: Path) -> str:
    """Get SHA256 checksum of a file."""
    data = read_file_to_bytes(file_path)
    return hashlib.sha256(data).hexdigest()


def run_tests(namespace: dict) -> int:
    """Run every test_* function of a module and print a summary.

    Returns:
        Exit code, 0 when all tests passed
    """
    tests = [
        (name, func)
        for name, func in namespace.items()
        if name.startswith("test_") and callable(func)
    ]

    print(SECTION_SEPARATOR)
    print(f"Running {len(tests)} test(s)...")
    print(SECTION_SEPARATOR)

    failed = []
    for name, func in tests:
        try:
            func()
            print(f"[PASS] {name}")
        except Exception:
            print(f"[FAIL] {name}")
            traceback.print_exc()
            failed.append(name)

    print(SECTION_SEPARATOR)
    print(f"[INFO] Passed: {len(tests) - len(failed)}")
    print(f"[INFO] Failed: {len(failed)}")
    print(SECTION_SEPARATOR)
    return 1 if failed else 0


# ---------------------------------------------------------------------------
# Document builders
# ---------------------------------------------------------------------------


def solid_tile(color, side: int = 16) -> np.ndarray:
    """Flat content of a tile filled with one RGBA color or palette index."""
    if isinstance(color, int):
        return np.full(side * side, color, dtype=np.uint8)
    return np.tile(np.array(color, dtype=np.uint8), (side * side, 1))


def make_tileset(contents, tile_size: int = 16, tileset_id: int = 0, first_index: int = 0):
    """Tileset whose tile indexes start at first_index."""
    tiles = [Tile(first_index + i, content) for i, content in enumerate(contents)]
    color_mode = ColorMode.RGBA if tiles and tiles[0].content.ndim == 2 else ColorMode.INDEXED
    return Tileset(tileset_id, tile_size, tile_size, color_mode, tiles)


def make_cel(
    tileset: Tileset,
    placements,
    width: int = None,
    height: int = None,
    canvas=(64, 64),
    x_pos: int = 0,
    y_pos: int = 0,
    frame_index: int = 0,
):
    """Cel from (x, y, tile_index) tuples or TileRefs.

    The grid defaults to the smallest one holding every placement.
    """
    refs = [p if isinstance(p, TileRef) else TileRef(*p) for p in placements]
    if width is None:
        width = max((ref.x + 1 for ref in refs), default=0)
    if height is None:
        height = max((ref.y + 1 for ref in refs), default=0)
    return Cel(
        frame_index=frame_index,
        canvas_width=canvas[0],
        canvas_height=canvas[1],
        width=width,
        height=height,
        tileset=tileset,
        x_pos=x_pos,
        y_pos=y_pos,
        tilemap=refs,
    )


def make_sprite(cels, name: str = "test", tileset=None, palette=None, tiled=False):
    """Sprite with a single layer holding the given cels."""
    first = cels[0]
    layer = Layer(0, "Layer 1", list(cels), tileset if tiled else None)
    tilesets = [tileset] if tileset is not None else []
    return Sprite(
        name=name,
        width=first.canvas_width,
        height=first.canvas_height,
        layers=[layer],
        tilesets=tilesets,
        palette=palette,
    )


# ---------------------------------------------------------------------------
# Minimal Aseprite writer
# ---------------------------------------------------------------------------


def ase_string(text: str) -> bytes:
    encoded = text.encode("utf-8")
    return struct.pack("<H", len(encoded)) + encoded


def ase_chunk(chunk_type: int, payload: bytes) -> bytes:
    return struct.pack("<IH", len(payload) + 6, chunk_type) + payload


def layer_chunk(name: str, visible: bool = True, tileset_index: int = None) -> bytes:
    layer_type = 0 if tileset_index is None else 2
    payload = struct.pack(
        "<HHHHHHB3x", 1 if visible else 0, layer_type, 0, 0, 0, 0, 255
    ) + ase_string(name)
    if tileset_index is not None:
        payload += struct.pack("<I", tileset_index)
    return ase_chunk(0x2004, payload)


def _cel_header(layer_index: int, x: int, y: int, cel_type: int) -> bytes:
    return struct.pack("<HhhBHh5x", layer_index, x, y, 255, cel_type, 0)


def image_cel_chunk(layer_index: int, pixels: np.ndarray, x: int = 0, y: int = 0, compressed: bool = True) -> bytes:
    """Image cel from an (h, w, 4) RGBA or (h, w) indexed array."""
    height, width = pixels.shape[:2]
    data = np.ascontiguousarray(pixels, dtype=np.uint8).tobytes()
    body = struct.pack("<HH", width, height) + (zlib.compress(data) if compressed else data)
    cel_type = 2 if compressed else 0
    return ase_chunk(0x2005, _cel_header(layer_index, x, y, cel_type) + body)


def linked_cel_chunk(layer_index: int, frame: int) -> bytes:
    return ase_chunk(0x2005, _cel_header(layer_index, 0, 0, 1) + struct.pack("<H", frame))


TILE_ID_MASK = 0x1FFFFFFF
TILE_X_FLIP = 0x20000000
TILE_Y_FLIP = 0x40000000
TILE_ROTATION = 0x80000000


def tilemap_cel_chunk(layer_index: int, values, x: int = 0, y: int = 0) -> bytes:
    """Tilemap cel from an (h, w) array of 32-bit tile values."""
    values = np.asarray(values, dtype="<u4")
    height, width = values.shape
    body = struct.pack(
        "<HHHIIII10x",
        width,
        height,
        32,
        TILE_ID_MASK,
        TILE_X_FLIP,
        TILE_Y_FLIP,
        TILE_ROTATION,
    ) + zlib.compress(values.tobytes())
    return ase_chunk(0x2005, _cel_header(layer_index, x, y, 3) + body)


def tileset_chunk(tileset_id: int, tiles: np.ndarray, tile_width: int, tile_height: int) -> bytes:
    """Tileset with internal tiles, tiles shaped (n, area) or (n, area, 4)."""
    data = zlib.compress(np.ascontiguousarray(tiles, dtype=np.uint8).tobytes())
    payload = (
        struct.pack("<IIIHHh14x", tileset_id, 2, len(tiles), tile_width, tile_height, 1)
        + ase_string(f"Tileset {tileset_id}")
        + struct.pack("<I", len(data))
        + data
    )
    return ase_chunk(0x2023, payload)


def palette_chunk(colors) -> bytes:
    colors = np.asarray(colors, dtype=np.uint8).reshape(-1, 4)
    payload = struct.pack("<III8x", len(colors), 0, len(colors) - 1)
    for color in colors:
        payload += struct.pack("<H4B", 0, *color.tolist())
    return ase_chunk(0x2019, payload)


def old_palette_chunk(colors) -> bytes:
    colors = np.asarray(colors, dtype=np.uint8).reshape(-1, 3)
    count = len(colors) if len(colors) < 256 else 0
    payload = struct.pack("<HBB", 1, 0, count) + colors.tobytes()
    return ase_chunk(0x0004, payload)


def tags_chunk(tags) -> bytes:
    """Tags from (name, from_frame, to_frame) tuples."""
    payload = struct.pack("<H8x", len(tags))
    for name, from_frame, to_frame in tags:
        payload += struct.pack("<HHBH6x3BB", from_frame, to_frame, 0, 0, 0, 0, 0, 0)
        payload += ase_string(name)
    return ase_chunk(0x2018, payload)


def ase_frame(chunks, duration: int = 100) -> bytes:
    body = b"".join(chunks)
    return struct.pack(
        "<IHHH2xI", 16 + len(body), 0xF1FA, len(chunks), duration, len(chunks)
    ) + body


def aseprite_file(frames, width: int, height: int, color_depth: int = 32, transparent_index: int = 0) -> bytes:
    """Complete file from a list of frames, each a list of chunks."""
    body = b"".join(ase_frame(chunks) for chunks in frames)
    header = struct.pack(
        "<IHHHHHIHIIB3xHBB",
        128 + len(body),
        0xA5E0,
        len(frames),
        width,
        height,
        color_depth,
        1,
        100,
        0,
        0,
        transparent_index,
        256,
        1,
        1,
    )
    return header + bytes(128 - len(header)) + body


def write_aseprite(path: Path, *args, **kwargs) -> Path:
    path.write_bytes(aseprite_file(*args, **kwargs))
    return path
