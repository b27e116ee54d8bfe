import struct
from pathlib import Path
from typing import Iterable

from .constants import FRAME_PLACEHOLDER


def read_uint32(data: bytes, offset: int, little_endian: bool = True) -> int:
    fmt = "<I" if little_endian else ">I"
    return struct.unpack_from(fmt, data, offset)[0]


def read_uint16(data: bytes, offset: int, little_endian: bool = True) -> int:
    fmt = "<H" if little_endian else ">H"
    return struct.unpack_from(fmt, data, offset)[0]


def read_uint8(data: bytes, offset: int) -> int:
    return data[offset]


def read_int8(data: bytes, offset: int) -> int:
    return struct.unpack_from("b", data, offset)[0]


def read_int16(data: bytes, offset: int, little_endian: bool = True) -> int:
    fmt = "<h" if little_endian else ">h"
    return struct.unpack_from(fmt, data, offset)[0]


def write_uint8(value: int) -> bytes:
    return struct.pack("B", value)


def write_int8(value: int) -> bytes:
    return struct.pack("b", value)


def fits_uint8(value: int) -> bool:
    return 0 <= value <= 0xFF


def fits_int8(value: int) -> bool:
    return -0x80 <= value <= 0x7F


def read_file_to_bytes(filepath: Path) -> bytes:
    with open(filepath, "rb") as f:
        return f.read()


def write_chunks_to_file(filepath: Path, chunks: Iterable[bytes]) -> int:
    """Write already computed chunks in order, returning the byte count."""
    written = 0
    with open(filepath, "wb") as f:
        for chunk in chunks:
            written += f.write(chunk)
    return written


def resolve_frame_path(template: str, frame: int) -> Path:
    return Path(template.replace(FRAME_PLACEHOLDER, str(frame)))


def has_frame_placeholder(template: str) -> bool:
    return FRAME_PLACEHOLDER in template


def default_output_path(input_path: Path, suffix: str) -> str:
    """Output next to the input, e.g. ``hero.aseprite`` -> ``hero.sp``.

    Suffixes may carry the frame placeholder (``{frame}.l2``).
    """
    return str(input_path.parent / f"{input_path.stem}{suffix}")


def validate_path_exists_and_is_file(path: Path, path_description: str = "Path") -> bool:
    if not path.exists():
        print(f"[ERROR] {path_description} does not exist: {path}\n")
        return False

    if not path.is_file():
        print(f"[ERROR] Path is not a file: {path}\n")
        return False

    return True
