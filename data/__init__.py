"""
Core configuration, constants, and utils
"""

from . import config

from .config import (
    CURRENT_VERSION,
    DEFAULT_TRANSPARENT_INDEX,
    DEFAULT_ALTERNATIVE_INDEX,
    set_debug,
)

from .utils import (
    read_uint32,
    read_uint16,
    read_uint8,
    read_int8,
    read_int16,
    write_uint8,
    write_int8,
    fits_uint8,
    fits_int8,
    read_file_to_bytes,
    write_chunks_to_file,
    resolve_frame_path,
    has_frame_placeholder,
    default_output_path,
    validate_path_exists_and_is_file,
)

from .constants import (
    SEPARATOR_LINE_LENGTH,
    TILE_SIZE_SMALL,
    TILE_SIZE_LARGE,
    SPRITE_PATTERN_AREA,
    FRAME_PLACEHOLDER,
)

__all__ = [
    # Config
    "config",
    "CURRENT_VERSION",
    "DEFAULT_TRANSPARENT_INDEX",
    "DEFAULT_ALTERNATIVE_INDEX",
    "set_debug",
    # Utils
    "read_uint32",
    "read_uint16",
    "read_uint8",
    "read_int8",
    "read_int16",
    "write_uint8",
    "write_int8",
    "fits_uint8",
    "fits_int8",
    "read_file_to_bytes",
    "write_chunks_to_file",
    "resolve_frame_path",
    "has_frame_placeholder",
    "default_output_path",
    "validate_path_exists_and_is_file",
    # Constants
    "SEPARATOR_LINE_LENGTH",
    "TILE_SIZE_SMALL",
    "TILE_SIZE_LARGE",
    "SPRITE_PATTERN_AREA",
    "FRAME_PLACEHOLDER",
]
