import os

DEBUG = os.environ.get("NEXT_ASSETS_DEBUG", "").lower() in ("1", "true", "yes")

CURRENT_VERSION = "0.3.0"

# Quantizer defaults for 256 color output
DEFAULT_TRANSPARENT_INDEX = 227
DEFAULT_ALTERNATIVE_INDEX = 228


def set_debug(enabled: bool) -> None:
    global DEBUG
    DEBUG = enabled
