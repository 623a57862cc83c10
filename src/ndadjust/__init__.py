"""
ndadjust
Contrast stretching for N-D grayscale images on host or GPU arrays.
"""

try:
    from importlib import metadata as _metadata
except Exception:
    _metadata = None  # type: ignore

try:
    __version__ = _metadata.version("ndadjust") if _metadata else "0.0.0.dev0"
except Exception:
    # Not installed (dev mode) or no metadata available
    __version__ = "0.0.0.dev0"

from loguru import logger as _logger  # noqa: E402

from . import core, intensity  # noqa: E402
from .errors import AdjustError, InvalidArgumentError, UnsupportedTypeError  # noqa: E402
from .intensity import adjust, lookup_table, apply_lookup_table  # noqa: E402
from .core import get_backend, register_backend, stretch_limits, native_range  # noqa: E402
from .settings import AdjustSettings  # noqa: E402

# Library code stays silent unless an application enables it.
_logger.disable("ndadjust")

__all__ = [
    "core",
    "intensity",
    "adjust",
    "lookup_table",
    "apply_lookup_table",
    "stretch_limits",
    "native_range",
    "get_backend",
    "register_backend",
    "AdjustSettings",
    "AdjustError",
    "InvalidArgumentError",
    "UnsupportedTypeError",
    "__version__",
]
