"""
ndadjust.core
=============

Low-level pieces shared by the intensity transforms.

Submodules
----------
- :mod:`ndadjust.core.backend` : Host/device array backends.
- :mod:`ndadjust.core.native`  : Native range table and [0, 1] conversion.
- :mod:`ndadjust.core.levels`  : Level parsing and saturation limits.
"""

from .backend import (
    ArrayBackend,
    NumpyBackend,
    CupyBackend,
    get_backend,
    register_backend,
    registered_backends,
)
from .native import (
    NATIVE_RANGES,
    SUPPORTED_DTYPES,
    native_range,
    working_dtype,
    to_unit,
    from_unit,
)
from .levels import (
    DEFAULT_SATURATION,
    parse_in_level,
    resolve_in_level,
    resolve_out_level,
    stretch_limits,
)

__all__ = [
    # backend
    "ArrayBackend",
    "NumpyBackend",
    "CupyBackend",
    "get_backend",
    "register_backend",
    "registered_backends",
    # native
    "NATIVE_RANGES",
    "SUPPORTED_DTYPES",
    "native_range",
    "working_dtype",
    "to_unit",
    "from_unit",
    # levels
    "DEFAULT_SATURATION",
    "parse_in_level",
    "resolve_in_level",
    "resolve_out_level",
    "stretch_limits",
]
