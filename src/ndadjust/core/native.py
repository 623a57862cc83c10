# src/ndadjust/core/native.py
"""
Native value ranges per element type, and conversion to/from [0, 1].

Rules
-----
- integer types: the full representable span, ``iinfo.min .. iinfo.max``
- float32 / float64: ``0.0 .. 1.0`` (floating images are taken as already
  normalized)
- anything else is unsupported
"""
from __future__ import annotations

from typing import Any, Dict, Tuple

import numpy as np

from ndadjust.core.backend import ArrayBackend
from ndadjust.errors import UnsupportedTypeError

__all__ = [
    "NATIVE_RANGES",
    "SUPPORTED_DTYPES",
    "native_range",
    "working_dtype",
    "to_unit",
    "from_unit",
]


def _int_range(dtype: Any) -> Tuple[int, int]:
    info = np.iinfo(dtype)
    return int(info.min), int(info.max)


NATIVE_RANGES: Dict[np.dtype, Tuple[float, float]] = {
    np.dtype(np.uint8): _int_range(np.uint8),
    np.dtype(np.uint16): _int_range(np.uint16),
    np.dtype(np.uint32): _int_range(np.uint32),
    np.dtype(np.int8): _int_range(np.int8),
    np.dtype(np.int16): _int_range(np.int16),
    np.dtype(np.int32): _int_range(np.int32),
    np.dtype(np.float32): (0.0, 1.0),
    np.dtype(np.float64): (0.0, 1.0),
}

SUPPORTED_DTYPES = tuple(NATIVE_RANGES)

# float32 has a 24-bit mantissa; wider integer spans are denormalized in float64.
_FLOAT32_EXACT_SPAN = 2**24


def _lookup(dtype: Any) -> Tuple[np.dtype, Tuple[float, float]]:
    try:
        dt = np.dtype(dtype)
    except TypeError as exc:
        raise UnsupportedTypeError(f"Not a numeric element type: {dtype!r}") from exc
    try:
        return dt, NATIVE_RANGES[dt]
    except KeyError:
        supported = ", ".join(str(d) for d in SUPPORTED_DTYPES)
        raise UnsupportedTypeError(
            f"Unsupported element type {dt}; expected one of: {supported}"
        ) from None


def native_range(dtype: Any) -> Tuple[float, float]:
    """
    Return ``(native_min, native_max)`` for a supported element type.

    Raises
    ------
    UnsupportedTypeError
        If ``dtype`` is not in :data:`NATIVE_RANGES`.
    """
    return _lookup(dtype)[1]


def working_dtype(dtype: Any, use_single: bool = False) -> np.dtype:
    """
    Floating type used for the remap.

    Floating images keep their own precision; integer images use float64,
    or float32 when ``use_single`` is set.
    """
    dt, _ = _lookup(dtype)
    if dt.kind == "f":
        return dt
    return np.dtype(np.float32) if use_single else np.dtype(np.float64)


def to_unit(x, backend: ArrayBackend, work_dtype: Any):
    """
    Cast ``x`` to ``work_dtype`` and map its native range onto [0, 1].

    Values are not clipped; floating images outside [0, 1] stay outside.
    """
    lo, hi = native_range(x.dtype)
    u = backend.astype(x, work_dtype)
    if lo == 0 and hi == 1:
        return u
    return (u - lo) / (hi - lo)


def from_unit(y, dtype: Any, backend: ArrayBackend):
    """
    Map normalized values back to the native representation of ``dtype``.

    Integers are rounded half-to-even and saturated to the type limits,
    floats are cast.
    """
    dt, (lo, hi) = _lookup(dtype)
    if dt.kind == "f":
        return backend.asarray(backend.astype(y, dt))

    if hi - lo > _FLOAT32_EXACT_SPAN:
        y = backend.astype(y, np.float64)
    scaled = backend.rint(y * (hi - lo) + lo)
    # ufuncs turn 0-d arrays into scalars
    return backend.asarray(backend.astype(backend.clip(scaled, lo, hi), dt))
