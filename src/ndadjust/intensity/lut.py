# src/ndadjust/intensity/lut.py
"""Lookup tables for small integer types."""
from __future__ import annotations

from typing import Any

import numpy as np

from ndadjust.core.backend import get_backend
from ndadjust.core.native import native_range
from ndadjust.errors import InvalidArgumentError, UnsupportedTypeError
from ndadjust.intensity.adjust import adjust

__all__ = [
    "LUT_DTYPES",
    "lookup_table",
    "apply_lookup_table",
]

LUT_DTYPES = (
    np.dtype(np.uint8),
    np.dtype(np.int8),
    np.dtype(np.uint16),
    np.dtype(np.int16),
)


def _lut_dtype(dtype: Any) -> np.dtype:
    native_range(dtype)
    dt = np.dtype(dtype)
    if dt not in LUT_DTYPES:
        raise UnsupportedTypeError(
            f"Lookup tables are limited to 8/16-bit integers, got {dt}"
        )
    return dt


def lookup_table(
    dtype: Any = np.uint8,
    in_level: Any = (),
    out_level: Any = None,
    gamma: float = 1.0,
) -> np.ndarray:
    """
    Adjusted value for every representable value of ``dtype``.

    Entry ``i`` holds the output for native value ``native_min + i``.
    ``in_level`` must be explicit limits (or ``[]`` for [0, 1]);
    saturation percentages depend on an image and are rejected.
    """
    dt = _lut_dtype(dtype)
    if in_level is None or np.ndim(in_level) == 0:
        raise InvalidArgumentError(
            "lookup_table needs explicit [low_in, high_in]; percentages depend on an image"
        )
    lo, hi = native_range(dt)
    values = np.arange(int(lo), int(hi) + 1, dtype=np.int64).astype(dt)
    return adjust(values, in_level, out_level, gamma)


def apply_lookup_table(image: Any, table: Any):
    """
    Map ``image`` through a table produced by :func:`lookup_table`.

    The table is moved to the image's device if needed.
    """
    backend = get_backend(image)
    arr = backend.asarray(image)
    dt = _lut_dtype(arr.dtype)
    lo, hi = native_range(dt)
    if len(table) != int(hi - lo) + 1:
        raise InvalidArgumentError(
            f"Table of length {len(table)} does not cover {dt} ({int(hi - lo) + 1} values)"
        )
    idx = backend.astype(arr, np.int32)
    if lo != 0:
        idx = idx - int(lo)
    return backend.asarray(backend.take(backend.asarray(table), idx))
