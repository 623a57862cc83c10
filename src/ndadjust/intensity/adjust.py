# src/ndadjust/intensity/adjust.py
"""N-D contrast stretching: saturate, remap through a gamma curve, recast."""
from __future__ import annotations

import math
from typing import Any

import numpy as np
from loguru import logger

from ndadjust.core.backend import ArrayBackend, get_backend
from ndadjust.core.levels import (
    DEFAULT_SPLIT,
    check_split,
    parse_in_level,
    resolve_out_level,
    stretch_limits,
)
from ndadjust.core.native import from_unit, to_unit, working_dtype
from ndadjust.errors import InvalidArgumentError

__all__ = [
    "adjust",
    "remap_unit",
    "check_gamma",
    "check_use_single",
]


def check_gamma(gamma: Any) -> float:
    if isinstance(gamma, (bool, np.bool_)):
        raise InvalidArgumentError(f"gamma must be a real number, got {gamma!r}")
    try:
        g = float(gamma)
    except (TypeError, ValueError) as exc:
        raise InvalidArgumentError(f"gamma must be a real number, got {gamma!r}") from exc
    if not (math.isfinite(g) and g > 0.0):
        raise InvalidArgumentError(f"gamma must be positive and finite, got {g}")
    return g


def check_use_single(use_single: Any) -> bool:
    """Accept a bool or a real numeric scalar (nonzero means True)."""
    if isinstance(use_single, (bool, np.bool_)):
        return bool(use_single)
    if isinstance(use_single, (str, bytes)) or np.ndim(use_single) != 0:
        raise InvalidArgumentError(f"use_single must be a scalar flag, got {use_single!r}")
    value = np.asarray(use_single)
    if value.dtype.kind not in "iuf" or np.isnan(value):
        raise InvalidArgumentError(f"use_single must be a bool or number, got {use_single!r}")
    return bool(value)


def remap_unit(
    u,
    low_in: float,
    high_in: float,
    low_out: float,
    high_out: float,
    gamma: float,
    backend: ArrayBackend,
):
    """
    Remap normalized values: clip to the input limits, apply gamma, rescale.

    Equal input limits send every element to ``low_out``.
    """
    x = backend.clip(u, low_in, high_in)
    span = high_in - low_in
    if span > 0.0:
        t = (x - low_in) / span
    else:
        t = backend.zeros_like(x)

    # rounding can leave t marginally outside [0, 1]
    t = backend.clip(t, 0.0, 1.0)
    if gamma != 1.0:
        t = backend.power(t, gamma)
    return t * (high_out - low_out) + low_out


def adjust(
    image: Any,
    in_level: Any = None,
    out_level: Any = None,
    gamma: float = 1.0,
    use_single: bool = False,
    *,
    split: float = DEFAULT_SPLIT,
):
    """
    Adjust the intensity values of an N-D grayscale image.

    Parameters
    ----------
    image : array-like
        Image of any dimensionality with element type uint8, uint16,
        uint32, int8, int16, int32, float32 or float64. Host (NumPy) and
        device (CuPy) arrays are both accepted.
    in_level : None, float, or sequence of two floats
        - None: saturate 1 % of the elements
        - float in (0, 1): saturate that fraction of the elements
        - ``[]``: input limits [0, 1]
        - ``[low_in, high_in]``: explicit limits in [0, 1] of the native range
    out_level : None or sequence of two floats
        ``[low_out, high_out]`` in [0, 1]; None or ``[]`` means [0, 1].
        ``high_out < low_out`` produces a negative.
    gamma : float, default=1.0
        Curve shape; < 1 brightens, > 1 darkens.
    use_single : bool or number, default=False
        Work in float32 instead of float64 for integer images; numeric
        flags count as True when nonzero.
    split : float, default=0.5
        Share of the saturation taken from the dark tail.

    Returns
    -------
    out : array
        New array with the shape, element type and device of ``image``.

    Raises
    ------
    InvalidArgumentError
        For malformed levels, gamma, split or use_single.
    UnsupportedTypeError
        For element types outside the native range table.
    """
    g = check_gamma(gamma)
    single = check_use_single(use_single)
    s = check_split(split)
    level = parse_in_level(in_level)
    low_out, high_out = resolve_out_level(out_level)

    backend = get_backend(image)
    arr = backend.asarray(image)
    work = working_dtype(arr.dtype, single)

    unit = to_unit(arr, backend, work)
    if isinstance(level, tuple):
        low_in, high_in = level
    else:
        low_in, high_in = stretch_limits(unit, level, split=s, backend=backend)

    logger.debug(
        "adjust[{}]: {} {} in=[{:.6g}, {:.6g}] out=[{:.6g}, {:.6g}] gamma={:.6g} work={}",
        backend.name,
        arr.dtype,
        tuple(arr.shape),
        low_in,
        high_in,
        low_out,
        high_out,
        g,
        work,
    )

    out = remap_unit(unit, low_in, high_in, low_out, high_out, g, backend)
    return from_unit(out, arr.dtype, backend)
