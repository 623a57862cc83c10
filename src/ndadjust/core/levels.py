# src/ndadjust/core/levels.py
"""Input/output level parsing and saturation-based contrast limits."""
from __future__ import annotations

import math
from typing import Any, Optional, Tuple, Union

import numpy as np
from loguru import logger

from ndadjust.core.backend import ArrayBackend, get_backend
from ndadjust.errors import InvalidArgumentError

Level = Tuple[float, float]
ParsedInLevel = Union[float, Level]

DEFAULT_SATURATION = 0.01
DEFAULT_SPLIT = 0.5
FULL_RANGE: Level = (0.0, 1.0)

__all__ = [
    "DEFAULT_SATURATION",
    "DEFAULT_SPLIT",
    "FULL_RANGE",
    "parse_in_level",
    "resolve_in_level",
    "resolve_out_level",
    "stretch_limits",
    "check_percent",
    "check_split",
]


def _as_level_array(level: Any, name: str) -> np.ndarray:
    if isinstance(level, (str, bytes)):
        raise InvalidArgumentError(f"{name} must be numeric, got {level!r}")
    try:
        arr = np.asarray(level)
    except (TypeError, ValueError) as exc:
        raise InvalidArgumentError(f"{name} must be numeric, got {level!r}") from exc
    if arr.size and arr.dtype.kind not in "iuf":
        raise InvalidArgumentError(
            f"{name} must contain real numbers, got dtype {arr.dtype}"
        )
    return arr


def _parse_pair(arr: np.ndarray, name: str) -> Level:
    if arr.size == 0:
        return FULL_RANGE
    if arr.size != 2:
        raise InvalidArgumentError(
            f"{name} must have two elements [low, high], got {arr.size}"
        )
    low, high = (float(v) for v in arr.reshape(-1))
    for v in (low, high):
        if not math.isfinite(v) or not 0.0 <= v <= 1.0:
            raise InvalidArgumentError(
                f"{name} values must lie in [0, 1], got [{low}, {high}]"
            )
    return low, high


def check_percent(percent: Any) -> float:
    """Validate a saturation percentage; it must lie strictly inside (0, 1)."""
    if isinstance(percent, (bool, np.bool_)):
        raise InvalidArgumentError(f"Saturation percentage must be numeric, got {percent!r}")
    try:
        p = float(percent)
    except (TypeError, ValueError) as exc:
        raise InvalidArgumentError(
            f"Saturation percentage must be numeric, got {percent!r}"
        ) from exc
    if not (math.isfinite(p) and 0.0 < p < 1.0):
        raise InvalidArgumentError(f"Saturation percentage must lie in (0, 1), got {p}")
    return p


def check_split(split: Any) -> float:
    """Validate the low-tail share of the saturation, in [0, 1]."""
    if isinstance(split, (bool, np.bool_)):
        raise InvalidArgumentError(f"split must be numeric, got {split!r}")
    try:
        s = float(split)
    except (TypeError, ValueError) as exc:
        raise InvalidArgumentError(f"split must be numeric, got {split!r}") from exc
    if not (math.isfinite(s) and 0.0 <= s <= 1.0):
        raise InvalidArgumentError(f"split must lie in [0, 1], got {s}")
    return s


def parse_in_level(in_level: Any) -> ParsedInLevel:
    """
    Validate an input-level argument without touching any image.

    Parameters
    ----------
    in_level : None, scalar, or sequence
        - None: default saturation of 1 %
        - scalar: saturation percentage in (0, 1)
        - empty sequence: full range [0, 1]
        - two elements: explicit ``[low_in, high_in]`` in [0, 1]

    Returns
    -------
    float or (float, float)
        A percentage, or explicit limits.

    Raises
    ------
    InvalidArgumentError
    """
    if in_level is None:
        return DEFAULT_SATURATION
    if isinstance(in_level, (bool, np.bool_)):
        raise InvalidArgumentError(f"in_level must be numeric, got {in_level!r}")

    arr = _as_level_array(in_level, "in_level")
    if arr.ndim == 0:
        return check_percent(arr.item())

    low, high = _parse_pair(arr, "in_level")
    if low > high:
        raise InvalidArgumentError(
            f"in_level low must not exceed high, got [{low}, {high}]"
        )
    return low, high


def resolve_out_level(out_level: Any) -> Level:
    """
    Resolve the output range; None or empty means [0, 1].

    ``high_out < low_out`` is valid and inverts the image.
    """
    if out_level is None:
        return FULL_RANGE
    if isinstance(out_level, (bool, np.bool_)):
        raise InvalidArgumentError(f"out_level must be numeric, got {out_level!r}")
    arr = _as_level_array(out_level, "out_level")
    if arr.ndim == 0:
        raise InvalidArgumentError(
            f"out_level must have two elements [low, high], got scalar {arr.item()!r}"
        )
    return _parse_pair(arr, "out_level")


def stretch_limits(
    unit_image: Any,
    percent: float = DEFAULT_SATURATION,
    split: float = DEFAULT_SPLIT,
    backend: Optional[ArrayBackend] = None,
) -> Level:
    """
    Contrast limits that saturate ``percent`` of the elements.

    Parameters
    ----------
    unit_image : array
        Image already normalized to its [0, 1] native range.
    percent : float, default=0.01
        Fraction of elements to saturate, in (0, 1).
    split : float, default=0.5
        Share of ``percent`` taken from the low tail; the rest comes from
        the high tail.
    backend : ArrayBackend, optional
        Defaults to the backend matching ``unit_image``.

    Returns
    -------
    (low, high) : tuple of float
        Quantiles at ``percent * split`` and ``1 - percent * (1 - split)``
        of the finite values. Falls back to ``(0.0, 1.0)`` when they
        coincide (flat image) or the image holds no finite value.
    """
    p = check_percent(percent)
    s = check_split(split)
    if backend is None:
        backend = get_backend(unit_image)

    values = backend.finite_values(backend.asarray(unit_image))
    if values.size == 0:
        logger.debug("No finite values; using full range for contrast limits")
        return FULL_RANGE

    low, high = backend.quantile(values, (p * s, 1.0 - p * (1.0 - s)))
    if not high > low:
        logger.debug("Flat image (limits {:.6g}); using full range", low)
        return FULL_RANGE
    return low, high


def resolve_in_level(
    unit_image: Any,
    in_level: Any = None,
    backend: Optional[ArrayBackend] = None,
    split: float = DEFAULT_SPLIT,
) -> Level:
    """Concrete ``(low_in, high_in)`` for ``unit_image`` from an in-level argument."""
    parsed = parse_in_level(in_level)
    if isinstance(parsed, tuple):
        return parsed
    return stretch_limits(unit_image, parsed, split=split, backend=backend)
