# src/ndadjust/errors.py
"""Exceptions raised by the intensity adjustment routines."""
from __future__ import annotations

__all__ = [
    "AdjustError",
    "InvalidArgumentError",
    "UnsupportedTypeError",
]


class AdjustError(Exception):
    """Base class for every error raised by ndadjust."""


class InvalidArgumentError(AdjustError, ValueError):
    """An argument (levels, gamma, flags) is malformed or out of range."""


class UnsupportedTypeError(AdjustError, TypeError):
    """The image element type has no entry in the native range table."""
