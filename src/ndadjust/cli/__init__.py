"""
ndadjust.cli
============

Command-line entry points.

- :mod:`ndadjust.cli.ndadjust_cli` : ``ndadjust diagnostics`` and ``ndadjust lut``.
"""

from .ndadjust_cli import main

__all__ = ["main"]
