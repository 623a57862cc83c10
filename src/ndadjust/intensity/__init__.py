"""
ndadjust.intensity
==================

Intensity transforms for N-D grayscale images.

Submodules
----------
- :mod:`ndadjust.intensity.adjust` : Contrast stretching with saturation and gamma.
- :mod:`ndadjust.intensity.lut`    : Lookup tables for 8/16-bit integer images.
"""

from .adjust import adjust, remap_unit
from .lut import lookup_table, apply_lookup_table

__all__ = [
    "adjust",
    "remap_unit",
    "lookup_table",
    "apply_lookup_table",
]
