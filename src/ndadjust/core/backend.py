# src/ndadjust/core/backend.py
"""
Array backends: the small set of primitives the intensity transform needs.

The transform in :mod:`ndadjust.intensity.adjust` is written once against
:class:`ArrayBackend`. Host arrays go through :class:`NumpyBackend`; CuPy
device arrays go through :class:`CupyBackend`, so the result stays on the
device the input lives on.
"""
from __future__ import annotations

import importlib
from types import ModuleType
from typing import Any, List, Sequence, Tuple, Type

import numpy as np

__all__ = [
    "ArrayBackend",
    "NumpyBackend",
    "CupyBackend",
    "get_backend",
    "register_backend",
    "registered_backends",
]


class ArrayBackend:
    """
    Elementwise and reduction primitives over one array module.

    Subclasses only need to provide :attr:`xp` (a NumPy-compatible module)
    and :meth:`accepts`. Anything that differs from NumPy semantics can be
    overridden per method.
    """

    name: str = "abstract"

    @property
    def xp(self) -> ModuleType:
        raise NotImplementedError

    @classmethod
    def accepts(cls, obj: Any) -> bool:
        """Return True if this backend should process ``obj``."""
        raise NotImplementedError

    # -- construction / casting -------------------------------------------

    def asarray(self, obj: Any):
        return self.xp.asarray(obj)

    def astype(self, x, dtype):
        return x.astype(dtype, copy=False)

    def zeros_like(self, x):
        return self.xp.zeros_like(x)

    # -- elementwise ------------------------------------------------------

    def clip(self, x, lo: float, hi: float):
        return self.xp.clip(x, lo, hi)

    def power(self, x, exponent: float):
        return self.xp.power(x, exponent)

    def rint(self, x):
        return self.xp.rint(x)

    def take(self, table, indices):
        return self.xp.take(table, indices)

    # -- reductions -------------------------------------------------------

    def finite_values(self, x):
        """Flattened view of the finite elements of ``x``."""
        flat = x.reshape(-1)
        if flat.dtype.kind != "f":
            return flat
        return flat[self.xp.isfinite(flat)]

    def quantile(self, x, qs: Sequence[float]) -> Tuple[float, ...]:
        q = self.xp.asarray(list(qs), dtype=np.float64)
        values = self.xp.quantile(x, q)
        return tuple(float(v) for v in values.tolist())

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class NumpyBackend(ArrayBackend):
    """Host memory backend; also the fallback for generic array-likes."""

    name = "numpy"

    @property
    def xp(self) -> ModuleType:
        return np

    @classmethod
    def accepts(cls, obj: Any) -> bool:
        return True


class CupyBackend(ArrayBackend):
    """CUDA device backend; CuPy is only imported when a CuPy array shows up."""

    name = "cupy"

    def __init__(self) -> None:
        self._cp = importlib.import_module("cupy")

    @property
    def xp(self) -> ModuleType:
        return self._cp

    @classmethod
    def accepts(cls, obj: Any) -> bool:
        return type(obj).__module__.split(".", 1)[0] == "cupy"


# Searched in order; NumpyBackend accepts everything and must stay last.
_BACKENDS: List[Type[ArrayBackend]] = [CupyBackend, NumpyBackend]


def register_backend(backend: Type[ArrayBackend]) -> Type[ArrayBackend]:
    """
    Register an additional backend class, searched before the built-in ones.

    Usable as a class decorator. Registering the same class twice is a no-op.
    """
    if not (isinstance(backend, type) and issubclass(backend, ArrayBackend)):
        raise TypeError(f"Expected an ArrayBackend subclass, got {backend!r}")
    if backend not in _BACKENDS:
        _BACKENDS.insert(0, backend)
    return backend


def registered_backends() -> Tuple[Type[ArrayBackend], ...]:
    return tuple(_BACKENDS)


def get_backend(obj: Any) -> ArrayBackend:
    """
    Pick the backend for ``obj``.

    Parameters
    ----------
    obj : array-like
        Host ndarray, device array, or anything ``numpy.asarray`` accepts.

    Returns
    -------
    backend : ArrayBackend
        A fresh backend instance.
    """
    for cls in _BACKENDS:
        if cls.accepts(obj):
            return cls()
    return NumpyBackend()
