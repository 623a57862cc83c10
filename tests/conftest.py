# tests/conftest.py
from __future__ import annotations

import numpy as np
import pytest

from ndadjust.core import backend as backend_mod


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(0)


@pytest.fixture
def low_contrast_u16(rng) -> np.ndarray:
    """2-D uint16 image huddled around 40% of the native range."""
    unit = np.clip(rng.normal(0.4, 0.05, size=(200, 200)), 0.0, 1.0)
    return np.rint(unit * 65535).astype(np.uint16)


@pytest.fixture
def isolated_backends(monkeypatch):
    """Backend registry that is restored after the test."""
    monkeypatch.setattr(backend_mod, "_BACKENDS", list(backend_mod._BACKENDS))
    return backend_mod
