# tests/test_core_native.py
import numpy as np
import pytest

from ndadjust.core.backend import NumpyBackend
from ndadjust.core.native import (
    SUPPORTED_DTYPES,
    from_unit,
    native_range,
    to_unit,
    working_dtype,
)
from ndadjust.errors import UnsupportedTypeError


def test_native_range_table():
    assert native_range(np.uint8) == (0, 255)
    assert native_range("uint16") == (0, 65535)
    assert native_range(np.uint32) == (0, 2**32 - 1)
    assert native_range(np.int8) == (-128, 127)
    assert native_range(np.int16) == (-32768, 32767)
    assert native_range(np.int32) == (-(2**31), 2**31 - 1)
    assert native_range(np.float32) == (0.0, 1.0)
    assert native_range(np.float64) == (0.0, 1.0)
    assert len(SUPPORTED_DTYPES) == 8


@pytest.mark.parametrize("dtype", [np.bool_, np.float16, np.int64, np.complex64, object, "not-a-type"])
def test_native_range_unsupported(dtype):
    with pytest.raises(UnsupportedTypeError):
        native_range(dtype)


def test_working_dtype():
    assert working_dtype(np.uint8) == np.float64
    assert working_dtype(np.uint8, use_single=True) == np.float32
    assert working_dtype(np.int32, use_single=True) == np.float32
    assert working_dtype(np.float32) == np.float32
    assert working_dtype(np.float32, use_single=False) == np.float32
    assert working_dtype(np.float64, use_single=True) == np.float64


def test_unit_conversion_integer_extremes():
    backend = NumpyBackend()
    img = np.array([-32768, 0, 32767], dtype=np.int16)
    u = to_unit(img, backend, np.float64)
    assert u[0] == 0.0
    assert u[-1] == 1.0
    np.testing.assert_array_equal(from_unit(u, np.int16, backend), img)


def test_from_unit_saturates_and_rounds():
    backend = NumpyBackend()
    y = np.array([-0.5, 0.0, 0.5, 1.0, 1.5])
    np.testing.assert_array_equal(from_unit(y, np.uint8, backend), [0, 0, 128, 255, 255])


def test_from_unit_wide_integers_in_single_precision():
    backend = NumpyBackend()
    y = np.array([0.0, 1.0], dtype=np.float32)
    np.testing.assert_array_equal(from_unit(y, np.uint32, backend), [0, 2**32 - 1])
    np.testing.assert_array_equal(from_unit(y, np.int32, backend), [-(2**31), 2**31 - 1])


def test_float_images_are_not_rescaled():
    backend = NumpyBackend()
    img = np.array([-0.25, 0.5, 1.25], dtype=np.float32)
    u = to_unit(img, backend, np.float32)
    np.testing.assert_array_equal(u, img)
    assert from_unit(u.astype(np.float64), np.float32, backend).dtype == np.float32
