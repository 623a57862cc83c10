# tests/test_core_levels.py
import numpy as np
import pytest

from ndadjust.core.levels import (
    DEFAULT_SATURATION,
    FULL_RANGE,
    parse_in_level,
    resolve_in_level,
    resolve_out_level,
    stretch_limits,
)
from ndadjust.errors import InvalidArgumentError


def test_parse_in_level_forms():
    assert parse_in_level(None) == DEFAULT_SATURATION
    assert parse_in_level(0.2) == pytest.approx(0.2)
    assert parse_in_level(np.float32(0.25)) == pytest.approx(0.25)
    assert parse_in_level([]) == FULL_RANGE
    assert parse_in_level(np.empty(0)) == FULL_RANGE
    assert parse_in_level([0.3, 0.7]) == (0.3, 0.7)
    # column vector, as written [LOW_IN; HIGH_IN]
    assert parse_in_level(np.array([[0.3], [0.7]])) == (0.3, 0.7)
    assert parse_in_level((0, 1)) == (0.0, 1.0)
    assert parse_in_level([0.4, 0.4]) == (0.4, 0.4)


@pytest.mark.parametrize(
    "bad",
    [0.0, 1.0, 1.5, float("inf"), [0.1], [0.1, 0.2, 0.3], [-0.1, 0.5], [0.5, float("nan")],
     [0.8, 0.2], "0.5", [None, 0.5], [True, False]],
)
def test_parse_in_level_rejects(bad):
    with pytest.raises(InvalidArgumentError):
        parse_in_level(bad)


def test_resolve_out_level():
    assert resolve_out_level(None) == FULL_RANGE
    assert resolve_out_level([]) == FULL_RANGE
    assert resolve_out_level([0.9, 0.1]) == (0.9, 0.1)
    for bad in (0.5, [0.1, 1.1], ["lo", "hi"], [0.1, 0.2, 0.3]):
        with pytest.raises(InvalidArgumentError):
            resolve_out_level(bad)


def test_stretch_limits_on_ramp():
    ramp = np.linspace(0.0, 1.0, 101)
    low, high = stretch_limits(ramp, 0.02)
    assert low == pytest.approx(0.01)
    assert high == pytest.approx(0.99)


def test_stretch_limits_split():
    ramp = np.linspace(0.0, 1.0, 101)
    low, high = stretch_limits(ramp, 0.1, split=0.0)
    assert low == pytest.approx(0.0)
    assert high == pytest.approx(0.9)

    low, high = stretch_limits(ramp, 0.1, split=1.0)
    assert low == pytest.approx(0.1)
    assert high == pytest.approx(1.0)


def test_stretch_limits_ignores_non_finite():
    ramp = np.linspace(0.0, 1.0, 101)
    noisy = np.concatenate([ramp, [np.nan, np.inf, -np.inf]])
    assert stretch_limits(noisy, 0.02) == pytest.approx(stretch_limits(ramp, 0.02))


def test_stretch_limits_fall_back_to_full_range():
    assert stretch_limits(np.full((5, 5), 0.4), 0.01) == FULL_RANGE
    assert stretch_limits(np.full(3, np.nan), 0.01) == FULL_RANGE
    assert stretch_limits(np.empty((0, 4)), 0.01) == FULL_RANGE


def test_stretch_limits_validates():
    with pytest.raises(InvalidArgumentError):
        stretch_limits(np.zeros(4), 0.0)
    with pytest.raises(InvalidArgumentError):
        stretch_limits(np.zeros(4), 0.1, split=-0.5)


def test_resolve_in_level():
    ramp = np.linspace(0.0, 1.0, 101)
    assert resolve_in_level(ramp, [0.2, 0.4]) == (0.2, 0.4)
    low, high = resolve_in_level(ramp)
    assert low == pytest.approx(0.005)
    assert high == pytest.approx(0.995)
