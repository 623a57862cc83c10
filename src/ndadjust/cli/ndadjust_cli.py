from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any, Optional, Sequence

import numpy as np
from loguru import logger

from ndadjust import __version__
from ndadjust.core.backend import get_backend
from ndadjust.core.levels import parse_in_level, stretch_limits
from ndadjust.core.native import SUPPORTED_DTYPES, native_range, to_unit, working_dtype
from ndadjust.errors import AdjustError
from ndadjust.intensity.lut import LUT_DTYPES, lookup_table
from ndadjust.logging import setup_logger
from ndadjust.settings import (
    AdjustSettings,
    add_settings_args,
    apply_settings_to_parser,
    detect_command,
    find_subparser,
    load_settings,
    save_settings,
    select_settings,
    serialize_args,
    strip_settings_args,
)

# Reference adjustments reported by ``diagnostics``.
DIAGNOSTIC_SCENARIOS = (
    ("1% of elements saturated", {}),
    ("0.1% of elements saturated", {"in_level": 0.001}),
    ("contrast limits [0.3 0.7]", {"in_level": (0.3, 0.7)}),
    ("gamma 0.5", {"in_level": (), "gamma": 0.5}),
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _parse_shape(text: str) -> tuple[int, ...]:
    try:
        shape = tuple(int(part) for part in text.replace("x", ",").split(",") if part.strip())
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Invalid shape {text!r}") from exc
    if not shape or any(n <= 0 for n in shape):
        raise argparse.ArgumentTypeError(f"Shape must be positive integers, got {text!r}")
    return shape


def _cli_level(value: Any) -> Any:
    """argparse gives lists; one value is a percentage, two are limits."""
    if value is None or np.ndim(value) == 0:
        return value
    values = list(value)
    if len(values) == 1:
        return float(values[0])
    return values


def _settings_from_args(args: argparse.Namespace) -> AdjustSettings:
    return AdjustSettings(
        in_level=_cli_level(args.in_level),
        out_level=_cli_level(args.out_level),
        gamma=args.gamma,
        use_single=bool(args.use_single),
        split=args.split,
    )


def _synthetic_volume(shape: Sequence[int], dtype: np.dtype, seed: int) -> np.ndarray:
    """Low-contrast volume: values huddle around 40% of the native range."""
    rng = np.random.default_rng(seed)
    unit = np.clip(rng.normal(0.4, 0.05, size=tuple(shape)), 0.0, 1.0)
    lo, hi = native_range(dtype)
    if dtype.kind == "f":
        return unit.astype(dtype)
    return np.rint(unit * (hi - lo) + lo).astype(dtype)


def _saturated_fraction(out: np.ndarray) -> float:
    if out.size == 0:
        return 0.0
    at_edges = (out == out.min()) | (out == out.max())
    return float(np.count_nonzero(at_edges)) / out.size


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

def _cmd_diagnostics(args: argparse.Namespace) -> int:
    dtype = np.dtype(args.dtype)
    vol = _synthetic_volume(args.shape, dtype, args.seed)
    base = _settings_from_args(args)
    backend = get_backend(vol)
    unit = to_unit(vol, backend, working_dtype(dtype, base.use_single))

    print(f"ndadjust v{__version__}: synthetic {dtype} volume {vol.shape}\n")
    print(f"  input range: [{vol.min()}, {vol.max()}]")

    scenarios = list(DIAGNOSTIC_SCENARIOS)
    if args.in_level is not None or args.out_level is not None or args.gamma != 1.0:
        scenarios.append(("requested settings", base.to_mapping()))

    for label, overrides in scenarios:
        settings = AdjustSettings.from_mapping(
            {"use_single": base.use_single, "split": base.split, **overrides}
        )
        level = parse_in_level(settings.in_level)
        if isinstance(level, tuple):
            limits = level
        else:
            limits = stretch_limits(unit, level, split=settings.split, backend=backend)
        out = settings.apply(vol)
        print(f"\n{label}:")
        print(f"  input limits: [{limits[0]:.4f}, {limits[1]:.4f}]")
        print(f"  output range: [{out.min()}, {out.max()}]")
        print(f"  saturated:    {100.0 * _saturated_fraction(out):.2f}%")
    return 0


def _cmd_lut(args: argparse.Namespace) -> int:
    settings = _settings_from_args(args)
    in_level = () if settings.in_level is None else settings.in_level
    table = lookup_table(args.dtype, in_level, settings.out_level, settings.gamma)
    lo, _ = native_range(args.dtype)
    step = max(1, int(args.step))
    for i in range(0, len(table), step):
        print(f"{int(lo) + i}\t{table[i]}")
    if (len(table) - 1) % step:
        print(f"{int(lo) + len(table) - 1}\t{table[-1]}")
    return 0


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------

def _add_adjust_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--in-level",
        dest="in_level",
        type=float,
        nargs="*",
        default=None,
        help="One value: saturation fraction in (0, 1). Two: LOW_IN HIGH_IN in [0, 1]. "
        "The flag with no values means the full range [0, 1]. Omitted: 1%% saturation "
        "for diagnostics, full range for lut.",
    )
    parser.add_argument(
        "--out-level",
        dest="out_level",
        type=float,
        nargs="*",
        default=None,
        help="LOW_OUT HIGH_OUT in [0, 1]; HIGH_OUT < LOW_OUT inverts.",
    )
    parser.add_argument(
        "--gamma",
        type=float,
        default=1.0,
        help="Curve shape (<1 brighter, >1 darker).",
    )
    parser.add_argument(
        "--use-single",
        dest="use_single",
        action="store_true",
        help="Work in float32 for integer images.",
    )
    parser.add_argument(
        "--split",
        type=float,
        default=0.5,
        help="Share of the saturation taken from the dark tail.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ndadjust",
        description="Contrast stretching for N-D grayscale images.",
    )
    add_settings_args(parser)
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log resolved limits and working precision.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # ---- diagnostics ----
    p_diag = subparsers.add_parser(
        "diagnostics",
        help="Adjust a synthetic low-contrast volume and report the result.",
    )
    add_settings_args(p_diag)
    p_diag.add_argument(
        "--shape",
        type=_parse_shape,
        default=(32, 32, 1, 8),
        help="Volume shape, e.g. 32,32,1,8.",
    )
    p_diag.add_argument(
        "--dtype",
        choices=[str(dt) for dt in SUPPORTED_DTYPES],
        default="uint8",
        help="Element type of the synthetic volume.",
    )
    p_diag.add_argument("--seed", type=int, default=0, help="Random seed.")
    _add_adjust_args(p_diag)
    p_diag.set_defaults(func=_cmd_diagnostics)

    # ---- lut ----
    p_lut = subparsers.add_parser(
        "lut",
        help="Print the lookup table for an 8/16-bit integer type.",
    )
    add_settings_args(p_lut)
    p_lut.add_argument(
        "--dtype",
        choices=[str(dt) for dt in LUT_DTYPES],
        default="uint8",
        help="Integer element type.",
    )
    p_lut.add_argument(
        "--step",
        type=int,
        default=16,
        help="Print every STEP-th entry.",
    )
    _add_adjust_args(p_lut)
    p_lut.set_defaults(func=_cmd_lut)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = _build_parser()
    raw_argv = list(argv) if argv is not None else sys.argv[1:]
    try:
        cleaned_argv, settings_path, save_path = strip_settings_args(raw_argv)
        command = detect_command(cleaned_argv)

        if settings_path:
            settings_data = load_settings(Path(settings_path))
            settings = select_settings(settings_data, command)
            target = find_subparser(parser, command) or parser
            apply_settings_to_parser(target, settings)

        args = parser.parse_args(cleaned_argv)
        setup_logger(args.verbose)
        if settings_path:
            logger.debug("Loaded settings from {}", settings_path)

        if save_path:
            cmd = getattr(args, "command", command)
            target = find_subparser(parser, cmd) or parser
            exclude = {"settings_path", "save_settings_path", "command", "func", "help", "version"}
            settings_out = serialize_args(args, target, exclude=exclude)
            save_settings(Path(save_path), settings_out, command=cmd)
            logger.info("Saved settings to {}", save_path)

        return args.func(args)
    except AdjustError as exc:
        raise SystemExit(f"ndadjust: {exc}") from exc


if __name__ == "__main__":
    raise SystemExit(main())
