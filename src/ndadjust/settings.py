# src/ndadjust/settings.py
"""
Adjustment settings and their JSON settings files.

Top-level values in a settings file are shared by every command; an object
under a command name (``{"gamma": 0.8, "lut": {"gamma": 2.0}}``) overrides
them for that command.
"""
from __future__ import annotations

import argparse
import json
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional, Tuple, Union

import numpy as np

from ndadjust.core.levels import (
    DEFAULT_SPLIT,
    check_split,
    parse_in_level,
    resolve_out_level,
)
from ndadjust.errors import InvalidArgumentError
from ndadjust.intensity.adjust import adjust, check_gamma, check_use_single

PathLike = Union[str, Path]
LevelSetting = Union[None, float, Tuple[float, ...]]

__all__ = [
    "AdjustSettings",
    "add_settings_args",
    "strip_settings_args",
    "detect_command",
    "load_settings",
    "save_settings",
    "select_settings",
    "apply_settings_to_parser",
    "serialize_args",
    "find_subparser",
]


def _level_setting(value: Any) -> LevelSetting:
    if value is None:
        return None
    if np.ndim(value) == 0:
        return float(np.asarray(value).item())
    return tuple(float(v) for v in np.asarray(value).reshape(-1))


@dataclass(frozen=True)
class AdjustSettings:
    """Validated keyword arguments for :func:`ndadjust.adjust`."""

    in_level: LevelSetting = None
    out_level: LevelSetting = None
    gamma: float = 1.0
    use_single: bool = False
    split: float = DEFAULT_SPLIT

    def __post_init__(self) -> None:
        parse_in_level(self.in_level)
        resolve_out_level(self.out_level)
        object.__setattr__(self, "in_level", _level_setting(self.in_level))
        object.__setattr__(self, "out_level", _level_setting(self.out_level))
        object.__setattr__(self, "gamma", check_gamma(self.gamma))
        object.__setattr__(self, "use_single", check_use_single(self.use_single))
        object.__setattr__(self, "split", check_split(self.split))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "AdjustSettings":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise InvalidArgumentError(f"Unknown adjust settings: {', '.join(unknown)}")
        return cls(**dict(data))

    @classmethod
    def from_file(cls, path: PathLike, command: Optional[str] = None) -> "AdjustSettings":
        data = select_settings(load_settings(Path(path)), command)
        known = {f.name for f in fields(cls)}
        return cls.from_mapping({k: v for k, v in data.items() if k in known})

    def to_mapping(self) -> dict[str, Any]:
        out = asdict(self)
        for key in ("in_level", "out_level"):
            if isinstance(out[key], tuple):
                out[key] = list(out[key])
        return out

    def save(self, path: PathLike, command: Optional[str] = None) -> None:
        save_settings(Path(path), self.to_mapping(), command=command)

    def apply(self, image: Any):
        """Run :func:`ndadjust.adjust` on ``image`` with these settings."""
        return adjust(
            image,
            self.in_level,
            self.out_level,
            self.gamma,
            self.use_single,
            split=self.split,
        )


# ---------------------------------------------------------------------------
# Settings files
# ---------------------------------------------------------------------------

def _shared(data: Mapping[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in data.items() if not isinstance(value, dict)}


def load_settings(path: Path) -> dict[str, Any]:
    """
    Read a JSON settings file.

    Raises
    ------
    InvalidArgumentError
        If the file is missing, malformed, or not a JSON object.
    """
    if not path.exists():
        raise InvalidArgumentError(f"Settings file not found: {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise InvalidArgumentError(f"Settings file is not valid JSON: {path} ({exc})") from exc
    if not isinstance(data, dict):
        raise InvalidArgumentError(f"Settings file must be a JSON object: {path}")
    return data


def select_settings(data: Mapping[str, Any], command: str | None) -> dict[str, Any]:
    """Shared top-level values, overridden by the ``command`` section if present."""
    selected = _shared(data)
    section = data.get(command) if command else None
    if isinstance(section, dict):
        selected.update(section)
    return selected


def save_settings(
    path: Path,
    settings: Mapping[str, Any],
    *,
    command: str | None = None,
) -> None:
    """
    Write ``settings`` to a JSON file.

    Without ``command`` they replace the shared top-level values; with it
    they replace that command's section. Everything else in an existing
    file is kept.
    """
    data = load_settings(path) if path.exists() else {}
    if command:
        data[command] = dict(settings)
    else:
        data = {key: value for key, value in data.items() if isinstance(value, dict)}
        data.update(settings)

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, sort_keys=True) + "\n", encoding="utf-8")


# ---------------------------------------------------------------------------
# argparse integration
# ---------------------------------------------------------------------------

def add_settings_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--settings",
        dest="settings_path",
        default=None,
        help="Load option defaults from a settings file (json).",
    )
    parser.add_argument(
        "--save-settings",
        dest="save_settings_path",
        default=None,
        help="Save current option values to a settings file (json).",
    )


def strip_settings_args(
    argv: Iterable[str],
) -> tuple[list[str], str | None, str | None]:
    """Remove ``--settings``/``--save-settings`` from argv, returning their paths."""
    cleaned: list[str] = []
    settings_path: str | None = None
    save_path: str | None = None

    it = list(argv)
    i = 0
    while i < len(it):
        arg = it[i]
        if arg in ("--settings", "--save-settings"):
            if i + 1 >= len(it):
                raise InvalidArgumentError(f"{arg} requires a path.")
            if arg == "--settings":
                settings_path = it[i + 1]
            else:
                save_path = it[i + 1]
            i += 2
            continue
        if arg.startswith("--settings="):
            settings_path = arg.split("=", 1)[1]
        elif arg.startswith("--save-settings="):
            save_path = arg.split("=", 1)[1]
        else:
            cleaned.append(arg)
        i += 1

    return cleaned, settings_path, save_path


def detect_command(argv: Iterable[str]) -> str | None:
    for arg in argv:
        if not arg.startswith("-"):
            return arg
    return None


def _iter_actions(parser: argparse.ArgumentParser) -> list[argparse.Action]:
    return [action for action in parser._actions if hasattr(action, "dest")]


def apply_settings_to_parser(
    parser: argparse.ArgumentParser,
    settings: dict[str, Any],
) -> None:
    if not settings:
        return
    for action in _iter_actions(parser):
        if not action.option_strings:
            continue
        if action.dest not in settings:
            continue
        action.default = settings[action.dest]
        if getattr(action, "required", False):
            action.required = False


def _coerce_value(value: Any) -> Any:
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, tuple):
        return [_coerce_value(v) for v in value]
    if isinstance(value, np.generic):
        return value.item()
    return value


def serialize_args(
    args: argparse.Namespace,
    parser: argparse.ArgumentParser,
    *,
    exclude: set[str] | None = None,
) -> dict[str, Any]:
    if exclude is None:
        exclude = set()
    out: dict[str, Any] = {}
    for action in _iter_actions(parser):
        if not action.option_strings or action.dest in exclude:
            continue
        if action.dest == "help":
            continue
        out[action.dest] = _coerce_value(getattr(args, action.dest, None))
    return out


def find_subparser(
    parser: argparse.ArgumentParser,
    command: str | None,
) -> argparse.ArgumentParser | None:
    if not command:
        return None
    for action in parser._actions:
        if isinstance(action, argparse._SubParsersAction):
            return action.choices.get(command)
    return None
