# tests/test_cli.py
import json
from pathlib import Path

import pytest

from ndadjust.cli import main


def _table(out: str) -> dict[int, int]:
    rows = [line.split("\t") for line in out.strip().splitlines()]
    return {int(k): int(v) for k, v in rows}


def test_lut_command(capsys):
    assert main(["lut", "--in-level", "0.3", "0.7", "--step", "64"]) == 0
    table = _table(capsys.readouterr().out)
    assert sorted(table) == [0, 64, 128, 192, 255]
    assert table[0] == 0
    assert table[64] == 0
    assert table[192] == 255
    assert table[255] == 255


def test_lut_without_levels_is_identity(capsys):
    assert main(["lut", "--dtype", "int8", "--step", "1"]) == 0
    table = _table(capsys.readouterr().out)
    assert len(table) == 256
    assert all(k == v for k, v in table.items())


def test_bare_in_level_flag_means_full_range(capsys):
    assert main(["diagnostics", "--shape", "8x8", "--in-level"]) == 0
    out = capsys.readouterr().out
    requested = out.split("requested settings:", 1)[1]
    assert "input limits: [0.0000, 1.0000]" in requested


def test_lut_rejects_percentage():
    with pytest.raises(SystemExit) as excinfo:
        main(["lut", "--in-level", "0.05"])
    assert "ndadjust:" in str(excinfo.value.code)


def test_diagnostics_command(capsys):
    assert main(["diagnostics", "--shape", "16,16,2", "--dtype", "uint16"]) == 0
    out = capsys.readouterr().out
    assert "1% of elements saturated" in out
    assert "contrast limits [0.3 0.7]" in out
    assert "gamma 0.5" in out
    assert "requested settings" not in out


def test_diagnostics_with_requested_settings(capsys):
    assert main(["diagnostics", "--shape", "8x8", "--gamma", "2.0", "--out-level", "1", "0"]) == 0
    assert "requested settings" in capsys.readouterr().out


def test_settings_file_sets_defaults(tmp_path: Path, capsys):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"lut": {"gamma": 2.0}}), encoding="utf-8")

    assert main(["--settings", str(path), "lut", "--step", "128"]) == 0
    table = _table(capsys.readouterr().out)
    # (128 / 255) ** 2 * 255 = 64.25
    assert table[128] == 64


def test_save_settings(tmp_path: Path, capsys):
    path = tmp_path / "saved.json"
    assert main(["lut", "--in-level", "0.2", "0.8", "--gamma", "0.5", "--save-settings", str(path)]) == 0
    capsys.readouterr()

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["lut"]["gamma"] == 0.5
    assert data["lut"]["in_level"] == [0.2, 0.8]
    assert data["lut"]["dtype"] == "uint8"
