import csv
import json

import pytest

from ServoFilter.core.app import load_samples, main
from ServoFilter.filters.iir6 import IIR6


def _settings(tmp_path):
    rec = IIR6(ba=(1.0,) + (0.0,) * 6 + (1.0,) + (0.0,) * 5, y_min=-3.0, y_max=3.0)
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"channels": {"servo": rec.to_dict()}}), encoding="utf-8")
    return str(path)


def _samples(tmp_path, rows):
    path = tmp_path / "samples.csv"
    with open(path, "w", newline="", encoding="utf-8") as f:
        w = csv.writer(f)
        w.writerow(["x", "hold"])
        w.writerows(rows)
    return str(path)


def test_load_samples_reads_hold_column(tmp_path):
    xs, holds = load_samples(_samples(tmp_path, [[1, 0], [2.5, 1], [-1, "true"]]))
    assert xs == [1.0, 2.5, -1.0]
    assert holds == [False, True, True]


def test_filter_writes_outputs(tmp_path, capsys):
    settings = _settings(tmp_path)
    samples = _samples(tmp_path, [[1, 0]] * 5 + [[-1, 0], [5, 1], [-1, 0]])
    out = tmp_path / "out.csv"
    rc = main(["--settings", settings, "filter", samples, "--channel", "servo", "--out", str(out)])
    assert rc == 0
    with open(out, newline="", encoding="utf-8") as f:
        rows = list(csv.DictReader(f))
    ys = [float(r["y"]) for r in rows]
    # integrator saturates at 3, recovers immediately, holds, then continues
    assert ys == [1.0, 2.0, 3.0, 3.0, 3.0, 2.0, 2.0, 1.0]
    assert [r["hold"] for r in rows][6] == "1"
    printed = capsys.readouterr().out
    assert "Samples:    8" in printed
    assert "Saturated:  3" in printed


def test_filter_saves_plot(tmp_path):
    settings = _settings(tmp_path)
    samples = _samples(tmp_path, [[1, 0]] * 4)
    plot = tmp_path / "response.png"
    assert main(["--settings", settings, "filter", samples, "--channel", "servo", "--plot", str(plot)]) == 0
    assert plot.exists() and plot.stat().st_size > 0


def test_unknown_channel_exit_code(tmp_path, capsys):
    settings = _settings(tmp_path)
    samples = _samples(tmp_path, [[1, 0]])
    assert main(["--settings", settings, "filter", samples, "--channel", "nope"]) == 2
    assert "nope" in capsys.readouterr().err


def test_bad_sample_exit_code(tmp_path, capsys):
    settings = _settings(tmp_path)
    samples = _samples(tmp_path, [[1, 0], ["abc", 0]])
    assert main(["--settings", settings, "filter", samples, "--channel", "servo"]) == 2
    assert "bad sample" in capsys.readouterr().err


def test_show_lists_channels(tmp_path, capsys):
    settings = _settings(tmp_path)
    assert main(["--settings", settings, "show"]) == 0
    out = capsys.readouterr().out
    assert out.startswith("servo: limits=[-3.0, 3.0]")
    assert f"ba=[1.0, {', '.join(['0.0'] * 6)}, 1.0" in out


def _write_channel(tmp_path, config):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"channels": {"servo": config}}), encoding="utf-8")
    return str(path)


@pytest.mark.parametrize(
    "config, field",
    [
        ({"ba": [0] * 13, "y_offset": 0, "y_min": 1.0, "y_max": -1.0}, "y_min"),
        ({"ba": ["0.5"] * 13, "y_offset": 0, "y_min": -1.0, "y_max": 1.0}, "ba"),
    ],
)
def test_invalid_channel_config_exit_code(tmp_path, capsys, config, field):
    settings = _write_channel(tmp_path, config)
    samples = _samples(tmp_path, [[1, 0]])
    assert main(["--settings", settings, "filter", samples, "--channel", "servo"]) == 2
    assert field in capsys.readouterr().err
    assert main(["--settings", settings, "show"]) == 2


def test_non_object_settings_exit_code(tmp_path, capsys):
    path = tmp_path / "settings.json"
    path.write_text("[]", encoding="utf-8")
    assert main(["--settings", str(path), "show"]) == 2
    assert "cannot load settings" in capsys.readouterr().err
