"""Tests for the command-line interface."""

import argparse
import json

import pytest

from cubepath.cli import main, parse_dims


def test_parse_dims():
    assert parse_dims("3x4x5") == (3, 4, 5)
    assert parse_dims("4") == (4, 4, 4)
    assert parse_dims("2X2X3") == (2, 2, 3)
    with pytest.raises(argparse.ArgumentTypeError):
        parse_dims("3x4")
    with pytest.raises(argparse.ArgumentTypeError):
        parse_dims("axbxc")


def test_analyze_exit_codes():
    assert main(["analyze", "--dims", "3x3x3", "--start", "0,0,0"]) == 0
    assert main(["analyze", "--dims", "3x3x3", "--start", "1,0,0"]) == 1


def test_generate_writes_json_and_plot(tmp_path):
    out = tmp_path / "result.json"
    plot = tmp_path / "plots" / "path.png"
    code = main([
        "generate", "--dims", "3x3x3", "--start", "0,0,0", "--seed", "1",
        "--json", str(out), "--plot", str(plot),
    ])
    assert code == 0
    data = json.loads(out.read_text(encoding="utf-8"))
    assert data["covered"] == 27
    assert data["seed"] == 1
    assert plot.exists()


def test_generate_infeasible_start_fails():
    assert main(["generate", "--dims", "3x3x3", "--start", "1,0,0", "--seed", "0"]) == 1


def test_generate_random_mode():
    assert main(["generate", "--dims", "4x4x4", "--start", "1,1,1", "--mode", "random", "--seed", "3"]) == 0


def test_dimension_out_of_range():
    assert main(["analyze", "--dims", "9x3x3", "--start", "0,0,0"]) == 2


def test_missing_config_file(tmp_path):
    missing = str(tmp_path / "nope.yaml")
    assert main(["--config", missing, "analyze", "--dims", "3", "--start", "0,0,0"]) == 2


def test_play():
    assert main(["play", "--dims", "2x2x2", "--start", "0,0,0", "--seed", "0", "--speed", "0.5"]) == 0


def test_sweep_json(tmp_path, default_config_path):
    out = tmp_path / "sweep.json"
    code = main([
        "--config", default_config_path,
        "sweep", "--sizes", "2x2x2", "--starts", "corners", "--json", str(out),
    ])
    assert code == 0
    data = json.loads(out.read_text(encoding="utf-8"))
    assert len(data["results"]) == 8
    assert data["summary"][0]["complete"] == 8


@pytest.mark.parametrize("speed", ["0", "-0.5", "fast"])
def test_play_rejects_bad_speed(speed):
    with pytest.raises(SystemExit) as exc:
        main(["play", "--dims", "2x2x2", "--start", "0,0,0", "--speed", speed])
    assert exc.value.code == 2


def test_play_with_reveal(tmp_path):
    config = tmp_path / "reveal.yaml"
    config.write_text("playback:\n  speed: 0.5\n  reveal_budget_ms: 70\n", encoding="utf-8")
    assert main(["--config", str(config), "play", "--dims", "2x2x2", "--start", "0,0,0", "--reveal"]) == 0


def test_play_config_with_zero_speed(tmp_path):
    config = tmp_path / "zero.yaml"
    config.write_text("playback:\n  speed: 0\n", encoding="utf-8")
    assert main(["--config", str(config), "play", "--dims", "2x2x2", "--start", "0,0,0"]) == 2
