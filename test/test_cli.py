import logging
import os

from bot_kinematics.nodes.ik_cli import main

_CONFIG = os.path.join(os.path.dirname(__file__), os.pardir, "config", "kinematics.yaml")


def test_fk_prints_pose(capsys):
    assert main(["--config", _CONFIG, "fk", "0", "0", "0"]) == 0
    out = capsys.readouterr().out
    assert "position:    [0.080000, 0.020000, 0.800000]" in out
    assert "orientation:" in out


def test_ik_prints_solution(capsys):
    assert main(["--config", _CONFIG, "ik", "0.08", "0.02", "0.8", "--all"]) == 0
    out = capsys.readouterr().out
    assert "candidate 0:" in out
    line = next(l for l in out.splitlines() if l.startswith("solution:"))
    values = [float(v) for v in line.split("[")[1].rstrip("]").split(",")]
    assert all(abs(v) < 1e-5 for v in values)


def test_ik_unreachable_fails(capsys):
    assert main(["--config", _CONFIG, "ik", "3", "3", "3"]) == 1
    assert "solution:" not in capsys.readouterr().out


def test_missing_config(tmp_path):
    assert main(["--config", str(tmp_path / "missing.yaml"), "fk", "0", "0", "0"]) == 2


def test_ik_seed_clamped_into_limit(capsys, caplog):
    caplog.set_level(logging.INFO, logger="bot_kinematics")
    argv = ["--config", _CONFIG, "ik", "0.08", "0.02", "0.8", "--seed", "3", "-3", "0.5"]
    assert main(argv + ["--limit", "1.0"]) == 0
    assert "Seed clamped to joint limits: [1.000000, -1.000000, 0.500000]" in caplog.text
    line = next(l for l in capsys.readouterr().out.splitlines() if l.startswith("solution:"))
    values = [float(v) for v in line.split("[")[1].rstrip("]").split(",")]
    assert all(abs(v) <= 1.0 for v in values)
