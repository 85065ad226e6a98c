"""Tests for the headless command-line runner."""

from __future__ import annotations

from atomsim.cli import main, parse_args


def test_parse_args_defaults(project_root) -> None:
    args = parse_args([str(project_root / "config" / "presets" / "water.yaml")])
    assert args.steps == 100
    assert args.log_level == "WARNING"
    assert not args.ui


def test_headless_run_prints_summary(project_root, capsys) -> None:
    path = project_root / "config" / "presets" / "water.yaml"
    assert main([str(path), "--steps", "5"]) == 0
    out = capsys.readouterr().out
    assert out.startswith("Water: step 5")
    assert "atoms: 3  bonds: 2  molecules: 1" in out


def test_guided_run_reports_target(project_root, capsys) -> None:
    path = project_root / "config" / "presets" / "guided_water.yaml"
    assert main([str(path), "--steps", "3"]) == 0
    out = capsys.readouterr().out
    assert "target H2O: composition_complete=True formed=True" in out
