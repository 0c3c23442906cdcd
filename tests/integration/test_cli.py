from __future__ import annotations

from pathlib import Path

import yaml
from typer.testing import CliRunner

from pcsimp.cli.main import app, build_grid
from pcsimp.config import load_config


def _write_config(path: Path, **overrides) -> Path:
    config = {
        "grid": {"x_left": 0.0, "x_right": 2.0, "y_left": 0.0, "y_right": 2.0, "quant": 0.5, "indices": True},
        "flags": ["POINTS"],
        "simp": {"cores": 2},
        "window": {"width": 240, "height": 240},
    }
    config.update(overrides)
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(config, f)
    return path


def test_cli_grid_summary(tmp_path: Path) -> None:
    cfg_path = _write_config(tmp_path / "scenario.yaml")

    runner = CliRunner()
    result = runner.invoke(app, ["grid", str(cfg_path)])

    assert result.exit_code == 0, result.output
    assert "points: 16 x 2" in result.output
    assert "triangles: 18" in result.output
    assert "cores: 2" in result.output


def test_cli_grid_preview(tmp_path: Path) -> None:
    cfg_path = _write_config(tmp_path / "scenario.yaml")
    preview = tmp_path / "out" / "grid.png"

    runner = CliRunner()
    result = runner.invoke(app, ["grid", str(cfg_path), "--preview", str(preview)])

    assert result.exit_code == 0, result.output
    assert preview.exists()


def test_cli_grid_rejects_bad_config(tmp_path: Path) -> None:
    cfg_path = _write_config(
        tmp_path / "scenario.yaml",
        grid={"x_left": 1.0, "x_right": 0.0, "y_left": 0.0, "y_right": 1.0, "quant": 0.5},
    )

    runner = CliRunner()
    result = runner.invoke(app, ["grid", str(cfg_path)])
    assert result.exit_code == 1


def test_cli_flags() -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["flags", "points", "MESH"])
    assert result.exit_code == 0, result.output
    assert "mask: 129" in result.output
    assert "declared: MESH, POINTS" in result.output
    assert "channels: NORMALS, POINTS, RGB, TRIANGLES" in result.output

    bad = runner.invoke(app, ["flags", "alpha"])
    assert bad.exit_code != 0


def test_build_grid_uses_scenario_dtype_and_flags(tmp_path: Path) -> None:
    cfg = load_config(_write_config(tmp_path / "scenario.yaml", simp={"dtype": "float64"}, flags=["RGB"]))
    cloud = build_grid(cfg)
    assert cloud.dtype.name == "float64"
    assert cloud.flags == 0b1011
