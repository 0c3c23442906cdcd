from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from pcsimp.config import ScenarioConfig, load_config
from pcsimp.core.flags import AttributeFlag


def _write(path: Path, data) -> Path:
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(data, f)
    return path


def test_load_config_with_defaults(tmp_path: Path) -> None:
    cfg = load_config(_write(tmp_path / "c.yaml", {
        "grid": {"x_left": 0.0, "x_right": 2.0, "y_left": 0.0, "y_right": 1.0, "quant": 1.0},
    }))
    assert cfg.simp.cores == 1
    assert cfg.flags == ["POINTS"]
    assert cfg.flag_mask() == AttributeFlag.POINTS.mask
    assert cfg.window is None


def test_flag_names_and_indices(tmp_path: Path) -> None:
    cfg = load_config(_write(tmp_path / "c.yaml", {
        "grid": {"x_left": 0, "x_right": 1, "y_left": 0, "y_right": 1, "quant": 0.5, "indices": True},
        "flags": ["points", "rgb"],
        "simp": {"cores": 4, "dtype": "float64"},
        "window": {"width": 300, "height": 200},
    }))
    assert cfg.flags == ["POINTS", "RGB"]
    assert cfg.flag_mask() == 0b1011
    assert cfg.simp.cores == 4
    assert cfg.window is not None and cfg.window.to_spec().width == 300


@pytest.mark.parametrize("grid", [
    {"x_left": 0, "x_right": 1, "y_left": 0, "y_right": 1, "quant": 0.0},
    {"x_left": 2, "x_right": 1, "y_left": 0, "y_right": 1, "quant": 0.5},
])
def test_invalid_grid_is_rejected(grid) -> None:
    with pytest.raises(ValidationError):
        ScenarioConfig.model_validate({"grid": grid})


def test_unknown_flag_is_rejected() -> None:
    with pytest.raises(ValidationError):
        ScenarioConfig.model_validate({
            "grid": {"x_left": 0, "x_right": 1, "y_left": 0, "y_right": 1, "quant": 0.5},
            "flags": ["ALPHA"],
        })


def test_root_must_be_mapping(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        load_config(_write(tmp_path / "c.yaml", [1, 2, 3]))
