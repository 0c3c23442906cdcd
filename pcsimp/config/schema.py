from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from ..core.flags import AttributeFlag, compose_all
from ..core.grid import GridSamplerConfig
from ..core.params import SimpParams
from ..render.session import WindowSpec


class GridConfig(BaseModel):
    x_left: float
    x_right: float
    y_left: float
    y_right: float
    quant: float = Field(gt=0.0)
    indices: bool = False

    @model_validator(mode="after")
    def _ordered_bounds(self) -> "GridConfig":
        if self.x_right < self.x_left:
            raise ValueError("x_right must not be left of x_left")
        if self.y_right < self.y_left:
            raise ValueError("y_right must not be below y_left")
        return self

    def to_sampler_config(self) -> GridSamplerConfig:
        return GridSamplerConfig(
            x_left=self.x_left,
            x_right=self.x_right,
            y_left=self.y_left,
            y_right=self.y_right,
            quant=self.quant,
            indices=self.indices,
        )


class WindowConfig(BaseModel):
    position_x: int = Field(default=0, ge=0)
    position_y: int = Field(default=0, ge=0)
    width: int = Field(default=640, gt=0)
    height: int = Field(default=480, gt=0)

    def to_spec(self) -> WindowSpec:
        return WindowSpec(
            position_x=self.position_x,
            position_y=self.position_y,
            width=self.width,
            height=self.height,
        )


class ScenarioConfig(BaseModel):
    grid: GridConfig
    simp: SimpParams = SimpParams()
    flags: List[str] = Field(default_factory=lambda: ["POINTS"])
    window: Optional[WindowConfig] = None

    @field_validator("flags")
    @classmethod
    def _known_flags(cls, value: List[str]) -> List[str]:
        return [AttributeFlag.from_name(name).name for name in value]

    def flag_mask(self) -> int:
        mask = compose_all(*(AttributeFlag[name] for name in self.flags))
        if self.grid.indices:
            mask = compose_all(AttributeFlag.TRIANGLES, mask=mask)
        return mask


def load_config(path: str | Path) -> ScenarioConfig:
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if not isinstance(data, dict):
        raise ValueError("Configuration root must be a mapping.")
    return ScenarioConfig.model_validate(data)
