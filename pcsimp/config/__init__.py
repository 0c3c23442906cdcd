"""Configuration loading utilities for pcsimp."""

from .schema import (
    GridConfig,
    ScenarioConfig,
    WindowConfig,
    load_config,
)

__all__ = ["GridConfig", "ScenarioConfig", "WindowConfig", "load_config"]
