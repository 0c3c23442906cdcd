from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer

from ..config import ScenarioConfig, load_config
from ..core.errors import PointcloudError
from ..core.flags import AttributeFlag, compose_all, declared, decompose
from ..core.grid import GridSampler
from ..core.pointcloud import PointCloud
from ..render.session import RenderSession

app = typer.Typer(help="pcsimp point-cloud utilities")


def _configure_logging(level: str) -> None:
    numeric = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=numeric, format="[%(levelname)s] %(message)s")
    logging.getLogger("pcsimp").setLevel(numeric)


def _names(flags) -> str:
    return ", ".join(sorted(f.name for f in flags)) or "-"


def build_grid(cfg: ScenarioConfig) -> PointCloud:
    """Sample the grid a scenario describes into a cloud carrying its flags."""
    cloud = PointCloud(dtype=cfg.simp.dtype, flags=cfg.flag_mask())
    GridSampler(cfg.grid.to_sampler_config(), dtype=cfg.simp.dtype).sample(cloud)
    return cloud


@app.command("grid")
def grid(
    config: Path = typer.Argument(..., exists=True, dir_okay=False, help="Scenario YAML file."),
    preview: Optional[Path] = typer.Option(None, "--preview", help="Write a PNG preview of the grid."),
    log_level: str = typer.Option("INFO", "--log-level", help="Logging level (e.g. INFO, DEBUG)."),
) -> None:
    """Generate the lattice described by a scenario file and summarise it."""

    _configure_logging(log_level)
    try:
        cfg = load_config(config)
        cloud = build_grid(cfg)
    except (PointcloudError, ValueError) as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"points: {cloud.rows} x {cloud.cols}")
    typer.echo(f"triangles: {cloud.triangles.rows}")
    typer.echo(f"flags: 0b{cloud.flags:08b} ({_names(declared(cloud.flags))})")
    typer.echo(f"cores: {cfg.simp.cores} eps: {cfg.simp.eps:g}")

    if preview is not None:
        if not cloud.has_storage():
            typer.echo("Error: grid is empty, nothing to preview.", err=True)
            raise typer.Exit(code=1)
        spec = cfg.window.to_spec() if cfg.window is not None else None
        with RenderSession() as session:
            handle = session.open_window(spec)
            session.add(handle, cloud)
            out = session.save_preview(handle, preview.resolve())
        typer.echo(f"Wrote preview to {out}")


@app.command("flags")
def flags(
    names: List[str] = typer.Argument(..., help="Attribute flag names, e.g. POINTS RGB MESH."),
) -> None:
    """Compose flag names into a mask and show the channels it selects."""

    try:
        members = [AttributeFlag.from_name(n) for n in names]
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="NAMES")
    mask = compose_all(*members)
    typer.echo(f"mask: {mask} (0b{mask:08b})")
    typer.echo(f"declared: {_names(declared(mask))}")
    typer.echo(f"channels: {_names(decompose(mask))}")


def main() -> None:
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
