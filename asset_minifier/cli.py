from __future__ import annotations

import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import Optional

import typer
from rich.logging import RichHandler

from .config import AppConfig, parse_engine
from .constants import CAPABILITY_SOURCE_MAPS
from .core.errors import CompressionFailure, MinifyError
from .core.types import EngineSelection
from .engine import build_orchestrator
from .providers import ClosureCompilerEngine, YuiCompressorEngine
from .telemetry import LoggingReporter, RunMonitor

_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    context_settings=_CONTEXT_SETTINGS,
)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(show_path=False, markup=False)],
        force=True,
    )


def _load_config(config_path: Path | None) -> AppConfig:
    try:
        return AppConfig.from_sources(config_path)
    except (ValueError, FileNotFoundError) as exc:  # noqa: BLE001
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc


@app.command(help="Minify a merged JavaScript bundle with the configured engine.")
def minify(  # noqa: D401
    sources: list[Path] = typer.Argument(..., help="Source files, in bundle order."),
    merged: Path = typer.Option(..., "--merged", "-m", help="Already-merged bundle to compress."),
    output: Path = typer.Option(..., "--output", "-o", help="Minified file to write."),
    engine: Optional[str] = typer.Option(None, "--engine", "-e", case_sensitive=False, help="closure|yui|none"),
    source_map: Optional[bool] = typer.Option(None, "--source-map/--no-source-map", help="Emit a source map"),
    verbose: Optional[bool] = typer.Option(None, "--verbose/--quiet", help="Show full paths and debug logs"),
    summary: Path | None = typer.Option(None, "--summary", help="Write a JSON size summary to this path"),
    config: Path | None = typer.Option(None, "--config", "-c", help="Path to YAML configuration file"),
) -> None:
    cfg = _load_config(config)
    overrides: dict[str, object] = {}
    if engine is not None:
        try:
            overrides["engine"] = parse_engine(engine)
        except ValueError as exc:
            raise typer.BadParameter(str(exc), param_hint="--engine") from exc
    if source_map is not None:
        overrides["source_map"] = source_map
    if verbose is not None:
        overrides["verbose"] = verbose
    if overrides:
        cfg = replace(cfg, **overrides)

    _configure_logging(cfg.verbose)

    monitor = RunMonitor(forward=LoggingReporter())
    orchestrator = build_orchestrator(cfg, reporter=monitor)
    try:
        report = orchestrator.minify(sources, merged, output)
    except CompressionFailure as exc:
        typer.echo(f"Compression failed: {exc}", err=True)
        for diagnostic in exc.diagnostics:
            typer.echo(f"  {diagnostic.level.upper()} {diagnostic.location()}: {diagnostic.message}", err=True)
        raise typer.Exit(code=1) from exc
    except MinifyError as exc:
        typer.echo(f"Minification failed: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    if summary is not None:
        monitor.flush_summary(to=summary)
    typer.echo(f"Wrote {output} ({report.original_bytes} -> {report.minified_bytes} bytes)")


@app.command(help="List the available compression engines and their capabilities.")
def engines(
    config: Path | None = typer.Option(None, "--config", "-c", help="Path to YAML configuration file"),
) -> None:
    cfg = _load_config(config)
    available = {
        EngineSelection.CLOSURE: ClosureCompilerEngine(command=cfg.closure_command()),
        EngineSelection.YUI: YuiCompressorEngine(command=cfg.yui_command()),
    }
    for selection in EngineSelection:
        marker = "*" if selection is cfg.engine else " "
        provider = available.get(selection)
        if provider is None:
            typer.echo(f"{marker} {selection.value:<8} no-op (minification skipped)")
            continue
        maps = "source maps" if provider.supports(CAPABILITY_SOURCE_MAPS) else "no source maps"
        typer.echo(f"{marker} {selection.value:<8} {maps}")


@app.command("config", help="Print the resolved configuration as JSON.")
def show_config(
    config: Path | None = typer.Option(None, "--config", "-c", help="Path to YAML configuration file"),
) -> None:
    cfg = _load_config(config)
    typer.echo(json.dumps(cfg.to_dict(), indent=2, sort_keys=True))


def main() -> None:  # pragma: no cover - console entry point
    app()
