from __future__ import annotations

from ..config import AppConfig
from ..core.contracts import Reporter
from ..core.types import EngineSelection
from ..providers import ClosureCompilerEngine, YuiCompressorEngine
from ..providers.runner import CommandRunner
from ..telemetry import LoggingReporter
from .orchestrator import MinifyOrchestrator


def build_orchestrator(
    config: AppConfig,
    *,
    reporter: Reporter | None = None,
    runner: CommandRunner | None = None,
) -> MinifyOrchestrator:
    """Wire the engine selected by `config` into a ready orchestrator."""
    closure = None
    yui = None
    if config.engine is EngineSelection.CLOSURE:
        closure = ClosureCompilerEngine(command=config.closure_command(), runner=runner)
    elif config.engine is EngineSelection.YUI:
        yui = YuiCompressorEngine(command=config.yui_command(), runner=runner)
    return MinifyOrchestrator(
        config=config,
        closure=closure,
        yui=yui,
        reporter=reporter or LoggingReporter(),
    )


__all__ = ["MinifyOrchestrator", "build_orchestrator"]
