from .config import AppConfig
from .core import CompressionFailure, EngineSelection, IOFailure, MinifyError
from .engine import MinifyOrchestrator, build_orchestrator

__all__ = [
    "AppConfig",
    "CompressionFailure",
    "EngineSelection",
    "IOFailure",
    "MinifyError",
    "MinifyOrchestrator",
    "build_orchestrator",
]
