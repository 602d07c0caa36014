"""Compression engine adapters."""

from .closure import ClosureCompilerEngine
from .yui import YuiCompressorEngine
from .runner import ExecResult, run_command

__all__ = [
    "ClosureCompilerEngine",
    "YuiCompressorEngine",
    "ExecResult",
    "run_command",
]
