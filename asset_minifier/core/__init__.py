"""Core domain types, contracts, and errors for the minification step."""

from .types import (
    ClosureOptions,
    CompilationLevel,
    CompilationResult,
    CompressionReport,
    Diagnostic,
    EngineSelection,
    YuiOptions,
)
from .errors import CompressionFailure, EngineUnavailable, IOFailure, MinifyError

__all__ = [
    "ClosureOptions",
    "CompilationLevel",
    "CompilationResult",
    "CompressionReport",
    "Diagnostic",
    "EngineSelection",
    "YuiOptions",
    "CompressionFailure",
    "EngineUnavailable",
    "IOFailure",
    "MinifyError",
]
