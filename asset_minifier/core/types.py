from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Literal


class EngineSelection(str, Enum):
    CLOSURE = "closure"
    YUI = "yui"
    NONE = "none"


class CompilationLevel(str, Enum):
    WHITESPACE_ONLY = "WHITESPACE_ONLY"
    SIMPLE = "SIMPLE_OPTIMIZATIONS"
    ADVANCED = "ADVANCED_OPTIMIZATIONS"


@dataclass(frozen=True)
class ClosureOptions:
    compilation_level: CompilationLevel = CompilationLevel.SIMPLE
    language_in: str = "ECMASCRIPT_NEXT"
    output_charset: str = "UTF-8"
    source_map_enabled: bool = False
    externs: tuple[Path, ...] = ()
    source_map_location_mappings: tuple[tuple[str, str], ...] = ()


@dataclass(frozen=True)
class YuiOptions:
    line_break: int = -1
    munge: bool = True
    preserve_semicolons: bool = False
    disable_optimizations: bool = False
    verbose: bool = False
    charset: str = "UTF-8"


@dataclass(frozen=True)
class Diagnostic:
    """Single warning or error reported by a compression engine."""

    level: Literal["warning", "error"]
    message: str
    source: str | None = None
    line: int | None = None
    column: int | None = None
    key: str | None = None

    @property
    def is_error(self) -> bool:
        return self.level == "error"

    def location(self) -> str:
        parts = [self.source or "<input>"]
        if self.line is not None:
            parts.append(str(self.line))
            if self.column is not None:
                parts.append(str(self.column))
        return ":".join(parts)


SourceMapPayload = dict[str, Any]


@dataclass(frozen=True)
class CompilationResult:
    text: str
    source_map: SourceMapPayload | None = None
    diagnostics: tuple[Diagnostic, ...] = ()


@dataclass(frozen=True)
class CompressionReport:
    source: str
    target: str
    original_bytes: int
    minified_bytes: int
    gzipped_bytes: int

    @property
    def saved_bytes(self) -> int:
        return self.original_bytes - self.minified_bytes

    @property
    def ratio(self) -> float:
        if self.original_bytes == 0:
            return 0.0
        return self.minified_bytes / self.original_bytes

    def to_dict(self) -> dict[str, object]:
        return {
            "source": self.source,
            "target": self.target,
            "original_bytes": self.original_bytes,
            "minified_bytes": self.minified_bytes,
            "gzipped_bytes": self.gzipped_bytes,
            "saved_bytes": self.saved_bytes,
            "ratio": round(self.ratio, 4),
        }
