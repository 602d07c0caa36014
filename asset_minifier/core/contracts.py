from __future__ import annotations

from pathlib import Path
from typing import Protocol, Sequence

from .types import ClosureOptions, CompilationResult, CompressionReport, Diagnostic, YuiOptions


class DiagnosticSink(Protocol):
    def warning(self, diagnostic: Diagnostic) -> None:
        ...

    def error(self, diagnostic: Diagnostic) -> None:
        ...


class WholeProgramEngine(Protocol):
    name: str

    def supports(self, capability: str) -> bool:
        ...

    def compile(
        self,
        sources: Sequence[Path],
        externs: Sequence[Path],
        options: ClosureOptions,
    ) -> CompilationResult:
        ...


class SingleUnitEngine(Protocol):
    name: str

    def supports(self, capability: str) -> bool:
        ...

    def compress(
        self,
        text: str,
        options: YuiOptions,
        sink: DiagnosticSink,
        *,
        source_name: str | None = None,
    ) -> str:
        ...


class Reporter(Protocol):
    def report(self, report: CompressionReport) -> None:
        ...
