from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Callable, Sequence, TextIO

from ..config import AppConfig
from ..constants import CAPABILITY_SOURCE_MAPS, SOURCE_MAP_SUFFIX, SOURCE_MAPPING_URL_PREFIX
from ..core.contracts import DiagnosticSink, Reporter, SingleUnitEngine, WholeProgramEngine
from ..core.errors import CompressionFailure, IOFailure
from ..core.types import CompressionReport, Diagnostic, EngineSelection
from ..diagnostics import LoggingDiagnosticSink
from ..render.sourcemap import SourceMapEmitter
from ..telemetry import LoggingReporter, compression_report

logger = logging.getLogger(__name__)


@dataclass
class MinifyOrchestrator:
    """Drive one compression engine over a merged JavaScript bundle.

    Holds only immutable configuration and stateless collaborators, so one
    instance can serve any number of bundles, including from several threads.
    """

    config: AppConfig
    closure: WholeProgramEngine | None = None
    yui: SingleUnitEngine | None = None
    emitter: SourceMapEmitter = field(default_factory=SourceMapEmitter)
    reporter: Reporter = field(default_factory=LoggingReporter)
    sink_factory: Callable[[str], DiagnosticSink] = LoggingDiagnosticSink

    def __post_init__(self) -> None:
        if self.config.engine is EngineSelection.CLOSURE and self.closure is None:
            raise ValueError("closure engine selected but no Closure Compiler engine configured")
        if self.config.engine is EngineSelection.YUI and self.yui is None:
            raise ValueError("yui engine selected but no YUI Compressor engine configured")

    def minify(self, source_files: Sequence[Path], merged: Path, target: Path) -> CompressionReport:
        sink = self.sink_factory(merged.name)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with merged.open("r", encoding=self.config.charset) as reader, target.open(
                "w", encoding=self.config.charset, newline=""
            ) as writer:
                logger.info("Creating the minified file [%s].", self._display(target))

                engine = self.config.engine
                if engine is EngineSelection.CLOSURE:
                    logger.debug("Using Google Closure Compiler engine.")
                    self._compile_closure(source_files, target, writer, sink)
                elif engine is EngineSelection.YUI:
                    logger.debug("Using YUI Compressor engine.")
                    self._compress_yui(reader, merged, writer, sink)
                else:
                    logger.warning("JavaScript engine not supported.")
        except (OSError, UnicodeError) as exc:
            logger.error("Failed to compress the JavaScript file [%s].", merged.name, exc_info=True)
            sink.error(Diagnostic(level="error", message=str(exc), source=merged.name))
            raise IOFailure(f"Failed to compress the JavaScript file [{merged.name}]: {exc}", path=merged) from exc
        except (IOFailure, CompressionFailure) as exc:
            logger.error("Failed to compress the JavaScript file [%s]: %s", merged.name, exc)
            raise

        report = compression_report(merged, target, verbose=self.config.verbose)
        self.reporter.report(report)
        return report

    def _compile_closure(
        self,
        source_files: Sequence[Path],
        target: Path,
        writer: TextIO,
        sink: DiagnosticSink,
    ) -> None:
        assert self.closure is not None
        options = self.config.closure_options()
        if options.source_map_enabled and not self.closure.supports(CAPABILITY_SOURCE_MAPS):
            logger.debug("%s does not produce source maps; skipping", self.closure.name)
            options = replace(options, source_map_enabled=False, source_map_location_mappings=())

        try:
            result = self.closure.compile(list(source_files), list(options.externs), options)
        except CompressionFailure as exc:
            self._forward(exc.diagnostics, sink)
            raise
        self._forward(result.diagnostics, sink)

        text = result.text
        if options.source_map_enabled and result.source_map is not None:
            # the directive must follow exactly one separator
            text = text.rstrip("\r\n")
        writer.write(text)

        if options.source_map_enabled and result.source_map is not None:
            map_path = Path(str(target) + SOURCE_MAP_SUFFIX)
            logger.info("Creating the minified source map file [%s].", self._display(map_path))
            try:
                reference = self.emitter.emit(result.source_map, map_path, target.name)
            except IOFailure as exc:
                logger.error("Failed to build source map file [%s].", map_path.name)
                sink.error(Diagnostic(level="error", message=str(exc), source=map_path.name))
                raise
            writer.write(self.config.newline)
            writer.write(SOURCE_MAPPING_URL_PREFIX + reference)

    def _compress_yui(self, reader: TextIO, merged: Path, writer: TextIO, sink: DiagnosticSink) -> None:
        assert self.yui is not None
        text = reader.read()
        writer.write(self.yui.compress(text, self.config.yui_options(), sink, source_name=merged.name))

    @staticmethod
    def _forward(diagnostics: Sequence[Diagnostic], sink: DiagnosticSink) -> None:
        for diagnostic in diagnostics:
            if diagnostic.is_error:
                sink.error(diagnostic)
            else:
                sink.warning(diagnostic)

    def _display(self, path: Path) -> str:
        return str(path) if self.config.verbose else path.name
