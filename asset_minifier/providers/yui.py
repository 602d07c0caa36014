from __future__ import annotations

import logging
import re
from typing import Optional, Sequence

from ..constants import CAPABILITY_SOURCE_MAPS
from ..core.contracts import DiagnosticSink
from ..core.errors import CompressionFailure, EngineUnavailable
from ..core.types import Diagnostic, YuiOptions
from .runner import CommandRunner, run_command

logger = logging.getLogger(__name__)


_CAPABILITIES = {
    CAPABILITY_SOURCE_MAPS: False,
    "externs": False,
    "multi_file": False,
}

_HEADER = re.compile(r"^\[(?P<level>WARNING|ERROR)\](?:\s+(?P<rest>.*))?$")
_POSITIONED = re.compile(r"^(?P<line>-?\d+):(?P<column>-?\d+):(?P<message>.*)$")


def _diagnostic(level: str, body: str, source_name: str | None) -> Diagnostic:
    match = _POSITIONED.match(body)
    if match:
        line = int(match.group("line"))
        column = int(match.group("column"))
        return Diagnostic(
            level=level,  # type: ignore[arg-type]
            message=match.group("message").strip(),
            source=source_name,
            line=line if line >= 0 else None,
            column=column if line >= 0 else None,
        )
    return Diagnostic(level=level, message=body.strip(), source=source_name)  # type: ignore[arg-type]


def parse_diagnostics(stderr: str, *, source_name: str | None = None) -> list[Diagnostic]:
    """Parse YUI Compressor's `[WARNING]` / `[ERROR]` report blocks.

    Newer releases print the tag with `in <file>` and the detail on the next
    indented line; older ones print everything on the tag line.
    """
    diagnostics: list[Diagnostic] = []
    pending: str | None = None
    for raw in stderr.splitlines():
        line = raw.strip()
        if not line:
            continue
        header = _HEADER.match(line)
        if header:
            level = header.group("level").lower()
            rest = (header.group("rest") or "").strip()
            if not rest or rest.startswith("in "):
                pending = level
            else:
                diagnostics.append(_diagnostic(level, rest, source_name))
                pending = None
            continue
        if pending is not None:
            diagnostics.append(_diagnostic(pending, line, source_name))
            pending = None
    return diagnostics


class YuiCompressorEngine:
    """Single-unit engine backed by the YUI Compressor CLI."""

    name = "yui"

    def __init__(
        self,
        *,
        command: Sequence[str],
        runner: Optional[CommandRunner] = None,
    ) -> None:
        if not command:
            raise ValueError("YUI Compressor command must not be empty")
        self._command = tuple(command)
        self._runner = runner or run_command

    def supports(self, capability: str) -> bool:
        return _CAPABILITIES.get(capability, False)

    def build_argv(self, options: YuiOptions) -> list[str]:
        argv = [*self._command, "--type", "js", "--charset", options.charset]
        if options.line_break >= 0:
            argv.extend(["--line-break", str(options.line_break)])
        if not options.munge:
            argv.append("--nomunge")
        if options.preserve_semicolons:
            argv.append("--preserve-semi")
        if options.disable_optimizations:
            argv.append("--disable-optimizations")
        if options.verbose:
            argv.append("--verbose")
        return argv

    def compress(
        self,
        text: str,
        options: YuiOptions,
        sink: DiagnosticSink,
        *,
        source_name: str | None = None,
    ) -> str:
        argv = self.build_argv(options)
        try:
            result = self._runner(argv, stdin=text, encoding=options.charset)
        except FileNotFoundError as exc:
            raise EngineUnavailable(argv[0]) from exc

        diagnostics = parse_diagnostics(result.stderr, source_name=source_name)
        for diagnostic in diagnostics:
            if diagnostic.is_error:
                sink.error(diagnostic)
            else:
                sink.warning(diagnostic)

        if any(d.is_error for d in diagnostics):
            raise CompressionFailure(diagnostics, source=source_name)
        if not result.ok:
            detail = result.stderr.strip().splitlines()
            failure = Diagnostic(
                level="error",
                message=detail[-1] if detail else f"exit status {result.returncode}",
                source=source_name,
            )
            sink.error(failure)
            raise CompressionFailure((*diagnostics, failure), source=source_name)
        return result.stdout
