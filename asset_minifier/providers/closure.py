from __future__ import annotations

import json
import logging
import re
import tempfile
from pathlib import Path
from typing import Iterable, Optional, Sequence

from ..constants import CAPABILITY_SOURCE_MAPS, SOURCE_MAP_FORMAT
from ..core.errors import CompressionFailure, EngineUnavailable
from ..core.types import ClosureOptions, CompilationResult, Diagnostic
from .runner import CommandRunner, ExecResult, run_command

logger = logging.getLogger(__name__)


_CAPABILITIES = {
    CAPABILITY_SOURCE_MAPS: True,
    "externs": True,
    "multi_file": True,
}

_TEXT_DIAGNOSTIC = re.compile(
    r"^(?P<source>.+?):(?P<line>\d+)(?::(?P<column>\d+))?: "
    r"(?P<level>ERROR|WARNING) - (?:\[(?P<key>[A-Za-z0-9_]+)\] )?(?P<message>.*)$"
)


def _as_int(value: object) -> int | None:
    try:
        return int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None


def parse_diagnostics(stderr: str) -> list[Diagnostic]:
    """Read the compiler's diagnostics from stderr.

    `--error_format JSON` prints an array of message objects; older compilers
    and crash paths print `file:line:col: ERROR - [KEY] message` lines instead.
    """
    text = stderr.strip()
    if not text:
        return []
    if text.startswith("["):
        try:
            entries = json.loads(text)
        except json.JSONDecodeError:
            entries = None
        if isinstance(entries, list):
            diagnostics: list[Diagnostic] = []
            for entry in entries:
                if not isinstance(entry, dict):
                    continue
                level = str(entry.get("level", "")).lower()
                if level not in {"error", "warning"}:
                    continue
                diagnostics.append(
                    Diagnostic(
                        level=level,  # type: ignore[arg-type]
                        message=str(entry.get("description", "")).strip(),
                        source=entry.get("source"),
                        line=_as_int(entry.get("line")),
                        column=_as_int(entry.get("column")),
                        key=entry.get("key"),
                    )
                )
            return diagnostics

    diagnostics = []
    for line in text.splitlines():
        match = _TEXT_DIAGNOSTIC.match(line.strip())
        if not match:
            continue
        diagnostics.append(
            Diagnostic(
                level=match.group("level").lower(),  # type: ignore[arg-type]
                message=match.group("message").strip(),
                source=match.group("source"),
                line=_as_int(match.group("line")),
                column=_as_int(match.group("column")),
                key=match.group("key"),
            )
        )
    return diagnostics


class ClosureCompilerEngine:
    """Whole-program engine backed by the Google Closure Compiler CLI."""

    name = "closure"

    def __init__(
        self,
        *,
        command: Sequence[str],
        runner: Optional[CommandRunner] = None,
    ) -> None:
        if not command:
            raise ValueError("Closure Compiler command must not be empty")
        self._command = tuple(command)
        self._runner = runner or run_command

    def supports(self, capability: str) -> bool:
        return _CAPABILITIES.get(capability, False)

    def build_argv(
        self,
        sources: Iterable[Path],
        externs: Iterable[Path],
        options: ClosureOptions,
        *,
        source_map_path: Path | None = None,
    ) -> list[str]:
        argv = [
            *self._command,
            "--compilation_level",
            options.compilation_level.value,
            "--language_in",
            options.language_in,
            "--charset",
            options.output_charset,
            "--error_format",
            "JSON",
        ]
        for extern in externs:
            argv.extend(["--externs", str(extern)])
        for source in sources:
            argv.extend(["--js", str(source)])
        if source_map_path is not None:
            argv.extend(
                [
                    "--create_source_map",
                    str(source_map_path),
                    "--source_map_format",
                    SOURCE_MAP_FORMAT,
                ]
            )
            for prefix, replacement in options.source_map_location_mappings:
                argv.extend(["--source_map_location_mapping", f"{prefix}|{replacement}"])
        return argv

    def compile(
        self,
        sources: Sequence[Path],
        externs: Sequence[Path],
        options: ClosureOptions,
    ) -> CompilationResult:
        with tempfile.TemporaryDirectory(prefix="asset-minifier-") as workdir:
            map_path = Path(workdir) / "compiled.js.map" if options.source_map_enabled else None
            argv = self.build_argv(sources, externs, options, source_map_path=map_path)
            logger.debug(
                "compiling %d source unit(s) with %d extern(s) at %s",
                len(sources),
                len(externs),
                options.compilation_level.value,
            )
            result = self._run(argv, options.output_charset)
            diagnostics = tuple(parse_diagnostics(result.stderr))
            self._raise_for_errors(result, diagnostics)

            source_map = None
            if map_path is not None:
                if not map_path.exists():
                    raise CompressionFailure(diagnostics, message="Closure Compiler did not write a source map")
                try:
                    source_map = json.loads(map_path.read_text(encoding="utf-8"))
                except ValueError as exc:
                    raise CompressionFailure(
                        diagnostics, message=f"Closure Compiler wrote an unreadable source map: {exc}"
                    ) from exc

        return CompilationResult(text=result.stdout, source_map=source_map, diagnostics=diagnostics)

    def _run(self, argv: list[str], charset: str) -> ExecResult:
        try:
            return self._runner(argv, encoding=charset)
        except FileNotFoundError as exc:
            raise EngineUnavailable(argv[0]) from exc

    @staticmethod
    def _raise_for_errors(result: ExecResult, diagnostics: tuple[Diagnostic, ...]) -> None:
        if any(d.is_error for d in diagnostics):
            raise CompressionFailure(diagnostics)
        if not result.ok:
            detail = result.stderr.strip().splitlines()
            message = detail[-1] if detail else f"exit status {result.returncode}"
            raise CompressionFailure(
                (*diagnostics, Diagnostic(level="error", message=message)),
            )
