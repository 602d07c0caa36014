from __future__ import annotations

import logging
from threading import Lock

from .core.types import Diagnostic

logger = logging.getLogger(__name__)


class LoggingDiagnosticSink:
    """Route engine diagnostics to the log, tagged with the file being compressed."""

    def __init__(self, source_name: str, *, log: logging.Logger | None = None) -> None:
        self.source_name = source_name
        self._log = log or logger

    def _format(self, diagnostic: Diagnostic) -> str:
        where = self.source_name
        if diagnostic.line is not None:
            where = f"{where}:{diagnostic.line}"
            if diagnostic.column is not None:
                where = f"{where}:{diagnostic.column}"
        return f"[{where}] {diagnostic.message}"

    def warning(self, diagnostic: Diagnostic) -> None:
        self._log.warning("%s", self._format(diagnostic))

    def error(self, diagnostic: Diagnostic) -> None:
        self._log.error("%s", self._format(diagnostic))


class CollectingDiagnosticSink:
    """Keeps every diagnostic it receives, optionally forwarding to another sink."""

    def __init__(self, forward: LoggingDiagnosticSink | None = None) -> None:
        self._lock = Lock()
        self._items: list[Diagnostic] = []
        self._forward = forward

    def warning(self, diagnostic: Diagnostic) -> None:
        with self._lock:
            self._items.append(diagnostic)
        if self._forward is not None:
            self._forward.warning(diagnostic)

    def error(self, diagnostic: Diagnostic) -> None:
        with self._lock:
            self._items.append(diagnostic)
        if self._forward is not None:
            self._forward.error(diagnostic)

    @property
    def diagnostics(self) -> list[Diagnostic]:
        with self._lock:
            return list(self._items)

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if not d.is_error]

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.is_error]
