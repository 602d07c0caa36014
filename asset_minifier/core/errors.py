from __future__ import annotations

from pathlib import Path
from typing import Iterable

from .types import Diagnostic


class MinifyError(Exception):
    """Base class for failures raised while minifying an asset."""


class IOFailure(MinifyError):
    """An artifact could not be opened, read, or written."""

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


class CompressionFailure(MinifyError):
    """The active engine rejected its input.

    Every diagnostic the engine produced is kept, in order; the message is the
    description of the first error so one-line reporting stays readable.
    """

    def __init__(
        self,
        diagnostics: Iterable[Diagnostic] = (),
        *,
        source: str | None = None,
        message: str | None = None,
    ) -> None:
        self.diagnostics = tuple(diagnostics)
        self.source = source
        if message is None:
            errors = self.errors
            first = errors[0] if errors else (self.diagnostics[0] if self.diagnostics else None)
            message = first.message if first is not None else "compression failed"
        super().__init__(message)

    @property
    def errors(self) -> tuple[Diagnostic, ...]:
        return tuple(d for d in self.diagnostics if d.is_error)


class EngineUnavailable(CompressionFailure):
    """The engine's executable could not be started."""

    def __init__(self, command: str) -> None:
        super().__init__(message=f"compression engine not found: {command}")
        self.command = command
