"""Subprocess runner shared by the command-line compression engines."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from typing import Protocol, Sequence

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExecResult:
    """Result envelope for subprocess execution."""

    argv: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CommandRunner(Protocol):
    def __call__(self, argv: Sequence[str], *, stdin: str | None = None, encoding: str = "utf-8") -> ExecResult:
        ...


def run_command(argv: Sequence[str], *, stdin: str | None = None, encoding: str = "utf-8") -> ExecResult:
    """Run an engine command and capture its decoded output.

    Raises FileNotFoundError when the executable is missing; non-zero exits are
    returned to the caller, which owns the interpretation of stderr.
    """
    logger.debug("running %s", " ".join(argv))
    completed = subprocess.run(
        list(argv),
        input=stdin.encode(encoding) if stdin is not None else None,
        capture_output=True,
        check=False,
    )
    return ExecResult(
        argv=tuple(argv),
        returncode=completed.returncode,
        stdout=completed.stdout.decode(encoding, errors="replace"),
        stderr=completed.stderr.decode(encoding, errors="replace"),
    )
