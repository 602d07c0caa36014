from __future__ import annotations

import gzip
import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from threading import Lock
from typing import Dict, List

from .core.types import CompressionReport

logger = logging.getLogger(__name__)


def compression_report(source: Path, target: Path, *, verbose: bool = False) -> CompressionReport:
    """Measure the merged input against the finished minified file."""
    minified = target.read_bytes() if target.exists() else b""
    return CompressionReport(
        source=str(source) if verbose else source.name,
        target=str(target) if verbose else target.name,
        original_bytes=source.stat().st_size if source.exists() else 0,
        minified_bytes=len(minified),
        gzipped_bytes=len(gzip.compress(minified)) if minified else 0,
    )


class LoggingReporter:
    """Write size statistics to the log the way the build output shows them."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._log = log or logger

    def report(self, report: CompressionReport) -> None:
        self._log.info("Uncompressed size: %d bytes.", report.original_bytes)
        self._log.info(
            "Compressed size: %d bytes minified (%d bytes gzipped).",
            report.minified_bytes,
            report.gzipped_bytes,
        )


@dataclass(frozen=True)
class RunSummary:
    total_files: int
    total_original_bytes: int
    total_minified_bytes: int
    total_gzipped_bytes: int

    @property
    def saved_bytes(self) -> int:
        return self.total_original_bytes - self.total_minified_bytes

    def to_dict(self) -> Dict[str, object]:
        return {
            "files": self.total_files,
            "original_bytes": self.total_original_bytes,
            "minified_bytes": self.total_minified_bytes,
            "gzipped_bytes": self.total_gzipped_bytes,
            "saved_bytes": self.saved_bytes,
        }


class RunMonitor:
    """Collects compression reports for the lifetime of a build run.

    Acts as a reporter itself, so it can stand in for `LoggingReporter`; pass
    `forward` to keep the log output as well.
    """

    def __init__(self, forward: LoggingReporter | None = None) -> None:
        self._lock = Lock()
        self._reports: List[CompressionReport] = []
        self._forward = forward
        self._started = datetime.now(timezone.utc)

    def report(self, report: CompressionReport) -> None:
        with self._lock:
            self._reports.append(report)
        if self._forward is not None:
            self._forward.report(report)

    def reports(self) -> List[CompressionReport]:
        with self._lock:
            return list(self._reports)

    def summarize(self) -> RunSummary:
        reports = self.reports()
        return RunSummary(
            total_files=len(reports),
            total_original_bytes=sum(r.original_bytes for r in reports),
            total_minified_bytes=sum(r.minified_bytes for r in reports),
            total_gzipped_bytes=sum(r.gzipped_bytes for r in reports),
        )

    def flush_summary(self, *, to: Path) -> None:
        summary = self.summarize()
        payload = {
            "totals": summary.to_dict(),
            "time": {
                "start": self._started.isoformat(),
                "end": datetime.now(timezone.utc).isoformat(),
            },
            "files": [report.to_dict() for report in self.reports()],
        }
        to.parent.mkdir(parents=True, exist_ok=True)
        to.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
