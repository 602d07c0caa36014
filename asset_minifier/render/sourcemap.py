from __future__ import annotations

import json
from pathlib import Path

from ..core.errors import IOFailure
from ..core.types import SourceMapPayload


# Field order of a version 3 source map document.
_V3_FIELDS = ("version", "file", "sourceRoot", "sources", "sourcesContent", "names", "mappings")


class SourceMapEmitter:
    """Persist a compiler's source map next to the minified file."""

    def emit(self, payload: SourceMapPayload, map_path: Path, minified_name: str) -> str:
        document = {key: payload[key] for key in _V3_FIELDS if key in payload}
        document.update({key: value for key, value in payload.items() if key not in document})
        document["file"] = minified_name
        document.setdefault("version", 3)
        try:
            with map_path.open("w", encoding="utf-8") as handle:
                json.dump(document, handle, separators=(",", ":"), ensure_ascii=False)
        except OSError as exc:
            raise IOFailure(f"Failed to write source map {map_path}: {exc}", path=map_path) from exc
        return map_path.name
