import json

import pytest

from asset_minifier.core.errors import IOFailure
from asset_minifier.render.sourcemap import SourceMapEmitter


def test_emit_sets_file_and_returns_map_name(tmp_path) -> None:
    map_path = tmp_path / "app.min.js.map"
    payload = {"sources": ["a.js"], "mappings": "AAAA", "names": [], "version": 3, "file": "tmp.js"}

    reference = SourceMapEmitter().emit(payload, map_path, "app.min.js")

    assert reference == "app.min.js.map"
    written = json.loads(map_path.read_text(encoding="utf-8"))
    assert written["file"] == "app.min.js"
    assert list(written)[:2] == ["version", "file"]
    assert payload["file"] == "tmp.js"


def test_emit_keeps_extension_fields(tmp_path) -> None:
    map_path = tmp_path / "out.js.map"

    SourceMapEmitter().emit({"version": 3, "sources": [], "mappings": "", "x_google_ignoreList": [0]}, map_path, "out.js")

    written = json.loads(map_path.read_text(encoding="utf-8"))
    assert written["x_google_ignoreList"] == [0]


def test_emit_wraps_os_errors(tmp_path) -> None:
    map_path = tmp_path / "missing-dir" / "out.js.map"

    with pytest.raises(IOFailure) as excinfo:
        SourceMapEmitter().emit({"version": 3}, map_path, "out.js")

    assert excinfo.value.path == map_path
