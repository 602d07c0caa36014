import json
import re
import sys
from pathlib import Path
from typing import Sequence

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from asset_minifier.providers.runner import ExecResult  # noqa: E402

SYNTAX_ERROR_MARKER = "@@"


def squeeze(text: str) -> str:
    """Crude stand-in for a minifier: drop comments and spaces around punctuation."""
    text = re.sub(r"/\*.*?\*/", "", text, flags=re.S)
    text = re.sub(r"//[^\n]*", "", text)
    text = re.sub(r"\s*([=;{}(),+])\s*", r"\1", text)
    return re.sub(r"\s+", " ", text).strip()


def _values(argv: Sequence[str], flag: str) -> list[str]:
    return [argv[i + 1] for i, item in enumerate(argv) if item == flag]


class FakeClosureRunner:
    """Behaves like `java -jar closure-compiler.jar` for the flags the engine passes."""

    def __init__(self, *, warnings: list[dict] | None = None, trailing_newline: bool = False) -> None:
        self.calls: list[tuple[str, ...]] = []
        self._warnings = warnings or []
        self._trailing_newline = trailing_newline

    def __call__(self, argv, *, stdin=None, encoding="utf-8") -> ExecResult:
        argv = tuple(argv)
        self.calls.append(argv)
        sources = _values(argv, "--js")
        messages: list[dict] = list(self._warnings)
        chunks: list[str] = []
        for source in sources:
            text = Path(source).read_text(encoding=encoding)
            for lineno, line in enumerate(text.splitlines(), start=1):
                column = line.find(SYNTAX_ERROR_MARKER)
                if column >= 0:
                    messages.append(
                        {
                            "level": "error",
                            "description": "Parse error. primary expression expected",
                            "source": source,
                            "line": lineno,
                            "column": column,
                            "key": "JSC_PARSE_ERROR",
                        }
                    )
            chunks.append(squeeze(text))
        errors = [m for m in messages if m["level"] == "error"]
        messages.append({"level": "info", "description": f"{len(errors)} error(s)"})
        stderr = json.dumps(messages) if len(messages) > 1 else ""
        if errors:
            return ExecResult(argv=argv, returncode=len(errors), stdout="", stderr=stderr)

        map_targets = _values(argv, "--create_source_map")
        if map_targets:
            mappings = [value.split("|", 1) for value in _values(argv, "--source_map_location_mapping")]
            recorded = []
            for source in sources:
                for prefix, replacement in mappings:
                    if source.startswith(prefix):
                        source = replacement + source[len(prefix):]
                        break
                recorded.append(source)
            payload = {
                "version": 3,
                "file": "compiled.js",
                "lineCount": 1,
                "mappings": "AAAA,IAAIA",
                "sources": recorded,
                "names": ["x"],
            }
            Path(map_targets[0]).write_text(json.dumps(payload), encoding="utf-8")
        stdout = "".join(chunks) + ("\n" if self._trailing_newline else "")
        return ExecResult(argv=argv, returncode=0, stdout=stdout, stderr=stderr)


class FakeYuiRunner:
    """Behaves like `java -jar yuicompressor.jar --type js` reading stdin."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, ...]] = []
        self.inputs: list[str] = []

    def __call__(self, argv, *, stdin=None, encoding="utf-8") -> ExecResult:
        argv = tuple(argv)
        self.calls.append(argv)
        self.inputs.append(stdin or "")
        text = stdin or ""
        stderr_lines: list[str] = []
        for lineno, line in enumerate(text.splitlines(), start=1):
            if "debugger" in line:
                stderr_lines += ["", "[WARNING] in stdin", f"  {lineno}:0:Using 'debugger' is not recommended"]
            column = line.find(SYNTAX_ERROR_MARKER)
            if column >= 0:
                stderr_lines += ["[ERROR] in stdin", f"  {lineno}:{column}:syntax error"]
        if any(line.startswith("[ERROR]") for line in stderr_lines):
            stderr_lines += [
                "[ERROR] in stdin",
                "  1:0:Compilation produced 1 syntax errors.",
                "org.mozilla.javascript.EvaluatorException: Compilation produced 1 syntax errors.",
            ]
            return ExecResult(argv=argv, returncode=2, stdout="", stderr="\n".join(stderr_lines))
        return ExecResult(argv=argv, returncode=0, stdout=squeeze(text), stderr="\n".join(stderr_lines))


@pytest.fixture
def closure_runner() -> FakeClosureRunner:
    return FakeClosureRunner()


@pytest.fixture
def yui_runner() -> FakeYuiRunner:
    return FakeYuiRunner()


@pytest.fixture
def bundle(tmp_path: Path) -> dict[str, Path]:
    """A one-file bundle: source, merged copy, and the minified target path."""
    src = tmp_path / "src"
    src.mkdir()
    source = src / "a.js"
    source.write_text("var x = 1; function f(){return x;}\n", encoding="utf-8")
    merged = tmp_path / "build" / "bundle.js"
    merged.parent.mkdir()
    merged.write_text(source.read_text(encoding="utf-8"), encoding="utf-8")
    return {
        "src": src,
        "source": source,
        "merged": merged,
        "target": tmp_path / "build" / "bundle.min.js",
    }


@pytest.fixture
def make_closure_runner():
    return FakeClosureRunner
