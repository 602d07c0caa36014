from __future__ import annotations

import os
from pathlib import Path

import pytest

from asset_minifier.config import AppConfig
from asset_minifier.core.types import CompilationLevel, EngineSelection

_ENV_VARS = (
    "ASSET_MINIFIER_CONFIG",
    "ASSET_MINIFIER_ENGINE",
    "ASSET_MINIFIER_CHARSET",
    "ASSET_MINIFIER_SOURCE_MAP",
    "ASSET_MINIFIER_VERBOSE",
    "ASSET_MINIFIER_JAVA",
    "ASSET_MINIFIER_CLOSURE_JAR",
    "ASSET_MINIFIER_YUI_JAR",
    "ASSET_MINIFIER_LINE_SEPARATOR",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch, tmp_path):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


def test_defaults_without_config_file() -> None:
    cfg = AppConfig.from_sources()

    assert cfg.engine is EngineSelection.CLOSURE
    assert cfg.charset == "UTF-8"
    assert cfg.source_map is True
    assert cfg.newline == "\n"
    assert cfg.config_path is None
    assert cfg.closure_command() == ["java", "-jar", "closure-compiler.jar"]
    assert cfg.yui.line_break == -1 and cfg.yui.munge is True


def test_yaml_file_in_working_directory(tmp_path) -> None:
    (tmp_path / "asset-minifier.yaml").write_text(
        "\n".join(
            [
                "engine: yui",
                "charset: ISO-8859-1",
                "verbose: true",
                "source_map: false",
                "line_separator: crlf",
                "yui:",
                "  jar: tools/yui.jar",
                "  line_break: 120",
                "  munge: false",
                "  preserve_semicolons: yes",
                "  disable_optimizations: on",
            ]
        ),
        encoding="utf-8",
    )

    cfg = AppConfig.from_sources()

    assert cfg.config_path == Path("asset-minifier.yaml")
    assert cfg.engine is EngineSelection.YUI
    assert cfg.verbose is True and cfg.source_map is False
    assert cfg.newline == "\r\n"
    options = cfg.yui_options()
    assert options.line_break == 120
    assert options.munge is False
    assert options.preserve_semicolons is True
    assert options.disable_optimizations is True
    assert options.verbose is True
    assert options.charset == "ISO-8859-1"
    assert cfg.yui_command() == ["java", "-jar", str(Path("tools/yui.jar"))]


def test_closure_section_and_location_mapping(tmp_path) -> None:
    config_file = tmp_path / "custom.yml"
    config_file.write_text(
        "\n".join(
            [
                "source_dir: web/js",
                "closure:",
                "  compilation_level: advanced",
                "  language_in: ecmascript5",
                "  externs:",
                "    - externs/jquery.js",
                "    - externs/google_maps.js",
            ]
        ),
        encoding="utf-8",
    )

    cfg = AppConfig.from_sources(config_file)
    options = cfg.closure_options()

    assert options.compilation_level is CompilationLevel.ADVANCED
    assert options.language_in == "ECMASCRIPT5"
    assert options.externs == (Path("externs/jquery.js"), Path("externs/google_maps.js"))
    assert options.source_map_enabled is True
    assert options.source_map_location_mappings == ((str(Path("web/js")) + os.sep, ""),)


def test_no_location_mapping_when_source_maps_disabled() -> None:
    cfg = AppConfig(source_map=False, source_dir=Path("web/js"))

    assert cfg.closure_options().source_map_location_mappings == ()


def test_environment_overrides_file(tmp_path, monkeypatch) -> None:
    (tmp_path / "asset-minifier.yml").write_text("engine: closure\nsource_map: true\n", encoding="utf-8")
    monkeypatch.setenv("ASSET_MINIFIER_ENGINE", "NONE")
    monkeypatch.setenv("ASSET_MINIFIER_SOURCE_MAP", "0")
    monkeypatch.setenv("ASSET_MINIFIER_JAVA", "/opt/jdk/bin/java")
    monkeypatch.setenv("ASSET_MINIFIER_CLOSURE_JAR", "/opt/closure.jar")

    cfg = AppConfig.from_sources()

    assert cfg.engine is EngineSelection.NONE
    assert cfg.source_map is False
    assert cfg.closure_command() == ["/opt/jdk/bin/java", "-jar", str(Path("/opt/closure.jar"))]


def test_config_env_var_points_at_file(tmp_path, monkeypatch) -> None:
    target = tmp_path / "elsewhere.yaml"
    target.write_text("engine: yui\n", encoding="utf-8")
    monkeypatch.setenv("ASSET_MINIFIER_CONFIG", str(target))

    assert AppConfig.from_sources().engine is EngineSelection.YUI


def test_explicit_missing_config_raises(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        AppConfig.from_sources(tmp_path / "missing.yaml")


@pytest.mark.parametrize(
    "body",
    [
        "engine: uglify\n",
        "charset: not-a-charset\n",
        "line_separator: cr\n",
        "closure:\n  compilation_level: extreme\n",
        "closure:\n  language_in: ecmascript99\n",
        "yui:\n  line_break: -5\n",
        "yui:\n  line_break: wide\n",
    ],
)
def test_invalid_values_raise_value_error(tmp_path, body) -> None:
    path = tmp_path / "bad.yaml"
    path.write_text(body, encoding="utf-8")

    with pytest.raises(ValueError):
        AppConfig.from_sources(path)


def test_to_dict_round_trips_key_settings() -> None:
    payload = AppConfig(engine=EngineSelection.YUI).to_dict()

    assert payload["engine"] == "yui"
    assert payload["closure"]["compilation_level"] == "SIMPLE_OPTIMIZATIONS"
    assert payload["yui"]["line_break"] == -1
