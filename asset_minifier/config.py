from __future__ import annotations

import codecs
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .constants import (
    CONFIG_FILENAMES,
    DEFAULT_CHARSET,
    DEFAULT_CLOSURE_JAR,
    DEFAULT_ENGINE,
    DEFAULT_JAVA,
    DEFAULT_LANGUAGE_IN,
    DEFAULT_LINE_BREAK,
    DEFAULT_LINE_SEPARATOR,
    DEFAULT_YUI_JAR,
    LANGUAGE_DIALECTS,
    LINE_SEPARATORS,
)
from .core.types import ClosureOptions, CompilationLevel, EngineSelection, YuiOptions


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        normalized = value.strip().lower()
        return normalized in {"1", "true", "yes", "on"}
    return bool(value)


def _as_int(value: Any, *, minimum: int | None = None) -> int | None:
    if value is None:
        return None
    try:
        parsed = int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Expected integer value, got {value!r}") from exc
    if minimum is not None and parsed < minimum:
        raise ValueError(f"Expected integer ≥ {minimum}, got {parsed}")
    return parsed


def _coerce_path(value: Any) -> Path | None:
    if value in {None, "", False}:
        return None
    return Path(str(value)).expanduser()


def parse_engine(value: Any) -> EngineSelection:
    normalized = str(value).strip().lower()
    try:
        return EngineSelection(normalized)
    except ValueError as exc:
        choices = "|".join(item.value for item in EngineSelection)
        raise ValueError(f"Unknown engine {value!r}; expected one of {choices}") from exc


def parse_compilation_level(value: Any) -> CompilationLevel:
    normalized = str(value).strip().upper()
    aliases = {
        "WHITESPACE": CompilationLevel.WHITESPACE_ONLY,
        "WHITESPACE_ONLY": CompilationLevel.WHITESPACE_ONLY,
        "SIMPLE": CompilationLevel.SIMPLE,
        "SIMPLE_OPTIMIZATIONS": CompilationLevel.SIMPLE,
        "ADVANCED": CompilationLevel.ADVANCED,
        "ADVANCED_OPTIMIZATIONS": CompilationLevel.ADVANCED,
    }
    if normalized not in aliases:
        raise ValueError(f"Unknown compilation level {value!r}")
    return aliases[normalized]


def parse_language(value: Any) -> str:
    normalized = str(value).strip().upper()
    if normalized not in LANGUAGE_DIALECTS:
        raise ValueError(f"Unknown input language {value!r}")
    return normalized


def parse_charset(value: Any) -> str:
    name = str(value).strip()
    try:
        codecs.lookup(name)
    except LookupError as exc:
        raise ValueError(f"Unknown character set {value!r}") from exc
    return name


def parse_line_separator(value: Any) -> str:
    normalized = str(value).strip().lower()
    if normalized not in LINE_SEPARATORS:
        raise ValueError(f"Line separator must be one of {'|'.join(LINE_SEPARATORS)}, got {value!r}")
    return normalized


@dataclass(frozen=True)
class ClosureConfig:
    jar: Path = Path(DEFAULT_CLOSURE_JAR)
    compilation_level: CompilationLevel = CompilationLevel.SIMPLE
    language_in: str = DEFAULT_LANGUAGE_IN
    externs: tuple[Path, ...] = ()


@dataclass(frozen=True)
class YuiConfig:
    jar: Path = Path(DEFAULT_YUI_JAR)
    line_break: int = DEFAULT_LINE_BREAK
    munge: bool = True
    preserve_semicolons: bool = False
    disable_optimizations: bool = False


@dataclass(frozen=True)
class AppConfig:
    engine: EngineSelection = EngineSelection(DEFAULT_ENGINE)
    charset: str = DEFAULT_CHARSET
    verbose: bool = False
    source_map: bool = True
    source_dir: Path | None = None
    line_separator: str = DEFAULT_LINE_SEPARATOR
    java: str = DEFAULT_JAVA
    closure: ClosureConfig = field(default_factory=ClosureConfig)
    yui: YuiConfig = field(default_factory=YuiConfig)
    config_path: Path | None = None

    @property
    def newline(self) -> str:
        return LINE_SEPARATORS[self.line_separator]

    def closure_command(self) -> list[str]:
        return [self.java, "-jar", str(self.closure.jar)]

    def yui_command(self) -> list[str]:
        return [self.java, "-jar", str(self.yui.jar)]

    def closure_options(self) -> ClosureOptions:
        mappings: tuple[tuple[str, str], ...] = ()
        if self.source_map and self.source_dir is not None:
            mappings = ((str(self.source_dir) + os.sep, ""),)
        return ClosureOptions(
            compilation_level=self.closure.compilation_level,
            language_in=self.closure.language_in,
            output_charset=self.charset,
            source_map_enabled=self.source_map,
            externs=self.closure.externs,
            source_map_location_mappings=mappings,
        )

    def yui_options(self) -> YuiOptions:
        return YuiOptions(
            line_break=self.yui.line_break,
            munge=self.yui.munge,
            preserve_semicolons=self.yui.preserve_semicolons,
            disable_optimizations=self.yui.disable_optimizations,
            verbose=self.verbose,
            charset=self.charset,
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "engine": self.engine.value,
            "charset": self.charset,
            "verbose": self.verbose,
            "source_map": self.source_map,
            "source_dir": str(self.source_dir) if self.source_dir else None,
            "line_separator": self.line_separator,
            "java": self.java,
            "closure": {
                "jar": str(self.closure.jar),
                "compilation_level": self.closure.compilation_level.value,
                "language_in": self.closure.language_in,
                "externs": [str(path) for path in self.closure.externs],
            },
            "yui": {
                "jar": str(self.yui.jar),
                "line_break": self.yui.line_break,
                "munge": self.yui.munge,
                "preserve_semicolons": self.yui.preserve_semicolons,
                "disable_optimizations": self.yui.disable_optimizations,
            },
            "config_path": str(self.config_path) if self.config_path else None,
        }

    @staticmethod
    def from_sources(config_path: Path | None = None) -> "AppConfig":
        env_config = os.getenv("ASSET_MINIFIER_CONFIG")
        candidates: list[Path] = []
        if config_path is not None:
            candidates.append(Path(config_path).expanduser())
        elif env_config:
            candidates.append(Path(env_config).expanduser())
        else:
            candidates.extend(Path(name) for name in CONFIG_FILENAMES)

        resolved_config: Path | None = None
        config_data: dict[str, Any] = {}
        for candidate in candidates:
            if candidate.exists():
                resolved_config = candidate
                try:
                    config_data = yaml.safe_load(candidate.read_text(encoding="utf-8")) or {}
                except yaml.YAMLError as exc:  # pragma: no cover - invalid user input
                    raise ValueError(f"Failed to parse configuration file {candidate}: {exc}") from exc
                break

        if config_path is not None and resolved_config is None:
            raise FileNotFoundError(f"Configuration file not found: {config_path}")
        if not isinstance(config_data, dict):
            raise ValueError(f"Configuration file {resolved_config} must contain a mapping")

        closure_cfg = config_data.get("closure") or {}
        yui_cfg = config_data.get("yui") or {}
        if not isinstance(closure_cfg, dict) or not isinstance(yui_cfg, dict):
            raise ValueError("'closure' and 'yui' sections must be mappings")

        engine = parse_engine(config_data.get("engine", DEFAULT_ENGINE))
        charset = parse_charset(config_data.get("charset", DEFAULT_CHARSET))
        verbose = _as_bool(config_data.get("verbose"))
        source_map = _as_bool(config_data.get("source_map", True))
        source_dir = _coerce_path(config_data.get("source_dir"))
        line_separator = parse_line_separator(config_data.get("line_separator", DEFAULT_LINE_SEPARATOR))
        java = str(config_data.get("java", DEFAULT_JAVA))

        externs_raw = closure_cfg.get("externs", [])
        externs: list[Path] = []
        if isinstance(externs_raw, (list, tuple)):
            externs = [Path(str(item)).expanduser() for item in externs_raw if str(item).strip()]
        elif externs_raw:
            externs = [Path(str(externs_raw)).expanduser()]

        closure_jar = _coerce_path(closure_cfg.get("jar")) or Path(DEFAULT_CLOSURE_JAR)
        compilation_level = parse_compilation_level(closure_cfg.get("compilation_level", CompilationLevel.SIMPLE.value))
        language_in = parse_language(closure_cfg.get("language_in", DEFAULT_LANGUAGE_IN))

        yui_jar = _coerce_path(yui_cfg.get("jar")) or Path(DEFAULT_YUI_JAR)
        line_break = _as_int(yui_cfg.get("line_break"), minimum=-1)
        if line_break is None:
            line_break = DEFAULT_LINE_BREAK
        munge = _as_bool(yui_cfg.get("munge", True))
        preserve_semicolons = _as_bool(yui_cfg.get("preserve_semicolons"))
        disable_optimizations = _as_bool(yui_cfg.get("disable_optimizations"))

        # Environment overrides
        engine_env = os.getenv("ASSET_MINIFIER_ENGINE")
        if engine_env:
            engine = parse_engine(engine_env)

        charset_env = os.getenv("ASSET_MINIFIER_CHARSET")
        if charset_env:
            charset = parse_charset(charset_env)

        source_map_env = os.getenv("ASSET_MINIFIER_SOURCE_MAP")
        if source_map_env is not None:
            source_map = _as_bool(source_map_env)

        verbose_env = os.getenv("ASSET_MINIFIER_VERBOSE")
        if verbose_env is not None:
            verbose = _as_bool(verbose_env)

        line_separator_env = os.getenv("ASSET_MINIFIER_LINE_SEPARATOR")
        if line_separator_env:
            line_separator = parse_line_separator(line_separator_env)

        java_env = os.getenv("ASSET_MINIFIER_JAVA")
        if java_env:
            java = java_env

        closure_jar_env = os.getenv("ASSET_MINIFIER_CLOSURE_JAR")
        if closure_jar_env:
            closure_jar = Path(closure_jar_env).expanduser()

        yui_jar_env = os.getenv("ASSET_MINIFIER_YUI_JAR")
        if yui_jar_env:
            yui_jar = Path(yui_jar_env).expanduser()

        return AppConfig(
            engine=engine,
            charset=charset,
            verbose=verbose,
            source_map=source_map,
            source_dir=source_dir,
            line_separator=line_separator,
            java=java,
            closure=ClosureConfig(
                jar=closure_jar,
                compilation_level=compilation_level,
                language_in=language_in,
                externs=tuple(externs),
            ),
            yui=YuiConfig(
                jar=yui_jar,
                line_break=line_break,
                munge=munge,
                preserve_semicolons=preserve_semicolons,
                disable_optimizations=disable_optimizations,
            ),
            config_path=resolved_config,
        )
