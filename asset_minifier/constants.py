import os
from typing import Final

# Source maps
SOURCE_MAP_SUFFIX: Final = ".map"
SOURCE_MAP_FORMAT: Final = "V3"
SOURCE_MAPPING_URL_PREFIX: Final = "//# sourceMappingURL="

# Engine capabilities
CAPABILITY_SOURCE_MAPS: Final = "source_maps"

# Line separators accepted by the `line_separator` setting
LINE_SEPARATORS = {
    "lf": "\n",
    "crlf": "\r\n",
    "os": os.linesep,
}

# Closure Compiler input dialects (`--language_in`)
LANGUAGE_DIALECTS: Final = (
    "ECMASCRIPT3",
    "ECMASCRIPT5",
    "ECMASCRIPT5_STRICT",
    "ECMASCRIPT_2015",
    "ECMASCRIPT_2016",
    "ECMASCRIPT_2017",
    "ECMASCRIPT_2018",
    "ECMASCRIPT_2019",
    "ECMASCRIPT_2020",
    "ECMASCRIPT_2021",
    "STABLE",
    "ECMASCRIPT_NEXT",
)

# Defaults
DEFAULT_ENGINE: Final = "closure"
DEFAULT_CHARSET: Final = "UTF-8"
DEFAULT_LINE_SEPARATOR: Final = "lf"
DEFAULT_JAVA: Final = "java"
DEFAULT_CLOSURE_JAR: Final = "closure-compiler.jar"
DEFAULT_YUI_JAR: Final = "yuicompressor.jar"
DEFAULT_LANGUAGE_IN: Final = "ECMASCRIPT_NEXT"
DEFAULT_LINE_BREAK: Final = -1
CONFIG_FILENAMES: Final = ("asset-minifier.yaml", "asset-minifier.yml")
