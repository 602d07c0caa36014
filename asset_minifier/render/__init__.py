from .sourcemap import SourceMapEmitter

__all__ = ["SourceMapEmitter"]
