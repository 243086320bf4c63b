"""Path building and parsing for flat form keys."""

from .builder import PathBuilder, name_of, paths_for, segments_of
from .parser import parse_key, split_tag
from .segments import ArrayAppend, ArrayIndex, Key, ParsedPath, PathSegment, escape_key, render_segments


__all__ = [
    "ArrayAppend",
    "ArrayIndex",
    "Key",
    "ParsedPath",
    "PathBuilder",
    "PathSegment",
    "escape_key",
    "name_of",
    "parse_key",
    "paths_for",
    "render_segments",
    "segments_of",
    "split_tag",
]
