"""Parse flat form keys back into path segments."""

from __future__ import annotations

from functools import lru_cache

from form_paths.errors import MalformedPathError

from .segments import ArrayAppend, ArrayIndex, Key, ParsedPath, PathSegment


def split_tag(key: str) -> tuple[str, str | None]:
    """Split a key at its last unescaped ``:`` into path and tag."""
    colon = -1
    i = 0
    while i < len(key):
        ch = key[i]
        if ch == "\\":
            i += 2
            continue
        if ch == ":":
            colon = i
        i += 1

    if colon == -1:
        return key, None

    tag = key[colon + 1 :]
    if not tag:
        msg = "empty type tag"
        raise MalformedPathError(key, msg)
    return key[:colon], tag


def _read_key(key: str, path: str, start: int) -> tuple[str, int]:
    buf: list[str] = []
    i = start
    while i < len(path) and path[i] not in ".[":
        ch = path[i]
        if ch == "\\":
            if i + 1 >= len(path):
                msg = "dangling escape"
                raise MalformedPathError(key, msg)
            buf.append(path[i + 1])
            i += 2
            continue
        if ch in "]:":
            msg = f"unexpected {ch!r} at position {i}"
            raise MalformedPathError(key, msg)
        buf.append(ch)
        i += 1
    return "".join(buf), i


def _read_bracket(key: str, path: str, start: int) -> tuple[PathSegment, int]:
    end = path.find("]", start)
    if end == -1:
        msg = "unbalanced '['"
        raise MalformedPathError(key, msg)
    inner = path[start + 1 : end]
    if not inner:
        return ArrayAppend(), end + 1
    if not (inner.isascii() and inner.isdigit()):
        msg = f"array index must be digits, got {inner!r}"
        raise MalformedPathError(key, msg)
    return ArrayIndex(int(inner)), end + 1


@lru_cache(maxsize=1024)
def parse_key(key: str) -> ParsedPath:
    """Parse ``a.b[0].c[]:tag`` style keys.

    Raises ``MalformedPathError`` when the key does not start with a field name,
    has empty field names, unbalanced brackets, or non-numeric indexes.
    """
    path, tag = split_tag(key)
    if not path:
        msg = "empty path"
        raise MalformedPathError(key, msg)

    segments: list[PathSegment] = []
    i = 0
    while True:
        name, i = _read_key(key, path, i)
        if not name:
            if not segments:
                msg = "path must start with a key"
            else:
                msg = f"empty key at position {i}"
            raise MalformedPathError(key, msg)
        segments.append(Key(name))

        while i < len(path) and path[i] == "[":
            segment, i = _read_bracket(key, path, i)
            segments.append(segment)

        if i == len(path):
            break
        if path[i] != ".":
            msg = f"unexpected {path[i]!r} at position {i}"
            raise MalformedPathError(key, msg)
        i += 1
        if i == len(path):
            msg = "trailing '.'"
            raise MalformedPathError(key, msg)

    return ParsedPath(tuple(segments), tag)
