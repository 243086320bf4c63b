"""Path segment types and their canonical string rendering."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from form_paths.errors import MalformedPathError


if TYPE_CHECKING:
    from collections.abc import Iterable


SPECIAL_CHARS = frozenset("\\.[]:")


@dataclass(frozen=True, slots=True)
class Key:
    """Select a named field of an object."""

    name: str


@dataclass(frozen=True, slots=True)
class ArrayAppend:
    """Select the next unassigned slot of an array."""


@dataclass(frozen=True, slots=True)
class ArrayIndex:
    """Select an explicit slot of an array."""

    index: int


PathSegment = Key | ArrayAppend | ArrayIndex


def escape_key(name: str) -> str:
    """Escape characters that carry meaning in the path grammar.

    Backslash, ``.``, ``[``, ``]`` and ``:`` are prefixed with a backslash so a
    key such as ``gpt-3.5`` stays a single segment.
    """
    return "".join(f"\\{ch}" if ch in SPECIAL_CHARS else ch for ch in name)


def render_segments(segments: Iterable[PathSegment]) -> str:
    """Render segments left to right: ``a.b[]`` / ``a[2].b``."""
    parts: list[str] = []
    for position, segment in enumerate(segments):
        match segment:
            case Key(name=name):
                parts.append(escape_key(name) if position == 0 else f".{escape_key(name)}")
            case ArrayAppend():
                if position == 0:
                    msg = "path must start with a key"
                    raise MalformedPathError("[]", msg)
                parts.append("[]")
            case ArrayIndex(index=index):
                if position == 0:
                    msg = "path must start with a key"
                    raise MalformedPathError(f"[{index}]", msg)
                parts.append(f"[{index}]")
    if not parts:
        msg = "path has no segments"
        raise MalformedPathError("", msg)
    return "".join(parts)


@dataclass(frozen=True, slots=True)
class ParsedPath:
    """Segments of one flat key plus its optional type tag."""

    segments: tuple[PathSegment, ...]
    tag: str | None = None

    def render(self) -> str:
        """Return the key this path was parsed from, in canonical form."""
        path = render_segments(self.segments)
        if self.tag is None:
            return path
        return f"{path}:{self.tag}"
