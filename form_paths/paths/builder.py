"""Chainable builder producing form field names for nested records."""

from __future__ import annotations

from typing import Any, Generic, TypeVar, override

from form_paths.errors import MalformedPathError

from .segments import ArrayAppend, ArrayIndex, Key, PathSegment, render_segments


_T = TypeVar("_T")


class PathBuilder(Generic[_T]):
    """Navigate a record shape and render the path reached so far.

    ``builder.user.name`` appends keys, ``builder.items()`` appends an
    unindexed array slot and ``builder.items(2)`` an explicit one. Rendering is
    done with :func:`name_of` so field names never collide with builder methods.
    """

    __slots__ = ("_segments",)

    def __init__(self, segments: tuple[PathSegment, ...] = ()) -> None:
        super().__init__()
        object.__setattr__(self, "_segments", segments)

    def __getattr__(self, name: str) -> PathBuilder[Any]:
        if name.startswith("_"):
            raise AttributeError(name)
        return PathBuilder((*self._segments, Key(name)))

    def __getitem__(self, name: str) -> PathBuilder[Any]:
        if not isinstance(name, str) or not name:
            msg = f"field name must be a non-empty string, got {name!r}"
            raise TypeError(msg)
        return PathBuilder((*self._segments, Key(name)))

    def __call__(self, index: int | None = None) -> PathBuilder[Any]:
        if not self._segments:
            msg = "path must start with a key"
            raise MalformedPathError("[]" if index is None else f"[{index}]", msg)
        if index is None:
            return PathBuilder((*self._segments, ArrayAppend()))
        if isinstance(index, bool) or not isinstance(index, int):
            msg = f"array index must be an int, got {type(index).__name__}"
            raise TypeError(msg)
        if index < 0:
            msg = f"array index must not be negative, got {index}"
            raise ValueError(msg)
        return PathBuilder((*self._segments, ArrayIndex(index)))

    @override
    def __setattr__(self, name: str, value: Any) -> None:
        msg = "path builders are immutable"
        raise AttributeError(msg)

    @override
    def __reduce__(self) -> tuple[type[PathBuilder[Any]], tuple[tuple[PathSegment, ...]]]:
        return (PathBuilder, (self._segments,))

    @override
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PathBuilder):
            return NotImplemented
        return self._segments == other._segments

    @override
    def __hash__(self) -> int:
        return hash(self._segments)

    @override
    def __repr__(self) -> str:
        if not self._segments:
            return "PathBuilder(<root>)"
        return f"PathBuilder({render_segments(self._segments)!r})"


def paths_for(schema: type[_T] | None = None) -> PathBuilder[_T]:  # noqa: ARG001
    """Return a root builder; ``schema`` only informs static type checkers."""
    return PathBuilder()


def segments_of(builder: PathBuilder[Any]) -> tuple[PathSegment, ...]:
    """Return the segments accumulated by ``builder``."""
    return builder._segments  # noqa: SLF001


def name_of(builder: PathBuilder[Any]) -> str:
    """Render ``builder`` as a form field name such as ``items[0].name``."""
    segments = segments_of(builder)
    if not segments:
        msg = "cannot render the root builder"
        raise MalformedPathError("", msg)
    return render_segments(segments)
