"""Rebuild nested records from flat form submissions."""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Mapping
from dataclasses import dataclass, field
from itertools import pairwise
from typing import TYPE_CHECKING, Any

from form_paths.codecs import DEFAULT_REGISTRY
from form_paths.errors import DecodeError, FormPathError, MalformedPathError, UnknownCodecError
from form_paths.paths import ArrayAppend, ArrayIndex, Key, parse_key

from .accumulator import Accumulator, SlotPath


if TYPE_CHECKING:
    from collections.abc import Iterable

    from form_paths.codecs import Codec, CodecRegistry
    from form_paths.paths import PathSegment


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ExtractionIssue:
    """One entry that was skipped, with the error that caused it."""

    key: str
    error: FormPathError

    @property
    def kind(self) -> str:
        return type(self.error).__name__


@dataclass(frozen=True, slots=True)
class Extraction:
    """Views of the accumulator after one pass, plus the skipped entries."""

    combined: dict[str, Any]
    fields: dict[str, Any]
    files: dict[str, Any]
    issues: tuple[ExtractionIssue, ...] = field(default=())

    @property
    def ok(self) -> bool:
        return not self.issues


def is_empty_value(value: Any) -> bool:
    """Return True for values a browser sends for untouched inputs."""
    if value is None or value == "":
        return True
    if isinstance(value, str):
        return False
    if getattr(value, "size", None) == 0:
        return True
    try:
        return len(value) == 0
    except TypeError:
        return False


def _iter_entries(entries: Mapping[str, Any] | Iterable[tuple[str, Any]]) -> Iterable[tuple[str, Any]]:
    if isinstance(entries, Mapping):
        return entries.items()
    return entries


def _slot_path(segments: tuple[PathSegment, ...], appended: Counter[SlotPath]) -> SlotPath:
    steps: list[str | int] = []
    for segment in segments:
        match segment:
            case Key(name=name):
                steps.append(name)
            case ArrayIndex(index=index):
                steps.append(index)
            case ArrayAppend():
                prefix = tuple(steps)
                steps.append(appended[prefix])
                appended[prefix] += 1
    return tuple(steps)


def _materialize_parents(accumulator: Accumulator, segments: tuple[PathSegment, ...]) -> None:
    steps: list[str | int] = []
    for segment, following in pairwise(segments):
        match segment:
            case Key(name=name):
                steps.append(name)
            case ArrayIndex(index=index):
                steps.append(index)
            case ArrayAppend():
                return
        next_step: str | int = 0 if isinstance(following, ArrayAppend | ArrayIndex) else ""
        accumulator.ensure(tuple(steps), next_step)
        if isinstance(following, ArrayAppend):
            return


class _Pass:
    """State of one extraction call."""

    def __init__(self, accumulator: Accumulator, registry: CodecRegistry) -> None:
        super().__init__()
        self.accumulator = accumulator
        self.registry = registry
        self.appended: Counter[SlotPath] = Counter()
        self.issues: list[ExtractionIssue] = []
        self.assigned = 0
        self.omitted = 0

    def report(self, key: str, error: FormPathError) -> None:
        logger.warning("skipping form entry %r: %s", key, error)
        self.issues.append(ExtractionIssue(key, error))

    def omit(self, key: str) -> None:
        self.omitted += 1
        try:
            parsed = parse_key(key)
        except MalformedPathError:
            return
        _materialize_parents(self.accumulator, parsed.segments)

    def feed(self, key: str, raw: Any) -> None:
        if is_empty_value(raw):
            self.omit(key)
            return

        try:
            parsed = parse_key(key)
            codec, value = self.registry.decode(parsed.tag, raw)
        except (MalformedPathError, UnknownCodecError, DecodeError) as exc:
            self.report(key, exc)
            return

        slot = _slot_path(parsed.segments, self.appended)
        self.accumulator.assign(slot, value, binary=getattr(codec, "binary", False))
        self.assigned += 1


def extract(
    entries: Mapping[str, Any] | Iterable[tuple[str, Any]],
    codecs: Iterable[Codec] = (),
    accumulator: Accumulator | None = None,
    registry: CodecRegistry = DEFAULT_REGISTRY,
) -> Extraction:
    """Fold flat ``(key, value)`` form entries into a nested record.

    Parameters
    ----------
    entries
        Flat form submission, either pairs or a mapping. Iteration order
        numbers ``[]`` array slots.
    codecs
        Extra codecs for this call only; they may replace registry codecs
        with the same tag.
    accumulator
        Tree from a previous call to fold into. A new one is created when
        omitted.
    registry
        Base codec set. ``DEFAULT_REGISTRY`` is never modified.

    Entries with malformed keys, unknown tags or undecodable values are skipped
    and reported in ``Extraction.issues``. Duplicate codec tags raise
    ``DuplicateCodecTagError`` before any entry is read.
    """
    active = registry.derive(codecs)
    state = _Pass(Accumulator() if accumulator is None else accumulator, active)

    for key, raw in _iter_entries(entries):
        if not isinstance(key, str):
            state.report(str(key), MalformedPathError(str(key), "key must be a string"))
            continue
        state.feed(key, raw)

    logger.debug(
        "extracted %d entries (%d omitted, %d skipped)", state.assigned, state.omitted, len(state.issues)
    )
    return Extraction(
        combined=state.accumulator.view(),
        fields=state.accumulator.view(binary=False),
        files=state.accumulator.view(binary=True),
        issues=tuple(state.issues),
    )
