"""form-paths error hierarchy.

Per-entry errors (``MalformedPathError``, ``UnknownCodecError``, ``DecodeError``)
are caught by the extraction engine and reported as issues. ``DuplicateCodecTagError``
is raised while building a registry and aborts the call.
"""

from __future__ import annotations


class FormPathError(Exception):
    """Base class for all form-paths errors."""


class MalformedPathError(FormPathError, ValueError):
    """A flat key does not follow the path grammar."""

    def __init__(self, key: str, reason: str) -> None:
        super().__init__(f"malformed path {key!r}: {reason}")
        self.key = key
        self.reason = reason


class UnknownCodecError(FormPathError, LookupError):
    """A key carries a type tag that no registered codec handles."""

    def __init__(self, tag: str) -> None:
        super().__init__(f"no codec registered for tag {tag!r}")
        self.tag = tag


class DecodeError(FormPathError, ValueError):
    """A codec rejected a raw value."""

    def __init__(self, tag: str, reason: str) -> None:
        super().__init__(f"{tag} codec rejected value: {reason}")
        self.tag = tag
        self.reason = reason


class DuplicateCodecTagError(FormPathError, ValueError):
    """Two codecs were registered under the same tag."""

    def __init__(self, tag: str) -> None:
        super().__init__(f"duplicate codec tag {tag!r}")
        self.tag = tag
