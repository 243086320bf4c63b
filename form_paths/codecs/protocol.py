"""Codec interface definitions."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar

from form_paths.paths import PathBuilder, name_of


def encode(path: PathBuilder[Any] | str, tag: str) -> str:
    """Append ``:tag`` to a rendered path."""
    rendered = path if isinstance(path, str) else name_of(path)
    return f"{rendered}:{tag}"


class Codec(ABC):
    """Transform between raw form values and typed values.

    Subclasses set ``tag`` and implement ``decode_value``. Codecs with
    ``binary = True`` receive blob handles instead of text.
    """

    tag: ClassVar[str]
    binary: ClassVar[bool] = False

    def encode(self, path: PathBuilder[Any] | str) -> str:
        """Return the field name for ``path`` tagged with this codec."""
        return encode(path, self.tag)

    @abstractmethod
    def decode_value(self, raw: Any) -> Any:
        """Return the typed value for a raw form value, or raise ``DecodeError``."""

    def encode_value(self, value: Any) -> str:
        """Render a typed value as form text."""
        return str(value)
