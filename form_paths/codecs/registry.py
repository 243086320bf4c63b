"""Tag to codec lookup for one extraction call."""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING, Any, override

from form_paths.errors import DecodeError, DuplicateCodecTagError, UnknownCodecError

from .builtin import DEFAULT_CODECS, FileCodec, StringCodec


if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from .protocol import Codec


def _index_codecs(codecs: Iterable[Codec]) -> dict[str, Codec]:
    indexed: dict[str, Codec] = {}
    for codec in codecs:
        tag = getattr(codec, "tag", None)
        if not isinstance(tag, str) or not tag:
            msg = f"codec {codec!r} must define a non-empty string tag"
            raise TypeError(msg)
        if ":" in tag:
            msg = f"codec tag must not contain ':', got {tag!r}"
            raise ValueError(msg)
        if not callable(getattr(codec, "decode_value", None)):
            msg = f"codec {codec!r} must define decode_value()"
            raise TypeError(msg)
        if tag in indexed:
            raise DuplicateCodecTagError(tag)
        indexed[tag] = codec
    return indexed


class CodecRegistry:
    """Read-only set of codecs keyed by tag.

    Untagged text falls back to the ``string`` codec and untagged blobs to the
    ``file`` codec; both fallbacks are built in when not registered.
    """

    def __init__(self, codecs: Iterable[Codec] = DEFAULT_CODECS) -> None:
        super().__init__()
        self._codecs: Mapping[str, Codec] = MappingProxyType(_index_codecs(codecs))
        self._text_default = self._codecs.get(StringCodec.tag) or StringCodec()
        self._binary_default = self._codecs.get(FileCodec.tag) or FileCodec()

    @property
    def codecs(self) -> Mapping[str, Codec]:
        """Registered codecs keyed by tag."""
        return self._codecs

    def derive(self, codecs: Iterable[Codec]) -> CodecRegistry:
        """Return a new registry where ``codecs`` extend or replace these ones."""
        extra = _index_codecs(codecs)
        if not extra:
            return self
        merged = {tag: codec for tag, codec in self._codecs.items() if tag not in extra}
        merged.update(extra)
        return CodecRegistry(merged.values())

    def resolve(self, tag: str | None, raw: Any) -> Codec:
        """Return the codec for ``tag``; untagged values pick by raw type."""
        if tag is None:
            return self._text_default if isinstance(raw, str) else self._binary_default
        try:
            return self._codecs[tag]
        except KeyError:
            raise UnknownCodecError(tag) from None

    def decode(self, tag: str | None, raw: Any) -> tuple[Codec, Any]:
        """Resolve the codec for ``tag`` and decode ``raw`` with it.

        Exceptions a codec raises are wrapped in ``DecodeError`` so one bad
        value never aborts an extraction pass.
        """
        codec = self.resolve(tag, raw)
        try:
            return codec, codec.decode_value(raw)
        except DecodeError:
            raise
        except Exception as exc:  # noqa: BLE001
            msg = f"{type(exc).__name__}: {exc}"
            raise DecodeError(codec.tag, msg) from exc

    def __contains__(self, tag: object) -> bool:
        return tag in self._codecs

    @override
    def __repr__(self) -> str:
        return f"CodecRegistry({sorted(self._codecs)!r})"


DEFAULT_REGISTRY = CodecRegistry()
