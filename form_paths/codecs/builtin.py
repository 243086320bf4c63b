"""Codecs registered by default."""

from __future__ import annotations

import math
from datetime import date, datetime
from typing import Any, override

from form_paths.errors import DecodeError

from .protocol import Codec


def _require_text(tag: str, raw: Any) -> str:
    if not isinstance(raw, str):
        msg = f"expected text, got {type(raw).__name__}"
        raise DecodeError(tag, msg)
    return raw


class StringCodec(Codec):
    """Plain text; also used for untagged text values."""

    tag = "string"

    @override
    def decode_value(self, raw: Any) -> str:
        return _require_text(self.tag, raw)


class NumberCodec(Codec):
    """Finite floating-point numbers."""

    tag = "number"

    @override
    def decode_value(self, raw: Any) -> float:
        text = _require_text(self.tag, raw).strip()
        if "_" in text:
            msg = f"not a number: {raw!r}"
            raise DecodeError(self.tag, msg)
        try:
            value = float(text)
        except ValueError:
            msg = f"not a number: {raw!r}"
            raise DecodeError(self.tag, msg) from None
        if not math.isfinite(value):
            msg = f"not a finite number: {raw!r}"
            raise DecodeError(self.tag, msg)
        return value

    @override
    def encode_value(self, value: Any) -> str:
        return repr(float(value))


class BooleanCodec(Codec):
    """Checkbox and select values such as ``on``/``off`` or ``true``/``false``."""

    tag = "boolean"

    TRUE_VALUES = frozenset({"true", "on", "yes", "1"})
    FALSE_VALUES = frozenset({"false", "off", "no", "0"})

    @override
    def decode_value(self, raw: Any) -> bool:
        text = _require_text(self.tag, raw).strip().lower()
        if text in self.TRUE_VALUES:
            return True
        if text in self.FALSE_VALUES:
            return False
        msg = f"not a boolean: {raw!r}"
        raise DecodeError(self.tag, msg)

    @override
    def encode_value(self, value: Any) -> str:
        return "true" if value else "false"


class DateCodec(Codec):
    """ISO-8601 dates (``2024-05-01``) and datetimes (``2024-05-01T10:30``)."""

    tag = "date"

    @override
    def decode_value(self, raw: Any) -> date | datetime:
        text = _require_text(self.tag, raw).strip()
        try:
            if len(text) == 10:
                return date.fromisoformat(text)
            return datetime.fromisoformat(text)
        except ValueError as exc:
            msg = f"not an ISO date: {raw!r} ({exc})"
            raise DecodeError(self.tag, msg) from None

    @override
    def encode_value(self, value: Any) -> str:
        if not isinstance(value, date):
            msg = f"expected date or datetime, got {type(value).__name__}"
            raise TypeError(msg)
        return value.isoformat()


class FileCodec(Codec):
    """Uploaded blobs, passed through unchanged."""

    tag = "file"
    binary = True

    @override
    def decode_value(self, raw: Any) -> Any:
        if isinstance(raw, str):
            msg = "expected a file upload, got text"
            raise DecodeError(self.tag, msg)
        return raw

    @override
    def encode_value(self, value: Any) -> str:
        msg = "file values cannot be rendered as form text"
        raise TypeError(msg)


DEFAULT_CODECS: tuple[Codec, ...] = (StringCodec(), NumberCodec(), BooleanCodec(), DateCodec(), FileCodec())
