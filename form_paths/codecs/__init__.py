"""Codec contracts, built-in codecs and the registry."""

from .builtin import DEFAULT_CODECS, BooleanCodec, DateCodec, FileCodec, NumberCodec, StringCodec
from .protocol import Codec, encode
from .registry import DEFAULT_REGISTRY, CodecRegistry


__all__ = [
    "DEFAULT_CODECS",
    "DEFAULT_REGISTRY",
    "BooleanCodec",
    "Codec",
    "CodecRegistry",
    "DateCodec",
    "FileCodec",
    "NumberCodec",
    "StringCodec",
    "encode",
]
