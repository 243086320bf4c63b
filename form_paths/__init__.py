"""form-paths - typed nested records from flat form field names"""

from ._version import version as __version__
from .codecs import DEFAULT_REGISTRY, Codec, CodecRegistry, encode
from .errors import DecodeError, DuplicateCodecTagError, FormPathError, MalformedPathError, UnknownCodecError
from .extraction import UNSET, Accumulator, Extraction, ExtractionIssue, extract
from .paths import PathBuilder, name_of, parse_key, paths_for


__all__ = [
    "DEFAULT_REGISTRY",
    "UNSET",
    "Accumulator",
    "Codec",
    "CodecRegistry",
    "DecodeError",
    "DuplicateCodecTagError",
    "Extraction",
    "ExtractionIssue",
    "FormPathError",
    "MalformedPathError",
    "PathBuilder",
    "UnknownCodecError",
    "__version__",
    "encode",
    "extract",
    "name_of",
    "parse_key",
    "paths_for",
]
