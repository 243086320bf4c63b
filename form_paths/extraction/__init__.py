"""Extraction engine and accumulator."""

from .accumulator import UNSET, Accumulator, SlotPath
from .engine import Extraction, ExtractionIssue, extract, is_empty_value


__all__ = ["UNSET", "Accumulator", "Extraction", "ExtractionIssue", "SlotPath", "extract", "is_empty_value"]
