from __future__ import annotations

from .parser import HeaderRecordParser, parse, parse_lines
from .record import ALIASES, HeaderRecord, resolve_alias

__all__ = [
    "ALIASES",
    "HeaderRecord",
    "HeaderRecordParser",
    "parse",
    "parse_lines",
    "resolve_alias",
]
