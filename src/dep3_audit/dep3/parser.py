"""DEP3 header parser.

A patch file is read line by line until the `---` delimiter or EOF. Each line
moves an explicit state machine (`Idle`, `InHeader`, `InFreeForm`) through
`step`; the scan result is then checked by `finalize`, which either marks the
record valid (merging free-form prose into Description) or leaves it invalid
with `problems` filled in. Non-compliant input never raises; only an
unreadable path does (`PatchReadError`).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Iterable, Iterator

from ..core.context import RunContext
from ..errors import PatchReadError
from ..logging import log_event
from .record import FREE_DESCRIPTION_KEY, HeaderRecord

DELIMITER = "---"
HEADER_RE = re.compile(r"(\S+):(.*)")
FOLD_RE = re.compile(r"\s(.+)")

PROBLEM_MISSING_DESCRIPTION = "missing Description/Subject field"
PROBLEM_MISSING_ORIGIN = "missing Origin or Author/From field"


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class InHeader:
    field: str


@dataclass(frozen=True)
class InFreeForm:
    pass


ParseState = Idle | InHeader | InFreeForm


def _chomp(line: str) -> str:
    return line.removesuffix("\n").removesuffix("\r")


def is_delimiter(line: str) -> bool:
    return line.strip() == DELIMITER


def step(state: ParseState, line: str, record: HeaderRecord) -> ParseState:
    header = HEADER_RE.match(line)
    if header:
        name = header.group(1).lstrip()
        record.append(name, header.group(2).lstrip())
        return InHeader(name)

    if isinstance(state, InHeader):
        fold = FOLD_RE.match(line)
        if fold:
            record.append(state.field, fold.group(1).lstrip())
            return state

    if isinstance(state, InFreeForm) and line == "\n":
        return Idle()

    # a line that is only a line break is kept verbatim
    chomped = _chomp(line)
    record.append(FREE_DESCRIPTION_KEY, chomped if chomped else line)
    return InFreeForm()


def validate(record: HeaderRecord) -> list[str]:
    if "Description" not in record:
        return [PROBLEM_MISSING_DESCRIPTION]
    if "Origin" not in record and "Author" not in record:
        return [PROBLEM_MISSING_ORIGIN]
    return []


def finalize(record: HeaderRecord) -> HeaderRecord:
    problems = validate(record)
    if problems:
        record.problems = problems
        return record
    record.append("Description", record.free_description or "")
    record.delete(FREE_DESCRIPTION_KEY)
    record.strip_values()
    record.valid = True
    return record


def parse_lines(lines: Iterable[str], record: HeaderRecord | None = None) -> HeaderRecord:
    record = record if record is not None else HeaderRecord()
    state: ParseState = Idle()
    for line in lines:
        if is_delimiter(line):
            break
        state = step(state, line, record)
    return finalize(record)


def decode_line(raw: bytes, encoding: str) -> str | None:
    """Decode one raw line, or None when it is not valid in `encoding`."""
    try:
        return raw.decode(encoding)
    except UnicodeDecodeError:
        return None


class HeaderRecordParser:
    def __init__(self, path: str | Path, encoding: str = "utf-8", ctx: RunContext | None = None) -> None:
        self.path = Path(path)
        self.encoding = encoding
        self.ctx = ctx

    def _decoded_lines(self, handle: BinaryIO, record: HeaderRecord) -> Iterator[str]:
        for lineno, raw in enumerate(handle, start=1):
            line = decode_line(raw, self.encoding)
            if line is None:
                record.skipped_lines.append(lineno)
                log_event(
                    self.ctx,
                    "warning",
                    "parser",
                    "skip_line",
                    path=str(self.path),
                    lineno=lineno,
                    reason=f"not valid {self.encoding}",
                )
                continue
            yield line

    def parse(self) -> HeaderRecord:
        record = HeaderRecord(path=str(self.path))
        try:
            with self.path.open("rb") as handle:
                return parse_lines(self._decoded_lines(handle, record), record)
        except OSError as exc:
            raise PatchReadError(str(self.path), exc.strerror or str(exc)) from exc


def parse(path: str | Path, encoding: str = "utf-8", ctx: RunContext | None = None) -> HeaderRecord:
    return HeaderRecordParser(path, encoding, ctx).parse()
