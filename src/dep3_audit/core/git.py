from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ..logging import log_event
from .context import RunContext
from .process import run_command


@dataclass(frozen=True)
class LastTouch:
    author: str | None
    date: str | None


def read_last_touch(path: Path, ctx: RunContext | None = None) -> LastTouch | None:
    """Author and short date of the newest commit touching `path`.

    Returns None when git is unavailable, the file is outside a work tree, or
    the file has no history yet.
    """
    res = run_command(["git", "log", "-1", "--format=%an <%ae>%n%as", "--", path.name], path.parent)
    if res.code != 0:
        log_event(ctx, "debug", "git", "log_failed", path=str(path), code=res.code, output=res.combined_output)
        return None
    lines = [line.strip() for line in res.stdout.splitlines() if line.strip()]
    if not lines:
        return None
    author = lines[0] or None
    date = lines[1] if len(lines) > 1 else None
    return LastTouch(author=author, date=date)
