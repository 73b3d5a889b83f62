from __future__ import annotations

import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, replace
from pathlib import Path

from ..config import AuditConfig
from ..core.context import RunContext
from ..core.git import LastTouch, read_last_touch
from ..dep3.parser import HeaderRecordParser
from ..dep3.record import HeaderRecord
from ..errors import PatchReadError
from ..logging import log_event
from .classify import classify_patch
from .scan import PatchSet, discover_patches

SOURCE_HEADER = "header"
SOURCE_HISTORY = "history"
SOURCE_MISSING = "missing"


@dataclass(frozen=True)
class PatchResult:
    package: str
    path: Path
    name: str
    patch_class: str
    record: HeaderRecord | None
    error: str | None
    author: str | None
    author_source: str
    last_update: str | None
    last_update_source: str
    duration_ms: int

    @property
    def status(self) -> str:
        if self.record is None:
            return "error"
        return "valid" if self.record.valid else "invalid"


def _header_value(record: HeaderRecord | None, name: str) -> str | None:
    if record is None:
        return None
    value = record.get(name)
    return value.strip() if value is not None else None


def _resolve(header: str | None, history: str | None) -> tuple[str | None, str]:
    if header is not None:
        return header, SOURCE_HEADER
    if history:
        return history, SOURCE_HISTORY
    return None, SOURCE_MISSING


def audit_patch(ctx: RunContext, cfg: AuditConfig, package: str, path: Path) -> PatchResult:
    start = time.perf_counter()
    record: HeaderRecord | None = None
    error: str | None = None
    try:
        record = HeaderRecordParser(path, cfg.encoding, ctx).parse()
    except PatchReadError as exc:
        error = str(exc)
        log_event(ctx, "error", "audit", "unreadable", path=str(path), error=error)

    author = _header_value(record, "Author")
    last_update = _header_value(record, "Last-Update")
    touch: LastTouch | None = None
    if cfg.history_fallback and record is not None and (author is None or last_update is None):
        touch = read_last_touch(path, ctx)
        log_event(ctx, "debug", "audit", "history_fallback", path=str(path), found=touch is not None)
    resolved_author, author_source = _resolve(author, touch.author if touch else None)
    resolved_update, update_source = _resolve(last_update, touch.date if touch else None)

    elapsed_ms = int((time.perf_counter() - start) * 1000)
    result = PatchResult(
        package=package,
        path=path,
        name=path.name,
        patch_class=classify_patch(path.name, cfg.classes),
        record=record,
        error=error,
        author=resolved_author,
        author_source=author_source,
        last_update=resolved_update,
        last_update_source=update_source,
        duration_ms=elapsed_ms,
    )
    log_event(ctx, "debug", "audit", "patch", path=str(path), status=result.status, duration_ms=elapsed_ms)
    return result


def run_audit(
    ctx: RunContext,
    cfg: AuditConfig,
    targets: list[Path],
    jobs: int | None = None,
) -> tuple[list[PatchSet], list[PatchResult]]:
    seen: set[Path] = set()
    sets: list[PatchSet] = []
    for target in targets:
        patch_set = discover_patches(target, cfg)
        fresh: list[Path] = []
        for path in patch_set.patches:
            key = path.resolve()
            if key not in seen:
                seen.add(key)
                fresh.append(path)
        # every patch already audited under an earlier target
        if patch_set.patches and not fresh:
            continue
        sets.append(replace(patch_set, patches=tuple(fresh)))
    work = [(patch_set.package, path) for patch_set in sets for path in patch_set.patches]
    workers = jobs if jobs is not None else cfg.jobs

    def _run_one(item: tuple[str, Path]) -> PatchResult:
        return audit_patch(ctx, cfg, item[0], item[1])

    if workers > 1:
        with ThreadPoolExecutor(max_workers=workers) as ex:
            results = list(ex.map(_run_one, work))
    else:
        results = [_run_one(item) for item in work]
    return sets, results
