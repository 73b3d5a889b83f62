from __future__ import annotations

from ..config import AuditConfig
from ..core.context import RunContext
from ..dep3.record import HeaderRecord
from ..exit_codes import ERR_FAIL, OK
from .runner import PatchResult
from .scan import PatchSet

TOOL = "dep3-audit"


def _row(result: PatchResult) -> dict[str, object]:
    record = result.record
    return {
        "name": result.name,
        "path": str(result.path),
        "class": result.patch_class,
        "status": result.status,
        "valid": record is not None and record.valid,
        "author": result.author,
        "author_source": result.author_source,
        "last_update": result.last_update,
        "last_update_source": result.last_update_source,
        "problems": list(record.problems) if record is not None else [],
        "skipped_lines": list(record.skipped_lines) if record is not None else [],
        "fields": record.as_dict() if record is not None else {},
        "error": result.error,
        "duration_ms": result.duration_ms,
    }


def build_report(
    ctx: RunContext,
    cfg: AuditConfig,
    sets: list[PatchSet],
    results: list[PatchResult],
) -> tuple[int, dict[str, object]]:
    # results arrive in the same order as the patches of each set
    packages: list[dict[str, object]] = []
    offset = 0
    for patch_set in sets:
        count = len(patch_set.patches)
        packages.append(
            {
                "package": patch_set.package,
                "root": str(patch_set.root),
                "patch_count": count,
                "patches": [_row(r) for r in results[offset : offset + count]],
            }
        )
        offset += count
    valid = sum(1 for r in results if r.status == "valid")
    invalid = sum(1 for r in results if r.status == "invalid")
    errors = sum(1 for r in results if r.status == "error")
    failed = invalid + errors
    payload: dict[str, object] = {
        "schema_version": 1,
        "tool": TOOL,
        "kind": "dep3-audit-report",
        "run_id": ctx.run_id,
        "config": cfg.source,
        "status": "pass" if failed == 0 else "fail",
        "total_count": len(results),
        "valid_count": valid,
        "invalid_count": invalid,
        "error_count": errors,
        "packages": packages,
    }
    return (OK if failed == 0 else ERR_FAIL), payload


def record_payload(ctx: RunContext, record: HeaderRecord) -> dict[str, object]:
    return {
        "schema_version": 1,
        "tool": TOOL,
        "kind": "dep3-record",
        "run_id": ctx.run_id,
        **record.to_payload(),
    }


def render_text(payload: dict[str, object]) -> str:
    lines = [
        f"{TOOL}: {payload['status']} "
        f"({payload['valid_count']} valid, {payload['invalid_count']} invalid, "
        f"{payload['error_count']} unreadable of {payload['total_count']})"
    ]
    for package in payload["packages"]:  # type: ignore[union-attr]
        lines.append(f"{package['package']} ({package['root']})")
        if not package["patches"]:
            lines.append("  no patches")
        for row in package["patches"]:
            detail = (
                f"author={row['author'] or '-'} ({row['author_source']}) "
                f"last-update={row['last_update'] or '-'} ({row['last_update_source']})"
            )
            if row["status"] == "error":
                detail = str(row["error"])
            elif row["problems"]:
                detail = f"{'; '.join(row['problems'])}; {detail}"
            lines.append(f"  [{row['status']}] {row['class']:<9} {row['name']}  {detail}")
    return "\n".join(lines)


def render_record_text(record: HeaderRecord) -> str:
    lines = [f"{record.path}: {'valid' if record.valid else 'invalid'}"]
    for problem in record.problems:
        lines.append(f"  problem: {problem}")
    if record.skipped_lines:
        lines.append(f"  skipped lines: {', '.join(str(n) for n in record.skipped_lines)}")
    for name, value in record.items():
        first, *rest = value.split("\n")
        lines.append(f"{name}: {first}")
        lines.extend(f" {line}" if line else " ." for line in rest)
    return "\n".join(lines)
