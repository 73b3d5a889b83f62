from __future__ import annotations

import argparse
import json
import os
import sys
from dataclasses import replace
from pathlib import Path

from . import __version__
from .audit.report import build_report, record_payload, render_record_text, render_text
from .audit.runner import run_audit
from .config import DEFAULT_CONFIG_NAME, load_config
from .core.context import RunContext
from .dep3.parser import HeaderRecordParser
from .errors import ScriptError
from .exit_codes import ERR_FAIL, ERR_INTERNAL, ERR_USAGE, OK
from .io.fs import write_json
from .logging import log_event
from .output_contract import validate_json_output

TOOL = "dep3-audit"


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog=TOOL, description="audit patch files for DEP3 header compliance")
    p.add_argument("--version", action="version", version=f"{TOOL} {__version__}")
    p.add_argument("--run-id", help="run identifier carried in logs and reports")
    p.add_argument("--format", choices=["text", "json"], default=None, help="output format")
    p.add_argument("--log-format", choices=["text", "json"], default="text", help="log line format on stderr")
    p.add_argument("--config", help=f"config file (default: ./{DEFAULT_CONFIG_NAME} when present)")
    vg = p.add_mutually_exclusive_group()
    vg.add_argument("--verbose", action="store_true", help="enable debug diagnostics")
    vg.add_argument("--quiet", action="store_true", help="only emit errors")
    sub = p.add_subparsers(dest="cmd", required=True)

    version_p = sub.add_parser("version", help="print version")
    version_p.add_argument("--json", action="store_true", help="emit JSON output")

    parse_p = sub.add_parser("parse", help="parse one patch file and print its DEP3 record")
    parse_p.add_argument("file")
    parse_p.add_argument("--json", action="store_true", help="emit JSON output")

    audit_p = sub.add_parser("audit", help="audit patch files or checkouts containing debian/patches")
    audit_p.add_argument("paths", nargs="+", help="patch files, patch directories or package checkouts")
    audit_p.add_argument("--json", action="store_true", help="emit JSON output")
    audit_p.add_argument("--out-file", help="also write the JSON report to this path")
    audit_p.add_argument("--jobs", type=int, help="parallel parse workers (overrides config)")
    audit_p.add_argument("--no-history", action="store_true", help="do not fall back to git history")

    val_p = sub.add_parser("validate-output", help="validate JSON output against a schema")
    val_p.add_argument("--schema", required=True, help="packaged contract name or schema path")
    val_p.add_argument("--file", required=True)
    val_p.add_argument("--json", action="store_true", help="emit JSON output")
    return p


def _emit(payload: dict[str, object], as_json: bool) -> None:
    if as_json:
        print(json.dumps(payload, sort_keys=True))
    else:
        print(json.dumps(payload, indent=2, sort_keys=True))


def _run_parse(ctx: RunContext, ns: argparse.Namespace, as_json: bool) -> int:
    cfg = load_config(ns.config, ctx.cwd)
    record = HeaderRecordParser(ns.file, cfg.encoding, ctx).parse()
    if as_json:
        print(json.dumps(record_payload(ctx, record), sort_keys=True))
    else:
        print(render_record_text(record))
    return OK if record.valid else ERR_FAIL


def _run_audit(ctx: RunContext, ns: argparse.Namespace, as_json: bool) -> int:
    cfg = load_config(ns.config, ctx.cwd)
    log_event(ctx, "debug", "config", "load", source=cfg.source or "defaults")
    if ns.no_history:
        cfg = replace(cfg, history_fallback=False)
    if ns.jobs is not None and ns.jobs < 1:
        raise ScriptError("--jobs must be at least 1", ERR_USAGE, kind="usage")
    sets, results = run_audit(ctx, cfg, [Path(p) for p in ns.paths], ns.jobs)
    code, payload = build_report(ctx, cfg, sets, results)
    if ns.out_file:
        write_json(Path(ns.out_file), payload)
    if as_json:
        print(json.dumps(payload, sort_keys=True))
    else:
        print(render_text(payload))
    return code


def main(argv: list[str] | None = None) -> int:
    p = build_parser()
    ns = p.parse_args(argv)
    fmt = ns.format or ("json" if "CI" in os.environ else "text")
    ctx = RunContext.from_args(ns.run_id, fmt, ns.log_format, ns.verbose, ns.quiet)
    try:
        log_event(ctx, "info", "cli", "start", cmd=ns.cmd, fmt=ctx.output_format)
        as_json = ctx.output_format == "json" or bool(getattr(ns, "json", False))
        if ns.cmd == "version":
            _emit({"schema_version": 1, "tool": TOOL, "version": __version__, "run_id": ctx.run_id}, as_json)
            return OK
        if ns.cmd == "parse":
            return _run_parse(ctx, ns, as_json)
        if ns.cmd == "audit":
            return _run_audit(ctx, ns, as_json)
        if ns.cmd == "validate-output":
            return validate_json_output(ns.schema, ns.file, as_json)
        return ERR_USAGE
    except ScriptError as exc:
        if ctx.output_format == "json":
            print(
                json.dumps(
                    {
                        "schema_version": 1,
                        "tool": TOOL,
                        "status": "fail",
                        "error": {"message": str(exc), "code": exc.code, "kind": exc.kind},
                    },
                    sort_keys=True,
                ),
                file=sys.stderr,
            )
        else:
            print(str(exc), file=sys.stderr)
        return exc.code
    except Exception as exc:  # pragma: no cover
        if ctx.output_format == "json":
            print(
                json.dumps(
                    {
                        "schema_version": 1,
                        "tool": TOOL,
                        "status": "fail",
                        "error": {"message": f"internal error: {exc}", "code": ERR_INTERNAL},
                    },
                    sort_keys=True,
                ),
                file=sys.stderr,
            )
        else:
            print(f"internal error: {exc}", file=sys.stderr)
        return ERR_INTERNAL


if __name__ == "__main__":
    raise SystemExit(main())
