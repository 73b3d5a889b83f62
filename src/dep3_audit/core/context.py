from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Literal

OutputFormat = Literal["text", "json"]
LogFormat = Literal["text", "json"]


@dataclass(frozen=True)
class RunContext:
    run_id: str
    cwd: Path
    output_format: OutputFormat
    log_format: LogFormat
    verbose: bool
    quiet: bool

    @property
    def log_json(self) -> bool:
        return self.log_format == "json"

    @classmethod
    def from_args(
        cls,
        run_id: str | None,
        output_format: OutputFormat = "text",
        log_format: LogFormat = "text",
        verbose: bool = False,
        quiet: bool = False,
        cwd: str | None = None,
    ) -> "RunContext":
        default_run = f"dep3-{datetime.now(timezone.utc).strftime('%Y%m%d-%H%M%S')}"
        resolved_run_id = run_id or os.environ.get("RUN_ID", default_run)
        resolved_cwd = Path(cwd).resolve() if cwd else Path.cwd()
        return cls(
            run_id=resolved_run_id,
            cwd=resolved_cwd,
            output_format=output_format,
            log_format=log_format,
            verbose=verbose,
            quiet=quiet,
        )

    @classmethod
    def default(cls) -> "RunContext":
        return cls.from_args(None)
