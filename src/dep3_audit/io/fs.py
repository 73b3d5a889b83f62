from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from ..errors import ScriptError
from ..exit_codes import ERR_IO


def write_json(path: Path, payload: Any) -> Path:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload, indent=2, sort_keys=True) + "\n", encoding="utf-8")
    except OSError as exc:
        raise ScriptError(f"cannot write {path}: {exc}", ERR_IO, kind="write_failed") from exc
    return path
