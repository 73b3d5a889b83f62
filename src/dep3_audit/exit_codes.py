from __future__ import annotations

import json
from pathlib import Path

ERROR_REGISTRY = Path(__file__).resolve().parent / "contracts" / "error-registry.json"


def _load_registry() -> dict[str, int]:
    payload = json.loads(ERROR_REGISTRY.read_text(encoding="utf-8"))
    mapping: dict[str, int] = {}
    for row in payload.get("codes", []):
        mapping[str(row["name"])] = int(row["code"])
    return mapping


_REG = _load_registry()

OK = _REG["DEP3_OK"]
ERR_FAIL = _REG["DEP3_ERR_FAIL"]
ERR_USAGE = _REG["DEP3_ERR_USAGE"]
ERR_CONFIG = _REG["DEP3_ERR_CONFIG"]
ERR_IO = _REG["DEP3_ERR_IO"]
ERR_VALIDATION = _REG["DEP3_ERR_VALIDATION"]
ERR_INTERNAL = _REG["DEP3_ERR_INTERNAL"]
