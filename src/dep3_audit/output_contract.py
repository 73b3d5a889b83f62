from __future__ import annotations

import json
from pathlib import Path

import jsonschema

from .core.schema import resolve_schema_path, validate_json_file_against_schema
from .errors import ScriptError
from .exit_codes import ERR_IO, ERR_VALIDATION, OK


def validate_json_output(schema: str, file_path: str, as_json: bool = False) -> int:
    try:
        schema_path = resolve_schema_path(schema)
        validate_json_file_against_schema(schema_path, Path(file_path))
    except (OSError, json.JSONDecodeError) as exc:
        raise ScriptError(f"json output validation failed: {exc}", ERR_IO, kind="unreadable_output") from exc
    except jsonschema.ValidationError as exc:
        raise ScriptError(f"json output validation failed: {exc.message}", ERR_VALIDATION) from exc
    if as_json:
        print(json.dumps({"status": "ok", "schema": str(schema_path), "file": file_path}, sort_keys=True))
    else:
        print(f"{file_path}: matches {schema_path.name}")
    return OK
