from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema

CONTRACTS_DIR = Path(__file__).resolve().parents[1] / "contracts"


def load_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


def resolve_schema_path(name_or_path: str) -> Path:
    candidate = Path(name_or_path)
    if candidate.is_file():
        return candidate
    packaged = CONTRACTS_DIR / name_or_path
    if packaged.is_file():
        return packaged
    packaged = CONTRACTS_DIR / f"{name_or_path}.schema.json"
    if packaged.is_file():
        return packaged
    raise FileNotFoundError(f"unknown schema `{name_or_path}`")


def validate_payload(payload: Any, schema_name: str) -> None:
    schema = load_json(resolve_schema_path(schema_name))
    jsonschema.validate(payload, schema)


def validate_json_file_against_schema(schema_path: Path, file_path: Path) -> None:
    jsonschema.validate(load_json(file_path), load_json(schema_path))
