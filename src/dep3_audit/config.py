from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import jsonschema
import yaml

from .core.schema import CONTRACTS_DIR, load_json
from .errors import ScriptError
from .exit_codes import ERR_CONFIG

DEFAULT_CONFIG_NAME = ".dep3-audit.yaml"
CONFIG_SCHEMA = CONTRACTS_DIR / "config.schema.json"


@dataclass(frozen=True)
class PatchClass:
    name: str
    pattern: str


@dataclass(frozen=True)
class AuditConfig:
    patches_dir: str = "debian/patches"
    exclude: tuple[str, ...] = ("series",)
    classes: tuple[PatchClass, ...] = field(
        default_factory=lambda: (PatchClass("upstream", "upstream_"), PatchClass("kubuntu", "kubuntu_"))
    )
    encoding: str = "utf-8"
    history_fallback: bool = True
    jobs: int = 1
    source: str | None = None

    @classmethod
    def from_mapping(cls, data: dict[str, Any], source: str | None = None) -> "AuditConfig":
        base = cls()
        classes = data.get("classes")
        return cls(
            patches_dir=str(data.get("patches_dir", base.patches_dir)),
            exclude=tuple(data.get("exclude", base.exclude)),
            classes=(
                tuple(PatchClass(str(row["name"]), str(row["pattern"])) for row in classes)
                if classes is not None
                else base.classes
            ),
            encoding=str(data.get("encoding", base.encoding)),
            history_fallback=bool(data.get("history_fallback", base.history_fallback)),
            jobs=int(data.get("jobs", base.jobs)),
            source=source,
        )


def load_yaml(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def load_config(path: str | Path | None = None, cwd: Path | None = None) -> AuditConfig:
    if path is None:
        candidate = (cwd or Path.cwd()) / DEFAULT_CONFIG_NAME
        if not candidate.is_file():
            return AuditConfig()
        config_path = candidate
    else:
        config_path = Path(path)
        if not config_path.is_file():
            raise ScriptError(f"config file not found: {config_path}", ERR_CONFIG, kind="config_missing")
    try:
        data = load_yaml(config_path)
    except (OSError, yaml.YAMLError) as exc:
        raise ScriptError(f"{config_path}: cannot load config: {exc}", ERR_CONFIG, kind="config_invalid") from exc
    data = data or {}
    try:
        jsonschema.validate(data, load_json(CONFIG_SCHEMA))
    except jsonschema.ValidationError as exc:
        raise ScriptError(f"{config_path}: {exc.message}", ERR_CONFIG, kind="config_invalid") from exc
    encoding = str(data.get("encoding", "utf-8"))
    try:
        newline = "\n".encode(encoding)
    except (LookupError, UnicodeError) as exc:
        raise ScriptError(f"{config_path}: unknown encoding `{encoding}`", ERR_CONFIG, kind="config_invalid") from exc
    # patches are split into lines on raw newline bytes before decoding
    if newline != b"\n":
        raise ScriptError(
            f"{config_path}: encoding `{encoding}` does not encode newlines as a single byte",
            ERR_CONFIG,
            kind="config_invalid",
        )
    for row in data.get("classes", []):
        try:
            re.compile(row["pattern"])
        except re.error as exc:
            raise ScriptError(
                f"{config_path}: class `{row['name']}` has a bad pattern: {exc}", ERR_CONFIG, kind="config_invalid"
            ) from exc
    return AuditConfig.from_mapping(data, source=str(config_path))
