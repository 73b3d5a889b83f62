from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ..config import AuditConfig
from ..errors import ScriptError
from ..exit_codes import ERR_IO


@dataclass(frozen=True)
class PatchSet:
    package: str
    root: Path
    patches: tuple[Path, ...]


def patches_root(target: Path, cfg: AuditConfig) -> Path:
    nested = target / cfg.patches_dir
    return nested if nested.is_dir() else target


def _is_hidden(path: Path, root: Path) -> bool:
    return any(part.startswith(".") for part in path.relative_to(root).parts)


def discover_patches(target: Path, cfg: AuditConfig) -> PatchSet:
    if target.is_file():
        return PatchSet(package=target.parent.name, root=target.parent, patches=(target,))
    if not target.is_dir():
        raise ScriptError(f"audit target does not exist: {target}", ERR_IO, kind="target_missing")
    root = patches_root(target, cfg)
    excluded = set(cfg.exclude)
    found = [
        p
        for p in sorted(root.rglob("*"))
        if p.is_file() and p.name not in excluded and not _is_hidden(p, root)
    ]
    return PatchSet(package=target.resolve().name, root=root, patches=tuple(found))
