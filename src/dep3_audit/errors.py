from __future__ import annotations

from dataclasses import dataclass

from .exit_codes import ERR_INTERNAL, ERR_IO


@dataclass
class ScriptError(Exception):
    message: str
    code: int = ERR_INTERNAL
    kind: str = "generic_error"

    def __str__(self) -> str:
        return self.message


class PatchReadError(ScriptError):
    """The patch file could not be opened or read at all."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"cannot read patch {path}: {reason}", ERR_IO, "patch_unreadable")
        self.path = path
