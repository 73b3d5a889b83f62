"""Alias-aware storage for DEP3 header fields.

`HeaderRecord` wraps a plain ordered dict and exposes only accessors that go
through `resolve_alias`, so `Description`/`Subject`, `Author`/`From` and
`Reviewed-by`/`Acked-by` always address one stored slot. The wrapped dict is
never handed out; `as_dict()` returns a copy.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator

# preferred name -> storage name
ALIASES: dict[str, str] = {
    "Description": "Subject",
    "Author": "From",
    "Reviewed-by": "Acked-by",
}

FREE_DESCRIPTION_KEY = "__freeDescription"


def resolve_alias(name: str) -> str:
    return ALIASES.get(name, name)


@dataclass
class HeaderRecord:
    path: str = ""
    valid: bool = False
    problems: list[str] = field(default_factory=list)
    skipped_lines: list[int] = field(default_factory=list)
    _fields: dict[str, str] = field(default_factory=dict, repr=False)

    def get(self, name: str, default: str | None = None) -> str | None:
        return self._fields.get(resolve_alias(name), default)

    def set(self, name: str, value: str) -> None:
        self._fields[resolve_alias(name)] = value

    def append(self, name: str, value: str) -> None:
        """Set `name`, or extend its existing value on a new line."""
        key = resolve_alias(name)
        current = self._fields.get(key)
        self._fields[key] = value if current is None else f"{current}\n{value}"

    def delete(self, name: str) -> None:
        self._fields.pop(resolve_alias(name), None)

    def __getitem__(self, name: str) -> str | None:
        return self.get(name)

    def __setitem__(self, name: str, value: str) -> None:
        self.set(name, value)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and resolve_alias(name) in self._fields

    def __iter__(self) -> Iterator[str]:
        return (key for key in self._fields if key != FREE_DESCRIPTION_KEY)

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def items(self) -> Iterator[tuple[str, str]]:
        return ((key, self._fields[key]) for key in self)

    def as_dict(self) -> dict[str, str]:
        return dict(self.items())

    @property
    def free_description(self) -> str | None:
        return self._fields.get(FREE_DESCRIPTION_KEY)

    def strip_values(self) -> None:
        for key, value in list(self._fields.items()):
            self._fields[key] = value.strip()

    def to_payload(self) -> dict[str, object]:
        return {
            "path": self.path,
            "valid": self.valid,
            "fields": self.as_dict(),
            "problems": list(self.problems),
            "skipped_lines": list(self.skipped_lines),
        }
