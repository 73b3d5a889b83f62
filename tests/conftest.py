from __future__ import annotations

import socket
from pathlib import Path
from typing import Callable

import pytest
from hypothesis import HealthCheck, settings

_ALLOWED_MARKERS = {"unit", "integration", "slow"}

settings.register_profile(
    "dep3",
    deadline=None,
    max_examples=200,
    suppress_health_check=[HealthCheck.function_scoped_fixture],
)
settings.load_profile("dep3")


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        names = {mark.name for mark in item.iter_markers()}
        if not names.intersection(_ALLOWED_MARKERS):
            item.add_marker("unit")


@pytest.fixture(autouse=True)
def no_network_for_unit(request: pytest.FixtureRequest, monkeypatch: pytest.MonkeyPatch) -> None:
    if request.node.get_closest_marker("integration") or request.node.get_closest_marker("slow"):
        return

    def _blocked(*_args: object, **_kwargs: object) -> socket.socket:
        raise RuntimeError("network disabled in unit tests")

    def _blocked_connect(*_args: object, **_kwargs: object) -> None:
        raise RuntimeError("network disabled in unit tests")

    monkeypatch.setattr(socket, "create_connection", _blocked)
    monkeypatch.setattr(socket.socket, "connect", _blocked_connect)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("CI", raising=False)
    monkeypatch.setenv("RUN_ID", "pytest-run")


@pytest.fixture
def write_patch(tmp_path: Path) -> Callable[..., Path]:
    def _write(name: str, content: str | bytes, parent: Path | None = None) -> Path:
        path = (parent or tmp_path) / name
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def package_checkout(tmp_path: Path, write_patch: Callable[..., Path]) -> Path:
    repo = tmp_path / "kcoreaddons"
    patches = repo / "debian/patches"
    write_patch(
        "upstream_fix-crash.patch",
        "Description: fix crash on startup\nOrigin: upstream, https://invent.kde.org/x\n"
        "Author: Jane Doe <jane@example.org>\nLast-Update: 2015-03-01\n---\n--- a/x\n+++ b/x\n",
        patches,
    )
    write_patch("kubuntu_no-headers.diff", "just a change\n---\n--- a/y\n+++ b/y\n", patches)
    write_patch("series", "upstream_fix-crash.patch\nkubuntu_no-headers.diff\n", patches)
    return repo
