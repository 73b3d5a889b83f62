from __future__ import annotations

from pathlib import Path

import pytest

from dep3_audit.config import DEFAULT_CONFIG_NAME, AuditConfig, PatchClass, load_config
from dep3_audit.errors import ScriptError
from dep3_audit.exit_codes import ERR_CONFIG


def test_defaults_without_config_file(tmp_path: Path) -> None:
    cfg = load_config(None, tmp_path)
    assert cfg == AuditConfig()
    assert cfg.patches_dir == "debian/patches"
    assert cfg.exclude == ("series",)
    assert [c.name for c in cfg.classes] == ["upstream", "kubuntu"]
    assert cfg.source is None


def test_discovers_config_in_cwd(tmp_path: Path) -> None:
    (tmp_path / DEFAULT_CONFIG_NAME).write_text(
        "patches_dir: patches\n"
        "exclude: [series, 00list]\n"
        "classes:\n"
        "  - {name: debian, pattern: '^debian-'}\n"
        "history_fallback: false\n"
        "jobs: 4\n",
        encoding="utf-8",
    )
    cfg = load_config(None, tmp_path)
    assert cfg.patches_dir == "patches"
    assert cfg.exclude == ("series", "00list")
    assert cfg.classes == (PatchClass("debian", "^debian-"),)
    assert cfg.history_fallback is False
    assert cfg.jobs == 4
    assert cfg.source == str(tmp_path / DEFAULT_CONFIG_NAME)


def test_empty_config_file_means_defaults(tmp_path: Path) -> None:
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    cfg = load_config(path)
    assert cfg.patches_dir == AuditConfig().patches_dir
    assert cfg.source == str(path)


@pytest.mark.parametrize(
    "content",
    [
        "jobs: 0\n",
        "unknown_key: 1\n",
        "classes: [{name: x}]\n",
        "- just\n- a list\n",
        "encoding: not-a-codec\n",
        "encoding: utf-16\n",
        "encoding: utf-32-le\n",
        "classes: [{name: bad, pattern: '(unclosed'}]\n",
        "patches_dir: [unterminated\n",
    ],
)
def test_invalid_config_is_a_config_error(tmp_path: Path, content: str) -> None:
    path = tmp_path / "bad.yaml"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(ScriptError) as exc_info:
        load_config(path)
    assert exc_info.value.code == ERR_CONFIG
    assert exc_info.value.kind == "config_invalid"


def test_explicit_missing_config_is_an_error(tmp_path: Path) -> None:
    with pytest.raises(ScriptError) as exc_info:
        load_config(tmp_path / "nope.yaml")
    assert exc_info.value.code == ERR_CONFIG
    assert exc_info.value.kind == "config_missing"
