from __future__ import annotations

import json
import os
import shutil
import subprocess
from pathlib import Path

import pytest

from dep3_audit.core.context import RunContext
from dep3_audit.core.git import read_last_touch

pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(shutil.which("git") is None, reason="git not installed"),
]


def _git(repo: Path, *args: str) -> None:
    env = {
        **os.environ,
        "GIT_AUTHOR_NAME": "Patch Author",
        "GIT_AUTHOR_EMAIL": "author@example.org",
        "GIT_AUTHOR_DATE": "2016-05-04T12:00:00+00:00",
        "GIT_COMMITTER_NAME": "Patch Author",
        "GIT_COMMITTER_EMAIL": "author@example.org",
        "GIT_COMMITTER_DATE": "2016-05-04T12:00:00+00:00",
    }
    subprocess.run(["git", *args], cwd=repo, env=env, check=True, capture_output=True, text=True)


def test_last_touch_from_commit(tmp_path: Path) -> None:
    patches = tmp_path / "debian/patches"
    patches.mkdir(parents=True)
    patch = patches / "kubuntu_x.diff"
    patch.write_text("prose\n---\n", encoding="utf-8")
    _git(tmp_path, "init", "-q")
    _git(tmp_path, "add", ".")
    _git(tmp_path, "commit", "-q", "-m", "add patch")
    touch = read_last_touch(patch)
    assert touch is not None
    assert touch.author == "Patch Author <author@example.org>"
    assert touch.date == "2016-05-04"


def test_untracked_file_has_no_history(tmp_path: Path) -> None:
    _git(tmp_path, "init", "-q")
    patch = tmp_path / "new.patch"
    patch.write_text("x\n", encoding="utf-8")
    assert read_last_touch(patch) is None


def test_outside_work_tree_has_no_history(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    patch = tmp_path / "loose.patch"
    patch.write_text("x\n", encoding="utf-8")
    monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path.parent))
    assert read_last_touch(patch) is None


def test_failed_git_log_is_logged_at_debug(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    patch = tmp_path / "loose.patch"
    patch.write_text("x\n", encoding="utf-8")
    monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path.parent))
    ctx = RunContext.from_args("t-git", log_format="json", verbose=True)
    assert read_last_touch(patch, ctx) is None
    events = [json.loads(line) for line in capsys.readouterr().err.splitlines()]
    failed = [event for event in events if event["action"] == "log_failed"]
    assert len(failed) == 1
    assert failed[0]["component"] == "git"
    assert failed[0]["path"] == str(patch)
    assert failed[0]["code"] != 0
    assert failed[0]["output"]
