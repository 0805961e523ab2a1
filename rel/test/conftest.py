from __future__ import annotations

import os
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path

import pytest

CARGO_TOML = """\
[package]
name = "civ-dlc"
version = "2.0.0"
edition = "2021"
"""


@dataclass(frozen=True)
class CrateClone:
    work: Path
    remote: Path

    def git(self, *args: str, cwd: Path | None = None) -> str:
        return git(cwd or self.work, *args)


def git(cwd: Path, *args: str) -> str:
    proc = subprocess.run(
        ["git", *args], cwd=str(cwd), capture_output=True, text=True, check=True
    )
    return proc.stdout


@pytest.fixture
def git_identity(monkeypatch: pytest.MonkeyPatch) -> None:
    """Isolate git from the user's config and give commits an author."""
    if shutil.which("git") is None:
        pytest.skip("git not installed")
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", os.devnull)
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_AUTHOR_NAME", "Rel Test")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "rel@example.invalid")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "Rel Test")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "rel@example.invalid")


@pytest.fixture
def crate_clone(tmp_path: Path, git_identity: None) -> CrateClone:
    """A one-commit crate clone whose ``origin`` is a local bare repository."""
    remote = tmp_path / "remote.git"
    git(tmp_path, "init", "--bare", str(remote))

    work = tmp_path / "crate"
    work.mkdir()
    git(work, "init")
    (work / "Cargo.toml").write_text(CARGO_TOML, encoding="utf-8")
    git(work, "add", "Cargo.toml")
    git(work, "commit", "-m", "initial")
    git(work, "remote", "add", "origin", str(remote))
    return CrateClone(work=work, remote=remote)
