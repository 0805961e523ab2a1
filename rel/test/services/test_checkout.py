from __future__ import annotations

from pathlib import Path

from conftest import CrateClone, git

from rel.core.result import Err, Ok
from rel.git.repository import Repository
from rel.services.checkout import GitCheckout
from rel.services.errors import CheckoutError


def test_resolves_head(crate_clone: CrateClone) -> None:
    expected = crate_clone.git("rev-parse", "HEAD").strip()
    assert GitCheckout(Repository(crate_clone.work)).resolve() == Ok(expected)


def test_missing_directory(tmp_path: Path) -> None:
    missing = tmp_path / "nope"
    result = GitCheckout(Repository(missing)).resolve()
    assert result == Err(CheckoutError(path=missing, reason="directory does not exist"))


def test_not_a_repository(tmp_path: Path) -> None:
    result = GitCheckout(Repository(tmp_path)).resolve()
    assert result == Err(CheckoutError(path=tmp_path, reason="not a git repository"))


def test_repository_without_commits(tmp_path: Path, git_identity: None) -> None:
    git(tmp_path, "init")
    result = GitCheckout(Repository(tmp_path)).resolve()
    assert isinstance(result, Err)
    assert isinstance(result.error, CheckoutError)
