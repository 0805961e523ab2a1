from __future__ import annotations

from rel.core.result import Err, Ok, Result
from rel.git.repository import Repository
from rel.services.errors import CheckoutError


class GitCheckout:
    """SourceCheckout over an existing clone.

    The tree is expected to be checked out already (CI checkout action or a
    local clone); this only proves it and pins the commit to tag.
    """

    def __init__(self, repo: Repository) -> None:
        self._repo = repo

    def resolve(self) -> Result[str, CheckoutError]:
        if not self._repo.path.is_dir():
            return Err(CheckoutError(path=self._repo.path, reason="directory does not exist"))
        if not self._repo.exists():
            return Err(CheckoutError(path=self._repo.path, reason="not a git repository"))

        sha = self._repo.head_sha()
        if isinstance(sha, Err):
            return Err(CheckoutError(path=self._repo.path, reason=sha.error.message))
        return Ok(sha.value)
