"""Tag step: create an annotated tag at the checked-out commit and push it."""

from __future__ import annotations

import base64

from rel.core.result import Err, Ok, Result
from rel.git.repository import GitError, Repository
from rel.output.console import ConsoleProtocol, Style
from rel.services.errors import AuthError, ConflictError, TagError, ToolFailed

_AUTH_MARKERS = (
    "authentication failed",
    "could not read username",
    "could not read password",
    "permission denied",
    "permission to",
    "invalid username or password",
    "the requested url returned error: 401",
    "the requested url returned error: 403",
    "terminal prompts disabled",
)

_CONFLICT_MARKERS = (
    "already exists",
    "[rejected]",
)

# Identity for annotated tags when the clone has none (fresh CI runners).
DEFAULT_TAGGER = (
    "github-actions[bot]",
    "41898282+github-actions[bot]@users.noreply.github.com",
)


def is_auth_failure(text: str) -> bool:
    lowered = text.lower()
    return any(marker in lowered for marker in _AUTH_MARKERS)


def is_conflict(text: str) -> bool:
    lowered = text.lower()
    return any(marker in lowered for marker in _CONFLICT_MARKERS)


def git_credential_env(token: str | None, *, host: str = "github.com") -> dict[str, str]:
    """Environment that authenticates git over HTTPS without putting the token in argv.

    Mirrors the extra header the CI checkout action installs.
    """
    env = {"GIT_TERMINAL_PROMPT": "0"}
    if not token:
        return env
    basic = base64.b64encode(f"x-access-token:{token}".encode()).decode("ascii")
    env.update(
        {
            "GIT_CONFIG_COUNT": "1",
            "GIT_CONFIG_KEY_0": f"http.https://{host}/.extraheader",
            "GIT_CONFIG_VALUE_0": f"AUTHORIZATION: basic {basic}",
        }
    )
    return env


class GitTagPublisher:
    """TagPublisher backed by git.

    The created tag is ``<prefix><name>``; callers must use the returned name.
    """

    def __init__(
        self,
        *,
        repo: Repository,
        console: ConsoleProtocol,
        remote: str = "origin",
        prefix: str = "",
    ) -> None:
        self._repo = repo
        self._console = console
        self._remote = remote
        self._prefix = prefix

    def would_create(self, name: str) -> str:
        if self._prefix and name.startswith(self._prefix):
            return name
        return f"{self._prefix}{name}"

    def publish(self, name: str, *, commit: str) -> Result[str, TagError]:
        tag = self.would_create(name)

        if self._repo.local_tag_exists(tag):
            return Err(ConflictError(tag=tag))

        remote = self._repo.remote_tag_exists(self._remote, tag)
        if isinstance(remote, Err):
            return Err(self._classify("ls-remote", remote.error, tag))
        if remote.value:
            return Err(ConflictError(tag=tag))

        tagger = None if self._repo.config_value("user.email") else DEFAULT_TAGGER
        created = self._repo.create_annotated_tag(
            tag, commit=commit, message=f"Release {tag}", tagger=tagger
        )
        if isinstance(created, Err):
            return Err(self._classify("tag", created.error, tag))

        self._console.print(f"git push {self._remote} refs/tags/{tag}", Style.DIM)
        pushed = self._repo.push_tag(self._remote, tag)
        if isinstance(pushed, Err):
            # Only the local ref is undone; nothing on the remote is touched.
            cleanup = self._repo.delete_local_tag(tag)
            if isinstance(cleanup, Err):
                self._console.warning(f"could not delete local tag {tag}: {cleanup.error.message}")
            return Err(self._classify("push", pushed.error, tag))

        return Ok(tag)

    def _classify(self, command: str, error: GitError, tag: str) -> TagError:
        if is_auth_failure(error.message):
            return AuthError(operation=f"git {command}", detail=error.message)
        if is_conflict(error.message):
            return ConflictError(tag=tag)
        return ToolFailed(tool="git", command=command, detail=error.message)
