"""Git repository abstraction.

Covers what the release pipeline needs from a local clone: resolving the
checked-out commit, inspecting tags locally and on a remote, and creating and
pushing annotated tags. All operations return Result types.

Usage:
    repo = Repository(Path("/path/to/crate"))

    match repo.head_sha():
        case Ok(sha):
            print(f"HEAD: {sha}")
        case Err(e):
            print(f"Error: {e.message}")
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from rel.core.result import Err, Ok, Result
from rel.platform.process import ProcessError
from rel.platform.process import run as run_process

_GIT_TIMEOUT_SECONDS = 30.0
_GIT_NETWORK_TIMEOUT_SECONDS = 3 * 60.0
_NETWORK_COMMANDS = frozenset({"fetch", "pull", "push", "clone", "ls-remote"})

__all__ = ["GitError", "Repository"]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git subcommand that failed
        message: stderr (or stdout) of the failed command
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1


class Repository:
    """A local git clone.

    Attributes:
        path: Path to the work tree root
    """

    def __init__(self, path: Path, *, env: dict[str, str] | None = None) -> None:
        """Initialize repository.

        Args:
            path: Path to the work tree root
            env: Extra environment for network commands (credentials)
        """
        self.path = path
        self._extra_env = env or {}

    def exists(self) -> bool:
        """Check for a .git directory (or worktree .git file)."""
        return (self.path / ".git").exists()

    def head_sha(self) -> Result[str, GitError]:
        """Resolve the full sha of HEAD."""
        result = self._run(["rev-parse", "--verify", "HEAD^{commit}"])
        match result:
            case Err(e):
                return Err(_git_error("rev-parse", e, "cannot resolve HEAD"))
            case Ok(stdout):
                return Ok(stdout.strip())

    def local_tag_exists(self, tag: str) -> bool:
        result = self._run(["rev-parse", "--verify", "--quiet", f"refs/tags/{tag}"])
        return isinstance(result, Ok)

    def remote_tag_exists(self, remote: str, tag: str) -> Result[bool, GitError]:
        """Query the remote for ``refs/tags/<tag>`` without fetching."""
        result = self._run(["ls-remote", "--tags", remote, f"refs/tags/{tag}"])
        match result:
            case Err(e):
                return Err(_git_error("ls-remote", e, "ls-remote failed"))
            case Ok(stdout):
                return Ok(bool(stdout.strip()))

    def config_value(self, key: str) -> str | None:
        """Read a git config value, None when unset."""
        result = self._run(["config", "--get", key])
        match result:
            case Ok(stdout):
                return stdout.strip() or None
            case Err(_):
                return None

    def create_annotated_tag(
        self,
        tag: str,
        *,
        commit: str,
        message: str,
        tagger: tuple[str, str] | None = None,
    ) -> Result[None, GitError]:
        """Create an annotated tag.

        Args:
            tagger: (name, email) used when the clone has no identity configured
        """
        env: dict[str, str] | None = None
        if tagger is not None:
            env = {"GIT_COMMITTER_NAME": tagger[0], "GIT_COMMITTER_EMAIL": tagger[1]}
        result = self._run(["tag", "-a", tag, "-m", message, commit], env=env)
        match result:
            case Err(e):
                return Err(_git_error("tag", e, "tag creation failed"))
            case Ok(_):
                return Ok(None)

    def delete_local_tag(self, tag: str) -> Result[None, GitError]:
        result = self._run(["tag", "-d", tag])
        match result:
            case Err(e):
                return Err(_git_error("tag -d", e, "tag deletion failed"))
            case Ok(_):
                return Ok(None)

    def push_tag(self, remote: str, tag: str) -> Result[str, GitError]:
        """Push a single tag ref. Never force-pushes."""
        result = self._run(["push", remote, f"refs/tags/{tag}:refs/tags/{tag}"])
        match result:
            case Err(e):
                return Err(_git_error("push", e, "push failed"))
            case Ok(stdout):
                return Ok(stdout.strip())

    def _run(
        self, args: list[str], env: dict[str, str] | None = None
    ) -> Result[str, ProcessError]:
        """Run a git command in this repository."""
        command = args[0] if args else ""
        extra = dict(env or {})
        timeout = _GIT_TIMEOUT_SECONDS
        if command in _NETWORK_COMMANDS:
            timeout = _GIT_NETWORK_TIMEOUT_SECONDS
            extra.update(self._extra_env)
        full_env = {**os.environ, **extra} if extra else None
        return run_process(
            ["git", "-C", str(self.path), *args], cwd=self.path, env=full_env, timeout=timeout
        )


def _git_error(command: str, e: ProcessError, fallback: str) -> GitError:
    return GitError(command=command, message=e.output or fallback, returncode=e.returncode)
