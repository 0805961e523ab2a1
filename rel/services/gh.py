"""Release step: GitHub releases through the GitHub CLI (``gh``)."""

from __future__ import annotations

import os
import shutil
from collections.abc import Sequence
from pathlib import Path

from rel.core.config import ReleaseOptions
from rel.core.result import Err, Ok, Result
from rel.output.console import ConsoleProtocol, Style
from rel.platform.process import ProcessError
from rel.platform.process import run as run_process
from rel.services.errors import (
    AuthError,
    DuplicateReleaseError,
    ReleaseError,
    ToolFailed,
    ToolMissing,
    UploadError,
)
from rel.services.model import PublishedRelease
from rel.services.tags import is_auth_failure
from rel.services.timeouts import GH_TIMEOUT_SECONDS, GH_UPLOAD_TIMEOUT_SECONDS

_GH_AUTH_MARKERS = (
    "gh auth login",
    "http 401",
    "http 403",
    "bad credentials",
    "resource not accessible by integration",
)


def _is_gh_auth_failure(error: ProcessError) -> bool:
    text = error.output.lower()
    return is_auth_failure(text) or any(marker in text for marker in _GH_AUTH_MARKERS)


def _is_not_found(error: ProcessError) -> bool:
    text = error.output.lower()
    return "release not found" in text


def ensure_gh_available() -> Result[None, ToolMissing]:
    if shutil.which("gh") is None:
        return Err(ToolMissing(tool="gh", hint="Install GitHub CLI: https://cli.github.com/"))
    return Ok(None)


class GhReleasePublisher:
    """ReleasePublisher backed by ``gh release``.

    Assets are uploaded one by one after the release exists. A failed upload
    stops the step; assets already attached stay attached.
    """

    def __init__(
        self,
        *,
        workspace_root: Path,
        console: ConsoleProtocol,
        token: str | None = None,
        repo: str | None = None,
        options: ReleaseOptions | None = None,
    ) -> None:
        self._root = workspace_root
        self._console = console
        self._token = token
        self._repo = repo
        self._options = options or ReleaseOptions()

    def publish(
        self, *, tag: str, name: str, assets: Sequence[Path]
    ) -> Result[PublishedRelease, ReleaseError]:
        if not assets:
            return Err(UploadError(asset=None, detail="no assets to attach"))
        for asset in assets:
            if not asset.is_file():
                return Err(UploadError(asset=asset, detail="file does not exist"))

        ok = ensure_gh_available()
        if isinstance(ok, Err):
            return ok

        exists = self.release_exists(tag)
        if isinstance(exists, Err):
            return exists
        if exists.value:
            return Err(DuplicateReleaseError(tag=tag))

        created = self._create(tag=tag, name=name)
        if isinstance(created, Err):
            return created

        for asset in assets:
            uploaded = self._upload(tag=tag, asset=asset)
            if isinstance(uploaded, Err):
                return uploaded

        return Ok(PublishedRelease(tag=tag, name=name, url=created.value, assets=tuple(assets)))

    def release_exists(self, tag: str) -> Result[bool, ReleaseError]:
        result = self._gh(
            ["release", "view", tag, "--json", "tagName"], timeout=GH_TIMEOUT_SECONDS
        )
        if isinstance(result, Ok):
            return Ok(True)

        error = result.error
        if _is_gh_auth_failure(error):
            return Err(AuthError(operation="gh release view", detail=error.output))
        if _is_not_found(error):
            return Ok(False)
        return Err(ToolFailed(tool="gh", command="release view", detail=error.output))

    def _create(self, *, tag: str, name: str) -> Result[str | None, ReleaseError]:
        args = ["release", "create", tag, "--title", name, "--verify-tag"]
        # --notes is always passed; without it gh opens an editor.
        args += ["--notes", self._options.body or ""]
        if self._options.draft:
            args.append("--draft")
        if self._options.prerelease:
            args.append("--prerelease")

        result = self._gh(args, timeout=GH_TIMEOUT_SECONDS)
        if isinstance(result, Err):
            error = result.error
            if "already exists" in error.output.lower():
                return Err(DuplicateReleaseError(tag=tag))
            if _is_gh_auth_failure(error):
                return Err(AuthError(operation="gh release create", detail=error.output))
            return Err(ToolFailed(tool="gh", command="release create", detail=error.output))

        url = result.value.strip().splitlines()[-1] if result.value.strip() else None
        return Ok(url)

    def _upload(self, *, tag: str, asset: Path) -> Result[None, ReleaseError]:
        self._console.print(f"uploading {asset.name}", Style.DIM)
        result = self._gh(
            ["release", "upload", tag, str(asset)], timeout=GH_UPLOAD_TIMEOUT_SECONDS
        )
        if isinstance(result, Err):
            error = result.error
            if _is_gh_auth_failure(error):
                return Err(AuthError(operation="gh release upload", detail=error.output))
            return Err(UploadError(asset=asset, detail=error.output or str(error)))
        return Ok(None)

    def _gh(self, args: list[str], *, timeout: float) -> Result[str, ProcessError]:
        cmd = ["gh", *args]
        if self._repo:
            cmd += ["--repo", self._repo]

        env: dict[str, str] = {**os.environ, "GH_PROMPT_DISABLED": "1"}
        if self._token:
            env["GH_TOKEN"] = self._token
        return run_process(cmd, cwd=self._root, env=env, timeout=timeout)
