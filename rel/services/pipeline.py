"""Release pipeline orchestration.

Five steps run strictly in order and the first failure ends the run:

1. read the version from the manifest
2. resolve the checked-out commit
3. compile and package every configured target
4. create and push the tag
5. create the release and attach the archives

The release is named after the tag the tag step *returned*, which may differ
from the version it was asked for (e.g. a ``v`` prefix).
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path

from rel.core.config import Config
from rel.core.result import Err
from rel.output.console import ConsoleProtocol, Style
from rel.services.contracts import (
    Compiler,
    ManifestReader,
    ReleasePublisher,
    SourceCheckout,
    TagPublisher,
)
from rel.services.errors import PipelineError
from rel.services.model import (
    BuiltArchive,
    PipelineRun,
    PipelineState,
    StepFailure,
)

STEPS: tuple[str, ...] = (
    "Read manifest",
    "Checkout",
    "Compile",
    "Push tag",
    "Create release",
)


@dataclass(frozen=True, slots=True)
class PipelineDeps:
    manifest: ManifestReader
    checkout: SourceCheckout
    compiler: Compiler
    tags: TagPublisher
    releases: ReleasePublisher


class ReleasePipeline:
    def __init__(
        self,
        *,
        config: Config,
        manifest_path: Path,
        deps: PipelineDeps,
        console: ConsoleProtocol,
    ) -> None:
        self._config = config
        self._manifest_path = manifest_path
        self._deps = deps
        self._console = console

    def run(self, *, dry_run: bool = False) -> PipelineRun:
        run = PipelineRun(state=PipelineState.RUNNING, dry_run=dry_run)

        self._step(1)
        version = self._deps.manifest.read(self._manifest_path, self._config.version_field)
        if isinstance(version, Err):
            return self._fail(run, 1, version.error)
        run = replace(run, version=version.value)
        self._console.print(f"version: {version.value}", Style.DIM)

        self._step(2)
        commit = self._deps.checkout.resolve()
        if isinstance(commit, Err):
            return self._fail(run, 2, commit.error)
        run = replace(run, commit=commit.value)
        self._console.print(f"commit: {commit.value}", Style.DIM)

        self._step(3)
        archives: list[BuiltArchive] = []
        for target in self._config.targets:
            self._console.info(f"{target.triple} ({target.archive}, {target.toolchain})")
            built = self._deps.compiler.build(target, version=version.value)
            if isinstance(built, Err):
                return self._fail(replace(run, archives=tuple(archives)), 3, built.error)
            archives.append(built.value)
            self._console.print(str(built.value.path), Style.DIM)
        run = replace(run, archives=tuple(archives))

        if dry_run:
            return self._dry_run(run, version.value)

        self._step(4)
        tag = self._deps.tags.publish(version.value, commit=commit.value)
        if isinstance(tag, Err):
            return self._fail(run, 4, tag.error)
        run = replace(run, tag=tag.value)
        self._console.print(f"tag: {tag.value}", Style.DIM)

        self._step(5)
        assets = [a.path for a in archives]
        release = self._deps.releases.publish(
            tag=tag.value,
            name=self._config.format_release_name(tag.value),
            assets=assets,
        )
        if isinstance(release, Err):
            return self._fail(run, 5, release.error)

        self._console.success(f"{release.value.name} ({len(release.value.assets)} assets)")
        if release.value.url:
            self._console.print(release.value.url, Style.DIM)
        return replace(run, state=PipelineState.SUCCEEDED, release=release.value)

    def _dry_run(self, run: PipelineRun, version: str) -> PipelineRun:
        tag = self._deps.tags.would_create(version)
        self._step(4)
        self._console.print(f"(dry-run) would create and push tag {tag}", Style.DIM)
        self._step(5)
        name = self._config.format_release_name(tag)
        for archive in run.archives:
            self._console.print(f"(dry-run) would attach {archive.path.name}", Style.DIM)
        self._console.print(f"(dry-run) would create release '{name}'", Style.DIM)
        return replace(run, state=PipelineState.SUCCEEDED, tag=tag)

    def _step(self, n: int) -> None:
        self._console.header(f"[{n}/{len(STEPS)}] {STEPS[n - 1]}")

    def _fail(self, run: PipelineRun, step: int, error: PipelineError) -> PipelineRun:
        failure = StepFailure(step=step, name=STEPS[step - 1], error=error)
        return replace(run, state=PipelineState.FAILED, failure=failure)
