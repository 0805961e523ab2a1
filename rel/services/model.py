from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

from rel.core.config import BuildTarget
from rel.services.errors import PipelineError


@dataclass(frozen=True, slots=True)
class BuiltArchive:
    """A packaged binary for one target."""

    target: BuildTarget
    path: Path
    checksum_path: Path | None = None  # written next to the archive, not attached


@dataclass(frozen=True, slots=True)
class PublishedRelease:
    tag: str
    name: str
    url: str | None
    assets: tuple[Path, ...]


class PipelineState(StrEnum):
    NOT_RUN = "not-run"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class StepFailure:
    step: int  # 1-based
    name: str
    error: PipelineError


@dataclass(frozen=True, slots=True)
class PipelineRun:
    """Outcome of one triggered run. Fields stay None past the failing step."""

    state: PipelineState = PipelineState.NOT_RUN
    failure: StepFailure | None = None
    version: str | None = None
    commit: str | None = None
    archives: tuple[BuiltArchive, ...] = ()
    tag: str | None = None
    release: PublishedRelease | None = None
    dry_run: bool = False

    @property
    def succeeded(self) -> bool:
        return self.state == PipelineState.SUCCEEDED
