"""Capabilities the release pipeline is assembled from.

The orchestrator only sees these protocols. Production adapters live next to
this module (TOML manifest, git checkout, cargo, git tags, GitHub CLI); tests
substitute in-memory fakes.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from rel.core.config import BuildTarget
from rel.core.result import Result
from rel.services.errors import (
    CheckoutError,
    CompileError,
    ManifestError,
    ReleaseError,
    TagError,
)
from rel.services.model import BuiltArchive, PublishedRelease


class ManifestReader(Protocol):
    def read(self, path: Path, field: str) -> Result[str, ManifestError]:
        """Return the string value at dotted ``field`` in the manifest at ``path``."""
        ...


class SourceCheckout(Protocol):
    def resolve(self) -> Result[str, CheckoutError]:
        """Return the commit sha the working tree is at."""
        ...


class Compiler(Protocol):
    def build(self, target: BuildTarget, *, version: str) -> Result[BuiltArchive, CompileError]:
        """Compile a release binary for ``target`` and package it."""
        ...


class TagPublisher(Protocol):
    def publish(self, name: str, *, commit: str) -> Result[str, TagError]:
        """Create and push a tag; return the tag name actually created."""
        ...

    def would_create(self, name: str) -> str:
        """Tag name ``publish`` would create for ``name``."""
        ...


class ReleasePublisher(Protocol):
    def publish(
        self, *, tag: str, name: str, assets: Sequence[Path]
    ) -> Result[PublishedRelease, ReleaseError]:
        """Create a release for ``tag`` and upload every asset."""
        ...
