"""Typed failures for each pipeline step.

Every error is a frozen dataclass carried inside ``Err``. They expose
``message`` and ``hint`` so the CLI can render any of them the same way.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


# -----------------------------------------------------------------------------
# Manifest
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ParseError:
    """Manifest could not be read or is not valid TOML."""

    path: Path
    reason: str

    @property
    def message(self) -> str:
        return f"cannot parse {self.path.name}: {self.reason}"

    @property
    def hint(self) -> str | None:
        return str(self.path)


@dataclass(frozen=True, slots=True)
class NotFoundError:
    """Requested dotted field is absent from the manifest."""

    path: Path
    field: str

    @property
    def message(self) -> str:
        return f"{self.field} not found in {self.path.name}"

    @property
    def hint(self) -> str | None:
        return f"Add '{self.field}' to {self.path}"


# -----------------------------------------------------------------------------
# Checkout
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class CheckoutError:
    path: Path
    reason: str

    @property
    def message(self) -> str:
        return f"no usable checkout at {self.path}: {self.reason}"

    @property
    def hint(self) -> str | None:
        return "Run from a git clone of the project (or pass --root)."


# -----------------------------------------------------------------------------
# Compile
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class BuildError:
    """Toolchain exited non-zero. Its output is not inspected."""

    target: str
    returncode: int
    detail: str = ""

    @property
    def message(self) -> str:
        return f"build failed for {self.target} (exit {self.returncode})"

    @property
    def hint(self) -> str | None:
        return self.detail or None


@dataclass(frozen=True, slots=True)
class PackagingError:
    path: Path
    reason: str

    @property
    def message(self) -> str:
        return f"packaging failed: {self.reason}"

    @property
    def hint(self) -> str | None:
        return str(self.path)


@dataclass(frozen=True, slots=True)
class ToolMissing:
    tool: str
    hint: str | None = None

    @property
    def message(self) -> str:
        return f"{self.tool}: missing"


# -----------------------------------------------------------------------------
# Tag
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ConflictError:
    """Tag already exists locally or on the remote."""

    tag: str

    @property
    def message(self) -> str:
        return f"tag already exists: {self.tag}"

    @property
    def hint(self) -> str | None:
        return "Bump package.version before releasing again."


@dataclass(frozen=True, slots=True)
class AuthError:
    """Credentials were rejected by the remote or the hosting platform."""

    operation: str
    detail: str = ""

    @property
    def message(self) -> str:
        return f"{self.operation}: credentials rejected"

    @property
    def hint(self) -> str | None:
        return self.detail or "Set GITHUB_TOKEN with contents: write permission."


@dataclass(frozen=True, slots=True)
class ToolFailed:
    """External command failed for a reason not covered by a more specific error."""

    tool: str
    command: str
    detail: str = ""

    @property
    def message(self) -> str:
        return f"{self.tool} {self.command} failed"

    @property
    def hint(self) -> str | None:
        return self.detail or None


# -----------------------------------------------------------------------------
# Release
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class DuplicateReleaseError:
    tag: str

    @property
    def message(self) -> str:
        return f"a release already exists for tag {self.tag}"

    @property
    def hint(self) -> str | None:
        return None


@dataclass(frozen=True, slots=True)
class UploadError:
    """An asset could not be attached. Earlier uploads are kept."""

    asset: Path | None
    detail: str

    @property
    def message(self) -> str:
        if self.asset is None:
            return f"upload failed: {self.detail}"
        return f"upload failed for {self.asset.name}: {self.detail}"

    @property
    def hint(self) -> str | None:
        return str(self.asset) if self.asset is not None else None


ManifestError = ParseError | NotFoundError
CompileError = BuildError | PackagingError | ToolMissing
TagError = ConflictError | AuthError | ToolFailed
ReleaseError = DuplicateReleaseError | UploadError | AuthError | ToolMissing | ToolFailed

PipelineError = (
    ParseError
    | NotFoundError
    | CheckoutError
    | BuildError
    | PackagingError
    | ToolMissing
    | ConflictError
    | AuthError
    | ToolFailed
    | DuplicateReleaseError
    | UploadError
)
