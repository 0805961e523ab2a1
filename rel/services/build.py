"""Compile step: cargo release builds packaged into archives.

Uses rustup when available to pin the toolchain channel and install the
target's standard library; otherwise falls back to whatever ``cargo`` is on
PATH (the channel cannot be honored in that case and a warning is printed).
"""

from __future__ import annotations

import shutil
import tarfile
from pathlib import Path

from rel.core.config import BuildTarget
from rel.core.result import Err, Ok, Result
from rel.output.console import ConsoleProtocol, Style
from rel.platform.process import run as run_process
from rel.platform.process import run_silent
from rel.services import dist
from rel.services.errors import BuildError, CompileError, PackagingError, ToolMissing
from rel.services.manifest import read_binary_name
from rel.services.model import BuiltArchive
from rel.services.timeouts import RUSTUP_TIMEOUT_SECONDS

_CARGO_HINT = "Install Rust via https://rustup.rs/"


class CargoCompiler:
    """Compiler capability backed by cargo."""

    def __init__(
        self,
        *,
        project_root: Path,
        manifest_path: Path,
        out_dir: Path,
        extra_files: tuple[str, ...],
        console: ConsoleProtocol,
    ) -> None:
        self._root = project_root
        self._manifest = manifest_path
        self._out_dir = out_dir
        self._extra_files = extra_files
        self._console = console

    def build(self, target: BuildTarget, *, version: str) -> Result[BuiltArchive, CompileError]:
        if shutil.which("cargo") is None:
            return Err(ToolMissing(tool="cargo", hint=_CARGO_HINT))

        name = read_binary_name(self._manifest)
        if isinstance(name, Err):
            return Err(PackagingError(path=self._manifest, reason=name.error.message))

        compiled = self._compile(target)
        if isinstance(compiled, Err):
            return compiled

        binary = self.binary_path(target, name.value)
        if not binary.is_file():
            return Err(PackagingError(path=binary, reason="binary not found after build"))

        return self._package(target, binary=binary, name=name.value, version=version)

    def binary_path(self, target: BuildTarget, name: str) -> Path:
        exe = f"{name}.exe" if target.is_windows else name
        return self._root / "target" / target.triple / "release" / exe

    def _compile(self, target: BuildTarget) -> Result[None, CompileError]:
        use_rustup = shutil.which("rustup") is not None
        if use_rustup:
            added = self._add_target(target)
            if isinstance(added, Err):
                return added
            cmd = ["cargo", f"+{target.toolchain}", "build", "--release"]
        else:
            self._console.warning(
                f"rustup not found; building with default cargo, not '{target.toolchain}'"
            )
            cmd = ["cargo", "build", "--release"]

        cmd += ["--target", target.triple, "--manifest-path", str(self._manifest)]
        self._console.print(" ".join(cmd), Style.DIM)

        result = run_silent(cmd, cwd=self._root)
        if isinstance(result, Err):
            e = result.error
            return Err(BuildError(target=target.triple, returncode=e.returncode, detail=e.stderr))
        return Ok(None)

    def _add_target(self, target: BuildTarget) -> Result[None, BuildError]:
        cmd = ["rustup", "target", "add", target.triple, "--toolchain", target.toolchain]
        self._console.print(" ".join(cmd), Style.DIM)
        result = run_process(cmd, cwd=self._root, timeout=RUSTUP_TIMEOUT_SECONDS)
        if isinstance(result, Err):
            e = result.error
            return Err(BuildError(target=target.triple, returncode=e.returncode, detail=e.output))
        return Ok(None)

    def _package(
        self, target: BuildTarget, *, binary: Path, name: str, version: str
    ) -> Result[BuiltArchive, PackagingError]:
        archive = self._out_dir / dist.archive_name(
            binary=name, version=version, triple=target.triple, fmt=target.archive
        )
        files = [(binary, binary.name)]
        files += dist.collect_extra_files(self._root, self._extra_files)

        try:
            dist.create_archive(archive, fmt=target.archive, files=files)
            checksum = dist.write_checksum(archive)
        except (OSError, ValueError, tarfile.TarError) as e:
            return Err(PackagingError(path=archive, reason=str(e)))

        self._console.print(f"packaged {archive.name} ({len(files)} files)", Style.DIM)
        return Ok(BuiltArchive(target=target, path=archive, checksum_path=checksum))
