"""CLI tests through typer's CliRunner."""

from __future__ import annotations

from pathlib import Path

import pytest
from conftest import CARGO_TOML
from typer.testing import CliRunner

from rel import __version__
from rel.cli.app import app
from rel.cli.commands import run_cmd
from rel.cli.context import CONFIG_ENV_VAR, ROOT_ENV_VAR
from rel.core.errors import ErrorCode
from rel.services.errors import ConflictError
from rel.services.model import PipelineRun, PipelineState, StepFailure

runner = CliRunner()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    # The app callback writes these into os.environ; register them so they are restored.
    for var in (ROOT_ENV_VAR, CONFIG_ENV_VAR, "GITHUB_TOKEN", "GH_TOKEN"):
        monkeypatch.setenv(var, "")
        monkeypatch.delenv(var)


@pytest.fixture
def crate(tmp_path: Path) -> Path:
    (tmp_path / "Cargo.toml").write_text(CARGO_TOML, encoding="utf-8")
    return tmp_path


def test_version_flag() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert result.output.strip() == __version__


def test_version_command(crate: Path) -> None:
    result = runner.invoke(app, ["--root", str(crate), "version"])
    assert result.exit_code == 0
    assert result.output.strip() == "2.0.0"


def test_version_missing_field(tmp_path: Path) -> None:
    (tmp_path / "Cargo.toml").write_text('[package]\nname = "x"\n', encoding="utf-8")
    result = runner.invoke(app, ["--root", str(tmp_path), "version"])
    assert result.exit_code == int(ErrorCode.IO_ERROR)
    assert "package.version not found" in result.output


def test_root_must_be_directory(tmp_path: Path) -> None:
    result = runner.invoke(app, ["--root", str(tmp_path / "missing"), "version"])
    assert result.exit_code == int(ErrorCode.USER_ERROR)


def test_targets_from_config(crate: Path) -> None:
    (crate / "rel.toml").write_text(
        '[[targets]]\ntriple = "x86_64-pc-windows-gnu"\n\n'
        '[[targets]]\ntriple = "aarch64-apple-darwin"\narchive = "tar.gz"\n',
        encoding="utf-8",
    )
    result = runner.invoke(app, ["--root", str(crate), "targets"])
    assert result.exit_code == 0
    assert "x86_64-pc-windows-gnu  archive=zip  toolchain=stable" in result.output
    assert "aarch64-apple-darwin  archive=tar.gz  toolchain=stable" in result.output


def test_default_target(crate: Path) -> None:
    result = runner.invoke(app, ["--root", str(crate), "targets"])
    assert result.exit_code == 0
    assert "x86_64-pc-windows-gnu" in result.output


def test_invalid_config(crate: Path) -> None:
    (crate / "rel.toml").write_text('release_name = "no placeholder"\n', encoding="utf-8")
    result = runner.invoke(app, ["--root", str(crate), "targets"])
    assert result.exit_code == int(ErrorCode.USER_ERROR)


def test_explicit_config_must_exist(crate: Path) -> None:
    result = runner.invoke(
        app, ["--root", str(crate), "--config", str(crate / "other.toml"), "targets"]
    )
    assert result.exit_code == int(ErrorCode.USER_ERROR)


def test_build_unknown_target(crate: Path) -> None:
    result = runner.invoke(
        app, ["--root", str(crate), "build", "--target", "riscv64gc-unknown-none-elf"]
    )
    assert result.exit_code == int(ErrorCode.USER_ERROR)
    assert "unknown target" in result.output


class _StubPipeline:
    def __init__(self, outcome: PipelineRun) -> None:
        self.outcome = outcome
        self.dry_run: bool | None = None

    def run(self, *, dry_run: bool = False) -> PipelineRun:
        self.dry_run = dry_run
        return self.outcome


def test_run_failure_exit_code(crate: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    failure = StepFailure(step=4, name="Push tag", error=ConflictError(tag="2.0.0"))
    stub = _StubPipeline(PipelineRun(state=PipelineState.FAILED, failure=failure))
    monkeypatch.setattr(run_cmd, "build_pipeline", lambda ctx: stub)

    result = runner.invoke(app, ["--root", str(crate), "run"])

    assert result.exit_code == int(ErrorCode.CONFLICT)
    assert "already exists" in result.output
    assert "step 4" in result.output
    assert stub.dry_run is False


def test_run_dry_run(crate: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    stub = _StubPipeline(
        PipelineRun(state=PipelineState.SUCCEEDED, version="2.0.0", tag="2.0.0", dry_run=True)
    )
    monkeypatch.setattr(run_cmd, "build_pipeline", lambda ctx: stub)

    result = runner.invoke(app, ["--root", str(crate), "run", "--dry-run"])

    assert result.exit_code == 0
    assert stub.dry_run is True
    assert "dry-run complete (tag 2.0.0)" in result.output
