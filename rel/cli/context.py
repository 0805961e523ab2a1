from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import typer

from rel.core.config import Config, credential_from_env, load_project_config
from rel.core.errors import ErrorCode
from rel.core.result import Err
from rel.git.repository import Repository
from rel.output.console import ConsoleProtocol, RichConsole, Style
from rel.services.build import CargoCompiler
from rel.services.checkout import GitCheckout
from rel.services.gh import GhReleasePublisher
from rel.services.manifest import TomlManifestReader
from rel.services.pipeline import PipelineDeps, ReleasePipeline
from rel.services.tags import GitTagPublisher, git_credential_env


@dataclass(frozen=True, slots=True)
class CLIContext:
    project_root: Path
    config: Config
    console: ConsoleProtocol
    token: str | None

    @property
    def manifest_path(self) -> Path:
        return self.project_root / self.config.manifest

    @property
    def out_dir(self) -> Path:
        return self.project_root / self.config.out_dir


ROOT_ENV_VAR = "REL_PROJECT_ROOT"
CONFIG_ENV_VAR = "REL_CONFIG"


def build_context() -> CLIContext:
    """Resolve project root and config (set by the app callback, else cwd)."""
    console = RichConsole()
    root_env = os.environ.get(ROOT_ENV_VAR)
    project_root = Path(root_env) if root_env else Path.cwd().resolve()
    config_env = os.environ.get(CONFIG_ENV_VAR)
    config_path = Path(config_env) if config_env else None

    config_result = load_project_config(project_root, config_path)
    if isinstance(config_result, Err):
        error = config_result.error
        console.error(error.message)
        if error.path is not None:
            console.print(f"hint: {error.path}", Style.DIM)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    return CLIContext(
        project_root=project_root,
        config=config_result.value,
        console=console,
        token=credential_from_env(),
    )


def build_compiler(ctx: CLIContext) -> CargoCompiler:
    return CargoCompiler(
        project_root=ctx.project_root,
        manifest_path=ctx.manifest_path,
        out_dir=ctx.out_dir,
        extra_files=ctx.config.extra_files,
        console=ctx.console,
    )


def build_pipeline(ctx: CLIContext) -> ReleasePipeline:
    repo = Repository(ctx.project_root, env=git_credential_env(ctx.token))
    deps = PipelineDeps(
        manifest=TomlManifestReader(),
        checkout=GitCheckout(repo),
        compiler=build_compiler(ctx),
        tags=GitTagPublisher(
            repo=repo,
            console=ctx.console,
            remote=ctx.config.remote,
            prefix=ctx.config.tag_prefix,
        ),
        releases=GhReleasePublisher(
            workspace_root=ctx.project_root,
            console=ctx.console,
            token=ctx.token,
            repo=ctx.config.repo,
            options=ctx.config.release,
        ),
    )
    return ReleasePipeline(
        config=ctx.config,
        manifest_path=ctx.manifest_path,
        deps=deps,
        console=ctx.console,
    )
