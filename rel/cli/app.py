from __future__ import annotations

import os
from pathlib import Path

import typer

from rel import __version__
from rel.cli.commands.build_cmd import build
from rel.cli.commands.run_cmd import run
from rel.cli.commands.targets_cmd import targets
from rel.cli.commands.version_cmd import version
from rel.cli.context import CONFIG_ENV_VAR, ROOT_ENV_VAR
from rel.core.errors import ErrorCode


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)


app.command()(run)
app.command()(build)
app.command()(version)
app.command()(targets)


def _show_version(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=0)


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    show_version: bool = typer.Option(
        False,
        "--version",
        callback=_show_version,
        is_eager=True,
        help="Show rel version and exit.",
    ),
    root: Path | None = typer.Option(
        None,
        "--root",
        help="Project root containing Cargo.toml (default: current directory)",
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        help="Pipeline config file (default: <root>/rel.toml when present)",
    ),
) -> None:
    del show_version
    if root is not None:
        try:
            resolved = root.expanduser().resolve()
        except OSError as e:
            typer.echo(f"error: invalid --root: {e}", err=True)
            raise typer.Exit(code=int(ErrorCode.USER_ERROR))

        if not resolved.is_dir():
            typer.echo(f"error: --root '{resolved}' is not a directory", err=True)
            raise typer.Exit(code=int(ErrorCode.USER_ERROR))
        os.environ[ROOT_ENV_VAR] = str(resolved)

    if config is not None:
        os.environ[CONFIG_ENV_VAR] = str(config.expanduser().resolve())


def main() -> None:
    app()
