"""Build command - compile and package without tagging or publishing."""

from __future__ import annotations

import typer

from rel.cli.commands._helpers import exit_with_error
from rel.cli.context import build_compiler, build_context
from rel.core.errors import ErrorCode
from rel.core.result import Err
from rel.output.console import Style
from rel.services.manifest import TomlManifestReader


def build(
    target: str | None = typer.Option(
        None,
        "--target",
        help="Target triple from the configured list (default: all)",
        show_default=False,
    ),
) -> None:
    """Compile release binaries and package them into archives."""
    ctx = build_context()

    if target is None:
        targets = ctx.config.targets
    else:
        selected = ctx.config.target(target)
        if selected is None:
            ctx.console.error(f"unknown target: {target}")
            configured = ", ".join(t.triple for t in ctx.config.targets)
            ctx.console.print(f"Available: {configured}", Style.DIM)
            raise typer.Exit(code=int(ErrorCode.USER_ERROR))
        targets = (selected,)

    version = TomlManifestReader().read(ctx.manifest_path, ctx.config.version_field)
    if isinstance(version, Err):
        exit_with_error(version.error, ctx)

    compiler = build_compiler(ctx)
    for t in targets:
        ctx.console.header(f"{t.triple} ({t.archive})")
        built = compiler.build(t, version=version.value)
        if isinstance(built, Err):
            exit_with_error(built.error, ctx)
        ctx.console.success(str(built.value.path))
        if built.value.checksum_path is not None:
            ctx.console.print(str(built.value.checksum_path), Style.DIM)
