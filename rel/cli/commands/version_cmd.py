"""Version command - print the manifest version the pipeline would release."""

from __future__ import annotations

import typer

from rel.cli.commands._helpers import exit_with_error
from rel.cli.context import build_context
from rel.core.result import Err
from rel.services.manifest import TomlManifestReader


def version() -> None:
    """Print the version field read from the manifest."""
    ctx = build_context()
    result = TomlManifestReader().read(ctx.manifest_path, ctx.config.version_field)
    if isinstance(result, Err):
        exit_with_error(result.error, ctx)
    typer.echo(result.value)
