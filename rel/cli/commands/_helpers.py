"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn

import typer

from rel.output.errors import pipeline_error_exit_code, print_pipeline_error
from rel.services.errors import PipelineError

if TYPE_CHECKING:
    from rel.cli.context import CLIContext


def exit_with_error(error: PipelineError, ctx: CLIContext) -> NoReturn:
    """Render a step error and exit with its mapped code."""
    print_pipeline_error(error, ctx.console)
    raise typer.Exit(code=pipeline_error_exit_code(error))
