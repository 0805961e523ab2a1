"""Run command - the full build, tag and release pipeline."""

from __future__ import annotations

import typer

from rel.cli.context import build_context, build_pipeline
from rel.output.console import Style
from rel.output.errors import pipeline_error_exit_code, print_pipeline_error


def run(
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Build and package, but do not tag or publish"
    ),
) -> None:
    """Build every target, push the version tag and publish the release."""
    ctx = build_context()
    outcome = build_pipeline(ctx).run(dry_run=dry_run)

    if outcome.failure is not None:
        f = outcome.failure
        print_pipeline_error(f.error, ctx.console)
        ctx.console.print(f"pipeline failed at step {f.step} ({f.name})", Style.DIM)
        raise typer.Exit(code=pipeline_error_exit_code(f.error))

    if outcome.dry_run:
        ctx.console.success(f"dry-run complete (tag {outcome.tag})")
