"""Targets command - show the configured build targets."""

from __future__ import annotations

from rel.cli.context import build_context


def targets() -> None:
    """List configured build targets."""
    ctx = build_context()
    for t in ctx.config.targets:
        ctx.console.print(f"{t.triple}  archive={t.archive}  toolchain={t.toolchain}")
