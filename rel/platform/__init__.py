"""Platform abstraction layer."""

from .process import ProcessError, run, run_silent

__all__ = ["ProcessError", "run", "run_silent"]
