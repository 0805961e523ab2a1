"""Core types shared by every layer: results, exit codes, config."""

from rel.core.errors import ErrorCode
from rel.core.result import Err, Ok, Result

__all__ = ["ErrorCode", "Err", "Ok", "Result"]
