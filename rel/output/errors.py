"""Error presentation utilities.

Centralized error formatting and exit code mapping for consistent UX.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rel.core.errors import ErrorCode
from rel.output.console import Style
from rel.services.errors import (
    AuthError,
    BuildError,
    CheckoutError,
    ConflictError,
    DuplicateReleaseError,
    NotFoundError,
    PackagingError,
    ParseError,
    PipelineError,
    ToolFailed,
    ToolMissing,
    UploadError,
)

if TYPE_CHECKING:
    from rel.output.console import ConsoleProtocol

__all__ = ["print_pipeline_error", "pipeline_error_exit_code"]


def print_pipeline_error(error: PipelineError, console: ConsoleProtocol) -> None:
    console.error(error.message)
    match error:
        case BuildError(detail=detail) if detail:
            # Toolchain output is shown verbatim, not summarized.
            console.print(detail.rstrip(), Style.DIM)
        case _:
            if error.hint:
                console.print(f"hint: {error.hint}", Style.DIM)


def pipeline_error_exit_code(error: PipelineError) -> int:
    match error:
        case ParseError() | NotFoundError():
            return int(ErrorCode.IO_ERROR)
        case CheckoutError() | ToolMissing() | AuthError():
            return int(ErrorCode.ENV_ERROR)
        case BuildError() | PackagingError():
            return int(ErrorCode.BUILD_ERROR)
        case ConflictError() | DuplicateReleaseError():
            return int(ErrorCode.CONFLICT)
        case UploadError() | ToolFailed():
            return int(ErrorCode.NETWORK_ERROR)
    # Fallback for exhaustiveness
    return int(ErrorCode.USER_ERROR)
