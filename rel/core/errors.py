"""Exit codes for the rel CLI.

Each pipeline failure maps onto one of these codes so a CI job can tell a
conflicting tag apart from a broken build without parsing output.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Process exit codes.

    Values are part of the CLI contract and must stay stable:
    - 0: Success
    - 1: User error (invalid config, unknown target)
    - 2: Environment error (missing tool, no checkout, rejected credentials)
    - 3: Build error (cargo failed, archive could not be written)
    - 4: Conflict (tag or release already exists)
    - 5: I/O error (manifest unreadable or missing a field)
    - 6: Network error (asset upload or push failed)
    """

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    BUILD_ERROR = 3
    CONFLICT = 4
    IO_ERROR = 5
    NETWORK_ERROR = 6
