"""Result type for explicit error handling.

Every pipeline capability returns a ``Result`` instead of raising, so the
orchestrator can stop at the first failing step and report which one it was.

Usage:
    match reader.read(path, "package.version"):
        case Ok(version):
            console.success(version)
        case Err(error):
            console.error(str(error))
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeVar

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful step output.

    Attributes:
        value: What the step produced (version, archive, tag name, ...).
    """

    value: T

    def unwrap(self) -> T:
        """Return the contained value."""
        return self.value

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Failed step output.

    Attributes:
        error: Typed error payload describing the failure.
    """

    error: E

    def unwrap(self) -> None:
        """Raise, since there is no value.

        Raises:
            ValueError: Always, carrying the error payload.
        """
        raise ValueError(f"called unwrap on Err: {self.error}")

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


Result: TypeAlias = Ok[T] | Err[E]

