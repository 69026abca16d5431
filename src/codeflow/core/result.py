"""
Result Type Implementation.

Loading an analysis snapshot can fail for reasons owned by the caller
(missing file, malformed JSON, schema mismatch). Those failures are
returned as values so the CLI decides how to report them, while the
rendering core itself never raises for bad references.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """A successful computation."""
    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Err(Generic[E]):
    """A failed computation carrying its error value."""
    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> T:
        raise ValueError(f"Called unwrap on Err: {self.error}")


Result = Union[Ok[T], Err[E]]
