"""
Result Type Implementation.

Explicit Ok/Err values for the few operations that can fail on user input
(reading a snapshot, judging whether two snapshots are usable). Core logic
returns these instead of raising so the host can show one message and let
the user retry.
"""

from dataclasses import dataclass
from typing import Callable, Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")
U = TypeVar("U")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Represents a successful computation."""
    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Err(Generic[E]):
    """Represents a failed computation carrying a user-facing message."""
    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self):
        raise ValueError(f"Called unwrap on Err: {self.error}")


Result = Union[Ok[T], Err[E]]


def map_ok(result: Result[T, E], func: Callable[[T], U]) -> Result[U, E]:
    """Apply a function to the contained value if Ok, otherwise return Err."""
    if isinstance(result, Ok):
        return Ok(func(result.value))
    return result  # type: ignore


def and_then(result: Result[T, E], func: Callable[[T], Result[U, E]]) -> Result[U, E]:
    """Chain a fallible step after an Ok; an Err short-circuits."""
    if isinstance(result, Ok):
        return func(result.value)
    return result  # type: ignore
