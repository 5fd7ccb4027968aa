"""Result Types — explicit success/failure values for domain operations.

Invariants:
    - A Result is exactly one of Ok or Err
    - Err.error is always an OnboardingError (callers branch on its type)

Design Decisions:
    - Services return Result instead of raising: callers must handle every failure kind
"""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from onboarding.core.errors import OnboardingError

T = TypeVar("T")
E = TypeVar("E", bound=OnboardingError)


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err(Generic[E]):
    error: E

    @property
    def ok(self) -> bool:
        return False


Result = Union[Ok[T], Err[E]]
