"""Outcome of a use case: a value, or the error the screen should report.

Use cases return these instead of raising so callers branch on
``is_failure()`` and read ``.value`` or ``.error`` directly. ``unwrap()`` is
for scripts and tests that want the exception back.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from core.exceptions import FishdexException

T = TypeVar('T')
E = TypeVar('E')


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T

    def is_success(self) -> bool:
        return True

    def is_failure(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Failure(Generic[E]):
    """A failed operation; ``error`` is normally a FishdexException."""
    error: E

    def is_success(self) -> bool:
        return False

    def is_failure(self) -> bool:
        return True

    def unwrap(self):
        """Raise the stored error, wrapping a plain message in FishdexException."""
        if isinstance(self.error, Exception):
            raise self.error
        raise FishdexException(str(self.error))


Result = Union[Success[T], Failure[E]]
