"""Discriminated success/failure values returned by every repository call."""

from dataclasses import dataclass
from typing import Generic, TypeVar

from cyberpulse.core.errors import CyberPulseError

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    """Successful outcome carrying a value."""

    value: T


@dataclass(frozen=True)
class Failure:
    """Failed outcome carrying the error that caused it."""

    error: CyberPulseError


Result = Success[T] | Failure
