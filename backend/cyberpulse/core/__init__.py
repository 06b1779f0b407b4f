"""Core primitives shared by every layer: errors, results and logging."""

from cyberpulse.core.errors import (
    CyberPulseError,
    NetworkError,
    NotFoundError,
    ParseError,
    StoreError,
)
from cyberpulse.core.result import Failure, Result, Success

__all__ = [
    "CyberPulseError",
    "NetworkError",
    "ParseError",
    "NotFoundError",
    "StoreError",
    "Result",
    "Success",
    "Failure",
]
