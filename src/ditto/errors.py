"""Exception hierarchy for Ditto."""

from __future__ import annotations

from typing import Any


class DittoError(Exception):
    """Base exception for all Ditto errors."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint


class ConfigurationError(DittoError):
    """Settings or a Result specialization are invalid."""


class PayloadTypeError(DittoError, TypeError):
    """A payload does not match the type declared by its Result."""


class ContractViolation(DittoError, AssertionError):
    """A Result was accessed in a way its discriminant forbids.

    This is a programming defect, not a recoverable outcome: check
    ``is_ok()`` / ``is_error()`` before reading a payload.
    """


class EarlyReturn(BaseException):  # noqa: N818
    """Carries a failure payload out of a ``@propagates`` function.

    Derives from ``BaseException`` so that ``except Exception`` blocks inside
    the propagating function do not intercept the relay.
    """

    def __init__(self, payload: Any, *, origin: Any = None) -> None:
        super().__init__(payload)
        self.payload = payload
        self.origin = origin

    def __str__(self) -> str:
        return (
            f"propagate() failed with {self.payload!r} outside a @propagates "
            "function"
        )
