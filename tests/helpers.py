"""Shared domain used across the Result tests."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ditto import Result


class DivideError(Enum):
    DIVIDE_BY_ZERO = "divide_by_zero"
    NEGATIVE_DIVISOR = "negative_divisor"


@dataclass(frozen=True)
class Point:
    x: int
    y: int


IntResult = Result[int, DivideError]


def divide(a: int, b: int) -> Result[int, DivideError]:
    if b == 0:
        return IntResult.error(DivideError.DIVIDE_BY_ZERO)
    return IntResult.ok(a // b)
