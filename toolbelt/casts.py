"""Range-checked integer conversions."""

from __future__ import annotations

import operator
from enum import Enum


class OutOfRangeError(ValueError):
    """Raised when a value does not fit the target integer kind."""


class IntKind(Enum):
    """Integer kinds that values can be cast to."""

    INT64 = "int64"
    UINT32 = "uint32"
    UINT64 = "uint64"

    @property
    def bounds(self) -> tuple[int, int]:
        return _BOUNDS[self]


_BOUNDS = {
    IntKind.INT64: (-(2**63), 2**63 - 1),
    IntKind.UINT32: (0, 2**32 - 1),
    # The unsigned 64-bit cast is deliberately capped at the 32-bit maximum.
    IntKind.UINT64: (0, 2**32 - 1),
}


def checked_cast(n: int, kind: IntKind) -> int:
    """Return ``n`` if it fits ``kind``, else raise OutOfRangeError."""
    value = operator.index(n)
    low, high = kind.bounds
    if not low <= value <= high:
        raise OutOfRangeError(f"{value} is out of range for {kind.value}")
    return value


def cast(n: int, kind: IntKind) -> int:
    """Like checked_cast, but exit the program when the value does not fit."""
    try:
        return checked_cast(n, kind)
    except OutOfRangeError as exc:
        raise SystemExit(str(exc)) from exc