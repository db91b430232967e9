"""Combining several exceptions into one."""

from __future__ import annotations

from typing import Callable


class JoinError(Exception):
    """An exception that carries several underlying exceptions."""

    def __init__(self, errors) -> None:
        self.errors: list[BaseException] = list(errors)
        super().__init__(*self.errors)

    def __str__(self) -> str:
        return "\n".join(str(error) for error in self.errors)

    def unwrap(self) -> JoinError | None:
        """Return a join of every error but the first, or None when empty."""
        if self.errors:
            return JoinError(self.errors[1:])
        return None

    def matches(self, target) -> bool:
        """Whether any held error is ``target`` or an instance of it."""
        return any(_matches(error, target) for error in self.errors)


def _matches(error: BaseException | None, target) -> bool:
    seen: set[int] = set()
    while error is not None and id(error) not in seen:
        seen.add(id(error))
        if error is target:
            return True
        if isinstance(target, type) and isinstance(error, target):
            return True
        if isinstance(error, JoinError):
            return error.matches(target)
        error = error.__cause__
    return False


def join(*args: BaseException | None) -> JoinError | None:
    """Join the given errors, ignoring None; return None if none are left."""
    errors = [error for error in args if error is not None]
    if not errors:
        return None
    return JoinError(errors)


def defer(fn: Callable[[], object], error: BaseException | None) -> JoinError | None:
    """Call ``fn`` and join whatever it raises with ``error``."""
    try:
        fn()
    except Exception as exc:
        return join(error, exc)
    return join(error)