"""Helpers for command-line entry points."""

from __future__ import annotations

import functools
import logging
import os
import sys
from typing import Callable, Sequence, TypeVar

_log = logging.getLogger(__name__)

_T = TypeVar("_T")


def run(fn: Callable[..., _T]) -> Callable[..., _T]:
    """Wrap a command so that any exception is logged and exits with status 1."""

    @functools.wraps(fn)
    def wrapper(*args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except Exception as exc:
            _log.debug("%s", exc, exc_info=True)
            _log.critical("%s", exc)
            raise SystemExit(1) from exc

    return wrapper


def validate_args_length(minimum: int, maximum: int) -> Callable[[Sequence[str]], Sequence[str]]:
    """Build a validator for the number of positional arguments.

    A negative bound is not checked. The validator returns the arguments
    unchanged or raises ValueError.
    """

    def validate(args: Sequence[str]) -> Sequence[str]:
        count = len(args)
        if (minimum >= 0 and count < minimum) or (maximum >= 0 and count > maximum):
            raise ValueError("required argument(s) not provided")
        return args

    return validate


def _process_ids() -> tuple[int, ...]:
    if not hasattr(os, "getuid"):
        return ()
    return (os.getuid(), os.geteuid(), os.getgid(), os.getegid())


def ensure_unprivileged() -> None:
    """Exit with status 1 if any real or effective user or group id is root."""
    if any(ident == 0 for ident in _process_ids()):
        _log.critical("%s shouldn't be launched as root", sys.argv[0])
        raise SystemExit(1)