"""Command-line option values: checked paths, path lists, URLs and fallbacks."""

from __future__ import annotations

import os
import stat as stat_mod
from dataclasses import dataclass, field
from enum import IntEnum, IntFlag
from typing import ClassVar
from urllib.parse import SplitResult, urlsplit

from toolbelt.sandbox import is_sandboxed


class PathMode(IntEnum):
    """How a path is meant to be opened."""

    READ_ONLY = 0
    READ_WRITE = 1


class PathState(IntFlag):
    """Conditions a path must meet when it is set."""

    NONE = 0
    MUST_EXIST = 1
    MUST_NOT_EXIST = 2
    MUST_BE_FILE = 4
    MUST_BE_DIR = 8


def set_fallback(flag, changed: bool, *args) -> None:
    """Give an unchanged flag the first usable fallback.

    A non-empty string is set as is; a list of strings sets each element.
    Empty strings and None are skipped.
    """
    if flag is None or changed:
        return
    for value in args:
        if isinstance(value, str):
            if value != "":
                flag.set(value)
                return
        elif isinstance(value, (list, tuple)):
            for item in value:
                flag.set(item)
            return
        elif value is not None:
            raise TypeError("invalid value type")


@dataclass
class Path:
    """A path option, optionally expanded with suffixes and checked on set."""

    kind: ClassVar[str] = "path"

    value: str = ""
    values: list[str] = field(default_factory=list)
    mode: PathMode = PathMode.READ_ONLY
    state: PathState = PathState.NONE
    suffixes: list[str] = field(default_factory=list)

    def set(self, value: str) -> None:
        paths = [f"{value}.{suffix}" for suffix in self.suffixes] if self.suffixes else [value]
        self.value = value
        self.values = paths

        # Only the unsandboxed parent validates: a missing path may have to be
        # created before the sandbox is spawned so that it can be mounted.
        if is_sandboxed():
            return
        for path in paths:
            _check(path, self.state)

    def __str__(self) -> str:
        return self.value


def _check(path: str, state: PathState) -> None:
    try:
        info = os.stat(path)
    except FileNotFoundError:
        info = None

    if state & PathState.MUST_EXIST and info is None:
        raise FileNotFoundError(f"{path}: file does not exist")
    if state & PathState.MUST_NOT_EXIST and info is not None:
        raise FileExistsError(f"{path}: file already exists")
    if info is None:
        return
    if state & PathState.MUST_BE_DIR and not stat_mod.S_ISDIR(info.st_mode):
        raise NotADirectoryError(f"{path} must be a directory")
    if state & PathState.MUST_BE_FILE and not stat_mod.S_ISREG(info.st_mode):
        raise ValueError(f"{path} must be a regular file")


@dataclass
class PathSlice:
    """A repeatable path option; every value is checked like a Path."""

    kind: ClassVar[str] = "pathslice"

    value: list[Path] = field(default_factory=list)
    state: PathState = PathState.NONE
    suffixes: list[str] = field(default_factory=list)

    def set(self, value: str) -> None:
        path = Path(state=self.state, suffixes=list(self.suffixes))
        self.value.append(path)
        path.set(value)

    def string_slice(self) -> list[str]:
        return [str(path) for path in self.value]

    def __str__(self) -> str:
        return "[" + ", ".join(self.string_slice()) + "]"


@dataclass
class URL:
    """A URL option."""

    kind: ClassVar[str] = "url"

    value: SplitResult | None = None

    def set(self, value: str) -> None:
        """Parse ``value``; raise ValueError if it is not a valid URL."""
        self.value = urlsplit(value)

    def __str__(self) -> str:
        return self.value.geturl() if self.value is not None else ""