"""Logging levels, sanitising formatters and small logging helpers."""

from __future__ import annotations

import json
import logging
import os
import sys
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Mapping, TypeVar

from toolbelt.stringx import sanitize, split_lines

TRACE = 5
FATAL = logging.CRITICAL
PANIC = logging.CRITICAL + 10

logging.addLevelName(TRACE, "TRACE")
logging.addLevelName(PANIC, "PANIC")

_LEVELS = {
    "panic": PANIC,
    "fatal": FATAL,
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
    "trace": TRACE,
}

_NAMES = {
    TRACE: "trace",
    logging.DEBUG: "debug",
    logging.INFO: "info",
    logging.WARNING: "warning",
    logging.ERROR: "error",
    FATAL: "fatal",
    PANIC: "panic",
}

_COLORS = {
    TRACE: 36,
    logging.DEBUG: 37,
    logging.INFO: 32,
    logging.WARNING: 33,
}
_RED = 31

_STANDARD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}
_JSON_KEYS = frozenset({"level", "msg", "time"})

_Field = TypeVar("_Field", bool, str)
_R = TypeVar("_R")


def _level_name(levelno: int) -> str:
    return _NAMES.get(levelno) or logging.getLevelName(levelno).lower()


def parse_level(value: str) -> int:
    """Turn a level name such as ``warn`` or ``TRACE`` into a logging level."""
    try:
        return _LEVELS[value.lower()]
    except KeyError:
        raise ValueError(f"not a valid log level: {value!r}") from None


def get_field(fields: Mapping[str, object], key: str, fallback: _Field) -> _Field:
    """Return ``fields[key]`` if present and of the fallback's type, else the fallback."""
    if key not in fields:
        return fallback
    value = fields[key]
    if isinstance(value, type(fallback)):
        return value
    return fallback


def _colors_enabled() -> bool:
    if "NO_COLOR" in os.environ or os.environ.get("TERM") == "dumb":
        return False
    isatty = getattr(sys.stdout, "isatty", None)
    return bool(isatty and isatty())


class SanitizedJSONFormatter(logging.Formatter):
    """Formats records as one JSON object per line, sanitised to printable ASCII."""

    def format(self, record: logging.LogRecord) -> str:
        data: dict[str, object] = {}
        for key, value in vars(record).items():
            if key in _STANDARD_ATTRS:
                continue
            data[f"fields.{key}" if key in _JSON_KEYS else key] = value
        data["level"] = _level_name(record.levelno)
        data["msg"] = record.getMessage()
        data["time"] = datetime.fromtimestamp(record.created).astimezone().isoformat(
            timespec="seconds"
        )
        if record.exc_info:
            data["error"] = self.formatException(record.exc_info)
        return sanitize(json.dumps(data, sort_keys=True, ensure_ascii=False, default=str))


class SanitizedTextFormatter(logging.Formatter):
    """Formats each message line as ``level | text`` with the text sanitised.

    Records carrying a true ``unstyled`` attribute are emitted as the bare
    sanitised message.
    """

    def __init__(self, colored: bool | None = None) -> None:
        super().__init__()
        self.colored = _colors_enabled() if colored is None else colored

    def _level(self, levelno: int) -> str:
        name = _level_name(levelno)
        if not self.colored:
            return name
        return f"\x1b[{_COLORS.get(levelno, _RED)}m{name}\x1b[0m"

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        if get_field(vars(record), "unstyled", False):
            return sanitize(message)
        level = self._level(record.levelno)
        return "\n".join(f"{level:<14} | {sanitize(line)}" for line in split_lines(message))


@dataclass
class LogLevel:
    """A command-line value that sets the root logging level."""

    value: int = logging.INFO

    def set(self, value: str) -> None:
        level = parse_level(value)
        logging.getLogger().setLevel(level)
        self.value = level

    def __str__(self) -> str:
        return _level_name(self.value)


def discard_logger() -> logging.Logger:
    """Return a fresh logger that drops everything."""
    logger = logging.Logger("discard", FATAL)
    handler = logging.NullHandler()
    handler.setFormatter(SanitizedTextFormatter(colored=False))
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def with_suppress(fn: Callable[[], _R]) -> _R:
    """Call ``fn`` with the root logger raised to the fatal level."""
    root = logging.getLogger()
    level = root.level
    root.setLevel(FATAL)
    try:
        return fn()
    finally:
        root.setLevel(level)