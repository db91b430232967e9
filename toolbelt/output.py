"""Consumers for a child process's output streams.

Each consumer takes a binary reader, the stream it came from and whether the
data is trusted, and returns the bytes it collected. Untrusted data that
contains anything but printable ASCII and newlines is rejected.
"""

from __future__ import annotations

import json
import logging
import sys
from enum import IntEnum
from typing import BinaryIO, Callable, Iterator

from toolbelt.logs import FATAL, get_field, parse_level
from toolbelt.stringx import sanitize

_log = logging.getLogger(__name__)

_CHUNK_SIZE = 64 * 1024
_RESERVED = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class Stream(IntEnum):
    """The output stream a reader belongs to."""

    STDOUT = 0
    STDERR = 1


class InvalidOutputError(ValueError):
    """Raised when untrusted output contains disallowed bytes."""


OutputFunc = Callable[[BinaryIO, Stream, bool], bytes]


def _target(src: Stream) -> BinaryIO:
    stream = sys.stdout if src == Stream.STDOUT else sys.stderr
    stream.flush()
    return getattr(stream, "buffer", stream)


def _chunks(reader) -> Iterator[bytes]:
    read = getattr(reader, "read1", None) or reader.read
    while chunk := read(_CHUNK_SIZE):
        yield chunk


def _read_all(reader) -> bytes:
    return b"".join(_chunks(reader))


def _lines(reader) -> Iterator[bytes]:
    """Yield lines without their terminator; a trailing CR is dropped too."""
    pending = b""
    for chunk in _chunks(reader):
        *lines, pending = (pending + chunk).split(b"\n")
        for line in lines:
            yield line.removesuffix(b"\r")
    if pending:
        yield pending.removesuffix(b"\r")


def _check(data: bytes, trusted: bool, who: str) -> None:
    if not trusted and sanitize(data) != data:
        raise InvalidOutputError(f"{who}: invalid data")


def unsafe_byte_output(reader, src: Stream, trusted: bool) -> bytes:
    """Copy everything to our own stream without any checks; collect nothing."""
    target = _target(src)
    for chunk in _chunks(reader):
        target.write(chunk)
    target.flush()
    return b""


def byte_output(reader, src: Stream, trusted: bool) -> bytes:
    """Read everything, check it, then copy it to our own stream."""
    data = _read_all(reader)
    _check(data, trusted, "byte_output")
    target = _target(src)
    target.write(data)
    target.flush()
    return data


def capture_output(reader, src: Stream, trusted: bool) -> bytes:
    """Read and check everything without echoing it."""
    data = _read_all(reader)
    _check(data, trusted, "capture_output")
    return data


def text_output(reader, src: Stream, trusted: bool) -> bytes:
    """Echo the output line by line as it arrives, checking each line."""
    target = _target(src)
    collected = bytearray()
    for line in _lines(reader):
        _check(line, trusted, "text_output")
        target.write(line + b"\n")
        target.flush()
        collected += line + b"\n"
    return bytes(collected)


def log_output(reader, src: Stream, trusted: bool) -> bytes:
    """Re-log JSON log lines from a child; plain lines are logged unstyled.

    Fatal entries are not logged, and they discard what was collected so far
    so that the returned bytes carry only the fatal message.
    """
    collected = bytearray()
    for line in _lines(reader):
        _check(line, trusted, "log_output")
        try:
            fields = json.loads(line)
        except ValueError:
            fields = None
        if not isinstance(fields, dict):
            fields = {"msg": line.decode("utf-8", "replace"), "unstyled": True}

        level = parse_level(get_field(fields, "level", "info"))
        msg = get_field(fields, "msg", "n/a")

        if level == FATAL:
            collected.clear()
        else:
            extra = {key: value for key, value in fields.items() if key not in _RESERVED}
            _log.log(level, "%s", msg, extra=extra)

        collected += msg.encode("utf-8") + b"\n"
    return bytes(collected)