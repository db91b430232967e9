"""File-system and stream helpers."""

from __future__ import annotations

import contextlib
import logging
import os
import shutil
import stat as stat_mod
import tempfile
import zipfile
from pathlib import Path
from typing import Callable

_log = logging.getLogger(__name__)

_CHUNK_SIZE = 64 * 1024


class InvalidSizeError(OSError):
    """Raised when a size is negative or a copy moved the wrong number of bytes."""


class InvalidOffsetError(OSError):
    """Raised when a seek ends somewhere other than requested."""


def exists(path) -> bool:
    """Whether ``path`` exists; errors other than absence are raised."""
    try:
        os.stat(path)
    except FileNotFoundError:
        return False
    return True


def move_file(src, dst) -> None:
    """Copy ``src`` to ``dst`` and then remove ``src``."""
    copy(dst, src)
    os.remove(src)


def read_file(path) -> bytes:
    with _BytesSink() as sink:
        copy(sink, path)
        return sink.getvalue()


def write_file(path, reader) -> None:
    copy(path, reader)


class _BytesSink:
    def __init__(self) -> None:
        self._chunks: list[bytes] = []

    def write(self, data: bytes) -> int:
        self._chunks.append(bytes(data))
        return len(data)

    def getvalue(self) -> bytes:
        return b"".join(self._chunks)

    def __enter__(self) -> _BytesSink:
        return self

    def __exit__(self, *args) -> None:
        self._chunks.clear()


def _fileno(obj) -> int | None:
    fileno = getattr(obj, "fileno", None)
    if not callable(fileno):
        return None
    try:
        return fileno()
    except (OSError, ValueError):
        return None


def _describe(obj) -> str:
    name = getattr(obj, "name", None)
    return name if isinstance(name, str) else f"{id(obj):#x}"


def _is_seekable(obj) -> bool:
    if not callable(getattr(obj, "seek", None)):
        return False
    seekable = getattr(obj, "seekable", None)
    return seekable() if callable(seekable) else True


def _stream_size(stream) -> int:
    """Size announced by a stream, or -1 when it announces none."""
    stat = getattr(stream, "stat", None)
    if callable(stat) and hasattr(stream, "name"):
        size = stat().size
    else:
        fd = _fileno(stream)
        if fd is None:
            return -1
        info = os.fstat(fd)
        if not stat_mod.S_ISREG(info.st_mode):
            return -1
        size = info.st_size
    if size < 0:
        raise InvalidSizeError("invalid size")
    return size


def _open_dst(dst, stack: contextlib.ExitStack):
    if callable(getattr(dst, "write", None)):
        return dst, _describe(dst)
    if isinstance(dst, (str, os.PathLike)):
        path = os.fspath(dst)
        parent = os.path.dirname(path)
        if parent:
            os.makedirs(parent, 0o700, exist_ok=True)
        return stack.enter_context(open(path, "wb")), path
    raise TypeError("invalid dst")


def _open_src(src, stack: contextlib.ExitStack):
    if callable(getattr(src, "read", None)):
        size = _stream_size(src)
        if size > 0 and _is_seekable(src):
            size -= src.seek(0, os.SEEK_CUR)
        return src, _describe(src), size
    if isinstance(src, zipfile.Path):
        info = src.root.getinfo(src.at)
        return stack.enter_context(src.open("rb")), src.name, info.file_size
    if isinstance(src, (str, os.PathLike)):
        path = os.fspath(src)
        handle = stack.enter_context(open(path, "rb"))
        return handle, path, os.fstat(handle.fileno()).st_size
    raise TypeError("invalid src")


def _sync(writer) -> None:
    sync = getattr(writer, "sync", None)
    if callable(sync):
        sync()
        return
    fd = _fileno(writer)
    if fd is not None:
        writer.flush()
        if stat_mod.S_ISREG(os.fstat(fd).st_mode):
            os.fsync(fd)


def copy(dst, src) -> None:
    """Copy everything from ``src`` to ``dst`` and sync the destination.

    ``dst`` is a writable object or a path (parent directories are created).
    ``src`` is a readable object, a ``zipfile.Path`` or a path. When the
    source announces its size, a short or long copy raises InvalidSizeError.
    """
    with contextlib.ExitStack() as stack:
        writer, dst_name = _open_dst(dst, stack)
        reader, src_name, src_size = _open_src(src, stack)

        _log.debug("%s: copy %d byte(s) from %s", dst_name, src_size, src_name)
        copied = 0
        while chunk := reader.read(_CHUNK_SIZE):
            writer.write(chunk)
            copied += len(chunk)

        if src_size >= 0 and copied != src_size:
            raise InvalidSizeError(f"{src_name}: invalid size")

        _log.debug("%s: syncing... (%d)", dst_name, copied)
        _sync(writer)


def read_full(reader, size: int) -> bytes:
    """Read exactly ``size`` bytes or raise EOFError."""
    data = bytearray()
    while len(data) < size:
        chunk = reader.read(size - len(data))
        if not chunk:
            break
        data += chunk
    if not data and size > 0:
        raise EOFError("EOF")
    if len(data) != size:
        raise EOFError("unexpected EOF")
    return bytes(data)


def mkdir_temp() -> tuple[str, Callable[[], None]]:
    """Create a temporary directory; return it with a function that removes it."""
    path = tempfile.mkdtemp()

    def cleanup() -> None:
        with contextlib.suppress(FileNotFoundError):
            shutil.rmtree(path)

    return path, cleanup


def expand(path) -> str:
    """Expand a leading ``~`` and return the absolute path."""
    path = os.fspath(path)
    if not path:
        raise ValueError("empty path")
    prefix = "~" + os.sep
    if path.startswith(prefix):
        path = os.path.join(str(Path.home()), path[len(prefix):])
    return os.path.abspath(path)


def seek(stream, offset: int, whence: int = os.SEEK_SET) -> int:
    """Seek and make sure the resulting position equals ``offset``."""
    position = stream.seek(offset, whence)
    if position != offset:
        raise InvalidOffsetError("invalid offset")
    return position


def remove(path) -> None:
    """Remove a file or a directory tree; a missing path is not an error."""
    try:
        info = os.stat(path)
    except FileNotFoundError:
        return
    if stat_mod.S_ISDIR(info.st_mode) and not os.path.islink(path):
        shutil.rmtree(path)
    else:
        os.remove(path)