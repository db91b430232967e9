"""In-memory seekable byte readers and writers."""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class FileInfo:
    """File metadata for an in-memory buffer."""

    size: int
    name: str = "buffer"
    mode: int = 0
    is_dir: bool = False

    @property
    def mod_time(self) -> datetime:
        return datetime.now()


def _resolve_seek(position: int, length: int, offset: int, whence: int) -> int:
    if whence == os.SEEK_SET:
        target = offset
    elif whence == os.SEEK_CUR:
        target = position + offset
    elif whence == os.SEEK_END:
        target = length + offset
    else:
        raise ValueError(f"invalid whence: {whence}")
    if target < 0:
        raise ValueError(f"invalid position: {target}")
    return target


class BufferReader:
    """A seekable reader over a fixed block of bytes."""

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._position = 0

    def read(self, size: int | None = -1) -> bytes:
        """Read up to ``size`` bytes (all remaining when negative); b"" at the end."""
        end = len(self._data) if size is None or size < 0 else self._position + size
        chunk = self._data[self._position:end]
        self._position += len(chunk)
        return chunk

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> int:
        self._position = _resolve_seek(self._position, len(self._data), offset, whence)
        return self._position

    def sync(self) -> int:
        """Memory needs no flushing; return the number of bytes held."""
        return len(self._data)

    def stat(self) -> FileInfo:
        return FileInfo(size=len(self._data))


class BufferWriter:
    """A seekable writer into a growing block of bytes."""

    def __init__(self) -> None:
        self._data = bytearray()
        self._position = 0

    def write(self, data: bytes) -> int:
        """Write at the current position, zero-filling any gap; return the count."""
        data = bytes(data)
        if self._position > len(self._data):
            self._data.extend(bytes(self._position - len(self._data)))
        self._data[self._position:self._position + len(data)] = data
        self._position += len(data)
        return len(data)

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> int:
        self._position = _resolve_seek(self._position, len(self._data), offset, whence)
        return self._position

    def getvalue(self) -> bytes:
        return bytes(self._data)