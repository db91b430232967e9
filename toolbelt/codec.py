"""Seekable base64 decoder and line-wrapping encoder."""

from __future__ import annotations

import base64
import binascii
import os
from enum import Enum

from toolbelt.buffer import BufferReader, BufferWriter, FileInfo


class Encoding(Enum):
    """Base64 alphabets, padded or raw."""

    STD = (b"+/", True)
    URL = (b"-_", True)
    RAW_STD = (b"+/", False)
    RAW_URL = (b"-_", False)

    def __init__(self, altchars: bytes, padded: bool) -> None:
        self.altchars = altchars
        self.padded = padded

    def encode(self, data: bytes) -> bytes:
        encoded = base64.b64encode(bytes(data), altchars=self.altchars)
        return encoded if self.padded else encoded.rstrip(b"=")

    def decode(self, data: bytes | str) -> bytes:
        """Decode, ignoring CR and LF; raise ValueError on malformed input."""
        if isinstance(data, str):
            data = data.encode("ascii")
        data = bytes(data).replace(b"\r", b"").replace(b"\n", b"")
        if not self.padded:
            if b"=" in data:
                raise ValueError("illegal base64 data: unexpected padding")
            data += b"=" * (-len(data) % 4)
        try:
            return base64.b64decode(data, altchars=self.altchars, validate=True)
        except binascii.Error as exc:
            raise ValueError(f"illegal base64 data: {exc}") from exc

    def decoded_len(self, n: int) -> int:
        """Maximum number of decoded bytes for ``n`` encoded characters."""
        return n // 4 * 3 if self.padded else n * 6 // 8


class Decoder:
    """Reads a whole base64 stream and serves the decoded bytes."""

    name = "base64decoder"

    def __init__(self, encoding: Encoding, reader) -> None:
        self._buffer = BufferReader(encoding.decode(reader.read()))

    def read(self, size: int | None = -1) -> bytes:
        return self._buffer.read(size)

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> int:
        return self._buffer.seek(offset, whence)

    def stat(self) -> FileInfo:
        return self._buffer.stat()

    def sync(self) -> None:
        self._buffer.sync()


class Encoder:
    """Collects bytes and writes them base64-encoded in lines of ``width``."""

    def __init__(self, encoding: Encoding, writer, width: int) -> None:
        self._chunk = encoding.decoded_len(width)
        if self._chunk <= 0:
            raise ValueError(f"invalid width: {width}")
        self._encoding = encoding
        self._writer = writer
        self._buffer = BufferWriter()

    def write(self, data: bytes) -> int:
        return self._buffer.write(data)

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> int:
        return self._buffer.seek(offset, whence)

    def close(self) -> None:
        """Encode everything written so far into the underlying writer."""
        data = self._buffer.getvalue()
        for start in range(0, len(data), self._chunk):
            line = self._encoding.encode(data[start:start + self._chunk]) + b"\n"
            written = self._writer.write(line)
            if written is not None and written != len(line):
                raise OSError("invalid write")

    def __enter__(self) -> Encoder:
        return self

    def __exit__(self, *args) -> None:
        if args[0] is None:
            self.close()