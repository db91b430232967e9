"""String helpers: placeholder interpolation, sanitising and line splitting."""

from __future__ import annotations

import os
import re
import socket
from pathlib import Path
from typing import TypeVar

try:
    import pwd
except ImportError:  # pragma: no cover - non-POSIX platforms
    pwd = None

_PLACEHOLDER = re.compile(r"\{(host|user|home)\}")

# Every byte outside printable ASCII (newline excepted) maps to "_".
_SANITIZE_TABLE = bytes(
    byte if byte == 0x0A or 0x20 <= byte <= 0x7E else ord("_") for byte in range(256)
)

_Text = TypeVar("_Text", str, bytes)


def _current_user() -> tuple[str, str]:
    """Return the display name and home directory of the current user."""
    if pwd is None:  # pragma: no cover - non-POSIX platforms
        import getpass

        return getpass.getuser(), str(Path.home())
    entry = pwd.getpwuid(os.getuid())
    return entry.pw_gecos.split(",", 1)[0], entry.pw_dir


def interpolate(s: str) -> str:
    """Replace ``{host}``, ``{user}`` and ``{home}`` in a single pass."""
    host = socket.gethostname()
    name, home = _current_user()
    values = {"host": host, "user": name, "home": home}
    return _PLACEHOLDER.sub(lambda match: values[match.group(1)], s)


def sanitize(s: _Text) -> _Text:
    """Replace every byte that is not printable ASCII or a newline with ``_``.

    Text is handled as its UTF-8 encoding, so a multi-byte character turns
    into one underscore per byte.
    """
    if isinstance(s, str):
        return s.encode("utf-8", "surrogatepass").translate(_SANITIZE_TABLE).decode("ascii")
    return bytes(s).translate(_SANITIZE_TABLE)


def split_lines(s: str) -> list[str]:
    """Split on newlines after normalising CRLF and dropping trailing newlines."""
    return s.replace("\r\n", "\n").rstrip("\n").split("\n")