"""Running child processes with pluggable output handling."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import BinaryIO, Mapping, Sequence

from toolbelt.errorx import join
from toolbelt.logs import TRACE
from toolbelt.output import OutputFunc, Stream, capture_output

try:
    import pwd
except ImportError:  # pragma: no cover - non-POSIX platforms
    pwd = None

_log = logging.getLogger(__name__)

_CHUNK_SIZE = 64 * 1024


@dataclass
class ExecOptions:
    """What to run and how to treat its input and output.

    ``env`` of None inherits the current environment. ``stdin`` may be
    bytes, a binary file or any object with ``read``. Output handlers
    default to capturing without echoing.
    """

    command: Sequence[str]
    env: Mapping[str, str] | None = None
    dir: str | None = None
    become: str = ""
    stdin: bytes | BinaryIO | None = None
    stdout: OutputFunc | None = None
    stderr: OutputFunc | None = None
    trusted: bool = False


@dataclass
class ExecOutput:
    """What the output handlers collected."""

    stdout: bytes = b""
    stderr: bytes = b""


class ExecError(subprocess.CalledProcessError):
    """A child exited unsuccessfully; its message is the collected stderr if any."""

    def __str__(self) -> str:
        if self.stderr:
            return self.stderr.decode("utf-8", "replace")
        return super().__str__()


def _current_username() -> str:
    if pwd is not None:
        return pwd.getpwuid(os.getuid()).pw_name
    import getpass  # pragma: no cover - non-POSIX platforms

    return getpass.getuser()  # pragma: no cover


def _become(username: str) -> list[str]:
    if _current_username() == username:
        return []
    for program in ("sudo", "doas"):
        found = shutil.which(program)
        if found:
            return [found, "-u", username]
    raise RuntimeError("unable to find a suitable program to change privileges")


def _stdin_source(stdin):
    """Return the value for Popen's stdin and what, if anything, must be fed to it."""
    if stdin is None:
        return subprocess.DEVNULL, None
    if isinstance(stdin, (bytes, bytearray, memoryview)):
        return subprocess.PIPE, bytes(stdin)
    try:
        stdin.fileno()
    except (AttributeError, OSError, ValueError):
        return subprocess.PIPE, stdin
    return stdin, None


def _feed(pipe, source) -> None:
    try:
        if isinstance(source, bytes):
            pipe.write(source)
        else:
            while chunk := source.read(_CHUNK_SIZE):
                pipe.write(chunk)
    except BrokenPipeError:
        pass
    finally:
        try:
            pipe.close()
        except BrokenPipeError:
            pass


def _pump(func: OutputFunc, pipe, src: Stream, trusted: bool) -> bytes:
    try:
        return func(pipe, src, trusted)
    finally:
        pipe.close()


def execute(options: ExecOptions) -> ExecOutput:
    """Run the command, hand its output to the configured handlers and wait.

    Raises the handler's error (joined with any exit failure) if a handler
    fails, and ExecError if the command exits with a non-zero status.
    """
    command = list(options.command)
    if options.become:
        command = _become(options.become) + command
    if not command:
        raise ValueError("empty command")

    stdin, feed = _stdin_source(options.stdin)
    _log.log(TRACE, "exec: %s", " ".join(command))
    proc = subprocess.Popen(
        command,
        stdin=stdin,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        env=dict(options.env) if options.env is not None else None,
        cwd=options.dir or None,
    )

    with ThreadPoolExecutor(max_workers=3) as pool:
        if feed is not None:
            pool.submit(_feed, proc.stdin, feed)
        stdout_job = pool.submit(
            _pump, options.stdout or capture_output, proc.stdout, Stream.STDOUT, options.trusted
        )
        stderr_job = pool.submit(
            _pump, options.stderr or capture_output, proc.stderr, Stream.STDERR, options.trusted
        )

    returncode = proc.wait()
    failure = stdout_job.exception() or stderr_job.exception()
    if failure is not None:
        exit_error = ExecError(returncode, command) if returncode != 0 else None
        raise join(failure, exit_error) from failure

    output = ExecOutput(stdout=stdout_job.result() or b"", stderr=stderr_job.result() or b"")
    if returncode != 0:
        raise ExecError(returncode, command, output=output.stdout, stderr=output.stderr)
    return output