"""Running the current program again inside a bubblewrap sandbox."""

from __future__ import annotations

import logging
import os
import shutil
import sys
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Mapping, Sequence

from toolbelt import iofs
from toolbelt.logs import TRACE, SanitizedJSONFormatter
from toolbelt.output import OutputFunc
from toolbelt.process import ExecOptions, ExecOutput
from toolbelt.process import execute as _process_execute

_log = logging.getLogger(__name__)

SHARE_NET = 1

DISABLE_ENV = "GO_SANDBOX_DISABLE"
ACTIVE_ENV = "GO_SANDBOX_ACTIVE"
DEBUG_ENV = "GO_SANDBOX_DEBUG"

_SYSTEM_BINDS = (
    "/etc/passwd",
    "/etc/hosts",
    "/etc/resolv.conf",
    "/etc/nsswitch.conf",
    "/bin",
    "/usr",
    "/lib",
    "/lib32",
    "/lib64",
)


@dataclass
class Options:
    """What to run in the sandbox and what to expose to it.

    ``ro`` and ``rw`` are bound read-only and read-write when they exist;
    ``dev`` paths are bound as devices when they exist. ``share`` is a set
    of SHARE_* bits. ``env`` of None inherits the current environment.
    """

    command: Sequence[str]
    env: Mapping[str, str] | None = None
    ro: Sequence[str] = field(default_factory=list)
    rw: Sequence[str] = field(default_factory=list)
    dev: Sequence[str] = field(default_factory=list)
    proc: bool = False
    share: int = 0
    stdin: bytes | BinaryIO | None = None
    stdout: OutputFunc | None = None
    stderr: OutputFunc | None = None


def _program_path() -> str:
    argv0 = sys.argv[0]
    found = shutil.which(argv0)
    if found is None or found == argv0:
        return os.path.abspath(argv0)
    return found


def _expand(path: str) -> str:
    path = iofs.expand(path)
    home = str(Path.home()).rstrip(os.sep)
    if path == home or path == os.sep:
        raise ValueError(f"sharing {home} or {os.sep} is not allowed")
    return path


def execute(options: Options) -> ExecOutput:
    """Run ``options.command`` inside a fresh bubblewrap sandbox."""
    program = _program_path()
    # The working directory is recreated as an empty tmpfs so that relative
    # paths keep resolving inside the sandbox.
    cwd = os.getcwd()

    args = [
        "bwrap",
        "--new-session",
        "--die-with-parent",
        "--unshare-user",
        "--unshare-ipc",
        "--unshare-pid",
        "--unshare-uts",
        "--unshare-cgroup",
        "--cap-drop", "ALL",
        "--dev", "/dev",
        "--tmpfs", "/tmp",
        "--tmpfs", cwd,
    ]
    for path in _SYSTEM_BINDS:
        args += ["--ro-bind-try", path, path]
    args += ["--ro-bind", program, program]

    if not options.share & SHARE_NET:
        args.append("--unshare-net")

    for path in filter(None, options.ro):
        path = _expand(path)
        args += ["--ro-bind-try", path, path]

    for path in filter(None, options.rw):
        path = _expand(path)
        args += ["--bind-try", path, path]

    for path in filter(None, options.dev):
        path = _expand(path)
        if iofs.exists(path):
            args += ["--dev-bind", path, path]

    if options.proc:
        args += ["--proc", "/proc"]

    args += list(options.command)

    env = dict(os.environ if options.env is None else options.env)
    env[ACTIVE_ENV] = "1"

    _log.log(TRACE, "sandbox: starting subprocess...")
    return _process_execute(
        ExecOptions(
            command=args,
            env=env,
            stdin=options.stdin,
            stdout=options.stdout,
            stderr=options.stderr,
        )
    )


def is_sandboxed() -> bool:
    """Whether this process runs inside the sandbox."""
    return os.environ.get(ACTIVE_ENV) == "1"


def await_debugger() -> None:
    """Block until a debugger sets ``attached`` to true."""
    _log.info("waiting for debugger to change `attached`...")
    attached = False
    while not attached:
        time.sleep(1)


def compatible() -> bool:
    """Whether sandboxing can be used here: Linux, not in a container, not disabled."""
    try:
        in_docker = iofs.exists("/.dockerenv")
        in_podman = iofs.exists("/run/.containerenv")
    except OSError:
        return True
    return (
        os.environ.get(DISABLE_ENV) != "1"
        and sys.platform.startswith("linux")
        and not in_docker
        and not in_podman
    )


def configure() -> bool:
    """Inside the sandbox, log as sanitised JSON for the parent to restyle.

    Returns whether the sandboxed configuration was applied.
    """
    if not (compatible() and is_sandboxed()):
        return False
    root = logging.getLogger()
    if not root.handlers:
        root.addHandler(logging.StreamHandler(sys.stderr))
    for handler in root.handlers:
        handler.setFormatter(SanitizedJSONFormatter())
    if os.environ.get(DEBUG_ENV) == "1":
        await_debugger()
    return True