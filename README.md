# toolbelt

Small helpers for command-line programs, using only the standard library.

## Modules

- `toolbelt.stringx`: `sanitize` replaces every byte outside printable ASCII
  (newline excepted) with `_`, for `str` and `bytes`. `split_lines` normalises
  CRLF, drops trailing newlines and splits. `interpolate` replaces `{host}`,
  `{user}` and `{home}`.
- `toolbelt.errorx`: `join(*errors)` combines exceptions into a `JoinError`
  (or returns `None` when all are `None`); `JoinError.matches(target)` checks
  the held errors and their causes; `defer(fn, error)` calls a cleanup
  function and joins whatever it raises with `error`.
- `toolbelt.buffer`: `BufferReader` and `BufferWriter`, seekable in-memory
  byte streams; `BufferReader.stat()` returns a `FileInfo`.
- `toolbelt.codec`: `Encoding` (`STD`, `URL`, `RAW_STD`, `RAW_URL`), a
  readable and seekable base64 `Decoder`, and an `Encoder` that collects
  bytes and writes them as base64 lines on `close()` or on leaving a `with`
  block.
- `toolbelt.casts`: `checked_cast(n, kind)` raises `OutOfRangeError` when `n`
  does not fit an `IntKind` (`INT64`, `UINT32`, `UINT64`); `cast` exits the
  program instead. `UINT64` is capped at the 32-bit unsigned maximum.
- `toolbelt.iofs`: `copy(dst, src)` between paths, file objects and
  `zipfile.Path` entries, checking the size when the source announces one
  (`InvalidSizeError`); also `read_file`, `write_file`, `move_file`,
  `read_full`, `exists`, `expand`, `seek` (`InvalidOffsetError`), `remove`
  and `mkdir_temp`.
- `toolbelt.logs`: `SanitizedTextFormatter` (`level | message` per line,
  optionally coloured) and `SanitizedJSONFormatter`, plus `parse_level`
  (adds `trace` and `panic` levels), `LogLevel`, `discard_logger`,
  `with_suppress` and `get_field`.
- `toolbelt.output`: handlers for a child's output streams:
  `capture_output`, `byte_output`, `text_output`, `log_output` and
  `unsafe_byte_output`. Untrusted output with disallowed bytes raises
  `InvalidOutputError`.
- `toolbelt.process`: `execute(ExecOptions(...))` runs a command, optionally
  as another user through `sudo` or `doas`, and returns an `ExecOutput`.
  A non-zero exit raises `ExecError`, whose message is the collected stderr.
- `toolbelt.sandbox`: `execute(Options(...))` runs a command inside a
  `bwrap` (bubblewrap) sandbox with chosen read-only, read-write and device
  binds; `is_sandboxed`, `compatible` and `configure` (switches logging to
  sanitised JSON inside the sandbox).
- `toolbelt.flags`: option values `Path` (with `PathState` checks such as
  `MUST_EXIST` or `MUST_BE_DIR`), `PathSlice` and `URL`, and `set_fallback`
  for flags the user did not set.
- `toolbelt.cli`: `run` wraps a command so exceptions are logged and exit
  with status 1; `validate_args_length` and `ensure_unprivileged`.

## Installation

```
pip install .
```

## Examples

```python
import io

from toolbelt.codec import Decoder, Encoder, Encoding
from toolbelt.stringx import sanitize

out = io.BytesIO()
with Encoder(Encoding.STD, out, 76) as enc:
    enc.write(b"hello world")
print(out.getvalue())          # b'aGVsbG8gd29ybGQ=\n'

dec = Decoder(Encoding.STD, io.BytesIO(out.getvalue()))
print(dec.read(5))             # b'hello'

print(sanitize("bell\x07"))    # 'bell_'
```

```python
from toolbelt.process import ExecOptions, execute

result = execute(ExecOptions(command=["echo", "hi"]))
print(result.stdout)           # b'hi\n'
```

## What it does not do

This is a library only: it installs no command of its own. The sandbox
needs the `bwrap` program and Linux; it does not create sandboxes by
any other means.

## Running the tests

```
pip install .[test]
pytest
```