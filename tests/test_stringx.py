import os
import socket

import pytest

from toolbelt.stringx import interpolate, sanitize, split_lines


def test_sanitize_keeps_printable_text():
    text = "hello world\n~!{}"
    assert sanitize(text) == text


def test_sanitize_replaces_control_characters():
    assert sanitize("a\tb\rc") == "a_b_c"


def test_sanitize_bytes():
    assert sanitize(b"\x00ok\x7f\xff") == b"_ok__"


def test_sanitize_multibyte_character_becomes_one_underscore_per_byte():
    assert sanitize("é") == "__"


def test_sanitize_all_bytes_invariant():
    data = bytes(range(256))
    result = sanitize(data)
    assert len(result) == len(data)
    assert all(b == 0x0A or 0x20 <= b <= 0x7E for b in result)
    assert sanitize(result) == result


def test_sanitize_does_not_mutate_bytearray():
    data = bytearray(b"\x01abc")
    result = sanitize(data)
    assert data == bytearray(b"\x01abc")
    assert result[1:] == b"abc"


@pytest.mark.parametrize(
    "text, expected",
    [
        ("", [""]),
        ("one\r\ntwo\n\n", ["one", "two"]),
        ("a\n\nb", ["a", "", "b"]),
        ("single", ["single"]),
    ],
)
def test_split_lines(text, expected):
    assert split_lines(text) == expected


def test_interpolate_host_and_unknown_placeholder():
    result = interpolate("{host}:{unknown}")
    assert result == socket.gethostname() + ":{unknown}"


def test_interpolate_plain_text_unchanged():
    assert interpolate("plain text") == "plain text"


def test_interpolate_home_is_absolute():
    result = interpolate("{home}")
    assert "{home}" not in result
    assert os.path.isabs(result)


def test_interpolate_is_single_pass(monkeypatch):
    monkeypatch.setattr(socket, "gethostname", lambda: "{user}")
    assert interpolate("{host}") == "{user}"