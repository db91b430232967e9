import base64
import io
import os

import pytest

from toolbelt.codec import Decoder, Encoder, Encoding


def _encode(encoding, data, width):
    out = io.BytesIO()
    encoder = Encoder(encoding, out, width)
    encoder.write(data)
    encoder.close()
    return out.getvalue()


def test_encoder_standard_vector():
    assert _encode(Encoding.STD, b"hello", 76) == b"aGVsbG8=\n"


def test_raw_url_alphabet():
    assert Encoding.RAW_URL.encode(b"\xfb\xff") == b"-_8"


def test_encoder_wraps_lines():
    data = bytes(range(100))
    lines = _encode(Encoding.STD, data, 8).splitlines()
    assert len(lines[0]) == 8
    assert all(len(line) <= 8 for line in lines)
    assert base64.b64decode(b"".join(lines)) == data


def test_encoder_empty_writes_nothing():
    assert _encode(Encoding.STD, b"", 76) == b""


def test_encoder_width_too_small():
    with pytest.raises(ValueError, match="width"):
        Encoder(Encoding.STD, io.BytesIO(), 3)


def test_encoder_seek_overwrites():
    out = io.BytesIO()
    encoder = Encoder(Encoding.STD, out, 76)
    encoder.write(b"hello")
    encoder.seek(0, os.SEEK_SET)
    encoder.write(b"J")
    encoder.close()
    assert Encoding.STD.decode(out.getvalue()) == b"Jello"


def test_encoder_context_manager_closes():
    out = io.BytesIO()
    with Encoder(Encoding.URL, out, 64) as encoder:
        encoder.write(b"data")
    assert Encoding.URL.decode(out.getvalue()) == b"data"


def test_encoder_context_manager_skips_on_error():
    out = io.BytesIO()
    with pytest.raises(RuntimeError):
        with Encoder(Encoding.STD, out, 64) as encoder:
            encoder.write(b"data")
            raise RuntimeError("stop")
    assert out.getvalue() == b""


def test_encoder_short_write_raises():
    class Short:
        def write(self, data):
            return len(data) - 1

    encoder = Encoder(Encoding.STD, Short(), 76)
    encoder.write(b"abc")
    with pytest.raises(OSError, match="invalid write"):
        encoder.close()


@pytest.mark.parametrize("encoding", list(Encoding))
@pytest.mark.parametrize("data", [b"", b"x", b"\x00\xff\xfe\xfb", bytes(range(256))])
def test_round_trip(encoding, data):
    encoded = _encode(encoding, data, 20)
    decoder = Decoder(encoding, io.BytesIO(encoded))
    assert decoder.read() == data


def test_raw_has_no_padding():
    assert b"=" not in _encode(Encoding.RAW_STD, b"hello", 76)


def test_decoder_ignores_newlines():
    decoder = Decoder(Encoding.STD, io.BytesIO(b"aGVs\r\nbG8=\n"))
    assert decoder.read() == b"hello"


def test_decoder_seek_stat_and_name():
    decoder = Decoder(Encoding.STD, io.BytesIO(b"aGVsbG8="))
    assert decoder.stat().size == len(b"hello")
    assert decoder.name == "base64decoder"
    decoder.read(2)
    assert decoder.seek(1, os.SEEK_SET) == 1
    assert decoder.read(2) == b"el"
    decoder.sync()
    assert decoder.read() == b"lo"


@pytest.mark.parametrize(
    "encoding, text",
    [
        (Encoding.STD, b"aGVsbG8"),
        (Encoding.STD, b"aGV*bG8="),
        (Encoding.RAW_STD, b"aGVsbG8="),
        (Encoding.RAW_STD, b"a"),
    ],
)
def test_decoder_rejects_invalid(encoding, text):
    with pytest.raises(ValueError):
        Decoder(encoding, io.BytesIO(text))