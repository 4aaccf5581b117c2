import io

import pytest

from expandkit.errors import UnknownCompressionMethodError
from expandkit.expand import KWAJ_MAGIC, SZ_MAGIC, SZDD_MAGIC, decompress


def _expand(data):
    writer = io.BytesIO()
    decompress(io.BytesIO(data), writer)
    return writer.getvalue()


@pytest.mark.parametrize(
    "magic, body",
    [
        (b"KWAJ\x88\xF0\x27\xD1", b"\x00" + (11).to_bytes(2, "big") + b"ok"),
        (b"SZDD\x88\xF0\x27\x33", b"A\x00" + (2).to_bytes(4, "little") + b"\x03ok"),
        (b"SZ \x88\xF0\x27\x33\xD1", (2).to_bytes(4, "little") + b"\x03ok"),
    ],
)
def test_magic_values_are_recognised(magic, body):
    writer = io.BytesIO()
    decompress(io.BytesIO(magic + body), writer)
    assert writer.getvalue() == b"ok"
    assert magic in (KWAJ_MAGIC, SZDD_MAGIC, SZ_MAGIC)


def test_kwaj_stored():
    payload = b"stored bytes"
    data = KWAJ_MAGIC + b"\x00" + (11).to_bytes(2, "big") + payload
    assert _expand(data) == payload


def test_szdd_stops_at_declared_size():
    literals = b"abcdefgh"
    data = SZDD_MAGIC + b"A\x00" + (4).to_bytes(4, "little") + b"\xff" + literals
    assert _expand(data) == literals[:4]


def test_sz_stops_at_declared_size():
    literals = b"xyzwxyzw"
    data = SZ_MAGIC + (3).to_bytes(4, "little") + b"\xff" + literals
    assert _expand(data) == literals[:3]


def test_szdd_unknown_method_letter():
    data = SZDD_MAGIC + b"B\x00" + (4).to_bytes(4, "little")
    with pytest.raises(UnknownCompressionMethodError):
        _expand(data)


def test_unknown_magic():
    with pytest.raises(UnknownCompressionMethodError):
        _expand(b"NOTMAGIC" + b"rest")


def test_short_input():
    with pytest.raises(EOFError):
        _expand(b"KWAJ")