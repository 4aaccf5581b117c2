"""Detection and expansion of the compressed file formats written by EXPAND-era tools."""

from expandkit.errors import UnknownCompressionMethodError
from expandkit.kwaj import decompress_kwaj
from expandkit.szdd import decompress_sz, decompress_szdd

KWAJ_MAGIC = b"KWAJ\x88\xF0\x27\xD1"
SZDD_MAGIC = b"SZDD\x88\xF0\x27\x33"
SZ_MAGIC = b"SZ \x88\xF0\x27\x33\xD1"

_DECOMPRESSORS = {
    KWAJ_MAGIC: decompress_kwaj,
    SZDD_MAGIC: decompress_szdd,
    SZ_MAGIC: decompress_sz,
}


def _read_exact(reader, count):
    data = bytearray()
    while len(data) < count:
        chunk = reader.read(count - len(data))
        if not chunk:
            raise EOFError(f"expected {count} bytes, stream ended after {len(data)}")
        data += chunk
    return bytes(data)


def decompress(reader, writer):
    """Read a compressed file from ``reader`` and write its expanded contents to ``writer``."""
    magic = _read_exact(reader, 8)
    decompressor = _DECOMPRESSORS.get(magic)
    if decompressor is None:
        raise UnknownCompressionMethodError()
    decompressor(reader, writer)