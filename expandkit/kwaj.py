"""Decompression of KWAJ files, the format of the MS-DOS/Windows 3 era EXPAND tool."""

from expandkit.errors import (
    DataOffsetWithinHeaderError,
    DecompressionError,
    UnknownCompressionMethodError,
)
from expandkit.kwaj_sz import decompress_kwaj_sz
from expandkit.lzh import decompress_lzh

# magic (8 bytes), compression type (1 byte), data offset (2 bytes)
_HEADER_ALREADY_READ = 11
_CHUNK_SIZE = 4096


def _read_exact(reader, count):
    data = bytearray()
    while len(data) < count:
        chunk = reader.read(count - len(data))
        if not chunk:
            raise EOFError(f"expected {count} bytes, stream ended after {len(data)}")
        data += chunk
    return bytes(data)


def _copy(reader, writer, mask):
    while True:
        chunk = reader.read(_CHUNK_SIZE)
        if not chunk:
            return
        if mask:
            chunk = bytes(byte ^ 0xFF for byte in chunk)
        writer.write(chunk)


def decompress_kwaj(reader, writer):
    """Decompress a KWAJ file whose 8-byte magic has already been consumed."""
    compression_type = _read_exact(reader, 1)[0]
    data_offset = int.from_bytes(_read_exact(reader, 2), "big")
    if data_offset < _HEADER_ALREADY_READ:
        raise DataOffsetWithinHeaderError()
    _read_exact(reader, data_offset - _HEADER_ALREADY_READ)

    if compression_type in (0x00, 0x01):
        # stored; type 1 additionally masks every byte with 0xFF
        _copy(reader, writer, compression_type == 0x01)
    elif compression_type == 0x02:
        decompress_kwaj_sz(reader, writer, False)
    elif compression_type == 0x03:
        decompress_lzh(reader, writer)
    elif compression_type == 0x04:
        raise DecompressionError("MS-ZIP compressed KWAJ data cannot be expanded")
    else:
        raise UnknownCompressionMethodError()