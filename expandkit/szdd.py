"""Decompression of the LZSS-based "SZDD" and "SZ" formats."""

import logging

from expandkit.errors import UnknownCompressionMethodError

_log = logging.getLogger(__name__)

WINDOW_SIZE = 4096


def _read_exact(reader, count):
    data = bytearray()
    while len(data) < count:
        chunk = reader.read(count - len(data))
        if not chunk:
            raise EOFError(f"expected {count} bytes, stream ended after {len(data)}")
        data += chunk
    return bytes(data)


def decompress_szdd(reader, writer):
    """Decompress SZDD data whose 8-byte magic has already been consumed."""
    header = _read_exact(reader, 6)
    if header[0] != ord("A"):
        raise UnknownCompressionMethodError()
    decompressed_size = int.from_bytes(header[2:6], "little")
    _decompress_sz_generic(reader, writer, decompressed_size, 16)


def decompress_sz(reader, writer):
    """Decompress SZ data whose 8-byte magic has already been consumed."""
    header = _read_exact(reader, 4)
    decompressed_size = int.from_bytes(header, "little")
    _decompress_sz_generic(reader, writer, decompressed_size, 18)


def _decompress_sz_generic(reader, writer, decompressed_size, initial_position_from_end):
    output = bytearray()
    try:
        _decode_into(reader, output, decompressed_size, initial_position_from_end)
    finally:
        writer.write(bytes(output))


def _decode_into(reader, output, decompressed_size, initial_position_from_end):
    window = bytearray(b" " * WINDOW_SIZE)
    pos = WINDOW_SIZE - initial_position_from_end

    while True:
        control = reader.read(1)
        if not control:
            return
        control_byte = control[0]
        _log.debug("control bits: 0b%s", "".join(
            "1" if control_byte & (1 << i) else "0" for i in range(8)
        ))

        for shift in range(8):
            if control_byte & (1 << shift):
                byte = _read_exact(reader, 1)[0]
                output.append(byte)
                if len(output) == decompressed_size:
                    return
                window[pos] = byte
                pos = (pos + 1) % WINDOW_SIZE
            else:
                low, high = _read_exact(reader, 2)
                match_position = low | ((high & 0xF0) << 4)
                match_length = (high & 0x0F) + 3
                _log.debug("match at %d for %d", match_position, match_length)
                for _ in range(match_length):
                    byte = window[match_position]
                    match_position = (match_position + 1) % WINDOW_SIZE
                    output.append(byte)
                    if len(output) == decompressed_size:
                        return
                    window[pos] = byte
                    pos = (pos + 1) % WINDOW_SIZE