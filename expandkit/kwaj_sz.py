"""Decompression of the LZSS variant stored inside KWAJ files."""

from expandkit.ring_buffer import RingBuffer

RING_BUFFER_SIZE = 4096


def _read_exact(reader, count):
    data = bytearray()
    while len(data) < count:
        chunk = reader.read(count - len(data))
        if not chunk:
            raise EOFError(f"expected {count} bytes, stream ended after {len(data)}")
        data += chunk
    return bytes(data)


def decompress_kwaj_sz(reader, writer, szdd=False):
    """Decompress LZSS data until the reader is exhausted.

    The history window starts 16 bytes before its end if ``szdd`` is true and
    18 bytes before its end otherwise. Whatever was decoded before an error is
    still written.
    """
    output = bytearray()
    try:
        _decode_into(reader, output, szdd)
    finally:
        writer.write(bytes(output))


def _decode_into(reader, output, szdd):
    ring = RingBuffer(0x20, RING_BUFFER_SIZE)
    ring.position = RING_BUFFER_SIZE - (16 if szdd else 18)

    while True:
        control = reader.read(1)
        if not control:
            return
        control_byte = control[0]

        for bit in range(8):
            if control_byte & (1 << bit):
                byte = _read_exact(reader, 1)[0]
                ring.push(byte)
                output.append(byte)
            else:
                # low byte: position bits 0-7; high byte: position bits 8-11, length
                low, high = _read_exact(reader, 2)
                match_position = low | ((high & 0xF0) << 4)
                match_length = high & 0x0F
                for _ in range(match_length):
                    byte = ring[match_position]
                    match_position = (match_position + 1) % RING_BUFFER_SIZE
                    output.append(byte)
                    ring.push(byte)