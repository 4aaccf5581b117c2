"""Bit-level readers over byte streams."""


class BitReader:
    """Reads bits from a binary stream in 8-bit units.

    Within a unit, bits are taken from the least significant end first unless
    ``msb_to_lsb`` is true. Multi-bit values read with the LSB order place the
    first bit read at the lowest position; with the MSB order, the first bit
    read ends up highest.
    """

    _UNIT_BITS = 8

    def __init__(self, stream, msb_to_lsb=False):
        self._stream = stream
        self.msb_to_lsb = msb_to_lsb
        self._unit = 0
        self._bit_index = 0
        self.total_bits_read = 0

    def _read_stream_exact(self, count):
        data = bytearray()
        while len(data) < count:
            chunk = self._stream.read(count - len(data))
            if not chunk:
                raise EOFError(f"expected {count} bytes, stream ended after {len(data)}")
            data += chunk
        return bytes(data)

    def _load_unit(self):
        """Pull in the next unit; return False on a clean end of stream."""
        unit_bytes = (self._UNIT_BITS + 7) // 8
        data = bytearray()
        while len(data) < unit_bytes:
            chunk = self._stream.read(unit_bytes - len(data))
            if not chunk:
                if not data:
                    return False
                raise EOFError("stream ended in the middle of a unit")
            data += chunk
        self._unit = int.from_bytes(data, "little")
        return True

    def read_bit(self):
        """Return the next bit, or None if the stream ends at a unit boundary."""
        if self._bit_index == 0 and not self._load_unit():
            return None
        if self.msb_to_lsb:
            shift = self._UNIT_BITS - 1 - self._bit_index
        else:
            shift = self._bit_index
        bit = bool((self._unit >> shift) & 1)
        self._bit_index += 1
        if self._bit_index == self._UNIT_BITS:
            self.drop_rest_of_unit()
        self.total_bits_read += 1
        return bit

    def read_bit_strict(self):
        """Return the next bit, raising EOFError at the end of the stream."""
        bit = self.read_bit()
        if bit is None:
            raise EOFError("unexpected end of stream")
        return bit

    def read_bits(self, count):
        """Read ``count`` bits and assemble them into an unsigned integer."""
        if count < 0:
            raise ValueError(f"bit count {count} is negative")
        value = 0
        for i in range(count):
            bit = self.read_bit_strict()
            if self.msb_to_lsb:
                value = (value << 1) | int(bit)
            elif bit:
                value |= 1 << i
        return value

    def drop_rest_of_unit(self):
        """Skip the unread bits of the current unit."""
        if self._bit_index > 0:
            self.total_bits_read += self._UNIT_BITS - self._bit_index
        self._bit_index = 0
        self._unit = 0

    def read_u8(self):
        if self._bit_index == 0:
            byte = self._read_stream_exact(1)[0]
            self.total_bits_read += 8
            return byte
        return self.read_bits(8)

    def read_exact(self, count):
        """Read ``count`` bytes, honouring the current bit position."""
        return bytes(self.read_u8() for _ in range(count))

    def read_u16_le(self):
        return int.from_bytes(self.read_exact(2), "little")

    def read_u16_be(self):
        return int.from_bytes(self.read_exact(2), "big")

    def read_u24_le(self):
        return int.from_bytes(self.read_exact(3), "little")


class BitReader16Le(BitReader):
    """Reads bits from a binary stream in little-endian 16-bit units."""

    _UNIT_BITS = 16

    def read_u8(self):
        return self.read_bits(8)

    def read_u16(self):
        if self._bit_index == 0:
            value = int.from_bytes(self._read_stream_exact(2), "little")
            self.total_bits_read += 16
            return value
        return self.read_bits(16)