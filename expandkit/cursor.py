"""Sequential reading of fixed-layout fields from an in-memory byte buffer."""


class ByteCursor:
    """A read position within a byte buffer that advances as fields are read."""

    def __init__(self, data, position=0):
        self.data = bytes(data)
        if not 0 <= position <= len(self.data):
            raise ValueError(f"position {position} outside buffer of {len(self.data)} bytes")
        self.position = position

    def read_bytes(self, count):
        """Return the next ``count`` bytes."""
        if count < 0:
            raise ValueError(f"byte count {count} is negative")
        end = self.position + count
        if end > len(self.data):
            raise IndexError(
                f"reading {count} bytes at {self.position} overruns buffer of {len(self.data)} bytes"
            )
        chunk = self.data[self.position:end]
        self.position = end
        return chunk

    def read_u8(self):
        return self.read_bytes(1)[0]

    def read_i8(self):
        return int.from_bytes(self.read_bytes(1), "little", signed=True)

    def read_u16(self, big_endian=False):
        return int.from_bytes(self.read_bytes(2), "big" if big_endian else "little")

    def read_u32(self, big_endian=False):
        return int.from_bytes(self.read_bytes(4), "big" if big_endian else "little")