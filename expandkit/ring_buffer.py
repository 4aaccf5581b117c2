"""A fixed-size circular buffer used as the history window of LZ-style decoders."""


class RingBuffer:
    """A circular buffer of fixed size with a write position that wraps around."""

    def __init__(self, initial_value, size):
        if size < 0:
            raise ValueError(f"size {size} is negative")
        self._buffer = [initial_value] * size
        self.position = 0

    def __len__(self):
        return len(self._buffer)

    def _check_index(self, index):
        if not 0 <= index < len(self._buffer):
            raise IndexError(f"position {index} outside buffer of size {len(self._buffer)}")

    def __getitem__(self, index):
        self._check_index(index)
        return self._buffer[index]

    def __setitem__(self, index, value):
        self._check_index(index)
        self._buffer[index] = value

    def push(self, value):
        """Store a value at the current position and advance it."""
        self._buffer[self.position] = value
        self.position = (self.position + 1) % len(self._buffer)

    def extend(self, values):
        """Push every value of an iterable in turn."""
        for value in values:
            self.push(value)

    def recall(self, lookback, length):
        """Copy ``length`` values starting ``lookback`` places back, pushing each copy.

        The copied values are returned as a list; overlapping copies repeat the
        recently pushed values as LZ77 back-references do.
        """
        size = len(self._buffer)
        if lookback > self.position:
            index = size - (lookback - self.position)
        else:
            index = self.position - lookback
        if index < 0:
            raise ValueError(f"lookback {lookback} reaches beyond buffer of size {size}")
        recalled = []
        for _ in range(length):
            value = self._buffer[index]
            recalled.append(value)
            self.push(value)
            index = (index + 1) % size
        return recalled