"""Huffman decoding trees, built from explicit codes or canonically from code lengths."""

from dataclasses import dataclass
from itertools import islice

from expandkit.errors import DecompressionError


class HuffmanConstructionError(DecompressionError):
    """A mapping of bit sequences to symbols does not describe a valid Huffman tree."""


class EmptySequenceError(HuffmanConstructionError):
    """One of the bit sequences is empty."""

    def __init__(self, message="mapping contains empty sequence"):
        super().__init__(message)


class PrefixFoundError(HuffmanConstructionError):
    """One bit sequence is a prefix of another."""

    def __init__(self, needle, haystack):
        super().__init__(f"sequence {list(needle)} is a prefix of sequence {list(haystack)}")
        self.needle = tuple(needle)
        self.haystack = tuple(haystack)


class UndefinedBranchesError(HuffmanConstructionError):
    """Some branch of the tree leads nowhere."""

    def __init__(self, message="some branches are not defined"):
        super().__init__(message)


@dataclass(frozen=True)
class _Leaf:
    value: object


def _freeze(node):
    """Turn a construction node into an immutable one, checking every branch is set."""
    if node is None:
        raise UndefinedBranchesError()
    if isinstance(node, _Leaf):
        return node
    return (_freeze(node[0]), _freeze(node[1]))


def _increment_bits(bits):
    """Add one to a big-endian list of bits, growing it if the carry falls out."""
    for i in reversed(range(len(bits))):
        if bits[i]:
            bits[i] = False
        else:
            bits[i] = True
            return
    bits.insert(0, True)


class HuffmanTree:
    """A binary tree mapping prefix-free bit sequences to symbols.

    Branches are pairs ``(false_child, true_child)``.
    """

    def __init__(self, sequence_to_symbol):
        mapping = {
            tuple(bool(bit) for bit in sequence): symbol
            for sequence, symbol in sequence_to_symbol.items()
        }
        sequences = sorted(mapping)

        if any(not sequence for sequence in sequences):
            raise EmptySequenceError()
        for needle in sequences:
            for haystack in sequences:
                if needle != haystack and haystack[:len(needle)] == needle:
                    raise PrefixFoundError(needle, haystack)

        root = [None, None]
        for sequence in sequences:
            node = root
            for bit in sequence[:-1]:
                child = node[bit]
                if child is None:
                    child = [None, None]
                    node[bit] = child
                node = child
            node[sequence[-1]] = _Leaf(mapping[sequence])

        self._root = _freeze(root)

    @classmethod
    def canonical(cls, symbol_lengths, symbols=None):
        """Build a canonical Huffman tree from per-symbol code lengths.

        ``symbols`` gives the symbol for each length in turn and defaults to
        0, 1, 2, ... A length of 0 means the symbol is not encodable.
        """
        lengths = list(symbol_lengths)
        if not any(length > 0 for length in lengths):
            raise ValueError("at least one symbol length must be greater than zero")
        if symbols is None:
            symbol_values = list(range(len(lengths)))
        else:
            symbol_values = list(islice(symbols, len(lengths)))
            if len(symbol_values) < len(lengths):
                raise ValueError(
                    f"{len(lengths)} symbol lengths but only {len(symbol_values)} symbols"
                )

        ordered = sorted(
            (length, index)
            for index, length in enumerate(lengths)
            if length > 0
        )

        sequence_to_symbol = {}
        current = []
        for position, (length, index) in enumerate(ordered):
            if position > 0:
                _increment_bits(current)
            current.extend([False] * (length - len(current)))
            sequence_to_symbol[tuple(current)] = symbol_values[index]

        return cls(sequence_to_symbol)

    def _step(self, node, bit):
        return node[1 if bit else 0]

    def decode_one(self, bits):
        """Decode one symbol from an iterable of bits; None if the bits run out first."""
        node = self._root
        for bit in bits:
            node = self._step(node, bit)
            if isinstance(node, _Leaf):
                return node.value
        return None

    def decode_from_bit_reader(self, reader):
        """Decode one symbol from a bit reader.

        Returns None if the reader is exhausted before the first bit and
        raises EOFError if it runs dry in the middle of a code.
        """
        node = self._root
        first = True
        while True:
            bit = reader.read_bit()
            if bit is None:
                if first:
                    return None
                raise EOFError("stream ended in the middle of a Huffman code")
            first = False
            node = self._step(node, bit)
            if isinstance(node, _Leaf):
                return node.value

    def __eq__(self, other):
        if not isinstance(other, HuffmanTree):
            return NotImplemented
        return self._root == other._root

    def __repr__(self):
        return f"HuffmanTree({self._root!r})"