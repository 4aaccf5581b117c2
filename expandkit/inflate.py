"""Decompression of DEFLATE streams (RFC 1951)."""

import io
import logging
from dataclasses import dataclass
from functools import lru_cache

from expandkit.bitreader import BitReader
from expandkit.errors import DecompressionError
from expandkit.huffman import HuffmanConstructionError, HuffmanTree
from expandkit.ring_buffer import RingBuffer

_log = logging.getLogger(__name__)

MAX_LOOKBACK_DISTANCE = 32768


@dataclass(frozen=True)
class _BaseAndExtraBits:
    base_count: int
    extra_bits: int

    def obtain_count(self, reader):
        """Read the extra bits (least significant first) and add them to the base."""
        return self.base_count + reader.read_bits(self.extra_bits)


_LENGTH_VALUES = tuple(_BaseAndExtraBits(base, extra) for base, extra in (
    (3, 0), (4, 0), (5, 0), (6, 0), (7, 0), (8, 0), (9, 0), (10, 0),
    (11, 1), (13, 1), (15, 1), (17, 1),
    (19, 2), (23, 2), (27, 2), (31, 2),
    (35, 3), (43, 3), (51, 3), (59, 3),
    (67, 4), (83, 4), (99, 4), (115, 4),
    (131, 5), (163, 5), (195, 5), (227, 5),
    (258, 0),
))

_DISTANCE_VALUES = tuple(_BaseAndExtraBits(base, extra) for base, extra in (
    (1, 0), (2, 0), (3, 0), (4, 0),
    (5, 1), (7, 1), (9, 2), (13, 2),
    (17, 3), (25, 3), (33, 4), (49, 4),
    (65, 5), (97, 5), (129, 6), (193, 6),
    (257, 7), (385, 7), (513, 8), (769, 8),
    (1025, 9), (1537, 9), (2049, 10), (3073, 10),
    (4097, 11), (6145, 11), (8193, 12), (12289, 12),
    (16385, 13), (24577, 13),
))

# Order in which the code lengths of the definition alphabet are stored.
_DEFINITION_CODE_LENGTH_ORDER = (
    16, 17, 18, 0, 8, 7, 9, 6, 10, 5, 11, 4, 12, 3, 13, 2, 14, 1, 15,
)

# Value alphabet: 0..255 literals, 256 end of block, 257.. back-references.
_END_OF_BLOCK = 256
_FIRST_LOOKBACK = 257
# Lookback symbols run one past the length table; anything later is invalid.
_LAST_LOOKBACK = _FIRST_LOOKBACK + len(_LENGTH_VALUES)

# Definition alphabet: 0..15 code lengths, then three repetition codes.
_COPY_PREVIOUS = 16
_SHORT_ZEROES = 17
_LONG_ZEROES = 18


class InflateError(DecompressionError):
    """The DEFLATE stream is malformed."""


@lru_cache(maxsize=None)
def _predefined_value_tree():
    lengths = [8] * 144 + [9] * 112 + [7] * 24 + [8] * 8
    return HuffmanTree.canonical(lengths)


@lru_cache(maxsize=None)
def _predefined_distance_tree():
    return HuffmanTree.canonical([5] * 32)


def _build_tree(lengths, what):
    try:
        return HuffmanTree.canonical(lengths)
    except (HuffmanConstructionError, ValueError) as error:
        raise InflateError(f"error building {what} tree") from error


def _decode(tree, reader, what):
    try:
        symbol = tree.decode_from_bit_reader(reader)
    except EOFError as error:
        raise InflateError(f"error reading {what}") from error
    if symbol is None:
        raise EOFError(f"stream ended before {what}")
    return symbol


class Inflater:
    """Decodes DEFLATE blocks from a binary stream, keeping the history window."""

    def __init__(self, stream, size=MAX_LOOKBACK_DISTANCE):
        self._reader = BitReader(stream, msb_to_lsb=False)
        self.lookback = RingBuffer(0x00, size)

    def inflate_block(self):
        """Decode one block; return its bytes and whether it was the final block."""
        reader = self._reader
        is_final = reader.read_bit_strict()
        _log.debug("is final" if is_final else "is not final")

        block_type = reader.read_bits(2)
        output = bytearray()
        if block_type == 0:
            _log.debug("block type: no compression")
            reader.drop_rest_of_unit()
            length = reader.read_u16_le()
            reader.read_u16_le()  # one's complement of the length, unchecked
            _log.debug("reading %d raw bytes", length)
            data = reader.read_exact(length)
            output += data
            self.lookback.extend(data)
        elif block_type in (1, 2):
            if block_type == 1:
                _log.debug("block type: fixed Huffman tables")
                value_tree = _predefined_value_tree()
                distance_tree = _predefined_distance_tree()
            else:
                _log.debug("block type: dynamic Huffman tables")
                value_tree, distance_tree = self._read_dynamic_trees()
            self._decode_compressed(value_tree, distance_tree, output)
        else:
            raise InflateError("reserved block type")
        return bytes(output), is_final

    def _read_dynamic_trees(self):
        reader = self._reader
        value_code_count = reader.read_bits(5) + 257
        distance_code_count = reader.read_bits(5) + 1
        length_code_count = reader.read_bits(4) + 4

        definition_lengths = [0] * len(_DEFINITION_CODE_LENGTH_ORDER)
        for index in _DEFINITION_CODE_LENGTH_ORDER[:length_code_count]:
            definition_lengths[index] = reader.read_bits(3)
        _log.debug("definition code lengths: %s", definition_lengths)
        definition_tree = _build_tree(definition_lengths, "definition")

        total = value_code_count + distance_code_count
        code_lengths = []
        previous = None
        while len(code_lengths) < total:
            try:
                symbol = definition_tree.decode_from_bit_reader(reader)
            except EOFError as error:
                raise InflateError("error decoding definition value") from error
            if symbol is None:
                raise InflateError("stream ended before definition value")

            if symbol < _COPY_PREVIOUS:
                code_lengths.append(symbol)
                previous = symbol
            elif symbol == _COPY_PREVIOUS:
                if previous is None:
                    raise InflateError("referring to yet-unset previous code length")
                code_lengths.extend([previous] * (reader.read_bits(2) + 3))
            elif symbol == _SHORT_ZEROES:
                code_lengths.extend([0] * (reader.read_bits(3) + 3))
            elif symbol == _LONG_ZEROES:
                code_lengths.extend([0] * (reader.read_bits(7) + 11))
            else:
                raise InflateError("invalid definition value returned from tree")

        value_tree = _build_tree(code_lengths[:value_code_count], "value")
        distance_tree = _build_tree(code_lengths[value_code_count:], "distance")
        return value_tree, distance_tree

    def _decode_compressed(self, value_tree, distance_tree, output):
        reader = self._reader
        while True:
            value = _decode(value_tree, reader, "value")
            if value == _END_OF_BLOCK:
                _log.debug("inflate value: end of block")
                return
            if value < _END_OF_BLOCK:
                self.lookback.push(value)
                output.append(value)
                continue
            if value >= _LAST_LOOKBACK:
                raise InflateError("invalid value returned from tree")
            length_index = value - _FIRST_LOOKBACK
            if length_index >= len(_LENGTH_VALUES):
                raise InflateError("invalid value returned from tree")
            length = _LENGTH_VALUES[length_index].obtain_count(reader)

            distance_index = _decode(distance_tree, reader, "distance")
            if distance_index >= len(_DISTANCE_VALUES):
                raise InflateError("invalid distance returned from tree")
            distance = _DISTANCE_VALUES[distance_index].obtain_count(reader)
            _log.debug("look back %d bytes for %d bytes", distance, length)
            output += bytes(self.lookback.recall(distance, length))

    def inflate_all(self):
        """Decode blocks up to and including the final one and return all the bytes."""
        output = bytearray()
        while True:
            data, is_final = self.inflate_block()
            output += data
            if is_final:
                return bytes(output)


def inflate(data):
    """Decompress a complete raw DEFLATE stream held in memory."""
    return Inflater(io.BytesIO(data), MAX_LOOKBACK_DISTANCE).inflate_all()