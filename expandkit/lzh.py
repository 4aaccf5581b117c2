"""Decompression of the Lempel-Ziv plus Huffman scheme used in KWAJ files."""

import logging

from expandkit.bitreader import BitReader
from expandkit.errors import (
    RelativeValueUnderflowError,
    UnexpectedHuffmanSymbolCountError,
    UnknownHuffmanTreeEncodingError,
)
from expandkit.huffman import HuffmanTree
from expandkit.ring_buffer import RingBuffer

_log = logging.getLogger(__name__)

RING_BUFFER_SIZE = 4096

_FIXED_LENGTHS = {16: 4, 32: 5, 64: 6, 256: 8}


def _read_exact(reader, count):
    data = bytearray()
    while len(data) < count:
        chunk = reader.read(count - len(data))
        if not chunk:
            raise EOFError(f"expected {count} bytes, stream ended after {len(data)}")
        data += chunk
    return bytes(data)


def _read_symbol_lengths(reader, symbol_count, encoding_type):
    if encoding_type == 0:
        # every symbol has the same length, log2 of the symbol count
        if symbol_count not in _FIXED_LENGTHS:
            raise UnexpectedHuffmanSymbolCountError(symbol_count)
        return [_FIXED_LENGTHS[symbol_count]] * symbol_count

    if encoding_type == 1:
        # run-length encoded: 0 = same, 10 = previous + 1, 11 = explicit
        lengths = [reader.read_bits(4)]
        for _ in range(1, symbol_count):
            previous = lengths[-1]
            if not reader.read_bit_strict():
                lengths.append(previous)
            elif not reader.read_bit_strict():
                lengths.append(previous + 1)
            else:
                lengths.append(reader.read_bits(4))
        return lengths

    if encoding_type == 2:
        # delta encoded: selector 0..2 adds selector - 1, 3 is explicit
        lengths = [reader.read_bits(4)]
        for _ in range(1, symbol_count):
            selector = reader.read_bits(2)
            if selector == 3:
                lengths.append(reader.read_bits(4))
                continue
            previous = lengths[-1]
            if previous == 0 and selector == 0:
                raise RelativeValueUnderflowError()
            lengths.append(previous + selector - 1)
        return lengths

    if encoding_type == 3:
        return [reader.read_bits(4) for _ in range(symbol_count)]

    raise UnknownHuffmanTreeEncodingError(encoding_type)


def create_huffman_tree(reader, symbol_count, encoding_type):
    """Read the code lengths of a table from an MSB-first bit reader and build its tree."""
    lengths = _read_symbol_lengths(reader, symbol_count, encoding_type)
    return HuffmanTree.canonical(lengths)


def decompress_lzh(reader, writer):
    """Decompress LZH data positioned at its three encoding-type bytes.

    The format has no end marker: decoding stops when the bits run out.
    Whatever was decoded is written even if an error occurs.
    """
    encoding_types = _read_exact(reader, 3)
    match_run_encoding = encoding_types[0] >> 4
    match_run_after_short_encoding = encoding_types[0] & 0x0F
    literal_run_encoding = encoding_types[1] >> 4
    offset_tops_encoding = encoding_types[1] & 0x0F
    literals_encoding = encoding_types[2] >> 4

    bits = BitReader(reader, msb_to_lsb=True)
    match_runs = create_huffman_tree(bits, 16, match_run_encoding)
    match_runs_after_short = create_huffman_tree(bits, 16, match_run_after_short_encoding)
    literal_runs = create_huffman_tree(bits, 32, literal_run_encoding)
    offset_tops = create_huffman_tree(bits, 64, offset_tops_encoding)
    literals = create_huffman_tree(bits, 256, literals_encoding)

    output = bytearray()
    try:
        _decode_into(
            bits, output, match_runs, match_runs_after_short,
            literal_runs, offset_tops, literals,
        )
    finally:
        writer.write(bytes(output))


def _decode_into(bits, output, match_runs, match_runs_after_short,
                 literal_runs, offset_tops, literals):
    ring = RingBuffer(0x20, RING_BUFFER_SIZE)
    ring.position = RING_BUFFER_SIZE - 17
    current = match_runs
    try:
        while True:
            code = current.decode_from_bit_reader(bits)
            if code is None:
                return

            if code > 0:
                match_length = code + 2
                offset_top = offset_tops.decode_from_bit_reader(bits)
                if offset_top is None:
                    return
                offset = (offset_top << 6) | bits.read_bits(6)
                _log.debug("match of %d bytes at offset %d", match_length, offset)
                match_offset = (ring.position + RING_BUFFER_SIZE - offset) % RING_BUFFER_SIZE
                for _ in range(match_length):
                    byte = ring[match_offset]
                    output.append(byte)
                    ring.push(byte)
                    match_offset = (match_offset + 1) % RING_BUFFER_SIZE
                current = match_runs
            else:
                literal_length = literal_runs.decode_from_bit_reader(bits)
                if literal_length is None:
                    return
                _log.debug("run of %d literals", literal_length + 1)
                if literal_length != 31:
                    current = match_runs_after_short
                for _ in range(literal_length + 1):
                    byte = literals.decode_from_bit_reader(bits)
                    if byte is None:
                        return
                    output.append(byte)
                    ring.push(byte)
    except EOFError:
        # running out of bits midway is the normal way for the data to end
        return