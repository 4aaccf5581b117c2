import io

import pytest

from expandkit.bitreader import BitReader
from expandkit.errors import DecompressionError
from expandkit.huffman import (
    EmptySequenceError,
    HuffmanConstructionError,
    HuffmanTree,
    PrefixFoundError,
    UndefinedBranchesError,
)


def _manual_tree():
    return HuffmanTree({
        (True, False): 0,
        (False,): 1,
        (True, True, False): 2,
        (True, True, True): 3,
    })


def test_tree_construction():
    tree = HuffmanTree({
        (True, True): "A",
        (False,): "B",
        (True, False, True): "C",
        (True, False, False): "D",
    })
    assert tree.decode_one([True, True]) == "A"
    assert tree.decode_one([False]) == "B"
    assert tree.decode_one([True, False, True]) == "C"
    assert tree.decode_one([True, False, False]) == "D"


def test_canonical_tree_construction():
    canonical = HuffmanTree.canonical([2, 1, 3, 3])
    assert canonical == _manual_tree()


def test_canonical_with_custom_symbols():
    canonical = HuffmanTree.canonical([2, 1, 3, 3], "ABCD")
    manual = HuffmanTree({
        (True, False): "A",
        (False,): "B",
        (True, True, False): "C",
        (True, True, True): "D",
    })
    assert canonical == manual
    assert not (canonical == _manual_tree())


def test_canonical_zero_length_is_skipped():
    tree = HuffmanTree.canonical([0, 1, 1])
    assert tree.decode_one([False]) == 1
    assert tree.decode_one([True]) == 2


def test_canonical_all_zero_lengths_rejected():
    with pytest.raises(ValueError):
        HuffmanTree.canonical([0, 0, 0])


def test_canonical_too_few_symbols_rejected():
    with pytest.raises(ValueError):
        HuffmanTree.canonical([1, 1, 2], "AB")


def test_canonical_single_code_leaves_branch_undefined():
    with pytest.raises(UndefinedBranchesError):
        HuffmanTree.canonical([1])


def test_empty_sequence_rejected():
    with pytest.raises(EmptySequenceError):
        HuffmanTree({(): 0, (True,): 1})


def test_prefix_rejected():
    with pytest.raises(PrefixFoundError) as info:
        HuffmanTree({(False,): 1, (False, True): 2, (True,): 3})
    assert info.value.needle == (False,)
    assert info.value.haystack == (False, True)


def test_undefined_branch_rejected():
    with pytest.raises(UndefinedBranchesError):
        HuffmanTree({(False,): 1, (True, False): 2})


def test_construction_errors_share_base_class():
    with pytest.raises(HuffmanConstructionError):
        HuffmanTree({(True,): 1})
    assert issubclass(HuffmanConstructionError, DecompressionError)


def test_decode_one_returns_none_when_bits_run_out():
    assert _manual_tree().decode_one([True, True]) is None
    assert _manual_tree().decode_one([]) is None


def test_decode_one_consumes_only_needed_bits():
    bits = iter([True, False, False, True])
    tree = _manual_tree()
    assert tree.decode_one(bits) == 0
    assert tree.decode_one(bits) == 1
    assert list(bits) == [True]


def test_decode_from_bit_reader_sequence():
    # LSB-first bits: 0 | 1 0 | 1 1 1 | 0 | 0
    reader = BitReader(io.BytesIO(bytes([0x3A])))
    tree = _manual_tree()
    decoded = []
    while (symbol := tree.decode_from_bit_reader(reader)) is not None:
        decoded.append(symbol)
    assert decoded == [1, 0, 3, 1, 1]


def test_decode_from_bit_reader_eof_mid_code():
    reader = BitReader(io.BytesIO(bytes([0xFF])))
    tree = _manual_tree()
    assert tree.decode_from_bit_reader(reader) == 3
    assert tree.decode_from_bit_reader(reader) == 3
    with pytest.raises(EOFError):
        tree.decode_from_bit_reader(reader)


def test_decode_from_empty_reader_returns_none():
    reader = BitReader(io.BytesIO(b""))
    assert _manual_tree().decode_from_bit_reader(reader) is None