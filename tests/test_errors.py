import pytest

from expandkit.errors import (
    DataOffsetWithinHeaderError,
    DecompressionError,
    RelativeValueUnderflowError,
    UnexpectedHuffmanSymbolCountError,
    UnknownCompressionMethodError,
    UnknownHuffmanTreeEncodingError,
)


def test_symbol_count_is_kept():
    error = UnexpectedHuffmanSymbolCountError(17)
    assert isinstance(error, DecompressionError)
    assert error.symbol_count == 17
    assert "17" in str(error)


def test_encoding_is_kept():
    error = UnknownHuffmanTreeEncodingError(9)
    assert isinstance(error, DecompressionError)
    assert error.encoding == 9
    assert "9" in str(error)


@pytest.mark.parametrize(
    "error_class",
    [
        UnknownCompressionMethodError,
        DataOffsetWithinHeaderError,
        RelativeValueUnderflowError,
    ],
)
def test_plain_errors_are_decompression_errors(error_class):
    with pytest.raises(DecompressionError) as info:
        raise error_class()
    assert type(info.value) is error_class
    assert str(info.value)


def test_custom_message():
    error = UnknownCompressionMethodError("no such method")
    assert str(error) == "no such method"