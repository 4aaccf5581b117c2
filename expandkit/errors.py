"""Exceptions raised while expanding compressed files."""


class DecompressionError(Exception):
    """Base class for all failures while decompressing a file."""


class UnknownCompressionMethodError(DecompressionError):
    """The file uses a compression method that is not recognised."""

    def __init__(self, message="unknown compression method"):
        super().__init__(message)


class DataOffsetWithinHeaderError(DecompressionError):
    """The header points to compressed data that would start inside the header itself."""

    def __init__(self, message="compressed data offset lies within the header"):
        super().__init__(message)


class UnexpectedHuffmanSymbolCountError(DecompressionError):
    """A Huffman table was requested with a symbol count the encoding cannot produce."""

    def __init__(self, symbol_count):
        super().__init__(f"unexpected Huffman symbol count {symbol_count}")
        self.symbol_count = symbol_count


class UnknownHuffmanTreeEncodingError(DecompressionError):
    """A Huffman table is stored with an encoding type that is not known."""

    def __init__(self, encoding):
        super().__init__(f"unknown Huffman tree encoding {encoding}")
        self.encoding = encoding


class RelativeValueUnderflowError(DecompressionError):
    """A delta-encoded value would drop below zero."""

    def __init__(self, message="relative value would underflow below zero"):
        super().__init__(message)