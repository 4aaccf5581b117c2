# expandkit

Pure-Python decompressors for the file formats written by the old MS-DOS and
Windows setup tools (SZDD, SZ and KWAJ), together with a raw DEFLATE
inflater, Huffman decoding trees and readers for ISO9660 and High Sierra
CD-ROM structures. It has no dependencies outside the standard library.

## Installation

```
pip install expandkit
```

For running the test suite:

```
pip install "expandkit[test]"
pytest
```

## Decompressing setup files

`expandkit.expand.decompress(reader, writer)` reads the 8-byte magic at the
start of a binary stream and hands the rest to the matching decompressor for
KWAJ, SZDD or SZ data. The expanded bytes are written to `writer`.

```python
from expandkit.expand import decompress

with open("SETUP.EX_", "rb") as src, open("SETUP.EXE", "wb") as dst:
    decompress(src, dst)
```

An unrecognised magic raises `expandkit.errors.UnknownCompressionMethodError`.
All decompression failures derive from `expandkit.errors.DecompressionError`;
a stream that ends where more bytes are required raises `EOFError`.

The format-specific functions can be called on a stream that is already past
its magic:

* `expandkit.szdd.decompress_szdd(reader, writer)` and
  `expandkit.szdd.decompress_sz(reader, writer)` stop once the size recorded
  in the header has been written.
* `expandkit.kwaj.decompress_kwaj(reader, writer)` handles KWAJ compression
  types 0 (stored), 1 (stored, every byte XOR 0xFF), 2 (LZSS) and 3 (LZ plus
  Huffman). A data offset pointing inside the header raises
  `DataOffsetWithinHeaderError`.
* `expandkit.kwaj_sz.decompress_kwaj_sz(reader, writer, szdd=False)` and
  `expandkit.lzh.decompress_lzh(reader, writer)` decode the compressed
  payloads directly. `expandkit.lzh.create_huffman_tree(reader, symbol_count,
  encoding_type)` reads one of the LZH code tables.

The LZSS and LZH decoders write whatever they decoded even when an error
stops them part way.

## Inflating DEFLATE data

```python
from expandkit.inflate import inflate

plain = inflate(raw_deflate_bytes)
```

For more control, `expandkit.inflate.Inflater(stream, size)` decodes from a
binary stream: `inflate_block()` returns the bytes of one block and whether
it was the final one, and `inflate_all()` decodes up to and including the
final block. The decoded history is kept in `Inflater.lookback`, a
`expandkit.ring_buffer.RingBuffer`. Malformed streams raise
`expandkit.inflate.InflateError`.

## Huffman trees

`expandkit.huffman.HuffmanTree` builds a decoding tree from a mapping of bit
sequences to symbols, or from per-symbol code lengths with
`HuffmanTree.canonical(symbol_lengths, symbols=None)` (symbols default to
0, 1, 2, ...; a length of 0 leaves a symbol out). A mapping that is not a
complete prefix code raises `EmptySequenceError`, `PrefixFoundError` or
`UndefinedBranchesError`, all subclasses of `HuffmanConstructionError`.
Symbols are decoded with `decode_one(bits)` from an iterable of bits or with
`decode_from_bit_reader(reader)`.

## Low-level readers

* `expandkit.bitreader.BitReader(stream, msb_to_lsb=False)` reads single
  bits, bit fields (`read_bits`) and bytes from a binary stream in 8-bit
  units; `BitReader16Le` works in little-endian 16-bit units.
* `expandkit.cursor.ByteCursor(data, position=0)` reads unsigned and signed
  bytes, raw byte runs and 16/32-bit integers of either byte order from an
  in-memory buffer.
* `expandkit.ring_buffer.RingBuffer(initial_value, size)` is the circular
  history window, with `push`, `extend` and `recall(lookback, length)`.

## CD-ROM structures

`expandkit.iso9660.volume` reads 2048-byte volume and partition descriptors
from a binary stream (`VolumeDescriptor.read`, `PartitionDescriptor.read`).
`expandkit.iso9660.records` reads directory records, path table records,
extended attribute records and timestamps from a `ByteCursor`. Every reader
takes an `is_high_sierra` flag for the older High Sierra layout; fields that
are shorter there are padded with zero bytes, and fields that one layout
lacks are `None`.

## Filtering export lists

The `filtexp` command filters a tab-separated list of DLL exports against an
ignore list and prints the lines that pass:

```
filtexp exports.tsv ignore.txt
```

Each export line has the form `<JSON array of path parts>\t<ordinal>\t<name>`;
the file name is the last `/`- or `\`-separated component of the last path
part. The ignore list takes one rule per line:

* `@<ordinal>` drops exports with that ordinal
* `+<regex>` keeps exports whose file name matches
* `-<regex>` drops exports whose file name matches
* `!<regex>` drops exports whose symbol name matches

Regular expressions must match the whole string and ignore case. The first
rule that matches decides; an export no rule matches is kept. Blank lines and
lines starting with `#` are skipped, and any other line raises `ValueError`.
The same logic is available as `parse_ignore_line`, `read_ignore_list`,
`should_output` and `filter_exports` in `expandkit.filtexp`.

## What it does not do

* KWAJ files using MS-ZIP compression (type 4) are rejected with a
  `DecompressionError`; they cannot be expanded.
* There is no command-line expander; decompression is a library call.
* The CD-ROM readers parse individual structures only. They do not walk
  directories, list files or extract file contents from an image.
* Nothing here writes compressed data.