import io
import struct

import pytest

from expandkit.iso9660.records import FileFlags
from expandkit.iso9660.volume import (
    DATA_AREA_OFFSET,
    HIGH_SIERRA_IDENTIFIER_VALUE,
    ISO9660_IDENTIFIER_VALUE,
    DescriptorType,
    PartitionDescriptor,
    VolumeDescriptor,
    VolumeFlags,
)


def pair16(value):
    return struct.pack("<H", value) + struct.pack(">H", value)


def pair32(value):
    return struct.pack("<I", value) + struct.pack(">I", value)


def root_record(hs, length=34):
    timestamp = bytes([95, 6, 15, 12, 0, 0]) + (b"" if hs else b"\xfc")
    return (
        bytes([length, 0])
        + pair32(20)
        + pair32(2048)
        + timestamp
        + bytes([int(FileFlags.DIRECTORY)])
        + (b"\x00" if hs else b"")
        + b"\x00\x00"
        + pair16(1)
        + b"\x01\x00"
    )


def digit_timestamp(hs):
    return b"1995061512000000" + (b"" if hs else b"\xfc")


def iso_pvd(root=None):
    parts = [
        b"\x01", ISO9660_IDENTIFIER_VALUE, b"\x01", b"\x00",
        b"SYSTEM".ljust(32), b"VOLUME".ljust(32), b"\x00" * 8,
        pair32(1000), b"\x00" * 32, pair16(1), pair16(1), pair16(2048), pair32(10),
        struct.pack("<I", 18), struct.pack("<I", 0),
        struct.pack(">I", 19), struct.pack(">I", 0),
        root if root is not None else root_record(False),
        b"SET".ljust(128), b"PUB".ljust(128), b"PREP".ljust(128), b"APP".ljust(128),
        b"COPY.TXT".ljust(37), b"ABS.TXT".ljust(37), b"BIB.TXT".ljust(37),
        digit_timestamp(False) * 4,
        b"\x01", b"\x00", b"\x00" * 512, b"\xaa" * 653,
    ]
    data = b"".join(parts)
    assert len(data) == 2048
    return data


def hs_pvd():
    parts = [
        pair32(16),
        b"\x01", HIGH_SIERRA_IDENTIFIER_VALUE, b"\x01", b"\x00",
        b"SYSTEM".ljust(32), b"VOLUME".ljust(32), b"\x00" * 8,
        pair32(1000), b"\x00" * 32, pair16(1), pair16(1), pair16(2048), pair32(10),
        struct.pack("<4I", 18, 0, 0, 0),
        struct.pack(">4I", 19, 0, 0, 0),
        root_record(True),
        b"SET".ljust(128), b"PUB".ljust(128), b"PREP".ljust(128), b"APP".ljust(128),
        b"COPY.TXT".ljust(32, b"\xbb"), b"ABS.TXT".ljust(32),
        digit_timestamp(True) * 4,
        b"\x01", b"\x00", b"\x00" * 512, b"\xaa" * 680,
    ]
    data = b"".join(parts)
    assert len(data) == 2048
    return data


def partition(hs):
    parts = [
        pair32(17) if hs else b"",
        b"\x03", HIGH_SIERRA_IDENTIFIER_VALUE if hs else ISO9660_IDENTIFIER_VALUE,
        b"\x01", b"\x00", b"SYSTEM".ljust(32), b"PART".ljust(32),
        pair32(100), pair32(50),
        b"\xcc" * (1952 if hs else 1960),
    ]
    data = b"".join(parts)
    assert len(data) == 2048
    return data


def test_descriptor_type_known_values():
    assert DescriptorType.from_byte(0x01) is DescriptorType.PRIMARY_VOLUME_DESCRIPTOR
    assert DescriptorType.from_byte(0xFF) is DescriptorType.SET_TERMINATOR
    assert DescriptorType.from_byte(0x00) is DescriptorType.BOOT_RECORD


def test_descriptor_type_other_value_is_retained():
    other = DescriptorType.from_byte(0x42)
    assert int(other) == 0x42
    assert all(int(member) != 0x42 for member in list(DescriptorType))


def test_descriptor_type_rejects_non_byte():
    with pytest.raises(ValueError):
        DescriptorType.from_byte(256)


def test_volume_flags_retain_unknown_bits():
    flags = VolumeFlags(0x81)
    assert int(flags) == 0x81
    assert VolumeFlags.CONTAINS_NON_ISO_2375_ESCAPE_SEQUENCE in flags


def test_descriptor_read_at_data_area_offset():
    image = b"\x00" * (16 * 2048) + iso_pvd()
    stream = io.BytesIO(image)
    stream.seek(DATA_AREA_OFFSET)
    vd = VolumeDescriptor.read(stream, False)
    assert vd.standard_identifier == b"CD001"
    assert stream.tell() == 17 * 2048


def test_read_iso_primary_volume_descriptor():
    vd = VolumeDescriptor.read(io.BytesIO(iso_pvd()), False)
    assert vd.vd_lbn is None
    assert vd.vd_type is DescriptorType.PRIMARY_VOLUME_DESCRIPTOR
    assert vd.standard_identifier == b"CD001"
    assert vd.system_identifier == b"SYSTEM".ljust(32)
    assert vd.volume_space_size.little_endian == 1000
    assert vd.volume_space_size.big_endian == 1000
    assert vd.logical_block_size.little_endian == 2048
    assert vd.le_path_table_location == 18
    assert vd.be_path_table_location == 19
    assert vd.le_path_table_backup_location_2 is None
    assert vd.be_path_table_backup_location_3 is None
    assert vd.bibliographic_file_identifier == b"BIB.TXT".ljust(37)
    assert vd.copyright_file_identifier == b"COPY.TXT".ljust(37)
    assert vd.volume_creation_timestamp.year == b"1995"
    assert vd.volume_creation_timestamp.gmt_offset_15min == -4
    assert vd.file_structure_version == 1


def test_iso_reserved2_is_padded():
    vd = VolumeDescriptor.read(io.BytesIO(iso_pvd()), False)
    assert len(vd.reserved2) == 680
    assert vd.reserved2 == b"\xaa" * 653 + b"\x00" * 27


def test_read_high_sierra_volume_descriptor():
    vd = VolumeDescriptor.read(io.BytesIO(hs_pvd()), True)
    assert vd.vd_lbn.little_endian == 16
    assert vd.vd_lbn.big_endian == 16
    assert vd.standard_identifier == b"CDROM"
    assert vd.le_path_table_location == 18
    assert vd.le_path_table_backup_location_2 == 0
    assert vd.be_path_table_backup_location_3 == 0
    assert vd.bibliographic_file_identifier is None
    assert vd.copyright_file_identifier == b"COPY.TXT".ljust(32, b"\xbb") + b"\x00" * 5
    assert vd.volume_effective_timestamp.gmt_offset_15min is None
    assert vd.reserved2 == b"\xaa" * 680
    assert vd.root_directory_record.reserved0 == 0


def test_descriptor_consumes_exactly_one_sector():
    stream = io.BytesIO(iso_pvd() + partition(False))
    VolumeDescriptor.read(stream, False)
    assert stream.tell() == 2048
    part = PartitionDescriptor.read(stream, False)
    assert part.vd_type is DescriptorType.VOLUME_PARTITION_DESCRIPTOR


def test_short_stream_raises_eof():
    with pytest.raises(EOFError):
        VolumeDescriptor.read(io.BytesIO(iso_pvd()[:1000]), False)


def test_bad_root_record_length_raises():
    data = iso_pvd(root=root_record(False, length=33))
    with pytest.raises(ValueError):
        VolumeDescriptor.read(io.BytesIO(data), False)


def test_read_iso_partition_descriptor():
    part = PartitionDescriptor.read(io.BytesIO(partition(False)), False)
    assert part.vd_lbn is None
    assert part.standard_identifier == b"CD001"
    assert part.partition_identifier == b"PART".ljust(32)
    assert part.partition_location.little_endian == 100
    assert part.partition_size.big_endian == 50
    assert part.reserved1 == b"\xcc" * 1960


def test_read_high_sierra_partition_descriptor():
    part = PartitionDescriptor.read(io.BytesIO(partition(True)), True)
    assert part.vd_lbn.big_endian == 17
    assert part.standard_identifier == b"CDROM"
    assert part.reserved1 == b"\xcc" * 1952 + b"\x00" * 8
    assert part.partition_location.big_endian == 100


def test_partition_short_stream_raises_eof():
    with pytest.raises(EOFError):
        PartitionDescriptor.read(io.BytesIO(b""), False)