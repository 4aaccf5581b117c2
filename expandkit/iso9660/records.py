"""Records found on ISO9660 and High Sierra CD-ROM file systems."""

from dataclasses import dataclass
from enum import IntFlag

from expandkit.cursor import ByteCursor

# A directory record embedded in a volume descriptor always has this length.
ROOT_DIRECTORY_RECORD_LENGTH = 34


@dataclass(frozen=True)
class EndianPair:
    """The same value, stored first little-endian and then big-endian."""

    little_endian: int
    big_endian: int

    @classmethod
    def read_u16(cls, cursor):
        little = cursor.read_u16(big_endian=False)
        big = cursor.read_u16(big_endian=True)
        return cls(little, big)

    @classmethod
    def read_u32(cls, cursor):
        little = cursor.read_u32(big_endian=False)
        big = cursor.read_u32(big_endian=True)
        return cls(little, big)


@dataclass(frozen=True)
class DigitTimestamp:
    """A timestamp stored as ASCII digits.

    All digits b"0" (and, on ISO9660, a zero GMT offset) encode the zero value.
    17 bytes on ISO9660, 16 bytes on High Sierra, which has no GMT offset.
    """

    year: bytes
    month: bytes
    day: bytes
    hour: bytes
    minute: bytes
    second: bytes
    centisecond: bytes
    gmt_offset_15min: int | None

    @classmethod
    def read(cls, cursor, is_high_sierra):
        year = cursor.read_bytes(4)
        month = cursor.read_bytes(2)
        day = cursor.read_bytes(2)
        hour = cursor.read_bytes(2)
        minute = cursor.read_bytes(2)
        second = cursor.read_bytes(2)
        centisecond = cursor.read_bytes(2)
        gmt_offset = None if is_high_sierra else cursor.read_i8()
        return cls(year, month, day, hour, minute, second, centisecond, gmt_offset)


@dataclass(frozen=True)
class BinaryTimestamp:
    """A timestamp stored as binary fields.

    7 bytes on ISO9660, 6 bytes on High Sierra, which has no GMT offset.
    """

    year_since_1900: int
    month: int
    day: int
    hour: int
    minute: int
    second: int
    gmt_offset_15min: int | None

    @classmethod
    def read(cls, cursor, is_high_sierra):
        year = cursor.read_u8()
        month = cursor.read_u8()
        day = cursor.read_u8()
        hour = cursor.read_u8()
        minute = cursor.read_u8()
        second = cursor.read_u8()
        gmt_offset = None if is_high_sierra else cursor.read_i8()
        return cls(year, month, day, hour, minute, second, gmt_offset)


class FileFlags(IntFlag):
    """Flags describing the kind of a file in a directory record."""

    EXISTENCE = 1 << 0
    DIRECTORY = 1 << 1
    ASSOCIATED_FILE = 1 << 2
    RECORD = 1 << 3
    PROTECTION = 1 << 4
    MULTI_EXTENT = 1 << 7


class Permissions(IntFlag):
    """Access restrictions in an extended attribute record; reserved bits should be set."""

    FORBID_SYSTEM_READ = 1 << 0
    RESERVED1 = 1 << 1
    FORBID_SYSTEM_EXECUTE = 1 << 2
    RESERVED3 = 1 << 3
    FORBID_OWNER_READ = 1 << 4
    RESERVED5 = 1 << 5
    FORBID_OWNER_EXECUTE = 1 << 6
    RESERVED7 = 1 << 7
    FORBID_GROUP_READ = 1 << 8
    RESERVED9 = 1 << 9
    FORBID_GROUP_EXECUTE = 1 << 10
    RESERVED11 = 1 << 11
    FORBID_OTHER_READ = 1 << 12
    RESERVED13 = 1 << 13
    FORBID_OTHER_EXECUTE = 1 << 14
    RESERVED15 = 1 << 15


@dataclass(frozen=True)
class DirectoryRecord:
    """A directory record, in ISO9660 or High Sierra layout."""

    length: int
    extended_attribute_record_length: int
    extent_location: EndianPair
    data_length: EndianPair
    recording_timestamp: BinaryTimestamp
    file_flags: FileFlags
    reserved0: int | None
    interleave_unit_size: int
    interleave_gap_size: int
    volume_sequence_number: EndianPair
    file_identifier: bytes
    reserved1: int | None
    system_use_bytes: bytes

    @classmethod
    def read_from_volume_descriptor(cls, cursor, is_high_sierra):
        """Read the root directory record embedded in a volume descriptor."""
        length = cursor.read_u8()
        if length != ROOT_DIRECTORY_RECORD_LENGTH:
            raise ValueError(
                f"directory record in volume descriptor is {length} bytes long, "
                f"expected {ROOT_DIRECTORY_RECORD_LENGTH}"
            )
        return cls.read_after_length(cursor, length, is_high_sierra)

    @classmethod
    def read(cls, cursor, is_high_sierra):
        length = cursor.read_u8()
        return cls.read_after_length(cursor, length, is_high_sierra)

    @classmethod
    def read_after_length(cls, cursor, length, is_high_sierra):
        """Read the rest of a record whose length byte has already been consumed."""
        start = cursor.position
        extended_attribute_record_length = cursor.read_u8()
        extent_location = EndianPair.read_u32(cursor)
        data_length = EndianPair.read_u32(cursor)
        recording_timestamp = BinaryTimestamp.read(cursor, is_high_sierra)
        file_flags = FileFlags(cursor.read_u8())
        reserved0 = cursor.read_u8() if is_high_sierra else None
        interleave_unit_size = cursor.read_u8()
        interleave_gap_size = cursor.read_u8()
        volume_sequence_number = EndianPair.read_u16(cursor)
        identifier_length = cursor.read_u8()
        file_identifier = cursor.read_bytes(identifier_length)
        reserved1 = cursor.read_u8() if identifier_length % 2 == 0 else None

        # the length byte counts too
        bytes_read = 1 + cursor.position - start
        if length < bytes_read:
            system_use_bytes = b""
        else:
            system_use_bytes = cursor.read_bytes(length - bytes_read)

        return cls(
            length=length,
            extended_attribute_record_length=extended_attribute_record_length,
            extent_location=extent_location,
            data_length=data_length,
            recording_timestamp=recording_timestamp,
            file_flags=file_flags,
            reserved0=reserved0,
            interleave_unit_size=interleave_unit_size,
            interleave_gap_size=interleave_gap_size,
            volume_sequence_number=volume_sequence_number,
            file_identifier=file_identifier,
            reserved1=reserved1,
            system_use_bytes=system_use_bytes,
        )


@dataclass(frozen=True)
class ExtendedAttributeRecord:
    """An extended attribute record, in ISO9660 or High Sierra layout."""

    owner_identification: EndianPair
    group_identification: EndianPair
    permissions: Permissions
    file_creation_timestamp: DigitTimestamp
    file_modification_timestamp: DigitTimestamp
    file_expiration_timestamp: DigitTimestamp
    file_effective_timestamp: DigitTimestamp
    record_format: int
    record_attributes: int
    record_length: EndianPair
    system_identifier: bytes
    system_use: bytes
    version: int
    reserved0: bytes
    parent_directory_number: EndianPair | None
    directory_record: DirectoryRecord | None
    application_use_data: bytes
    escape_sequences: bytes | None

    @classmethod
    def read(cls, cursor, is_high_sierra):
        owner_identification = EndianPair.read_u16(cursor)
        group_identification = EndianPair.read_u16(cursor)
        permissions = Permissions(cursor.read_u16(big_endian=True))
        creation = DigitTimestamp.read(cursor, is_high_sierra)
        modification = DigitTimestamp.read(cursor, is_high_sierra)
        expiration = DigitTimestamp.read(cursor, is_high_sierra)
        effective = DigitTimestamp.read(cursor, is_high_sierra)
        record_format = cursor.read_u8()
        record_attributes = cursor.read_u8()
        record_length = EndianPair.read_u16(cursor)
        system_identifier = cursor.read_bytes(32)
        system_use = cursor.read_bytes(64)
        version = cursor.read_u8()
        escape_sequences_length = None if is_high_sierra else cursor.read_u8()
        if is_high_sierra:
            reserved0 = cursor.read_bytes(65)
        else:
            reserved0 = cursor.read_bytes(64) + b"\x00"
        parent_directory_number = EndianPair.read_u16(cursor) if is_high_sierra else None
        application_use_length = EndianPair.read_u16(cursor)
        directory_record = DirectoryRecord.read(cursor, is_high_sierra) if is_high_sierra else None
        application_use_data = cursor.read_bytes(application_use_length.little_endian)
        if escape_sequences_length is None:
            escape_sequences = None
        else:
            escape_sequences = cursor.read_bytes(escape_sequences_length)

        return cls(
            owner_identification=owner_identification,
            group_identification=group_identification,
            permissions=permissions,
            file_creation_timestamp=creation,
            file_modification_timestamp=modification,
            file_expiration_timestamp=expiration,
            file_effective_timestamp=effective,
            record_format=record_format,
            record_attributes=record_attributes,
            record_length=record_length,
            system_identifier=system_identifier,
            system_use=system_use,
            version=version,
            reserved0=reserved0,
            parent_directory_number=parent_directory_number,
            directory_record=directory_record,
            application_use_data=application_use_data,
            escape_sequences=escape_sequences,
        )


@dataclass(frozen=True)
class PathTableRecord:
    """A record of a path table; multi-byte fields follow the table's byte order."""

    extended_attribute_record_length: int
    extent_location: int
    parent_directory_number: int
    directory_identifier: bytes
    reserved0: int | None

    @classmethod
    def read(cls, cursor, is_high_sierra, is_big_endian):
        if is_high_sierra:
            extent_location = cursor.read_u32(big_endian=is_big_endian)
            extended_attribute_record_length = cursor.read_u8()
            identifier_length = cursor.read_u8()
            parent_directory_number = cursor.read_u16(big_endian=is_big_endian)
        else:
            identifier_length = cursor.read_u8()
            extended_attribute_record_length = cursor.read_u8()
            extent_location = cursor.read_u32(big_endian=is_big_endian)
            parent_directory_number = cursor.read_u16(big_endian=is_big_endian)
        directory_identifier = cursor.read_bytes(identifier_length)
        reserved0 = cursor.read_u8() if identifier_length % 2 == 1 else None
        return cls(
            extended_attribute_record_length=extended_attribute_record_length,
            extent_location=extent_location,
            parent_directory_number=parent_directory_number,
            directory_identifier=directory_identifier,
            reserved0=reserved0,
        )


__all__ = [
    "ByteCursor",
    "EndianPair",
    "DigitTimestamp",
    "BinaryTimestamp",
    "FileFlags",
    "Permissions",
    "DirectoryRecord",
    "ExtendedAttributeRecord",
    "PathTableRecord",
]