"""Volume and partition descriptors of ISO9660 and High Sierra CD-ROM file systems."""

from dataclasses import dataclass
from enum import IntEnum, IntFlag

from expandkit.cursor import ByteCursor
from expandkit.iso9660.records import DigitTimestamp, DirectoryRecord, EndianPair

# Nearly every CD-ROM file system uses logical sectors of this size.
BYTES_PER_LOGICAL_SECTOR = 2048

# Sectors 0 to 15 form the System Area; the Data Area follows them.
DATA_AREA_OFFSET = 16 * BYTES_PER_LOGICAL_SECTOR

HIGH_SIERRA_IDENTIFIER_OFFSET = 9
HIGH_SIERRA_IDENTIFIER_VALUE = b"CDROM"

ISO9660_IDENTIFIER_OFFSET = 1
ISO9660_IDENTIFIER_VALUE = b"CD001"

D_CHARACTERS_SORTED = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ_"
A_CHARACTERS_SORTED = " !\"%&'()*+,-./0123456789:;<=>?ABCDEFGHIJKLMNOPQRSTUVWXYZ_"

DESCRIPTOR_SIZE = 2048


class DescriptorType(IntEnum):
    """The type byte of a volume descriptor; unknown values are kept as they are."""

    BOOT_RECORD = 0x00
    PRIMARY_VOLUME_DESCRIPTOR = 0x01
    SUPPLEMENTARY_OR_ENHANCED_VOLUME_DESCRIPTOR = 0x02
    VOLUME_PARTITION_DESCRIPTOR = 0x03
    SET_TERMINATOR = 0xFF

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, int) and 0 <= value <= 0xFF:
            member = int.__new__(cls, value)
            member._name_ = f"OTHER_{value:#04x}"
            member._value_ = value
            return member
        return None

    @classmethod
    def from_byte(cls, value):
        """Return the descriptor type for a byte value, known or not."""
        if not 0 <= value <= 0xFF:
            raise ValueError(f"descriptor type {value} does not fit in a byte")
        return cls(value)


class VolumeFlags(IntFlag):
    """Flags of a volume descriptor; unknown bits are retained."""

    CONTAINS_NON_ISO_2375_ESCAPE_SEQUENCE = 0x01


def _read_descriptor(stream):
    data = bytearray()
    while len(data) < DESCRIPTOR_SIZE:
        chunk = stream.read(DESCRIPTOR_SIZE - len(data))
        if not chunk:
            raise EOFError(
                f"expected {DESCRIPTOR_SIZE} bytes of descriptor, stream ended after {len(data)}"
            )
        data += chunk
    return ByteCursor(data)


def _padded(data, size):
    return data + b"\x00" * (size - len(data))


@dataclass(frozen=True)
class VolumeDescriptor:
    """A primary, supplementary or enhanced volume descriptor.

    Fields that differ in size between ISO9660 and High Sierra are padded with
    zero bytes to the larger size; fields missing from one layout are None.
    """

    vd_lbn: EndianPair | None
    vd_type: DescriptorType
    standard_identifier: bytes
    version: int
    flags: VolumeFlags
    system_identifier: bytes
    volume_identifier: bytes
    reserved0: bytes
    volume_space_size: EndianPair
    escape_sequences: bytes
    volume_set_size: EndianPair
    volume_sequence_number: EndianPair
    logical_block_size: EndianPair
    path_table_size: EndianPair
    le_path_table_location: int
    le_path_table_backup_location: int
    le_path_table_backup_location_2: int | None
    le_path_table_backup_location_3: int | None
    be_path_table_location: int
    be_path_table_backup_location: int
    be_path_table_backup_location_2: int | None
    be_path_table_backup_location_3: int | None
    root_directory_record: DirectoryRecord
    volume_set_identifier: bytes
    publisher_identifier: bytes
    data_preparer_identifier: bytes
    application_identifier: bytes
    copyright_file_identifier: bytes
    abstract_file_identifier: bytes
    bibliographic_file_identifier: bytes | None
    volume_creation_timestamp: DigitTimestamp
    volume_modification_timestamp: DigitTimestamp
    volume_expiration_timestamp: DigitTimestamp
    volume_effective_timestamp: DigitTimestamp
    file_structure_version: int
    reserved1: int
    app_use: bytes
    reserved2: bytes

    @classmethod
    def read(cls, stream, is_high_sierra):
        """Read one 2048-byte volume descriptor from a binary stream."""
        cursor = _read_descriptor(stream)
        hs = is_high_sierra

        vd_lbn = EndianPair.read_u32(cursor) if hs else None
        vd_type = DescriptorType.from_byte(cursor.read_u8())
        standard_identifier = cursor.read_bytes(5)
        version = cursor.read_u8()
        flags = VolumeFlags(cursor.read_u8())
        system_identifier = cursor.read_bytes(32)
        volume_identifier = cursor.read_bytes(32)
        reserved0 = cursor.read_bytes(8)
        volume_space_size = EndianPair.read_u32(cursor)
        escape_sequences = cursor.read_bytes(32)
        volume_set_size = EndianPair.read_u16(cursor)
        volume_sequence_number = EndianPair.read_u16(cursor)
        logical_block_size = EndianPair.read_u16(cursor)
        path_table_size = EndianPair.read_u32(cursor)
        le_location = cursor.read_u32(big_endian=False)
        le_backup = cursor.read_u32(big_endian=False)
        le_backup_2 = cursor.read_u32(big_endian=False) if hs else None
        le_backup_3 = cursor.read_u32(big_endian=False) if hs else None
        be_location = cursor.read_u32(big_endian=True)
        be_backup = cursor.read_u32(big_endian=True)
        be_backup_2 = cursor.read_u32(big_endian=True) if hs else None
        be_backup_3 = cursor.read_u32(big_endian=True) if hs else None
        root_directory_record = DirectoryRecord.read_from_volume_descriptor(cursor, hs)
        volume_set_identifier = cursor.read_bytes(128)
        publisher_identifier = cursor.read_bytes(128)
        data_preparer_identifier = cursor.read_bytes(128)
        application_identifier = cursor.read_bytes(128)
        file_identifier_size = 32 if hs else 37
        copyright_file_identifier = _padded(cursor.read_bytes(file_identifier_size), 37)
        abstract_file_identifier = _padded(cursor.read_bytes(file_identifier_size), 37)
        bibliographic_file_identifier = None if hs else cursor.read_bytes(37)
        creation = DigitTimestamp.read(cursor, hs)
        modification = DigitTimestamp.read(cursor, hs)
        expiration = DigitTimestamp.read(cursor, hs)
        effective = DigitTimestamp.read(cursor, hs)
        file_structure_version = cursor.read_u8()
        reserved1 = cursor.read_u8()
        app_use = cursor.read_bytes(512)
        reserved2 = _padded(cursor.read_bytes(680 if hs else 653), 680)

        return cls(
            vd_lbn=vd_lbn,
            vd_type=vd_type,
            standard_identifier=standard_identifier,
            version=version,
            flags=flags,
            system_identifier=system_identifier,
            volume_identifier=volume_identifier,
            reserved0=reserved0,
            volume_space_size=volume_space_size,
            escape_sequences=escape_sequences,
            volume_set_size=volume_set_size,
            volume_sequence_number=volume_sequence_number,
            logical_block_size=logical_block_size,
            path_table_size=path_table_size,
            le_path_table_location=le_location,
            le_path_table_backup_location=le_backup,
            le_path_table_backup_location_2=le_backup_2,
            le_path_table_backup_location_3=le_backup_3,
            be_path_table_location=be_location,
            be_path_table_backup_location=be_backup,
            be_path_table_backup_location_2=be_backup_2,
            be_path_table_backup_location_3=be_backup_3,
            root_directory_record=root_directory_record,
            volume_set_identifier=volume_set_identifier,
            publisher_identifier=publisher_identifier,
            data_preparer_identifier=data_preparer_identifier,
            application_identifier=application_identifier,
            copyright_file_identifier=copyright_file_identifier,
            abstract_file_identifier=abstract_file_identifier,
            bibliographic_file_identifier=bibliographic_file_identifier,
            volume_creation_timestamp=creation,
            volume_modification_timestamp=modification,
            volume_expiration_timestamp=expiration,
            volume_effective_timestamp=effective,
            file_structure_version=file_structure_version,
            reserved1=reserved1,
            app_use=app_use,
            reserved2=reserved2,
        )


@dataclass(frozen=True)
class PartitionDescriptor:
    """A volume partition descriptor (High Sierra: unspecified structure descriptor)."""

    vd_lbn: EndianPair | None
    vd_type: DescriptorType
    standard_identifier: bytes
    version: int
    reserved0: int
    system_identifier: bytes
    partition_identifier: bytes
    partition_location: EndianPair
    partition_size: EndianPair
    reserved1: bytes

    @classmethod
    def read(cls, stream, is_high_sierra):
        """Read one 2048-byte partition descriptor from a binary stream."""
        cursor = _read_descriptor(stream)
        vd_lbn = EndianPair.read_u32(cursor) if is_high_sierra else None
        vd_type = DescriptorType.from_byte(cursor.read_u8())
        standard_identifier = cursor.read_bytes(5)
        version = cursor.read_u8()
        reserved0 = cursor.read_u8()
        system_identifier = cursor.read_bytes(32)
        partition_identifier = cursor.read_bytes(32)
        partition_location = EndianPair.read_u32(cursor)
        partition_size = EndianPair.read_u32(cursor)
        reserved1 = _padded(cursor.read_bytes(1952 if is_high_sierra else 1960), 1960)
        return cls(
            vd_lbn=vd_lbn,
            vd_type=vd_type,
            standard_identifier=standard_identifier,
            version=version,
            reserved0=reserved0,
            system_identifier=system_identifier,
            partition_identifier=partition_identifier,
            partition_location=partition_location,
            partition_size=partition_size,
            reserved1=reserved1,
        )