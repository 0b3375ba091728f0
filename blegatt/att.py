"""Attribute protocol constants and little-endian field helpers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum, IntFlag

from .uuid import BtUUID, UUIDType

LE_ATT_CID = 4
ATT_DEFAULT_MTU = 23

GATT_UUID_PRIMARY = 0x2800
GATT_CHARACTERISTIC = 0x2803
GATT_CLIENT_CHARACTERISTIC_CONFIGURATION = 0x2902

ATT_MAX_VALUE_LEN = 512
ATT_DEFAULT_L2CAP_MTU = 48
ATT_DEFAULT_LE_MTU = 23

ATT_CID = 4
ATT_PSM = 31

ATT_CANCEL_ALL_PREP_WRITES = 0x00
ATT_WRITE_ALL_PREP_WRITES = 0x01

ATT_FIND_INFO_RESP_FMT_16BIT = 0x01
ATT_FIND_INFO_RESP_FMT_128BIT = 0x02


class Opcode(IntEnum):
    """Attribute protocol opcodes."""

    ERROR = 0x01
    MTU_REQ = 0x02
    MTU_RESP = 0x03
    FIND_INFO_REQ = 0x04
    FIND_INFO_RESP = 0x05
    FIND_BY_TYPE_REQ = 0x06
    FIND_BY_TYPE_RESP = 0x07
    READ_BY_TYPE_REQ = 0x08
    READ_BY_TYPE_RESP = 0x09
    READ_REQ = 0x0A
    READ_RESP = 0x0B
    READ_BLOB_REQ = 0x0C
    READ_BLOB_RESP = 0x0D
    READ_MULTI_REQ = 0x0E
    READ_MULTI_RESP = 0x0F
    READ_BY_GROUP_REQ = 0x10
    READ_BY_GROUP_RESP = 0x11
    WRITE_REQ = 0x12
    WRITE_RESP = 0x13
    WRITE_CMD = 0x52
    PREP_WRITE_REQ = 0x16
    PREP_WRITE_RESP = 0x17
    EXEC_WRITE_REQ = 0x18
    EXEC_WRITE_RESP = 0x19
    HANDLE_NOTIFY = 0x1B
    HANDLE_IND = 0x1D
    HANDLE_CNF = 0x1E
    SIGNED_WRITE_CMD = 0xD2


class ErrorCode(IntEnum):
    """Error codes carried in an Error Response PDU."""

    INVALID_HANDLE = 0x01
    READ_NOT_PERM = 0x02
    WRITE_NOT_PERM = 0x03
    INVALID_PDU = 0x04
    AUTHENTICATION = 0x05
    REQ_NOT_SUPP = 0x06
    INVALID_OFFSET = 0x07
    AUTHORIZATION = 0x08
    PREP_QUEUE_FULL = 0x09
    ATTR_NOT_FOUND = 0x0A
    ATTR_NOT_LONG = 0x0B
    INSUFF_ENCR_KEY_SIZE = 0x0C
    INVAL_ATTR_VALUE_LEN = 0x0D
    UNLIKELY = 0x0E
    INSUFF_ENC = 0x0F
    UNSUPP_GRP_TYPE = 0x10
    INSUFF_RESOURCES = 0x11
    IO = 0x80
    TIMEOUT = 0x81
    ABORTED = 0x82


class CharProperty(IntFlag):
    """Characteristic property bits."""

    BROADCAST = 0x01
    READ = 0x02
    WRITE_WITHOUT_RESP = 0x04
    WRITE = 0x08
    NOTIFY = 0x10
    INDICATE = 0x20
    AUTH = 0x40
    EXT_PROPER = 0x80


@dataclass(frozen=True)
class AttRange:
    """An inclusive range of attribute handles."""

    start: int
    end: int


def _get(data: bytes, offset: int, size: int) -> int:
    if offset < 0 or offset + size > len(data):
        raise ValueError(
            f"need {size} bytes at offset {offset}, but only {len(data)} available"
        )
    return int.from_bytes(bytes(data[offset:offset + size]), "little")


def _put(value: int, size: int) -> bytes:
    try:
        return int(value).to_bytes(size, "little")
    except OverflowError as exc:
        raise ValueError(f"{value!r} does not fit in {size} bytes") from exc


def get_u8(data: bytes, offset: int = 0) -> int:
    """Read one unsigned byte."""
    return _get(data, offset, 1)


def get_u16(data: bytes, offset: int = 0) -> int:
    """Read a little-endian unsigned 16-bit field."""
    return _get(data, offset, 2)


def get_u32(data: bytes, offset: int = 0) -> int:
    """Read a little-endian unsigned 32-bit field."""
    return _get(data, offset, 4)


def get_u128(data: bytes, offset: int = 0) -> int:
    """Read a little-endian unsigned 128-bit field."""
    return _get(data, offset, 16)


def put_u8(value: int) -> bytes:
    """Encode one unsigned byte."""
    return _put(value, 1)


def put_u16(value: int) -> bytes:
    """Encode a little-endian unsigned 16-bit field."""
    return _put(value, 2)


def put_u32(value: int) -> bytes:
    """Encode a little-endian unsigned 32-bit field."""
    return _put(value, 4)


def put_u128(value: int) -> bytes:
    """Encode a little-endian unsigned 128-bit field."""
    return _put(value, 16)


def put_uuid(uuid: BtUUID) -> bytes:
    """Encode a UUID as 2 bytes if 16-bit, otherwise as its 16-byte form."""
    if uuid.type is UUIDType.UUID16:
        return put_u16(uuid.value)
    return put_u128(uuid.to_uuid128().value)


def get_uuid16(data: bytes, offset: int = 0) -> BtUUID:
    """Read a 16-bit UUID."""
    return BtUUID.uuid16(get_u16(data, offset))


def get_uuid128(data: bytes, offset: int = 0) -> BtUUID:
    """Read a 128-bit UUID."""
    return BtUUID.uuid128(get_u128(data, offset))