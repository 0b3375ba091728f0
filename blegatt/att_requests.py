"""Encoders and decoders for attribute protocol read and discovery PDUs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .att import (
    ATT_DEFAULT_MTU,
    ErrorCode,
    Opcode,
    get_u16,
    get_uuid16,
    get_uuid128,
    put_u16,
    put_uuid,
)
from .uuid import BtUUID, UUIDType


class AttCodecError(ValueError):
    """A PDU could not be encoded or decoded."""


@dataclass(frozen=True)
class FindByTypeRequest:
    """A decoded Find By Type Value Request."""

    start: int
    end: int
    uuid: BtUUID
    value: bytes


@dataclass(frozen=True)
class ReadByTypeRequest:
    """A decoded Read By Type Request."""

    start: int
    end: int
    uuid: BtUUID


@dataclass(frozen=True)
class ReadBlobRequest:
    """A decoded Read Blob Request."""

    handle: int
    offset: int


@dataclass(frozen=True)
class HandleRangeRequest:
    """A decoded request that carries a start and end handle."""

    start: int
    end: int


_OP_NAMES = {
    Opcode.ERROR: "Error",
    Opcode.MTU_REQ: "MTU Request",
    Opcode.MTU_RESP: "MTU Response",
    Opcode.FIND_INFO_REQ: "Find Info Request",
    Opcode.FIND_INFO_RESP: "Find Info Response",
    Opcode.FIND_BY_TYPE_REQ: "Find By Type Request",
    Opcode.FIND_BY_TYPE_RESP: "Find By Type Response",
    Opcode.READ_BY_TYPE_REQ: "Read By Type Request",
    Opcode.READ_BY_TYPE_RESP: "Read By Type Response",
    Opcode.READ_REQ: "Read Request",
    Opcode.READ_RESP: "Read Response",
    Opcode.READ_BLOB_REQ: "Read Blob Request",
    Opcode.READ_BLOB_RESP: "Read Blob Response",
    Opcode.READ_MULTI_REQ: "Read Multi Request",
    Opcode.READ_MULTI_RESP: "Read Multi Resources",
    Opcode.READ_BY_GROUP_REQ: "Read By Group Request",
    Opcode.READ_BY_GROUP_RESP: "Read By Group Response",
    Opcode.WRITE_REQ: "Write Request",
    Opcode.WRITE_RESP: "Write Request Response",
    Opcode.WRITE_CMD: "Write Command",
    Opcode.HANDLE_NOTIFY: "Notify",
    Opcode.HANDLE_IND: "Indicate",
}

_UNNAMED_OPS = frozenset(
    {
        Opcode.PREP_WRITE_REQ,
        Opcode.PREP_WRITE_RESP,
        Opcode.EXEC_WRITE_REQ,
        Opcode.EXEC_WRITE_RESP,
        Opcode.HANDLE_CNF,
        Opcode.SIGNED_WRITE_CMD,
    }
)

_ERROR_NAMES = {
    ErrorCode.INVALID_HANDLE: "Invalid handle",
    ErrorCode.READ_NOT_PERM: "Attribute can't be read",
    ErrorCode.WRITE_NOT_PERM: "Attribute can't be written",
    ErrorCode.INVALID_PDU: "Attribute PDU was invalid",
    ErrorCode.AUTHENTICATION: "Attribute requires authentication before read/write",
    ErrorCode.REQ_NOT_SUPP: "Server doesn't support the request received",
    ErrorCode.INVALID_OFFSET: "Offset past the end of the attribute",
    ErrorCode.AUTHORIZATION: "Attribute requires authorization before read/write",
    ErrorCode.PREP_QUEUE_FULL: "Too many prepare writes have been queued",
    ErrorCode.ATTR_NOT_FOUND: "No attribute found within the given range",
    ErrorCode.ATTR_NOT_LONG: "Attribute can't be read/written using Read Blob Req",
    ErrorCode.INSUFF_ENCR_KEY_SIZE: "Encryption Key Size is insufficient",
    ErrorCode.INVAL_ATTR_VALUE_LEN: "Attribute value length is invalid",
    ErrorCode.UNLIKELY: "Request attribute has encountered an unlikely error",
    ErrorCode.INSUFF_ENC: "Encryption required before read/write",
    ErrorCode.UNSUPP_GRP_TYPE: "Attribute type is not a supported grouping attribute",
    ErrorCode.INSUFF_RESOURCES: "Insufficient Resources to complete the request",
    ErrorCode.IO: "Internal application error: I/O",
    ErrorCode.TIMEOUT: "A timeout occured",
    ErrorCode.ABORTED: "The operation was aborted",
}


def op_to_str(op: int) -> str:
    """Human-readable name of an opcode."""
    if op in _OP_NAMES:
        return _OP_NAMES[op]
    if op in _UNNAMED_OPS:
        return "haha fill me in :)"
    return "Unnkown opcode"


def ecode_to_str(status: int) -> str:
    """Human-readable description of an error code."""
    return _ERROR_NAMES.get(status, "Unexpected error code")


def _check_opcode(pdu: bytes, opcode: Opcode) -> None:
    if not pdu:
        raise AttCodecError("empty PDU")
    if pdu[0] != opcode:
        raise AttCodecError(
            f"expected {op_to_str(opcode)} (0x{int(opcode):02x}), got opcode 0x{pdu[0]:02x}"
        )


def _check_length(pdu: bytes, min_len: int) -> None:
    if len(pdu) < min_len:
        raise AttCodecError(f"PDU of {len(pdu)} bytes is shorter than {min_len}")


def _uuid_length(uuid: Optional[BtUUID]) -> int:
    if uuid is None:
        raise AttCodecError("a UUID is required")
    if uuid.type is UUIDType.UUID16:
        return 2
    if uuid.type is UUIDType.UUID128:
        return 16
    raise AttCodecError(f"UUID of type {uuid.type.name} cannot be sent")


def _encode_range_with_type(
    opcode: Opcode, start: int, end: int, uuid: Optional[BtUUID], mtu: int
) -> bytes:
    length = _uuid_length(uuid)
    if mtu < 5 + length:
        raise AttCodecError(f"MTU {mtu} too small for request of {5 + length} bytes")
    return bytes([opcode]) + put_u16(start) + put_u16(end) + put_uuid(uuid)


def encode_read_by_group_req(
    start: int, end: int, uuid: BtUUID, mtu: int = ATT_DEFAULT_MTU
) -> bytes:
    """Encode a Read By Group Type Request."""
    return _encode_range_with_type(Opcode.READ_BY_GROUP_REQ, start, end, uuid, mtu)


def encode_find_by_type_req(
    start: int, end: int, uuid: BtUUID, value: bytes = b"", mtu: int = ATT_DEFAULT_MTU
) -> bytes:
    """Encode a Find By Type Value Request; the value is cut to fit the MTU."""
    min_len = 7
    if uuid is None:
        raise AttCodecError("a UUID is required")
    if uuid.type is not UUIDType.UUID16:
        raise AttCodecError("Find By Type Value needs a 16-bit UUID")
    if mtu < min_len:
        raise AttCodecError(f"MTU {mtu} too small for request of {min_len} bytes")
    value = bytes(value)[: mtu - min_len]
    return (
        bytes([Opcode.FIND_BY_TYPE_REQ])
        + put_u16(start)
        + put_u16(end)
        + put_u16(uuid.value)
        + value
    )


def decode_find_by_type_req(pdu: bytes) -> FindByTypeRequest:
    """Decode a Find By Type Value Request."""
    pdu = bytes(pdu)
    _check_length(pdu, 7)
    _check_opcode(pdu, Opcode.FIND_BY_TYPE_REQ)
    return FindByTypeRequest(
        start=get_u16(pdu, 1),
        end=get_u16(pdu, 3),
        uuid=get_uuid16(pdu, 5),
        value=pdu[7:],
    )


def encode_read_by_type_req(
    start: int, end: int, uuid: BtUUID, mtu: int = ATT_DEFAULT_MTU
) -> bytes:
    """Encode a Read By Type Request."""
    return _encode_range_with_type(Opcode.READ_BY_TYPE_REQ, start, end, uuid, mtu)


def decode_read_by_type_req(pdu: bytes) -> ReadByTypeRequest:
    """Decode a Read By Type Request with a 16-bit or 128-bit type."""
    pdu = bytes(pdu)
    _check_length(pdu, 7)
    _check_opcode(pdu, Opcode.READ_BY_TYPE_REQ)
    if len(pdu) == 7:
        uuid = get_uuid16(pdu, 5)
    elif len(pdu) >= 21:
        uuid = get_uuid128(pdu, 5)
    else:
        raise AttCodecError(f"PDU of {len(pdu)} bytes holds neither a 16 nor 128-bit UUID")
    return ReadByTypeRequest(start=get_u16(pdu, 1), end=get_u16(pdu, 3), uuid=uuid)


def encode_read_req(handle: int) -> bytes:
    """Encode a Read Request."""
    return bytes([Opcode.READ_REQ]) + put_u16(handle)


def encode_read_blob_req(handle: int, offset: int) -> bytes:
    """Encode a Read Blob Request."""
    return bytes([Opcode.READ_BLOB_REQ]) + put_u16(handle) + put_u16(offset)


def decode_read_req(pdu: bytes) -> int:
    """Decode a Read Request, returning the handle."""
    pdu = bytes(pdu)
    _check_length(pdu, 3)
    _check_opcode(pdu, Opcode.READ_REQ)
    return get_u16(pdu, 1)


def decode_read_blob_req(pdu: bytes) -> ReadBlobRequest:
    """Decode a Read Blob Request."""
    pdu = bytes(pdu)
    _check_length(pdu, 5)
    _check_opcode(pdu, Opcode.READ_BLOB_REQ)
    return ReadBlobRequest(handle=get_u16(pdu, 1), offset=get_u16(pdu, 3))


def encode_read_resp(value: bytes, mtu: int = ATT_DEFAULT_MTU) -> bytes:
    """Encode a Read Response, sending only the octets that fit in the MTU."""
    if mtu < 1:
        raise AttCodecError(f"MTU {mtu} too small for a Read Response")
    return bytes([Opcode.READ_RESP]) + bytes(value)[: mtu - 1]


def encode_read_blob_resp(value: bytes, offset: int, mtu: int = ATT_DEFAULT_MTU) -> bytes:
    """Encode a Read Blob Response holding the value from the given offset."""
    value = bytes(value)
    if mtu < 1:
        raise AttCodecError(f"MTU {mtu} too small for a Read Blob Response")
    if offset < 0 or offset > len(value):
        raise AttCodecError(f"offset {offset} past the end of a {len(value)} byte value")
    return bytes([Opcode.READ_BLOB_RESP]) + value[offset:offset + mtu - 1]


def decode_read_resp(pdu: bytes, max_len: Optional[int] = None) -> bytes:
    """Decode a Read Response; fails if the value is longer than max_len."""
    pdu = bytes(pdu)
    _check_opcode(pdu, Opcode.READ_RESP)
    value = pdu[1:]
    if max_len is not None and max_len < len(value):
        raise AttCodecError(f"value of {len(value)} bytes exceeds limit of {max_len}")
    return value


def encode_error_resp(opcode: int, handle: int, status: int) -> bytes:
    """Encode an Error Response to the given request opcode."""
    return bytes([Opcode.ERROR, opcode]) + put_u16(handle) + bytes([status])


def encode_find_info_req(start: int, end: int) -> bytes:
    """Encode a Find Information Request."""
    return bytes([Opcode.FIND_INFO_REQ]) + put_u16(start) + put_u16(end)


def decode_find_info_req(pdu: bytes) -> HandleRangeRequest:
    """Decode a Find Information Request."""
    pdu = bytes(pdu)
    _check_length(pdu, 5)
    _check_opcode(pdu, Opcode.FIND_INFO_REQ)
    return HandleRangeRequest(start=get_u16(pdu, 1), end=get_u16(pdu, 3))