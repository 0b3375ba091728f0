"""Encoders and decoders for attribute protocol write, notify and MTU PDUs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .att import (
    ATT_CANCEL_ALL_PREP_WRITES,
    ATT_DEFAULT_MTU,
    ATT_WRITE_ALL_PREP_WRITES,
    Opcode,
    get_u16,
    put_u16,
)
from .att_requests import AttCodecError, op_to_str


@dataclass(frozen=True)
class WriteRequest:
    """A decoded Write Request or Write Command."""

    handle: int
    value: bytes


@dataclass(frozen=True)
class Indication:
    """A decoded Handle Value Indication."""

    handle: int
    value: bytes


@dataclass(frozen=True)
class PrepareWrite:
    """A decoded Prepare Write PDU."""

    handle: int
    offset: int
    value: bytes


def _expect(pdu: bytes, min_len: int, *opcodes: Opcode) -> bytes:
    pdu = bytes(pdu)
    if len(pdu) < min_len:
        raise AttCodecError(f"PDU of {len(pdu)} bytes is shorter than {min_len}")
    if not pdu:
        raise AttCodecError("empty PDU")
    if pdu[0] not in opcodes:
        wanted = " or ".join(f"{op_to_str(op)} (0x{int(op):02x})" for op in opcodes)
        raise AttCodecError(f"expected {wanted}, got opcode 0x{pdu[0]:02x}")
    return pdu


def _require_mtu(mtu: int, needed: int, what: str) -> None:
    if mtu < needed:
        raise AttCodecError(f"MTU {mtu} too small for {what} of {needed} bytes")


def _encode_handle_value(opcode: Opcode, handle: int, value: bytes, mtu: int) -> bytes:
    _require_mtu(mtu, 3, op_to_str(opcode))
    return bytes([opcode]) + put_u16(handle) + bytes(value)[: mtu - 3]


def encode_write_cmd(handle: int, value: bytes, mtu: int = ATT_DEFAULT_MTU) -> bytes:
    """Encode a Write Command; the value is cut to fit the MTU."""
    return _encode_handle_value(Opcode.WRITE_CMD, handle, value, mtu)


def decode_write_cmd(pdu: bytes) -> WriteRequest:
    """Decode a Write Command."""
    pdu = _expect(pdu, 3, Opcode.WRITE_CMD)
    return WriteRequest(handle=get_u16(pdu, 1), value=pdu[3:])


def encode_write_req(handle: int, value: bytes, mtu: int = ATT_DEFAULT_MTU) -> bytes:
    """Encode a Write Request; the value is cut to fit the MTU."""
    return _encode_handle_value(Opcode.WRITE_REQ, handle, value, mtu)


def decode_write_req(pdu: bytes) -> WriteRequest:
    """Decode a Write Request."""
    pdu = _expect(pdu, 3, Opcode.WRITE_REQ)
    return WriteRequest(handle=get_u16(pdu, 1), value=pdu[3:])


def encode_write_resp() -> bytes:
    """Encode a Write Response."""
    return bytes([Opcode.WRITE_RESP])


def decode_write_resp(pdu: bytes) -> int:
    """Check a Write Response and return its length."""
    return len(_expect(pdu, 1, Opcode.WRITE_RESP))


def _encode_handle_value_strict(
    opcode: Opcode, handle: int, value: bytes, mtu: int
) -> bytes:
    value = bytes(value)
    _require_mtu(mtu, len(value) + 3, op_to_str(opcode))
    return bytes([opcode]) + put_u16(handle) + value


def encode_notification(handle: int, value: bytes, mtu: int = ATT_DEFAULT_MTU) -> bytes:
    """Encode a Handle Value Notification; the whole value must fit the MTU."""
    return _encode_handle_value_strict(Opcode.HANDLE_NOTIFY, handle, value, mtu)


def encode_indication(handle: int, value: bytes, mtu: int = ATT_DEFAULT_MTU) -> bytes:
    """Encode a Handle Value Indication; the whole value must fit the MTU."""
    return _encode_handle_value_strict(Opcode.HANDLE_IND, handle, value, mtu)


def decode_indication(pdu: bytes, max_len: Optional[int] = None) -> Indication:
    """Decode a Handle Value Indication, keeping at most max_len value bytes."""
    pdu = bytes(pdu)
    if not pdu:
        raise AttCodecError("empty PDU")
    pdu = _expect(pdu, 0, Opcode.HANDLE_IND)
    if len(pdu) < 3:
        raise AttCodecError(f"PDU of {len(pdu)} bytes is shorter than 3")
    value = pdu[3:]
    if max_len is not None:
        value = value[: max(max_len, 0)]
    return Indication(handle=get_u16(pdu, 1), value=value)


def encode_confirmation() -> bytes:
    """Encode a Handle Value Confirmation."""
    return bytes([Opcode.HANDLE_CNF])


def encode_mtu_req(mtu: int) -> bytes:
    """Encode an Exchange MTU Request."""
    return bytes([Opcode.MTU_REQ]) + put_u16(mtu)


def decode_mtu_req(pdu: bytes) -> int:
    """Decode an Exchange MTU Request, returning the client MTU."""
    return get_u16(_expect(pdu, 3, Opcode.MTU_REQ), 1)


def encode_mtu_resp(mtu: int) -> bytes:
    """Encode an Exchange MTU Response."""
    return bytes([Opcode.MTU_RESP]) + put_u16(mtu)


def decode_mtu_resp(pdu: bytes) -> int:
    """Decode an Exchange MTU Response, returning the server MTU."""
    return get_u16(_expect(pdu, 3, Opcode.MTU_RESP), 1)


def encode_prep_write_req(
    handle: int, offset: int, value: bytes, mtu: int = ATT_DEFAULT_MTU
) -> bytes:
    """Encode a Prepare Write Request; the value is cut to fit the MTU."""
    _require_mtu(mtu, 5, "Prepare Write Request")
    return (
        bytes([Opcode.PREP_WRITE_REQ])
        + put_u16(handle)
        + put_u16(offset)
        + bytes(value)[: mtu - 5]
    )


def decode_prep_write_resp(pdu: bytes) -> PrepareWrite:
    """Decode a Prepare Write PDU (the response echoes the request layout)."""
    pdu = _expect(pdu, 5, Opcode.PREP_WRITE_RESP, Opcode.PREP_WRITE_REQ)
    return PrepareWrite(handle=get_u16(pdu, 1), offset=get_u16(pdu, 3), value=pdu[5:])


def encode_exec_write_req(flags: int) -> bytes:
    """Encode an Execute Write Request; flags must be 0 (cancel) or 1 (write)."""
    if flags not in (ATT_CANCEL_ALL_PREP_WRITES, ATT_WRITE_ALL_PREP_WRITES):
        raise AttCodecError(f"invalid execute write flags {flags!r}")
    return bytes([Opcode.EXEC_WRITE_REQ, flags])


def decode_exec_write_resp(pdu: bytes) -> int:
    """Check an Execute Write Response and return its length."""
    return len(_expect(pdu, 1, Opcode.EXEC_WRITE_RESP))