"""Advertising data types: GAP record types, event types and parsed scan results."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Optional

from .uuid import BtUUID


class GapType(IntEnum):
    """Generic Access Profile advertising data types (an incomplete list)."""

    FLAGS = 0x01
    INCOMPLETE_LIST_OF_16_BIT_UUIDS = 0x02
    COMPLETE_LIST_OF_16_BIT_UUIDS = 0x03
    INCOMPLETE_LIST_OF_128_BIT_UUIDS = 0x06
    COMPLETE_LIST_OF_128_BIT_UUIDS = 0x07
    SHORTENED_LOCAL_NAME = 0x08
    COMPLETE_LOCAL_NAME = 0x09
    SERVICE_DATA_16_BIT_UUID = 0x16
    MANUFACTURER_DATA = 0xFF


class LeAdvertisingEventType(IntEnum):
    """Kind of an LE advertising report."""

    ADV_IND = 0x00
    """Connectable undirected: any device can connect or ask for more."""
    ADV_DIRECT_IND = 0x01
    """Connectable directed: only a single known device may connect."""
    ADV_SCAN_IND = 0x02
    """Scannable undirected: devices may ask for more information."""
    ADV_NONCONN_IND = 0x03
    """Non-connectable undirected: purely informative broadcast."""
    SCAN_RSP = 0x04
    """Result coming back after a scan request."""


class HCIScannerError(RuntimeError):
    """Generic error raised while scanning."""


class HCIParseError(HCIScannerError):
    """The controller produced data that could not be parsed."""


@dataclass
class AdvertisingName:
    """A local name from advertising data, and whether it is the complete name."""

    name: str
    complete: bool


_LE_LIMITED_DISCOVERABLE = 0x01
_LE_GENERAL_DISCOVERABLE = 0x02
_BR_EDR_UNSUPPORTED = 0x04
_SIMULTANEOUS_LE_BR_CONTROLLER = 0x08
_SIMULTANEOUS_LE_BR_HOST = 0x10


@dataclass
class AdvertisingFlags:
    """The flags advertising record, decoded into its bits."""

    LE_limited_discoverable: bool = False
    LE_general_discoverable: bool = False
    BR_EDR_unsupported: bool = False
    simultaneous_LE_BR_controller: bool = False
    simultaneous_LE_BR_host: bool = False
    flag_data: bytes = b""

    @classmethod
    def from_bytes(cls, data: bytes) -> "AdvertisingFlags":
        """Decode the payload of a flags record; the bits live in its first byte."""
        raw = bytes(data)
        bits = raw[0] if raw else 0
        return cls(
            LE_limited_discoverable=bool(bits & _LE_LIMITED_DISCOVERABLE),
            LE_general_discoverable=bool(bits & _LE_GENERAL_DISCOVERABLE),
            BR_EDR_unsupported=bool(bits & _BR_EDR_UNSUPPORTED),
            simultaneous_LE_BR_controller=bool(bits & _SIMULTANEOUS_LE_BR_CONTROLLER),
            simultaneous_LE_BR_host=bool(bits & _SIMULTANEOUS_LE_BR_HOST),
            flag_data=raw,
        )


@dataclass
class AdvertisingResponse:
    """One parsed advertising report."""

    address: str = ""
    type: LeAdvertisingEventType = LeAdvertisingEventType.ADV_IND
    rssi: int = 0
    UUIDs: List[BtUUID] = field(default_factory=list)
    uuid_16_bit_complete: bool = False
    uuid_32_bit_complete: bool = False
    uuid_128_bit_complete: bool = False
    local_name: Optional[AdvertisingName] = None
    flags: Optional[AdvertisingFlags] = None
    manufacturer_specific_data: List[bytes] = field(default_factory=list)
    service_data: List[bytes] = field(default_factory=list)
    unparsed_data_with_types: List[bytes] = field(default_factory=list)
    raw_packet: List[bytes] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.type = LeAdvertisingEventType(self.type)
        if not -128 <= self.rssi <= 127:
            raise ValueError(f"RSSI {self.rssi!r} does not fit a signed byte")