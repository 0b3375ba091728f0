"""Bluetooth UUIDs in their 16, 32 and 128 bit forms."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import IntEnum
from typing import Union

GENERIC_AUDIO_UUID = "00001203-0000-1000-8000-00805f9b34fb"

HSP_HS_UUID = "00001108-0000-1000-8000-00805f9b34fb"
HSP_AG_UUID = "00001112-0000-1000-8000-00805f9b34fb"

HFP_HS_UUID = "0000111e-0000-1000-8000-00805f9b34fb"
HFP_AG_UUID = "0000111f-0000-1000-8000-00805f9b34fb"

ADVANCED_AUDIO_UUID = "0000110d-0000-1000-8000-00805f9b34fb"

A2DP_SOURCE_UUID = "0000110a-0000-1000-8000-00805f9b34fb"
A2DP_SINK_UUID = "0000110b-0000-1000-8000-00805f9b34fb"

AVRCP_REMOTE_UUID = "0000110e-0000-1000-8000-00805f9b34fb"
AVRCP_TARGET_UUID = "0000110c-0000-1000-8000-00805f9b34fb"

PANU_UUID = "00001115-0000-1000-8000-00805f9b34fb"
NAP_UUID = "00001116-0000-1000-8000-00805f9b34fb"
GN_UUID = "00001117-0000-1000-8000-00805f9b34fb"
BNEP_SVC_UUID = "0000000f-0000-1000-8000-00805f9b34fb"

PNPID_UUID = "00002a50-0000-1000-8000-00805f9b34fb"
DEVICE_INFORMATION_UUID = "0000180a-0000-1000-8000-00805f9b34fb"

GATT_UUID = "00001801-0000-1000-8000-00805f9b34fb"
IMMEDIATE_ALERT_UUID = "00001802-0000-1000-8000-00805f9b34fb"
LINK_LOSS_UUID = "00001803-0000-1000-8000-00805f9b34fb"
TX_POWER_UUID = "00001804-0000-1000-8000-00805f9b34fb"

SAP_UUID = "0000112D-0000-1000-8000-00805f9b34fb"

HEART_RATE_UUID = "0000180d-0000-1000-8000-00805f9b34fb"
HEART_RATE_MEASUREMENT_UUID = "00002a37-0000-1000-8000-00805f9b34fb"
BODY_SENSOR_LOCATION_UUID = "00002a38-0000-1000-8000-00805f9b34fb"
HEART_RATE_CONTROL_POINT_UUID = "00002a39-0000-1000-8000-00805f9b34fb"

HEALTH_THERMOMETER_UUID = "00001809-0000-1000-8000-00805f9b34fb"
TEMPERATURE_MEASUREMENT_UUID = "00002a1c-0000-1000-8000-00805f9b34fb"
TEMPERATURE_TYPE_UUID = "00002a1d-0000-1000-8000-00805f9b34fb"
INTERMEDIATE_TEMPERATURE_UUID = "00002a1e-0000-1000-8000-00805f9b34fb"
MEASUREMENT_INTERVAL_UUID = "00002a21-0000-1000-8000-00805f9b34fb"

CYCLING_SC_UUID = "00001816-0000-1000-8000-00805f9b34fb"
CSC_MEASUREMENT_UUID = "00002a5b-0000-1000-8000-00805f9b34fb"
CSC_FEATURE_UUID = "00002a5c-0000-1000-8000-00805f9b34fb"
SENSOR_LOCATION_UUID = "00002a5d-0000-1000-8000-00805f9b34fb"
SC_CONTROL_POINT_UUID = "00002a55-0000-1000-8000-00805f9b34fb"

RFCOMM_UUID_STR = "00000003-0000-1000-8000-00805f9b34fb"

HDP_UUID = "00001400-0000-1000-8000-00805f9b34fb"
HDP_SOURCE_UUID = "00001401-0000-1000-8000-00805f9b34fb"
HDP_SINK_UUID = "00001402-0000-1000-8000-00805f9b34fb"

HID_UUID = "00001124-0000-1000-8000-00805f9b34fb"

DUN_GW_UUID = "00001103-0000-1000-8000-00805f9b34fb"

GAP_UUID = "00001800-0000-1000-8000-00805f9b34fb"
PNP_UUID = "00001200-0000-1000-8000-00805f9b34fb"

SPP_UUID = "00001101-0000-1000-8000-00805f9b34fb"

OBEX_SYNC_UUID = "00001104-0000-1000-8000-00805f9b34fb"
OBEX_OPP_UUID = "00001105-0000-1000-8000-00805f9b34fb"
OBEX_FTP_UUID = "00001106-0000-1000-8000-00805f9b34fb"
OBEX_PCE_UUID = "0000112e-0000-1000-8000-00805f9b34fb"
OBEX_PSE_UUID = "0000112f-0000-1000-8000-00805f9b34fb"
OBEX_PBAP_UUID = "00001130-0000-1000-8000-00805f9b34fb"
OBEX_MAS_UUID = "00001132-0000-1000-8000-00805f9b34fb"
OBEX_MNS_UUID = "00001133-0000-1000-8000-00805f9b34fb"
OBEX_MAP_UUID = "00001134-0000-1000-8000-00805f9b34fb"

# The Bluetooth base UUID 00000000-0000-1000-8000-00805f9b34fb.
_BASE_UUID = 0x0000000000001000800000805F9B34FB

_UUID16_RE = re.compile(r"^(?:0[xX])?([0-9a-fA-F]{4})$")
_UUID32_RE = re.compile(r"^(?:0[xX])?([0-9a-fA-F]{8})$")
_UUID128_RE = re.compile(
    r"^([0-9a-fA-F]{8})-([0-9a-fA-F]{4})-([0-9a-fA-F]{4})-"
    r"([0-9a-fA-F]{4})-([0-9a-fA-F]{12})$"
)


class UUIDType(IntEnum):
    """Width of a Bluetooth UUID in bits."""

    UNSPEC = 0
    UUID16 = 16
    UUID32 = 32
    UUID128 = 128


@dataclass(frozen=True, eq=False)
class BtUUID:
    """A Bluetooth UUID; the value is held as an unsigned integer."""

    type: UUIDType
    value: int

    def __post_init__(self) -> None:
        kind = UUIDType(self.type)
        object.__setattr__(self, "type", kind)
        limit = 1 << int(kind) if kind is not UUIDType.UNSPEC else 1
        if not 0 <= self.value < limit:
            raise ValueError(f"value {self.value!r} does not fit a {kind.name} UUID")

    @classmethod
    def uuid16(cls, value: int) -> "BtUUID":
        """Create a 16-bit UUID."""
        return cls(UUIDType.UUID16, value)

    @classmethod
    def uuid32(cls, value: int) -> "BtUUID":
        """Create a 32-bit UUID."""
        return cls(UUIDType.UUID32, value)

    @classmethod
    def uuid128(cls, value: Union[int, bytes, bytearray]) -> "BtUUID":
        """Create a 128-bit UUID from an integer or 16 bytes in wire (little-endian) order."""
        if isinstance(value, (bytes, bytearray, memoryview)):
            raw = bytes(value)
            if len(raw) != 16:
                raise ValueError(f"a 128-bit UUID needs 16 bytes, got {len(raw)}")
            value = int.from_bytes(raw, "little")
        return cls(UUIDType.UUID128, value)

    @classmethod
    def from_string(cls, text: str) -> "BtUUID":
        """Parse a 16-bit, 32-bit or full 128-bit textual UUID."""
        match = _UUID128_RE.match(text)
        if match:
            return cls.uuid128(int("".join(match.groups()), 16))
        match = _UUID32_RE.match(text)
        if match:
            return cls.uuid32(int(match.group(1), 16))
        match = _UUID16_RE.match(text)
        if match:
            return cls.uuid16(int(match.group(1), 16))
        raise ValueError(f"invalid UUID string: {text!r}")

    def to_uuid128(self) -> "BtUUID":
        """Expand onto the Bluetooth base UUID."""
        if self.type is UUIDType.UUID128:
            return self
        if self.type is UUIDType.UNSPEC:
            raise ValueError("an unspecified UUID has no 128-bit form")
        return BtUUID(UUIDType.UUID128, _BASE_UUID | (self.value << 96))

    def to_bytes(self) -> bytes:
        """Little-endian wire bytes of the UUID at its own width."""
        if self.type is UUIDType.UNSPEC:
            raise ValueError("an unspecified UUID has no wire form")
        return self.value.to_bytes(int(self.type) // 8, "little")

    def _key(self) -> tuple:
        if self.type is UUIDType.UNSPEC:
            return (UUIDType.UNSPEC, self.value)
        return (UUIDType.UUID128, self.to_uuid128().value)

    def __str__(self) -> str:
        if self.type is UUIDType.UNSPEC:
            raise ValueError("an unspecified UUID has no string form")
        digits = f"{self.to_uuid128().value:032x}"
        return "-".join(
            (digits[0:8], digits[8:12], digits[12:16], digits[16:20], digits[20:32])
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BtUUID):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())