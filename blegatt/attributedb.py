"""An attribute database for a GATT server: services, characteristics and descriptors."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import IntEnum, IntFlag
from typing import Callable, Dict, Iterable, List, Optional

from .att import CharProperty, put_uuid
from .uuid import BtUUID

_log = logging.getLogger(__name__)

UUID_PRIMARY_SERVICE = BtUUID.uuid16(0x2800)
UUID_SECONDARY_SERVICE = BtUUID.uuid16(0x2801)
UUID_INCLUDE = BtUUID.uuid16(0x2802)
UUID_CHARACTERISTIC = BtUUID.uuid16(0x2803)
UUID_CCCD = BtUUID.uuid16(0x2902)

_MAX_HANDLE = 0xFFFF

ReadCallback = Callable[[int, int, bytearray], int]
WriteCallback = Callable[[int, bytes], int]
AccessCallback = Callable[[int, "AccessOp", int, bytearray], int]


class AttributeType(IntEnum):
    """Kind of an entry in the attribute database."""

    PRIMARY_SERVICE = 0
    SECONDARY_SERVICE = 1
    INCLUDE = 2
    CHARACTERISTIC = 3
    CHARACTERISTIC_VALUE = 4
    DESCRIPTOR = 5


class AttPermission(IntFlag):
    """Access permissions of an attribute."""

    NONE = 0x00
    READ = 0x01
    WRITE = 0x02
    READ_ENCRYPT = 0x04
    READ_AUTHEN = 0x08
    READ_AUTHOR = 0x10
    WRITE_ENCRYPT = 0x20
    WRITE_AUTHEN = 0x40
    WRITE_AUTHOR = 0x80


class CharFlag(IntFlag):
    """Flags used to declare a characteristic in a service definition."""

    NONE = 0x0000
    BROADCAST = 0x0001
    READ = 0x0002
    WRITE_NO_RSP = 0x0004
    WRITE = 0x0008
    NOTIFY = 0x0010
    INDICATE = 0x0020
    AUTH_SIGN_WRITE = 0x0040
    RELIABLE_WRITE = 0x0080
    AUX_WRITE = 0x0100
    READ_ENC = 0x0200
    READ_AUTHEN = 0x0400
    READ_AUTHOR = 0x0800
    WRITE_ENC = 0x1000
    WRITE_AUTHEN = 0x2000
    WRITE_AUTHOR = 0x4000


class AccessOp(IntEnum):
    """Operation passed to an access callback."""

    READ_CHR = 0
    WRITE_CHR = 1
    READ_DSC = 2
    WRITE_DSC = 3


class ServiceType(IntEnum):
    """Whether a service is primary or secondary."""

    PRIMARY = 1
    SECONDARY = 2


class AttributeDatabaseError(Exception):
    """An attribute could not be added, found or changed."""


@dataclass
class Attribute:
    """One entry of the attribute database."""

    handle: int
    type: AttributeType
    uuid: BtUUID
    permissions: int = 0
    properties: int = 0
    value: bytes = b""
    value_handle: int = 0
    end_group_handle: int = 0
    read_cb: Optional[ReadCallback] = None
    write_cb: Optional[WriteCallback] = None


@dataclass
class DescriptorDef:
    """Declaration of a descriptor; ``handle`` is filled in on registration."""

    uuid: BtUUID
    permissions: int = AttPermission.READ
    access_cb: Optional[AccessCallback] = None
    handle: int = 0


@dataclass
class CharacteristicDef:
    """Declaration of a characteristic; ``val_handle`` is filled in on registration."""

    uuid: BtUUID
    flags: int = CharFlag.READ
    access_cb: Optional[AccessCallback] = None
    descriptors: List[DescriptorDef] = field(default_factory=list)
    val_handle: int = 0


@dataclass
class ServiceDef:
    """Declaration of a service; ``handle`` is filled in on registration."""

    uuid: BtUUID
    type: ServiceType = ServiceType.PRIMARY
    characteristics: List[CharacteristicDef] = field(default_factory=list)
    included_services: List[int] = field(default_factory=list)
    handle: int = 0


@dataclass
class _ServiceRange:
    start_handle: int
    end_handle: int


_PROPERTY_MAP = (
    (CharFlag.BROADCAST, CharProperty.BROADCAST),
    (CharFlag.READ, CharProperty.READ),
    (CharFlag.WRITE_NO_RSP, CharProperty.WRITE_WITHOUT_RESP),
    (CharFlag.WRITE, CharProperty.WRITE),
    (CharFlag.NOTIFY, CharProperty.NOTIFY),
    (CharFlag.INDICATE, CharProperty.INDICATE),
    (CharFlag.AUTH_SIGN_WRITE, CharProperty.AUTH),
)

_PERMISSION_MAP = (
    (CharFlag.READ, AttPermission.READ),
    (CharFlag.WRITE | CharFlag.WRITE_NO_RSP, AttPermission.WRITE),
    (CharFlag.READ_ENC, AttPermission.READ_ENCRYPT),
    (CharFlag.WRITE_ENC, AttPermission.WRITE_ENCRYPT),
    (CharFlag.READ_AUTHEN, AttPermission.READ_AUTHEN),
    (CharFlag.WRITE_AUTHEN, AttPermission.WRITE_AUTHEN),
)


def flags_to_properties(flags: int) -> CharProperty:
    """Characteristic declaration properties implied by definition flags."""
    props = CharProperty(0)
    for flag, prop in _PROPERTY_MAP:
        if flags & flag:
            props |= prop
    return props


def flags_to_permissions(flags: int) -> AttPermission:
    """Value attribute permissions implied by definition flags."""
    perms = AttPermission.NONE
    for flag, perm in _PERMISSION_MAP:
        if flags & flag:
            perms |= perm
    return perms


def _wrap_read(access_cb: AccessCallback, op: AccessOp) -> ReadCallback:
    def read(conn_handle: int, offset: int, out_data: bytearray) -> int:
        return access_cb(conn_handle, op, offset, out_data)

    return read


def _wrap_write(access_cb: AccessCallback, op: AccessOp) -> WriteCallback:
    def write(conn_handle: int, data: bytes) -> int:
        return access_cb(conn_handle, op, 0, bytearray(data))

    return write


class AttributeDatabase:
    """Attributes keyed by handle, with handles allocated from 1 upwards."""

    def __init__(self) -> None:
        self._attributes: Dict[int, Attribute] = {}
        self._services: List[_ServiceRange] = []
        self._next_handle = 1

    def __len__(self) -> int:
        return len(self._attributes)

    def _allocate_handle(self) -> int:
        if self._next_handle == _MAX_HANDLE:
            _log.error("Handle space exhausted!")
            raise AttributeDatabaseError("handle space exhausted")
        handle = self._next_handle
        self._next_handle += 1
        return handle

    def _add_service(self, uuid: BtUUID, kind: AttributeType, type_uuid: BtUUID) -> int:
        handle = self._allocate_handle()
        self._attributes[handle] = Attribute(
            handle=handle,
            type=kind,
            uuid=type_uuid,
            permissions=AttPermission.READ,
            value=put_uuid(uuid),
            end_group_handle=handle,
        )
        self._services.append(_ServiceRange(handle, handle))
        return handle

    def add_primary_service(self, uuid: BtUUID) -> int:
        """Add a primary service declaration and return its handle."""
        handle = self._add_service(uuid, AttributeType.PRIMARY_SERVICE, UUID_PRIMARY_SERVICE)
        _log.info("Added primary service %s at handle %d", uuid, handle)
        return handle

    def add_secondary_service(self, uuid: BtUUID) -> int:
        """Add a secondary service declaration and return its handle."""
        handle = self._add_service(
            uuid, AttributeType.SECONDARY_SERVICE, UUID_SECONDARY_SERVICE
        )
        _log.info("Added secondary service %s at handle %d", uuid, handle)
        return handle

    def add_include(self, service_handle: int, included_service_handle: int) -> int:
        """Add an include declaration to a service and return its handle."""
        handle = self._allocate_handle()
        inc_svc = self.get_attribute(included_service_handle)
        if inc_svc is None:
            _log.error("Included service handle %d not found", included_service_handle)
            raise AttributeDatabaseError(
                f"included service handle {included_service_handle} not found"
            )
        value = (
            included_service_handle.to_bytes(2, "little")
            + inc_svc.end_group_handle.to_bytes(2, "little")
        )
        if inc_svc.uuid.type == 16:
            value += inc_svc.uuid.value.to_bytes(2, "little")
        self._attributes[handle] = Attribute(
            handle=handle,
            type=AttributeType.INCLUDE,
            uuid=UUID_INCLUDE,
            permissions=AttPermission.READ,
            value=value,
        )
        self._update_service_end_handle(service_handle, handle)
        _log.info("Added include at handle %d", handle)
        return handle

    def add_characteristic(
        self, service_handle: int, uuid: BtUUID, properties: int, permissions: int
    ) -> int:
        """Add a characteristic declaration and value; return the declaration handle.

        A CCCD is added automatically when notify or indicate is set.
        """
        decl_handle = self._allocate_handle()
        value_handle = self._allocate_handle()
        properties = int(properties)

        self._attributes[decl_handle] = Attribute(
            handle=decl_handle,
            type=AttributeType.CHARACTERISTIC,
            uuid=UUID_CHARACTERISTIC,
            permissions=AttPermission.READ,
            properties=properties,
            value_handle=value_handle,
            value=bytes([properties]) + value_handle.to_bytes(2, "little") + put_uuid(uuid),
        )
        self._attributes[value_handle] = Attribute(
            handle=value_handle,
            type=AttributeType.CHARACTERISTIC_VALUE,
            uuid=uuid,
            permissions=int(permissions),
            properties=properties,
        )
        self._update_service_end_handle(service_handle, value_handle)

        if properties & (CharProperty.NOTIFY | CharProperty.INDICATE):
            cccd_handle = self.add_cccd(value_handle)
            self._update_service_end_handle(service_handle, cccd_handle)

        _log.info(
            "Added characteristic %s (decl=%d, value=%d)", uuid, decl_handle, value_handle
        )
        return decl_handle

    def add_descriptor(self, char_handle: int, uuid: BtUUID, permissions: int) -> int:
        """Add a descriptor after a characteristic and return its handle."""
        handle = self._allocate_handle()
        self._attributes[handle] = Attribute(
            handle=handle,
            type=AttributeType.DESCRIPTOR,
            uuid=uuid,
            permissions=int(permissions),
        )
        for svc in reversed(self._services):
            if svc.start_handle <= char_handle <= svc.end_handle:
                svc.end_handle = handle
                svc_attr = self.get_attribute(svc.start_handle)
                if svc_attr is not None:
                    svc_attr.end_group_handle = handle
                break
        _log.info("Added descriptor %s at handle %d", uuid, handle)
        return handle

    def add_cccd(self, char_value_handle: int) -> int:
        """Add a Client Characteristic Configuration Descriptor, initially zero."""
        handle = self.add_descriptor(
            char_value_handle, UUID_CCCD, AttPermission.READ | AttPermission.WRITE
        )
        self._attributes[handle].value = b"\x00\x00"
        _log.debug("Auto-added CCCD at handle %d for characteristic %d", handle, char_value_handle)
        return handle

    def _update_service_end_handle(self, service_handle: int, last_handle: int) -> None:
        for svc in self._services:
            if svc.start_handle == service_handle:
                svc.end_handle = last_handle
                break
        attr = self.get_attribute(service_handle)
        if attr is not None:
            attr.end_group_handle = last_handle

    def register_services(self, services: Iterable[ServiceDef]) -> None:
        """Add every service in the definitions, filling in their handles."""
        count = 0
        for svc_def in services:
            count += 1
            if svc_def.type == ServiceType.PRIMARY:
                svc_handle = self.add_primary_service(svc_def.uuid)
            else:
                svc_handle = self.add_secondary_service(svc_def.uuid)
            svc_def.handle = svc_handle

            for inc_handle in svc_def.included_services:
                try:
                    self.add_include(svc_handle, inc_handle)
                except AttributeDatabaseError as exc:
                    _log.error("Skipping include of %d: %s", inc_handle, exc)

            for char_def in svc_def.characteristics:
                decl_handle = self.add_characteristic(
                    svc_handle,
                    char_def.uuid,
                    flags_to_properties(char_def.flags),
                    flags_to_permissions(char_def.flags),
                )
                value_handle = decl_handle + 1
                char_def.val_handle = value_handle

                if char_def.access_cb is not None:
                    value_attr = self._attributes[value_handle]
                    value_attr.read_cb = _wrap_read(char_def.access_cb, AccessOp.READ_CHR)
                    value_attr.write_cb = _wrap_write(char_def.access_cb, AccessOp.WRITE_CHR)

                for dsc_def in char_def.descriptors:
                    dsc_handle = self.add_descriptor(
                        value_handle, dsc_def.uuid, dsc_def.permissions
                    )
                    dsc_def.handle = dsc_handle
                    if dsc_def.access_cb is not None:
                        dsc_attr = self._attributes[dsc_handle]
                        dsc_attr.read_cb = _wrap_read(dsc_def.access_cb, AccessOp.READ_DSC)
                        dsc_attr.write_cb = _wrap_write(dsc_def.access_cb, AccessOp.WRITE_DSC)

        _log.info("Registered %d services, total attributes: %d", count, len(self))

    def get_attribute(self, handle: int) -> Optional[Attribute]:
        """The attribute at a handle, or None."""
        return self._attributes.get(handle)

    def _in_range(self, start_handle: int, end_handle: int):
        for handle in sorted(self._attributes):
            if start_handle <= handle <= end_handle:
                yield self._attributes[handle]

    def find_by_type(self, start_handle: int, end_handle: int, type_uuid: BtUUID) -> List[Attribute]:
        """Attributes of a given type within an inclusive handle range."""
        return [a for a in self._in_range(start_handle, end_handle) if a.uuid == type_uuid]

    def find_by_type_value(
        self, start_handle: int, end_handle: int, type_uuid: BtUUID, value: bytes
    ) -> List[Attribute]:
        """Attributes of a given type and value within an inclusive handle range."""
        value = bytes(value)
        return [
            a
            for a in self._in_range(start_handle, end_handle)
            if a.uuid == type_uuid and a.value == value
        ]

    def get_range(self, start_handle: int, end_handle: int) -> List[Attribute]:
        """All attributes within an inclusive handle range, in handle order."""
        return list(self._in_range(start_handle, end_handle))

    def clear(self) -> None:
        """Remove everything and restart handle allocation at 1."""
        self._attributes.clear()
        self._services.clear()
        self._next_handle = 1

    def _value_attribute(self, handle: int) -> Attribute:
        attr = self.get_attribute(handle)
        if attr is None:
            _log.warning("Characteristic value handle %d not found", handle)
            raise AttributeDatabaseError(f"characteristic value handle {handle} not found")
        if attr.type is not AttributeType.CHARACTERISTIC_VALUE:
            _log.warning("Handle %d is not a characteristic value", handle)
            raise AttributeDatabaseError(f"handle {handle} is not a characteristic value")
        return attr

    def set_characteristic_value(self, handle: int, value: bytes) -> None:
        """Store the value of a characteristic."""
        self._value_attribute(handle).value = bytes(value)

    def get_characteristic_value(self, handle: int) -> bytes:
        """The stored value of a characteristic, or empty if there is none."""
        attr = self.get_attribute(handle)
        if attr is None or attr.type is not AttributeType.CHARACTERISTIC_VALUE:
            return b""
        return attr.value

    def _require(self, handle: int) -> Attribute:
        attr = self.get_attribute(handle)
        if attr is None:
            raise AttributeDatabaseError(f"attribute handle {handle} not found")
        return attr

    def set_read_callback(self, handle: int, callback: Optional[ReadCallback]) -> None:
        """Install the read callback of an attribute."""
        self._require(handle).read_cb = callback

    def set_write_callback(self, handle: int, callback: Optional[WriteCallback]) -> None:
        """Install the write callback of an attribute."""
        self._require(handle).write_cb = callback