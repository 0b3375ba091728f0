import pytest

from blegatt.att import CharProperty, put_uuid
from blegatt.attributedb import (
    AccessOp,
    AttPermission,
    AttributeDatabase,
    AttributeDatabaseError,
    AttributeType,
    CharacteristicDef,
    CharFlag,
    DescriptorDef,
    ServiceDef,
    ServiceType,
    flags_to_permissions,
    flags_to_properties,
)
from blegatt.uuid import BtUUID

HEART_RATE = BtUUID.uuid16(0x180D)
MEASUREMENT = BtUUID.uuid16(0x2A37)
CUSTOM = BtUUID.from_string("7309203e-349d-4c11-ac6b-baedd1819764")
PRIMARY = BtUUID.uuid16(0x2800)
CHARACTERISTIC = BtUUID.uuid16(0x2803)
CCCD = BtUUID.uuid16(0x2902)


@pytest.fixture
def db():
    return AttributeDatabase()


def test_first_handle_is_one(db):
    assert db.add_primary_service(HEART_RATE) == 1


def test_primary_service_value_is_uuid_bytes(db):
    handle = db.add_primary_service(HEART_RATE)
    attr = db.get_attribute(handle)
    assert attr.value == b"\x0d\x18"
    assert attr.uuid == PRIMARY
    assert attr.type is AttributeType.PRIMARY_SERVICE
    assert attr.permissions == AttPermission.READ


def test_128_bit_service_value(db):
    handle = db.add_secondary_service(CUSTOM)
    attr = db.get_attribute(handle)
    assert attr.value == CUSTOM.to_bytes()
    assert attr.type is AttributeType.SECONDARY_SERVICE


def test_characteristic_declaration_layout(db):
    svc = db.add_primary_service(HEART_RATE)
    props = CharProperty.READ
    decl = db.add_characteristic(svc, MEASUREMENT, props, AttPermission.READ)
    decl_attr = db.get_attribute(decl)
    value_handle = decl + 1
    assert decl_attr.uuid == CHARACTERISTIC
    assert decl_attr.value_handle == value_handle
    assert decl_attr.value == bytes([props]) + value_handle.to_bytes(2, "little") + put_uuid(MEASUREMENT)
    value_attr = db.get_attribute(value_handle)
    assert value_attr.type is AttributeType.CHARACTERISTIC_VALUE
    assert value_attr.uuid == MEASUREMENT
    assert db.get_attribute(svc).end_group_handle == value_handle


def test_notify_adds_cccd(db):
    svc = db.add_primary_service(HEART_RATE)
    decl = db.add_characteristic(
        svc, MEASUREMENT, CharProperty.READ | CharProperty.NOTIFY, AttPermission.READ
    )
    cccd = db.get_attribute(decl + 2)
    assert cccd.uuid == CCCD
    assert cccd.value == b"\x00\x00"
    assert cccd.permissions == AttPermission.READ | AttPermission.WRITE
    assert db.get_attribute(svc).end_group_handle == decl + 2
    assert len(db) == 4


def test_no_cccd_without_notify_or_indicate(db):
    svc = db.add_primary_service(HEART_RATE)
    db.add_characteristic(svc, MEASUREMENT, CharProperty.READ, AttPermission.READ)
    assert db.find_by_type(1, 0xFFFF, CCCD) == []


def test_descriptor_extends_service(db):
    svc = db.add_primary_service(HEART_RATE)
    decl = db.add_characteristic(svc, MEASUREMENT, CharProperty.READ, AttPermission.READ)
    dsc = db.add_descriptor(decl + 1, BtUUID.uuid16(0x2901), AttPermission.READ)
    assert dsc == decl + 2
    assert db.get_attribute(svc).end_group_handle == dsc
    assert db.get_attribute(dsc).type is AttributeType.DESCRIPTOR


def test_include_refers_to_included_service(db):
    inner = db.add_primary_service(HEART_RATE)
    outer = db.add_primary_service(CUSTOM)
    inc = db.add_include(outer, inner)
    attr = db.get_attribute(inc)
    assert attr.type is AttributeType.INCLUDE
    assert attr.value[0:2] == inner.to_bytes(2, "little")
    end = db.get_attribute(inner).end_group_handle
    assert attr.value[2:4] == end.to_bytes(2, "little")
    assert db.get_attribute(outer).end_group_handle == inc


def test_include_of_missing_service_raises(db):
    outer = db.add_primary_service(HEART_RATE)
    with pytest.raises(AttributeDatabaseError):
        db.add_include(outer, 999)


def test_handle_exhaustion(db):
    db._next_handle = 0xFFFF
    with pytest.raises(AttributeDatabaseError):
        db.add_primary_service(HEART_RATE)


def test_flags_to_properties():
    props = flags_to_properties(CharFlag.READ | CharFlag.NOTIFY | CharFlag.WRITE_NO_RSP)
    assert props == CharProperty.READ | CharProperty.NOTIFY | CharProperty.WRITE_WITHOUT_RESP
    assert flags_to_properties(CharFlag.AUTH_SIGN_WRITE) == CharProperty.AUTH


def test_flags_to_permissions():
    assert flags_to_permissions(CharFlag.WRITE_NO_RSP) == AttPermission.WRITE
    assert flags_to_permissions(CharFlag.READ | CharFlag.READ_ENC) == (
        AttPermission.READ | AttPermission.READ_ENCRYPT
    )
    assert flags_to_permissions(CharFlag.NOTIFY) == AttPermission.NONE


def test_register_services_fills_handles(db):
    dsc = DescriptorDef(uuid=BtUUID.uuid16(0x2901))
    char = CharacteristicDef(
        uuid=MEASUREMENT, flags=CharFlag.READ | CharFlag.NOTIFY, descriptors=[dsc]
    )
    svc = ServiceDef(uuid=HEART_RATE, characteristics=[char])
    db.register_services([svc])
    assert db.get_attribute(svc.handle).type is AttributeType.PRIMARY_SERVICE
    assert db.get_attribute(char.val_handle).uuid == MEASUREMENT
    assert db.get_attribute(dsc.handle).uuid == dsc.uuid
    assert db.get_attribute(svc.handle).end_group_handle == dsc.handle


def test_register_secondary_service(db):
    svc = ServiceDef(uuid=CUSTOM, type=ServiceType.SECONDARY)
    db.register_services([svc])
    assert db.get_attribute(svc.handle).type is AttributeType.SECONDARY_SERVICE


def test_access_callbacks_receive_operations(db):
    calls = []

    def access(conn, op, offset, data):
        calls.append((conn, op, offset, bytes(data)))
        if op in (AccessOp.READ_CHR, AccessOp.READ_DSC):
            data.extend(b"hi")
        return 0

    dsc = DescriptorDef(uuid=BtUUID.uuid16(0x2901), access_cb=access)
    char = CharacteristicDef(uuid=MEASUREMENT, access_cb=access, descriptors=[dsc])
    db.register_services([ServiceDef(uuid=HEART_RATE, characteristics=[char])])

    out = bytearray()
    value_attr = db.get_attribute(char.val_handle)
    assert value_attr.read_cb(7, 3, out) == 0
    assert out == bytearray(b"hi")
    assert value_attr.write_cb(7, b"abc") == 0
    db.get_attribute(dsc.handle).write_cb(8, b"z")
    assert calls == [
        (7, AccessOp.READ_CHR, 3, b""),
        (7, AccessOp.WRITE_CHR, 0, b"abc"),
        (8, AccessOp.WRITE_DSC, 0, b"z"),
    ]


def test_register_skips_missing_include(db):
    svc = ServiceDef(uuid=HEART_RATE, included_services=[500])
    db.register_services([svc])
    assert db.find_by_type(1, 0xFFFF, BtUUID.uuid16(0x2802)) == []
    assert db.get_attribute(svc.handle).uuid == PRIMARY


def test_find_by_type_and_value(db):
    a = db.add_primary_service(HEART_RATE)
    b = db.add_primary_service(CUSTOM)
    assert [x.handle for x in db.find_by_type(1, 0xFFFF, PRIMARY)] == [a, b]
    found = db.find_by_type_value(1, 0xFFFF, PRIMARY, put_uuid(CUSTOM))
    assert [x.handle for x in found] == [b]
    assert db.find_by_type(b + 1, 0xFFFF, PRIMARY) == []


def test_get_range_is_inclusive_and_ordered(db):
    svc = db.add_primary_service(HEART_RATE)
    decl = db.add_characteristic(svc, MEASUREMENT, CharProperty.READ, AttPermission.READ)
    handles = [a.handle for a in db.get_range(svc, decl + 1)]
    assert handles == [svc, decl, decl + 1]
    assert [a.handle for a in db.get_range(decl, decl)] == [decl]


def test_clear_restarts_handles(db):
    db.add_primary_service(HEART_RATE)
    db.add_primary_service(CUSTOM)
    db.clear()
    assert len(db) == 0
    assert db.add_primary_service(HEART_RATE) == 1


def test_characteristic_value_round_trip(db):
    svc = db.add_primary_service(HEART_RATE)
    decl = db.add_characteristic(svc, MEASUREMENT, CharProperty.READ, AttPermission.READ)
    db.set_characteristic_value(decl + 1, b"\x01\x02")
    assert db.get_characteristic_value(decl + 1) == b"\x01\x02"


def test_characteristic_value_errors(db):
    svc = db.add_primary_service(HEART_RATE)
    with pytest.raises(AttributeDatabaseError):
        db.set_characteristic_value(svc, b"x")
    with pytest.raises(AttributeDatabaseError):
        db.set_characteristic_value(42, b"x")
    assert db.get_characteristic_value(svc) == b""
    assert db.get_characteristic_value(42) == b""


def test_set_callbacks(db):
    svc = db.add_primary_service(HEART_RATE)

    def reader(conn, offset, out):
        return 0

    def writer(conn, data):
        return 0

    db.set_read_callback(svc, reader)
    db.set_write_callback(svc, writer)
    assert db.get_attribute(svc).read_cb is reader
    assert db.get_attribute(svc).write_cb is writer
    with pytest.raises(AttributeDatabaseError):
        db.set_read_callback(77, reader)
    with pytest.raises(AttributeDatabaseError):
        db.set_write_callback(77, writer)