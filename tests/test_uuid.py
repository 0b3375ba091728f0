import pytest

from blegatt.uuid import (
    HEART_RATE_MEASUREMENT_UUID,
    SAP_UUID,
    TEMPERATURE_MEASUREMENT_UUID,
    BtUUID,
    UUIDType,
)


def test_uuid16_string_form():
    assert str(BtUUID.uuid16(0x2A37)) == HEART_RATE_MEASUREMENT_UUID


def test_short_string_equals_full_string():
    assert BtUUID.from_string("2a1c") == BtUUID.from_string(TEMPERATURE_MEASUREMENT_UUID)


def test_from_string_types():
    assert BtUUID.from_string("2a1c").type is UUIDType.UUID16
    assert BtUUID.from_string("0x2a1c").type is UUIDType.UUID16
    assert BtUUID.from_string("00002a1c").type is UUIDType.UUID32
    assert BtUUID.from_string(TEMPERATURE_MEASUREMENT_UUID).type is UUIDType.UUID128


def test_uppercase_string_is_lowered():
    assert str(BtUUID.from_string(SAP_UUID)) == SAP_UUID.lower()


@pytest.mark.parametrize(
    "text",
    ["53f72b8c-ff27-4177-9eee-30ace844f8f2", "7309203e-349d-4c11-ac6b-baedd1819764"],
)
def test_string_round_trip(text):
    assert str(BtUUID.from_string(text)) == text


@pytest.mark.parametrize("text", ["", "xyz", "2a1", "2a1c5", "1234-5678", "g000"])
def test_invalid_strings(text):
    with pytest.raises(ValueError):
        BtUUID.from_string(text)


def test_to_uuid128_is_equal_and_same_hash():
    short = BtUUID.uuid16(0x2800)
    full = short.to_uuid128()
    assert full.type is UUIDType.UUID128
    assert full == short
    assert hash(full) == hash(short)


def test_uuid32_equals_uuid16_with_same_value():
    assert BtUUID.uuid32(0x2A37) == BtUUID.uuid16(0x2A37)
    assert BtUUID.uuid16(0x2A37) != BtUUID.uuid16(0x2A38)


def test_to_bytes_widths():
    assert BtUUID.uuid16(0x2800).to_bytes() == b"\x00\x28"
    assert len(BtUUID.uuid32(1).to_bytes()) == 4
    assert len(BtUUID.uuid16(1).to_uuid128().to_bytes()) == 16


def test_uuid128_bytes_round_trip():
    full = BtUUID.from_string("53f72b8c-ff27-4177-9eee-30ace844f8f2")
    assert BtUUID.uuid128(full.to_bytes()) == full
    assert full.to_bytes()[::-1].hex() == "53f72b8cff2741779eee30ace844f8f2"


def test_out_of_range_values():
    with pytest.raises(ValueError):
        BtUUID.uuid16(0x10000)
    with pytest.raises(ValueError):
        BtUUID.uuid32(-1)
    with pytest.raises(ValueError):
        BtUUID.uuid128(b"\x00" * 15)


def test_unspecified_uuid_has_no_forms():
    unspec = BtUUID(UUIDType.UNSPEC, 0)
    with pytest.raises(ValueError):
        unspec.to_uuid128()
    with pytest.raises(ValueError):
        str(unspec)
    with pytest.raises(ValueError):
        unspec.to_bytes()


def test_usable_as_dict_key():
    table = {BtUUID.uuid16(0x2A00): "name"}
    assert table[BtUUID.from_string("00002a00-0000-1000-8000-00805f9b34fb")] == "name"