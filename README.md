# blegatt

Building blocks for Bluetooth Low Energy software, in pure Python with no
runtime dependencies:

- `blegatt.uuid`: Bluetooth UUIDs (`BtUUID`, `UUIDType`) in 16-, 32- and
  128-bit forms. `BtUUID.from_string` accepts `"2a00"`, `"0x2a00"`, eight hex
  digits, or the full dashed form. `to_uuid128` expands a short UUID onto the
  Bluetooth base UUID, and `to_bytes` gives the little-endian wire bytes.
  UUIDs compare equal when their 128-bit forms match, so
  `BtUUID.uuid16(0x2a00) == BtUUID.from_string("00002a00-0000-1000-8000-00805f9b34fb")`.
  The module also holds named constants for common service UUIDs, such as
  `HEART_RATE_UUID`.
- `blegatt.att`: ATT opcodes, error codes and characteristic property bits
  (`Opcode`, `ErrorCode`, `CharProperty`), the `AttRange` handle range, and
  little-endian field helpers (`get_u8` to `get_u128`, `put_u8` to `put_u128`,
  `put_uuid`, `get_uuid16`, `get_uuid128`).
- `blegatt.att_requests`: encoders and decoders for discovery and read PDUs:
  Read By Group Type, Find By Type Value, Read By Type, Read, Read Blob, Read
  Response, Error Response and Find Information. `op_to_str` and
  `ecode_to_str` give readable names for opcodes and error codes.
- `blegatt.att_writes`: encoders and decoders for Write Request and Command,
  Write Response, Handle Value Notification and Indication, Confirmation, MTU
  exchange, Prepare Write and Execute Write.
- `blegatt.attributedb`: `AttributeDatabase`, the attribute table a GATT
  server serves from. You fill it directly with `add_primary_service`,
  `add_characteristic`, `add_descriptor` and related methods, or declare it
  with `ServiceDef`, `CharacteristicDef` and `DescriptorDef` and pass the
  declarations to `register_services`.
- `blegatt.advertising`: advertising report types (`AdvertisingResponse`,
  `AdvertisingName`, `AdvertisingFlags`, `GapType`, `LeAdvertisingEventType`)
  and the scanner exceptions `HCIScannerError` and `HCIParseError`.

## Encoding and decoding PDUs

```python
from blegatt.uuid import BtUUID
from blegatt.att_requests import encode_read_by_group_req, encode_read_req, decode_read_req
from blegatt.att_writes import encode_write_req, decode_write_req

primary = BtUUID.uuid16(0x2800)
pdu = encode_read_by_group_req(0x0001, 0xFFFF, primary, 23)

assert decode_read_req(encode_read_req(0x0003)) == 0x0003

write = decode_write_req(encode_write_req(0x0010, b"\x01"))
print(write.handle, write.value)
```

Encoders that take an `mtu` argument (23 by default) cut the value to fit,
except notifications and indications, which must fit whole. A PDU that is too
short, has the wrong opcode or cannot be encoded raises `AttCodecError`, a
subclass of `ValueError`.

## Building a GATT table

```python
from blegatt.uuid import BtUUID
from blegatt.attributedb import (
    AttributeDatabase, CharacteristicDef, CharFlag, ServiceDef,
)

battery_level = CharacteristicDef(
    uuid=BtUUID.uuid16(0x2A19),
    flags=CharFlag.READ | CharFlag.NOTIFY,
)
db = AttributeDatabase()
db.register_services([
    ServiceDef(uuid=BtUUID.uuid16(0x180F), characteristics=[battery_level]),
])

db.set_characteristic_value(battery_level.val_handle, b"\x64")
print(len(db), db.get_characteristic_value(battery_level.val_handle))
```

Handles are allocated from 1 upwards, and `register_services` writes the
allocated handles back into the definitions (`ServiceDef.handle`,
`CharacteristicDef.val_handle`, `DescriptorDef.handle`). A characteristic that
can notify or indicate gets a Client Characteristic Configuration descriptor,
initially zero. `find_by_type`, `find_by_type_value` and `get_range` return
attributes in handle order. A missing handle, a value set on something that is
not a characteristic value, or an exhausted handle space raises
`AttributeDatabaseError`.

## What this package does not do

It does not talk to a Bluetooth controller. There is no scanning, no
connection handling, no transport, no GATT client and no server event loop.
The advertising module defines the report types but does not parse raw
advertising packets. The package encodes and decodes PDUs and keeps the
attribute table; sending and receiving them is left to the caller.

## Running the tests

```
pip install blegatt[test]
pytest
```