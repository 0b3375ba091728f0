"""Bluetooth LE UUIDs, ATT PDU codecs, advertising data types and a GATT attribute database."""

__version__ = "1.2.0"

__all__ = ["advertising", "att", "att_requests", "att_writes", "attributedb", "uuid"]