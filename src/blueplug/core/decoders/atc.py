"""Custom firmware for Xiaomi LYWSD03MMC style thermometers.

Both layouts are broadcast under the Environmental Sensing service UUID and
are told apart by length: the ATC1441 frame is 13 bytes big endian,
the pvvx frame is 15 bytes little endian.
"""

from __future__ import annotations

import struct

from blueplug.errors import DecodeError, UnsupportedFormatError

from .envelope import Element, Envelope

ENVIRONMENTAL_SENSING_UUID = "0000181a-0000-1000-8000-00805f9b34fb"

ATC1441_FORMAT = struct.Struct(">6shBBHB")
PVVX_FORMAT = struct.Struct("<6shHHBBB")

# pvvx encrypted frames
ENCRYPTED_LENGTHS = frozenset({8, 11, 12})


def _mac(raw: bytes) -> str:
    return ":".join(f"{b:02X}" for b in raw)


def parse_atc1441(data: bytes) -> Envelope:
    mac, temperature, humidity, battery, battery_mv, counter = (
        ATC1441_FORMAT.unpack(data)
    )
    return Envelope(
        "atc1441",
        [
            Element("mac", _mac(mac)),
            Element("temperature", temperature / 10, "°C"),
            Element("humidity", humidity, "%"),
            Element("battery", battery, "%"),
            Element("voltage", battery_mv / 1000, "V"),
            Element("packet_id", counter),
        ],
    )


def parse_pvvx(data: bytes) -> Envelope:
    mac, temperature, humidity, battery_mv, battery, counter, flags = (
        PVVX_FORMAT.unpack(data)
    )
    return Envelope(
        "pvvx",
        [
            Element("mac", _mac(mac[::-1])),
            Element("temperature", temperature / 100, "°C"),
            Element("humidity", humidity / 100, "%"),
            Element("battery", battery, "%"),
            Element("voltage", battery_mv / 1000, "V"),
            Element("packet_id", counter),
            Element("flags", flags),
        ],
    )


def parse(data: bytes) -> Envelope:
    if len(data) == ATC1441_FORMAT.size:
        return parse_atc1441(data)
    if len(data) == PVVX_FORMAT.size:
        return parse_pvvx(data)
    if len(data) in ENCRYPTED_LENGTHS:
        raise UnsupportedFormatError("Encrypted pvvx payloads are not supported")
    raise DecodeError(f"Unexpected environmental sensing payload length {len(data)}")
