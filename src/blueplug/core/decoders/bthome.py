"""BTHome service data (https://bthome.io).

v2 payloads start with a device information byte followed by
``object id, value`` pairs whose sizes are fixed per object id. v1 payloads
prefix every object with a control byte carrying its data type and length.
All multi-byte values are little endian.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from fractions import Fraction
from typing import Literal

from blueplug.errors import DecodeError, UnsupportedFormatError

from .envelope import Element, ElementValue, Envelope

BTHOME_V1_UUID = "0000181c-0000-1000-8000-00805f9b34fb"
BTHOME_V1_ENCRYPTED_UUID = "0000181e-0000-1000-8000-00805f9b34fb"
BTHOME_V2_UUID = "0000fcd2-0000-1000-8000-00805f9b34fb"

ENCRYPTION_FLAG = 0x01

ValueType = Literal["uint", "sint", "bool", "text", "raw"]

ONE = Fraction(1)


@dataclass(frozen=True)
class ObjectSpec:
    name: str
    size: int | None
    value_type: ValueType = "uint"
    scale: Fraction = ONE
    unit: str = ""

    def convert(self, raw: int) -> ElementValue:
        if self.value_type == "bool":
            return bool(raw)
        if self.scale == ONE:
            return raw
        return float(raw * self.scale)


def _u(name: str, size: int, scale: Fraction = ONE, unit: str = "") -> ObjectSpec:
    return ObjectSpec(name, size, "uint", scale, unit)


def _s(name: str, size: int, scale: Fraction = ONE, unit: str = "") -> ObjectSpec:
    return ObjectSpec(name, size, "sint", scale, unit)


def _b(name: str) -> ObjectSpec:
    return ObjectSpec(name, 1, "bool")


CENTI = Fraction(1, 100)
DECI = Fraction(1, 10)
MILLI = Fraction(1, 1000)

OBJECTS: dict[int, ObjectSpec] = {
    0x00: _u("packet_id", 1),
    0x01: _u("battery", 1, unit="%"),
    0x02: _s("temperature", 2, CENTI, "°C"),
    0x03: _u("humidity", 2, CENTI, "%"),
    0x04: _u("pressure", 3, CENTI, "hPa"),
    0x05: _u("illuminance", 3, CENTI, "lx"),
    0x06: _u("mass", 2, CENTI, "kg"),
    0x07: _u("mass", 2, CENTI, "lb"),
    0x08: _s("dewpoint", 2, CENTI, "°C"),
    0x09: _u("count", 1),
    0x0A: _u("energy", 3, MILLI, "kWh"),
    0x0B: _u("power", 3, CENTI, "W"),
    0x0C: _u("voltage", 2, MILLI, "V"),
    0x0D: _u("pm2_5", 2, unit="µg/m³"),
    0x0E: _u("pm10", 2, unit="µg/m³"),
    0x0F: _b("generic_boolean"),
    0x10: _b("power_on"),
    0x11: _b("opening"),
    0x12: _u("co2", 2, unit="ppm"),
    0x13: _u("tvoc", 2, unit="µg/m³"),
    0x14: _u("moisture", 2, CENTI, "%"),
    0x15: _b("battery_low"),
    0x16: _b("battery_charging"),
    0x17: _b("carbon_monoxide"),
    0x18: _b("cold"),
    0x19: _b("connectivity"),
    0x1A: _b("door"),
    0x1B: _b("garage_door"),
    0x1C: _b("gas_detected"),
    0x1D: _b("heat"),
    0x1E: _b("light"),
    0x1F: _b("lock"),
    0x20: _b("moisture_detected"),
    0x21: _b("motion"),
    0x22: _b("moving"),
    0x23: _b("occupancy"),
    0x24: _b("plug"),
    0x25: _b("presence"),
    0x26: _b("problem"),
    0x27: _b("running"),
    0x28: _b("safety"),
    0x29: _b("smoke"),
    0x2A: _b("sound"),
    0x2B: _b("tamper"),
    0x2C: _b("vibration"),
    0x2D: _b("window"),
    0x2E: _u("humidity", 1, unit="%"),
    0x2F: _u("moisture", 1, unit="%"),
    0x3A: _u("button", 1),
    0x3C: _u("dimmer", 2),
    0x3D: _u("count", 2),
    0x3E: _u("count", 4),
    0x3F: _s("rotation", 2, DECI, "°"),
    0x40: _u("distance", 2, unit="mm"),
    0x41: _u("distance", 2, DECI, "m"),
    0x42: _u("duration", 3, MILLI, "s"),
    0x43: _u("current", 2, MILLI, "A"),
    0x44: _u("speed", 2, CENTI, "m/s"),
    0x45: _s("temperature", 2, DECI, "°C"),
    0x46: _u("uv_index", 1, DECI),
    0x47: _u("volume", 2, DECI, "L"),
    0x48: _u("volume", 2, unit="mL"),
    0x49: _u("volume_flow_rate", 2, MILLI, "m³/h"),
    0x4A: _u("voltage", 2, DECI, "V"),
    0x4B: _u("gas", 3, MILLI, "m³"),
    0x4C: _u("gas", 4, MILLI, "m³"),
    0x4D: _u("energy", 4, MILLI, "kWh"),
    0x4E: _u("volume", 4, MILLI, "L"),
    0x4F: _u("water", 4, MILLI, "L"),
    0x50: _u("timestamp", 4, unit="s"),
    0x51: _u("acceleration", 2, MILLI, "m/s²"),
    0x52: _u("gyroscope", 2, MILLI, "°/s"),
    0x53: ObjectSpec("text", None, "text"),
    0x54: ObjectSpec("raw", None, "raw"),
    0x55: _u("volume_storage", 4, MILLI, "L"),
    0x56: _u("conductivity", 2, unit="µS/cm"),
    0x57: _s("temperature", 1, unit="°C"),
    0x58: _s("temperature", 1, Fraction(35, 100), "°C"),
    0x59: _s("count", 1),
    0x5A: _s("count", 2),
    0x5B: _s("count", 4),
    0x5C: _s("power", 4, CENTI, "W"),
    0x5D: _s("current", 2, MILLI, "A"),
    0x5E: _u("direction", 2, CENTI, "°"),
    0x5F: _u("precipitation", 2, DECI, "mm"),
    0x60: _u("channel", 1),
    0x61: _u("rotational_speed", 2, unit="rpm"),
    0xF0: _u("device_type_id", 2),
    0xF1: _u("firmware_version", 4),
    0xF2: _u("firmware_version", 3),
}


def _element(spec: ObjectSpec, chunk: bytes) -> Element:
    if spec.value_type == "text":
        return Element(spec.name, chunk.decode("utf-8", errors="replace"), spec.unit)
    if spec.value_type == "raw":
        return Element(spec.name, chunk, spec.unit)
    raw = int.from_bytes(chunk, "little", signed=spec.value_type == "sint")
    return Element(spec.name, spec.convert(raw), spec.unit)


def _take(data: bytes, pos: int, size: int, object_id: int) -> bytes:
    chunk = data[pos : pos + size]
    if len(chunk) < size:
        raise DecodeError(
            f"BTHome object 0x{object_id:02x} truncated: "
            f"expected {size} bytes, got {len(chunk)}"
        )
    return chunk


def parse_v2(data: bytes) -> Envelope:
    if not data:
        raise DecodeError("Empty BTHome v2 payload")

    device_info = data[0]
    version = device_info >> 5
    if version != 2:
        raise UnsupportedFormatError(f"BTHome version {version} in v2 service data")
    if device_info & ENCRYPTION_FLAG:
        raise UnsupportedFormatError("Encrypted BTHome payloads are not supported")

    elements: list[Element] = []
    pos = 1
    while pos < len(data):
        object_id = data[pos]
        pos += 1
        spec = OBJECTS.get(object_id)
        if spec is None:
            # sizes are implicit in v2, nothing after an unknown id can be read
            raise DecodeError(f"Unknown BTHome object id 0x{object_id:02x}")

        if spec.size is None:
            size = _take(data, pos, 1, object_id)[0]
            pos += 1
        else:
            size = spec.size
        chunk = _take(data, pos, size, object_id)
        pos += size
        elements.append(_element(spec, chunk))

    return Envelope("bthome_v2", elements)


V1_UINT, V1_SINT, V1_FLOAT, V1_STRING, V1_MAC = range(5)


def _v1_value(fmt: int, chunk: bytes) -> ElementValue:
    if fmt == V1_UINT:
        return int.from_bytes(chunk, "little")
    if fmt == V1_SINT:
        return int.from_bytes(chunk, "little", signed=True)
    if fmt == V1_FLOAT:
        if len(chunk) == 4:
            return struct.unpack("<f", chunk)[0]
        if len(chunk) == 2:
            return struct.unpack("<e", chunk)[0]
        raise DecodeError(f"Unsupported BTHome v1 float width: {len(chunk)}")
    if fmt == V1_STRING:
        return chunk.decode("utf-8", errors="replace")
    if fmt == V1_MAC:
        return ":".join(f"{b:02X}" for b in reversed(chunk))
    raise UnsupportedFormatError(f"Unknown BTHome v1 data format {fmt}")


def parse_v1(data: bytes) -> Envelope:
    elements: list[Element] = []
    pos = 0
    while pos < len(data):
        control = data[pos]
        fmt = control >> 5
        length = control & 0x1F
        if length < 1:
            raise DecodeError(f"Zero length BTHome v1 object at offset {pos}")
        body = data[pos + 1 : pos + 1 + length]
        if len(body) < length:
            raise DecodeError(f"BTHome v1 object at offset {pos} truncated")
        pos += 1 + length

        object_id, chunk = body[0], body[1:]
        spec = OBJECTS.get(object_id)
        if spec is None:
            continue
        value = _v1_value(fmt, chunk)
        if isinstance(value, int):
            value = spec.convert(value)
        elements.append(Element(spec.name, value, spec.unit))

    return Envelope("bthome_v1", elements)
