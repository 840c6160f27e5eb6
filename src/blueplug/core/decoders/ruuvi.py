"""Ruuvi tag manufacturer data.

Supports data format 3 (RAWv1) and data format 5 (RAWv2). Fields that the
tag marks as unavailable decode to ``None``.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass

from blueplug.errors import DecodeError, UnsupportedFormatError

RUUVI_COMPANY_ID = 0x0499

RAWV1_FORMAT = 3
RAWV2_FORMAT = 5

RAWV1 = struct.Struct(">BBBBHhhhH")
RAWV2 = struct.Struct(">BhHHhhhHBH6s")

PRESSURE_OFFSET_PA = 50000
BATTERY_OFFSET_MV = 1600


@dataclass(frozen=True)
class SensorValues:
    data_format: int
    humidity_as_ppm: int | None = None
    temperature_as_millicelsius: int | None = None
    pressure_as_pascals: int | None = None
    acceleration_mg: tuple[int, int, int] | None = None
    battery_potential_as_millivolts: int | None = None
    tx_power_dbm: int | None = None
    movement_counter: int | None = None
    measurement_sequence: int | None = None
    mac_address: str | None = None


def _rawv1(data: bytes) -> SensorValues:
    (
        _,
        humidity,
        temp_int,
        temp_frac,
        pressure,
        acc_x,
        acc_y,
        acc_z,
        battery,
    ) = RAWV1.unpack_from(data)
    # sign-magnitude: bit 7 is the sign, bits 0-6 whole degrees
    magnitude = (temp_int & 0x7F) * 1000 + temp_frac * 10
    temperature = -magnitude if temp_int & 0x80 else magnitude
    return SensorValues(
        data_format=RAWV1_FORMAT,
        humidity_as_ppm=humidity * 5000,
        temperature_as_millicelsius=temperature,
        pressure_as_pascals=pressure + PRESSURE_OFFSET_PA,
        acceleration_mg=(acc_x, acc_y, acc_z),
        battery_potential_as_millivolts=battery,
    )


def _rawv2(data: bytes) -> SensorValues:
    (
        _,
        temperature,
        humidity,
        pressure,
        acc_x,
        acc_y,
        acc_z,
        power_info,
        movement,
        sequence,
        mac,
    ) = RAWV2.unpack_from(data)

    battery = power_info >> 5
    tx_power = power_info & 0x1F
    acceleration = None
    if -0x8000 not in (acc_x, acc_y, acc_z):
        acceleration = (acc_x, acc_y, acc_z)

    return SensorValues(
        data_format=RAWV2_FORMAT,
        humidity_as_ppm=None if humidity == 0xFFFF else humidity * 25,
        temperature_as_millicelsius=None if temperature == -0x8000 else temperature * 5,
        pressure_as_pascals=(
            None if pressure == 0xFFFF else pressure + PRESSURE_OFFSET_PA
        ),
        acceleration_mg=acceleration,
        battery_potential_as_millivolts=(
            None if battery == 0x7FF else battery + BATTERY_OFFSET_MV
        ),
        tx_power_dbm=None if tx_power == 0x1F else -40 + 2 * tx_power,
        movement_counter=None if movement == 0xFF else movement,
        measurement_sequence=None if sequence == 0xFFFF else sequence,
        mac_address=None if mac == b"\xff" * 6 else ":".join(f"{b:02X}" for b in mac),
    )


_LAYOUTS = {
    RAWV1_FORMAT: (RAWV1, _rawv1),
    RAWV2_FORMAT: (RAWV2, _rawv2),
}


def from_manufacturer_specific_data(company_id: int, data: bytes) -> SensorValues:
    if company_id != RUUVI_COMPANY_ID:
        raise UnsupportedFormatError(f"Unknown manufacturer id 0x{company_id:04x}")
    if not data:
        raise DecodeError("Empty Ruuvi payload")

    layout = _LAYOUTS.get(data[0])
    if layout is None:
        raise UnsupportedFormatError(f"Unsupported Ruuvi data format {data[0]}")

    frame, parse = layout
    if len(data) < frame.size:
        raise DecodeError(
            f"Ruuvi data format {data[0]} needs {frame.size} bytes, got {len(data)}"
        )
    return parse(data)
