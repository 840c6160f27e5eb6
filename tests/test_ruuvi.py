"""Tests for the fixed-layout manufacturer data decoder."""

from __future__ import annotations

import struct

import pytest

from blueplug.core.decoders import decode_manufacturer_data, decode_vendor
from blueplug.core.decoders import ruuvi
from blueplug.errors import DecodeError, UnsupportedFormatError
from blueplug.models import Humidity, Temperature, Voltage

RAWV2_VECTOR = bytes.fromhex("0512FC5394C37C0004FFFC040CAC364200CDCBB8334C884F")
RAWV1_VECTOR = bytes.fromhex("03291A1ECE1EFC18F94202CA0B53")
APPLE_COMPANY_ID = 0x004C


def rawv2(temperature: int, humidity: int, battery_mv: int) -> bytes:
    power_info = ((battery_mv - 1600) << 5) | 20
    return struct.pack(
        ">BhHHhhhHBH6s",
        5,
        temperature,
        humidity,
        51325,
        4,
        -4,
        1036,
        power_info,
        66,
        205,
        bytes.fromhex("cbb8334c884f"),
    )


def test_unit_conversions():
    # 15600 * 25 = 390000 ppm, 3832 * 5 = 19160 m°C
    data = rawv2(temperature=3832, humidity=15600, battery_mv=3300)

    values = ruuvi.from_manufacturer_specific_data(ruuvi.RUUVI_COMPANY_ID, data)
    assert values.humidity_as_ppm == 390000
    assert values.temperature_as_millicelsius == 19160
    assert values.battery_potential_as_millivolts == 3300

    assert decode_vendor(ruuvi.RUUVI_COMPANY_ID, data) == [
        Humidity(value=39.0),
        Temperature(value=19.16),
        Voltage(value=3.3),
    ]


def test_rawv2_reference_vector():
    values = ruuvi.from_manufacturer_specific_data(0x0499, RAWV2_VECTOR)

    assert values.data_format == 5
    assert values.temperature_as_millicelsius == 24300
    assert values.humidity_as_ppm == 534900
    assert values.pressure_as_pascals == 100044
    assert values.acceleration_mg == (4, -4, 1036)
    assert values.battery_potential_as_millivolts == 2977
    assert values.tx_power_dbm == 4
    assert values.movement_counter == 66
    assert values.measurement_sequence == 205
    assert values.mac_address == "CB:B8:33:4C:88:4F"


def test_rawv2_unavailable_fields_are_skipped():
    data = bytearray(rawv2(temperature=3832, humidity=15600, battery_mv=3300))
    data[1:3] = b"\x80\x00"
    data[3:5] = b"\xff\xff"

    assert decode_vendor(0x0499, bytes(data)) == [Voltage(value=3.3)]


def test_rawv1_reference_vector():
    values = ruuvi.from_manufacturer_specific_data(0x0499, RAWV1_VECTOR)

    assert values.data_format == 3
    assert values.humidity_as_ppm == 205000
    assert values.temperature_as_millicelsius == 26300
    assert values.pressure_as_pascals == 102766
    assert values.acceleration_mg == (-1000, -1726, 714)
    assert values.battery_potential_as_millivolts == 2899


def test_rawv1_negative_temperature():
    data = bytearray(RAWV1_VECTOR)
    data[2] = 0x80 | 5
    data[3] = 50

    values = ruuvi.from_manufacturer_specific_data(0x0499, bytes(data))
    assert values.temperature_as_millicelsius == -5500


@pytest.mark.parametrize(
    ("company_id", "data", "error"),
    [
        (APPLE_COMPANY_ID, RAWV2_VECTOR, UnsupportedFormatError),
        (0x0499, b"", DecodeError),
        (0x0499, bytes([0x02, 0x00]), UnsupportedFormatError),
        (0x0499, RAWV2_VECTOR[:20], DecodeError),
        (0x0499, RAWV1_VECTOR[:10], DecodeError),
    ],
)
def test_bad_frames(company_id, data, error):
    with pytest.raises(error):
        ruuvi.from_manufacturer_specific_data(company_id, data)


def test_vendors_are_decoded_independently():
    good = rawv2(temperature=3832, humidity=15600, battery_mv=3300)
    manufacturer_data = {
        APPLE_COMPANY_ID: bytes.fromhex("0215"),
        ruuvi.RUUVI_COMPANY_ID: good,
    }

    assert decode_manufacturer_data(manufacturer_data) == [
        Humidity(value=39.0),
        Temperature(value=19.16),
        Voltage(value=3.3),
    ]


def test_truncated_frame_yields_nothing():
    assert decode_manufacturer_data({0x0499: RAWV2_VECTOR[:12]}) == []


def test_decoding_is_deterministic():
    manufacturer_data = {0x0499: RAWV2_VECTOR}
    first = decode_manufacturer_data(manufacturer_data)
    assert first == decode_manufacturer_data(manufacturer_data)
    assert first == [
        Humidity(value=53.49),
        Temperature(value=24.3),
        Voltage(value=2.977),
    ]
