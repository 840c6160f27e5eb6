from __future__ import annotations

import logging
from collections.abc import Mapping

from pydantic import ValidationError

from blueplug.errors import DecodeError
from blueplug.models import Humidity, Measurement, Temperature, Voltage

from . import ruuvi

logger = logging.getLogger(__name__)

VENDOR_COMPANY_IDS = frozenset({ruuvi.RUUVI_COMPANY_ID})


def sensor_measurements(values: ruuvi.SensorValues) -> list[Measurement]:
    measurements: list[Measurement] = []
    if values.humidity_as_ppm is not None:
        measurements.append(Humidity(value=values.humidity_as_ppm / 10000.0))
    if values.temperature_as_millicelsius is not None:
        measurements.append(
            Temperature(value=values.temperature_as_millicelsius / 1000.0)
        )
    # a battery potential is a voltage, not a charge level
    if values.battery_potential_as_millivolts is not None:
        measurements.append(
            Voltage(value=values.battery_potential_as_millivolts / 1000.0)
        )
    return measurements


def decode_vendor(company_id: int, data: bytes) -> list[Measurement]:
    values = ruuvi.from_manufacturer_specific_data(company_id, data)
    try:
        return sensor_measurements(values)
    except ValidationError as exc:
        raise DecodeError(f"Invalid sensor values {values!r}") from exc


def decode_manufacturer_data(
    manufacturer_data: Mapping[int, bytes],
) -> list[Measurement]:
    """Decode each company id independently.

    A map can carry frames from several co-broadcasting chipsets; a frame
    that cannot be decoded does not affect the others.
    """
    measurements: list[Measurement] = []
    for company_id, data in manufacturer_data.items():
        try:
            measurements.extend(decode_vendor(company_id, data))
        except DecodeError as exc:
            logger.debug(
                "Skipping manufacturer data for 0x%04x (%s): %s",
                company_id,
                data.hex(),
                exc,
            )
    return measurements
