from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, Iterable, Mapping

from pydantic import ValidationError

from blueplug.errors import DecodeError
from blueplug.models import Battery, Humidity, Measurement, Temperature, sort_key

from . import atc, bthome
from .envelope import Element, Envelope

logger = logging.getLogger(__name__)

BLUETOOTH_BASE_UUID = "0000{:04x}-0000-1000-8000-00805f9b34fb"

ENVELOPE_PARSERS: dict[str, Callable[[bytes], Envelope]] = {
    bthome.BTHOME_V2_UUID: bthome.parse_v2,
    bthome.BTHOME_V1_UUID: bthome.parse_v1,
    atc.ENVIRONMENTAL_SENSING_UUID: atc.parse,
}


def normalize_uuid(value: str | int) -> str:
    """Return the lower-case 128-bit form of a service UUID.

    Accepts 16-bit ids as ints, ``"fcd2"`` or ``"0xfcd2"``.
    """
    if isinstance(value, int):
        return BLUETOOTH_BASE_UUID.format(value)
    text = value.strip().lower()
    short = text.removeprefix("0x")
    if len(short) <= 4:
        try:
            return BLUETOOTH_BASE_UUID.format(int(short, 16))
        except ValueError:
            pass
    return str(uuid.UUID(text))


def parse_envelope(service_uuid: str, data: bytes) -> Envelope | None:
    """Parse one service data entry, ``None`` if the service is not a sensor format."""
    parser = ENVELOPE_PARSERS.get(normalize_uuid(service_uuid))
    if parser is None:
        return None
    return parser(data)


def element_measurement(element: Element) -> Measurement | None:
    match element.name:
        case "humidity":
            return Humidity(value=element.value_float() or 0.0)
        case "temperature":
            return Temperature(value=element.value_float() or 0.0)
        case "battery":
            return Battery(value=float(element.value_int() or 0))
        case _:
            return None


def envelope_measurements(elements: Iterable[Element]) -> list[Measurement]:
    measurements = []
    for element in elements:
        try:
            measurement = element_measurement(element)
        except ValidationError as exc:
            raise DecodeError(f"Invalid {element.name} value {element.value!r}") from exc
        if measurement is not None:
            measurements.append(measurement)
    return sorted(measurements, key=sort_key)


def decode_service_data(service_data: Mapping[str, bytes]) -> list[Measurement]:
    """Decode every recognised sensor envelope in a service data map.

    Unknown services and undecodable envelopes contribute nothing.
    """
    measurements: list[Measurement] = []
    for service_uuid, data in service_data.items():
        try:
            envelope = parse_envelope(service_uuid, data)
            if envelope is None:
                logger.debug("Ignoring service data for %s", service_uuid)
                continue
            measurements.extend(envelope_measurements(envelope))
        except (DecodeError, ValueError) as exc:
            logger.debug(
                "Skipping service data for %s (%s): %s", service_uuid, data.hex(), exc
            )
    return measurements
