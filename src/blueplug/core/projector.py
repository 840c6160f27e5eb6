from __future__ import annotations

import logging
from collections.abc import AsyncIterable, AsyncIterator
from typing import assert_never

from blueplug.errors import DecodeError
from blueplug.models import (
    DeviceEvent,
    DeviceReading,
    ManufacturerDataEvent,
    Measurement,
    ServiceDataEvent,
)

from .decoders import decode_manufacturer_data, decode_service_data

logger = logging.getLogger(__name__)


def decode_event(event: DeviceEvent) -> list[Measurement]:
    match event:
        case ServiceDataEvent(service_data=service_data):
            return decode_service_data(service_data)
        case ManufacturerDataEvent(manufacturer_data=manufacturer_data):
            return decode_manufacturer_data(manufacturer_data)
        case _:
            assert_never(event)


def project_event(event: DeviceEvent) -> list[DeviceReading]:
    """Pair every measurement decoded from ``event`` with its device."""
    try:
        measurements = decode_event(event)
    except DecodeError as exc:
        logger.warning(
            "Failed to decode %s from '%s': %s",
            type(event).__name__,
            event.identity.name,
            exc,
        )
        return []

    return [
        DeviceReading(identity=event.identity, measurement=measurement)
        for measurement in measurements
    ]


async def project(events: AsyncIterable[DeviceEvent]) -> AsyncIterator[DeviceReading]:
    async for event in events:
        for reading in project_event(event):
            yield reading
