from __future__ import annotations

import logging
from collections.abc import AsyncIterable, AsyncIterator
from typing import assert_never

from blueplug.models import (
    DeviceConnected,
    DeviceDisconnected,
    DeviceDiscovered,
    DeviceEvent,
    DeviceUpdated,
    ManufacturerDataAdvertisement,
    ManufacturerDataEvent,
    RawEvent,
    ServiceDataAdvertisement,
    ServiceDataEvent,
    ServicesAdvertisement,
)

from .identity import IdentityCache

logger = logging.getLogger(__name__)


def normalize_event(event: RawEvent, cache: IdentityCache) -> DeviceEvent | None:
    """Apply one raw event to ``cache`` and attribute it to a device if possible.

    Advertisements from handles whose name is not known yet are dropped.
    """
    match event:
        case DeviceDiscovered(handle=handle, name=name):
            cache.observe_discovery(handle, name)
            return None
        case ServiceDataAdvertisement(handle=handle, service_data=service_data):
            identity = cache.resolve(handle)
            if identity is None:
                logger.debug("Dropping service data from unnamed device %s", handle)
                return None
            return ServiceDataEvent(identity=identity, service_data=dict(service_data))
        case ManufacturerDataAdvertisement(
            handle=handle, manufacturer_data=manufacturer_data
        ):
            identity = cache.resolve(handle)
            if identity is None:
                logger.debug(
                    "Dropping manufacturer data from unnamed device %s", handle
                )
                return None
            return ManufacturerDataEvent(
                identity=identity, manufacturer_data=dict(manufacturer_data)
            )
        case (
            ServicesAdvertisement()
            | DeviceConnected()
            | DeviceDisconnected()
            | DeviceUpdated()
        ):
            return None
        case _:
            assert_never(event)


async def normalize(
    events: AsyncIterable[RawEvent], cache: IdentityCache | None = None
) -> AsyncIterator[DeviceEvent]:
    """Turn a raw scanner stream into identity-attributed device events.

    Runs as long as ``events`` does; an exception raised by the source ends
    the stream with that exception.
    """
    cache = IdentityCache() if cache is None else cache
    async for event in events:
        device_event = normalize_event(event, cache)
        if device_event is not None:
            yield device_event
