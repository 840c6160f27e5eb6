from __future__ import annotations

import logging
from collections.abc import AsyncIterable, AsyncIterator
from contextlib import aclosing

import aiomqtt

from blueplug.config import Settings
from blueplug.models import DeviceReading, RawEvent

from .identity import IdentityCache
from .normalizer import normalize
from .projector import project
from .publisher import ReadingPublisher
from .scanner import BleScanner

logger = logging.getLogger(__name__)


def readings(
    events: AsyncIterable[RawEvent], cache: IdentityCache | None = None
) -> AsyncIterator[DeviceReading]:
    """Raw scanner events in, device readings out."""
    return project(normalize(events, cache))


async def watch(settings: Settings) -> AsyncIterator[DeviceReading]:
    async with BleScanner(settings.scanning) as scanner:
        async for reading in readings(scanner.events()):
            yield reading


async def run_bridge(settings: Settings) -> None:
    """Publish readings until the scanner or the broker connection fails."""
    mqtt = settings.mqtt
    logger.info("Connecting to MQTT broker %s:%s", mqtt.host, mqtt.port)
    async with aiomqtt.Client(
        mqtt.host,
        port=mqtt.port,
        identifier=mqtt.client_id,
        keepalive=mqtt.keepalive,
    ) as client:
        publisher = ReadingPublisher(client, qos=mqtt.qos, prefix=mqtt.topic_prefix)
        logger.info("Connected as '%s', starting BLE scan", mqtt.client_id)
        try:
            async with aclosing(watch(settings)) as stream:
                async for reading in stream:
                    await publisher.publish(reading)
        finally:
            logger.info(
                "Bridge stopped: %d published, %d failed",
                publisher.published,
                publisher.failed,
            )
