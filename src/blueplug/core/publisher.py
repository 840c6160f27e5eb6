from __future__ import annotations

import json
import logging

import aiomqtt
import paho.mqtt.client as mqtt

from blueplug.models import DeviceReading

logger = logging.getLogger(__name__)

DEFAULT_TOPIC_PREFIX = "device_reading"

# the client does not reconnect; publishing cannot succeed again
CONNECTION_LOST_CODES = frozenset({mqtt.MQTT_ERR_NO_CONN, mqtt.MQTT_ERR_CONN_LOST})


def connection_lost(exc: aiomqtt.MqttError) -> bool:
    return (
        isinstance(exc, aiomqtt.MqttCodeError) and exc.rc in CONNECTION_LOST_CODES
    )


def topic_for(reading: DeviceReading, prefix: str = DEFAULT_TOPIC_PREFIX) -> str:
    """``<prefix>/<kind>/<name>``; the name is not escaped."""
    return f"{prefix}/{reading.measurement.kind.value}/{reading.identity.name}"


def serialize(reading: DeviceReading) -> str:
    return json.dumps(reading.to_payload())


class ReadingPublisher:
    """Publishes readings, logging and counting failed messages.

    A lost broker connection is raised to the caller.
    """

    def __init__(
        self,
        client: aiomqtt.Client,
        qos: int = 1,
        prefix: str = DEFAULT_TOPIC_PREFIX,
    ) -> None:
        self._client = client
        self._qos = qos
        self._prefix = prefix
        self.published = 0
        self.failed = 0

    async def publish(self, reading: DeviceReading) -> bool:
        topic = topic_for(reading, self._prefix)
        try:
            await self._client.publish(topic, payload=serialize(reading), qos=self._qos)
        except aiomqtt.MqttError as exc:
            self.failed += 1
            if connection_lost(exc):
                logger.error(
                    "Lost connection to MQTT broker while publishing %s", topic
                )
                raise
            logger.warning("Failed to publish %s: %s", topic, exc)
            return False

        self.published += 1
        logger.debug("Published %s = %s", topic, reading.measurement.value)
        return True
