from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from types import TracebackType
from typing import Any

from bleak import BleakScanner
from bleak.assigned_numbers import AdvertisementDataType
from bleak.backends.device import BLEDevice
from bleak.backends.scanner import AdvertisementData
from bleak.exc import BleakError

from blueplug.config import ScanningConfig
from blueplug.errors import TransportError
from blueplug.models import (
    DeviceDiscovered,
    ManufacturerDataAdvertisement,
    RawEvent,
    ServiceDataAdvertisement,
)

from .decoders import ENVELOPE_PARSERS, VENDOR_COMPANY_IDS

logger = logging.getLogger(__name__)


def passive_patterns() -> list[tuple[int, AdvertisementDataType, bytes]]:
    """BlueZ only reports passively scanned advertisements matching one of these."""
    patterns = [
        (
            0,
            AdvertisementDataType.SERVICE_DATA_UUID16,
            int(service_uuid[4:8], 16).to_bytes(2, "little"),
        )
        for service_uuid in ENVELOPE_PARSERS
    ]
    patterns.extend(
        (
            0,
            AdvertisementDataType.MANUFACTURER_SPECIFIC_DATA,
            company_id.to_bytes(2, "little"),
        )
        for company_id in sorted(VENDOR_COMPANY_IDS)
    )
    return patterns


class BleScanner:
    """Passive source of raw events backed by a bleak scanner.

    Advertisements arrive through a callback and are queued for ``events()``.
    The queue is bounded; when the consumer falls behind the oldest events
    are discarded. A discarded discovery is announced again on the next
    advertisement from its handle.

    Announced handles are remembered for the life of the scanner, like the
    identity cache entries they feed.
    """

    def __init__(self, config: ScanningConfig) -> None:
        self._config = config
        self._queue: asyncio.Queue[RawEvent] = asyncio.Queue(
            maxsize=config.queue_size
        )
        self._announced: dict[str, str | None] = {}
        self._scanner: BleakScanner | None = None
        self.dropped = 0

    def translate(
        self, device: BLEDevice, advertisement: AdvertisementData
    ) -> list[RawEvent]:
        handle = device.address
        name = advertisement.local_name
        events: list[RawEvent] = []

        if handle not in self._announced or (
            name and name != self._announced[handle]
        ):
            self._announced[handle] = name
            events.append(DeviceDiscovered(handle=handle, name=name))

        if advertisement.service_data:
            events.append(
                ServiceDataAdvertisement(
                    handle=handle, service_data=dict(advertisement.service_data)
                )
            )
        if advertisement.manufacturer_data:
            events.append(
                ManufacturerDataAdvertisement(
                    handle=handle,
                    manufacturer_data=dict(advertisement.manufacturer_data),
                )
            )
        return events

    def _enqueue(self, event: RawEvent) -> None:
        if self._queue.full():
            evicted = self._queue.get_nowait()
            if isinstance(evicted, DeviceDiscovered):
                self._announced.pop(evicted.handle, None)
            self.dropped += 1
            if self.dropped % 100 == 1:
                logger.warning(
                    "Event queue full, dropped %d events so far", self.dropped
                )
        self._queue.put_nowait(event)

    def _on_advertisement(
        self, device: BLEDevice, advertisement: AdvertisementData
    ) -> None:
        for event in self.translate(device, advertisement):
            self._enqueue(event)

    async def start(self) -> None:
        kwargs: dict[str, Any] = {}
        if self._config.adapter:
            kwargs["adapter"] = self._config.adapter
        if self._config.mode == "passive":
            kwargs["bluez"] = {"or_patterns": passive_patterns()}
        logger.debug(
            "Starting %s BLE scan (adapter=%s)",
            self._config.mode,
            self._config.adapter or "default",
        )
        try:
            self._scanner = BleakScanner(
                detection_callback=self._on_advertisement,
                scanning_mode=self._config.mode,
                **kwargs,
            )
            await self._scanner.start()
        except (BleakError, OSError) as exc:
            self._scanner = None
            raise TransportError(f"Could not start BLE scan: {exc}") from exc

    async def stop(self) -> None:
        if self._scanner is None:
            return
        scanner, self._scanner = self._scanner, None
        try:
            await scanner.stop()
        except (BleakError, OSError) as exc:
            raise TransportError(f"Could not stop BLE scan: {exc}") from exc

    async def __aenter__(self) -> BleScanner:
        await self.start()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.stop()

    async def events(self) -> AsyncIterator[RawEvent]:
        while True:
            yield await self._queue.get()
