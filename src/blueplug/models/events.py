"""Events flowing through the pipeline.

Raw events mirror what the scanning stack reports, keyed by the transient
handle it assigns to a device. Device events are the subset that carry
payloads for a device whose identity is known.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .identity import DeviceIdentity


@dataclass(frozen=True)
class DeviceDiscovered:
    handle: str
    name: str | None = None


@dataclass(frozen=True)
class ServiceDataAdvertisement:
    handle: str
    service_data: dict[str, bytes] = field(default_factory=dict)


@dataclass(frozen=True)
class ManufacturerDataAdvertisement:
    handle: str
    manufacturer_data: dict[int, bytes] = field(default_factory=dict)


@dataclass(frozen=True)
class ServicesAdvertisement:
    handle: str
    services: tuple[str, ...] = ()


@dataclass(frozen=True)
class DeviceConnected:
    handle: str


@dataclass(frozen=True)
class DeviceDisconnected:
    handle: str


@dataclass(frozen=True)
class DeviceUpdated:
    handle: str


RawEvent = (
    DeviceDiscovered
    | ServiceDataAdvertisement
    | ManufacturerDataAdvertisement
    | ServicesAdvertisement
    | DeviceConnected
    | DeviceDisconnected
    | DeviceUpdated
)


@dataclass(frozen=True)
class ServiceDataEvent:
    identity: DeviceIdentity
    service_data: dict[str, bytes]


@dataclass(frozen=True)
class ManufacturerDataEvent:
    identity: DeviceIdentity
    manufacturer_data: dict[int, bytes]


DeviceEvent = ServiceDataEvent | ManufacturerDataEvent
