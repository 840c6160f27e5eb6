"""Data models for blueplug."""

from blueplug.models.events import (
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
from blueplug.models.identity import BLUEPLUG_NAMESPACE, DeviceIdentity
from blueplug.models.measurement import (
    Battery,
    Humidity,
    Measurement,
    MeasurementKind,
    Temperature,
    Voltage,
    sort_key,
)
from blueplug.models.reading import DeviceReading

__all__ = [
    "BLUEPLUG_NAMESPACE",
    "Battery",
    "DeviceConnected",
    "DeviceDisconnected",
    "DeviceDiscovered",
    "DeviceEvent",
    "DeviceIdentity",
    "DeviceReading",
    "DeviceUpdated",
    "Humidity",
    "ManufacturerDataAdvertisement",
    "ManufacturerDataEvent",
    "Measurement",
    "MeasurementKind",
    "RawEvent",
    "ServiceDataAdvertisement",
    "ServiceDataEvent",
    "ServicesAdvertisement",
    "Temperature",
    "Voltage",
    "sort_key",
]
