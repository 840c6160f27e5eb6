"""blueplug - bridge BLE environmental sensor advertisements to MQTT."""

from __future__ import annotations

from importlib.metadata import version

from .config import MqttConfig, ScanningConfig, Settings, get_settings
from .core import IdentityCache, readings, run_bridge
from .models import DeviceIdentity, DeviceReading, MeasurementKind

__all__ = [
    "DeviceIdentity",
    "DeviceReading",
    "IdentityCache",
    "MeasurementKind",
    "MqttConfig",
    "ScanningConfig",
    "Settings",
    "__version__",
    "get_settings",
    "readings",
    "run_bridge",
]

__version__ = version("blueplug")
