from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from .identity import DeviceIdentity
from .measurement import Measurement


class DeviceReading(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    identity: DeviceIdentity
    measurement: Measurement

    def to_payload(self) -> dict[str, Any]:
        """Flat structure published on the bus."""
        return {
            "device_id": str(self.identity.stable_id),
            "device_name": self.identity.name,
            "kind": self.measurement.kind.value,
            "value": self.measurement.value,
        }
