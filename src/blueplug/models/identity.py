from __future__ import annotations

import uuid

from pydantic import BaseModel

# Namespace for ids derived from MAC-style handles
BLUEPLUG_NAMESPACE = uuid.UUID("6f1d3c2a-8b4e-5a97-9c1f-2d7e0b5a4c31")


class DeviceIdentity(BaseModel):
    """Stable id and best known name of a sensor."""

    model_config = {"frozen": True, "extra": "forbid"}

    stable_id: uuid.UUID
    name: str

    @classmethod
    def for_handle(cls, handle: str, name: str) -> DeviceIdentity:
        """Build an identity whose id depends on ``handle`` only.

        CoreBluetooth already hands out UUIDs; BlueZ and WinRT use the
        device address, which is hashed into a name-based UUID.
        """
        try:
            stable_id = uuid.UUID(handle)
        except ValueError:
            stable_id = uuid.uuid5(BLUEPLUG_NAMESPACE, handle.upper())
        return cls(stable_id=stable_id, name=name)
