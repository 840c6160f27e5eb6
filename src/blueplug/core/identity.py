from __future__ import annotations

import logging

from blueplug.models import DeviceIdentity

logger = logging.getLogger(__name__)


class IdentityCache:
    """Maps transient scanner handles to the best known device identity.

    Entries live for the whole process. A handle that is later announced
    with another name is overwritten; a handle reassigned to a different
    physical device keeps the old entry until a name is announced for it.
    """

    def __init__(self) -> None:
        self._identities: dict[str, DeviceIdentity] = {}

    def __len__(self) -> int:
        return len(self._identities)

    def resolve(self, handle: str) -> DeviceIdentity | None:
        return self._identities.get(handle)

    def observe_discovery(self, handle: str, name: str | None) -> None:
        if not name:
            return

        current = self._identities.get(handle)
        if current is not None and current.name == name:
            return

        identity = DeviceIdentity.for_handle(handle, name)
        self._identities[handle] = identity
        if current is None:
            logger.debug("Learned name '%s' for %s", name, handle)
        else:
            logger.info("Device %s renamed '%s' -> '%s'", handle, current.name, name)

    def identities(self) -> list[DeviceIdentity]:
        return list(self._identities.values())
