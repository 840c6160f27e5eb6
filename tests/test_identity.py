"""Tests for the identity cache."""

from __future__ import annotations

import uuid

from blueplug.core import IdentityCache
from blueplug.models import BLUEPLUG_NAMESPACE, DeviceIdentity


def test_resolve_unknown_handle():
    cache = IdentityCache()
    assert cache.resolve("AA:BB:CC:DD:EE:FF") is None


def test_discovery_with_name_creates_entry():
    cache = IdentityCache()
    cache.observe_discovery("AA:BB:CC:DD:EE:FF", "ATC_DDEEFF")

    identity = cache.resolve("AA:BB:CC:DD:EE:FF")
    assert identity is not None
    assert identity.name == "ATC_DDEEFF"
    assert identity.stable_id == uuid.uuid5(BLUEPLUG_NAMESPACE, "AA:BB:CC:DD:EE:FF")


def test_discovery_without_name_is_noop():
    cache = IdentityCache()
    cache.observe_discovery("AA:BB:CC:DD:EE:FF", None)
    assert len(cache) == 0

    cache.observe_discovery("AA:BB:CC:DD:EE:FF", "Kitchen")
    before = cache.identities()
    cache.observe_discovery("AA:BB:CC:DD:EE:FF", None)
    cache.observe_discovery("AA:BB:CC:DD:EE:FF", "")
    assert cache.identities() == before


def test_rename_is_last_write_wins_and_keeps_id():
    cache = IdentityCache()
    cache.observe_discovery("aa:bb:cc:dd:ee:ff", "Kitchen")
    first = cache.resolve("aa:bb:cc:dd:ee:ff")

    cache.observe_discovery("aa:bb:cc:dd:ee:ff", "Attic")
    second = cache.resolve("aa:bb:cc:dd:ee:ff")

    assert first is not None and second is not None
    assert second.name == "Attic"
    assert second.stable_id == first.stable_id
    assert len(cache) == 1


def test_uuid_handles_are_used_directly():
    handle = "b5095a0b-ec20-5340-b86f-2712b41fb30e"
    identity = DeviceIdentity.for_handle(handle, "Ruuvi 3F2A")
    assert identity.stable_id == uuid.UUID(handle)


def test_mac_handles_ignore_case():
    lower = DeviceIdentity.for_handle("aa:bb:cc:dd:ee:ff", "x")
    upper = DeviceIdentity.for_handle("AA:BB:CC:DD:EE:FF", "x")
    assert lower.stable_id == upper.stable_id
