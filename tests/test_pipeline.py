"""Tests for the normalizer, the projector and the chained pipeline."""

from __future__ import annotations

import asyncio

import pytest

import blueplug.core.projector as projector_module
from blueplug.core import (
    IdentityCache,
    normalize,
    normalize_event,
    project,
    project_event,
    readings,
)
from blueplug.core.decoders import bthome, ruuvi
from blueplug.errors import DecodeError, TransportError
from blueplug.models import (
    Battery,
    DeviceConnected,
    DeviceDisconnected,
    DeviceDiscovered,
    DeviceIdentity,
    DeviceUpdated,
    Humidity,
    ManufacturerDataAdvertisement,
    ManufacturerDataEvent,
    ServiceDataAdvertisement,
    ServiceDataEvent,
    ServicesAdvertisement,
    Temperature,
    Voltage,
)
from conftest import BTHOME_FIXTURE, event_stream

HANDLE = "A4:C1:38:DD:EE:FF"
RUUVI_FRAME = bytes.fromhex("0512FC5394C37C0004FFFC040CAC364200CDCBB8334C884F")


async def collect(iterator):
    return [item async for item in iterator]


def test_advertisement_before_discovery_is_dropped():
    cache = IdentityCache()
    event = ServiceDataAdvertisement(HANDLE, {bthome.BTHOME_V2_UUID: BTHOME_FIXTURE})

    assert normalize_event(event, cache) is None


def test_unnamed_handles_never_produce_events():
    events = [
        DeviceDiscovered(HANDLE, None),
        ServiceDataAdvertisement(HANDLE, {bthome.BTHOME_V2_UUID: BTHOME_FIXTURE}),
        ManufacturerDataAdvertisement(HANDLE, {0x0499: RUUVI_FRAME}),
    ]

    assert asyncio.run(collect(normalize(event_stream(events)))) == []


def test_resolved_events_carry_identity():
    cache = IdentityCache()
    events = [
        DeviceDiscovered(HANDLE, "ATC_DDEEFF"),
        ServiceDataAdvertisement(HANDLE, {bthome.BTHOME_V2_UUID: BTHOME_FIXTURE}),
        ManufacturerDataAdvertisement(HANDLE, {0x0499: RUUVI_FRAME}),
    ]

    device_events = asyncio.run(collect(normalize(event_stream(events), cache)))

    identity = cache.resolve(HANDLE)
    assert device_events == [
        ServiceDataEvent(identity, {bthome.BTHOME_V2_UUID: BTHOME_FIXTURE}),
        ManufacturerDataEvent(identity, {0x0499: RUUVI_FRAME}),
    ]


def test_other_events_produce_nothing():
    cache = IdentityCache()
    cache.observe_discovery(HANDLE, "ATC_DDEEFF")

    for event in (
        DeviceConnected(HANDLE),
        DeviceDisconnected(HANDLE),
        DeviceUpdated(HANDLE),
        ServicesAdvertisement(HANDLE, ("0000181a-0000-1000-8000-00805f9b34fb",)),
    ):
        assert normalize_event(event, cache) is None


def test_transport_error_ends_the_stream():
    events = [
        DeviceDiscovered(HANDLE, "ATC_DDEEFF"),
        ServiceDataAdvertisement(HANDLE, {bthome.BTHOME_V2_UUID: BTHOME_FIXTURE}),
    ]
    received = []

    async def consume():
        stream = readings(event_stream(events, TransportError("adapter gone")))
        async for reading in stream:
            received.append(reading)

    with pytest.raises(TransportError):
        asyncio.run(consume())
    assert len(received) == 3


def test_readings_pair_identity_with_each_measurement():
    events = [
        DeviceDiscovered(HANDLE, "ATC_DDEEFF"),
        ServiceDataAdvertisement(HANDLE, {bthome.BTHOME_V2_UUID: BTHOME_FIXTURE}),
        DeviceDiscovered("E0:11:22:33:44:55", "Ruuvi 884F"),
        ManufacturerDataAdvertisement("E0:11:22:33:44:55", {0x0499: RUUVI_FRAME}),
    ]

    result = asyncio.run(collect(readings(event_stream(events))))

    assert [(r.identity.name, r.measurement) for r in result] == [
        ("ATC_DDEEFF", Humidity(value=39.0)),
        ("ATC_DDEEFF", Temperature(value=19.16)),
        ("ATC_DDEEFF", Battery(value=100.0)),
        ("Ruuvi 884F", Humidity(value=53.49)),
        ("Ruuvi 884F", Temperature(value=24.3)),
        ("Ruuvi 884F", Voltage(value=2.977)),
    ]


def test_readings_follow_renames():
    events = [
        DeviceDiscovered(HANDLE, "old"),
        DeviceDiscovered(HANDLE, "new"),
        ManufacturerDataAdvertisement(HANDLE, {0x0499: RUUVI_FRAME}),
    ]

    result = asyncio.run(collect(readings(event_stream(events))))
    assert {r.identity.name for r in result} == {"new"}


def test_malformed_event_does_not_stop_the_next_one():
    identity = DeviceIdentity.for_handle(HANDLE, "ATC_DDEEFF")
    events = [
        ServiceDataEvent(identity, {bthome.BTHOME_V2_UUID: bytes([0x40, 0x02])}),
        ManufacturerDataEvent(identity, {ruuvi.RUUVI_COMPANY_ID: b"\x05\x00"}),
        ServiceDataEvent(identity, {bthome.BTHOME_V2_UUID: BTHOME_FIXTURE}),
    ]

    result = asyncio.run(collect(project(event_stream(events))))

    assert [r.measurement for r in result] == [
        Humidity(value=39.0),
        Temperature(value=19.16),
        Battery(value=100.0),
    ]


def test_decode_error_is_logged_and_isolated(monkeypatch, caplog):
    identity = DeviceIdentity.for_handle(HANDLE, "ATC_DDEEFF")
    bad = ManufacturerDataEvent(identity, {0x0499: b"boom"})
    good = ServiceDataEvent(identity, {bthome.BTHOME_V2_UUID: BTHOME_FIXTURE})
    real_decode = projector_module.decode_event

    def _flaky_decode(event):
        if event is bad:
            raise DecodeError("corrupt frame")
        return real_decode(event)

    monkeypatch.setattr(projector_module, "decode_event", _flaky_decode)

    assert project_event(bad) == []
    result = asyncio.run(collect(project(event_stream([bad, good]))))

    assert len(result) == 3
    assert "corrupt frame" in caplog.text
