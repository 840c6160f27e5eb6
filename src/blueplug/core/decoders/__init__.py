"""Payload decoders.

Service data is decoded as self-describing envelopes (BTHome, ATC/pvvx),
manufacturer data with fixed per-vendor layouts (Ruuvi). Both entry points
are pure and never raise for bad payloads.
"""

from __future__ import annotations

from .envelope import Element, Envelope
from .manufacturer import VENDOR_COMPANY_IDS, decode_manufacturer_data, decode_vendor
from .service import (
    ENVELOPE_PARSERS,
    decode_service_data,
    envelope_measurements,
    normalize_uuid,
    parse_envelope,
)

__all__ = [
    "ENVELOPE_PARSERS",
    "VENDOR_COMPANY_IDS",
    "Element",
    "Envelope",
    "decode_manufacturer_data",
    "decode_service_data",
    "decode_vendor",
    "envelope_measurements",
    "normalize_uuid",
    "parse_envelope",
]
