from __future__ import annotations


class BlueplugError(Exception):
    """Base error for blueplug."""


class DecodeError(BlueplugError):
    """Payload bytes do not match the layout of the selected format."""


class UnsupportedFormatError(DecodeError):
    """Payload announces a format version or feature we cannot decode."""


class TransportError(BlueplugError):
    """The BLE scanning stack failed; the event stream cannot continue."""
