from __future__ import annotations

from .identity import IdentityCache
from .normalizer import normalize, normalize_event
from .pipeline import readings, run_bridge, watch
from .projector import decode_event, project, project_event
from .publisher import ReadingPublisher, serialize, topic_for
from .scanner import BleScanner

__all__ = [
    "BleScanner",
    "IdentityCache",
    "ReadingPublisher",
    "decode_event",
    "normalize",
    "normalize_event",
    "project",
    "project_event",
    "readings",
    "run_bridge",
    "serialize",
    "topic_for",
    "watch",
]
