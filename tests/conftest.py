from __future__ import annotations

from collections.abc import AsyncIterator, Iterable

import pytest

from blueplug.config import get_settings
from blueplug.models import RawEvent


@pytest.fixture(autouse=True)
def _isolate_settings_env(monkeypatch: pytest.MonkeyPatch, tmp_path):
    monkeypatch.delenv("BLUEPLUG_CONFIG", raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


async def event_stream(
    events: Iterable[RawEvent], error: BaseException | None = None
) -> AsyncIterator[RawEvent]:
    for event in events:
        yield event
    if error is not None:
        raise error


# BTHome v2: packet id 126, battery 100 %, 19.16 °C, 39.00 %
BTHOME_FIXTURE = bytes([64, 0, 126, 1, 100, 2, 124, 7, 3, 60, 15])
