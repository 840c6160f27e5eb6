from __future__ import annotations

import json
import os
import tomllib
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, ValidationError

APP_NAME = "blueplug"
CONFIG_FILENAME = "config.toml"
CONFIG_ENV_VAR = "BLUEPLUG_CONFIG"


def xdg_config_home() -> Path:
    return Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))


def default_config_path() -> Path:
    return xdg_config_home() / APP_NAME / CONFIG_FILENAME


def expand_path(value: str) -> Path:
    return Path(os.path.expandvars(os.path.expanduser(value)))


class MqttConfig(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    host: str = "localhost"
    port: int = Field(default=1883, ge=1, le=65535)
    client_id: str = "blueplug"
    keepalive: int = Field(default=60, ge=1)
    qos: int = Field(default=1, ge=0, le=2)
    topic_prefix: str = Field(default="device_reading", min_length=1)


class ScanningConfig(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    adapter: str | None = None
    mode: Literal["active", "passive"] = "active"
    queue_size: int = Field(default=256, ge=1)


class Settings(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    mqtt: MqttConfig = Field(default_factory=MqttConfig)
    scanning: ScanningConfig = Field(default_factory=ScanningConfig)


def resolve_config_path(allow_missing: bool = False) -> tuple[Path, bool]:
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        path = expand_path(env_path)
        if not allow_missing and not path.exists():
            raise FileNotFoundError(f"{CONFIG_ENV_VAR} points to missing file: {path}")
        return path, path.exists()

    path = default_config_path()
    return path, path.exists()


def load_settings(path: Path) -> Settings:
    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ValueError(f"Invalid TOML in config file: {path}\n{exc}") from exc

    try:
        return Settings.model_validate(data or {})
    except ValidationError as exc:
        raise ValueError(f"Invalid config file: {path}\n{exc}") from exc


@lru_cache
def get_settings() -> Settings:
    path, exists = resolve_config_path(allow_missing=False)
    if exists:
        return load_settings(path)
    return Settings()


def with_mqtt_overrides(
    settings: Settings,
    *,
    host: str | None = None,
    port: int | None = None,
    client_id: str | None = None,
) -> Settings:
    """Return ``settings`` with any command line MQTT options applied."""
    overrides = {
        key: value
        for key, value in (("host", host), ("port", port), ("client_id", client_id))
        if value is not None
    }
    if not overrides:
        return settings
    mqtt = MqttConfig.model_validate(settings.mqtt.model_dump() | overrides)
    return settings.model_copy(update={"mqtt": mqtt})


def _toml_string(value: str) -> str:
    return json.dumps(value)


def render_settings_toml(settings: Settings) -> str:
    lines = [
        "# blueplug configuration",
        "",
        "[mqtt]",
        f"host = {_toml_string(settings.mqtt.host)}",
        f"port = {settings.mqtt.port}",
        f"client_id = {_toml_string(settings.mqtt.client_id)}",
        f"keepalive = {settings.mqtt.keepalive}",
        f"qos = {settings.mqtt.qos}",
        f"topic_prefix = {_toml_string(settings.mqtt.topic_prefix)}",
        "",
        "[scanning]",
    ]
    # TOML has no null; leave the key out to use the default adapter
    if settings.scanning.adapter is not None:
        lines.append(f"adapter = {_toml_string(settings.scanning.adapter)}")
    lines.extend(
        [
            f"mode = {_toml_string(settings.scanning.mode)}",
            f"queue_size = {settings.scanning.queue_size}",
            "",
        ]
    )
    return "\n".join(lines)


def write_settings(settings: Settings, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_settings_toml(settings))
