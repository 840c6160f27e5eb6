from __future__ import annotations

from .settings import (
    APP_NAME,
    CONFIG_ENV_VAR,
    CONFIG_FILENAME,
    MqttConfig,
    ScanningConfig,
    Settings,
    default_config_path,
    expand_path,
    get_settings,
    load_settings,
    render_settings_toml,
    resolve_config_path,
    with_mqtt_overrides,
    write_settings,
)

__all__ = [
    "APP_NAME",
    "CONFIG_ENV_VAR",
    "CONFIG_FILENAME",
    "MqttConfig",
    "ScanningConfig",
    "Settings",
    "default_config_path",
    "expand_path",
    "get_settings",
    "load_settings",
    "render_settings_toml",
    "resolve_config_path",
    "with_mqtt_overrides",
    "write_settings",
]
