"""Project-level layergen settings loading."""

from layergen.config.settings import (
    GeneratorSettings,
    IndexSettings,
    LayergenSettings,
    LogLevel,
    SettingsError,
    default_settings_file,
    load_settings,
    write_default_settings,
)

__all__ = [
    "GeneratorSettings",
    "IndexSettings",
    "LayergenSettings",
    "LogLevel",
    "SettingsError",
    "default_settings_file",
    "load_settings",
    "write_default_settings",
]
