"""Engine configuration management."""

from form_engine.config.settings import (
    CONFIG_ENV_VAR,
    DEFAULT_OPTIONAL_NAMES,
    EngineSettings,
    clear_settings_cache,
    get_engine_settings,
    load_engine_settings,
)

__all__ = [
    "CONFIG_ENV_VAR",
    "DEFAULT_OPTIONAL_NAMES",
    "EngineSettings",
    "clear_settings_cache",
    "get_engine_settings",
    "load_engine_settings",
]
