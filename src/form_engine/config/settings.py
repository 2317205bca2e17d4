"""Engine settings schema and loader.

Settings control the naming conventions the engine relies on (render entry
point, initial-data export, well-known optional names) and loader defaults.
They are loaded from a YAML file, either as a top-level mapping or under an
``engine:`` section:

    engine:
      render_name: render
      initial_data_name: initial_data
      enable_cross_references: true

The file location is taken from the ``FORM_ENGINE_CONFIG`` environment
variable when ``get_engine_settings()`` is used without an explicit path.
"""

import keyword
import logging
import os
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from form_engine.errors import SettingsError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "FORM_ENGINE_CONFIG"

# Names that definitions commonly leave undefined; misses are not reported
DEFAULT_OPTIONAL_NAMES = [
    "initial_data",
    "schema",
    "query",
    "identity",
    "style",
    "handle_before_unload",
    "render",
]

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class EngineSettings(BaseModel):
    """Naming conventions and loader defaults.

    Attributes:
        render_name: Conventional name of the render entry point.
        initial_data_name: Conventional name of the initial-data export.
        optional_names: Names whose absence is expected and not reported.
        enable_cross_references: Default for two-pass batch loading.
        definition_filename: File holding a definition inside its folder.
        identity_filenames: Candidate metadata files inside a definition folder.
        log_level: Default log level for the CLI.
    """

    render_name: str = Field(
        default="render",
        description="Conventional name of the render entry point",
    )
    initial_data_name: str = Field(
        default="initial_data",
        description="Conventional name of the initial-data export",
    )
    optional_names: List[str] = Field(
        default_factory=lambda: list(DEFAULT_OPTIONAL_NAMES),
        description="Names whose absence is expected and never reported",
    )
    enable_cross_references: bool = Field(
        default=True,
        description="Run the second pass so batch members can see each other",
    )
    definition_filename: str = Field(
        default="index.py",
        description="File holding a definition inside its folder",
        min_length=1,
    )
    identity_filenames: List[str] = Field(
        default_factory=lambda: ["identity.json", "identity.yaml", "identity.yml"],
        description="Candidate identity metadata files, first match wins",
    )
    log_level: str = Field(default="INFO", description="Default log level")

    @field_validator("render_name", "initial_data_name")
    @classmethod
    def validate_identifier(cls, v: str) -> str:
        """Entry point names must be usable as Python identifiers."""
        if not v.isidentifier() or keyword.iskeyword(v):
            raise ValueError(f"'{v}' is not a valid identifier")
        return v

    @field_validator("optional_names")
    @classmethod
    def validate_optional_names(cls, v: List[str]) -> List[str]:
        """Drop duplicates while keeping order."""
        seen = []
        for name in v:
            if name not in seen:
                seen.append(name)
        return seen

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(
                f"Unknown log level '{v}'. Valid levels: {sorted(VALID_LOG_LEVELS)}"
            )
        return level

    def is_optional(self, name: str) -> bool:
        """Check whether a missing name should stay silent."""
        return name in self.optional_names


def load_engine_settings(path: str | Path) -> EngineSettings:
    """Load engine settings from a YAML file.

    Args:
        path: Path to the YAML file.

    Returns:
        Validated EngineSettings.

    Raises:
        SettingsError: If the file is missing, unreadable or invalid.
    """
    config_path = Path(path)
    if not config_path.exists():
        raise SettingsError(f"Settings file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise SettingsError(f"Invalid YAML in settings file {config_path}: {e}")

    if not isinstance(data, dict):
        raise SettingsError(f"Settings file must contain a mapping: {config_path}")

    if "engine" in data:
        data = data["engine"] or {}

    try:
        settings = EngineSettings(**data)
    except ValidationError as e:
        raise SettingsError(f"Invalid engine settings in {config_path}: {e}")

    logger.debug(f"Loaded engine settings from {config_path}")
    return settings


_settings_cache: Optional[EngineSettings] = None


def get_engine_settings(use_cache: bool = True) -> EngineSettings:
    """Get engine settings from FORM_ENGINE_CONFIG, or defaults.

    Args:
        use_cache: Reuse previously resolved settings.

    Returns:
        EngineSettings instance.
    """
    global _settings_cache
    if use_cache and _settings_cache is not None:
        return _settings_cache

    config_path = os.getenv(CONFIG_ENV_VAR)
    if config_path:
        settings = load_engine_settings(config_path)
    else:
        settings = EngineSettings()

    if use_cache:
        _settings_cache = settings
    return settings


def clear_settings_cache() -> None:
    """Forget cached settings (used by tests and after config edits)."""
    global _settings_cache
    _settings_cache = None
