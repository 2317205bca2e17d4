"""Discover definition sources on disk.

Two layouts are recognised inside a definitions root:

    definitions/
      Scale5/
        index.py           # definition text
        identity.json      # optional identity metadata (or .yaml/.yml)
      Banner.py            # loose single-file definition, no metadata

Folder names (or file stems) become definition names. Sources are returned
sorted by name so batch submission order is stable across platforms.
"""

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

import yaml
from pydantic import ValidationError

from form_engine.config.settings import EngineSettings, get_engine_settings
from form_engine.errors import SourceDiscoveryError
from form_engine.schemas.definition import ComponentIdentity, DefinitionSource

logger = logging.getLogger(__name__)


def read_definition_file(path: str | Path) -> str:
    """Read a definition file as UTF-8 text.

    Raises:
        SourceDiscoveryError: If the file is missing or unreadable.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise SourceDiscoveryError(f"Definition file not found: {file_path}")
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise SourceDiscoveryError(f"Cannot read definition file {file_path}: {e}")


def load_identity(folder: Path, settings: EngineSettings) -> Optional[ComponentIdentity]:
    """Load identity metadata from a definition folder, if present.

    The first existing file from ``settings.identity_filenames`` wins. A
    missing ``name`` defaults to the folder name.

    Raises:
        SourceDiscoveryError: If the metadata file is malformed.
    """
    for filename in settings.identity_filenames:
        path = folder / filename
        if not path.is_file():
            continue

        try:
            with open(path, "r", encoding="utf-8") as f:
                if path.suffix == ".json":
                    data = json.load(f)
                else:
                    data = yaml.safe_load(f) or {}
        except (OSError, UnicodeDecodeError, json.JSONDecodeError, yaml.YAMLError) as e:
            raise SourceDiscoveryError(f"Invalid identity file {path}: {e}")

        if not isinstance(data, dict):
            raise SourceDiscoveryError(f"Identity file must contain a mapping: {path}")
        data.setdefault("name", folder.name)

        try:
            return ComponentIdentity.model_validate(data)
        except ValidationError as e:
            raise SourceDiscoveryError(f"Invalid identity metadata in {path}: {e}")

    return None


def _read_or_skip(path: Path) -> Optional[str]:
    try:
        return read_definition_file(path)
    except SourceDiscoveryError as e:
        logger.warning(f"Skipping definition: {e}")
        return None


def _identity_or_none(folder: Path, settings: EngineSettings) -> Optional[ComponentIdentity]:
    try:
        return load_identity(folder, settings)
    except SourceDiscoveryError as e:
        logger.warning(f"Ignoring identity metadata for '{folder.name}': {e}")
        return None


def discover_sources(root: str | Path, settings: Optional[EngineSettings] = None) -> List[DefinitionSource]:
    """
    Collect definition sources below a definitions root.

    An unreadable definition file skips that definition. Malformed identity
    metadata drops the metadata but keeps the definition. Both are logged as
    warnings and never abort discovery of the other entries.

    Args:
        root: Directory containing definition folders and/or loose files
        settings: Engine settings (defaults when omitted)

    Returns:
        DefinitionSource list sorted by name

    Raises:
        SourceDiscoveryError: If root is not a directory
    """
    settings = settings or get_engine_settings()
    root_path = Path(root)
    if not root_path.is_dir():
        raise SourceDiscoveryError(f"Definitions directory not found: {root_path}")

    sources: Dict[str, DefinitionSource] = {}
    for entry in sorted(root_path.iterdir()):
        if entry.name.startswith((".", "_")):
            continue

        if entry.is_dir():
            definition_file = entry / settings.definition_filename
            if not definition_file.is_file():
                logger.debug(f"Skipping {entry}: no {settings.definition_filename}")
                continue
            name = entry.name
            text = _read_or_skip(definition_file)
            identity = _identity_or_none(entry, settings)
        elif entry.suffix == ".py":
            name = entry.stem
            text = _read_or_skip(entry)
            identity = None
        else:
            continue

        if text is None:
            continue

        if not name.isidentifier():
            logger.warning(f"Skipping {entry}: '{name}' is not a valid definition name")
            continue
        if name in sources:
            logger.warning(f"Duplicate definition '{name}' at {entry}; keeping the first one")
            continue

        sources[name] = DefinitionSource(name=name, text=text, identity=identity)

    logger.debug(f"Discovered {len(sources)} definitions in {root_path}")
    return [sources[name] for name in sorted(sources)]
