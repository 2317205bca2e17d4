"""Two-pass loader, registry store and source discovery."""

from form_engine.loader.discovery import discover_sources, load_identity, read_definition_file
from form_engine.loader.loader import (
    BatchLoadResult,
    LoaderConfig,
    LoadResult,
    load_batch,
    load_definition,
    load_one,
)
from form_engine.loader.registry import (
    ComponentRegistry,
    get_default_registry,
    get_registry_snapshot,
    reset_registry,
)

__all__ = [
    "BatchLoadResult",
    "ComponentRegistry",
    "LoadResult",
    "LoaderConfig",
    "discover_sources",
    "get_default_registry",
    "get_registry_snapshot",
    "load_batch",
    "load_definition",
    "load_identity",
    "load_one",
    "read_definition_file",
    "reset_registry",
]
