"""Component registry store.

Holds the entry points of successfully loaded definitions and the
"current initial data" slot. A process-wide default store backs the module
level functions; hosts and tests can inject their own store into
``LoaderConfig`` instead.

Only the loader adds to the registry. ``reset()`` clears the entries and
the initial-data slot together; nothing else removes entries.
"""

import logging
import threading
from typing import Any, Dict, Iterator, Mapping

from form_engine.runtime.sandbox import EntryPoints

logger = logging.getLogger(__name__)


class ComponentRegistry:
    """Store of loaded definitions keyed by name."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._components: Dict[str, EntryPoints] = {}
        self._initial_data: Any = {}

    def snapshot(self) -> Dict[str, EntryPoints]:
        """Read-only copy of the current entries."""
        with self._lock:
            return dict(self._components)

    def render_units(self) -> Dict[str, Any]:
        """Name -> render unit view used for peer resolution."""
        with self._lock:
            return {name: entry.render for name, entry in self._components.items()}

    def merge(self, components: Mapping[str, EntryPoints]) -> None:
        """Add or overwrite entries."""
        with self._lock:
            self._components.update(components)
        logger.debug(f"Registry merged {len(components)} entries, {len(self._components)} total")

    def reset(self) -> None:
        """Clear all entries and the initial-data slot."""
        with self._lock:
            self._components = {}
            self._initial_data = {}

    def set_initial_data(self, data: Any) -> None:
        with self._lock:
            self._initial_data = data if data is not None else {}

    def get_initial_data(self) -> Any:
        with self._lock:
            return self._initial_data

    def get(self, name: str) -> EntryPoints | None:
        with self._lock:
            return self._components.get(name)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._components

    def __len__(self) -> int:
        with self._lock:
            return len(self._components)

    def __iter__(self) -> Iterator[str]:
        return iter(self.snapshot())


_default_registry = ComponentRegistry()


def get_default_registry() -> ComponentRegistry:
    return _default_registry


def get_registry_snapshot() -> Dict[str, EntryPoints]:
    """Read-only copy of the process-wide registry."""
    return _default_registry.snapshot()


def reset_registry() -> None:
    """Clear the process-wide registry and its initial-data slot."""
    _default_registry.reset()
