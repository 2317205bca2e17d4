"""
Capability Scope Builder.

Assembles the mapping of names a definition can use. Categories are merged
in a fixed order, last writer wins:

    engine defaults < render primitives < hooks < namespaces
                    < components < utilities

Call-site additions are merged on top of this by the loader.

``extend()`` never mutates the receiver; it returns a new builder of the same
class whose category mappings are merged copies (values are shared).
"""

import copy
import datetime
import decimal
import json
import logging
import math
import re
from dataclasses import dataclass, field, fields, replace
from types import MappingProxyType
from typing import Any, Dict, Mapping

from form_engine.runtime.elements import Element, Fragment, create_element

logger = logging.getLogger(__name__)

# Modules and helpers every definition can use without importing
DEFAULT_GLOBALS: Dict[str, Any] = {
    "math": math,
    "json": json,
    "re": re,
    "datetime": datetime,
    "date": datetime.date,
    "timedelta": datetime.timedelta,
    "Decimal": decimal.Decimal,
}

# Element primitives; hosts usually layer their own render primitives on top
ENGINE_PRIMITIVES: Dict[str, Any] = {
    "create_element": create_element,
    "Fragment": Fragment,
    "Element": Element,
}

SCOPE_CATEGORIES = (
    "render_primitives",
    "hooks",
    "namespaces",
    "components",
    "utilities",
)


def _frozen(mapping: Mapping[str, Any] | None) -> Mapping[str, Any]:
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True)
class ScopeConfig:
    """Capability categories, each a name -> capability mapping."""

    render_primitives: Mapping[str, Any] = field(default_factory=dict)
    hooks: Mapping[str, Any] = field(default_factory=dict)
    namespaces: Mapping[str, Any] = field(default_factory=dict)
    components: Mapping[str, Any] = field(default_factory=dict)
    utilities: Mapping[str, Any] = field(default_factory=dict)
    globals: Mapping[str, Any] = field(default_factory=lambda: dict(DEFAULT_GLOBALS))

    def __post_init__(self):
        for f in fields(self):
            object.__setattr__(self, f.name, _frozen(getattr(self, f.name)))

    def merged_with(self, **categories: Mapping[str, Any]) -> "ScopeConfig":
        """Return a config whose categories are merged with the given ones."""
        unknown = set(categories) - {f.name for f in fields(self)}
        if unknown:
            raise ValueError(f"Unknown scope categories: {sorted(unknown)}")
        updates = {
            name: {**getattr(self, name), **(additions or {})}
            for name, additions in categories.items()
        }
        return replace(self, **updates)


class BaseScopeBuilder:
    """
    Extensible scope builder.

    Subclass it to provide domain capabilities, or call ``extend()`` to
    layer additions on an existing builder.
    """

    def __init__(self, config: ScopeConfig | None = None, **categories: Mapping[str, Any]):
        base = config or ScopeConfig()
        self._config = base.merged_with(**categories) if categories else base

    def build_scope(self) -> Mapping[str, Any]:
        """Build the read-only capability scope for one load."""
        config = self._config
        scope: Dict[str, Any] = {}
        scope.update(ENGINE_PRIMITIVES)
        scope.update(config.globals)
        for category in SCOPE_CATEGORIES:
            scope.update(getattr(config, category))
        return MappingProxyType(scope)

    def extend(self, config: ScopeConfig | None = None, **categories: Mapping[str, Any]) -> "BaseScopeBuilder":
        """Return a new builder with merged categories; this one is untouched."""
        if config is not None:
            categories = {
                f.name: {**getattr(config, f.name), **categories.get(f.name, {})}
                for f in fields(config)
            }
        clone = copy.copy(self)
        clone._config = self._config.merged_with(**categories)
        logger.debug(f"Extended scope builder with categories: {sorted(categories)}")
        return clone

    def get_config(self) -> ScopeConfig:
        return self._config
