"""Form scope builder.

Extends ``BaseScopeBuilder`` with what every form definition expects from
its host: a form identity, date helpers and form action stubs. Hosts bind
real hooks, namespaces and component catalogs with the ``with_*`` methods,
each of which returns a new builder.
"""

import logging
from typing import Any, Dict, Mapping, Optional

from form_engine.scope.builder import BaseScopeBuilder, ScopeConfig
from form_engine.utils.dates import (
    get_age,
    get_date_string,
    get_date_time_string,
    get_time_string,
)

logger = logging.getLogger(__name__)

DEFAULT_IDENTITY: Dict[str, Any] = {
    "title": "Form Preview",
    "name": "FormPreview",
    "description": "",
    "version": {"major": 1, "minor": 0, "patch": 0},
    "type": "form",
    "owner": "Preview",
    "author": "Preview",
    "publisher": "Preview",
}

DATE_HELPERS = {
    "get_date_string": get_date_string,
    "get_time_string": get_time_string,
    "get_date_time_string": get_date_time_string,
    "get_age": get_age,
}


def save_draft(source_data: Any = None, form_data: Any = None, data: Any = None) -> None:
    logger.info("save_draft called")
    logger.debug(f"save_draft payload: source={source_data!r} form={form_data!r} data={data!r}")


def save_submit(source_data: Any = None, form_data: Any = None, data: Any = None) -> None:
    logger.info("save_submit called")
    logger.debug(f"save_submit payload: source={source_data!r} form={form_data!r} data={data!r}")


def close_form() -> None:
    logger.info("close_form called")


def refresh() -> None:
    logger.info("refresh called")


FORM_ACTIONS = {
    "save_draft": save_draft,
    "save_submit": save_submit,
    "close_form": close_form,
    "refresh": refresh,
}


class FormScopeBuilder(BaseScopeBuilder):
    """Scope builder for form definitions.

    Args:
        identity: Identity mapping exposed as ``identity``; defaults to a
            preview identity.
        config: Optional base configuration to start from.
    """

    def __init__(self, identity: Optional[Mapping[str, Any]] = None, config: Optional[ScopeConfig] = None):
        super().__init__(config)
        self._config = self._config.merged_with(
            namespaces={"identity": dict(identity or DEFAULT_IDENTITY)},
            utilities={**DATE_HELPERS, **FORM_ACTIONS},
        )

    @property
    def identity(self) -> Mapping[str, Any]:
        return self._config.namespaces["identity"]

    def with_hooks(self, hooks: Mapping[str, Any]) -> "FormScopeBuilder":
        """Bind data-access hooks (use_source_data, use_active_data, ...)."""
        return self.extend(hooks=hooks)

    def with_namespaces(self, namespaces: Mapping[str, Any]) -> "FormScopeBuilder":
        return self.extend(namespaces=namespaces)

    def with_components(self, components: Mapping[str, Any]) -> "FormScopeBuilder":
        return self.extend(components=components)

    def with_registry_components(self, entry_points: Mapping[str, Any]) -> "FormScopeBuilder":
        """Expose already loaded definitions as components.

        Accepts either render units or objects with a ``render`` attribute
        (loader entry points).
        """
        components = {
            name: getattr(value, "render", value) for name, value in entry_points.items()
        }
        return self.extend(components=components)
