"""
Scope Resolution Layer.

Decides, per free name, how a lookup inside a definition resolves:

1. Names the unit declares itself resolve lexically inside the unit, even
   when the capability scope or registry has the same name.
2. Peer registry, then capability scope. A loaded peer wins over a
   capability with the same name.
3. Python builtins.
4. Anything else resolves to a Placeholder and is reported once to the
   diagnostics sink, unless it is one of the well-known optional names.

``InterceptingBuiltins`` installs this policy into executed code. It is used
as the unit's ``__builtins__`` mapping: the interpreter consults it only
after the unit's own globals miss, which is what keeps bound local names
in front of everything else.
"""

import builtins
import logging
from typing import Any, Callable, Iterable, Mapping, Optional, Set

from form_engine.diagnostics import DiagnosticsSink, format_missing
from form_engine.scope.placeholder import Placeholder, create_placeholder

logger = logging.getLogger(__name__)

_PY_BUILTINS: Mapping[str, Any] = vars(builtins)
_real_import = builtins.__import__

# Looked up by the interpreter through the dict API, never via __missing__
_PREBOUND_BUILTINS = ("__import__", "__build_class__")

_MISSING = object()


def _is_dunder(name: str) -> bool:
    return name.startswith("__") and name.endswith("__")


class ScopeResolver:
    """Resolve free names for one unit.

    Args:
        scope: Capability scope (read-only mapping).
        registry: Peer render units visible to the unit, or None.
        local_names: Names the unit declares itself.
        diagnostics: Sink for unresolved-name reports.
        optional_names: Names whose absence is never reported.
    """

    def __init__(
        self,
        scope: Mapping[str, Any],
        registry: Optional[Mapping[str, Any]] = None,
        local_names: Iterable[str] = (),
        diagnostics: Optional[DiagnosticsSink] = None,
        optional_names: Iterable[str] = (),
    ):
        self.scope = scope
        self.registry = registry or {}
        self.local_names: Set[str] = set(local_names)
        self.optional_names: Set[str] = set(optional_names)
        self._diagnostics = diagnostics
        self._placeholders: dict = {}

    def _lookup(self, name: str) -> Any:
        if name in self.registry:
            return self.registry[name]
        if name in self.scope:
            return self.scope[name]
        return _MISSING

    def exists(self, name: str) -> bool:
        """Whether ``get`` should answer for ``name``.

        False for unit-local names so they fall back to the unit's own
        declaration, and for dunder names nothing provides. True for
        everything else, unresolved names included.
        """
        if name in self.local_names:
            return False
        if self._lookup(name) is not _MISSING or name in _PY_BUILTINS:
            return True
        return not _is_dunder(name)

    def get(self, name: str) -> Any:
        """Resolve a name, degrading to a Placeholder when nothing provides it."""
        value = self._lookup(name)
        if value is not _MISSING:
            return value
        if name in _PY_BUILTINS:
            return _PY_BUILTINS[name]
        return self._placeholder(name)

    def _placeholder(self, name: str) -> Placeholder:
        placeholder = self._placeholders.get(name)
        if placeholder is None:
            placeholder = create_placeholder(name)
            self._placeholders[name] = placeholder
            if name not in self.optional_names:
                self._report(format_missing(name))
        return placeholder

    def _report(self, message: str) -> None:
        logger.debug(message)
        if self._diagnostics is not None:
            self._diagnostics(message)

    @property
    def missing_names(self) -> Set[str]:
        """Names that resolved to placeholders so far."""
        return set(self._placeholders)


class InterceptingBuiltins(dict):
    """``__builtins__`` mapping that routes misses through a ScopeResolver."""

    def __init__(self, resolver: ScopeResolver):
        super().__init__()
        self._resolver = resolver
        self["__import__"] = make_scope_import(resolver)
        self["__build_class__"] = _PY_BUILTINS["__build_class__"]

    def __missing__(self, name: str) -> Any:
        if not self._resolver.exists(name):
            # Lexical fallback: whatever the interpreter itself would find
            if name in _PY_BUILTINS:
                return _PY_BUILTINS[name]
            raise KeyError(name)
        value = self._resolver.get(name)
        self[name] = value
        return value


def make_scope_import(resolver: ScopeResolver) -> Callable[..., Any]:
    """Build an ``__import__`` that binds capability names before modules.

    ``from Fluent import Stack as FluentStack`` binds ``Fluent.Stack`` when
    ``Fluent`` is a loaded peer or in the capability scope. Relative imports and
    names nothing provides go to the interpreter's importer.
    """

    def scope_import(name, globals=None, locals=None, fromlist=(), level=0):
        if level == 0:
            head = name.split(".")[0]
            value = resolver._lookup(head)
            if value is not _MISSING:
                if "." in name and not fromlist:
                    return value
                target = value
                for part in name.split(".")[1:]:
                    target = getattr(target, part)
                return target if fromlist else value
        return _real_import(name, globals, locals, fromlist, level)

    return scope_import
