"""
Execution Sandbox.

Runs compiled definition code against a ScopeResolver and extracts the
unit's exported entry points:

- the render entry point, found under the conventional render name, or
  under the definition's own name as a fallback;
- the optional initial-data payload, found under the conventional
  initial-data name.

A unit that exports no render entry point but referenced names nothing
provides degrades to a placeholder tagged with its own name. Without such
names a missing render entry point is a load error.

Execution is synchronous and in-process. There is no isolation from the
host interpreter and no timeout.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

from form_engine.config.settings import EngineSettings
from form_engine.errors import EvaluationError, FormEngineError, MissingEntryPointError
from form_engine.scope.placeholder import ErrorUnit, create_error_unit, create_placeholder
from form_engine.scope.resolution import InterceptingBuiltins, ScopeResolver

logger = logging.getLogger(__name__)

RenderUnit = Callable[..., Any]


@dataclass
class EntryPoints:
    """Exported entry points of one successfully loaded definition."""

    name: str
    render: RenderUnit
    initial_data: Any = None

    @property
    def is_error(self) -> bool:
        return isinstance(self.render, ErrorUnit)


def build_namespace(resolver: ScopeResolver, name: str) -> Dict[str, Any]:
    """Fresh globals for one unit; misses go through the resolver."""
    return {
        "__name__": name,
        "__builtins__": InterceptingBuiltins(resolver),
    }


def extract_entry_points(namespace: Dict[str, Any], name: str, settings: EngineSettings) -> EntryPoints:
    """Read entry points from an executed unit's namespace.

    Raises:
        MissingEntryPointError: If no callable render entry point exists.
    """
    render = namespace.get(settings.render_name)
    if render is None and name != settings.render_name:
        render = namespace.get(name)

    if render is None:
        raise MissingEntryPointError(
            f"'{settings.render_name}' not found in the definition code", definition=name
        )
    if not callable(render):
        raise MissingEntryPointError(
            f"'{settings.render_name}' must be callable, got {type(render).__name__}",
            definition=name,
        )

    return EntryPoints(
        name=name,
        render=render,
        initial_data=namespace.get(settings.initial_data_name),
    )


def execute_unit(code: str, resolver: ScopeResolver, *, name: str, settings: EngineSettings) -> EntryPoints:
    """
    Execute compiled code and return its entry points.

    Args:
        code: Compiled Python source
        resolver: Name resolver for this unit
        name: Definition name (used for filename, errors and the fallback export)
        settings: Naming conventions

    Returns:
        EntryPoints of the unit

    Raises:
        EvaluationError: If compiling the bytecode or running it fails
        MissingEntryPointError: If no render entry point was exported
    """
    namespace = build_namespace(resolver, name)
    try:
        bytecode = compile(code, f"<definition:{name}>", "exec")
        exec(bytecode, namespace)
    except (Exception, SystemExit) as e:
        raise EvaluationError(f"{type(e).__name__}: {e}", definition=name, cause=e) from e

    if _lacks_render(namespace, name, settings) and resolver.missing_names - resolver.optional_names:
        # Missing export downstream of missing names: degrade, do not fail
        logger.debug(f"Definition '{name}' exported no render; depends on {sorted(resolver.missing_names)}")
        return EntryPoints(
            name=name,
            render=create_placeholder(name),
            initial_data=namespace.get(settings.initial_data_name),
        )

    return extract_entry_points(namespace, name, settings)


def _lacks_render(namespace: Dict[str, Any], name: str, settings: EngineSettings) -> bool:
    return namespace.get(settings.render_name) is None and namespace.get(name) is None


def run_unit_safely(
    code: str,
    resolver: ScopeResolver,
    *,
    name: str,
    settings: EngineSettings,
) -> Tuple[EntryPoints, Optional[FormEngineError]]:
    """Execute a unit, converting any failure into an inert error unit.

    Returns:
        (entry_points, error). On failure the render entry point is an
        ErrorUnit displaying the message and error is set.
    """
    try:
        return execute_unit(code, resolver, name=name, settings=settings), None
    except FormEngineError as e:
        logger.debug(f"Definition '{name}' failed: {e.message}")
        return EntryPoints(name=name, render=create_error_unit(e.message)), e
