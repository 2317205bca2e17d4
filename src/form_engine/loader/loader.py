"""
Two-Pass Loader.

Loads definitions into render units and records them in a registry store.

Batch loads run twice so definitions can reference peers defined anywhere
in the same batch:

    Pass 1 (isolated)  -> merge into registry
    Pass 2 (pass-1 peers visible) -> merge into registry

Pass 1 establishes which names the batch exports. Pass 2 reloads every
definition with the pass-1 exports resolvable by name. Failures are
contained per definition; a batch never aborts because one member fails.

Example:
    >>> sources = [
    ...     DefinitionSource(name="Scale5", text=scale_text),
    ...     DefinitionSource(name="HonosQuestion", text=honos_text),
    ... ]
    >>> result = load_batch(sources, LoaderConfig(scope_builder=FormScopeBuilder()))
    >>> result.components["HonosQuestion"].render()
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from form_engine.config.settings import EngineSettings, get_engine_settings
from form_engine.diagnostics import (
    DiagnosticsCollector,
    DiagnosticsSink,
    LoggingDiagnostics,
    format_load_error,
)
from form_engine.errors import CompileError, FormEngineError
from form_engine.loader.registry import ComponentRegistry, get_default_registry
from form_engine.runtime.sandbox import EntryPoints, run_unit_safely
from form_engine.schemas.definition import ComponentIdentity, DefinitionSource
from form_engine.scope.builder import BaseScopeBuilder
from form_engine.scope.placeholder import create_error_unit
from form_engine.scope.resolution import ScopeResolver
from form_engine.transformer.compiler import CompileOptions, ICompiler, PythonCompiler
from form_engine.transformer.local_bindings import find_local_bindings
from form_engine.transformer.preprocessor import preprocess

logger = logging.getLogger(__name__)


class LoaderConfig(BaseModel):
    """Loader configuration.

    Attributes:
        scope_builder: Builds the capability scope for each load.
        compiler: Any object with ``compile(text, options) -> CompileResult``.
        settings: Naming conventions and defaults.
        enable_cross_references: Run pass 2; None uses the settings default.
        additional_scope: Call-site capabilities, merged over the builder's scope.
        registry: Registry store; the process-wide store when omitted.
        diagnostics: Sink for misses and load errors; logs when omitted.
        on_initial_data: Receives each loaded definition's initial data;
            the registry's initial-data slot when omitted.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    scope_builder: Any = Field(default_factory=BaseScopeBuilder)
    compiler: Any = Field(default_factory=PythonCompiler)
    settings: EngineSettings = Field(default_factory=get_engine_settings)
    enable_cross_references: Optional[bool] = None
    additional_scope: Dict[str, Any] = Field(default_factory=dict)
    registry: Optional[ComponentRegistry] = None
    diagnostics: Optional[Callable[[str], None]] = None
    on_initial_data: Optional[Callable[[Any], None]] = None

    @field_validator("scope_builder")
    @classmethod
    def validate_scope_builder(cls, v: Any) -> Any:
        if not callable(getattr(v, "build_scope", None)):
            raise ValueError("scope_builder must provide build_scope()")
        return v

    @field_validator("compiler")
    @classmethod
    def validate_compiler(cls, v: Any) -> Any:
        if not callable(getattr(v, "compile", None)):
            raise ValueError("compiler must provide compile(text, options)")
        return v

    def resolved_registry(self) -> ComponentRegistry:
        return self.registry if self.registry is not None else get_default_registry()

    def cross_references_enabled(self) -> bool:
        if self.enable_cross_references is None:
            return self.settings.enable_cross_references
        return self.enable_cross_references

    def sink(self) -> DiagnosticsSink:
        return self.diagnostics if self.diagnostics is not None else LoggingDiagnostics(logger)

    def initial_data_callback(self) -> Callable[[Any], None]:
        if self.on_initial_data is not None:
            return self.on_initial_data
        return self.resolved_registry().set_initial_data


@dataclass
class LoadResult:
    """Outcome of loading one definition.

    On failure ``entry_points.render`` is an inert error unit and ``error``
    is set.
    """

    entry_points: EntryPoints
    error: Optional[FormEngineError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class BatchLoadResult:
    """Outcome of a batch load, keyed by definition name."""

    components: Dict[str, EntryPoints] = field(default_factory=dict)
    errors: Dict[str, FormEngineError] = field(default_factory=dict)
    metadata: Dict[str, ComponentIdentity] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors

    def render_units(self) -> Dict[str, Any]:
        return {name: entry.render for name, entry in self.components.items()}


def build_load_scope(config: LoaderConfig) -> Mapping[str, Any]:
    """Capability scope for one load: builder scope plus call-site additions."""
    return MappingProxyType({**config.scope_builder.build_scope(), **config.additional_scope})


def _compile(source: DefinitionSource, compiler: ICompiler) -> str:
    text = preprocess(source.text)
    try:
        return compiler.compile(text, CompileOptions(filename=f"{source.name}.py")).code
    except FormEngineError:
        raise
    except Exception as e:
        # Injected compilers may raise their own exception types
        raise CompileError(f"{type(e).__name__}: {e}", definition=source.name) from e


def load_definition(
    source: DefinitionSource,
    *,
    compiler: ICompiler,
    scope: Mapping[str, Any],
    peers: Optional[Mapping[str, Any]],
    settings: EngineSettings,
    diagnostics: Optional[DiagnosticsSink],
) -> LoadResult:
    """Preprocess, compile and execute one definition. Never raises for
    problems in the definition itself."""
    try:
        code = _compile(source, compiler)
    except FormEngineError as e:
        e.definition = source.name
        return LoadResult(EntryPoints(name=source.name, render=create_error_unit(e.message)), e)

    resolver = ScopeResolver(
        scope,
        registry=peers,
        local_names=find_local_bindings(code),
        diagnostics=diagnostics,
        optional_names=settings.optional_names,
    )
    entry_points, error = run_unit_safely(code, resolver, name=source.name, settings=settings)
    return LoadResult(entry_points, error)


def _initial_data_or_empty(entry_points: EntryPoints) -> Any:
    return entry_points.initial_data if entry_points.initial_data is not None else {}


def load_one(source: DefinitionSource, config: Optional[LoaderConfig] = None) -> LoadResult:
    """
    Load a single definition against the registry's current contents.

    Peers are assumed already loaded, so there is no second pass and the
    registry is not modified.

    Args:
        source: Definition to load
        config: Loader configuration (defaults when omitted)

    Returns:
        LoadResult with entry points and, on failure, the error
    """
    config = config or LoaderConfig()
    sink = config.sink()

    result = load_definition(
        source,
        compiler=config.compiler,
        scope=build_load_scope(config),
        peers=config.resolved_registry().render_units(),
        settings=config.settings,
        diagnostics=sink,
    )

    if result.error is not None:
        sink(format_load_error(source.name, result.error.message))
    else:
        config.initial_data_callback()(_initial_data_or_empty(result.entry_points))
    return result


def _run_pass(
    sources: List[DefinitionSource],
    config: LoaderConfig,
    scope: Mapping[str, Any],
    peers: Optional[Mapping[str, Any]],
    diagnostics: DiagnosticsSink,
    components: Dict[str, EntryPoints],
    errors: Dict[str, FormEngineError],
) -> None:
    for source in sources:
        result = load_definition(
            source,
            compiler=config.compiler,
            scope=scope,
            peers=peers,
            settings=config.settings,
            diagnostics=diagnostics,
        )
        if result.error is not None:
            # Keep the first error reported for a name
            errors.setdefault(source.name, result.error)
            # Retract an earlier success; the store keeps its merged entry
            components.pop(source.name, None)
        else:
            components[source.name] = result.entry_points
            errors.pop(source.name, None)


def load_batch(sources: Iterable[DefinitionSource], config: Optional[LoaderConfig] = None) -> BatchLoadResult:
    """
    Load a batch of definitions with two-pass cross-reference resolution.

    Args:
        sources: Definitions in submission order
        config: Loader configuration (defaults when omitted)

    Returns:
        BatchLoadResult with successfully loaded components, errors and
        identity metadata, all keyed by definition name
    """
    config = config or LoaderConfig()
    sources = list(sources)
    registry = config.resolved_registry()
    sink = config.sink()
    scope = build_load_scope(config)
    cross_references = config.cross_references_enabled()

    seen = set()
    for source in sources:
        if source.name in seen:
            logger.warning(f"Duplicate definition name '{source.name}' in batch; last one wins")
        seen.add(source.name)

    result = BatchLoadResult(
        metadata={s.name: s.identity for s in sources if s.identity is not None}
    )

    # Pass 1: no peers. Misses here may be forward references, so they are
    # only reported when no second pass follows.
    pass1_sink: DiagnosticsSink = DiagnosticsCollector() if cross_references else sink
    _run_pass(sources, config, scope, None, pass1_sink, result.components, result.errors)
    registry.merge(result.components)
    logger.debug(
        f"Pass 1 loaded {len(result.components)}/{len(sources)} definitions"
    )

    if cross_references:
        # Pass 2: registry (now holding the pass-1 exports) visible as peers
        peers = MappingProxyType(registry.render_units())
        _run_pass(sources, config, scope, peers, sink, result.components, result.errors)
        registry.merge(result.components)
        logger.debug(
            f"Pass 2 loaded {len(result.components)}/{len(sources)} definitions"
        )

    for name, error in result.errors.items():
        sink(format_load_error(name, error.message))

    callback = config.initial_data_callback()
    delivered = set()
    for source in sources:
        entry_points = result.components.get(source.name)
        if entry_points is None or source.name in result.errors or source.name in delivered:
            continue
        delivered.add(source.name)
        callback(_initial_data_or_empty(entry_points))

    logger.info(
        f"Loaded {len(result.components)}/{len(seen)} definitions ({len(result.errors)} errors)"
    )
    return result
