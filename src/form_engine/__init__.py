"""form_engine: load and run form definitions written as Python source."""

from form_engine.config.settings import EngineSettings, get_engine_settings, load_engine_settings
from form_engine.diagnostics import DiagnosticsCollector, LoggingDiagnostics
from form_engine.errors import (
    CompileError,
    EvaluationError,
    FormEngineError,
    LoadErrorCode,
    MissingEntryPointError,
)
from form_engine.loader import (
    BatchLoadResult,
    ComponentRegistry,
    LoaderConfig,
    LoadResult,
    discover_sources,
    get_registry_snapshot,
    load_batch,
    load_one,
    reset_registry,
)
from form_engine.runtime.elements import Element, Fragment, create_element, render_to_tree
from form_engine.schemas.definition import ComponentIdentity, DefinitionSource
from form_engine.scope.builder import BaseScopeBuilder, ScopeConfig
from form_engine.scope.form_scope import FormScopeBuilder

__version__ = "0.1.0"

__all__ = [
    "BaseScopeBuilder",
    "BatchLoadResult",
    "CompileError",
    "ComponentIdentity",
    "ComponentRegistry",
    "DefinitionSource",
    "DiagnosticsCollector",
    "Element",
    "EngineSettings",
    "EvaluationError",
    "FormEngineError",
    "FormScopeBuilder",
    "Fragment",
    "LoadErrorCode",
    "LoadResult",
    "LoaderConfig",
    "LoggingDiagnostics",
    "MissingEntryPointError",
    "ScopeConfig",
    "create_element",
    "discover_sources",
    "get_engine_settings",
    "get_registry_snapshot",
    "load_batch",
    "load_engine_settings",
    "load_one",
    "reset_registry",
    "render_to_tree",
]
