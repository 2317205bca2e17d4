"""Capability scope construction and name resolution."""

from form_engine.scope.builder import BaseScopeBuilder, ScopeConfig
from form_engine.scope.form_scope import FormScopeBuilder
from form_engine.scope.placeholder import ErrorUnit, Placeholder, TextUnit, is_placeholder
from form_engine.scope.resolution import InterceptingBuiltins, ScopeResolver

__all__ = [
    "BaseScopeBuilder",
    "ErrorUnit",
    "FormScopeBuilder",
    "InterceptingBuiltins",
    "Placeholder",
    "ScopeConfig",
    "ScopeResolver",
    "TextUnit",
    "is_placeholder",
]
