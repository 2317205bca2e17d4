"""Pydantic schemas for form-engine data."""

from form_engine.schemas.definition import (
    ComponentIdentity,
    DefinitionSource,
    SemVer,
)

__all__ = [
    "ComponentIdentity",
    "DefinitionSource",
    "SemVer",
]
