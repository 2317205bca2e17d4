"""Pydantic schemas for definition sources and their identity metadata.

Identity metadata is authored next to each definition (``identity.json`` or
``identity.yaml``) using camelCase keys; both camelCase and snake_case are
accepted on input.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SemVer(BaseModel):
    """Semantic version triple."""

    model_config = ConfigDict(extra="forbid")

    major: int = Field(default=0, ge=0)
    minor: int = Field(default=0, ge=0)
    patch: int = Field(default=0, ge=0)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


class ComponentIdentity(BaseModel):
    """Identity metadata for a definition."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    name: str = Field(..., description="Definition name", min_length=1)
    title: str = Field(default="", description="Human-readable title")
    description: Optional[str] = Field(None, description="What the component is for")
    version: Optional[SemVer] = Field(None, description="Definition version")
    type: Optional[str] = Field(None, description="Definition kind, e.g. 'component' or 'form'")
    owner: Optional[str] = None
    author: Optional[str] = None
    publisher: Optional[str] = None
    components: List[str] = Field(
        default_factory=list,
        description="Peer definitions this one references",
    )
    required_form_viewer_version: Optional[SemVer] = Field(
        None, alias="requiredFormViewerVersion"
    )
    required_host_version: Optional[SemVer] = Field(
        None, alias="requiredHostVersion"
    )


class DefinitionSource(BaseModel):
    """A named unit of definition text. Immutable once created."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., description="Definition name (folder name)", min_length=1)
    text: str = Field(..., description="Raw definition text")
    identity: Optional[ComponentIdentity] = Field(
        None, description="Optional identity metadata"
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Names are bound as free identifiers inside peer definitions."""
        if not v.isidentifier():
            raise ValueError(f"Definition name '{v}' must be a valid identifier")
        return v
