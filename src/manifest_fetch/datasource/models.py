"""
Configuration and state models for the ``manifest_fetch`` data source.

These Pydantic models describe what a host passes in and what it stores
after a successful read.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class FetchDataSourceConfig(BaseModel):
    """User-supplied data source configuration."""

    model_config = ConfigDict(extra="forbid")

    url: str = Field(
        min_length=1,
        description="The URL for the manifest. Supported schemes are `http` and `https`.",
    )
    filtered_attributes: list[str] | None = Field(
        default=None, description="The attributes to remove from the manifest."
    )
    only_resources: list[str] | None = Field(
        default=None,
        description="Only keep resources whose `apiVersion/kind` is in this list.",
    )


class FetchDataSourceState(FetchDataSourceConfig):
    """Configuration plus the computed attributes of a read."""

    id: str = Field(description="The URL used for the request.")
    manifests: list[str] = Field(
        default_factory=list,
        description=(
            "The resulting manifests to be applied. Each entry is a single YAML "
            "document and must be decoded before use."
        ),
    )
