"""
Host adapter for the ``manifest_fetch`` data source.

Translates a host's read request into a fetch and turns classified
errors into diagnostics.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from manifest_fetch.client import ManifestClient
from manifest_fetch.datasource.models import FetchDataSourceConfig, FetchDataSourceState
from manifest_fetch.errors import ManifestFetchError

if TYPE_CHECKING:
    from manifest_fetch.client import CancelToken

TYPE_NAME = "manifest_fetch"


class DiagnosticSeverity(str, Enum):
    """Diagnostic severity."""

    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class Diagnostic:
    """A message reported back to the host."""

    severity: DiagnosticSeverity
    summary: str
    detail: str

    @classmethod
    def from_error(cls, error: ManifestFetchError) -> Diagnostic:
        """Build an error diagnostic from a classified error."""
        return cls(DiagnosticSeverity.ERROR, error.summary, error.message)


@dataclass
class ReadResponse:
    """Result of a data source read: new state or diagnostics."""

    state: FetchDataSourceState | None = None
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def has_error(self) -> bool:
        """Check if any diagnostic is an error."""
        return any(d.severity == DiagnosticSeverity.ERROR for d in self.diagnostics)


@dataclass(frozen=True)
class AttributeSchema:
    """Schema of one data source attribute."""

    type: str
    description: str
    required: bool = False
    optional: bool = False
    computed: bool = False


def _describe(name: str, model: type[FetchDataSourceConfig]) -> str:
    return model.model_fields[name].description or ""


class FetchDataSource:
    """The ``manifest_fetch`` data source.

    Example:
        >>> source = FetchDataSource()
        >>> response = await source.read({"url": "https://example.com/app.yaml"})
        >>> if not response.has_error:
        ...     print(response.state.manifests)
    """

    type_name = TYPE_NAME

    def __init__(self, client: ManifestClient | None = None) -> None:
        self._client = client or ManifestClient()

    @staticmethod
    def schema() -> dict[str, AttributeSchema]:
        """Describe the attributes the host should expose."""
        state = FetchDataSourceState
        return {
            "id": AttributeSchema(
                type="string", description=_describe("id", state), computed=True
            ),
            "url": AttributeSchema(
                type="string", description=_describe("url", state), required=True
            ),
            "filtered_attributes": AttributeSchema(
                type="list(string)",
                description=_describe("filtered_attributes", state),
                optional=True,
            ),
            "only_resources": AttributeSchema(
                type="list(string)",
                description=_describe("only_resources", state),
                optional=True,
            ),
            "manifests": AttributeSchema(
                type="list(string)",
                description=_describe("manifests", state),
                computed=True,
            ),
        }

    async def read(
        self,
        config: FetchDataSourceConfig | dict[str, Any],
        *,
        cancel_token: CancelToken | None = None,
    ) -> ReadResponse:
        """Run a fetch for the given configuration.

        Args:
            config: Validated configuration or raw attribute values
            cancel_token: Host token that aborts the fetch when cancelled

        Returns:
            ReadResponse with the new state, or a single error diagnostic
        """
        if not isinstance(config, FetchDataSourceConfig):
            try:
                config = FetchDataSourceConfig.model_validate(config)
            except ValidationError as e:
                return ReadResponse(
                    diagnostics=[
                        Diagnostic(DiagnosticSeverity.ERROR, "Invalid configuration", str(e))
                    ]
                )

        try:
            result = await self._client.fetch(
                config.url,
                config.filtered_attributes,
                config.only_resources,
                cancel_token=cancel_token,
            )
        except ManifestFetchError as e:
            return ReadResponse(diagnostics=[Diagnostic.from_error(e)])

        state = FetchDataSourceState(
            **config.model_dump(),
            id=result.id,
            manifests=list(result.manifests),
        )
        return ReadResponse(state=state)
