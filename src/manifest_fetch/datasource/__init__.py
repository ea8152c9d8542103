"""
Data source adapter - the host-facing ``manifest_fetch`` data source.
"""

from manifest_fetch.datasource.fetch import (
    TYPE_NAME,
    AttributeSchema,
    Diagnostic,
    DiagnosticSeverity,
    FetchDataSource,
    ReadResponse,
)
from manifest_fetch.datasource.models import FetchDataSourceConfig, FetchDataSourceState

__all__ = [
    "TYPE_NAME",
    "AttributeSchema",
    "Diagnostic",
    "DiagnosticSeverity",
    "FetchDataSource",
    "FetchDataSourceConfig",
    "FetchDataSourceState",
    "ReadResponse",
]
