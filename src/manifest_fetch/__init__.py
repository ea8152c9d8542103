"""远程清单获取：下载多文档 YAML，按类型过滤、裁剪字段并重新编码。

manifest-fetch: Fetch and rewrite remote Kubernetes-style manifest streams.

Downloads a ``---`` separated YAML stream, keeps the manifests of the
requested ``apiVersion/kind`` types, strips unwanted attributes and
re-encodes each manifest as its own YAML document.
"""
from __future__ import annotations

from manifest_fetch.client import (
    CancelReason,
    CancelToken,
    FetchResult,
    FetchState,
    FetchStats,
    ManifestClient,
    fetch,
)
from manifest_fetch.errors import (
    CancellationError,
    DecodeError,
    EncodeError,
    HTTPStatusError,
    ManifestFetchError,
    ParseError,
    RequestError,
    TransportError,
)
from manifest_fetch.pipeline import EncodeErrorPolicy
from manifest_fetch.types import FieldPath, Record, type_identity

__version__ = "0.1.0"

__all__ = [
    # Client
    "CancelReason",
    "CancelToken",
    "FetchResult",
    "FetchState",
    "FetchStats",
    "ManifestClient",
    "fetch",
    # Errors
    "CancellationError",
    "DecodeError",
    "EncodeError",
    "HTTPStatusError",
    "ManifestFetchError",
    "ParseError",
    "RequestError",
    "TransportError",
    # Pipeline
    "EncodeErrorPolicy",
    # Types
    "FieldPath",
    "Record",
    "type_identity",
    # Version
    "__version__",
]
