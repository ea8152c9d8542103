"""错误体系：提供清单获取流程的分类错误类型。

Error hierarchy for manifest-fetch.

Every failure of a fetch surfaces as exactly one of these classified errors.
"""

from manifest_fetch.errors.base import (
    CancellationError,
    DecodeError,
    EncodeError,
    ErrorContext,
    HTTPStatusError,
    ManifestFetchError,
    ParseError,
    RequestError,
    TransportError,
)

__all__ = [
    "CancellationError",
    "DecodeError",
    "EncodeError",
    "ErrorContext",
    "HTTPStatusError",
    "ManifestFetchError",
    "ParseError",
    "RequestError",
    "TransportError",
]
