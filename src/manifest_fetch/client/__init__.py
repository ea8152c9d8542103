"""
Client layer - Fetch orchestration.

Provides:
- ManifestClient: Fetch, filter, prune and re-encode remote manifests
- fetch: One-off convenience wrapper
- CancelToken: Cancellation and deadlines for a fetch
- FetchResult / FetchStats: Outcome of a fetch
"""

from manifest_fetch.client.cancel import CancelReason, CancelState, CancelToken
from manifest_fetch.client.core import ManifestClient, fetch
from manifest_fetch.client.response import FetchResult, FetchState, FetchStats

__all__ = [
    "CancelReason",
    "CancelState",
    "CancelToken",
    "FetchResult",
    "FetchState",
    "FetchStats",
    "ManifestClient",
    "fetch",
]
