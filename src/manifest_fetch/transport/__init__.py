"""
Transport layer - HTTP client for manifest downloads.

Provides httpx-based transport with:
- Streamed GET requests
- Proxy configuration
- Timeout management
"""

from manifest_fetch.transport.http import HttpTransport

__all__ = [
    "HttpTransport",
]
