#!/usr/bin/env python3
"""
Fetch manifests example.

This example downloads a multi-document manifest stream, keeps only
Deployments and Services, strips runtime fields and prints the result.

Usage:
    python examples/fetch_manifests.py https://example.com/release.yaml
"""

import asyncio
import sys

from manifest_fetch import (
    CancelToken,
    ManifestClient,
    ManifestFetchError,
)
from manifest_fetch.telemetry import LogLevel, ManifestFetchLogger


async def main(url: str) -> int:
    """Run fetch example."""
    ManifestFetchLogger.configure(level=LogLevel.INFO, format="text")

    client = ManifestClient()

    # Give up if the whole fetch takes longer than 30 seconds
    token = CancelToken(timeout=30.0)

    try:
        result = await client.fetch(
            url,
            filtered_attributes=["status", "metadata.creationTimestamp"],
            only_resources=["apps/v1/Deployment", "v1/Service"],
            cancel_token=token,
        )
    except ManifestFetchError as e:
        print(f"{e.summary}: {e.message}", file=sys.stderr)
        return 1

    for manifest in result:
        print("---")
        print(manifest, end="")

    print(
        f"# {len(result)} of {result.stats.documents_decoded} manifests kept "
        f"({result.stats.bytes_read} bytes, {result.stats.latency_ms:.0f}ms)",
        file=sys.stderr,
    )
    return 0


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print(__doc__, file=sys.stderr)
        sys.exit(2)
    sys.exit(asyncio.run(main(sys.argv[1])))
