"""
Result types for fetch operations.
"""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from enum import Enum


class FetchState(str, Enum):
    """Stages of a single fetch."""

    IDLE = "idle"
    REQUESTING = "requesting"
    AWAITING_RESPONSE = "awaiting_response"
    DECODING = "decoding"
    TRANSFORMING = "transforming"
    ENCODING = "encoding"
    DONE = "done"
    FAILED = "failed"


@dataclass
class FetchStats:
    """Statistics for a single fetch.

    Attributes:
        request_id: Client-generated ID for log correlation
        state: Current stage of the fetch
        failed_in: Stage that was active when the fetch failed
        status_code: HTTP status received
        bytes_read: Size of the response body
        documents_decoded: Manifests decoded from the body
        documents_kept: Manifests that passed the type filter
        latency_ms: Total latency in milliseconds
    """

    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    state: FetchState = FetchState.IDLE
    failed_in: FetchState | None = None
    status_code: int | None = None
    bytes_read: int = 0
    documents_decoded: int = 0
    documents_kept: int = 0
    latency_ms: float = 0.0

    _start_time: float = field(default_factory=time.time, repr=False)

    def record_start(self) -> None:
        """Record the start time."""
        self._start_time = time.time()

    def record_end(self) -> None:
        """Record the end time and calculate latency."""
        self.latency_ms = (time.time() - self._start_time) * 1000

    def fail(self) -> None:
        """Move to FAILED, remembering the stage that failed."""
        if self.state != FetchState.FAILED:
            self.failed_in = self.state
            self.state = FetchState.FAILED


@dataclass(frozen=True)
class FetchResult:
    """Manifests produced by a successful fetch.

    Attributes:
        id: The URL that was fetched
        manifests: One YAML document per surviving manifest, in source order
        stats: Statistics for the fetch
    """

    id: str
    manifests: tuple[str, ...] = ()
    stats: FetchStats = field(default_factory=FetchStats, compare=False)

    def __len__(self) -> int:
        return len(self.manifests)

    def __iter__(self):
        return iter(self.manifests)
