"""
Fetch cancellation control.

Provides cancellation tokens (with optional deadlines) that callers pass to
a fetch to abort it at any suspension point or stage boundary.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from enum import Enum

from manifest_fetch.errors import CancellationError


class CancelReason(str, Enum):
    """Reasons for cancellation."""

    USER_REQUEST = "user_request"
    TIMEOUT = "timeout"
    SHUTDOWN = "shutdown"


@dataclass
class CancelState:
    """State of a cancellation token.

    Attributes:
        cancelled: Whether cancellation was requested
        reason: Reason for cancellation
        timestamp: Time of cancellation
    """

    cancelled: bool = False
    reason: CancelReason | None = None
    timestamp: float | None = None


class CancelToken:
    """Cancellation token for a fetch.

    A token with a timeout acts as a deadline measured from construction.
    Once it has passed the token reports itself cancelled with
    ``CancelReason.TIMEOUT``, even if the event loop was busy and the
    deadline task never got to run.

    Example:
        >>> token = CancelToken(timeout=30.0)
        >>> result = await client.fetch(url, cancel_token=token)
        >>>
        >>> # Cancel from another task
        >>> token.cancel(CancelReason.SHUTDOWN)
    """

    def __init__(self, timeout: float | None = None) -> None:
        """Initialize cancellation token.

        Args:
            timeout: Optional deadline in seconds
        """
        self._state = CancelState()
        self._event = asyncio.Event()
        self._deadline = None if timeout is None else time.monotonic() + timeout
        self._timeout_task: asyncio.Task[None] | None = None

        self._start_timeout()

    def _start_timeout(self) -> None:
        """Start the deadline task if a loop is available."""
        if self._deadline is None or self._timeout_task is not None:
            return

        async def timeout_handler() -> None:
            await asyncio.sleep(max(self.remaining or 0.0, 0.0))
            self._check_deadline()

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No running loop - the timer starts on first wait()
            return
        self._timeout_task = loop.create_task(timeout_handler())

    def _check_deadline(self) -> None:
        if (
            self._deadline is not None
            and not self._state.cancelled
            and time.monotonic() >= self._deadline
        ):
            self.cancel(CancelReason.TIMEOUT)

    @property
    def remaining(self) -> float | None:
        """Seconds left before the deadline, or None without one."""
        if self._deadline is None:
            return None
        return self._deadline - time.monotonic()

    def cancel(self, reason: CancelReason = CancelReason.USER_REQUEST) -> bool:
        """Request cancellation.

        Args:
            reason: Reason for cancellation

        Returns:
            True if cancellation was newly requested, False if already cancelled
        """
        if self._state.cancelled:
            return False

        self._state.cancelled = True
        self._state.reason = reason
        self._state.timestamp = time.time()

        self._event.set()

        if self._timeout_task and not self._timeout_task.done():
            self._timeout_task.cancel()

        return True

    @property
    def is_cancelled(self) -> bool:
        """Check if cancellation was requested or the deadline has passed."""
        self._check_deadline()
        return self._state.cancelled

    @property
    def reason(self) -> CancelReason | None:
        """Get cancellation reason."""
        self._check_deadline()
        return self._state.reason

    @property
    def state(self) -> CancelState:
        """Get full cancellation state."""
        return self._state

    async def wait(self) -> CancelReason:
        """Wait until cancellation is requested.

        Returns:
            Cancellation reason
        """
        self._check_deadline()
        self._start_timeout()
        await self._event.wait()
        return self._state.reason or CancelReason.USER_REQUEST

    def raise_if_cancelled(self, url: str | None = None) -> None:
        """Raise CancellationError if cancelled.

        Raises:
            CancellationError: If cancellation was requested
        """
        if self.is_cancelled:
            reason = self._state.reason or CancelReason.USER_REQUEST
            raise CancellationError(reason.value, url=url)
