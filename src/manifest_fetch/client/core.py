"""核心客户端实现：获取远程清单并执行解码、过滤、裁剪和重新编码。

Core ManifestClient implementation.
"""

from __future__ import annotations

import asyncio
from contextlib import suppress
from typing import TYPE_CHECKING, Any

from manifest_fetch.client.cancel import CancelReason
from manifest_fetch.client.response import FetchResult, FetchState, FetchStats
from manifest_fetch.errors import (
    CancellationError,
    DecodeError,
    ManifestFetchError,
    ParseError,
)
from manifest_fetch.pipeline import EncodeErrorPolicy, Pipeline, resolve_text
from manifest_fetch.telemetry.logger import (
    LogContext,
    clear_log_context,
    get_logger,
    set_log_context,
)
from manifest_fetch.transport import HttpTransport

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Sequence

    import httpx

    from manifest_fetch.client.cancel import CancelToken
    from manifest_fetch.types.record import FieldPath, Record

logger = get_logger(__name__)


async def _iterate(records: list[Record]) -> AsyncIterator[Record]:
    for record in records:
        yield record


class ManifestClient:
    """Client that fetches and rewrites remote manifest streams.

    A fetch runs strictly in sequence: one GET, one decode pass, then the
    type filter and field pruning per manifest, then re-encoding. Nothing
    is shared between fetches, so one client may serve many concurrent
    calls.

    Example:
        >>> client = ManifestClient()
        >>> result = await client.fetch(
        ...     "https://example.com/release.yaml",
        ...     filtered_attributes=["status", "metadata.creationTimestamp"],
        ...     only_resources=["apps/v1/Deployment"],
        ... )
        >>> for manifest in result.manifests:
        ...     print(manifest)
    """

    def __init__(
        self,
        transport: HttpTransport | None = None,
        *,
        timeout: float | None = None,
        proxy: str | None = None,
        follow_redirects: bool = True,
        user_agent: str | None = None,
        encode_error_policy: EncodeErrorPolicy = EncodeErrorPolicy.EMPTY,
    ) -> None:
        """Initialize the client.

        Args:
            transport: Preconfigured transport (other transport options are ignored)
            timeout: Request timeout in seconds; None leaves the request unbounded
            proxy: Proxy URL
            follow_redirects: Follow 3xx responses
            user_agent: Override the User-Agent header
            encode_error_policy: How to treat manifests that fail to serialize
        """
        self._transport = transport or HttpTransport(
            timeout=timeout,
            proxy=proxy,
            follow_redirects=follow_redirects,
            user_agent=user_agent,
        )
        self._encode_error_policy = encode_error_policy

    @property
    def transport(self) -> HttpTransport:
        """The HTTP transport."""
        return self._transport

    async def fetch(
        self,
        url: str,
        filtered_attributes: Sequence[str | FieldPath] | None = None,
        only_resources: Sequence[str] | None = None,
        *,
        cancel_token: CancelToken | None = None,
    ) -> FetchResult:
        """Fetch a manifest stream and return the rewritten manifests.

        Args:
            url: http(s) URL of the manifest stream
            filtered_attributes: Dotted paths removed from every manifest
            only_resources: ``"apiVersion/kind"`` identities to keep;
                None or empty keeps every manifest
            cancel_token: Token that aborts the fetch when cancelled

        Returns:
            FetchResult with one YAML document per surviving manifest

        Raises:
            RequestError: If the request cannot be built
            TransportError: On network failure
            HTTPStatusError: If the status is not exactly 200
            ParseError: If the body is not a valid manifest stream
            CancellationError: If the token is cancelled first
            EncodeError: If a manifest fails to serialize under the RAISE policy
        """
        pipeline = Pipeline.from_options(filtered_attributes, only_resources)
        stats = FetchStats()
        set_log_context(LogContext(request_id=stats.request_id, url=url))
        try:
            if cancel_token is None:
                return await self._run(url, pipeline, stats)
            return await self._run_cancellable(url, pipeline, stats, cancel_token)
        finally:
            clear_log_context()

    async def _run_cancellable(
        self,
        url: str,
        pipeline: Pipeline,
        stats: FetchStats,
        cancel_token: CancelToken,
    ) -> FetchResult:
        if cancel_token.is_cancelled:
            raise self._cancelled(url, stats, cancel_token.reason)

        run = asyncio.ensure_future(self._run(url, pipeline, stats, cancel_token))
        waiter = asyncio.ensure_future(cancel_token.wait())
        try:
            await asyncio.wait({run, waiter}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            waiter.cancel()
            if not run.done():
                run.cancel()
                with suppress(asyncio.CancelledError):
                    await run

        if not run.cancelled():
            return run.result()
        raise self._cancelled(url, stats, cancel_token.reason)

    def _cancelled(
        self, url: str, stats: FetchStats, reason: CancelReason | None
    ) -> CancellationError:
        stats.fail()
        stats.record_end()
        error = CancellationError((reason or CancelReason.USER_REQUEST).value, url=url)
        if stats.failed_in is not None:
            error.with_state(stats.failed_in.value)
        logger.warning(
            "Fetch cancelled",
            reason=error.reason,
            state=error.context.details.get("state"),
        )
        return error

    async def _run(
        self,
        url: str,
        pipeline: Pipeline,
        stats: FetchStats,
        cancel_token: CancelToken | None = None,
    ) -> FetchResult:
        stats.record_start()
        try:
            self._advance(stats, FetchState.REQUESTING, url, cancel_token)
            async with self._transport.open(url) as response:
                self._advance(stats, FetchState.AWAITING_RESPONSE, url, cancel_token)
                stats.status_code = response.status_code
                self._transport.check_status(response)

                self._advance(stats, FetchState.DECODING, url, cancel_token)
                try:
                    records = [
                        record
                        async for record in pipeline.decode(self._body(response, stats))
                    ]
                except DecodeError as e:
                    raise ParseError(e, url=url) from e
            stats.documents_decoded = len(records)

            self._advance(stats, FetchState.TRANSFORMING, url, cancel_token)
            kept = [record async for record in pipeline.apply_transforms(_iterate(records))]
            stats.documents_kept = len(kept)

            self._advance(stats, FetchState.ENCODING, url, cancel_token)
            manifests = tuple(
                resolve_text(pipeline.encode(record), self._encode_error_policy, index=index)
                for index, record in enumerate(kept)
            )
            self._advance(stats, FetchState.DONE, url, cancel_token)
        except ManifestFetchError as e:
            stats.fail()
            stats.record_end()
            if stats.failed_in is not None:
                e.with_state(stats.failed_in.value)
            logger.warning(
                "Fetch failed",
                error=type(e).__name__,
                detail=e.message,
                state=e.context.details.get("state"),
            )
            raise

        stats.record_end()
        logger.info(
            "Fetched manifests",
            decoded=stats.documents_decoded,
            kept=stats.documents_kept,
            bytes=stats.bytes_read,
            latency_ms=round(stats.latency_ms, 2),
        )
        return FetchResult(id=url, manifests=manifests, stats=stats)

    async def _body(self, response: httpx.Response, stats: FetchStats) -> AsyncIterator[bytes]:
        async for chunk in self._transport.iter_body(response):
            stats.bytes_read += len(chunk)
            yield chunk

    @staticmethod
    def _advance(
        stats: FetchStats,
        state: FetchState,
        url: str,
        cancel_token: CancelToken | None,
    ) -> None:
        # Synchronous stages cannot be interrupted, so the token is polled here.
        if cancel_token is not None:
            cancel_token.raise_if_cancelled(url)
        logger.debug("Fetch state", previous=stats.state.value, state=state.value)
        stats.state = state


async def fetch(
    url: str,
    filtered_attributes: Sequence[str | FieldPath] | None = None,
    only_resources: Sequence[str] | None = None,
    *,
    cancel_token: CancelToken | None = None,
    **client_options: Any,
) -> FetchResult:
    """Fetch a manifest stream with a one-off client.

    Args:
        url: http(s) URL of the manifest stream
        filtered_attributes: Dotted paths removed from every manifest
        only_resources: ``"apiVersion/kind"`` identities to keep
        cancel_token: Token that aborts the fetch when cancelled
        **client_options: Passed to ManifestClient

    Returns:
        FetchResult with one YAML document per surviving manifest
    """
    client = ManifestClient(**client_options)
    return await client.fetch(
        url,
        filtered_attributes,
        only_resources,
        cancel_token=cancel_token,
    )
