"""
Resource type selector.

Keeps only manifests whose ``"{apiVersion}/{kind}"`` identity appears in
an allow list.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from manifest_fetch.pipeline.base import Transform
from manifest_fetch.telemetry.logger import get_logger
from manifest_fetch.types.record import type_identity

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Collection, Iterable

    from manifest_fetch.types.record import Record

logger = get_logger(__name__)


def should_keep(record: Record, only_resources: Collection[str] | None) -> bool:
    """Decide whether a manifest passes the type filter.

    Matching is exact and case-sensitive; there are no wildcards.

    Args:
        record: Decoded manifest (never modified)
        only_resources: Allowed identities, or None/empty to keep everything

    Returns:
        True if the manifest should be kept
    """
    if not only_resources:
        return True
    return type_identity(record) in only_resources


class ResourceTypeSelector(Transform):
    """Selector that keeps manifests of the allowed types.

    Example:
        >>> selector = ResourceTypeSelector(["apps/v1/Deployment", "v1/Service"])
        >>> async for record in selector.transform(records):
        ...     process(record)  # Only Deployments and Services
    """

    def __init__(self, only_resources: Iterable[str]) -> None:
        """Initialize the selector.

        Args:
            only_resources: Allowed ``"apiVersion/kind"`` identities
        """
        self._allowed = frozenset(only_resources)

    @property
    def allowed(self) -> frozenset[str]:
        """Allowed identities."""
        return self._allowed

    def matches(self, record: Record) -> bool:
        """Check if a manifest is of an allowed type."""
        return should_keep(record, self._allowed)

    async def transform(self, records: AsyncIterator[Record]) -> AsyncIterator[Record]:
        """Filter manifests by type.

        Args:
            records: Async iterator of records

        Yields:
            Records whose identity is allowed
        """
        async for record in records:
            if self.matches(record):
                yield record
            else:
                logger.debug("Dropping manifest", identity=type_identity(record))


def create_selector(only_resources: Iterable[str] | None) -> Transform | None:
    """Create a selector from an allow list.

    Args:
        only_resources: Allowed identities, or None for no filtering

    Returns:
        Selector instance, or None if no filtering needed
    """
    if not only_resources:
        return None

    return ResourceTypeSelector(only_resources)
