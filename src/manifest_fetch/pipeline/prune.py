"""
Field pruner.

Removes attributes such as ``status`` or ``metadata.creationTimestamp``
from manifests before they are handed on.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from manifest_fetch.pipeline.base import Transform
from manifest_fetch.types.record import FieldPath, is_mapping

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Iterable, Sequence

    from manifest_fetch.types.record import Record


def parse_filtered_attributes(raw: Iterable[str | FieldPath] | None) -> list[FieldPath]:
    """Turn dotted attribute names into field paths.

    Args:
        raw: Attribute names, e.g. ``["status", "metadata.uid"]``;
            FieldPath values are passed through

    Returns:
        Field paths in the order given
    """
    if not raw:
        return []
    return [
        attribute if isinstance(attribute, FieldPath) else FieldPath.parse(attribute)
        for attribute in raw
    ]


def remove_attribute(record: Record, path: FieldPath) -> bool:
    """Delete the field a path points at, in place.

    The walk stops silently when an intermediate segment is missing or
    does not hold a mapping. Sequences are never descended into.

    Args:
        record: Manifest to modify
        path: Path of the field to delete

    Returns:
        True if a field was removed
    """
    current = record
    for segment in path.parents:
        child = current.get(segment)
        if not is_mapping(child):
            return False
        current = child

    if path.leaf not in current:
        return False
    del current[path.leaf]
    return True


class FieldPruner(Transform):
    """Transform that removes a set of attributes from every manifest.

    Paths are applied in order; each sees the result of the previous one.

    Example:
        >>> pruner = FieldPruner.from_attributes(["status", "metadata.managedFields"])
        >>> async for record in pruner.transform(records):
        ...     assert "status" not in record
    """

    def __init__(self, paths: Sequence[FieldPath]) -> None:
        """Initialize the pruner.

        Args:
            paths: Field paths to remove
        """
        self._paths = tuple(paths)

    @classmethod
    def from_attributes(cls, attributes: Iterable[str | FieldPath]) -> FieldPruner:
        """Create a pruner from dotted attribute names."""
        return cls(parse_filtered_attributes(attributes))

    @property
    def paths(self) -> tuple[FieldPath, ...]:
        """Paths in application order."""
        return self._paths

    def prune(self, record: Record) -> Record:
        """Remove every configured path from a manifest.

        Args:
            record: Manifest to modify in place

        Returns:
            The same manifest, for chaining
        """
        for path in self._paths:
            remove_attribute(record, path)
        return record

    async def transform(self, records: AsyncIterator[Record]) -> AsyncIterator[Record]:
        async for record in records:
            yield self.prune(record)


def create_pruner(
    filtered_attributes: Iterable[str | FieldPath] | None,
) -> Transform | None:
    """Create a pruner from dotted attribute names.

    Args:
        filtered_attributes: Attribute names, or None for no pruning

    Returns:
        Pruner instance, or None if nothing needs removing
    """
    paths = parse_filtered_attributes(filtered_attributes)
    if not paths:
        return None

    return FieldPruner(paths)
