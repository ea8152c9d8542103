"""
Record and field-path types.

A record is one decoded YAML document: a mapping whose values are scalars,
nested mappings or sequences. Records are plain ``dict``/``list`` trees so
they can be handed straight to the YAML codec.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

Scalar = Union[str, int, float, bool, bytes, None]
"""Leaf value of a record."""

Value = Union[Scalar, "Record", list["Value"]]
"""Any value that can appear inside a record."""

Record = dict[Any, Value]
"""A decoded manifest document."""

NIL = "<nil>"
"""Placeholder rendered for a missing identity slot."""


def is_mapping(value: Any) -> bool:
    """Check whether a value is a nested record."""
    return isinstance(value, dict)


def _render_identity_part(value: Any) -> str:
    if value is None:
        return NIL
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def type_identity(record: Record) -> str:
    """Compute the ``"{apiVersion}/{kind}"`` identity of a record.

    Missing fields render as ``<nil>``, e.g. ``"v1/<nil>"``.

    Args:
        record: Decoded manifest

    Returns:
        Identity string used for type filtering
    """
    api_version = _render_identity_part(record.get("apiVersion"))
    kind = _render_identity_part(record.get("kind"))
    return f"{api_version}/{kind}"


@dataclass(frozen=True)
class FieldPath:
    """Dotted path to a nested field, e.g. ``metadata.creationTimestamp``.

    Attributes:
        segments: Path segments from the record root; never empty
    """

    segments: tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.segments:
            raise ValueError("FieldPath requires at least one segment")

    @classmethod
    def parse(cls, dotted: str) -> FieldPath:
        """Split a dotted attribute name into a path.

        Args:
            dotted: Attribute name such as ``"status"`` or ``"metadata.uid"``

        Returns:
            FieldPath with one segment per dot-separated part
        """
        return cls(tuple(dotted.split(".")))

    @property
    def parents(self) -> tuple[str, ...]:
        """Segments leading to the mapping that holds the field."""
        return self.segments[:-1]

    @property
    def leaf(self) -> str:
        """Name of the field to delete."""
        return self.segments[-1]

    def __str__(self) -> str:
        return ".".join(self.segments)
