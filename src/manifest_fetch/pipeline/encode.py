"""
Canonical YAML encoder.

Serializes each manifest to its own YAML text with deterministic key order,
block style and no line wrapping.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

import yaml

from manifest_fetch.errors import EncodeError
from manifest_fetch.pipeline.base import Encoder
from manifest_fetch.telemetry.logger import get_logger

if TYPE_CHECKING:
    from manifest_fetch.types.record import Record

logger = get_logger(__name__)

_LINE_WIDTH = float("inf")


class EncodeErrorPolicy(str, Enum):
    """What to do when a manifest cannot be serialized."""

    EMPTY = "empty"
    RAISE = "raise"


@dataclass(frozen=True)
class EncodeResult:
    """Outcome of serializing one manifest.

    Attributes:
        text: YAML text, empty when encoding failed
        error: Serializer failure, if any
    """

    text: str = ""
    error: EncodeError | None = None


def _key_order(item: tuple[Any, Any]) -> tuple[Any, ...]:
    key = item[0]
    if isinstance(key, bool):
        return (1, key)
    if isinstance(key, (int, float)):
        return (0, key)
    if isinstance(key, str):
        return (2, key)
    return (3, type(key).__name__, repr(key))


class CanonicalDumper(yaml.SafeDumper):
    """SafeDumper with stable key order and no anchors."""

    def ignore_aliases(self, data: Any) -> bool:
        return True

    def represent_sorted_dict(self, data: dict[Any, Any]) -> yaml.MappingNode:
        return self.represent_mapping(
            "tag:yaml.org,2002:map", sorted(data.items(), key=_key_order)
        )


CanonicalDumper.add_representer(dict, CanonicalDumper.represent_sorted_dict)


class YamlEncoder(Encoder):
    """Encoder producing one canonical YAML document per manifest.

    Example:
        >>> YamlEncoder().encode({"kind": "Test", "apiVersion": "v1"}).text
        'apiVersion: v1\\nkind: Test\\n'
    """

    def encode(self, record: Record) -> EncodeResult:
        """Serialize a manifest.

        Args:
            record: Manifest to serialize

        Returns:
            EncodeResult with the text, or the error if the serializer failed
        """
        try:
            text = yaml.dump(
                record,
                Dumper=CanonicalDumper,
                default_flow_style=False,
                allow_unicode=True,
                sort_keys=False,
                width=_LINE_WIDTH,
            )
        except yaml.YAMLError as e:
            return EncodeResult(error=EncodeError(str(e), cause=e))
        return EncodeResult(text=text)


def resolve_text(
    result: EncodeResult,
    policy: EncodeErrorPolicy = EncodeErrorPolicy.EMPTY,
    *,
    index: int | None = None,
) -> str:
    """Apply an error policy to an encode result.

    Args:
        result: Result from an encoder
        policy: EMPTY substitutes ``""`` for failures, RAISE re-raises
        index: Position of the manifest, for diagnostics

    Returns:
        The manifest text

    Raises:
        EncodeError: If encoding failed and the policy is RAISE
    """
    if result.error is None:
        return result.text

    if index is not None:
        result.error.context.details["index"] = index
    if policy == EncodeErrorPolicy.RAISE:
        raise result.error

    logger.warning(
        "Substituting empty manifest after encode failure",
        index=index,
        error=result.error.message,
    )
    return ""
