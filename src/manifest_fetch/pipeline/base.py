"""
Base abstractions for the pipeline layer.

Defines the core interfaces that all pipeline operators implement.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Sequence

    from manifest_fetch.pipeline.encode import EncodeResult
    from manifest_fetch.types.record import FieldPath, Record


class Decoder(ABC):
    """Abstract decoder that converts a byte stream to records.

    Decoders handle the format-level parsing of response bodies,
    turning raw bytes into independent manifest documents.
    """

    @abstractmethod
    async def decode(self, byte_stream: AsyncIterator[bytes]) -> AsyncIterator[Record]:
        """Decode a byte stream into records.

        Args:
            byte_stream: Async iterator of raw bytes

        Yields:
            Decoded records in stream order
        """
        ...


class Transform(ABC):
    """Abstract transform that processes records.

    Transforms operate on the stream of records, dropping or
    rewriting them in encounter order.
    """

    @abstractmethod
    async def transform(self, records: AsyncIterator[Record]) -> AsyncIterator[Record]:
        """Transform a stream of records.

        Args:
            records: Async iterator of records

        Yields:
            Transformed records
        """
        ...


class Encoder(ABC):
    """Abstract encoder that serializes one record to text."""

    @abstractmethod
    def encode(self, record: Record) -> EncodeResult:
        """Serialize a record.

        Args:
            record: Record to serialize

        Returns:
            Result holding the text or the serializer error
        """
        ...


class Pipeline:
    """Complete pipeline for turning a response body into manifests.

    A pipeline consists of:
    1. A decoder (bytes -> records)
    2. Zero or more transforms (records -> records)
    3. An encoder (record -> text)

    Example:
        >>> pipeline = Pipeline.from_options(["status"], ["v1/ConfigMap"])
        >>> records = pipeline.apply_transforms(pipeline.decode(response.aiter_bytes()))
        >>> texts = [pipeline.encode(record).text async for record in records]
    """

    def __init__(
        self,
        decoder: Decoder,
        transforms: list[Transform] | None = None,
        encoder: Encoder | None = None,
    ) -> None:
        """Initialize the pipeline.

        Args:
            decoder: The decoder to convert bytes to records
            transforms: Optional list of transforms to apply
            encoder: Encoder for the final stage (YAML by default)
        """
        if encoder is None:
            from manifest_fetch.pipeline.encode import YamlEncoder

            encoder = YamlEncoder()

        self._decoder = decoder
        self._transforms = transforms or []
        self._encoder = encoder

    @property
    def transforms(self) -> list[Transform]:
        """Transforms in application order."""
        return list(self._transforms)

    def decode(self, byte_stream: AsyncIterator[bytes]) -> AsyncIterator[Record]:
        """Stage 1: decode bytes to records."""
        return self._decoder.decode(byte_stream)

    def apply_transforms(self, records: AsyncIterator[Record]) -> AsyncIterator[Record]:
        """Stage 2: apply every transform in sequence."""
        for transform in self._transforms:
            records = transform.transform(records)
        return records

    def encode(self, record: Record) -> EncodeResult:
        """Stage 3: serialize one record."""
        return self._encoder.encode(record)

    @classmethod
    def from_options(
        cls,
        filtered_attributes: Sequence[str | FieldPath] | None = None,
        only_resources: Sequence[str] | None = None,
        encoder: Encoder | None = None,
    ) -> Pipeline:
        """Create a pipeline from data source options.

        Args:
            filtered_attributes: Dotted paths to remove from each manifest
            only_resources: Allowed ``"apiVersion/kind"`` identities

        Returns:
            Configured Pipeline instance
        """
        from manifest_fetch.pipeline.decode import YamlStreamDecoder
        from manifest_fetch.pipeline.prune import create_pruner
        from manifest_fetch.pipeline.select import create_selector

        transforms: list[Transform] = []

        selector = create_selector(only_resources)
        if selector:
            transforms.append(selector)

        pruner = create_pruner(filtered_attributes)
        if pruner:
            transforms.append(pruner)

        return cls(
            decoder=YamlStreamDecoder(),
            transforms=transforms,
            encoder=encoder,
        )
