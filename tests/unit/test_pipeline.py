"""Tests for pipeline assembly."""

import pytest

from manifest_fetch.pipeline import (
    EncodeResult,
    Encoder,
    FieldPruner,
    Pipeline,
    ResourceTypeSelector,
    Transform,
    YamlEncoder,
    YamlStreamDecoder,
)


async def _stream(*chunks: str):
    for chunk in chunks:
        yield chunk.encode()


async def _run(pipeline: Pipeline, body: str) -> list[str]:
    records = pipeline.apply_transforms(pipeline.decode(_stream(body)))
    return [pipeline.encode(record).text async for record in records]


class UpperKindTransform(Transform):
    """Test transform that upper-cases the kind."""

    async def transform(self, records):
        async for record in records:
            record["kind"] = record["kind"].upper()
            yield record


class KindEncoder(Encoder):
    """Test encoder that only writes the kind."""

    def encode(self, record):
        return EncodeResult(text=str(record.get("kind")))


class TestFromOptions:
    """Tests for Pipeline.from_options."""

    def test_no_options(self) -> None:
        """Test no transforms are built without options."""
        assert Pipeline.from_options().transforms == []
        assert Pipeline.from_options([], []).transforms == []

    def test_selector_before_pruner(self) -> None:
        """Test the type filter runs before pruning."""
        pipeline = Pipeline.from_options(["status"], ["v1/ConfigMap"])
        kinds = [type(t) for t in pipeline.transforms]
        assert kinds == [ResourceTypeSelector, FieldPruner]

    @pytest.mark.asyncio
    async def test_filter_sees_unpruned_identity(self) -> None:
        """Test pruning kind does not affect type selection."""
        pipeline = Pipeline.from_options(["kind"], ["v1/Test"])
        texts = await _run(
            pipeline, "apiVersion: v1\nkind: Test\n---\napiVersion: v1\nkind: Other\n"
        )
        assert texts == ["apiVersion: v1\n"]

    def test_custom_encoder(self) -> None:
        """Test a supplied encoder replaces the YAML one."""
        pipeline = Pipeline.from_options(encoder=KindEncoder())
        assert pipeline.encode({"kind": "Test"}).text == "Test"


class TestStages:
    """Tests for running the pipeline stages."""

    @pytest.mark.asyncio
    async def test_single_document(self, single_document: str) -> None:
        """Test the full pipeline on one manifest."""
        pipeline = Pipeline.from_options(["metadata.creationTimestamp", "status"])
        assert await _run(pipeline, single_document) == [
            "apiVersion: testing.k8s.io/v1\n"
            "kind: Test\n"
            "metadata:\n"
            "  annotations:\n"
            "    hello: world\n"
            "spec:\n"
            "  some: key\n"
        ]

    @pytest.mark.asyncio
    async def test_no_options_is_canonical(self, multiple_document_parts: list[str]) -> None:
        """Test unfiltered documents come back in canonical form."""
        pipeline = Pipeline.from_options()
        texts = await _run(pipeline, "---\n".join(multiple_document_parts))
        assert texts == multiple_document_parts

    @pytest.mark.asyncio
    async def test_transformed_records(self, multiple_documents: str) -> None:
        """Test records can be read without encoding."""
        pipeline = Pipeline.from_options(only_resources=["testing.k8s.io/v1/test"])
        records = pipeline.apply_transforms(pipeline.decode(_stream(multiple_documents)))
        assert [r["kind"] async for r in records] == ["test", "test"]

    @pytest.mark.asyncio
    async def test_custom_stages(self) -> None:
        """Test custom stages are chained in order."""
        pipeline = Pipeline(
            YamlStreamDecoder(),
            transforms=[UpperKindTransform()],
            encoder=KindEncoder(),
        )
        assert await _run(pipeline, "kind: a\n---\nkind: b\n") == ["A", "B"]

    def test_default_encoder(self) -> None:
        """Test pipelines encode YAML unless told otherwise."""
        pipeline = Pipeline(YamlStreamDecoder())
        assert pipeline.encode({"kind": "Test"}).text == "kind: Test\n"
        assert isinstance(YamlEncoder().encode({}), EncodeResult)
