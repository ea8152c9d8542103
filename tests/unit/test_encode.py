"""Tests for the canonical YAML encoder."""

import logging

import pytest

from manifest_fetch.errors import EncodeError
from manifest_fetch.pipeline import (
    EncodeErrorPolicy,
    EncodeResult,
    YamlEncoder,
    iter_documents,
    resolve_text,
)


@pytest.fixture
def encoder() -> YamlEncoder:
    return YamlEncoder()


class TestYamlEncoder:
    """Tests for YamlEncoder."""

    def test_keys_sorted(self, encoder: YamlEncoder) -> None:
        """Test keys are emitted in sorted order at every level."""
        result = encoder.encode({"spec": {"z": 1, "a": 2}, "kind": "Test", "apiVersion": "v1"})
        assert result.error is None
        assert result.text == "apiVersion: v1\nkind: Test\nspec:\n  a: 2\n  z: 1\n"

    def test_canonical_single_document(self, encoder: YamlEncoder, single_document: str) -> None:
        """Test an already canonical document encodes unchanged."""
        record = next(iter_documents(single_document))
        assert encoder.encode(record).text == single_document

    def test_empty_mapping(self, encoder: YamlEncoder) -> None:
        """Test an emptied mapping stays as an empty flow mapping."""
        result = encoder.encode({"kind": "test", "metadata": {}})
        assert result.text == "kind: test\nmetadata: {}\n"

    def test_null_and_bool(self, encoder: YamlEncoder) -> None:
        """Test null and booleans use their plain spellings."""
        result = encoder.encode({"a": None, "b": True, "c": False})
        assert result.text == "a: null\nb: true\nc: false\n"

    def test_ambiguous_strings_quoted(self, encoder: YamlEncoder) -> None:
        """Test strings that look like other scalars are quoted."""
        result = encoder.encode({"v": "true", "n": "123"})
        assert result.text == "n: '123'\nv: 'true'\n"

    def test_mixed_key_types(self, encoder: YamlEncoder) -> None:
        """Test numbers sort before booleans, which sort before strings."""
        result = encoder.encode({"b": 1, 10: "x", 2: "y", False: "z", "a": 2})
        assert result.text == "2: y\n10: x\nfalse: z\na: 2\nb: 1\n"

    def test_sequences_block_style(self, encoder: YamlEncoder) -> None:
        """Test sequences are emitted in block style."""
        result = encoder.encode({"items": ["a", "b"]})
        assert result.text == "items:\n- a\n- b\n"

    def test_no_line_wrapping(self, encoder: YamlEncoder) -> None:
        """Test long strings stay on one line."""
        value = " ".join(["word"] * 60)
        result = encoder.encode({"description": value})
        assert result.text == f"description: {value}\n"

    def test_unicode_kept(self, encoder: YamlEncoder) -> None:
        """Test non-ASCII text is written as is."""
        assert encoder.encode({"name": "héllo"}).text == "name: héllo\n"

    def test_no_anchors(self, encoder: YamlEncoder) -> None:
        """Test shared objects are written out in full."""
        shared = {"x": 1}
        result = encoder.encode({"a": shared, "b": shared})
        assert result.text == "a:\n  x: 1\nb:\n  x: 1\n"
        assert "&" not in result.text

    def test_unrepresentable_value(self, encoder: YamlEncoder) -> None:
        """Test serializer failures are returned, not raised."""
        result = encoder.encode({"a": object()})
        assert result.error is not None
        assert result.text == ""
        assert isinstance(result.error, EncodeError)
        assert result.error.message.startswith("Error encoding manifest")


class TestResolveText:
    """Tests for resolve_text."""

    def test_success(self) -> None:
        """Test successful results pass their text through."""
        assert resolve_text(EncodeResult(text="kind: A\n")) == "kind: A\n"

    def test_empty_policy(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test the default policy substitutes an empty string and warns."""
        result = YamlEncoder().encode({"a": object()})
        # Library loggers do not propagate, so attach the capture handler directly.
        encode_logger = logging.getLogger("manifest_fetch.pipeline.encode")
        encode_logger.addHandler(caplog.handler)
        try:
            text = resolve_text(result, index=3)
        finally:
            encode_logger.removeHandler(caplog.handler)
        assert text == ""
        assert result.error is not None
        assert result.error.context.details["index"] == 3
        assert any("encode failure" in r.getMessage() for r in caplog.records)

    def test_raise_policy(self) -> None:
        """Test the raise policy re-raises the stored error."""
        result = YamlEncoder().encode({"a": object()})
        with pytest.raises(EncodeError) as exc_info:
            resolve_text(result, EncodeErrorPolicy.RAISE, index=0)
        assert exc_info.value.context.details["index"] == 0
