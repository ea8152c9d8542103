"""Tests for the resource type selector."""

import copy

import pytest

from manifest_fetch.pipeline import (
    ResourceTypeSelector,
    create_selector,
    should_keep,
)

TEST = {"apiVersion": "testing.k8s.io/v1", "kind": "Test"}
LOWER = {"apiVersion": "testing.k8s.io/v1", "kind": "test"}
BARE = {"metadata": {"name": "x"}}

async def _records(*records):
    for record in records:
        yield record

class TestShouldKeep:
    """Tests for should_keep."""

    def test_no_list_keeps_everything(self) -> None:
        """Test absent and empty lists disable filtering."""
        assert should_keep(TEST, None)
        assert should_keep(BARE, None)
        assert should_keep(TEST, [])

    def test_exact_match(self) -> None:
        """Test an identity in the list is kept."""
        assert should_keep(TEST, ["testing.k8s.io/v1/Test"])

    def test_case_sensitive(self) -> None:
        """Test matching is case-sensitive."""
        assert not should_keep(LOWER, ["testing.k8s.io/v1/Test"])

    def test_no_wildcards(self) -> None:
        """Test patterns are matched literally."""
        assert not should_keep(TEST, ["testing.k8s.io/v1/*"])
        assert not should_keep(TEST, ["Test"])

    def test_missing_fields_match_nil(self) -> None:
        """Test records without identity fields match <nil> entries."""
        assert should_keep(BARE, ["<nil>/<nil>"])
        assert not should_keep(BARE, ["testing.k8s.io/v1/Test"])

    def test_does_not_mutate(self) -> None:
        """Test the record is left untouched."""
        record = copy.deepcopy(TEST)
        should_keep(record, ["other/v1/Kind"])
        assert record == TEST

class TestResourceTypeSelector:
    """Tests for ResourceTypeSelector."""

    @pytest.mark.asyncio
    async def test_transform(self) -> None:
        """Test only allowed types pass, in order."""
        selector = ResourceTypeSelector(["testing.k8s.io/v1/Test", "<nil>/<nil>"])
        kept = [r async for r in selector.transform(_records(TEST, LOWER, BARE, TEST))]
        assert kept == [TEST, BARE, TEST]

    def test_allowed(self) -> None:
        """Test the allow list is exposed as a set."""
        selector = ResourceTypeSelector(["a/b", "a/b", "c/d"])
        assert selector.allowed == frozenset({"a/b", "c/d"})


class TestCreateSelector:
    """Tests for create_selector."""

    def test_none(self) -> None:
        """Test no selector is built without a list."""
        assert create_selector(None) is None
        assert create_selector([]) is None

    def test_list(self) -> None:
        """Test a selector is built for a non-empty list."""
        assert isinstance(create_selector(["v1/Service"]), ResourceTypeSelector)
