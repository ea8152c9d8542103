"""Root pytest fixtures for manifest-fetch tests."""

from __future__ import annotations

import pytest

SINGLE_DOCUMENT = """apiVersion: testing.k8s.io/v1
kind: Test
metadata:
  annotations:
    hello: world
  creationTimestamp: null
spec:
  some: key
status:
  abc: def
  bool: true
"""

MULTIPLE_DOCUMENT_1 = """apiVersion: testing.k8s.io/v1
kind: Test
status: hello
"""

MULTIPLE_DOCUMENT_2 = """apiVersion: testing.k8s.io/v1
kind: test
metadata:
  creationTimestamp: null
"""

MULTIPLE_DOCUMENT_3 = """apiVersion: testing.k8s.io/v1
kind: test
spec:
  un: changed
"""

MULTIPLE_DOCUMENTS = "\n---\n".join(
    [MULTIPLE_DOCUMENT_1, MULTIPLE_DOCUMENT_2, MULTIPLE_DOCUMENT_3]
)

SERVER_URL = "https://manifests.example.com"


@pytest.fixture
def single_document() -> str:
    """A single manifest with nested metadata, spec and status."""
    return SINGLE_DOCUMENT


@pytest.fixture
def multiple_documents() -> str:
    """Three manifests joined by document separators."""
    return MULTIPLE_DOCUMENTS


@pytest.fixture
def multiple_document_parts() -> list[str]:
    """The three manifests of ``multiple_documents``, in order."""
    return [MULTIPLE_DOCUMENT_1, MULTIPLE_DOCUMENT_2, MULTIPLE_DOCUMENT_3]


@pytest.fixture
def server_url() -> str:
    """Base URL for mocked manifest responses."""
    return SERVER_URL
