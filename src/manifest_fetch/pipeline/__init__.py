"""
Pipeline layer - Manifest processing operators.

This module implements the operator pipeline applied to a fetched body:
- Decoder: Parses raw bytes into manifests (strict multi-document YAML)
- Selector: Keeps manifests of allowed ``apiVersion/kind`` types
- Pruner: Removes dotted attribute paths from each manifest
- Encoder: Serializes each manifest back to canonical YAML
"""

from manifest_fetch.pipeline.base import Decoder, Encoder, Pipeline, Transform
from manifest_fetch.pipeline.decode import (
    StrictSafeLoader,
    YamlStreamDecoder,
    check_aliasing,
    iter_documents,
)
from manifest_fetch.pipeline.encode import (
    CanonicalDumper,
    EncodeErrorPolicy,
    EncodeResult,
    YamlEncoder,
    resolve_text,
)
from manifest_fetch.pipeline.prune import (
    FieldPruner,
    create_pruner,
    parse_filtered_attributes,
    remove_attribute,
)
from manifest_fetch.pipeline.select import (
    ResourceTypeSelector,
    create_selector,
    should_keep,
)

__all__ = [
    # Base abstractions
    "Decoder",
    "Encoder",
    "Pipeline",
    "Transform",
    # Decode
    "StrictSafeLoader",
    "YamlStreamDecoder",
    "check_aliasing",
    "iter_documents",
    # Encode
    "CanonicalDumper",
    "EncodeErrorPolicy",
    "EncodeResult",
    "YamlEncoder",
    "resolve_text",
    # Prune
    "FieldPruner",
    "create_pruner",
    "parse_filtered_attributes",
    "remove_attribute",
    # Select
    "ResourceTypeSelector",
    "create_selector",
    "should_keep",
]
