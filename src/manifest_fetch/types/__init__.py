"""
Type definitions for manifest-fetch.
"""

from manifest_fetch.types.record import (
    NIL,
    FieldPath,
    Record,
    Scalar,
    Value,
    is_mapping,
    type_identity,
)

__all__ = [
    "NIL",
    "FieldPath",
    "Record",
    "Scalar",
    "Value",
    "is_mapping",
    "type_identity",
]
