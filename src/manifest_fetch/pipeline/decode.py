"""
Strict multi-document YAML decoder.

Splits a response body on ``---`` document boundaries and decodes each
document into a record. Decoding is strict: malformed YAML, duplicate keys,
excessive aliasing or a document that is not a mapping abort the whole
stream.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import yaml
from yaml.constructor import ConstructorError

from manifest_fetch.errors import DecodeError
from manifest_fetch.pipeline.base import Decoder
from manifest_fetch.telemetry.logger import get_logger

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Iterator

    from manifest_fetch.types.record import Record

logger = get_logger(__name__)

_TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"
_MERGE_TAG = "tag:yaml.org,2002:merge"
_NULL_TAG = "tag:yaml.org,2002:null"

_NODE_KINDS = {
    "tag:yaml.org,2002:seq": "!!seq",
    "tag:yaml.org,2002:str": "!!str",
    "tag:yaml.org,2002:int": "!!int",
    "tag:yaml.org,2002:float": "!!float",
    "tag:yaml.org,2002:bool": "!!bool",
    "tag:yaml.org,2002:binary": "!!binary",
}

# Alias budget: below these counts any amount of aliasing is accepted.
_ALIAS_MIN_ALIASED = 100
_ALIAS_MIN_EXPANDED = 1000
# Between these sizes the tolerated aliased share drops from 99% to 10%.
_ALIAS_RATIO_LOW = 400_000
_ALIAS_RATIO_HIGH = 4_000_000


class StrictSafeLoader(yaml.SafeLoader):
    """SafeLoader that refuses duplicate mapping keys.

    Timestamps are left as strings.
    """

    def construct_mapping(self, node: Any, deep: bool = False) -> dict[Any, Any]:
        if isinstance(node, yaml.MappingNode):
            self._check_duplicate_keys(node)
        return super().construct_mapping(node, deep=deep)

    def _check_duplicate_keys(self, node: yaml.MappingNode) -> None:
        seen: set[Any] = set()
        for key_node, _ in node.value:
            if key_node.tag == _MERGE_TAG:
                continue
            key = self.construct_object(key_node, deep=True)
            try:
                duplicate = key in seen
            except TypeError:
                # Unhashable keys are reported by the base constructor.
                continue
            if duplicate:
                raise ConstructorError(
                    "while constructing a mapping",
                    node.start_mark,
                    f"found duplicate key {key!r}",
                    key_node.start_mark,
                )
            seen.add(key)


StrictSafeLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != _TIMESTAMP_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def _decode_error(exc: yaml.YAMLError, document: int) -> DecodeError:
    """Convert a PyYAML error into a DecodeError with its position."""
    if isinstance(exc, yaml.MarkedYAMLError):
        mark = exc.problem_mark or exc.context_mark
        problem = exc.problem or exc.context or str(exc)
        if mark is not None:
            return DecodeError(
                problem,
                line=mark.line + 1,
                column=mark.column + 1,
                document=document,
                cause=exc,
            )
        return DecodeError(problem, document=document, cause=exc)
    return DecodeError(str(exc), document=document, cause=exc)


def _allowed_alias_ratio(expanded: int) -> float:
    if expanded <= _ALIAS_RATIO_LOW:
        return 0.99
    if expanded >= _ALIAS_RATIO_HIGH:
        return 0.10
    span = _ALIAS_RATIO_HIGH - _ALIAS_RATIO_LOW
    return 0.99 - 0.89 * (expanded - _ALIAS_RATIO_LOW) / span


def check_aliasing(root: yaml.Node, document: int | None = None) -> int:
    """Measure how far aliases would expand a composed document.

    An alias shares its anchor's node, so the composed graph stays small
    while the fully expanded tree can grow exponentially. Sizes are
    memoized per node, so the measurement is linear in the graph.

    Args:
        root: Composed document node
        document: 1-based document index, for errors

    Returns:
        Number of expanded nodes that come from aliases

    Raises:
        DecodeError: If an anchor contains itself or aliasing is excessive
    """
    sizes: dict[int, int] = {}
    active: set[int] = set()

    def expanded_size(node: yaml.Node) -> int:
        key = id(node)
        if key in sizes:
            return sizes[key]
        if key in active:
            raise DecodeError(
                "anchor value contains itself",
                line=node.start_mark.line + 1,
                column=node.start_mark.column + 1,
                document=document,
            )

        active.add(key)
        total = 1
        if isinstance(node, yaml.SequenceNode):
            for child in node.value:
                total += expanded_size(child)
        elif isinstance(node, yaml.MappingNode):
            for key_node, value_node in node.value:
                total += expanded_size(key_node) + expanded_size(value_node)
        active.discard(key)

        sizes[key] = total
        return total

    expanded = expanded_size(root)
    aliased = expanded - len(sizes)
    if (
        aliased > _ALIAS_MIN_ALIASED
        and expanded > _ALIAS_MIN_EXPANDED
        and aliased / expanded > _allowed_alias_ratio(expanded)
    ):
        raise DecodeError("document contains excessive aliasing", document=document)
    return aliased


def _expand(value: Any) -> Any:
    """Rebuild containers so no two paths share an object."""
    if isinstance(value, dict):
        return {key: _expand(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_expand(item) for item in value]
    return value


def iter_documents(data: bytes | str) -> Iterator[Record]:
    """Lazily decode every manifest in a multi-document YAML stream.

    Empty documents are skipped. Aliased values are expanded into
    independent copies. The iterator cannot be restarted.

    Args:
        data: Raw response body

    Yields:
        One record per non-empty document, in stream order

    Raises:
        DecodeError: On the first malformed or non-mapping document
    """
    try:
        # The reader decodes the whole buffer up front.
        loader = StrictSafeLoader(data)
    except yaml.YAMLError as e:
        raise _decode_error(e, 1) from e

    document = 0
    try:
        while True:
            document += 1
            try:
                if not loader.check_node():
                    return
                node = loader.get_node()
                aliased = check_aliasing(node, document)
                record = loader.construct_document(node)
            except yaml.YAMLError as e:
                raise _decode_error(e, document) from e

            if record is None and node.tag == _NULL_TAG:
                logger.debug("Skipping empty document", document=document)
                continue

            if not isinstance(record, dict):
                kind = _NODE_KINDS.get(node.tag, node.tag)
                raise DecodeError(
                    f"cannot unmarshal {kind} into a manifest mapping",
                    line=node.start_mark.line + 1,
                    document=document,
                )

            yield _expand(record) if aliased else record
    finally:
        loader.dispose()


class YamlStreamDecoder(Decoder):
    """Decoder for ``---`` separated YAML manifest streams.

    The body is buffered in full before parsing; documents are then
    produced one at a time.

    Example:
        >>> decoder = YamlStreamDecoder()
        >>> async for record in decoder.decode(response.aiter_bytes()):
        ...     print(record["kind"])
    """

    async def decode(self, byte_stream: AsyncIterator[bytes]) -> AsyncIterator[Record]:
        """Decode a YAML byte stream into records.

        Args:
            byte_stream: Async iterator of raw bytes

        Yields:
            Decoded records

        Raises:
            DecodeError: If any document fails strict decoding
        """
        body = bytearray()
        async for chunk in byte_stream:
            body.extend(chunk)

        count = 0
        for record in iter_documents(bytes(body)):
            count += 1
            yield record

        logger.debug("Decoded manifest stream", size=len(body), documents=count)
