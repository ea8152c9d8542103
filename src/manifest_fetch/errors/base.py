"""错误基类：提供分层错误体系和结构化错误上下文。

Base error classes for manifest-fetch.

Provides a layered error hierarchy:
- ManifestFetchError: Base class for all library errors
- RequestError: The request could not be built
- TransportError: Network failure while sending or reading
- HTTPStatusError: The server answered with a status other than 200
- ParseError: The response body is not a valid manifest stream
- CancellationError: The caller cancelled the fetch
- DecodeError / EncodeError: Raised by the YAML codec stages
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar


@dataclass
class ErrorContext:
    """Structured error context for diagnostics.

    Provides actionable information for debugging and error handling.
    """

    details: dict[str, Any] = field(default_factory=dict)
    """Additional details about the error"""

    source: str | None = None
    """Error source (e.g., 'request', 'transport', 'decode')"""

    hint: str | None = None
    """Actionable hint for resolving the error"""

    def __str__(self) -> str:
        parts = []
        if self.source:
            parts.append(f"[{self.source}]")
        if self.hint:
            parts.append(f"(hint: {self.hint})")
        return " ".join(parts)


class ManifestFetchError(Exception):
    """Base class for all manifest-fetch errors.

    All errors from this library inherit from this class, making it easy
    to catch every classified failure with a single except clause.

    Attributes:
        message: Human-readable error message
        context: Optional structured error context
        summary: Short diagnostic title shown by hosts
    """

    summary: ClassVar[str] = "Error fetching manifests"

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
    ) -> None:
        self.message = message
        self.context = context or ErrorContext()
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the full error message."""
        ctx_str = str(self.context)
        if ctx_str:
            return f"{self.message} {ctx_str}"
        return self.message

    def with_hint(self, hint: str) -> ManifestFetchError:
        """Add a hint to this error."""
        self.context.hint = hint
        return self

    def with_state(self, state: str) -> ManifestFetchError:
        """Record the orchestrator state the error was raised in."""
        self.context.details["state"] = state
        return self


class RequestError(ManifestFetchError):
    """The HTTP request could not be constructed.

    Raised when:
    - The URL is empty or malformed
    - The URL scheme is not http or https
    """

    summary: ClassVar[str] = "Error creating request"

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        *,
        url: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        ctx = context or ErrorContext(source="request")
        if url:
            ctx.details["url"] = url
        super().__init__(message, ctx)
        self.url = url
        self.__cause__ = cause


class TransportError(ManifestFetchError):
    """Error during HTTP transport.

    Raised when:
    - Network connection failure or DNS lookup failure
    - Timeout
    - SSL/TLS errors
    - The connection drops while the body is read
    """

    summary: ClassVar[str] = "Error making request"

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        *,
        url: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        ctx = context or ErrorContext(source="transport")
        if url:
            ctx.details["url"] = url
        super().__init__(message, ctx)
        self.url = url
        self.__cause__ = cause


class HTTPStatusError(ManifestFetchError):
    """The server answered with a status code other than 200.

    The message always embeds ``Received non-success response code: <code>``;
    downstream tooling matches on that text.
    """

    summary: ClassVar[str] = "Received non-success response code"

    def __init__(
        self,
        status_code: int,
        context: ErrorContext | None = None,
        *,
        url: str | None = None,
    ) -> None:
        ctx = context or ErrorContext(source="transport")
        ctx.details["status_code"] = status_code
        if url:
            ctx.details["url"] = url
        super().__init__(f"Received non-success response code: {status_code}", ctx)
        self.status_code = status_code
        self.url = url


class DecodeError(ManifestFetchError):
    """Strict YAML decoding failed.

    Attributes:
        problem: Parser message describing what went wrong
        line: 1-based line of the failure, when known
        column: 1-based column of the failure, when known
        document: 1-based index of the document being decoded
    """

    summary: ClassVar[str] = "Error decoding manifest"

    def __init__(
        self,
        problem: str,
        *,
        line: int | None = None,
        column: int | None = None,
        document: int | None = None,
        cause: Exception | None = None,
    ) -> None:
        ctx = ErrorContext(source="decode")
        if line is not None:
            ctx.details["line"] = line
        if column is not None:
            ctx.details["column"] = column
        if document is not None:
            ctx.details["document"] = document
        super().__init__(self._describe(problem, line, column), ctx)
        self.problem = problem
        self.line = line
        self.column = column
        self.document = document
        self.__cause__ = cause

    @staticmethod
    def _describe(problem: str, line: int | None, column: int | None) -> str:
        if line is None:
            return f"yaml: {problem}"
        if column is None:
            return f"yaml: line {line}: {problem}"
        return f"yaml: line {line}, column {column}: {problem}"


class ParseError(ManifestFetchError):
    """The response body could not be parsed as a manifest stream."""

    summary: ClassVar[str] = "Error parsing response body"

    def __init__(
        self,
        cause: DecodeError,
        context: ErrorContext | None = None,
        *,
        url: str | None = None,
    ) -> None:
        ctx = context or ErrorContext(source="parse")
        ctx.details.update(cause.context.details)
        if url:
            ctx.details["url"] = url
        super().__init__(f"Error parsing response body: {cause.message}", ctx)
        self.url = url
        self.__cause__ = cause


class EncodeError(ManifestFetchError):
    """A decoded manifest could not be serialized back to YAML."""

    summary: ClassVar[str] = "Error encoding manifest"

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        *,
        index: int | None = None,
        cause: Exception | None = None,
    ) -> None:
        ctx = context or ErrorContext(source="encode")
        if index is not None:
            ctx.details["index"] = index
        super().__init__(f"Error encoding manifest: {message}", ctx)
        self.index = index
        self.__cause__ = cause


class CancellationError(ManifestFetchError):
    """The caller's cancel token fired before the fetch completed."""

    summary: ClassVar[str] = "Fetch cancelled"

    def __init__(
        self,
        reason: str | None = None,
        context: ErrorContext | None = None,
        *,
        url: str | None = None,
    ) -> None:
        ctx = context or ErrorContext(source="cancel")
        if reason:
            ctx.details["reason"] = reason
        if url:
            ctx.details["url"] = url
        super().__init__(f"Fetch cancelled: {reason or 'user_request'}", ctx)
        self.reason = reason
        self.url = url
