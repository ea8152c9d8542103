"""
Telemetry module for manifest-fetch.

Provides structured logging with credential masking.
"""

from manifest_fetch.telemetry.logger import (
    CredentialMasker,
    JsonFormatter,
    LogContext,
    LogLevel,
    ManifestFetchLogger,
    TextFormatter,
    clear_log_context,
    get_log_context,
    get_logger,
    set_log_context,
)

__all__ = [
    "CredentialMasker",
    "JsonFormatter",
    "LogContext",
    "LogLevel",
    "ManifestFetchLogger",
    "TextFormatter",
    "clear_log_context",
    "get_log_context",
    "get_logger",
    "set_log_context",
]
