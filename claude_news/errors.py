"""Exception types for the ingestion pipeline.

None of these escape a refresh cycle: source and persistence errors are
caught where they happen, logged, and turned into an empty contribution or
an unsaved (but still served) snapshot.
"""

from __future__ import annotations


class ClaudeNewsError(Exception):
    """Base class for all package errors."""


class ConfigError(ClaudeNewsError, ValueError):
    """Invalid configuration detected at load time."""


class SourceFetchError(ClaudeNewsError):
    """Network, HTTP status or parse failure for one source."""

    def __init__(self, source: str, message: str):
        super().__init__(f"{source}: {message}")
        self.source = source
        self.message = message


class PersistenceLoadError(ClaudeNewsError):
    """Persisted snapshot is missing or unreadable."""


class PersistenceSaveError(ClaudeNewsError):
    """Snapshot could not be written to durable storage."""
