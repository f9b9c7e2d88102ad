"""Custom exception hierarchy for Lakemirror."""

from __future__ import annotations


class MirrorError(Exception):
    """Base exception for all Lakemirror-specific errors."""

    def __init__(self, message: str, details: dict[str, str] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(MirrorError):
    """Raised when configuration is invalid or missing."""
    pass


class ValidationError(MirrorError):
    """Base class for validation errors."""
    pass


class MalformedPayloadError(ValidationError):
    """Raised when an event payload lacks a required field or carries an unparseable URL."""
    pass


class StorageError(MirrorError):
    """Raised when storage operations fail."""
    pass


class TransferFailedError(StorageError):
    """Raised when a call against the backup store errors."""
    pass


class SourceReadError(StorageError):
    """Raised when the created file cannot be read from the source account."""
    pass


__all__ = [
    "MirrorError",
    "ConfigurationError",
    "ValidationError",
    "MalformedPayloadError",
    "StorageError",
    "TransferFailedError",
    "SourceReadError",
]
