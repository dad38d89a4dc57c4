"""Centralized exception hierarchy for anki-link.

All custom exceptions inherit from AnkiLinkError, so a caller can catch every
sync-related failure with a single except clause.

Exception Hierarchy:
    AnkiLinkError (base)
     ConfigurationError - Configuration loading/validation errors
     DocumentStoreError - Vault read/write failures
     AnkiError - Anki-related errors
        AnkiConnectError - Transport failures reaching AnkiConnect
        AnkiActionError - An action reported a non-null error
        ResponseShapeError - Response does not have the expected shape
     SyncError - Synchronization run errors
        SyncInProgressError - A run is already active
        SyncCancelledError - The run was cancelled at a checkpoint

Usage Examples:
    try:
        summary = await engine.run()
    except AnkiActionError as e:
        logger.error("sync_failed", action=e.action, error=e.message)
    except AnkiLinkError as e:
        logger.error("sync_failed", error=str(e))
"""

from typing import Any


class AnkiLinkError(Exception):
    """Base exception for all anki-link errors.

    Attributes:
        message: Human-readable error message
        suggestion: Optional suggestion for resolving the error
        context: Additional context for debugging (e.g., file paths, note ids)
    """

    def __init__(
        self,
        message: str,
        suggestion: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        self.message = message
        self.suggestion = suggestion
        self.context = context or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.suggestion:
            return f"{self.message}\nSuggestion: {self.suggestion}"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for structured logging."""
        return {
            "message": self.message,
            "suggestion": self.suggestion,
            "context": self.context,
            "type": type(self).__name__,
        }


# Configuration Errors


class ConfigurationError(AnkiLinkError):
    """Configuration loading or validation errors.

    Raised when:
    - Config file is malformed
    - Configuration values fail validation
    """


# Document Errors


class DocumentStoreError(AnkiLinkError):
    """A document could not be listed, read or written."""


# Anki Errors


class AnkiError(AnkiLinkError):
    """Base class for errors talking to Anki."""


class AnkiConnectError(AnkiError):
    """Transport failure reaching AnkiConnect.

    Raised when:
    - Anki is not running or the add-on is not installed
    - The request times out
    - AnkiConnect answers with a non-2xx status
    """


class AnkiActionError(AnkiError):
    """An AnkiConnect action answered with a non-null ``error`` field."""

    def __init__(
        self,
        action: str,
        message: str,
        context: dict[str, Any] | None = None,
    ):
        self.action = action
        super().__init__(f"AnkiConnect {action}: {message}", context=context)


class ResponseShapeError(AnkiError):
    """A response could not be interpreted.

    Raised when:
    - The body is not JSON or lacks the result/error envelope
    - A multi response has a different length than the request
    - A create action returned something other than a note id
    """


# Sync Errors


class SyncError(AnkiLinkError):
    """Base class for errors raised by the sync run itself."""


class SyncInProgressError(SyncError):
    """A sync run was requested while another one is still active."""


class SyncCancelledError(SyncError):
    """The run was cancelled between network round trips."""
