"""Error hierarchy for mdbinder with sensitive data redaction."""

from __future__ import annotations

import re


class BinderError(Exception):
    """Base exception for all mdbinder errors."""

    pass


class ConfigError(BinderError):
    """Configuration loading or validation error."""

    pass


class SourceError(BinderError):
    """Failed to list repositories from the repository source."""

    pass


class CloneError(BinderError):
    """A git checkout could not be created or inspected."""

    pass


class FileAccessError(BinderError):
    """A file could not be read or written."""

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


class ParseError(BinderError):
    """Content is not markdown text."""

    pass


class OutputDirError(BinderError):
    """The output directory is not usable (e.g. not empty)."""

    pass


# Patterns for sensitive data redaction
_REDACTION_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    # Bitbucket HTTP access tokens
    (re.compile(r"BBDC-[A-Za-z0-9+/_-]{20,}"), "<REDACTED_TOKEN>"),
    # URL credentials (clone URLs carry user:password)
    (re.compile(r"://[^@\s/]+:[^@\s/]+@"), "://<REDACTED_CREDS>@"),
    # Authorization headers
    (
        re.compile(r"(Authorization:\s*(?:Bearer|Basic)\s+)\S+", re.IGNORECASE),
        r"\1<REDACTED_TOKEN>",
    ),
    # password=..., "password": "..."
    (
        re.compile(r"(password[\"']?\s*[:=]\s*[\"']?)[^\s\"',}]+", re.IGNORECASE),
        r"\1<REDACTED_SECRET>",
    ),
]


def redact_text(message: str) -> str:
    """Remove credentials from a message."""
    for pattern, replacement in _REDACTION_PATTERNS:
        message = pattern.sub(replacement, message)
    return message


def redact_error(error: Exception) -> BinderError:
    """Wrap an exception, redacting sensitive data from its message.

    Args:
        error: The original exception.

    Returns:
        A BinderError with redacted message and original preserved.
    """
    redacted = BinderError(redact_text(str(error)))
    redacted.__cause__ = error
    return redacted
