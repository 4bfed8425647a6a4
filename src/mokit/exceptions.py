"""Unified exception hierarchy for mokit.

All mokit exceptions inherit from MokitError, enabling:
- Catching all mokit errors with `except MokitError`
- Error context preservation via the `context` attribute
- Causality chains via `raise ... from e` patterns

Catalog and plural-expression errors never reach callers of the lookup
methods on Translation; they are raised internally and turned into an
error message or a fallback value at the catalog/plural boundary.
"""

from typing import Any


class MokitError(Exception):
    """Base exception for all mokit errors.

    Args:
        message: Human-readable error description
        context: Optional dict of contextual information (file, offset, etc.)
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.context = context or {}

    def __str__(self) -> str:
        base = super().__str__()
        if self.context:
            details = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{base} [{details}]"
        return base


class OutOfRangeError(MokitError, IndexError):
    """Raised when a read runs past the end of the loaded buffer."""


class CatalogError(MokitError):
    """Raised when a catalog file cannot be decoded."""


class CatalogNotFoundError(CatalogError):
    """Raised when the catalog file does not exist."""


class CatalogUnreadableError(CatalogError):
    """Raised when the catalog file exists but cannot be read."""


class NotACatalogError(CatalogError):
    """Raised when the magic bytes match neither byte order."""


class MalformedCatalogError(CatalogError):
    """Raised when a string table points outside the file."""


class PluralExpressionError(MokitError):
    """Base class for Plural-Forms expression failures."""


class PluralSyntaxError(PluralExpressionError):
    """Raised when a Plural-Forms expression cannot be parsed."""


class PluralEvalError(PluralExpressionError):
    """Raised when a parsed Plural-Forms expression cannot be evaluated."""


class ConfigError(MokitError):
    """Raised when a catalog manifest is invalid or cannot be loaded.

    Attributes:
        message: The error message.
        field: Name of the field with the error (if applicable).
        suggestion: Suggested fix for the error (if applicable).
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        suggestion: str | None = None,
    ):
        self.message = message
        self.field = field
        self.suggestion = suggestion
        super().__init__(message)

    def __str__(self) -> str:
        parts = []
        if self.field:
            parts.append(f"In field '{self.field}'")
        parts.append(self.message)
        if self.suggestion:
            parts.append(f"Suggestion: {self.suggestion}")
        return "\n".join(parts)
