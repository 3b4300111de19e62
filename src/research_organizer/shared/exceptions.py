"""
Unified Exception Hierarchy for Research Organizer.

Exception Hierarchy:
    ResearchOrganizerError (base)
    ├── ConcurrentRunRejectedError
    ├── ValidationError
    │   └── MissingInputError
    ├── ProviderUnavailableError
    │   ├── ProviderNotConfiguredError
    │   ├── AuthenticationError
    │   └── RateLimitError
    ├── AggregateSearchFailureError
    ├── ArtifactWriteFailureError
    └── ConfigurationError

Provider errors never reach the caller of a workflow: the search
orchestrator catches them and moves on to the next provider. Everything
else ends the run and is turned into a failure result.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any


class ErrorSeverity(Enum):
    """Severity levels for errors."""
    WARNING = auto()      # Recoverable, can continue
    ERROR = auto()        # Failed but can retry
    CRITICAL = auto()     # Cannot continue
    TRANSIENT = auto()    # Temporary, should retry automatically


class ErrorCategory(Enum):
    """Categories for error classification."""
    RUN = "run"
    VALIDATION = "validation"
    PROVIDER = "provider"
    STORAGE = "storage"
    CONFIGURATION = "config"


@dataclass(frozen=True, slots=True)
class ErrorContext:
    """Rich context for error messages."""
    operation: str | None = None
    provider: str | None = None
    input_value: Any = None
    suggestion: str | None = None
    retry_after: float | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


class ResearchOrganizerError(Exception):
    """
    Base exception for all Research Organizer errors.

    Provides:
    - Structured error context
    - Severity classification
    - Retry guidance
    """

    kind: str = "error"

    def __init__(
        self,
        message: str,
        *,
        context: ErrorContext | None = None,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        category: ErrorCategory = ErrorCategory.RUN,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.context = context or ErrorContext()
        self.severity = severity
        self.category = category
        self.retryable = retryable

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {
            "error": str(self),
            "kind": self.kind,
            "category": self.category.value,
            "severity": self.severity.name.lower(),
            "retryable": self.retryable,
        }
        if self.context.operation:
            result["operation"] = self.context.operation
        if self.context.provider:
            result["provider"] = self.context.provider
        if self.context.suggestion:
            result["suggestion"] = self.context.suggestion
        if self.context.retry_after:
            result["retry_after_seconds"] = self.context.retry_after
        return result


# =============================================================================
# Run Errors
# =============================================================================

class ConcurrentRunRejectedError(ResearchOrganizerError):
    """Raised when an operation is started while the same operation is running."""

    kind = "concurrent_run_rejected"

    def __init__(self, operation: str) -> None:
        super().__init__(
            f"{operation} is already running",
            context=ErrorContext(
                operation=operation,
                suggestion="Wait for the current run to finish and try again",
            ),
            severity=ErrorSeverity.WARNING,
            category=ErrorCategory.RUN,
            retryable=True,
        )


class AggregateSearchFailureError(ResearchOrganizerError):
    """Raised when every provider, including the offline fallback, failed."""

    kind = "aggregate_search_failure"

    def __init__(self, attempted: list[str], *, context: ErrorContext | None = None) -> None:
        super().__init__(
            f"All search providers failed: {', '.join(attempted) or 'none'}",
            context=context,
            severity=ErrorSeverity.CRITICAL,
            category=ErrorCategory.PROVIDER,
        )
        self.attempted = list(attempted)


# =============================================================================
# Validation Errors
# =============================================================================

class ValidationError(ResearchOrganizerError):
    """Base class for input validation errors."""

    kind = "validation"

    def __init__(self, message: str, *, context: ErrorContext | None = None) -> None:
        super().__init__(
            message,
            context=context,
            severity=ErrorSeverity.WARNING,
            category=ErrorCategory.VALIDATION,
            retryable=False,
        )


class MissingInputError(ValidationError):
    """Raised when a run has nothing to work on (no documents, no keywords)."""

    kind = "missing_input"

    def __init__(
        self,
        message: str,
        *,
        suggestion: str | None = None,
        context: ErrorContext | None = None,
    ) -> None:
        ctx = context or ErrorContext()
        ctx = ErrorContext(
            operation=ctx.operation,
            provider=ctx.provider,
            input_value=ctx.input_value,
            suggestion=suggestion or ctx.suggestion,
            retry_after=ctx.retry_after,
            metadata=ctx.metadata,
        )
        super().__init__(message, context=ctx)


# =============================================================================
# Provider Errors
# =============================================================================

class ProviderUnavailableError(ResearchOrganizerError):
    """A search backend could not serve the request (transport, auth, rate limit)."""

    kind = "provider_unavailable"

    def __init__(
        self,
        provider: str,
        message: str = "Service unavailable",
        *,
        context: ErrorContext | None = None,
    ) -> None:
        ctx = context or ErrorContext(provider=provider)
        super().__init__(
            f"{provider}: {message}",
            context=ctx,
            severity=ErrorSeverity.ERROR,
            category=ErrorCategory.PROVIDER,
            retryable=True,
        )
        self.provider = provider


class ProviderNotConfiguredError(ProviderUnavailableError):
    """Raised when a provider is asked to search without its credential."""

    kind = "provider_not_configured"

    def __init__(self, provider: str, setting: str) -> None:
        super().__init__(
            provider,
            f"credential not configured (set {setting})",
            context=ErrorContext(provider=provider, suggestion=f"Set {setting}"),
        )
        self.retryable = False


class AuthenticationError(ProviderUnavailableError):
    """Raised when a provider rejects the configured credential."""

    kind = "authentication"

    def __init__(self, provider: str, message: str = "credential rejected") -> None:
        super().__init__(provider, message)
        self.retryable = False


class RateLimitError(ProviderUnavailableError):
    """Raised when a provider rate limit is exceeded."""

    kind = "rate_limit"

    def __init__(self, provider: str, *, retry_after: float = 1.0) -> None:
        super().__init__(
            provider,
            "rate limit exceeded",
            context=ErrorContext(
                provider=provider,
                suggestion="Wait and retry the request",
                retry_after=retry_after,
            ),
        )
        self.severity = ErrorSeverity.TRANSIENT


# =============================================================================
# Storage / Configuration Errors
# =============================================================================

class ArtifactWriteFailureError(ResearchOrganizerError):
    """Raised when a deliverable artifact could not be written."""

    kind = "artifact_write_failure"

    def __init__(self, file_name: str, reason: str) -> None:
        super().__init__(
            f"Failed to write artifact {file_name!r}: {reason}",
            context=ErrorContext(input_value=file_name),
            severity=ErrorSeverity.CRITICAL,
            category=ErrorCategory.STORAGE,
        )
        self.file_name = file_name


class ConfigurationError(ResearchOrganizerError):
    """Raised for configuration-related errors."""

    kind = "configuration"

    def __init__(self, message: str, *, context: ErrorContext | None = None) -> None:
        super().__init__(
            message,
            context=context,
            severity=ErrorSeverity.CRITICAL,
            category=ErrorCategory.CONFIGURATION,
            retryable=False,
        )
