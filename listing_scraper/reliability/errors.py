"""Error taxonomy for the listing scraper.

- Input errors reject a request before any browser work
- Readiness timeouts are downgraded to data inside the waiter
- Unexpected failures are caught at the orchestrator boundary
- Error context preserved for logs
"""

from __future__ import annotations

import traceback
from enum import Enum
from typing import Any, Dict, Optional
from datetime import datetime, timezone

from pydantic import BaseModel, Field


class ErrorSeverity(str, Enum):
    """Error severity levels for prioritized handling."""
    HIGH = "high"         # Scrape failed, caller gets an empty result
    MEDIUM = "medium"     # Partial data, scrape continued
    LOW = "low"           # Rejected input, nothing was attempted


class ErrorCategory(str, Enum):
    """Error categories matching where in a scrape the error arose."""
    VALIDATION = "validation"     # Missing/invalid URL or check-in date
    TIMEOUT = "timeout"           # A readiness phase ran out of time
    NAVIGATION = "navigation"     # page.goto failures
    BROWSER = "browser"           # Browser crashes, closed targets
    EVALUATION = "evaluation"     # DOM evaluation / parsing failures
    UNKNOWN = "unknown"


class ErrorContext(BaseModel):
    """Detailed error context for debugging."""
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    url: Optional[str] = None
    page_index: Optional[int] = None
    selector: Optional[str] = None
    phase: Optional[str] = None
    traceback: Optional[str] = None


class ScraperError(Exception):
    """Base scraper error with category, severity and context."""

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory = ErrorCategory.UNKNOWN,
        severity: ErrorSeverity = ErrorSeverity.HIGH,
        context: Optional[ErrorContext] = None,
        cause: Optional[BaseException] = None
    ):
        super().__init__(message)
        self.message = message
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.cause = cause

        if not self.context.traceback and cause:
            self.context.traceback = ''.join(
                traceback.format_exception(type(cause), cause, cause.__traceback__)
            )

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for structured log lines."""
        return {
            "message": self.message,
            "category": self.category.value,
            "severity": self.severity.value,
            "context": self.context.dict(exclude={"traceback"}),
            "cause": str(self.cause) if self.cause else None
        }


class InputError(ScraperError):
    """Missing or invalid request input."""
    def __init__(self, message: str, **kwargs):
        super().__init__(
            message,
            category=ErrorCategory.VALIDATION,
            severity=ErrorSeverity.LOW,
            **kwargs
        )


class ReadinessTimeout(ScraperError):
    """A readiness phase did not reach its signal in time."""
    def __init__(self, message: str, phase: str, timeout_seconds: float, **kwargs):
        super().__init__(
            message,
            category=ErrorCategory.TIMEOUT,
            severity=ErrorSeverity.MEDIUM,
            **kwargs
        )
        self.phase = phase
        self.timeout_seconds = timeout_seconds
        self.context.phase = phase


class UnexpectedFailure(ScraperError):
    """Navigation crash or evaluation exception during a scrape."""
    def __init__(self, message: str, category: ErrorCategory = ErrorCategory.UNKNOWN, **kwargs):
        super().__init__(
            message,
            category=category,
            severity=ErrorSeverity.HIGH,
            **kwargs
        )


def classify_error(error: BaseException, context: Optional[ErrorContext] = None) -> ScraperError:
    """Wrap a raw exception into the scraper taxonomy."""
    if isinstance(error, ScraperError):
        return error

    error_str = str(error).lower()

    if any(term in error_str for term in ['net::', 'navigation', 'page.goto', 'dns']):
        category = ErrorCategory.NAVIGATION
    elif any(term in error_str for term in ['browser', 'crashed', 'closed', 'disconnected']):
        category = ErrorCategory.BROWSER
    elif any(term in error_str for term in ['evaluat', 'selector', 'parse']):
        category = ErrorCategory.EVALUATION
    else:
        category = ErrorCategory.UNKNOWN

    return UnexpectedFailure(str(error) or type(error).__name__, category=category, context=context, cause=error)
