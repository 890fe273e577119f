"""Reliability module: error taxonomy for scrape requests."""

from .errors import (
    ScraperError, InputError, ReadinessTimeout, UnexpectedFailure,
    ErrorContext, ErrorCategory, ErrorSeverity, classify_error
)

__all__ = [
    'ScraperError', 'InputError', 'ReadinessTimeout', 'UnexpectedFailure',
    'ErrorContext', 'ErrorCategory', 'ErrorSeverity', 'classify_error'
]
