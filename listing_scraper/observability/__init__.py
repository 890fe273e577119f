"""Observability: Prometheus metrics for scrapes and HTTP requests."""

from .metrics import ScraperMetrics

__all__ = ['ScraperMetrics']
