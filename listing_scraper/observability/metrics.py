"""Prometheus metrics for the listing scraper service.

- HTTP request counts and latency
- Scrape outcomes by terminal status
- Browser sessions and extracted records
"""

from __future__ import annotations

from typing import Optional

from prometheus_client import Counter, Histogram, Gauge
from prometheus_client import CollectorRegistry, generate_latest, CONTENT_TYPE_LATEST


class ScraperMetrics:
    """Metrics collector backed by its own Prometheus registry."""

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry or CollectorRegistry()
        self._initialize_metrics()

    def _initialize_metrics(self) -> None:
        # HTTP Request Metrics
        self.http_requests_total = Counter(
            'http_requests_total',
            'Total HTTP requests',
            ['method', 'endpoint', 'status_code'],
            registry=self.registry
        )

        self.http_request_duration = Histogram(
            'http_request_duration_seconds',
            'HTTP request duration in seconds',
            ['method', 'endpoint'],
            registry=self.registry
        )

        # Scrape Metrics
        self.scrapes_total = Counter(
            'scrapes_total',
            'Total page scrapes by terminal status',
            ['status'],
            registry=self.registry
        )

        self.scrape_duration = Histogram(
            'scrape_duration_seconds',
            'Page scrape duration in seconds',
            buckets=[1, 5, 10, 20, 30, 60, 90, 120],
            registry=self.registry
        )

        self.records_extracted = Counter(
            'records_extracted_total',
            'Total listing records extracted',
            registry=self.registry
        )

        # Browser Metrics
        self.browser_sessions_active = Gauge(
            'browser_sessions_active',
            'Currently open browser sessions',
            registry=self.registry
        )

    def record_http_request(self, method: str, endpoint: str, status_code: int, duration: float) -> None:
        self.http_requests_total.labels(method, endpoint, str(status_code)).inc()
        self.http_request_duration.labels(method, endpoint).observe(duration)

    def record_scrape(self, status: str, duration: float, record_count: int) -> None:
        self.scrapes_total.labels(status).inc()
        self.scrape_duration.observe(duration)
        if record_count:
            self.records_extracted.inc(record_count)

    def export(self) -> bytes:
        """Prometheus text exposition of this registry."""
        return generate_latest(self.registry)

    @property
    def content_type(self) -> str:
        return CONTENT_TYPE_LATEST
