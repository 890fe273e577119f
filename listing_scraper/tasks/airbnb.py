"""
Airbnb Search Page Scraper
==========================

Scrapes one page of Airbnb search results:
- builds the page URL (base URL plus pagination cursor)
- navigates and waits for the page to become ready
- extracts listing records and numbers them across pages

Never raises: unexpected failures come back as a ``failed`` PageResult.
"""

import logging
import time
from typing import Optional

from ..config import BrowserConfig, ScraperConfig
from ..models import ListingRecord, PageRequest, PageResult, ScrapeStatus
from ..observability import ScraperMetrics
from ..reliability import ErrorContext, classify_error
from .cursor import build_page_url
from .extraction import ListingExtractor
from .readiness import ReadinessOutcome, ReadinessState, ReadinessWaiter


_TERMINAL_STATUS = {
    ReadinessState.EMPTY: ScrapeStatus.EMPTY,
    ReadinessState.HEADER_MISSING: ScrapeStatus.HEADER_MISSING,
    ReadinessState.TIMED_OUT: ScrapeStatus.TIMED_OUT,
}


class AirbnbTask:
    """Page orchestrator: waiter, extractor and result shaping for one page."""

    def __init__(self, scraper_config: ScraperConfig, browser_config: BrowserConfig,
                 logger: logging.Logger, metrics: Optional[ScraperMetrics] = None):
        self.config = scraper_config
        self.browser_config = browser_config
        self.logger = logger
        self.metrics = metrics
        self.waiter = ReadinessWaiter(scraper_config, logger)
        self.extractor = ListingExtractor(scraper_config, logger)

    def page_url(self, request: PageRequest) -> str:
        return build_page_url(request.base_url, request.page_index, self.config.page_size)

    async def scrape_page(self, page, request: PageRequest) -> PageResult:
        started = time.monotonic()
        url = self.page_url(request)
        self.logger.info(f"🚀 Scraping page {request.page_index}: {url}")

        try:
            result = await self._scrape(page, request, url)
        except Exception as e:
            error = classify_error(e, ErrorContext(url=url, page_index=request.page_index))
            self.logger.error(f"❌ Unexpected error while scraping {url}: [{error.category.value}] {error.message}")
            result = PageResult(
                requested_url=url,
                status=ScrapeStatus.FAILED,
                available_count=0,
                element_text=f"General error: {error.message}",
                error=error.message,
            )

        if self.metrics is not None:
            self.metrics.record_scrape(result.status.value, time.monotonic() - started, len(result.records))
        self.logger.info(
            f"🏁 Page {request.page_index} finished: {result.status.value} | "
            f"{result.loaded_count} loaded | {len(result.records)} records"
        )
        return result

    async def _scrape(self, page, request: PageRequest, url: str) -> PageResult:
        await page.goto(
            url,
            wait_until="domcontentloaded",
            timeout=self.browser_config.navigation_timeout_seconds * 1000,
        )
        self.logger.info("📄 Page loaded (domcontentloaded)")

        outcome = await self.waiter.wait(page, url)
        if not outcome.can_extract:
            return self._terminal_result(url, outcome)

        html = await page.content()
        extraction = self.extractor.extract(html, outcome.available_count)

        offset = request.page_index * self.config.page_size
        records = [
            ListingRecord(position=offset + index + 1, **fields)
            for index, fields in enumerate(extraction.records)
        ]

        status = ScrapeStatus.EXTRACTED if outcome.listings_complete else ScrapeStatus.PARTIAL
        if status == ScrapeStatus.PARTIAL:
            expected = outcome.expected_count if outcome.expected_count is not None else "?"
            self.logger.warning(
                f"⚠️ Only {extraction.node_count}/{expected} listings confirmed; returning partial page"
            )

        return PageResult(
            requested_url=url,
            records=records,
            status=status,
            available_count=outcome.available_count,
            element_text=outcome.element_text,
            loaded_count=extraction.node_count,
            expected_count=outcome.expected_count,
            error=outcome.timeouts[-1].message if outcome.timeouts else outcome.note,
        )

    def _terminal_result(self, url: str, outcome: ReadinessOutcome) -> PageResult:
        return PageResult(
            requested_url=url,
            status=_TERMINAL_STATUS.get(outcome.state, ScrapeStatus.FAILED),
            available_count=outcome.available_count,
            element_text=outcome.element_text,
            loaded_count=0,
            error=outcome.timeouts[-1].message if outcome.timeouts else None,
        )
