from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from playwright.async_api import async_playwright, Page

from .config import BrowserConfig
from .observability import ScraperMetrics


class BrowserRuntime:
    """Hands out one freshly launched Chromium per scrape.

    Sessions are never reused; a semaphore bounds how many browsers may be
    open at the same time.
    """

    def __init__(self, config: BrowserConfig, *, max_sessions: int = 2,
                 logger: Optional[logging.Logger] = None,
                 metrics: Optional[ScraperMetrics] = None) -> None:
        self._config = config
        self._logger = logger or logging.getLogger("listing_scraper.browser")
        self._metrics = metrics
        self._semaphore = asyncio.Semaphore(max_sessions)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[Page]:
        async with self._semaphore:
            playwright = await async_playwright().start()
            browser = None
            try:
                browser = await playwright.chromium.launch(
                    headless=self._config.headless,
                    args=self._config.launch_args,
                )
                context = await browser.new_context(
                    user_agent=self._config.user_agent,
                    viewport={"width": self._config.viewport_width, "height": self._config.viewport_height},
                )
                page = await context.new_page()
                if self._metrics is not None:
                    self._metrics.browser_sessions_active.inc()
                self._logger.info("🌐 Browser session opened")
                try:
                    yield page
                finally:
                    if self._metrics is not None:
                        self._metrics.browser_sessions_active.dec()
            finally:
                if browser is not None:
                    try:
                        await browser.close()
                    except Exception as e:
                        self._logger.warning(f"⚠️ Error closing browser: {e}")
                await playwright.stop()
                self._logger.info("🌐 Browser session closed")
