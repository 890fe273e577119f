import logging
import pathlib
from contextlib import asynccontextmanager

import pytest
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from listing_scraper.config import BrowserConfig, ScraperConfig

FIXTURES = pathlib.Path(__file__).parent / "fixtures"


class FakeElement:
    def __init__(self, text):
        self._text = text

    async def text_content(self):
        return self._text


class FakePage:
    """Stands in for a Playwright page in a known DOM state."""

    def __init__(self, html="", *, signal=True, no_results_text=None, header_text=None,
                 listings_ready=True, goto_error=None, content_error=None,
                 no_results_selector=ScraperConfig.no_results_selector):
        self.html = html
        self.signal = signal
        self.no_results_text = no_results_text
        self.header_text = header_text
        self.listings_ready = listings_ready
        self.goto_error = goto_error
        self.content_error = content_error
        self.no_results_selector = no_results_selector
        self.visited = []
        self.function_waits = []

    async def goto(self, url, wait_until=None, timeout=None):
        self.visited.append(url)
        if self.goto_error is not None:
            raise self.goto_error

    async def wait_for_function(self, expression, arg=None, timeout=None):
        self.function_waits.append((arg, timeout))
        if isinstance(arg[1], int):
            ready = self.listings_ready
        else:
            ready = self.signal
        if not ready:
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded.")

    async def query_selector(self, selector):
        if selector == self.no_results_selector and self.no_results_text is not None:
            return FakeElement(self.no_results_text)
        return None

    async def wait_for_selector(self, selector, state=None, timeout=None):
        if self.header_text is None:
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded.")
        return FakeElement(self.header_text)

    async def content(self):
        if self.content_error is not None:
            raise self.content_error
        return self.html


class FakeRuntime:
    def __init__(self, page=None, error=None):
        self.page = page
        self.error = error
        self.sessions = 0

    @asynccontextmanager
    async def session(self):
        if self.error is not None:
            raise self.error
        self.sessions += 1
        yield self.page


@pytest.fixture
def logger():
    return logging.getLogger("listing_scraper.tests")


@pytest.fixture
def scraper_config():
    return ScraperConfig()


@pytest.fixture
def browser_config():
    return BrowserConfig()


@pytest.fixture
def search_html():
    return (FIXTURES / "search_page.html").read_text(encoding="utf-8")
