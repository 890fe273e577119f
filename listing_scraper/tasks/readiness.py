"""
Readiness waiting for search result pages.

A freshly navigated page is polled until it shows either listing nodes or the
site's "no results" heading, then the header with the available count is read
and, when results exist, the waiter holds until a full page of listings has
rendered. Every phase has its own timeout; a timeout ends that phase only and
is reported on the outcome instead of being raised.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional

from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from ..config import ScraperConfig
from ..reliability import ReadinessTimeout, ErrorContext
from .base import _log, clean_text

_SIGNAL_JS = """
([listSelector, noResultsSelector]) =>
    !!(document.querySelector(listSelector) || document.querySelector(noResultsSelector))
"""

_COUNT_JS = """
([listSelector, expected]) => document.querySelectorAll(listSelector).length >= expected
"""

_NUMERIC_RUN = re.compile(r"\d[\d,.]*")


class ReadinessState(str, Enum):
    INITIAL = "initial"
    AWAITING_SIGNAL = "awaiting_signal"
    HAS_LISTINGS = "has_listings"
    EMPTY = "empty"
    TIMED_OUT = "timed_out"
    HEADER_MISSING = "header_missing"
    EXTRACTED = "extracted"


TERMINAL_STATES = frozenset({
    ReadinessState.EMPTY,
    ReadinessState.TIMED_OUT,
    ReadinessState.HEADER_MISSING,
    ReadinessState.EXTRACTED,
})


@dataclass
class ReadinessOutcome:
    state: ReadinessState = ReadinessState.INITIAL
    available_count: Optional[int] = None
    element_text: Optional[str] = None
    expected_count: Optional[int] = None
    listings_complete: bool = False
    note: Optional[str] = None
    timeouts: List[ReadinessTimeout] = field(default_factory=list)

    @property
    def can_extract(self) -> bool:
        return self.state == ReadinessState.EXTRACTED


def parse_available_count(text: Optional[str], over_limit_phrases: Iterable[str] = (),
                          over_limit_count: int = 1000,
                          logger: Optional[logging.Logger] = None) -> Optional[int]:
    """Turn the results header ("Over 1,000 homes", "312 places") into a count.

    Any configured over-limit phrase wins and yields ``over_limit_count``;
    otherwise the first numeric run with its separators stripped. Returns None
    when the text carries no number.
    """
    if not text:
        return None

    lowered = text.lower()
    if any(phrase.lower() in lowered for phrase in over_limit_phrases):
        return over_limit_count

    match = _NUMERIC_RUN.search(text)
    if not match:
        _log(logger, "warning", f"⚠️ Unrecognised available-count header: {text!r}")
        return None

    digits = re.sub(r"[^0-9]", "", match.group(0))
    count = int(digits)
    if "+" in text[match.end():match.end() + 2]:
        # "1,000+ homes" style headers are capped counts the phrase list missed
        _log(logger, "warning", f"⚠️ Header {text!r} looks capped but matched no over-limit phrase")
    return count


class ReadinessWaiter:
    """Decides when a search page is ready for extraction."""

    def __init__(self, config: ScraperConfig, logger: logging.Logger):
        self.config = config
        self.logger = logger

    async def wait(self, page, url: Optional[str] = None) -> ReadinessOutcome:
        cfg = self.config
        outcome = ReadinessOutcome(state=ReadinessState.AWAITING_SIGNAL)

        # Phase 1: listings or the no-results heading
        self.logger.info("⏳ Waiting for listings or a no-results message...")
        try:
            await page.wait_for_function(
                _SIGNAL_JS,
                arg=[cfg.listing_selector, cfg.no_results_selector],
                timeout=cfg.signal_timeout_seconds * 1000,
            )
        except PlaywrightTimeoutError as e:
            self._record_timeout(outcome, "signal", cfg.signal_timeout_seconds, e, url, cfg.listing_selector)
            outcome.state = ReadinessState.TIMED_OUT
            outcome.element_text = (
                f"Timed out after {cfg.signal_timeout_seconds:g}s waiting for listings or a no-results message"
            )
            return outcome

        no_results = await page.query_selector(cfg.no_results_selector)
        if no_results is not None:
            text = (await no_results.text_content() or "").strip()
            self.logger.info(f"📭 No accommodations found. Message: {text!r}")
            outcome.state = ReadinessState.EMPTY
            outcome.available_count = 0
            outcome.element_text = text
            return outcome

        # Phase 2: the header reporting how many results exist
        outcome.state = ReadinessState.HAS_LISTINGS
        self.logger.info("🔎 Listings present, reading the available-count header...")
        try:
            header = await page.wait_for_selector(
                cfg.available_count_selector,
                state="attached",
                timeout=cfg.header_timeout_seconds * 1000,
            )
        except PlaywrightTimeoutError as e:
            self._record_timeout(outcome, "header", cfg.header_timeout_seconds, e, url, cfg.available_count_selector)
            outcome.state = ReadinessState.HEADER_MISSING
            outcome.element_text = f"Error: available-count selector {cfg.available_count_selector!r} not found"
            return outcome

        header_text = clean_text(await header.text_content()) if header is not None else ""
        outcome.element_text = header_text
        outcome.available_count = parse_available_count(
            header_text, cfg.over_limit_phrases, cfg.over_limit_count, self.logger
        )
        self.logger.info(f"📊 Available-count header: {header_text!r} -> {outcome.available_count}")

        # Phase 3: a full page worth of listing nodes
        if outcome.available_count and outcome.available_count > 0:
            expected = min(outcome.available_count, cfg.page_size)
            outcome.expected_count = expected
            self.logger.info(f"⏳ Waiting for {expected} listings to render...")
            try:
                await page.wait_for_function(
                    _COUNT_JS,
                    arg=[cfg.listing_selector, expected],
                    timeout=cfg.listings_timeout_seconds * 1000,
                )
                outcome.listings_complete = True
                self.logger.info(f"✅ {expected} listings rendered")
            except PlaywrightTimeoutError as e:
                self._record_timeout(outcome, "listings", cfg.listings_timeout_seconds, e, url, cfg.listing_selector)
        elif outcome.available_count is None:
            # Nothing to compare the rendered nodes against
            outcome.note = "Available count unknown; listing count not verified"
            self.logger.warning(f"⚠️ {outcome.note}")
        else:
            outcome.listings_complete = True

        outcome.state = ReadinessState.EXTRACTED
        return outcome

    def _record_timeout(self, outcome: ReadinessOutcome, phase: str, timeout_seconds: float,
                        cause: Exception, url: Optional[str], selector: str) -> None:
        error = ReadinessTimeout(
            f"Readiness phase '{phase}' timed out after {timeout_seconds:g}s",
            phase=phase,
            timeout_seconds=timeout_seconds,
            context=ErrorContext(url=url, selector=selector),
            cause=cause,
        )
        outcome.timeouts.append(error)
        self.logger.warning(f"⚠️ {error.message} (selector: {selector})")
