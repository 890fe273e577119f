import asyncio
import logging

import pytest

from conftest import FakePage
from listing_scraper.config import ScraperConfig
from listing_scraper.tasks.readiness import (
    ReadinessState,
    ReadinessWaiter,
    TERMINAL_STATES,
    parse_available_count,
)

PHRASES = ScraperConfig.over_limit_phrases


@pytest.mark.parametrize("text", [
    "Over 1,000 homes",
    "Mais de 1.000 acomodações",
    "Mais de mil acomodações",
    "OVER 1,000 PLACES IN RIO",
])
def test_over_limit_phrasings_coerce_to_thousand(text):
    assert parse_available_count(text, PHRASES) == 1000


@pytest.mark.parametrize("text, expected", [
    ("312 acomodações", 312),
    ("1.234 places", 1234),
    ("9,876 stays", 9876),
    ("Acomodações em Rio", None),
    ("", None),
    (None, None),
])
def test_parse_available_count_numeric_run(text, expected):
    assert parse_available_count(text, PHRASES) == expected


def test_over_limit_phrases_are_configurable():
    assert parse_available_count("Plus de 1 000 logements", ("plus de 1 000",), 1000) == 1000
    assert parse_available_count("Plus de 1 000 logements", (), 1000) == 1


def _wait(page, config=None, logger=None):
    waiter = ReadinessWaiter(config or ScraperConfig(), logger or logging.getLogger("test"))
    return asyncio.run(waiter.wait(page, "https://www.airbnb.com.br/s/Rio/homes"))


def test_no_results_page_is_empty_with_verbatim_text():
    outcome = _wait(FakePage(no_results_text="Nenhum resultado encontrado"))

    assert outcome.state == ReadinessState.EMPTY
    assert outcome.available_count == 0
    assert outcome.element_text == "Nenhum resultado encontrado"
    assert not outcome.can_extract
    assert outcome.timeouts == []


def test_signal_timeout_is_reported_not_raised():
    outcome = _wait(FakePage(signal=False))

    assert outcome.state == ReadinessState.TIMED_OUT
    assert [t.phase for t in outcome.timeouts] == ["signal"]
    assert "30s" in outcome.element_text


def test_missing_header():
    outcome = _wait(FakePage(header_text=None))

    assert outcome.state == ReadinessState.HEADER_MISSING
    assert outcome.available_count is None
    assert [t.phase for t in outcome.timeouts] == ["header"]
    assert "h1 span:nth-child(2)" in outcome.element_text


def test_full_page_wait_for_over_limit_header():
    page = FakePage(header_text="Over 1,000 homes")
    outcome = _wait(page)

    assert outcome.state == ReadinessState.EXTRACTED
    assert outcome.available_count == 1000
    assert outcome.expected_count == 18
    assert outcome.listings_complete
    assert page.function_waits[-1] == (['div[itemprop="itemListElement"]', 18], 20000)


def test_expected_count_capped_by_available_count():
    page = FakePage(header_text="3 acomodações")
    outcome = _wait(page)

    assert outcome.available_count == 3
    assert outcome.expected_count == 3
    assert page.function_waits[-1][0][1] == 3


def test_listing_count_timeout_yields_partial_outcome():
    outcome = _wait(FakePage(header_text="312 acomodações", listings_ready=False))

    assert outcome.state == ReadinessState.EXTRACTED
    assert outcome.can_extract
    assert not outcome.listings_complete
    assert [t.phase for t in outcome.timeouts] == ["listings"]


def test_unparsable_header_skips_listing_wait():
    page = FakePage(header_text="Acomodações em Rio")
    outcome = _wait(page)

    assert outcome.state == ReadinessState.EXTRACTED
    assert outcome.available_count is None
    assert outcome.expected_count is None
    assert not outcome.listings_complete
    assert outcome.note == "Available count unknown; listing count not verified"
    assert len(page.function_waits) == 1


def test_zero_count_header_needs_no_listing_wait():
    outcome = _wait(FakePage(header_text="0 acomodações"))

    assert outcome.listings_complete
    assert outcome.note is None


def test_phase_timeouts_come_from_config():
    config = ScraperConfig(signal_timeout_seconds=1.5, listings_timeout_seconds=2)
    page = FakePage(header_text="40 acomodações")
    _wait(page, config)

    assert [timeout for _, timeout in page.function_waits] == [1500, 2000]


def test_every_outcome_is_terminal():
    pages = [
        FakePage(no_results_text="Nada"),
        FakePage(signal=False),
        FakePage(header_text=None),
        FakePage(header_text="10 acomodações", listings_ready=False),
    ]
    for page in pages:
        assert _wait(page).state in TERMINAL_STATES
