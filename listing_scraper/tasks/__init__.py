# Scraping task modules
from .airbnb import AirbnbTask
from .cursor import build_page_url, decode_cursor, encode_cursor
from .extraction import ListingExtractor, parse_price, parse_rating_text
from .readiness import ReadinessOutcome, ReadinessState, ReadinessWaiter, parse_available_count
from .validation import validate_checkin_date

__all__ = [
    "AirbnbTask",
    "ListingExtractor",
    "ReadinessWaiter",
    "ReadinessOutcome",
    "ReadinessState",
    "build_page_url",
    "decode_cursor",
    "encode_cursor",
    "parse_available_count",
    "parse_price",
    "parse_rating_text",
    "validate_checkin_date",
]
